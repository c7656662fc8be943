"""
PodCheck Validation Module
=========================

Validation engine running the feed checks and its result models.
"""

from .feed_validator import (
    FeedValidator,
    FormattedResult,
    EpisodeResult,
    ValidationResult,
    ValidationSummary,
    summarize,
)

__all__ = [
    'FeedValidator',
    'FormattedResult',
    'EpisodeResult',
    'ValidationResult',
    'ValidationSummary',
    'summarize',
]
