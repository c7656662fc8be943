"""
PodCheck Processing Module
=========================

Feed retrieval feeding the validation engine.
"""

from .feed_fetcher import FeedFetcher

__all__ = [
    'FeedFetcher',
]
