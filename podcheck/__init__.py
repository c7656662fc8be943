"""
PodCheck - Podcast Feed Health Checker
======================================

Validates podcast RSS/Atom feeds against directory requirements and scores
their health and search discoverability.

Main Components:
- Feed: read-only document model over the parsed XML
- Checks: 8 channel checks and 6 episode checks
- Validation: engine running the checks over sampled episodes
- Scoring: category health score and SEO heuristics
- Services: report composition shared by the CLI
"""

__version__ = "1.0.0"
__author__ = "PodCheck Development Team"
__description__ = "Podcast feed health checker"

# Core imports for easy access
from .config.settings import get_settings
from .feed.document import FeedDocument
from .validation.feed_validator import FeedValidator, summarize
from .scoring.health_scorer import HealthScorer
from .scoring.seo_scorer import SeoScorer
from .utils.logging import configure_application_logging, get_logger_for_component
from .utils.exceptions import PodCheckError, FeedFetchError

__all__ = [
    "get_settings",
    "FeedDocument",
    "FeedValidator",
    "summarize",
    "HealthScorer",
    "SeoScorer",
    "configure_application_logging",
    "get_logger_for_component",
    "PodCheckError",
    "FeedFetchError",
]
