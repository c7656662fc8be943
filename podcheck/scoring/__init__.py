"""
PodCheck Scoring Module
======================

Health score over check results and SEO score over the feed document.
"""

from .health_scorer import HealthScorer, HealthScore, CategoryScore, CATEGORY_MAP
from .seo_scorer import SeoScorer, SeoScore, SeoDetail

__all__ = [
    'HealthScorer',
    'HealthScore',
    'CategoryScore',
    'CATEGORY_MAP',
    'SeoScorer',
    'SeoScore',
    'SeoDetail',
]
