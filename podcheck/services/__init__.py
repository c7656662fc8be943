"""
PodCheck Services
================

Service layer shared by the interfaces that produce feed reports.
"""

from .report_service import FeedReport, FeedReportService

__all__ = [
    'FeedReport',
    'FeedReportService',
]
