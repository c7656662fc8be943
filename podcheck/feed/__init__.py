"""
PodCheck Feed Module
===================

Read-only document model over parsed RSS and Atom feeds.
"""

from .document import FeedDocument, FeedNode, ITUNES_NS, ATOM_NS

__all__ = [
    'FeedDocument',
    'FeedNode',
    'ITUNES_NS',
    'ATOM_NS',
]
