"""
PodCheck Checks Module
=====================

Channel and episode checks plus the builders that wire the fixed check list.

The builders return new instances on every call. ``GuidCheck`` holds state
for one validation run, so each run gets its own list.
"""

from typing import List, Optional

from .base import Check, ChannelCheck, CheckResult, CheckStatus, Severity
from .probe import HttpProbe, ProbeResponse
from .channel_checks import (
    ArtworkCheck,
    AuthorCheck,
    CategoryCheck,
    ChannelDescriptionCheck,
    ExplicitTagCheck,
    LanguageCheck,
    OwnerEmailCheck,
    WebsiteLinkCheck,
)
from .episode_checks import (
    DurationCheck,
    EnclosureCheck,
    EpisodeDescriptionCheck,
    GuidCheck,
    PubDateCheck,
    TitleCheck,
)


def build_channel_checks(
    probe: Optional[HttpProbe] = None, probe_artwork: bool = True
) -> List[Check]:
    """Channel checks in report order.

    Args:
        probe: Network probe shared by the checks that make HEAD requests
        probe_artwork: Whether the artwork check may use the probe
    """
    return [
        ArtworkCheck(probe if probe_artwork else None),
        CategoryCheck(),
        ExplicitTagCheck(),
        AuthorCheck(),
        OwnerEmailCheck(),
        LanguageCheck(),
        WebsiteLinkCheck(),
        ChannelDescriptionCheck(),
    ]


def build_episode_checks(
    probe: Optional[HttpProbe] = None, probe_enclosures: bool = True
) -> List[Check]:
    """Episode checks in report order."""
    return [
        EnclosureCheck(probe if probe_enclosures else None),
        GuidCheck(),
        PubDateCheck(),
        DurationCheck(),
        TitleCheck(),
        EpisodeDescriptionCheck(),
    ]


__all__ = [
    "Check",
    "ChannelCheck",
    "CheckResult",
    "CheckStatus",
    "Severity",
    "HttpProbe",
    "ProbeResponse",
    "ArtworkCheck",
    "AuthorCheck",
    "CategoryCheck",
    "ChannelDescriptionCheck",
    "ExplicitTagCheck",
    "LanguageCheck",
    "OwnerEmailCheck",
    "WebsiteLinkCheck",
    "DurationCheck",
    "EnclosureCheck",
    "EpisodeDescriptionCheck",
    "GuidCheck",
    "PubDateCheck",
    "TitleCheck",
    "build_channel_checks",
    "build_episode_checks",
]
