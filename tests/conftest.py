"""
PyTest Configuration and Fixtures
=================================

Shared fixtures and configuration for PodCheck tests.

Feeds are built from small XML fragments so each test states exactly the
tags it cares about. Network probes are replaced by ``FakeProbe``.
"""

import os
import sys
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Tuple

import pytest

# Add project root to Python path
sys.path.insert(0, str(Path(__file__).parent.parent))

# Set test environment variables before any imports
os.environ["PODCHECK_LOGGING__CONSOLE_LOGGING"] = "false"
os.environ.pop("PODCHECK_VALIDATION__MAX_EPISODES", None)

from podcheck.checks.probe import ProbeResponse
from podcheck.config.settings import PodCheckSettings
from podcheck.feed.document import FeedDocument


ITUNES_DECL = 'xmlns:itunes="http://www.itunes.com/dtds/podcast-1.0.dtd"'

ARTWORK_URL = "https://cdn.example.com/artwork.jpg"

COMPLETE_CHANNEL = f"""
    <title>The Weekly Garden: Growing Food in Small Spaces</title>
    <link>https://weeklygarden.example.com</link>
    <language>en-us</language>
    <description>A weekly show about growing vegetables, herbs and fruit on balconies,
    rooftops and tiny backyards. Each episode features practical advice from urban
    growers, seasonal planting calendars and answers to listener questions so you can
    harvest more from less space.</description>
    <itunes:author>Jamie Rivera</itunes:author>
    <itunes:explicit>false</itunes:explicit>
    <itunes:image href="{ARTWORK_URL}"/>
    <itunes:category text="Leisure">
        <itunes:category text="Home &amp; Garden"/>
    </itunes:category>
    <itunes:owner>
        <itunes:name>Jamie Rivera</itunes:name>
        <itunes:email>jamie@weeklygarden.example.com</itunes:email>
    </itunes:owner>
"""

_ITEM_DEFAULTS = {
    "title": "Tomatoes on a Balcony",
    "guid": "https://weeklygarden.example.com/episodes/1",
    "pub_date": "Mon, 10 Feb 2025 08:00:00 +0000",
    "duration": "00:32:15",
    "description": "How to grow cherry tomatoes in containers with limited sun.",
    "enclosure_url": "https://cdn.example.com/episodes/1.mp3",
    "enclosure_type": "audio/mpeg",
    "itunes_title": None,
}


def item_xml(**overrides) -> str:
    """One complete ``<item>``; pass ``field=None`` to omit a tag."""
    values = {**_ITEM_DEFAULTS, **overrides}
    parts = []
    if values["title"] is not None:
        parts.append(f"<title>{values['title']}</title>")
    if values["itunes_title"] is not None:
        parts.append(f"<itunes:title>{values['itunes_title']}</itunes:title>")
    if values["guid"] is not None:
        parts.append(f"<guid>{values['guid']}</guid>")
    if values["pub_date"] is not None:
        parts.append(f"<pubDate>{values['pub_date']}</pubDate>")
    if values["duration"] is not None:
        parts.append(f"<itunes:duration>{values['duration']}</itunes:duration>")
    if values["description"] is not None:
        parts.append(f"<description>{values['description']}</description>")
    if values["enclosure_url"] is not None:
        type_attr = (
            f' type="{values["enclosure_type"]}"' if values["enclosure_type"] is not None else ""
        )
        parts.append(f'<enclosure url="{values["enclosure_url"]}" length="1234"{type_attr}/>')
    return "<item>" + "".join(parts) + "</item>"


def rss_xml(channel: str = "", items: Iterable[str] = (), namespaces: str = ITUNES_DECL) -> str:
    return (
        '<?xml version="1.0" encoding="UTF-8"?>'
        f'<rss version="2.0" {namespaces}><channel>{channel}{"".join(items)}</channel></rss>'
    )


class FakeProbe:
    """Stand-in for HttpProbe with canned responses and a call log."""

    def __init__(
        self,
        head_responses: Optional[Dict[str, ProbeResponse]] = None,
        image_sizes: Optional[Dict[str, Tuple[int, int]]] = None,
        default_head: Optional[ProbeResponse] = None,
    ):
        self.head_responses = head_responses or {}
        self.image_sizes = image_sizes or {}
        self.default_head = default_head or ProbeResponse(ok=True, status_code=200, content_type="audio/mpeg")
        self.head_calls: List[str] = []
        self.image_calls: List[str] = []
        self.closed = False

    def head(self, url: str) -> ProbeResponse:
        self.head_calls.append(url)
        return self.head_responses.get(url, self.default_head)

    def image_size(self, url: str) -> Optional[Tuple[int, int]]:
        self.image_calls.append(url)
        return self.image_sizes.get(url)

    def close(self) -> None:
        self.closed = True


# ============================================================================
# Feed Fixtures
# ============================================================================


@pytest.fixture
def make_feed():
    """Build a FeedDocument from a channel fragment and item fragments."""

    def _make(channel: str = "", items: Iterable[str] = (), namespaces: str = ITUNES_DECL) -> FeedDocument:
        return FeedDocument.from_string(rss_xml(channel, items, namespaces))

    return _make


@pytest.fixture
def make_item():
    return item_xml


@pytest.fixture
def make_episode(make_feed):
    """Single episode node built from ``item_xml`` overrides."""

    def _make(**overrides):
        document = make_feed(items=[item_xml(**overrides)])
        return next(document.episodes())

    return _make


@pytest.fixture
def complete_channel() -> str:
    return COMPLETE_CHANNEL


@pytest.fixture
def complete_feed_xml() -> str:
    """A well-formed feed that passes every check with a cooperative probe."""
    items = [
        item_xml(),
        item_xml(
            title="Herbs That Survive Winter Indoors",
            guid="https://weeklygarden.example.com/episodes/2",
            enclosure_url="https://cdn.example.com/episodes/2.mp3",
        ),
        item_xml(
            title="Composting Without a Yard",
            guid="https://weeklygarden.example.com/episodes/3",
            enclosure_url="https://cdn.example.com/episodes/3.mp3",
        ),
    ]
    return rss_xml(COMPLETE_CHANNEL, items)


@pytest.fixture
def complete_feed(complete_feed_xml) -> FeedDocument:
    return FeedDocument.from_string(complete_feed_xml, url="https://weeklygarden.example.com/feed.xml")


# ============================================================================
# Probe and Settings Fixtures
# ============================================================================


@pytest.fixture
def fake_probe() -> FakeProbe:
    """Probe reporting a valid 3000x3000 JPEG artwork and reachable enclosures."""
    return FakeProbe(
        head_responses={
            ARTWORK_URL: ProbeResponse(ok=True, status_code=200, content_type="image/jpeg"),
        },
        image_sizes={ARTWORK_URL: (3000, 3000)},
    )


@pytest.fixture
def test_settings() -> PodCheckSettings:
    return PodCheckSettings()
