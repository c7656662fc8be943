"""
Episode Checks
==============

Rules evaluated against every sampled ``<item>`` (RSS) or ``<entry>`` (Atom).
"""

import re
from datetime import datetime, timezone
from email.utils import parsedate_to_datetime
from typing import Dict, Optional, Tuple

from dateutil import parser as date_parser

from .base import Check, CheckResult, Severity
from .probe import HttpProbe
from ..feed.document import FeedNode
from ..utils.logging import get_check_logger


GENERIC_TITLE_PATTERN = re.compile(r"^(ep\.?|episode|#)\s*\d+$", re.IGNORECASE | re.ASCII)

VALID_MEDIA_TYPES = frozenset(
    {
        "audio/mpeg",
        "audio/x-m4a",
        "audio/mp4",
        "audio/ogg",
        "audio/wav",
        "audio/aac",
        "audio/x-wav",
        "video/mp4",
        "video/x-m4v",
    }
)


def is_generic_title(title: str) -> bool:
    """True for titles that are only a number, like "Episode 5" or "#12"."""
    return GENERIC_TITLE_PATTERN.match(title) is not None


def episode_title(item: FeedNode) -> Optional[str]:
    """``<itunes:title>`` if non-empty, else ``<title>``."""
    return item.itunes_text("title") or item.text("title")


class EnclosureCheck(Check):
    """Media file reference: URL, MIME type and reachability."""

    def __init__(self, probe: Optional[HttpProbe] = None):
        """Initialize enclosure check.

        Args:
            probe: Network probe; None skips the reachability request
        """
        self.probe = probe
        self.logger = get_check_logger(self.name())

    def name(self) -> str:
        return "Episode Enclosure"

    def severity(self) -> Severity:
        return Severity.ERROR

    def run(self, node: FeedNode) -> CheckResult:
        enclosure = self._find_enclosure(node)
        if enclosure is None:
            return CheckResult.fail(
                "Episode is missing an <enclosure> tag.",
                'Add an <enclosure url="https://example.com/episode.mp3" length="12345678" '
                'type="audio/mpeg"/> tag to each episode item. This is required for podcast '
                "players to find and play your audio file.",
            )

        url, media_type = enclosure
        if url is None:
            return CheckResult.fail(
                "Enclosure tag is missing a URL.",
                "Add a url attribute to your <enclosure> tag pointing to the audio file "
                '(e.g., url="https://example.com/episode.mp3").',
            )

        if media_type is None:
            return CheckResult.warn(
                "Enclosure is missing a type attribute.",
                'Add a type attribute to your <enclosure> tag (e.g., type="audio/mpeg" for '
                "MP3 files). This helps podcast players identify the media format.",
            )

        if media_type.lower() not in VALID_MEDIA_TYPES:
            return CheckResult.warn(
                f'Enclosure has an unrecognized media type: "{media_type}".',
                'Use a standard podcast media type such as "audio/mpeg" (MP3), "audio/x-m4a" '
                '(M4A), or "audio/mp4". Non-standard types may cause playback issues in some '
                "podcast apps.",
            )

        if self.probe is not None and not self.probe.head(url).ok:
            self.logger.debug(f"Enclosure unreachable: {url}")
            return CheckResult.warn(
                "Enclosure URL could not be reached.",
                "Make sure the audio file URL is publicly accessible. A HEAD request to the "
                "URL failed, which may indicate the file is missing or the server is "
                "blocking requests.",
            )

        return CheckResult.pass_(f"Enclosure is valid (type: {media_type}).")

    @staticmethod
    def _find_enclosure(node: FeedNode) -> Optional[Tuple[Optional[str], Optional[str]]]:
        """(url, type) of the episode's media reference, None when there is none."""
        enclosure = node.child("enclosure")
        if enclosure is not None:
            return enclosure.attr("url"), enclosure.attr("type")

        if node.document.is_atom:
            link = node.link("enclosure")
            if link is not None:
                return link.attr("href"), link.attr("type")

        return None


class GuidCheck(Check):
    """Episode identifier presence and uniqueness.

    Remembers every GUID seen since the last ``reset()``, so one instance must
    only ever serve a single validation run.
    """

    def __init__(self):
        # dict keeps first-seen order
        self._seen: Dict[str, None] = {}

    def name(self) -> str:
        return "Episode GUID"

    def severity(self) -> Severity:
        return Severity.ERROR

    @property
    def seen_guids(self):
        return list(self._seen)

    def reset(self) -> None:
        self._seen.clear()

    def run(self, node: FeedNode) -> CheckResult:
        tag = "id" if node.document.is_atom and not node.has("guid") else "guid"

        if not node.has(tag):
            return CheckResult.fail(
                "Episode is missing a <guid> tag.",
                "Add a <guid> tag to each episode item. The GUID should be a unique, "
                "permanent identifier (e.g., a URL or UUID). It's how podcast apps track "
                "which episodes have been downloaded or played.",
            )

        guid = node.text(tag)
        if guid is None:
            return CheckResult.fail(
                "Episode <guid> tag is empty.",
                "Provide a non-empty value for the <guid> tag. Use the episode's permanent "
                "URL or a UUID. An empty GUID can cause podcast apps to misbehave.",
            )

        if guid in self._seen:
            return CheckResult.fail(
                f'Duplicate GUID found: "{guid}".',
                "Each episode must have a unique <guid>. Duplicate GUIDs cause podcast apps "
                "to treat different episodes as the same one, leading to missing episodes "
                "for listeners.",
            )

        self._seen[guid] = None
        return CheckResult.pass_(f'Episode GUID is present and unique: "{guid}".')


class PubDateCheck(Check):
    """Publication date presence, format and plausibility."""

    # Atom has no pubDate; published/updated carry the same information
    ATOM_DATE_TAGS = ("published", "updated")

    def name(self) -> str:
        return "Episode Publication Date"

    def severity(self) -> Severity:
        return Severity.ERROR

    def run(self, node: FeedNode) -> CheckResult:
        tag = self._date_tag(node)
        if tag is None:
            return CheckResult.fail(
                "Episode is missing a <pubDate> tag.",
                "Add a <pubDate> tag with an RFC 2822 formatted date (e.g., <pubDate>Mon, "
                "10 Feb 2025 08:00:00 +0000</pubDate>). This determines episode ordering and "
                "tells podcast apps when the episode was published.",
            )

        pub_date = node.text(tag)
        if pub_date is None:
            return CheckResult.fail(
                "Episode <pubDate> tag is empty.",
                'Provide a valid RFC 2822 date in your <pubDate> tag (e.g., "Mon, 10 Feb '
                '2025 08:00:00 +0000").',
            )

        parsed = self.parse_date(pub_date)
        if parsed is None:
            return CheckResult.warn(
                f'Episode publication date is not valid RFC 2822 format: "{pub_date}".',
                'Use a properly formatted RFC 2822 date (e.g., "Mon, 10 Feb 2025 08:00:00 '
                '+0000"). Invalid dates may cause episodes to appear out of order or be '
                "skipped by podcast directories.",
            )

        if parsed > datetime.now(timezone.utc):
            return CheckResult.warn(
                "Episode publication date is in the future.",
                "Some podcast apps may not display episodes with future publication dates. "
                "If you're scheduling a release, make sure your hosting platform handles "
                "scheduled publishing correctly.",
            )

        return CheckResult.pass_(f'Episode publication date is valid: "{pub_date}".')

    def _date_tag(self, node: FeedNode) -> Optional[str]:
        if node.has("pubDate"):
            return "pubDate"
        if node.document.is_atom:
            for tag in self.ATOM_DATE_TAGS:
                if node.has(tag):
                    return tag
        return None

    @staticmethod
    def parse_date(value: str) -> Optional[datetime]:
        """Parse an RFC 2822 date, falling back to a lenient parse.

        Returns:
            Timezone-aware UTC datetime (naive values are taken as UTC), or None
        """
        try:
            parsed = parsedate_to_datetime(value)
        except (TypeError, ValueError, IndexError):
            parsed = None

        if parsed is None:
            try:
                parsed = date_parser.parse(value)
            except (ValueError, OverflowError):
                return None

        if parsed.tzinfo is None:
            return parsed.replace(tzinfo=timezone.utc)

        # Offsets of 24 hours or more parse but cannot be compared
        try:
            return parsed.astimezone(timezone.utc)
        except (ValueError, OverflowError):
            return None


class DurationCheck(Check):
    """``itunes:duration`` presence and format. Never fails."""

    SECONDS_PATTERN = re.compile(r"\d+", re.ASCII)
    CLOCK_PATTERN = re.compile(r"\d{1,2}:\d{2}(:\d{2})?", re.ASCII)

    def name(self) -> str:
        return "Episode Duration"

    def severity(self) -> Severity:
        return Severity.WARNING

    def run(self, node: FeedNode) -> CheckResult:
        if not node.has_itunes("duration"):
            return CheckResult.warn(
                "Episode is missing an <itunes:duration> tag.",
                "Add an <itunes:duration> tag to each episode (e.g., <itunes:duration>00:32:15"
                "</itunes:duration> or <itunes:duration>1935</itunes:duration>). This helps "
                "listeners see episode length before downloading and improves the listening "
                "experience.",
            )

        duration = node.itunes_text("duration")
        if duration is None:
            return CheckResult.warn(
                "Episode <itunes:duration> tag is empty.",
                "Provide a valid duration value in HH:MM:SS, MM:SS, or total seconds format.",
            )

        if not self.is_valid_duration(duration):
            return CheckResult.warn(
                f'Episode duration format is not recognized: "{duration}".',
                'Use one of the standard duration formats: HH:MM:SS (e.g., "01:23:45"), MM:SS '
                '(e.g., "23:45"), or total seconds (e.g., "5025").',
            )

        return CheckResult.pass_(f"Episode duration is present: {duration}.")

    @classmethod
    def is_valid_duration(cls, duration: str) -> bool:
        return bool(cls.SECONDS_PATTERN.fullmatch(duration) or cls.CLOCK_PATTERN.fullmatch(duration))


class TitleCheck(Check):
    def name(self) -> str:
        return "Episode Title"

    def severity(self) -> Severity:
        return Severity.WARNING

    def run(self, node: FeedNode) -> CheckResult:
        title = episode_title(node)
        if title is None:
            return CheckResult.fail(
                "Episode is missing a title.",
                "Add a <title> or <itunes:title> tag to each episode. Descriptive titles help "
                "listeners decide which episodes to play and improve discoverability in "
                "search results.",
            )

        if is_generic_title(title):
            return CheckResult.warn(
                f'Episode title is generic: "{title}".',
                'Use a descriptive title instead of just a number (e.g., "How to Start a '
                'Podcast" instead of "Episode 5"). Descriptive titles improve SEO and help '
                "listeners find relevant episodes.",
            )

        return CheckResult.pass_(f'Episode title is present: "{title}".')


class EpisodeDescriptionCheck(Check):
    MIN_LENGTH = 10

    def name(self) -> str:
        return "Episode Description"

    def severity(self) -> Severity:
        return Severity.WARNING

    def run(self, node: FeedNode) -> CheckResult:
        description = node.description_text()
        if description is None:
            return CheckResult.fail(
                "Episode is missing a description.",
                "Add a <description> tag to each episode with a summary of the episode "
                "content. Descriptions improve discoverability and help listeners decide "
                "whether to listen.",
            )

        length = len(description)
        if length < self.MIN_LENGTH:
            return CheckResult.warn(
                f"Episode description is too short ({length} characters).",
                f"Write a description of at least {self.MIN_LENGTH} characters. Include a "
                "brief summary of the episode topic, key takeaways, or guest information to "
                "help listeners and improve SEO.",
            )

        return CheckResult.pass_(f"Episode description is present ({length} characters).")
