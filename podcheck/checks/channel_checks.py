"""
Channel Checks
==============

Feed-wide rules evaluated once per feed against the channel element, covering
what Apple Podcasts and the other directories require from a show listing.
"""

import re
from typing import Dict, List, Optional, Tuple

from .base import ChannelCheck, CheckResult, Severity
from .probe import HttpProbe
from ..feed.document import FeedNode
from ..utils.logging import get_check_logger
from ..utils.validators import EmailValidator, URLValidator


# Apple Podcasts category taxonomy: primary category -> valid subcategories
APPLE_CATEGORIES: Dict[str, List[str]] = {
    "Arts": ["Books", "Design", "Fashion & Beauty", "Food", "Performing Arts", "Visual Arts"],
    "Business": ["Careers", "Entrepreneurship", "Investing", "Management", "Marketing", "Non-Profit"],
    "Comedy": ["Comedy Interviews", "Improv", "Stand-Up"],
    "Education": ["Courses", "How To", "Language Learning", "Self-Improvement"],
    "Fiction": ["Comedy Fiction", "Drama", "Science Fiction"],
    "Government": [],
    "History": [],
    "Health & Fitness": [
        "Alternative Health", "Fitness", "Medicine", "Mental Health", "Nutrition", "Sexuality",
    ],
    "Kids & Family": ["Education for Kids", "Parenting", "Pets & Animals", "Stories for Kids"],
    "Leisure": [
        "Animation & Manga", "Automotive", "Aviation", "Crafts", "Games", "Hobbies",
        "Home & Garden", "Video Games",
    ],
    "Music": ["Music Commentary", "Music History", "Music Interviews"],
    "News": [
        "Business News", "Daily News", "Entertainment News", "News Commentary", "Politics",
        "Sports News", "Tech News",
    ],
    "Religion & Spirituality": [
        "Buddhism", "Christianity", "Hinduism", "Islam", "Judaism", "Religion", "Spirituality",
    ],
    "Science": [
        "Astronomy", "Chemistry", "Earth Sciences", "Life Sciences", "Mathematics",
        "Natural Sciences", "Nature", "Physics", "Social Sciences",
    ],
    "Society & Culture": [
        "Documentary", "Personal Journals", "Philosophy", "Places & Travel", "Relationships",
    ],
    "Sports": [
        "Baseball", "Basketball", "Cricket", "Fantasy Sports", "Football", "Golf", "Hockey",
        "Rugby", "Running", "Soccer", "Swimming", "Tennis", "Volleyball", "Wilderness",
        "Wrestling",
    ],
    "Technology": [],
    "True Crime": [],
    "TV & Film": ["After Shows", "Film History", "Film Interviews", "Film Reviews", "TV Reviews"],
}

# ISO 639-1 codes plus the legacy "in" for Indonesian
LANGUAGE_CODES = frozenset(
    """
    aa ab af ak am an ar as av ay az ba be bg bh bi bm bn bo br bs ca ce ch co cr
    cs cu cv cy da de dv dz ee el en eo es et eu fa ff fi fj fo fr fy ga gd gl gn
    gu gv ha he hi ho hr ht hu hy hz ia id ie ig ii ik in io is it iu ja jv ka kg
    ki kj kk kl km kn ko kr ks ku kv kw ky la lb lg li ln lo lt lu lv mg mh mi mk
    ml mn mr ms mt my na nb nd ne ng nl nn no nr nv ny oc oj om or os pa pi pl ps
    pt qu rm rn ro ru rw sa sc sd se sg si sk sl sm sn so sq sr ss st su sv sw ta
    te tg th ti tk tl tn to tr ts tt tw ty ug uk ur uz va ve vi vo wa wo xh yi yo
    za zh zu
    """.split()
)

LANGUAGE_PATTERN = re.compile(r"^[a-z]{2,3}(-[a-z]{2,4})?$")


class ArtworkCheck(ChannelCheck):
    """Podcast artwork presence, format and dimensions."""

    MIN_DIMENSION = 1400
    MAX_DIMENSION = 3000
    ALLOWED_CONTENT_TYPES = {"image/jpeg": "JPEG", "image/png": "PNG"}

    def __init__(self, probe: Optional[HttpProbe] = None):
        """Initialize artwork check.

        Args:
            probe: Network probe; None skips the remote checks, leaving the
                dimensions unverified
        """
        self.probe = probe
        self.logger = get_check_logger(self.name())

    def name(self) -> str:
        return "Podcast Artwork"

    def severity(self) -> Severity:
        return Severity.ERROR

    def evaluate(self, channel: Optional[FeedNode]) -> CheckResult:
        image = channel.itunes("image") if channel is not None else None
        image_url = image.attr("href") if image is not None else None

        if image_url is None:
            return CheckResult.fail(
                "iTunes artwork image is missing.",
                'Add an <itunes:image href="https://example.com/artwork.jpg"/> tag to your '
                "channel with a URL to your podcast artwork (1400×1400 to 3000×3000 pixels, "
                "JPEG or PNG).",
            )

        return self._validate_image(image_url)

    def _validate_image(self, image_url: str) -> CheckResult:
        content_type = None
        dimensions = None

        if self.probe is not None:
            response = self.probe.head(image_url)
            if response.ok:
                content_type = response.content_type

            if content_type is not None and content_type not in self.ALLOWED_CONTENT_TYPES:
                return CheckResult.warn(
                    f"Artwork image is not a supported format (detected: {content_type}).",
                    "Apple Podcasts requires artwork in JPEG or PNG format. Convert your "
                    "image to one of these formats.",
                )

            dimensions = self.probe.image_size(image_url)

        if dimensions is None:
            self.logger.debug(f"Artwork dimensions unknown for {image_url}")
            return CheckResult.warn(
                "Artwork image URL is present but could not verify dimensions.",
                "Make sure your artwork image is accessible and between 1400×1400 and "
                "3000×3000 pixels.",
            )

        width, height = dimensions
        if width != height:
            return CheckResult.warn(
                f"Artwork is not square ({width}×{height}).",
                "Apple Podcasts requires square artwork. Resize your image to have equal "
                "width and height (e.g., 3000×3000).",
            )

        if width < self.MIN_DIMENSION:
            return CheckResult.warn(
                f"Artwork is too small ({width}×{height}).",
                "Apple Podcasts requires artwork to be at least 1400×1400 pixels. Resize your "
                "image to at least 1400×1400 (3000×3000 recommended).",
            )

        if width > self.MAX_DIMENSION:
            return CheckResult.warn(
                f"Artwork is too large ({width}×{height}).",
                "Apple Podcasts recommends artwork no larger than 3000×3000 pixels. Resize "
                "your image to 3000×3000 or smaller.",
            )

        label = self.ALLOWED_CONTENT_TYPES.get(content_type, content_type or "unknown format")
        return CheckResult.pass_(f"Artwork is valid ({width}×{height}, {label}).")


class CategoryCheck(ChannelCheck):
    """``itunes:category`` against the Apple Podcasts taxonomy."""

    def name(self) -> str:
        return "iTunes Category"

    def severity(self) -> Severity:
        return Severity.ERROR

    def evaluate(self, channel: Optional[FeedNode]) -> CheckResult:
        category = self._extract_category(channel)
        if category is None:
            return CheckResult.fail(
                "iTunes category is missing.",
                'Add an <itunes:category text="Technology"/> tag to your channel. Apple '
                "Podcasts requires at least one category for your podcast to be listed.",
            )

        primary, subcategory = category

        if primary not in APPLE_CATEGORIES:
            return CheckResult.fail(
                f'iTunes category "{primary}" is not a valid Apple Podcasts category.',
                "Use one of Apple's official categories: "
                f"{', '.join(APPLE_CATEGORIES)}. Check the Apple Podcasts category list "
                "for the full taxonomy.",
            )

        if subcategory is not None and subcategory not in APPLE_CATEGORIES[primary]:
            return CheckResult.warn(
                f'Subcategory "{subcategory}" is not valid under "{primary}".',
                self._subcategory_suggestion(primary),
            )

        if subcategory is None and APPLE_CATEGORIES[primary]:
            return CheckResult.warn(
                f'Category "{primary}" is set but no subcategory is specified.',
                "Adding a subcategory helps listeners find your podcast. "
                + self._subcategory_suggestion(primary),
            )

        if subcategory is not None:
            return CheckResult.pass_(f'iTunes category is valid: "{primary}" > "{subcategory}".')
        return CheckResult.pass_(f'iTunes category is valid: "{primary}".')

    @staticmethod
    def _extract_category(channel: Optional[FeedNode]) -> Optional[Tuple[str, Optional[str]]]:
        """First category and its first nested subcategory, if any."""
        if channel is None:
            return None

        category = channel.itunes("category")
        primary = category.attr("text") if category is not None else None
        if primary is None:
            return None

        child = category.itunes("category")
        subcategory = child.attr("text") if child is not None else None
        return primary, subcategory

    @staticmethod
    def _subcategory_suggestion(primary: str) -> str:
        subcategories = APPLE_CATEGORIES.get(primary, [])
        if not subcategories:
            return f'The "{primary}" category has no subcategories.'
        return f'Valid subcategories for "{primary}": {", ".join(subcategories)}.'


class ExplicitTagCheck(ChannelCheck):
    """``itunes:explicit`` presence and value."""

    VALID_VALUES = {"true", "false", "yes", "no"}
    LEGACY_VALUES = {"yes", "no"}

    def name(self) -> str:
        return "Explicit Tag"

    def severity(self) -> Severity:
        return Severity.ERROR

    def evaluate(self, channel: Optional[FeedNode]) -> CheckResult:
        value = channel.itunes_text("explicit") if channel is not None else None
        if value is None:
            return CheckResult.fail(
                "iTunes explicit tag is missing.",
                "Add an <itunes:explicit>false</itunes:explicit> tag to your channel. Apple "
                "Podcasts requires this tag to indicate whether your podcast contains "
                "explicit content.",
            )

        normalized = value.lower()
        if normalized not in self.VALID_VALUES:
            return CheckResult.warn(
                f'iTunes explicit tag has a non-standard value: "{value}".',
                'The <itunes:explicit> tag should be "true" or "false". Legacy values "yes" '
                'and "no" are also accepted but "true"/"false" is preferred.',
            )

        if normalized in self.LEGACY_VALUES:
            return CheckResult.warn(
                f'iTunes explicit tag uses legacy value "{value}".',
                'Update the <itunes:explicit> tag to use "true" or "false" instead of '
                '"yes"/"no". The legacy values still work but are deprecated.',
            )

        return CheckResult.pass_(f'iTunes explicit tag is present and valid ("{normalized}").')


class AuthorCheck(ChannelCheck):
    MAX_LENGTH = 255

    def name(self) -> str:
        return "iTunes Author"

    def severity(self) -> Severity:
        return Severity.WARNING

    def evaluate(self, channel: Optional[FeedNode]) -> CheckResult:
        author = channel.itunes_text("author") if channel is not None else None
        if author is None:
            return CheckResult.fail(
                "iTunes author is missing.",
                "Add an <itunes:author>Your Name</itunes:author> tag to your channel. This is "
                "displayed as the podcast creator in Apple Podcasts and other directories.",
            )

        if len(author) > self.MAX_LENGTH:
            return CheckResult.warn(
                f"iTunes author name is excessively long ({len(author)} characters).",
                "Keep the <itunes:author> value concise, ideally under 255 characters. Use "
                "the show name or host name.",
            )

        return CheckResult.pass_(f'iTunes author is present: "{author}".')


class OwnerEmailCheck(ChannelCheck):
    """``itunes:owner`` block with a usable e-mail address."""

    def name(self) -> str:
        return "Owner Email"

    def severity(self) -> Severity:
        return Severity.ERROR

    def evaluate(self, channel: Optional[FeedNode]) -> CheckResult:
        owner = channel.itunes("owner") if channel is not None else None
        if owner is None:
            return CheckResult.fail(
                "iTunes owner information is missing.",
                "Add an <itunes:owner> block with <itunes:name> and <itunes:email> to your "
                "channel. Apple uses this email for account verification and communication "
                "about your podcast.",
            )

        email = owner.itunes_text("email")
        if email is None:
            return CheckResult.fail(
                "iTunes owner email is missing.",
                "Add an <itunes:email> tag inside your <itunes:owner> block. Apple Podcasts "
                "requires an owner email for account verification.",
            )

        if not EmailValidator.is_valid(email):
            return CheckResult.warn(
                f'iTunes owner email does not appear to be valid: "{email}".',
                "Ensure the <itunes:email> contains a properly formatted email address "
                "(e.g., you@example.com).",
            )

        name = owner.itunes_text("name")
        name_info = f' (name: "{name}")' if name is not None else ""
        return CheckResult.pass_(f'iTunes owner email is present: "{email}"{name_info}.')


class LanguageCheck(ChannelCheck):
    def name(self) -> str:
        return "Language Tag"

    def severity(self) -> Severity:
        return Severity.WARNING

    def evaluate(self, channel: Optional[FeedNode]) -> CheckResult:
        language = channel.text("language") if channel is not None else None
        if language is None:
            return CheckResult.fail(
                "Language tag is missing.",
                "Add a <language>en-us</language> tag to your channel. This tells podcast "
                "directories which language your podcast is in and helps with "
                "discoverability.",
            )

        if not self.is_valid_language_code(language):
            return CheckResult.warn(
                f'Language tag value "{language}" does not appear to be a valid language code.',
                "Use a valid ISO 639-1 language code, optionally with a region (e.g., "
                '"en", "en-us", "fr", "de-at"). Common codes: en, es, fr, de, pt, ja, zh.',
            )

        return CheckResult.pass_(f'Language tag is present and valid: "{language}".')

    @staticmethod
    def is_valid_language_code(code: str) -> bool:
        normalized = code.lower()
        if not LANGUAGE_PATTERN.match(normalized):
            return False
        return normalized.split("-", 1)[0] in LANGUAGE_CODES


class WebsiteLinkCheck(ChannelCheck):
    def name(self) -> str:
        return "Website Link"

    def severity(self) -> Severity:
        return Severity.WARNING

    def evaluate(self, channel: Optional[FeedNode]) -> CheckResult:
        link = self._extract_link(channel)
        if link is None:
            return CheckResult.fail(
                "Website link is missing.",
                "Add a <link>https://yourpodcast.com</link> tag to your channel. This links "
                "to your podcast's website and helps listeners find more about your show.",
            )

        if not URLValidator.is_http_url(link):
            return CheckResult.warn(
                f'Website link does not appear to be a valid URL: "{link}".',
                "Ensure the <link> tag contains a full URL starting with http:// or https:// "
                "(e.g., https://yourpodcast.com).",
            )

        return CheckResult.pass_(f'Website link is present: "{link}".')

    @staticmethod
    def _extract_link(channel: Optional[FeedNode]) -> Optional[str]:
        if channel is None:
            return None

        link = channel.text("link")
        if link is None and channel.document.is_atom:
            # Atom carries the site URL in <link rel="alternate" href="..."/>
            alternate = channel.link("alternate")
            link = alternate.attr("href") if alternate is not None else None
        return link


class ChannelDescriptionCheck(ChannelCheck):
    """Show description presence and length."""

    MIN_LENGTH = 20
    WARN_MAX_LENGTH = 4000

    def name(self) -> str:
        return "Channel Description"

    def severity(self) -> Severity:
        return Severity.ERROR

    def evaluate(self, channel: Optional[FeedNode]) -> CheckResult:
        description = channel.description_text() if channel is not None else None
        if description is None:
            return CheckResult.fail(
                "Channel description is missing.",
                "Add a <description> and/or <itunes:summary> tag to your channel. A clear, "
                "keyword-rich description helps listeners discover your podcast in search "
                "results.",
            )

        length = len(description)
        if length < self.MIN_LENGTH:
            return CheckResult.warn(
                f"Channel description is too short ({length} characters).",
                f"Write a description of at least {self.MIN_LENGTH} characters. A good "
                "podcast description is 1-2 paragraphs that explains what the show is about "
                "and who it's for.",
            )

        if length > self.WARN_MAX_LENGTH:
            return CheckResult.warn(
                f"Channel description is very long ({length} characters).",
                f"Apple Podcasts may truncate descriptions over {self.WARN_MAX_LENGTH} "
                "characters. Consider shortening your description to keep the most "
                "important information visible.",
            )

        return CheckResult.pass_(f"Channel description is present ({length} characters).")
