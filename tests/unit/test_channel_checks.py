"""
Channel Check Tests
==================

Tests for the feed-wide checks: artwork, category, explicit, author, owner,
language, website link and description.
"""

import pytest

from podcheck.checks import build_channel_checks
from podcheck.checks.base import CheckResult, CheckStatus, Severity
from podcheck.checks.channel_checks import (
    APPLE_CATEGORIES,
    ArtworkCheck,
    AuthorCheck,
    CategoryCheck,
    ChannelDescriptionCheck,
    ExplicitTagCheck,
    LanguageCheck,
    OwnerEmailCheck,
    WebsiteLinkCheck,
)
from podcheck.checks.probe import ProbeResponse
from podcheck.feed.document import FeedDocument

from conftest import ARTWORK_URL, FakeProbe


def run_check(check, document):
    """Channel checks resolve the channel from any node of the document."""
    return check.run(document.root)


class TestArtworkCheck:
    """Test artwork presence, format and dimensions."""

    ARTWORK = f'<itunes:image href="{ARTWORK_URL}"/>'

    def probe_with(self, content_type="image/jpeg", size=(3000, 3000), ok=True):
        return FakeProbe(
            head_responses={ARTWORK_URL: ProbeResponse(ok=ok, status_code=200 if ok else 404, content_type=content_type)},
            image_sizes={ARTWORK_URL: size} if size else {},
        )

    def test_missing_image_fails(self, make_feed):
        result = run_check(ArtworkCheck(), make_feed("<title>No art</title>"))

        assert result.status == CheckStatus.FAIL
        assert result.message == "iTunes artwork image is missing."
        assert "1400×1400 to 3000×3000" in result.suggestion

    def test_empty_href_fails(self, make_feed):
        result = run_check(ArtworkCheck(), make_feed('<itunes:image href="  "/>'))

        assert result.status == CheckStatus.FAIL

    def test_valid_jpeg_passes(self, make_feed, fake_probe):
        result = run_check(ArtworkCheck(fake_probe), make_feed(self.ARTWORK))

        assert result.status == CheckStatus.PASS
        assert result.message == "Artwork is valid (3000×3000, JPEG)."
        assert result.suggestion is None
        assert fake_probe.head_calls == [ARTWORK_URL]
        assert fake_probe.image_calls == [ARTWORK_URL]

    def test_png_label(self, make_feed):
        result = run_check(ArtworkCheck(self.probe_with("image/png", (1400, 1400))), make_feed(self.ARTWORK))

        assert result.status == CheckStatus.PASS
        assert result.message == "Artwork is valid (1400×1400, PNG)."

    def test_unsupported_format_warns_without_reading_size(self, make_feed):
        probe = self.probe_with("image/gif")
        result = run_check(ArtworkCheck(probe), make_feed(self.ARTWORK))

        assert result.status == CheckStatus.WARN
        assert result.message == "Artwork image is not a supported format (detected: image/gif)."
        assert probe.image_calls == []

    @pytest.mark.parametrize(
        "size,message",
        [
            ((3000, 2000), "Artwork is not square (3000×2000)."),
            ((1000, 1000), "Artwork is too small (1000×1000)."),
            ((4000, 4000), "Artwork is too large (4000×4000)."),
        ],
    )
    def test_dimension_warnings(self, make_feed, size, message):
        result = run_check(ArtworkCheck(self.probe_with(size=size)), make_feed(self.ARTWORK))

        assert result.status == CheckStatus.WARN
        assert result.message == message

    def test_unreadable_dimensions_warn(self, make_feed):
        result = run_check(ArtworkCheck(self.probe_with(size=None)), make_feed(self.ARTWORK))

        assert result.status == CheckStatus.WARN
        assert result.message == "Artwork image URL is present but could not verify dimensions."

    def test_without_probe_dimensions_are_unverified(self, make_feed):
        result = run_check(ArtworkCheck(), make_feed(self.ARTWORK))

        assert result.status == CheckStatus.WARN
        assert "could not verify dimensions" in result.message

    def test_failed_head_still_reads_size(self, make_feed):
        probe = self.probe_with(content_type=None, ok=False)
        result = run_check(ArtworkCheck(probe), make_feed(self.ARTWORK))

        assert result.status == CheckStatus.PASS
        assert result.message == "Artwork is valid (3000×3000, unknown format)."


class TestCategoryCheck:
    """Test category validation against the Apple taxonomy."""

    def test_missing_category_fails(self, make_feed):
        result = run_check(CategoryCheck(), make_feed())

        assert result.status == CheckStatus.FAIL
        assert result.message == "iTunes category is missing."

    def test_unknown_primary_fails(self, make_feed):
        result = run_check(CategoryCheck(), make_feed('<itunes:category text="Gardening"/>'))

        assert result.status == CheckStatus.FAIL
        assert result.message == 'iTunes category "Gardening" is not a valid Apple Podcasts category.'
        assert "Arts, Business" in result.suggestion

    def test_valid_with_subcategory_passes(self, make_feed):
        document = make_feed(
            '<itunes:category text="Arts"><itunes:category text="Books"/></itunes:category>'
        )
        result = run_check(CategoryCheck(), document)

        assert result.status == CheckStatus.PASS
        assert result.message == 'iTunes category is valid: "Arts" > "Books".'

    def test_invalid_subcategory_warns(self, make_feed):
        document = make_feed(
            '<itunes:category text="Arts"><itunes:category text="Podcasting"/></itunes:category>'
        )
        result = run_check(CategoryCheck(), document)

        assert result.status == CheckStatus.WARN
        assert result.message == 'Subcategory "Podcasting" is not valid under "Arts".'
        assert result.suggestion.startswith('Valid subcategories for "Arts": Books, Design')

    def test_no_subcategory_warns_when_available(self, make_feed):
        result = run_check(CategoryCheck(), make_feed('<itunes:category text="Comedy"/>'))

        assert result.status == CheckStatus.WARN
        assert result.message == 'Category "Comedy" is set but no subcategory is specified.'

    def test_category_without_subcategories_passes(self, make_feed):
        result = run_check(CategoryCheck(), make_feed('<itunes:category text="Technology"/>'))

        assert result.status == CheckStatus.PASS
        assert result.message == 'iTunes category is valid: "Technology".'

    def test_only_first_category_is_evaluated(self, make_feed):
        document = make_feed(
            '<itunes:category text="Technology"/><itunes:category text="Nonsense"/>'
        )

        assert run_check(CategoryCheck(), document).status == CheckStatus.PASS

    def test_taxonomy_size(self):
        assert len(APPLE_CATEGORIES) == 19
        assert APPLE_CATEGORIES["Technology"] == []


class TestExplicitTagCheck:
    """Test itunes:explicit values."""

    @pytest.mark.parametrize("value", ["true", "false", "TRUE", "False"])
    def test_standard_values_pass(self, make_feed, value):
        result = run_check(ExplicitTagCheck(), make_feed(f"<itunes:explicit>{value}</itunes:explicit>"))

        assert result.status == CheckStatus.PASS
        assert result.message == f'iTunes explicit tag is present and valid ("{value.lower()}").'

    @pytest.mark.parametrize("value", ["yes", "No"])
    def test_legacy_values_warn(self, make_feed, value):
        result = run_check(ExplicitTagCheck(), make_feed(f"<itunes:explicit>{value}</itunes:explicit>"))

        assert result.status == CheckStatus.WARN
        assert "legacy" in result.message

    def test_non_standard_value_warns(self, make_feed):
        result = run_check(ExplicitTagCheck(), make_feed("<itunes:explicit>clean</itunes:explicit>"))

        assert result.status == CheckStatus.WARN
        assert result.message == 'iTunes explicit tag has a non-standard value: "clean".'

    @pytest.mark.parametrize("channel", ["", "<itunes:explicit>  </itunes:explicit>"])
    def test_missing_or_empty_fails(self, make_feed, channel):
        assert run_check(ExplicitTagCheck(), make_feed(channel)).status == CheckStatus.FAIL


class TestAuthorCheck:
    """Test itunes:author."""

    def test_present_passes(self, make_feed):
        result = run_check(AuthorCheck(), make_feed("<itunes:author> Jamie </itunes:author>"))

        assert result.status == CheckStatus.PASS
        assert result.message == 'iTunes author is present: "Jamie".'

    def test_missing_fails(self, make_feed):
        assert run_check(AuthorCheck(), make_feed()).status == CheckStatus.FAIL

    def test_too_long_warns(self, make_feed):
        result = run_check(AuthorCheck(), make_feed(f"<itunes:author>{'a' * 256}</itunes:author>"))

        assert result.status == CheckStatus.WARN
        assert result.message == "iTunes author name is excessively long (256 characters)."

    def test_boundary_length_passes(self, make_feed):
        result = run_check(AuthorCheck(), make_feed(f"<itunes:author>{'a' * 255}</itunes:author>"))

        assert result.status == CheckStatus.PASS


class TestOwnerEmailCheck:
    """Test the itunes:owner block."""

    def owner(self, inner):
        return f"<itunes:owner>{inner}</itunes:owner>"

    def test_missing_owner_fails(self, make_feed):
        result = run_check(OwnerEmailCheck(), make_feed())

        assert result.status == CheckStatus.FAIL
        assert result.message == "iTunes owner information is missing."

    def test_missing_email_fails(self, make_feed):
        result = run_check(OwnerEmailCheck(), make_feed(self.owner("<itunes:name>Jamie</itunes:name>")))

        assert result.status == CheckStatus.FAIL
        assert result.message == "iTunes owner email is missing."

    def test_invalid_email_warns(self, make_feed):
        result = run_check(OwnerEmailCheck(), make_feed(self.owner("<itunes:email>not-an-email</itunes:email>")))

        assert result.status == CheckStatus.WARN
        assert result.message == 'iTunes owner email does not appear to be valid: "not-an-email".'

    def test_valid_email_with_name(self, make_feed):
        document = make_feed(
            self.owner("<itunes:name>Jamie</itunes:name><itunes:email>jamie@example.com</itunes:email>")
        )
        result = run_check(OwnerEmailCheck(), document)

        assert result.status == CheckStatus.PASS
        assert result.message == 'iTunes owner email is present: "jamie@example.com" (name: "Jamie").'

    def test_valid_email_without_name(self, make_feed):
        document = make_feed(self.owner("<itunes:email>jamie@example.com</itunes:email>"))
        result = run_check(OwnerEmailCheck(), document)

        assert result.message == 'iTunes owner email is present: "jamie@example.com".'


class TestLanguageCheck:
    """Test the language tag."""

    @pytest.mark.parametrize("code", ["en", "en-us", "EN-US", "fr", "de-at", "in", "pt-br"])
    def test_valid_codes_pass(self, make_feed, code):
        result = run_check(LanguageCheck(), make_feed(f"<language>{code}</language>"))

        assert result.status == CheckStatus.PASS

    @pytest.mark.parametrize("code", ["english", "xx", "en_us", "e", "en-toolong"])
    def test_invalid_codes_warn(self, make_feed, code):
        result = run_check(LanguageCheck(), make_feed(f"<language>{code}</language>"))

        assert result.status == CheckStatus.WARN

    def test_missing_fails(self, make_feed):
        result = run_check(LanguageCheck(), make_feed())

        assert result.status == CheckStatus.FAIL
        assert result.message == "Language tag is missing."


class TestWebsiteLinkCheck:
    """Test the channel link."""

    def test_valid_link_passes(self, make_feed):
        result = run_check(WebsiteLinkCheck(), make_feed("<link>https://example.com</link>"))

        assert result.status == CheckStatus.PASS
        assert result.message == 'Website link is present: "https://example.com".'

    @pytest.mark.parametrize("link", ["example.com", "ftp://example.com", "https://exa mple.com"])
    def test_invalid_link_warns(self, make_feed, link):
        result = run_check(WebsiteLinkCheck(), make_feed(f"<link>{link}</link>"))

        assert result.status == CheckStatus.WARN

    def test_missing_fails(self, make_feed):
        assert run_check(WebsiteLinkCheck(), make_feed()).status == CheckStatus.FAIL

    def test_atom_alternate_link(self):
        document = FeedDocument.from_string(
            '<feed xmlns="http://www.w3.org/2005/Atom">'
            '<link rel="self" href="https://example.com/feed.xml"/>'
            '<link rel="alternate" href="https://example.com/"/>'
            "</feed>"
        )
        result = run_check(WebsiteLinkCheck(), document)

        assert result.status == CheckStatus.PASS
        assert result.message == 'Website link is present: "https://example.com/".'


class TestChannelDescriptionCheck:
    """Test the show description."""

    def test_missing_fails(self, make_feed):
        result = run_check(ChannelDescriptionCheck(), make_feed())

        assert result.status == CheckStatus.FAIL
        assert result.message == "Channel description is missing."

    def test_too_short_warns(self, make_feed):
        result = run_check(ChannelDescriptionCheck(), make_feed("<description>Short one</description>"))

        assert result.status == CheckStatus.WARN
        assert result.message == "Channel description is too short (9 characters)."

    def test_too_long_warns(self, make_feed):
        result = run_check(ChannelDescriptionCheck(), make_feed(f"<description>{'x' * 4001}</description>"))

        assert result.status == CheckStatus.WARN
        assert result.message == "Channel description is very long (4001 characters)."

    @pytest.mark.parametrize("length", [20, 4000])
    def test_boundaries_pass(self, make_feed, length):
        result = run_check(ChannelDescriptionCheck(), make_feed(f"<description>{'x' * length}</description>"))

        assert result.status == CheckStatus.PASS
        assert result.message == f"Channel description is present ({length} characters)."

    def test_itunes_summary_fallback(self, make_feed):
        document = make_feed("<itunes:summary>A summary that is long enough to pass.</itunes:summary>")

        assert run_check(ChannelDescriptionCheck(), document).status == CheckStatus.PASS


class TestCheckResult:
    def test_to_dict(self):
        result = CheckResult.warn("Too short.", "Write more.")

        assert result.to_dict() == {"status": "warn", "message": "Too short.", "suggestion": "Write more."}
        assert CheckResult.pass_("Fine.").to_dict()["suggestion"] is None


class TestChannelChecksTogether:
    """Test the channel check list as a whole."""

    def test_complete_channel_passes_everything(self, complete_feed, fake_probe):
        results = [check.run(complete_feed.root) for check in build_channel_checks(fake_probe)]

        assert [r.status for r in results] == [CheckStatus.PASS] * 8

    def test_rss_without_channel_fails_everything(self):
        document = FeedDocument.from_string('<rss version="2.0"></rss>')
        results = [check.run(document.root) for check in build_channel_checks()]

        assert all(r.status == CheckStatus.FAIL for r in results)

    def test_order_names_and_severities(self):
        checks = build_channel_checks()

        assert [c.name() for c in checks] == [
            "Podcast Artwork",
            "iTunes Category",
            "Explicit Tag",
            "iTunes Author",
            "Owner Email",
            "Language Tag",
            "Website Link",
            "Channel Description",
        ]
        assert checks[3].severity() == Severity.WARNING
        assert checks[0].severity() == Severity.ERROR

    def test_probe_artwork_disabled(self, fake_probe):
        checks = build_channel_checks(fake_probe, probe_artwork=False)

        assert checks[0].probe is None
