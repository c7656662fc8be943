"""
Feed Report Service
==================

Composes the fetcher, the validation engine and both scorers into one report
per feed. Shared by every interface (CLI today) so they produce identical
payloads.
"""

import asyncio
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional

from pydantic import BaseModel, Field

from ..checks import HttpProbe, build_channel_checks, build_episode_checks
from ..config.settings import PodCheckSettings, get_settings
from ..feed.document import FeedDocument
from ..processing.feed_fetcher import FeedFetcher
from ..scoring.health_scorer import HealthScore, HealthScorer
from ..scoring.seo_scorer import SeoScore, SeoScorer
from ..utils.exceptions import PodCheckError, handle_exception
from ..utils.logging import PerformanceLogger, get_logger_for_component
from ..validation.feed_validator import (
    EpisodeResult,
    FeedValidator,
    FormattedResult,
    ValidationSummary,
    summarize,
)


class FeedReport(BaseModel):
    """Complete health report for one feed."""
    feed_url: str = Field(..., description="URL (or path) the feed was read from")
    feed_title: Optional[str] = Field(default=None, description="Channel title")
    overall_score: int = Field(..., ge=0, le=100, description="Health score overall")
    feed_format: str = Field(..., description="'RSS 2.0' or 'Atom'")
    checked_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    artwork_url: Optional[str] = Field(default=None, description="itunes:image href")
    total_episodes: int = Field(default=0, ge=0, description="Episodes in the feed, uncapped")
    summary: ValidationSummary
    health_score: HealthScore
    seo_score: SeoScore
    channel: List[FormattedResult] = Field(default_factory=list)
    episodes: List[EpisodeResult] = Field(default_factory=list)

    def to_payload(self) -> Dict[str, Any]:
        """JSON-shaped report payload."""
        return self.model_dump(mode="json", by_alias=True)


ProbeFactory = Callable[[], HttpProbe]


class FeedReportService:
    """Builds FeedReports from URLs or already parsed documents."""

    def __init__(
        self,
        settings: Optional[PodCheckSettings] = None,
        fetcher: Optional[FeedFetcher] = None,
        probe_factory: Optional[ProbeFactory] = None,
    ):
        """Initialize report service.

        Args:
            settings: Application settings (default: global settings)
            fetcher: Feed fetcher (default: FeedFetcher with the same settings)
            probe_factory: Creates the network probe for one run
        """
        self.settings = settings or get_settings()
        self.fetcher = fetcher or FeedFetcher(self.settings)
        self.probe_factory = probe_factory or self._default_probe
        self.health_scorer = HealthScorer()
        self.seo_scorer = SeoScorer()
        self.logger = get_logger_for_component("report_service")

    def _default_probe(self) -> HttpProbe:
        return HttpProbe(
            timeout=self.settings.validation.probe_timeout_seconds,
            user_agent=self.settings.fetch.user_agent,
        )

    @property
    def probes_enabled(self) -> bool:
        validation = self.settings.validation
        return validation.probe_artwork or validation.probe_enclosures

    def build_validator(self, probe: Optional[HttpProbe] = None) -> FeedValidator:
        """Fresh validator with fresh check instances for a single run."""
        validation = self.settings.validation
        return FeedValidator(
            channel_checks=build_channel_checks(probe, probe_artwork=validation.probe_artwork),
            episode_checks=build_episode_checks(probe, probe_enclosures=validation.probe_enclosures),
            max_episodes=validation.max_episodes,
        )

    def check_document(self, document: FeedDocument, feed_url: str) -> FeedReport:
        """Validate and score a parsed feed.

        Args:
            document: Parsed feed
            feed_url: Where the document came from, stored in the report

        Returns:
            FeedReport

        Raises:
            PodCheckError: If the analysis itself fails unexpectedly
        """
        probe = self.probe_factory() if self.probes_enabled else None
        try:
            with PerformanceLogger(self.logger, "feed check", feed_url=feed_url):
                validator = self.build_validator(probe)
                result = validator.validate(document)
                health = self.health_scorer.score(result)
                report = FeedReport(
                    feed_url=feed_url,
                    feed_title=document.title,
                    overall_score=health.overall,
                    feed_format=document.format_label,
                    artwork_url=document.artwork_url,
                    total_episodes=document.count_episodes(),
                    summary=summarize(result),
                    health_score=health,
                    seo_score=self.seo_scorer.score(document),
                    channel=result.channel,
                    episodes=result.episodes,
                )
        except PodCheckError:
            raise
        except Exception as e:
            raise handle_exception(e, self.logger, "feed check", {"feed_url": feed_url}) from e
        finally:
            if probe is not None:
                probe.close()

        self.logger.info(
            f"Feed check complete: health {report.overall_score}, SEO {report.seo_score.overall}, "
            f"{report.summary.fail} failures, {report.summary.warn} warnings",
            extra={"feed_url": feed_url},
        )
        return report

    async def check_url(self, url: str) -> FeedReport:
        """Fetch ``url`` and build its report.

        Raises:
            FeedFetchError: If the feed cannot be fetched or parsed
        """
        document = await self.fetcher.fetch(url)
        # Probes block, keep them off the event loop
        return await asyncio.to_thread(self.check_document, document, document.url or url)

    def check_file(self, path: str) -> FeedReport:
        """Build the report for a feed stored on disk."""
        with open(path, "rb") as handle:
            content = handle.read()
        document = FeedDocument.from_bytes(content, url=path)
        return self.check_document(document, path)
