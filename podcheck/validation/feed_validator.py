"""
Feed Validator
==============

Runs the channel checks once and the episode checks against each sampled
episode, producing the result tree consumed by the scorers and the report.
"""

from typing import Any, Dict, Iterable, List, Optional

from pydantic import BaseModel, Field

from ..checks.base import Check, CheckResult, CheckStatus, Severity
from ..feed.document import FeedDocument, FeedNode
from ..utils.logging import get_logger_for_component

DEFAULT_MAX_EPISODES = 10


class FormattedResult(BaseModel):
    """A check's identity merged with its outcome."""
    name: str = Field(..., description="Check name")
    severity: Severity = Field(..., description="Check severity")
    status: CheckStatus = Field(..., description="pass, warn or fail")
    message: str = Field(..., description="Human readable verdict")
    suggestion: Optional[str] = Field(default=None, description="How to fix, None on pass")

    @classmethod
    def from_check(cls, check: Check, result: CheckResult) -> "FormattedResult":
        return cls(
            name=check.name(),
            severity=check.severity(),
            status=result.status,
            message=result.message,
            suggestion=result.suggestion,
        )

    def to_dict(self) -> Dict[str, Any]:
        return self.model_dump(mode="json")


class EpisodeResult(BaseModel):
    """Check results for one sampled episode."""
    title: str = Field(..., description="Episode title, or 'Episode N' when untitled")
    guid: Optional[str] = Field(default=None, description="Episode GUID if present")
    results: List[FormattedResult] = Field(default_factory=list)


class ValidationSummary(BaseModel):
    """Status tally over every result of a run."""
    total: int = 0
    pass_: int = Field(default=0, alias="pass")
    warn: int = 0
    fail: int = 0

    model_config = {"populate_by_name": True}

    def to_dict(self) -> Dict[str, int]:
        return self.model_dump(by_alias=True)


class ValidationResult(BaseModel):
    """Result tree of one validation run."""
    channel: List[FormattedResult] = Field(default_factory=list)
    episodes: List[EpisodeResult] = Field(default_factory=list)

    def all_results(self) -> List[FormattedResult]:
        """Channel results followed by every episode's results, in order."""
        flattened = list(self.channel)
        for episode in self.episodes:
            flattened.extend(episode.results)
        return flattened

    def to_dict(self) -> Dict[str, Any]:
        return self.model_dump(mode="json")


def summarize(result: ValidationResult) -> ValidationSummary:
    """Count statuses across channel and episode results.

    ``total`` always equals ``pass + warn + fail``.
    """
    counts = {status: 0 for status in CheckStatus}
    for formatted in result.all_results():
        counts[formatted.status] += 1

    return ValidationSummary(
        total=sum(counts.values()),
        pass_=counts[CheckStatus.PASS],
        warn=counts[CheckStatus.WARN],
        fail=counts[CheckStatus.FAIL],
    )


class FeedValidator:
    """Validation engine over a fixed list of checks.

    The check instances belong to this validator. ``GuidCheck`` remembers the
    GUIDs it has seen, so a validator must not be shared between concurrent
    runs; build one per run (see ``FeedReportService.build_validator``).
    """

    def __init__(
        self,
        channel_checks: Optional[Iterable[Check]] = None,
        episode_checks: Optional[Iterable[Check]] = None,
        max_episodes: int = DEFAULT_MAX_EPISODES,
    ):
        """Initialize validator.

        Args:
            channel_checks: Checks run once against the channel
            episode_checks: Checks run against every sampled episode
            max_episodes: Most episodes sampled from the feed
        """
        self.channel_checks: List[Check] = list(channel_checks or [])
        self.episode_checks: List[Check] = list(episode_checks or [])
        self.max_episodes = max_episodes
        self.logger = get_logger_for_component("validator")

    def validate(self, document: FeedDocument) -> ValidationResult:
        """Run every check against the document.

        Args:
            document: Parsed feed

        Returns:
            ValidationResult with channel results and per-episode results
        """
        for check in self.channel_checks + self.episode_checks:
            check.reset()

        result = ValidationResult(
            channel=self._run_channel_checks(document),
            episodes=self._run_episode_checks(document),
        )

        self.logger.debug(
            f"Validated {document.format_label} feed: {len(result.channel)} channel results, "
            f"{len(result.episodes)} episodes sampled",
            extra={"feed_url": document.url},
        )
        return result

    summarize = staticmethod(summarize)

    def _run_channel_checks(self, document: FeedDocument) -> List[FormattedResult]:
        node = document.channel or document.root
        return [FormattedResult.from_check(check, check.run(node)) for check in self.channel_checks]

    def _run_episode_checks(self, document: FeedDocument) -> List[EpisodeResult]:
        if not self.episode_checks:
            return []

        episodes = []
        for index, item in enumerate(document.episodes(limit=self.max_episodes)):
            results = [FormattedResult.from_check(check, check.run(item)) for check in self.episode_checks]
            episodes.append(
                EpisodeResult(
                    title=self._item_title(item, index),
                    guid=self._item_guid(item),
                    results=results,
                )
            )
        return episodes

    @staticmethod
    def _item_title(item: FeedNode, index: int) -> str:
        return item.text("title") or f"Episode {index + 1}"

    @staticmethod
    def _item_guid(item: FeedNode) -> Optional[str]:
        guid = item.text("guid")
        if guid is None and item.document.is_atom:
            guid = item.text("id")
        return guid
