"""
Health Scorer
=============

Deduction-based 0-100 scores over a validation result, overall and per
category. Each check name belongs to one of three fixed categories:

- compliance: Apple/Spotify directory requirements
- technical: feed structure, format and metadata
- best_practices: quality and recommendations
"""

from typing import Dict, Iterable, List

from pydantic import BaseModel, Field

from ..checks.base import CheckStatus
from ..validation.feed_validator import FormattedResult, ValidationResult

COMPLIANCE = "compliance"
TECHNICAL = "technical"
BEST_PRACTICES = "best_practices"

CATEGORY_ORDER = (COMPLIANCE, TECHNICAL, BEST_PRACTICES)
DEFAULT_CATEGORY = BEST_PRACTICES

CATEGORY_MAP: Dict[str, str] = {
    # Channel checks
    "Podcast Artwork": COMPLIANCE,
    "iTunes Category": COMPLIANCE,
    "Explicit Tag": COMPLIANCE,
    "Owner Email": COMPLIANCE,
    "iTunes Author": BEST_PRACTICES,
    "Language Tag": TECHNICAL,
    "Website Link": TECHNICAL,
    "Channel Description": BEST_PRACTICES,
    # Episode checks
    "Episode Enclosure": COMPLIANCE,
    "Episode GUID": TECHNICAL,
    "Episode Publication Date": TECHNICAL,
    "Episode Duration": TECHNICAL,
    "Episode Title": BEST_PRACTICES,
    "Episode Description": BEST_PRACTICES,
}

MAX_SCORE = 100
MIN_SCORE = 0
FAIL_DEDUCTION = 10
WARN_DEDUCTION = 3


class CategoryScore(BaseModel):
    """Score and status counts for one category."""
    score: int = Field(default=MAX_SCORE, ge=MIN_SCORE, le=MAX_SCORE)
    pass_: int = Field(default=0, alias="pass")
    warn: int = 0
    fail: int = 0
    total: int = 0

    model_config = {"populate_by_name": True}


class HealthScore(BaseModel):
    """Overall score plus the three category scores, always in canonical order."""
    overall: int = Field(..., ge=MIN_SCORE, le=MAX_SCORE)
    categories: Dict[str, CategoryScore] = Field(default_factory=dict)

    def to_dict(self) -> Dict:
        return self.model_dump(by_alias=True)


def category_for(check_name: str) -> str:
    """Category of a check name; unknown names count as best practices."""
    return CATEGORY_MAP.get(check_name, DEFAULT_CATEGORY)


def calculate_score(results: Iterable[FormattedResult]) -> int:
    """100 minus 10 per fail and 3 per warn, floored at 0."""
    score = MAX_SCORE
    for result in results:
        if result.status == CheckStatus.FAIL:
            score -= FAIL_DEDUCTION
        elif result.status == CheckStatus.WARN:
            score -= WARN_DEDUCTION
    return max(MIN_SCORE, score)


class HealthScorer:
    """Turns a validation result into a HealthScore."""

    def score(self, result: ValidationResult) -> HealthScore:
        all_results = result.all_results()
        return HealthScore(
            overall=calculate_score(all_results),
            categories=self._category_scores(all_results),
        )

    @staticmethod
    def _category_scores(results: List[FormattedResult]) -> Dict[str, CategoryScore]:
        grouped: Dict[str, List[FormattedResult]] = {category: [] for category in CATEGORY_ORDER}
        for result in results:
            grouped[category_for(result.name)].append(result)

        scores = {}
        for category in CATEGORY_ORDER:
            members = grouped[category]
            statuses = [member.status for member in members]
            scores[category] = CategoryScore(
                score=calculate_score(members),
                pass_=statuses.count(CheckStatus.PASS),
                warn=statuses.count(CheckStatus.WARN),
                fail=statuses.count(CheckStatus.FAIL),
                total=len(members),
            )
        return scores
