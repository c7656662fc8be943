"""
SEO Scorer
==========

Heuristic discoverability score read straight from the feed document,
independent of the check results. Three analyses are weighted into the
overall score: show title (30), show description (30) and episode title
genericness (40).
"""

import re
from collections import Counter
from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from ..checks.base import CheckStatus
from ..checks.episode_checks import episode_title, is_generic_title
from ..feed.document import FeedDocument

TITLE_MIN_LENGTH = 20
TITLE_OPTIMAL_MIN = 30
TITLE_OPTIMAL_MAX = 60
TITLE_MAX_LENGTH = 70

DESC_MIN_LENGTH = 100
DESC_OPTIMAL_MIN = 250
DESC_OPTIMAL_MAX = 600
DESC_MAX_LENGTH = 4000

MAX_EPISODES = 10
KEYWORD_STUFFING_THRESHOLD = 3
KEYWORD_STUFFING_PENALTY = 20

WEIGHT_TITLE = 30
WEIGHT_DESCRIPTION = 30
WEIGHT_EPISODES = 40

# Letter runs, allowing inner apostrophes and hyphens ("don't", "how-to")
WORD_PATTERN = re.compile(r"[^\W\d_]+(?:['-][^\W\d_]+)*")


class SeoDetail(BaseModel):
    """One SEO analysis. Extra fields (``length``, ``generic_count``,
    ``total_count``) depend on the analysis."""
    score: int = Field(..., ge=0, le=100)
    status: CheckStatus
    message: str
    suggestion: Optional[str] = None

    model_config = {"extra": "allow"}


class SeoScore(BaseModel):
    overall: int = Field(..., ge=0, le=100)
    details: Dict[str, SeoDetail] = Field(default_factory=dict)

    def to_dict(self) -> Dict:
        return self.model_dump(mode="json")


def score_title_length(length: int) -> int:
    if length == 0:
        return 0
    if length < TITLE_MIN_LENGTH:
        return 40
    if length < TITLE_OPTIMAL_MIN:
        return 70
    if length <= TITLE_OPTIMAL_MAX:
        return 100
    if length <= TITLE_MAX_LENGTH:
        return 80
    return 50


def score_description_length(length: int) -> int:
    if length == 0:
        return 0
    if length < DESC_MIN_LENGTH:
        return 30
    if length < DESC_OPTIMAL_MIN:
        return 70
    if length <= DESC_OPTIMAL_MAX:
        return 100
    if length <= DESC_MAX_LENGTH:
        return 90
    return 60


def has_keyword_stuffing(title: str) -> bool:
    """True when some word appears at least 3 times in a title of 3+ words."""
    words = WORD_PATTERN.findall(title.lower())
    if len(words) < KEYWORD_STUFFING_THRESHOLD:
        return False
    return max(Counter(words).values()) >= KEYWORD_STUFFING_THRESHOLD


def weighted_overall(title_score: int, description_score: int, episode_score: int) -> int:
    weighted = (
        title_score * WEIGHT_TITLE
        + description_score * WEIGHT_DESCRIPTION
        + episode_score * WEIGHT_EPISODES
    )
    # Half-up rounding, round() would send 72.5 to 72
    total_weight = WEIGHT_TITLE + WEIGHT_DESCRIPTION + WEIGHT_EPISODES
    return int(weighted / total_weight + 0.5)


class SeoScorer:
    """Scores a feed document for search discoverability."""

    def score(self, document: FeedDocument) -> SeoScore:
        show_title = self.analyze_show_title(document)
        show_description = self.analyze_show_description(document)
        episode_titles = self.analyze_episode_titles(document)

        return SeoScore(
            overall=weighted_overall(show_title.score, show_description.score, episode_titles.score),
            details={
                "show_title": show_title,
                "show_description": show_description,
                "episode_titles": episode_titles,
            },
        )

    def analyze_show_title(self, document: FeedDocument) -> SeoDetail:
        title = document.title
        if title is None:
            return SeoDetail(
                score=0,
                status=CheckStatus.FAIL,
                message="Show title is missing.",
                suggestion="Add a descriptive title to your podcast. A good title includes "
                "relevant keywords and clearly describes your show's topic.",
                length=None,
            )

        length = len(title)
        score = score_title_length(length)

        if has_keyword_stuffing(title):
            # Penalty applies to the band score, the stuffing verdict replaces the band message
            return SeoDetail(
                score=max(0, score - KEYWORD_STUFFING_PENALTY),
                status=CheckStatus.WARN,
                message=f'Show title may contain keyword stuffing ({length} chars): "{title}".',
                suggestion="Avoid repeating the same words excessively in your title. A "
                "natural, readable title performs better in search results.",
                length=length,
            )

        if length < TITLE_MIN_LENGTH:
            status, message, suggestion = (
                CheckStatus.WARN,
                f'Show title is too short ({length} chars): "{title}".',
                "Aim for 30-60 characters. Include keywords that describe your podcast's "
                "topic to improve discoverability.",
            )
        elif length > TITLE_MAX_LENGTH:
            status, message, suggestion = (
                CheckStatus.WARN,
                f'Show title is too long ({length} chars): "{title}".',
                "Keep your title under 70 characters. Long titles get truncated in podcast "
                "directories and look cluttered.",
            )
        elif length < TITLE_OPTIMAL_MIN:
            status, message, suggestion = (
                CheckStatus.PASS,
                f'Show title is a bit short ({length} chars): "{title}".',
                "Consider expanding to 30-60 characters with descriptive keywords for better SEO.",
            )
        elif length > TITLE_OPTIMAL_MAX:
            status, message, suggestion = (
                CheckStatus.PASS,
                f'Show title is slightly long ({length} chars): "{title}".',
                "Consider shortening to 30-60 characters. Concise titles are easier to read "
                "in podcast apps.",
            )
        else:
            status, message, suggestion = (
                CheckStatus.PASS,
                f'Show title length is optimal ({length} chars): "{title}".',
                None,
            )

        return SeoDetail(
            score=score, status=status, message=message, suggestion=suggestion, length=length
        )

    def analyze_show_description(self, document: FeedDocument) -> SeoDetail:
        channel = document.channel
        description = channel.description_text() if channel is not None else None
        if description is None:
            return SeoDetail(
                score=0,
                status=CheckStatus.FAIL,
                message="Show description is missing.",
                suggestion="Add a description to your podcast. Use 250-600 characters that "
                "clearly explain what your show is about and include relevant keywords.",
                length=None,
            )

        length = len(description)
        score = score_description_length(length)

        if length < DESC_MIN_LENGTH:
            status, message, suggestion = (
                CheckStatus.WARN,
                f"Show description is too short ({length} chars).",
                "Expand your description to at least 250 characters. Include what the show "
                "covers, who it's for, and relevant keywords for search discoverability.",
            )
        elif length > DESC_MAX_LENGTH:
            status, message, suggestion = (
                CheckStatus.WARN,
                f"Show description is excessively long ({length} chars).",
                "Shorten your description to under 4000 characters. Apple Podcasts may "
                "truncate very long descriptions. Put the most important information first.",
            )
        elif length < DESC_OPTIMAL_MIN:
            status, message, suggestion = (
                CheckStatus.PASS,
                f"Show description could be more detailed ({length} chars).",
                "Consider expanding to 250-600 characters. Describe your show's topics, "
                "audience, and what makes it unique.",
            )
        elif length > DESC_OPTIMAL_MAX:
            status, message, suggestion = (
                CheckStatus.PASS,
                f"Show description is detailed ({length} chars).",
                None,
            )
        else:
            status, message, suggestion = (
                CheckStatus.PASS,
                f"Show description length is optimal ({length} chars).",
                None,
            )

        return SeoDetail(
            score=score, status=status, message=message, suggestion=suggestion, length=length
        )

    def analyze_episode_titles(self, document: FeedDocument) -> SeoDetail:
        titles = self._sample_titles(document)
        total = len(titles)

        if total == 0:
            return SeoDetail(
                score=100,
                status=CheckStatus.PASS,
                message="No episodes to analyze.",
                generic_count=0,
                total_count=0,
            )

        generic = sum(1 for title in titles if is_generic_title(title))

        if generic == 0:
            return SeoDetail(
                score=100,
                status=CheckStatus.PASS,
                message=f"All {total} episode titles are descriptive.",
                generic_count=0,
                total_count=total,
            )

        score = int((total - generic) / total * 100 + 0.5)

        if generic == total:
            return SeoDetail(
                score=score,
                status=CheckStatus.FAIL,
                message=f'All {total} episode titles are generic (e.g., "Episode 1").',
                suggestion='Use descriptive episode titles that include topic keywords. For '
                'example, "How to Start Investing in 2025" performs much better than '
                '"Episode 12" in search results.',
                generic_count=generic,
                total_count=total,
            )

        return SeoDetail(
            score=score,
            status=CheckStatus.WARN,
            message=f"{generic} of {total} episode titles are generic.",
            suggestion='Replace generic titles like "Episode 5" with descriptive titles that '
            "include topic keywords. Descriptive titles improve discoverability in podcast "
            "search.",
            generic_count=generic,
            total_count=total,
        )

    @staticmethod
    def _sample_titles(document: FeedDocument) -> List[str]:
        """Up to MAX_EPISODES non-empty episode titles in document order."""
        titles = []
        for item in document.episodes():
            title = episode_title(item)
            if title is not None:
                titles.append(title)
                if len(titles) >= MAX_EPISODES:
                    break
        return titles
