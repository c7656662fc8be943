"""
Base Check Interface
===================

Abstract base class and result value types shared by every feed check.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Dict, Any

from ..feed.document import FeedNode


class CheckStatus(str, Enum):
    """Outcome of a single check."""
    PASS = "pass"
    WARN = "warn"
    FAIL = "fail"


class Severity(str, Enum):
    """How much a failing check matters to directory listing."""
    ERROR = "error"
    WARNING = "warning"
    INFO = "info"


@dataclass(frozen=True)
class CheckResult:
    """Verdict of one check run. ``suggestion`` is None only for passes."""
    status: CheckStatus
    message: str
    suggestion: Optional[str] = None

    @classmethod
    def pass_(cls, message: str) -> "CheckResult":
        return cls(CheckStatus.PASS, message)

    @classmethod
    def warn(cls, message: str, suggestion: str) -> "CheckResult":
        return cls(CheckStatus.WARN, message, suggestion)

    @classmethod
    def fail(cls, message: str, suggestion: str) -> "CheckResult":
        return cls(CheckStatus.FAIL, message, suggestion)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "status": self.status.value,
            "message": self.message,
            "suggestion": self.suggestion,
        }


class Check(ABC):
    """One independent validation rule."""

    @abstractmethod
    def name(self) -> str:
        """Display name, also the key used for health score categories."""
        pass

    @abstractmethod
    def severity(self) -> Severity:
        pass

    @abstractmethod
    def run(self, node: FeedNode) -> CheckResult:
        """Evaluate the rule against a feed node.

        Args:
            node: Channel-level node for channel checks, an ``<item>`` or
                ``<entry>`` node for episode checks

        Returns:
            CheckResult. Checks never raise for missing or malformed data.
        """
        pass

    def reset(self) -> None:
        """Clear per-run state. Stateless checks have nothing to clear."""


class ChannelCheck(Check):
    """Check evaluated once per feed against the channel element.

    ``run`` accepts any node of the document and resolves the channel itself
    (``<rss><channel>`` or the Atom ``<feed>`` root), so subclasses only deal
    with ``evaluate``.
    """

    def run(self, node: FeedNode) -> CheckResult:
        return self.evaluate(node.document.channel)

    @abstractmethod
    def evaluate(self, channel: Optional[FeedNode]) -> CheckResult:
        pass
