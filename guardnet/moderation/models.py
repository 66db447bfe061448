"""Data models for the content moderation pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, Field


class SafetyCategory(Enum):
    """Closed taxonomy every verdict is normalized into."""

    ADULT = "Adult Content"
    VIOLENCE = "Violence"
    HATE_SPEECH = "Hate Speech"
    PROFANITY = "Profanity"
    SAFE = "Safe"


class Sensitivity(Enum):
    """Filter level forwarded to the remote classifier."""

    STRICT = "strict"
    MODERATE = "moderate"
    OFF = "off"


# ---------------------------------------------------------------------------
# Instant helpers
# ---------------------------------------------------------------------------


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(value: datetime) -> datetime:
    """Return *value* as an aware UTC datetime (naive values are taken as UTC)."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def parse_instant(value: Optional[str]) -> Optional[datetime]:
    if not value:
        return None
    return as_utc(datetime.fromisoformat(value))


def format_instant(value: Optional[datetime]) -> Optional[str]:
    return as_utc(value).isoformat() if value is not None else None


# ---------------------------------------------------------------------------
# Block rules
# ---------------------------------------------------------------------------


@dataclass
class BlockRule:
    """A blocked domain or keyword with an optional active window.

    ``window_start`` and ``window_end`` are either both set (a schedule) or
    both ``None`` (permanent block).
    """

    id: str
    url_pattern: str
    category: str = "Custom Block"
    window_start: Optional[datetime] = None
    window_end: Optional[datetime] = None

    @property
    def has_schedule(self) -> bool:
        return self.window_start is not None and self.window_end is not None

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "url": self.url_pattern,
            "category": self.category,
            "block_start": format_instant(self.window_start),
            "block_end": format_instant(self.window_end),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> BlockRule:
        return cls(
            id=str(data["id"]),
            url_pattern=data["url"],
            category=data.get("category", "Custom Block"),
            window_start=parse_instant(data.get("block_start")),
            window_end=parse_instant(data.get("block_end")),
        )


# ---------------------------------------------------------------------------
# Verdicts
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class AnalysisResult:
    """The normalized verdict for one submission.

    ``score`` runs from 0 (very unsafe) to 100 (completely safe).
    ``categories`` is empty only for the classification-failure fallback.
    """

    is_safe: bool
    score: int
    categories: tuple[SafetyCategory, ...] = ()
    reasoning: str = ""
    flagged_phrases: tuple[str, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {
            "is_safe": self.is_safe,
            "score": self.score,
            "categories": [c.value for c in self.categories],
            "reasoning": self.reasoning,
            "flagged_phrases": list(self.flagged_phrases),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> AnalysisResult:
        return cls(
            is_safe=bool(data["is_safe"]),
            score=int(data.get("score", 0)),
            categories=tuple(SafetyCategory(c) for c in data.get("categories", [])),
            reasoning=data.get("reasoning", ""),
            flagged_phrases=tuple(data.get("flagged_phrases", [])),
        )


class RawVerdict(BaseModel):
    """Validated payload returned by the external classifier."""

    isSafe: bool
    score: float = Field(allow_inf_nan=False)
    categories: list[str] = Field(default_factory=list)
    reasoning: str = ""
    flaggedPhrases: list[str] = Field(default_factory=list)


# ---------------------------------------------------------------------------
# Activity
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class LogEntry:
    """A single recorded submission."""

    id: str
    timestamp: datetime
    snippet: str  # first 50 chars, "..." appended when truncated
    result: AnalysisResult

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "timestamp": format_instant(self.timestamp),
            "snippet": self.snippet,
            "result": self.result.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> LogEntry:
        return cls(
            id=data["id"],
            timestamp=parse_instant(data["timestamp"]),
            snippet=data.get("snippet", ""),
            result=AnalysisResult.from_dict(data["result"]),
        )


@dataclass(frozen=True)
class Stats:
    """Cumulative counters over every completed submission."""

    total_scanned: int = 0
    blocked_count: int = 0
    category_breakdown: dict[str, int] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "total_scanned": self.total_scanned,
            "blocked_count": self.blocked_count,
            "category_breakdown": dict(self.category_breakdown),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Stats:
        return cls(
            total_scanned=int(data.get("total_scanned", 0)),
            blocked_count=int(data.get("blocked_count", 0)),
            category_breakdown={
                str(k): int(v) for k, v in data.get("category_breakdown", {}).items()
            },
        )
