"""Pydantic models for API request/response serialization.

These models mirror the guardnet dataclasses and provide proper JSON
serialization for the FastAPI endpoints.
"""

from __future__ import annotations

from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, Field

from guardnet.moderation.models import AnalysisResult, BlockRule, LogEntry, Stats


# ---------------------------------------------------------------------------
# Scan models
# ---------------------------------------------------------------------------


class ScanRequest(BaseModel):
    """Request body for analyzing a piece of text."""

    text: str
    sensitivity: Optional[Literal["strict", "moderate", "off"]] = None


class AnalysisResultResponse(BaseModel):
    """Mirrors guardnet.moderation.models.AnalysisResult."""

    is_safe: bool
    score: int
    categories: list[str] = Field(default_factory=list)
    reasoning: str = ""
    flagged_phrases: list[str] = Field(default_factory=list)

    @classmethod
    def from_result(cls, result: AnalysisResult) -> AnalysisResultResponse:
        return cls(**result.to_dict())


class LogEntryResponse(BaseModel):
    """Mirrors guardnet.moderation.models.LogEntry."""

    id: str
    timestamp: datetime
    snippet: str
    result: AnalysisResultResponse

    @classmethod
    def from_entry(cls, entry: LogEntry) -> LogEntryResponse:
        return cls(
            id=entry.id,
            timestamp=entry.timestamp,
            snippet=entry.snippet,
            result=AnalysisResultResponse.from_result(entry.result),
        )


# ---------------------------------------------------------------------------
# Site models
# ---------------------------------------------------------------------------


class BlockRuleResponse(BaseModel):
    """Mirrors guardnet.moderation.models.BlockRule plus its current status."""

    id: str
    url: str
    category: str = ""
    block_start: Optional[datetime] = None
    block_end: Optional[datetime] = None
    status: str = ""

    @classmethod
    def from_rule(cls, rule: BlockRule, status: str) -> BlockRuleResponse:
        return cls(
            id=rule.id,
            url=rule.url_pattern,
            category=rule.category,
            block_start=rule.window_start,
            block_end=rule.window_end,
            status=status,
        )


class AddSiteRequest(BaseModel):
    """Request body for blocking a site."""

    url: str


class ImportSitesRequest(BaseModel):
    """Request body for bulk import (raw .txt / .csv content)."""

    content: str


class ImportSitesResponse(BaseModel):
    added: list[BlockRuleResponse] = Field(default_factory=list)
    count: int = 0


class ScheduleRequest(BaseModel):
    """Request body for setting (both bounds) or clearing (both null) a schedule."""

    start: Optional[datetime] = None
    end: Optional[datetime] = None


# ---------------------------------------------------------------------------
# Activity models
# ---------------------------------------------------------------------------


class StatsResponse(BaseModel):
    """Mirrors guardnet.moderation.models.Stats."""

    total_scanned: int = 0
    blocked_count: int = 0
    category_breakdown: dict[str, int] = Field(default_factory=dict)

    @classmethod
    def from_stats(cls, stats: Stats) -> StatsResponse:
        return cls(**stats.to_dict())


class LockStatusResponse(BaseModel):
    """Whether uninstall/reset is currently blocked by a running schedule."""

    locked: bool
    locked_until: Optional[datetime] = None
