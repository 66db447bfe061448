"""Folding of verdicts into running statistics."""

from __future__ import annotations

from guardnet.moderation.models import AnalysisResult, Stats


def absorb(stats: Stats, result: AnalysisResult) -> Stats:
    """Return a new :class:`Stats` with *result* counted in.

    Only unsafe results contribute to the category breakdown.
    """
    breakdown = dict(stats.category_breakdown)
    if not result.is_safe:
        for category in result.categories:
            breakdown[category.value] = breakdown.get(category.value, 0) + 1

    return Stats(
        total_scanned=stats.total_scanned + 1,
        blocked_count=stats.blocked_count + (0 if result.is_safe else 1),
        category_breakdown=breakdown,
    )


def reset_stats() -> Stats:
    return Stats()
