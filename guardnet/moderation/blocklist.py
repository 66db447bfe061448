"""Local block-list matching.

Runs before the remote classifier; a hit produces a final verdict on the
spot and the classifier is never consulted.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Optional, Sequence

from guardnet.moderation.models import AnalysisResult, BlockRule, SafetyCategory, as_utc
from guardnet.moderation.schedule import schedule_status

logger = logging.getLogger(__name__)


def format_block_end(end: datetime) -> str:
    return as_utc(end).strftime("%Y-%m-%d %H:%M UTC")


def _block_result(rule: BlockRule) -> AnalysisResult:
    if rule.has_schedule:
        reasoning = (
            f"Access to '{rule.url_pattern}' is restricted by schedule "
            f"until {format_block_end(rule.window_end)}."
        )
    else:
        reasoning = f"Access to '{rule.url_pattern}' is permanently restricted by the Block List."

    # The matcher does not categorize; every local block is reported as adult content.
    return AnalysisResult(
        is_safe=False,
        score=0,
        categories=(SafetyCategory.ADULT,),
        reasoning=reasoning,
        flagged_phrases=(rule.url_pattern,),
    )


def match_blocklist(
    text: str, rules: Sequence[BlockRule], now: datetime
) -> Optional[AnalysisResult]:
    """Return a blocking verdict for the first rule that applies to *text*.

    Rules are tried in list order.  A rule applies when its pattern occurs in
    the text (case-insensitively) and its schedule is permanent or active.
    Pending and expired rules are skipped so the text can fall through to
    the remote classifier.  Returns None when no rule applies.
    """
    lowered = text.lower()
    for rule in rules:
        if rule.url_pattern.lower() not in lowered:
            continue
        status = schedule_status(rule, now)
        if not status.blocks:
            logger.debug("rule %s matched but is %s, skipping", rule.id, status.value)
            continue
        logger.info("blocked by local rule %s (%s)", rule.id, rule.url_pattern)
        return _block_result(rule)
    return None
