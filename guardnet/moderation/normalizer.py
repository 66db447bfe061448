"""Normalization of free-form classifier output.

The remote classifier answers with arbitrary category labels.  They are
folded into :class:`SafetyCategory` by substring heuristics whose order
matters: adult > violence > hate > profanity > safe.
"""

from __future__ import annotations

import json
from typing import Any

from pydantic import ValidationError

from guardnet.moderation.errors import ClassificationError
from guardnet.moderation.models import AnalysisResult, RawVerdict, SafetyCategory

FALLBACK_REASONING = "classification failed"

_CATEGORY_MARKERS: list[tuple[tuple[str, ...], SafetyCategory]] = [
    (("adult", "sexual"), SafetyCategory.ADULT),
    (("violen",), SafetyCategory.VIOLENCE),
    (("hate",), SafetyCategory.HATE_SPEECH),
    (("profan",), SafetyCategory.PROFANITY),
]


def normalize_category(label: str) -> SafetyCategory:
    """Map a single free-text label onto the fixed taxonomy."""
    lowered = label.lower()
    for markers, category in _CATEGORY_MARKERS:
        if any(m in lowered for m in markers):
            return category
    return SafetyCategory.SAFE


def normalize(raw: RawVerdict) -> AnalysisResult:
    """Reconcile a raw classifier verdict into an :class:`AnalysisResult`.

    Safe labels are dropped from the flagged set.  An unsafe verdict that
    ends up with no categories gets ``Adult Content``; anything still empty
    afterwards is reported as ``Safe``.  Score, reasoning and flagged phrases
    are passed through as given, even if the score disagrees with ``isSafe``.
    """
    categories: list[SafetyCategory] = []
    for label in raw.categories:
        category = normalize_category(label)
        if category is not SafetyCategory.SAFE and category not in categories:
            categories.append(category)

    if not raw.isSafe and not categories:
        categories.append(SafetyCategory.ADULT)
    if not categories:
        categories.append(SafetyCategory.SAFE)

    return AnalysisResult(
        is_safe=raw.isSafe,
        score=int(round(raw.score)),
        categories=tuple(categories),
        reasoning=raw.reasoning,
        flagged_phrases=tuple(raw.flaggedPhrases),
    )


def fallback_result() -> AnalysisResult:
    """Conservative verdict used whenever classification fails."""
    return AnalysisResult(
        is_safe=False,
        score=0,
        categories=(),
        reasoning=FALLBACK_REASONING,
        flagged_phrases=(),
    )


def _strip_fences(text: str) -> str:
    text = text.strip()
    if text.startswith("```"):
        text = text.split("\n", 1)[1] if "\n" in text else ""
        if text.rstrip().endswith("```"):
            text = text.rstrip()[:-3]
    return text.strip()


def parse_verdict(payload: Any) -> RawVerdict:
    """Validate a classifier payload (JSON text or decoded mapping).

    Raises :class:`ClassificationError` for empty, non-JSON or malformed data.
    """
    if isinstance(payload, str):
        body = _strip_fences(payload)
        if not body:
            raise ClassificationError("Classifier returned an empty response.")
        try:
            payload = json.loads(body)
        except json.JSONDecodeError as exc:
            raise ClassificationError(f"Classifier response is not JSON: {exc}") from exc

    if not isinstance(payload, dict) or not payload:
        raise ClassificationError("Classifier response is not a JSON object.")

    try:
        return RawVerdict.model_validate(payload)
    except ValidationError as exc:
        raise ClassificationError(f"Classifier response failed validation: {exc}") from exc
