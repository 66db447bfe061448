"""Decision pipeline: one verdict per submission.

Flow per submission::

    text -> block list ─(hit)──────────────────────────────> result
                       └(miss)─> classifier -> normalizer ─> result
                                     └(error)─> fallback ──> result

The resulting verdict is handed to an activity sink, which appends the log
entry and folds the statistics in a single step.
"""

from __future__ import annotations

import logging
import threading
from datetime import datetime
from typing import Any, Callable, Optional, Protocol, Sequence

from guardnet.moderation.blocklist import match_blocklist
from guardnet.moderation.errors import EmptyInputError
from guardnet.moderation.models import (
    AnalysisResult,
    BlockRule,
    LogEntry,
    RawVerdict,
    Sensitivity,
    utcnow,
)
from guardnet.moderation.normalizer import fallback_result, normalize, parse_verdict

logger = logging.getLogger(__name__)


def ensure_text(text: Optional[str]) -> str:
    """Raise :class:`EmptyInputError` for blank submissions."""
    if not text or not text.strip():
        raise EmptyInputError("Content is empty")
    return text


class Classifier(Protocol):
    """The remote classification capability."""

    def classify(self, text: str, sensitivity: Sensitivity) -> Any: ...


class ActivitySink(Protocol):
    """Receives each completed verdict (log append + stats fold together)."""

    def record(self, text: str, result: AnalysisResult, now: Optional[datetime] = None) -> LogEntry: ...


class DecisionPipeline:
    """Orchestrates local matching, remote classification and normalization.

    Parameters
    ----------
    rule_source : callable
        Returns the current block rules; called once per submission and the
        returned sequence is copied before matching.
    classifier : Classifier
        Remote capability.  Any exception it raises is absorbed into the
        fallback verdict.
    sensitivity : Sensitivity
        Default filter level forwarded to the classifier.
    sink : ActivitySink | None
        Where :meth:`submit` records verdicts.
    clock : callable
        Source of the current instant.
    """

    def __init__(
        self,
        rule_source: Callable[[], Sequence[BlockRule]],
        classifier: Classifier,
        sensitivity: Sensitivity = Sensitivity.MODERATE,
        sink: Optional[ActivitySink] = None,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self._rule_source = rule_source
        self._classifier = classifier
        self.sensitivity = sensitivity
        self._sink = sink
        self._clock = clock
        self._lock = threading.Lock()

    # -- stages --------------------------------------------------------------

    def _classify(self, text: str, sensitivity: Sensitivity) -> AnalysisResult:
        try:
            raw = self._classifier.classify(text, sensitivity)
            if not isinstance(raw, RawVerdict):
                raw = parse_verdict(raw)
            return normalize(raw)
        except Exception as exc:
            logger.warning("classification failed: %s", exc, exc_info=True)
            return fallback_result()

    # -- public API ----------------------------------------------------------

    def analyze(
        self, text: str, sensitivity: Optional[Sensitivity] = None
    ) -> Optional[AnalysisResult]:
        """Return the verdict for *text*, or None if the text is blank."""
        try:
            ensure_text(text)
        except EmptyInputError:
            return None

        rules = list(self._rule_source())
        local = match_blocklist(text, rules, self._clock())
        if local is not None:
            return local

        return self._classify(text, sensitivity or self.sensitivity)

    def submit(
        self, text: str, sensitivity: Optional[Sensitivity] = None
    ) -> Optional[LogEntry]:
        """Analyze *text* and record the verdict with the activity sink.

        Submissions are serialized; blank text is ignored and returns None.
        """
        if self._sink is None:
            raise RuntimeError("DecisionPipeline.submit requires an activity sink")

        with self._lock:
            result = self.analyze(text, sensitivity)
            if result is None:
                return None
            return self._sink.record(text, result, self._clock())
