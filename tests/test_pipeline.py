"""Tests for the decision pipeline."""

import tempfile
from datetime import datetime, timedelta, timezone

import pytest

from guardnet.activity.activity_store import ActivityStore
from guardnet.moderation.errors import EmptyInputError
from guardnet.moderation.models import BlockRule, RawVerdict, SafetyCategory, Sensitivity
from guardnet.moderation.pipeline import DecisionPipeline, ensure_text

T0 = datetime(2025, 6, 1, 12, 0, tzinfo=timezone.utc)


class FakeClassifier:
    def __init__(self, verdict=None, error=None):
        self.verdict = verdict
        self.error = error
        self.calls = []

    def classify(self, text, sensitivity):
        self.calls.append((text, sensitivity))
        if self.error is not None:
            raise self.error
        return self.verdict


SAFE_VERDICT = RawVerdict(isSafe=True, score=97, categories=["Safe"], reasoning="ok", flaggedPhrases=[])


def _pipeline(rules=(), classifier=None, now=T0, sink=None, sensitivity=Sensitivity.MODERATE):
    return DecisionPipeline(
        rule_source=lambda: list(rules),
        classifier=classifier or FakeClassifier(SAFE_VERDICT),
        sensitivity=sensitivity,
        sink=sink,
        clock=lambda: now,
    )


def test_blank_text_is_ignored():
    classifier = FakeClassifier(SAFE_VERDICT)
    pipeline = _pipeline(classifier=classifier)
    assert pipeline.analyze("") is None
    assert pipeline.analyze("   \n\t") is None
    assert classifier.calls == []


def test_local_block_skips_classifier():
    classifier = FakeClassifier(SAFE_VERDICT)
    pipeline = _pipeline([BlockRule(id="1", url_pattern="adult-example.com")], classifier)
    result = pipeline.analyze("visit adult-example.com now")
    assert result.is_safe is False
    assert result.score == 0
    assert result.categories == (SafetyCategory.ADULT,)
    assert classifier.calls == []


def test_pending_schedule_falls_through_to_classifier():
    rule = BlockRule(
        id="1",
        url_pattern="adult-example.com",
        window_start=T0,
        window_end=T0 + timedelta(milliseconds=86_400_000),
    )
    text = "visit adult-example.com now"

    classifier = FakeClassifier(SAFE_VERDICT)
    active = _pipeline([rule], classifier, now=T0 + timedelta(milliseconds=50_000)).analyze(text)
    assert active.is_safe is False
    assert classifier.calls == []

    pending = _pipeline([rule], classifier, now=T0 - timedelta(milliseconds=50_000)).analyze(text)
    assert pending.is_safe is True
    assert len(classifier.calls) == 1


def test_remote_verdict_is_normalized():
    classifier = FakeClassifier(
        RawVerdict(isSafe=False, score=10, categories=[], reasoning="bad", flaggedPhrases=["x"])
    )
    result = _pipeline(classifier=classifier).analyze("something questionable")
    assert result.categories == (SafetyCategory.ADULT,)
    assert result.score == 10
    assert result.flagged_phrases == ("x",)


def test_dict_payload_is_validated():
    classifier = FakeClassifier({"isSafe": False, "score": 20, "categories": ["hate speech"]})
    result = _pipeline(classifier=classifier).analyze("text")
    assert result.categories == (SafetyCategory.HATE_SPEECH,)


def test_classifier_error_yields_fallback():
    classifier = FakeClassifier(error=ConnectionError("network down"))
    result = _pipeline(classifier=classifier).analyze("hello there")
    assert result.is_safe is False
    assert result.score == 0
    assert result.categories == ()
    assert result.reasoning == "classification failed"
    assert result.flagged_phrases == ()


def test_malformed_payload_yields_fallback():
    classifier = FakeClassifier("definitely not json")
    result = _pipeline(classifier=classifier).analyze("hello there")
    assert result.reasoning == "classification failed"


@pytest.mark.parametrize("score", ["NaN", "Infinity", "-Infinity"])
def test_non_finite_score_yields_fallback(score):
    classifier = FakeClassifier('{"isSafe": false, "score": %s, "categories": ["Violence"]}' % score)
    result = _pipeline(classifier=classifier).analyze("hello there")
    assert result.reasoning == "classification failed"
    assert result.score == 0


def test_unvalidated_verdict_that_fails_to_normalize_yields_fallback():
    verdict = RawVerdict.model_construct(isSafe=True, score=float("nan"), categories=[], reasoning="", flaggedPhrases=[])
    result = _pipeline(classifier=FakeClassifier(verdict)).analyze("hello there")
    assert result.reasoning == "classification failed"


def test_non_finite_score_is_recorded_as_fallback():
    with tempfile.TemporaryDirectory() as tmpdir:
        store = ActivityStore(tmpdir)
        pipeline = _pipeline(classifier=FakeClassifier('{"isSafe": true, "score": NaN}'), sink=store)
        entry = pipeline.submit("hello there")
        assert entry.result.reasoning == "classification failed"
        assert store.list_logs()[0].result.score == 0
        assert store.get_stats().total_scanned == 1


def test_sensitivity_is_forwarded():
    classifier = FakeClassifier(SAFE_VERDICT)
    pipeline = _pipeline(classifier=classifier, sensitivity=Sensitivity.STRICT)
    pipeline.analyze("one")
    pipeline.analyze("two", Sensitivity.OFF)
    assert classifier.calls == [("one", Sensitivity.STRICT), ("two", Sensitivity.OFF)]


def test_submit_logs_and_counts_once():
    with tempfile.TemporaryDirectory() as tmpdir:
        store = ActivityStore(tmpdir)
        pipeline = _pipeline(
            [BlockRule(id="1", url_pattern="adult-example.com")],
            sink=store,
        )
        entry = pipeline.submit("visit adult-example.com now")
        assert entry.timestamp == T0
        assert entry.snippet == "visit adult-example.com now"

        pipeline.submit("a calm note about gardening")
        assert pipeline.submit("   ") is None

        logs = store.list_logs()
        assert [e.id for e in logs][-1] == entry.id
        assert len(logs) == 2
        stats = store.get_stats()
        assert stats.total_scanned == 2
        assert stats.blocked_count == 1
        assert stats.category_breakdown == {"Adult Content": 1}


def test_submit_without_sink_raises():
    with pytest.raises(RuntimeError):
        _pipeline().submit("text")


def test_ensure_text():
    assert ensure_text("hello") == "hello"
    for blank in ("", "  ", None):
        with pytest.raises(EmptyInputError):
            ensure_text(blank)
