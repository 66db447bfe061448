"""Tests for classifier output normalization."""

import pytest

from guardnet.moderation.errors import ClassificationError
from guardnet.moderation.models import RawVerdict, SafetyCategory
from guardnet.moderation.normalizer import (
    FALLBACK_REASONING,
    fallback_result,
    normalize,
    normalize_category,
    parse_verdict,
)


def _raw(**overrides):
    data = {
        "isSafe": False,
        "score": 10,
        "categories": [],
        "reasoning": "test",
        "flaggedPhrases": [],
    }
    data.update(overrides)
    return RawVerdict(**data)


@pytest.mark.parametrize(
    "label, expected",
    [
        ("Adult Content", SafetyCategory.ADULT),
        ("sexual themes", SafetyCategory.ADULT),
        ("Graphic Violence", SafetyCategory.VIOLENCE),
        ("violent", SafetyCategory.VIOLENCE),
        ("HATE SPEECH", SafetyCategory.HATE_SPEECH),
        ("Profanity", SafetyCategory.PROFANITY),
        ("profane language", SafetyCategory.PROFANITY),
        ("Gambling", SafetyCategory.SAFE),
        ("Safe", SafetyCategory.SAFE),
    ],
)
def test_normalize_category(label, expected):
    assert normalize_category(label) == expected


def test_category_precedence():
    # "adult" wins over "violen", "violen" over "hate"
    assert normalize_category("adult violence") == SafetyCategory.ADULT
    assert normalize_category("hateful violence") == SafetyCategory.VIOLENCE
    assert normalize_category("hate and profanity") == SafetyCategory.HATE_SPEECH


def test_unsafe_without_categories_defaults_to_adult():
    result = normalize(_raw(isSafe=False, categories=[], score=10))
    assert result.categories == (SafetyCategory.ADULT,)
    assert result.score == 10


def test_unsafe_with_only_unknown_categories_defaults_to_adult():
    result = normalize(_raw(isSafe=False, categories=["Gambling", "Safe"]))
    assert result.categories == (SafetyCategory.ADULT,)


def test_safe_verdict_reports_safe():
    result = normalize(_raw(isSafe=True, score=95, categories=["Safe"]))
    assert result.is_safe
    assert result.categories == (SafetyCategory.SAFE,)


def test_safe_filtered_out_and_duplicates_collapsed():
    result = normalize(_raw(categories=["Safe", "Violence", "violent acts", "Hate"]))
    assert result.categories == (SafetyCategory.VIOLENCE, SafetyCategory.HATE_SPEECH)


def test_inconsistent_score_is_passed_through():
    result = normalize(_raw(isSafe=True, score=5, categories=[]))
    assert result.is_safe
    assert result.score == 5


def test_passthrough_fields():
    result = normalize(_raw(reasoning="why", flaggedPhrases=["x", "y"], score=42.4))
    assert result.reasoning == "why"
    assert result.flagged_phrases == ("x", "y")
    assert result.score == 42


def test_fallback_result():
    result = fallback_result()
    assert result.is_safe is False
    assert result.score == 0
    assert result.categories == ()
    assert result.reasoning == FALLBACK_REASONING
    assert result.flagged_phrases == ()


def test_parse_verdict_from_json_text():
    raw = parse_verdict(
        '{"isSafe": true, "score": 90, "categories": ["Safe"], '
        '"reasoning": "fine", "flaggedPhrases": []}'
    )
    assert raw.isSafe is True
    assert raw.score == 90


def test_parse_verdict_tolerates_code_fences():
    raw = parse_verdict('```json\n{"isSafe": false, "score": 3, "categories": ["Violence"]}\n```')
    assert raw.categories == ["Violence"]


@pytest.mark.parametrize(
    "payload",
    ["", "   ", "not json", "[1, 2]", "{}", '{"score": 10}', {"isSafe": "maybe", "score": 1}, None],
)
def test_parse_verdict_rejects_bad_payloads(payload):
    with pytest.raises(ClassificationError):
        parse_verdict(payload)


@pytest.mark.parametrize(
    "payload",
    [
        '{"isSafe": false, "score": NaN, "categories": []}',
        '{"isSafe": false, "score": Infinity}',
        '{"isSafe": true, "score": -Infinity}',
        {"isSafe": True, "score": float("nan")},
    ],
)
def test_parse_verdict_rejects_non_finite_scores(payload):
    with pytest.raises(ClassificationError):
        parse_verdict(payload)
