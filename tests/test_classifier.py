"""Tests for the LLM-backed classifier (no network)."""

import anthropic
import httpx
import pytest

from guardnet.llm.classifier import LLMClassifier
from guardnet.llm.client import DEFAULT_MODEL, LLMClient
from guardnet.llm.prompts import SENSITIVITY_POLICIES, system_prompt_for
from guardnet.moderation.errors import ClassificationError
from guardnet.moderation.models import Sensitivity


class FakeClient:
    def __init__(self, content="", error=None, configured=True):
        self.content = content
        self.error = error
        self.configured = configured
        self.calls = []

    def complete(self, prompt, system_prompt=None, **kwargs):
        self.calls.append((prompt, system_prompt))
        if self.error is not None:
            raise self.error
        return self.content


def test_classify_parses_json_reply():
    client = FakeClient(
        '{"isSafe": false, "score": 12, "categories": ["Violence"], '
        '"reasoning": "threat", "flaggedPhrases": ["hurt"]}'
    )
    raw = LLMClassifier(client).classify("I will hurt you", Sensitivity.STRICT)
    assert raw.isSafe is False
    assert raw.categories == ["Violence"]

    prompt, system = client.calls[0]
    assert "I will hurt you" in prompt
    assert SENSITIVITY_POLICIES[Sensitivity.STRICT] in system


def test_system_prompt_differs_by_sensitivity():
    prompts = {system_prompt_for(s) for s in Sensitivity}
    assert len(prompts) == 3


def test_unconfigured_client_raises():
    client = FakeClient(configured=False)
    with pytest.raises(ClassificationError):
        LLMClassifier(client).classify("hello", Sensitivity.MODERATE)
    assert client.calls == []


def test_api_error_becomes_classification_error():
    request = httpx.Request("POST", "https://api.anthropic.com/v1/messages")
    client = FakeClient(error=anthropic.APIConnectionError(request=request))
    with pytest.raises(ClassificationError):
        LLMClassifier(client).classify("hello", Sensitivity.MODERATE)


@pytest.mark.parametrize("content", ["", "I think it is fine.", '{"isSafe": "perhaps"}'])
def test_bad_reply_raises(content):
    with pytest.raises(ClassificationError):
        LLMClassifier(FakeClient(content)).classify("hello", Sensitivity.OFF)


def test_llm_client_without_key(monkeypatch):
    monkeypatch.delenv("ANTHROPIC_API_KEY", raising=False)
    client = LLMClient()
    assert not client.configured
    assert client.model == DEFAULT_MODEL
    with pytest.raises(RuntimeError):
        client.complete("hi", system_prompt="sys")
