"""Remote content classifier backed by :class:`LLMClient`."""

from __future__ import annotations

import logging

import anthropic

from guardnet.llm.client import LLMClient
from guardnet.llm.prompts import CLASSIFY_PROMPT, system_prompt_for
from guardnet.moderation.errors import ClassificationError
from guardnet.moderation.models import RawVerdict, Sensitivity
from guardnet.moderation.normalizer import parse_verdict

logger = logging.getLogger(__name__)


class LLMClassifier:
    """Asks the LLM for a JSON verdict and validates it.

    Every failure, from a missing API key to a malformed reply, surfaces as
    :class:`ClassificationError`.
    """

    def __init__(self, client: LLMClient | None = None) -> None:
        self._client = client or LLMClient()

    @property
    def configured(self) -> bool:
        return self._client.configured

    def classify(self, text: str, sensitivity: Sensitivity) -> RawVerdict:
        if not self._client.configured:
            raise ClassificationError("LLM not configured. Set ANTHROPIC_API_KEY.")

        try:
            reply = self._client.complete(
                CLASSIFY_PROMPT.format(text=text),
                system_prompt=system_prompt_for(sensitivity),
            )
        except anthropic.APIError as exc:
            raise ClassificationError(f"Classifier request failed: {exc}") from exc

        logger.debug("classifier replied with %d chars for a %d char submission", len(reply), len(text))
        return parse_verdict(reply)
