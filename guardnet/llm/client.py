"""Anthropic client used by the content classifier.

A missing API key leaves the client unconfigured instead of failing at
construction time, so the rest of the app still starts.
"""

from __future__ import annotations

import os

import anthropic

DEFAULT_MODEL = "claude-haiku-4-5-20251001"


class LLMClient:
    """Sends single-turn classification prompts to Claude.

    Parameters
    ----------
    model : str
        Model identifier to use.
    api_key : str | None
        Anthropic API key.  Falls back to ``ANTHROPIC_API_KEY`` when *None*.
    timeout : float
        Per-request timeout in seconds.
    """

    def __init__(
        self,
        model: str = DEFAULT_MODEL,
        api_key: str | None = None,
        timeout: float = 30.0,
    ) -> None:
        self.model = model
        self.api_key = api_key or os.environ.get("ANTHROPIC_API_KEY", "")
        self._client = anthropic.Anthropic(api_key=self.api_key, timeout=timeout) if self.api_key else None

    @property
    def configured(self) -> bool:
        return self._client is not None

    def complete(self, prompt: str, system_prompt: str, max_tokens: int = 512) -> str:
        """Return the text of the model's reply to *prompt*.

        Raises :class:`RuntimeError` when no API key is configured; SDK
        errors propagate unchanged.
        """
        if self._client is None:
            raise RuntimeError("LLM not configured. Set ANTHROPIC_API_KEY.")

        message = self._client.messages.create(
            model=self.model,
            max_tokens=max_tokens,
            temperature=0.0,
            system=system_prompt,
            messages=[{"role": "user", "content": prompt}],
        )
        return "".join(block.text for block in message.content if block.type == "text")
