"""GuardianNet LLM integration module.

Provides a thin wrapper around the Anthropic API and the content classifier
built on top of it.
"""

from guardnet.llm.classifier import LLMClassifier
from guardnet.llm.client import LLMClient

__all__ = [
    "LLMClassifier",
    "LLMClient",
]
