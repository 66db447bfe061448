"""Prompt templates for the content classifier.

Each template uses ``{placeholder}`` syntax for variable substitution via
``str.format()``.
"""

from guardnet.moderation.models import Sensitivity

# ---------------------------------------------------------------------------
# System instruction
# ---------------------------------------------------------------------------

BASE_SYSTEM_PROMPT = (
    "You are a content moderation AI. Your goal is to analyze text for 18+, "
    "explicit, violent, or hateful content."
)

SENSITIVITY_POLICIES: dict[Sensitivity, str] = {
    Sensitivity.STRICT: (
        "You must be extremely strict. Flag any hint of impropriety, including "
        "mild profanity or suggestive themes."
    ),
    Sensitivity.MODERATE: (
        "Be balanced. Flag explicit adult content, severe violence, and hate "
        "speech. Allow mild slang or non-explicit context."
    ),
    Sensitivity.OFF: (
        "Analyze objectively without filtering, but accurately label the "
        "content categories."
    ),
}


def system_prompt_for(sensitivity: Sensitivity) -> str:
    return f"{BASE_SYSTEM_PROMPT} {SENSITIVITY_POLICIES[sensitivity]}"


# ---------------------------------------------------------------------------
# Classification request
# ---------------------------------------------------------------------------

CLASSIFY_PROMPT = """\
Analyze the following text and respond with a single JSON object with exactly \
these fields:

- "isSafe": boolean, whether the content is safe under standard community guidelines
- "score": number from 0 (very unsafe) to 100 (completely safe)
- "categories": array of detected categories, drawn from "Adult Content", \
"Violence", "Hate Speech", "Profanity", or "Safe"
- "reasoning": a brief explanation of why the content was flagged or marked safe
- "flaggedPhrases": array of the specific words or phrases that triggered the filter

Return ONLY the JSON object (no markdown fences, no commentary).

---
Text:
{text}
"""
