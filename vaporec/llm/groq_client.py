from __future__ import annotations

import logging

from groq import Groq

from .config import DEFAULT_LLM_CONFIG, LLMConfig

logger = logging.getLogger(__name__)


class LLMServiceError(RuntimeError):
    """The completion service is disabled, unconfigured or failed."""


def complete(
    prompt: str,
    system: str | None = None,
    config: LLMConfig = DEFAULT_LLM_CONFIG,
) -> str:
    """
    Send *prompt* (and an optional system message) to Groq and return the text.

    Raises ``LLMServiceError`` when the client is disabled or has no API key,
    and when the call fails or comes back empty.
    """
    if not config.enabled:
        raise LLMServiceError("LLM calls are disabled")
    if not config.api_key:
        raise LLMServiceError("GROQ_API_KEY is not set")

    messages = []
    if system:
        messages.append({"role": "system", "content": system})
    messages.append({"role": "user", "content": prompt})

    try:
        client = Groq(api_key=config.api_key, timeout=config.timeout)
        response = client.chat.completions.create(
            model=config.model,
            messages=messages,
            max_tokens=config.max_tokens,
            temperature=config.temperature,
        )
        content = response.choices[0].message.content or ""
    except Exception as exc:
        logger.warning("Groq completion failed", exc_info=True)
        raise LLMServiceError(f"Groq completion failed: {exc}") from exc

    if not content.strip():
        raise LLMServiceError("Groq returned an empty completion")
    return content
