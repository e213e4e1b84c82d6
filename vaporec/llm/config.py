from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

# Load .env from project root
load_dotenv(Path(__file__).resolve().parent.parent.parent / ".env")


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    return float(raw) if raw else default


def _env_flag(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or raw == "":
        return default
    return raw.strip().lower() not in {"0", "false", "no", "off"}


@dataclass(frozen=True)
class LLMConfig:
    """
    Groq settings for vibe ranking.

    Every field can be set from the environment (or ``.env``):
    ``GROQ_API_KEY``, ``VAPOREC_LLM_MODEL``, ``VAPOREC_LLM_TIMEOUT``,
    ``VAPOREC_LLM_ENABLED`` and ``VAPOREC_VIBE_CACHE_TTL`` (seconds).
    """

    api_key: str = os.getenv("GROQ_API_KEY", "")
    model: str = os.getenv("VAPOREC_LLM_MODEL", "llama-3.3-70b-versatile")
    timeout: float = _env_float("VAPOREC_LLM_TIMEOUT", 10.0)
    max_tokens: int = 1024
    temperature: float = 0.3
    enabled: bool = _env_flag("VAPOREC_LLM_ENABLED", True)
    cache_ttl: float = _env_float("VAPOREC_VIBE_CACHE_TTL", 300.0)


DEFAULT_LLM_CONFIG = LLMConfig()
