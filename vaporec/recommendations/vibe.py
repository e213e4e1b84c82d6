"""
Free-text ("vibe") recommendations ranked by an LLM.

The LLM is an opaque ``(prompt) -> text`` collaborator. Any failure on that
path surfaces as ``RecommendationServiceUnavailable``; a partial or garbled
ranking is never returned and nothing is cached for a failed call.
"""
from __future__ import annotations

import json
import logging
import re
from typing import Callable, Sequence

from pydantic import BaseModel, Field, ValidationError

from ..llm.config import DEFAULT_LLM_CONFIG, LLMConfig
from ..llm.groq_client import complete as groq_complete
from .cache import cache_get, cache_set
from .models import CatalogItem, VibeRecommendation

logger = logging.getLogger(__name__)

Completion = Callable[[str], str]

SYSTEM_PROMPT = """\
You are an expert vaporizer recommender. Your goal is to help users find the \
perfect vaporizer based on their needs. You will be given a user's query and a \
list of available vaporizers, one JSON object per line.

Analyze the query to understand the user's preferences for vibe (e.g. relaxing, \
social), context (e.g. at home, on the go), scenario (e.g. gaming, hiking) and \
technical features (e.g. portability, vapor quality, price, ease of use).

Score each vaporizer from 0 to 100 based on how well it matches the query.

Return ONLY valid JSON in this exact format, without markdown code fences:
{{"recommendations": [{{"vaporizerId": <number>, "score": <number>, "reasoning": "<one or two sentences>"}}]}}
Rank from highest score to lowest. Only include the top {top_n} matches."""

_FENCE_RE = re.compile(r"```(?:json)?", re.IGNORECASE)


class RecommendationServiceUnavailable(RuntimeError):
    """The LLM-backed recommender could not produce a usable ranking."""


class _RankedPick(BaseModel):
    vaporizerId: int
    score: float
    reasoning: str = ""


class _RankedResponse(BaseModel):
    recommendations: list[_RankedPick] = Field(default_factory=list)


def serialize_item(item: CatalogItem) -> dict:
    return {
        "id": item.id,
        "name": item.name,
        "manufacturer": item.manufacturer,
        "price": item.price,
        "heatingMethod": item.heating_method,
        "tempControl": item.temp_control,
        "expertScore": item.expert_score,
        "userRating": item.user_rating,
        "bestFor": [t.name for t in item.best_for],
        "moods": [t.name for t in item.moods],
        "contexts": [t.name for t in item.contexts],
        "scenarios": [t.name for t in item.scenarios],
        "portabilityScore": item.portability_score,
        "easeOfUseScore": item.ease_of_use_score,
        "discreetnessScore": item.discreetness_score,
    }


def build_prompt(query: str, items: Sequence[CatalogItem], top_n: int) -> str:
    catalog_lines = "\n".join(json.dumps(serialize_item(item)) for item in items)
    return (
        f"{SYSTEM_PROMPT.format(top_n=top_n)}\n\n"
        f'User Query: "{query}"\n\n'
        f"Available Vaporizers:\n{catalog_lines}"
    )


def parse_response(
    content: str,
    items: Sequence[CatalogItem],
    top_n: int,
) -> list[VibeRecommendation]:
    """Parse the LLM reply into ranked picks.

    Unknown or repeated ids are dropped. Raises ``ValueError`` when the reply is
    not JSON or does not have the expected shape.
    """
    if not isinstance(content, str):
        raise ValueError(f"Expected text from the LLM, got {type(content).__name__}")
    cleaned = _FENCE_RE.sub("", content).strip()
    try:
        parsed = _RankedResponse.model_validate(json.loads(cleaned))
    except (json.JSONDecodeError, ValidationError) as exc:
        raise ValueError(f"Malformed recommendation response: {exc}") from exc

    by_id = {item.id: item for item in items}
    picks: list[VibeRecommendation] = []
    seen: set[int] = set()
    for rec in parsed.recommendations:
        item = by_id.get(rec.vaporizerId)
        if item is None or rec.vaporizerId in seen:
            continue
        seen.add(rec.vaporizerId)
        picks.append(VibeRecommendation(vaporizer=item, score=rec.score, reasoning=rec.reasoning))

    picks.sort(key=lambda p: p.score, reverse=True)
    return picks[:top_n]


def _default_completion(prompt: str) -> str:
    return groq_complete(prompt)


def recommend_by_vibe(
    query: str,
    items: Sequence[CatalogItem],
    complete: Completion = _default_completion,
    top_n: int = 5,
    config: LLMConfig = DEFAULT_LLM_CONFIG,
) -> list[VibeRecommendation]:
    """Rank *items* for a natural-language *query* using *complete*.

    Raises ``RecommendationServiceUnavailable`` on any collaborator failure or
    malformed reply.
    """
    query = query.strip()
    if not query or not items:
        return []

    cache_payload = {
        "query": query.lower(),
        "top_n": top_n,
        "catalog": [serialize_item(item) for item in items],
    }
    cached = cache_get(cache_payload)
    if cached is not None:
        return cached

    prompt = build_prompt(query, items, top_n)
    try:
        content = complete(prompt)
    except Exception as exc:
        logger.warning("Vibe recommendation call failed", exc_info=True)
        raise RecommendationServiceUnavailable(
            "Failed to get recommendations from the AI service."
        ) from exc

    try:
        picks = parse_response(content, items, top_n)
    except ValueError as exc:
        logger.warning("Vibe recommendation response unusable: %s", exc)
        raise RecommendationServiceUnavailable(
            "The AI service returned an unusable response."
        ) from exc

    cache_set(cache_payload, picks, ttl=config.cache_ttl)
    logger.debug("Vibe query %r -> %s", query, [p.vaporizer.name for p in picks])
    return picks
