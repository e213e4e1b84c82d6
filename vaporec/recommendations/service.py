from __future__ import annotations

import logging
import time
from typing import Mapping, Sequence

from .data_store import get_catalog
from .models import CatalogItem, QuizRecommendationResponse
from .quiz_mapper import map_answers_to_preferences
from .scoring import score_items
from .vocabulary import DEFAULT_VOCABULARY, Vocabulary

logger = logging.getLogger(__name__)


def recommend_by_quiz(
    raw_answers: Mapping[str, str | None],
    items: Sequence[CatalogItem] | None = None,
    limit: int | None = None,
    vocabulary: Vocabulary = DEFAULT_VOCABULARY,
) -> QuizRecommendationResponse:
    """Map quiz answers to preferences and rank the catalog against them.

    Falls back to the bundled catalog when *items* is not given. Mapping
    failures propagate as ``QuizMappingError``.
    """
    start_time = time.time()

    prefs = map_answers_to_preferences(raw_answers)
    catalog = list(items) if items is not None else get_catalog()
    results = score_items(prefs, catalog, vocabulary)
    if limit is not None:
        results = results[:limit]

    elapsed_ms = round((time.time() - start_time) * 1000, 1)
    logger.info(
        "Quiz recommendation: %d candidates, %d returned in %.1f ms",
        len(catalog),
        len(results),
        elapsed_ms,
    )
    return QuizRecommendationResponse(user_preferences=prefs, recommendations=results)
