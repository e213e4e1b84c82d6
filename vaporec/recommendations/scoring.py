"""
Scoring engine.

Every category computes a sub-score on the 0-10 scale and is rescaled to its
weight (``sub_score * weight / 10``). A category whose preference is absent is
skipped: it adds nothing to either the achieved total or the possible total.

=====================  ======
Category               Weight
=====================  ======
Budget                 10
Heating Method         10
Temperature Control    10
Delivery Method        10
Mood                   10
Context                10
Experience Level       10
Portability            10
Discreetness           10
=====================  ======
"""
from __future__ import annotations

import logging
from types import MappingProxyType
from typing import Iterable, Mapping

from .matching import (
    SUB_SCALE,
    item_experience_levels,
    normalize_user_level,
    score_budget_match,
    score_categorical_match,
    score_experience_match,
    score_experience_tags,
    score_heating_method_match,
    score_importance_based_attribute,
    score_temp_control_match,
)
from .models import (
    CatalogItem,
    MatchDetail,
    RecommendationResult,
    TempControlImportance,
    UserPreferences,
)
from .vocabulary import DEFAULT_VOCABULARY, Vocabulary

logger = logging.getLogger(__name__)

CATEGORY_WEIGHTS: Mapping[str, float] = MappingProxyType({
    "Budget": 10.0,
    "Heating Method": 10.0,
    "Temperature Control": 10.0,
    "Delivery Method": 10.0,
    "Mood": 10.0,
    "Context": 10.0,
    "Experience Level": 10.0,
    "Portability": 10.0,
    "Discreetness": 10.0,
})


def _fmt(value) -> str:
    if value is None:
        return "n/a"
    value = getattr(value, "value", value)
    if isinstance(value, float):
        return str(int(value)) if value.is_integer() else f"{value:.2f}"
    return str(value)


def _names(tags) -> str:
    return ", ".join(t.name for t in tags) or "none"


def _detail(category: str, sub_score: float, details: str) -> MatchDetail:
    weight = CATEGORY_WEIGHTS[category]
    return MatchDetail(
        category=category,
        score=sub_score * weight / SUB_SCALE,
        max_score=weight,
        details=details,
    )


def _effective_temp_importance(prefs: UserPreferences) -> TempControlImportance | None:
    if prefs.temp_control_importance is not None:
        return prefs.temp_control_importance
    # A literal control preference without a stated importance counts as a strong one.
    if prefs.temp_control_preference is not None:
        return TempControlImportance.very_important
    return None


def score_item(
    prefs: UserPreferences,
    item: CatalogItem,
    vocabulary: Vocabulary = DEFAULT_VOCABULARY,
) -> RecommendationResult:
    """Score one catalog item against *prefs* and explain each category."""
    details: list[MatchDetail] = []

    if prefs.min_budget is not None and prefs.max_budget is not None:
        details.append(_detail(
            "Budget",
            score_budget_match(prefs.min_budget, prefs.max_budget, item.price),
            f"${_fmt(item.price)} vs. ${_fmt(prefs.min_budget)}-${_fmt(prefs.max_budget)}",
        ))

    if prefs.heating_method_preference is not None:
        details.append(_detail(
            "Heating Method",
            score_heating_method_match(prefs.heating_method_preference, item.heating_method),
            f"{_fmt(item.heating_method)} vs. {_fmt(prefs.heating_method_preference)}",
        ))

    importance = _effective_temp_importance(prefs)
    if importance is not None:
        details.append(_detail(
            "Temperature Control",
            score_temp_control_match(importance, item.temp_control),
            f"{_fmt(item.temp_control)} vs. {_fmt(importance)}",
        ))

    if prefs.delivery_methods:
        details.append(_detail(
            "Delivery Method",
            score_categorical_match(prefs.delivery_methods, item.delivery_methods, vocabulary=vocabulary),
            f"{', '.join(sorted(prefs.delivery_methods))} vs. {_names(item.delivery_methods)}",
        ))

    if prefs.moods:
        details.append(_detail(
            "Mood",
            score_categorical_match(prefs.moods, item.moods, vocabulary=vocabulary),
            f"{', '.join(sorted(prefs.moods))} vs. {_names(item.moods)}",
        ))

    if prefs.contexts:
        details.append(_detail(
            "Context",
            score_categorical_match(prefs.contexts, item.contexts, vocabulary=vocabulary),
            f"{', '.join(sorted(prefs.contexts))} vs. {_names(item.contexts)}",
        ))

    if prefs.experience_level is not None:
        tag_score = score_experience_tags(prefs.experience_level, item.best_for, vocabulary)
        matrix_score = score_experience_match(prefs.experience_level, item.best_for)
        experience = max(tag_score, matrix_score)
        details.append(_detail(
            "Experience Level",
            experience,
            f"{normalize_user_level(prefs.experience_level)} vs. "
            f"{'/'.join(item_experience_levels(item.best_for))} "
            f"(compatibility: {experience / SUB_SCALE:.1f})",
        ))

    if prefs.portability_importance is not None:
        details.append(_detail(
            "Portability",
            score_importance_based_attribute(prefs.portability_importance, item.portability_score),
            f"Importance: {prefs.portability_importance}, Score: {_fmt(item.portability_score)}",
        ))

    if prefs.discreetness_importance is not None:
        details.append(_detail(
            "Discreetness",
            score_importance_based_attribute(prefs.discreetness_importance, item.discreetness_score),
            f"Importance: {prefs.discreetness_importance}, Score: {_fmt(item.discreetness_score)}",
        ))

    total = sum(d.score for d in details)
    total_max = sum(d.max_score for d in details)
    if total_max > 0:
        percentage = min(100, max(0, round(total / total_max * 100)))
    else:
        percentage = 0

    return RecommendationResult(
        vaporizer=item,
        score=total,
        match_percentage=percentage,
        match_details=tuple(details),
    )


def score_items(
    prefs: UserPreferences,
    items: Iterable[CatalogItem],
    vocabulary: Vocabulary = DEFAULT_VOCABULARY,
) -> list[RecommendationResult]:
    """Score every item and return results sorted by raw score, best first.

    ``sorted`` is stable, so equal scores keep their input order.
    """
    results = [score_item(prefs, item, vocabulary) for item in items]
    results.sort(key=lambda r: r.score, reverse=True)
    logger.debug(
        "Scored %d items; top: %s",
        len(results),
        [(r.vaporizer.name, round(r.score, 2)) for r in results[:3]],
    )
    return results
