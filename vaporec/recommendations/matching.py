"""
Per-category match functions used by the scoring engine.

Every function returns a score on the 0-10 sub-scale unless it takes an
explicit ``max_score``; the engine rescales by the category weight.
"""
from __future__ import annotations

from types import MappingProxyType
from typing import Iterable, Mapping

from .models import Tag, TempControlImportance
from .vocabulary import DEFAULT_VOCABULARY, Vocabulary

SUB_SCALE = 10.0

BUDGET_TOLERANCE_LOW = 0.8
BUDGET_TOLERANCE_HIGH = 1.2

EXPERIENCE_LEVELS = ("beginner", "intermediate", "advanced", "expert")

# Row: user level, column: item level.
EXPERIENCE_COMPATIBILITY: Mapping[str, Mapping[str, float]] = MappingProxyType({
    "beginner": MappingProxyType(
        {"beginner": 1.0, "intermediate": 0.5, "advanced": 0.2, "expert": 0.0}
    ),
    "intermediate": MappingProxyType(
        {"beginner": 0.7, "intermediate": 1.0, "advanced": 0.7, "expert": 0.4}
    ),
    "advanced": MappingProxyType(
        {"beginner": 0.4, "intermediate": 0.8, "advanced": 1.0, "expert": 0.8}
    ),
    "expert": MappingProxyType(
        {"beginner": 0.2, "intermediate": 0.5, "advanced": 0.9, "expert": 1.0}
    ),
})

# Raw quiz answers and enum values both normalise onto EXPERIENCE_LEVELS.
USER_LEVEL_ALIASES: Mapping[str, str] = MappingProxyType({
    "beginner": "beginner",
    "complete beginner": "beginner",
    "intermediate": "intermediate",
    "some experience": "intermediate",
    "experienced": "advanced",
    "advanced": "advanced",
    "experienced user": "advanced",
    "expert": "expert",
    "expert/enthusiast": "expert",
})

ITEM_TAG_TO_LEVEL: Mapping[str, str] = MappingProxyType({
    "beginner_friendly": "beginner",
    "heavy_user": "advanced",
    "expert_friendly": "expert",
    "tech_savvy_users": "advanced",
})

EXPERIENCE_TAGS: Mapping[str, tuple[str, ...]] = MappingProxyType({
    "beginner": ("beginner_friendly", "easy_to_use"),
    "intermediate": ("versatile", "balanced"),
    "advanced": ("heavy_user", "enthusiast", "customizable"),
})

NEUTRAL_ITEM_SCORE = 5.0


def _value(v) -> str | None:
    """Lowercased string form of an enum or plain string."""
    if v is None:
        return None
    return str(getattr(v, "value", v)).strip().lower() or None


def score_budget_match(
    min_budget: float | None,
    max_budget: float | None,
    price: float | None,
    max_points: float = SUB_SCALE,
) -> float:
    """Full points inside [min, max], half within the 20% band, else 0."""
    if min_budget is None or max_budget is None or price is None:
        return 0.0

    price = float(price)
    if min_budget <= price <= max_budget:
        return max_points
    if min_budget * BUDGET_TOLERANCE_LOW <= price <= max_budget * BUDGET_TOLERANCE_HIGH:
        return max_points / 2
    return 0.0


def score_categorical_match(
    preferences: Iterable[str] | None,
    item_tags: Iterable[Tag],
    weight: float = SUB_SCALE,
    vocabulary: Vocabulary = DEFAULT_VOCABULARY,
) -> float:
    """Sum per-preference credit: *weight* per exact hit, half per related hit.

    Each preference earns credit at most once. The total is not capped, so
    several matching preferences can exceed *weight*.
    """
    if not preferences:
        return 0.0

    terms = [tag.name.lower() for tag in item_tags]
    term_set = set(terms)
    score = 0.0
    for pref in sorted({p.lower() for p in preferences}):
        if pref in term_set:
            score += weight
        elif any(vocabulary.are_related(pref, term) for term in terms):
            score += weight / 2
    return score


def score_heating_method_match(preference, item_method) -> float:
    pref = _value(preference)
    method = _value(item_method)
    if not pref or not method:
        return 0.0
    if pref == method:
        return SUB_SCALE
    if method == "hybrid" and pref in ("conduction", "convection"):
        return SUB_SCALE / 2
    return 0.0


def score_temp_control_match(importance, item_control) -> float:
    """Score the item's temperature control against how much the user cares.

    ``None`` for *item_control* means the device has no adjustable control.
    """
    level = _value(importance)
    control = _value(item_control)
    has_control = control in ("digital", "analog")

    if level == TempControlImportance.very_important.value:
        if control == "digital":
            return SUB_SCALE
        if control == "analog":
            return SUB_SCALE / 2
        return 0.0
    if level == TempControlImportance.somewhat_important.value:
        return SUB_SCALE * (0.7 if has_control else 0.3)
    return SUB_SCALE


def normalize_importance(importance: float) -> float:
    """Map a 1-10 importance onto the 1-5 scale; 1-5 values pass through."""
    return importance / 2 if importance > 5 else importance


def score_importance_based_attribute(
    importance: float | None,
    item_score: float | None,
    max_score: float = SUB_SCALE,
) -> float:
    if importance is None:
        return 0.0
    if item_score is None:
        item_score = NEUTRAL_ITEM_SCORE

    normalized = normalize_importance(importance)
    if normalized <= 2:
        return max_score
    if normalized >= 4:
        return (item_score / 10) * max_score
    return ((item_score / 10) * 0.7 + 0.3) * max_score


def normalize_user_level(level) -> str:
    return USER_LEVEL_ALIASES.get(_value(level) or "", "intermediate")


def item_experience_levels(best_for: Iterable[Tag]) -> list[str]:
    levels = []
    for tag in best_for:
        level = ITEM_TAG_TO_LEVEL.get(tag.name.lower())
        if level and level not in levels:
            levels.append(level)
    return levels or ["intermediate"]


def score_experience_match(
    user_level,
    best_for: Iterable[Tag],
    max_score: float = SUB_SCALE,
) -> float:
    """Best compatibility-matrix cell across the item's levels, times *max_score*."""
    if user_level is None:
        return 0.0
    row = EXPERIENCE_COMPATIBILITY[normalize_user_level(user_level)]
    best = max(row.get(level, 0.0) for level in item_experience_levels(best_for))
    return best * max_score


def score_experience_tags(
    user_level,
    best_for: Iterable[Tag],
    vocabulary: Vocabulary = DEFAULT_VOCABULARY,
) -> float:
    """Categorical overlap between the user's level tags and the item's ``best_for``."""
    if user_level is None:
        return 0.0
    relevant = EXPERIENCE_TAGS.get(normalize_user_level(user_level), ())
    best_for = list(best_for)
    if not relevant or not best_for:
        return 0.0
    return score_categorical_match(relevant, best_for, vocabulary=vocabulary)
