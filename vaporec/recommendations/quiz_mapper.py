"""
Quiz answer mapping.

Each quiz dimension owns a rule table of ``answer -> preference fragment``.
Answers are matched case-insensitively; an answer missing from its table is a
mapping failure (the quiz UI and the table disagree), never a silent default.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Callable, Mapping

from .models import (
    ExperienceLevel,
    HeatingMethod,
    TempControl,
    TempControlImportance,
    UsageFrequency,
    UserPreferences,
)

logger = logging.getLogger(__name__)

DEFAULT_MIN_BUDGET = 0.0
DEFAULT_MAX_BUDGET = 1000.0
DEFAULT_IMPORTANCE = 5
MAX_BUDGET_SENTINEL = 1_000_000.0

Fragment = Mapping[str, Any]


def _table(rules: dict[str, dict[str, Any]]) -> Mapping[str, Fragment]:
    return MappingProxyType({k: MappingProxyType(v) for k, v in rules.items()})


# ---------------------------------------------------------------------------
# Rule tables
# ---------------------------------------------------------------------------

MOOD_RULES = _table({
    mood: {"moods": frozenset({mood})}
    for mood in ("relaxed", "energetic", "creative", "focused", "sleepy", "euphoric", "happy")
})

CONTEXT_RULES = _table({
    "at home": {
        "contexts": frozenset({"home"}),
        "portability_importance": 3,
    },
    "on the go": {
        "scenarios": frozenset({"on_the_go"}),
        "portability_importance": 9,
        "discreetness_importance": 8,
    },
    "social gatherings": {
        "contexts": frozenset({"social_gathering"}),
        "best_for": frozenset({"group_sessions"}),
    },
    "medical relief": {
        "contexts": frozenset({"medical_relief"}),
        "temp_control_preference": TempControl.digital,
    },
    "outdoor activities": {
        "scenarios": frozenset({"outdoor_activity"}),
        "portability_importance": 8,
    },
    "in a vehicle": {
        "scenarios": frozenset({"in_the_car"}),
        "discreetness_importance": 9,
    },
})

EXPERIENCE_RULES = _table({
    "complete beginner": {
        "experience_level": ExperienceLevel.beginner,
        "best_for": frozenset({"beginner_friendly"}),
    },
    "some experience": {"experience_level": ExperienceLevel.intermediate},
    "experienced user": {
        "experience_level": ExperienceLevel.experienced,
        "best_for": frozenset({"heavy_user"}),
    },
    "expert/enthusiast": {"experience_level": ExperienceLevel.expert},
})

FREQUENCY_RULES = _table({
    "rarely (special occasions)": {
        "usage_frequency": UsageFrequency.rarely,
        "contexts": frozenset({"special_occasion"}),
    },
    "occasionally (few times a month)": {"usage_frequency": UsageFrequency.occasionally},
    "regularly (few times a week)": {
        "usage_frequency": UsageFrequency.regularly,
        "best_for": frozenset({"daily_use"}),
    },
    "daily": {
        "usage_frequency": UsageFrequency.daily,
        "best_for": frozenset({"heavy_user"}),
    },
    "multiple times daily": {
        "usage_frequency": UsageFrequency.multiple_daily,
        "best_for": frozenset({"heavy_user"}),
    },
})

BUDGET_RULES = _table({
    "under $100": {"min_budget": 0.0, "max_budget": 99.99},
    "$100-$200": {"min_budget": 100.0, "max_budget": 199.99},
    "$200-$300": {"min_budget": 200.0, "max_budget": 299.99},
    "$300-$500": {"min_budget": 300.0, "max_budget": 499.99},
    "$500+": {"min_budget": 500.0, "max_budget": MAX_BUDGET_SENTINEL},
})

HEATING_METHOD_RULES = _table({
    "conduction": {"heating_method_preference": HeatingMethod.conduction},
    "convection": {"heating_method_preference": HeatingMethod.convection},
    "hybrid": {"heating_method_preference": HeatingMethod.hybrid},
    "no preference": {"heating_method_preference": None},
    "i don't know": {"heating_method_preference": None},
})

TEMP_CONTROL_RULES = _table({
    "very important": {
        "temp_control_importance": TempControlImportance.very_important,
        "temp_control_preference": TempControl.digital,
    },
    "somewhat important": {
        "temp_control_importance": TempControlImportance.somewhat_important,
        "temp_control_preference": TempControl.digital,
    },
    "not important": {
        "temp_control_importance": TempControlImportance.not_important,
        "temp_control_preference": None,
    },
})

_IMPORTANCE_LEVELS = {"very important": 9, "somewhat important": 6, "not important": 3}

PORTABILITY_RULES = _table({
    answer: {"portability_importance": value} for answer, value in _IMPORTANCE_LEVELS.items()
})

DISCREETNESS_RULES = _table({
    answer: {"discreetness_importance": value} for answer, value in _IMPORTANCE_LEVELS.items()
})

DELIVERY_METHOD_RULES = _table({
    "direct draw": {"delivery_methods": frozenset({"direct_draw"})},
    "through water": {"delivery_methods": frozenset({"water_pipe_compatible"})},
    "balloon/bag": {"delivery_methods": frozenset({"balloon"})},
    "whip/tube": {"delivery_methods": frozenset({"whip"})},
})


# ---------------------------------------------------------------------------
# Results
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class MappingError:
    dimension: str
    answer: str
    message: str


@dataclass(frozen=True)
class MappingResult:
    """Outcome of mapping one answer: a fragment on success, an error otherwise."""

    fragment: Fragment = field(default_factory=dict)
    error: MappingError | None = None

    @property
    def success(self) -> bool:
        return self.error is None


class QuizMappingError(ValueError):
    """One or more quiz answers have no entry in their rule table."""

    def __init__(self, errors: list[MappingError]):
        self.errors = list(errors)
        super().__init__(
            "Failed to map some quiz answers: "
            + "; ".join(e.message for e in self.errors)
        )


def _lookup(dimension: str, label: str, rules: Mapping[str, Fragment], answer: str) -> MappingResult:
    key = (answer or "").strip().lower()
    fragment = rules.get(key)
    if fragment is None:
        return MappingResult(error=MappingError(
            dimension=dimension,
            answer=answer,
            message=f"Unknown {label}: {answer!r}",
        ))
    return MappingResult(fragment=dict(fragment))


# ---------------------------------------------------------------------------
# Per-dimension mappers
# ---------------------------------------------------------------------------


def map_mood(answer: str) -> MappingResult:
    return _lookup("mood", "mood preference", MOOD_RULES, answer)


def map_usage_context(answer: str) -> MappingResult:
    """Context answers may also set portability, discreetness or temp control."""
    return _lookup("context", "usage context", CONTEXT_RULES, answer)


def map_experience_level(answer: str) -> MappingResult:
    return _lookup("experience", "experience level", EXPERIENCE_RULES, answer)


def map_usage_frequency(answer: str) -> MappingResult:
    return _lookup("frequency", "usage frequency", FREQUENCY_RULES, answer)


def map_budget_range(answer: str) -> MappingResult:
    return _lookup("budget", "budget range", BUDGET_RULES, answer)


def map_heating_method(answer: str) -> MappingResult:
    return _lookup("heating_method", "heating method preference", HEATING_METHOD_RULES, answer)


def map_temp_control_importance(answer: str) -> MappingResult:
    return _lookup("temp_control", "temperature control importance", TEMP_CONTROL_RULES, answer)


def map_portability_importance(answer: str) -> MappingResult:
    return _lookup("portability", "portability importance", PORTABILITY_RULES, answer)


def map_discreetness_importance(answer: str) -> MappingResult:
    return _lookup("discreetness", "discreetness importance", DISCREETNESS_RULES, answer)


def map_delivery_method(answer: str) -> MappingResult:
    return _lookup("delivery_method", "delivery method preference", DELIVERY_METHOD_RULES, answer)


# Merge order matters: later fragments overwrite earlier keys.
MAPPERS: tuple[tuple[str, Callable[[str], MappingResult]], ...] = (
    ("mood", map_mood),
    ("context", map_usage_context),
    ("experience", map_experience_level),
    ("frequency", map_usage_frequency),
    ("budget", map_budget_range),
    ("heating_method", map_heating_method),
    ("temp_control", map_temp_control_importance),
    ("portability", map_portability_importance),
    ("discreetness", map_discreetness_importance),
    ("delivery_method", map_delivery_method),
)

RULE_TABLES: Mapping[str, Mapping[str, Fragment]] = MappingProxyType({
    "mood": MOOD_RULES,
    "context": CONTEXT_RULES,
    "experience": EXPERIENCE_RULES,
    "frequency": FREQUENCY_RULES,
    "budget": BUDGET_RULES,
    "heating_method": HEATING_METHOD_RULES,
    "temp_control": TEMP_CONTROL_RULES,
    "portability": PORTABILITY_RULES,
    "discreetness": DISCREETNESS_RULES,
    "delivery_method": DELIVERY_METHOD_RULES,
})

_DIMENSION_ALIASES = {
    "heatingmethod": "heating_method",
    "tempcontrol": "temp_control",
    "deliverymethod": "delivery_method",
}


def _normalize_dimension(key: str) -> str:
    key = key.strip().lower()
    return _DIMENSION_ALIASES.get(key, key)


def answer_options() -> dict[str, list[str]]:
    """Accepted answers per dimension, in table order."""
    return {dim: list(rules) for dim, rules in RULE_TABLES.items()}


# ---------------------------------------------------------------------------
# Aggregation
# ---------------------------------------------------------------------------


def map_answers_to_preferences(raw_answers: Mapping[str, str | None]) -> UserPreferences:
    """
    Run every mapper and merge the fragments into one ``UserPreferences``.

    Missing or empty answers mean the dimension was skipped. If any answer
    fails to map, a single ``QuizMappingError`` carrying every failure is
    raised and no preferences are returned.
    """
    answers: dict[str, str] = {}
    errors: list[MappingError] = []
    seen: dict[str, str] = {}
    for key, value in raw_answers.items():
        dimension = _normalize_dimension(key)
        if dimension not in RULE_TABLES:
            errors.append(MappingError(
                dimension=key,
                answer=value or "",
                message=f"Unknown quiz dimension: {key!r}",
            ))
            continue
        if dimension in seen:
            errors.append(MappingError(
                dimension=dimension,
                answer=value or "",
                message=f"Duplicate quiz dimension: {key!r} repeats {seen[dimension]!r}",
            ))
            continue
        seen[dimension] = key
        if value is not None and value.strip():
            answers[dimension] = value

    merged: dict[str, Any] = {}
    for dimension, mapper in MAPPERS:
        if dimension not in answers:
            continue
        result = mapper(answers[dimension])
        if not result.success:
            errors.append(result.error)
            continue
        merged.update(result.fragment)

    if errors:
        logger.info("Quiz mapping failed: %s", [e.message for e in errors])
        raise QuizMappingError(errors)

    if merged.get("min_budget") is None:
        merged["min_budget"] = DEFAULT_MIN_BUDGET
    if merged.get("max_budget") is None:
        merged["max_budget"] = DEFAULT_MAX_BUDGET
    if merged.get("portability_importance") is None:
        merged["portability_importance"] = DEFAULT_IMPORTANCE
    if merged.get("discreetness_importance") is None:
        merged["discreetness_importance"] = DEFAULT_IMPORTANCE

    for key in ("moods", "contexts", "scenarios", "best_for", "delivery_methods"):
        if key in merged:
            merged[key] = set(merged[key])

    prefs = UserPreferences(**merged)
    logger.debug("Mapped quiz answers %s -> %s", answers, prefs.model_dump())
    return prefs
