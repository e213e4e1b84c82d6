from __future__ import annotations

import pytest

from vaporec.recommendations.models import (
    ExperienceLevel,
    HeatingMethod,
    TempControl,
    TempControlImportance,
    UsageFrequency,
)
from vaporec.recommendations.quiz_mapper import (
    DEFAULT_MAX_BUDGET,
    MAX_BUDGET_SENTINEL,
    MAPPERS,
    RULE_TABLES,
    QuizMappingError,
    answer_options,
    map_answers_to_preferences,
    map_budget_range,
    map_delivery_method,
    map_discreetness_importance,
    map_experience_level,
    map_heating_method,
    map_mood,
    map_portability_importance,
    map_temp_control_importance,
    map_usage_context,
    map_usage_frequency,
)

SAMPLE_ANSWERS = {
    "mood": "relaxed",
    "context": "at home",
    "experience": "some experience",
    "frequency": "daily",
    "budget": "$300-$500",
    "heating_method": "convection",
    "temp_control": "somewhat important",
    "portability": "somewhat important",
    "discreetness": "somewhat important",
    "delivery_method": "direct draw",
}


# ── Individual mappers ───────────────────────────────────────────────────


class TestDimensionMappers:
    def test_mood(self):
        result = map_mood("Relaxed")
        assert result.success
        assert result.fragment == {"moods": frozenset({"relaxed"})}

    def test_mood_strips_whitespace(self):
        assert map_mood("  sleepy ").fragment["moods"] == frozenset({"sleepy"})

    def test_unknown_mood(self):
        result = map_mood("grumpy")
        assert not result.success
        assert result.error.dimension == "mood"
        assert result.error.answer == "grumpy"
        assert "grumpy" in result.error.message

    def test_on_the_go_sets_importance_side_effects(self):
        fragment = map_usage_context("On the go").fragment
        assert fragment["scenarios"] == frozenset({"on_the_go"})
        assert fragment["portability_importance"] == 9
        assert fragment["discreetness_importance"] == 8

    def test_medical_relief_sets_digital_temp_control(self):
        fragment = map_usage_context("medical relief").fragment
        assert fragment["contexts"] == frozenset({"medical_relief"})
        assert fragment["temp_control_preference"] == TempControl.digital

    def test_social_gatherings_sets_best_for(self):
        fragment = map_usage_context("social gatherings").fragment
        assert fragment["best_for"] == frozenset({"group_sessions"})

    def test_in_a_vehicle(self):
        fragment = map_usage_context("in a vehicle").fragment
        assert fragment == {"scenarios": frozenset({"in_the_car"}), "discreetness_importance": 9}

    def test_experience(self):
        fragment = map_experience_level("Complete Beginner").fragment
        assert fragment["experience_level"] == ExperienceLevel.beginner
        assert fragment["best_for"] == frozenset({"beginner_friendly"})
        assert map_experience_level("expert/enthusiast").fragment == {
            "experience_level": ExperienceLevel.expert,
        }

    def test_frequency(self):
        fragment = map_usage_frequency("rarely (special occasions)").fragment
        assert fragment["usage_frequency"] == UsageFrequency.rarely
        assert fragment["contexts"] == frozenset({"special_occasion"})
        assert map_usage_frequency("multiple times daily").fragment["best_for"] == frozenset({"heavy_user"})

    def test_budget(self):
        assert map_budget_range("$100-$200").fragment == {"min_budget": 100.0, "max_budget": 199.99}
        assert map_budget_range("$500+").fragment["max_budget"] == MAX_BUDGET_SENTINEL

    def test_heating_method(self):
        assert map_heating_method("CONVECTION").fragment == {
            "heating_method_preference": HeatingMethod.convection,
        }
        assert map_heating_method("I don't know").fragment == {"heating_method_preference": None}

    def test_temp_control(self):
        fragment = map_temp_control_importance("very important").fragment
        assert fragment["temp_control_importance"] == TempControlImportance.very_important
        assert fragment["temp_control_preference"] == TempControl.digital
        fragment = map_temp_control_importance("not important").fragment
        assert fragment["temp_control_preference"] is None

    def test_importance_levels(self):
        assert map_portability_importance("very important").fragment == {"portability_importance": 9}
        assert map_discreetness_importance("not important").fragment == {"discreetness_importance": 3}

    def test_delivery_method(self):
        assert map_delivery_method("through water").fragment == {
            "delivery_methods": frozenset({"water_pipe_compatible"}),
        }

    def test_unknown_answers_fail_for_every_dimension(self):
        for dimension, mapper in MAPPERS:
            result = mapper("definitely not an option")
            assert not result.success
            assert result.error.dimension == dimension

    def test_returned_fragment_does_not_alias_table(self):
        fragment = map_budget_range("$100-$200").fragment
        fragment["min_budget"] = 0
        assert map_budget_range("$100-$200").fragment["min_budget"] == 100.0


# ── Aggregation ──────────────────────────────────────────────────────────


class TestMapAnswersToPreferences:
    def test_full_quiz(self):
        prefs = map_answers_to_preferences(SAMPLE_ANSWERS)
        assert prefs.moods == {"relaxed"}
        assert prefs.contexts == {"home"}
        assert prefs.best_for == {"heavy_user"}
        assert prefs.experience_level == ExperienceLevel.intermediate
        assert prefs.usage_frequency == UsageFrequency.daily
        assert prefs.min_budget == 300.0
        assert prefs.max_budget == 499.99
        assert prefs.heating_method_preference == HeatingMethod.convection
        assert prefs.temp_control_importance == TempControlImportance.somewhat_important
        assert prefs.temp_control_preference == TempControl.digital
        # Explicit portability answer overrides the "at home" side effect.
        assert prefs.portability_importance == 6
        assert prefs.discreetness_importance == 6
        assert prefs.delivery_methods == {"direct_draw"}

    def test_deterministic(self):
        assert map_answers_to_preferences(SAMPLE_ANSWERS) == map_answers_to_preferences(SAMPLE_ANSWERS)

    def test_defaults_when_everything_skipped(self):
        prefs = map_answers_to_preferences({})
        assert prefs.min_budget == 0.0
        assert prefs.max_budget == DEFAULT_MAX_BUDGET
        assert prefs.portability_importance == 5
        assert prefs.discreetness_importance == 5
        assert prefs.moods == set()
        assert prefs.experience_level is None
        assert prefs.heating_method_preference is None

    def test_empty_answers_are_skipped(self):
        prefs = map_answers_to_preferences({"mood": "", "budget": "   ", "context": None})
        assert prefs.moods == set()
        assert prefs.max_budget == DEFAULT_MAX_BUDGET

    def test_context_side_effects_survive_when_not_overridden(self):
        prefs = map_answers_to_preferences({"context": "on the go"})
        assert prefs.scenarios == {"on_the_go"}
        assert prefs.portability_importance == 9
        assert prefs.discreetness_importance == 8

    def test_later_dimension_wins(self):
        prefs = map_answers_to_preferences({
            "context": "on the go",
            "portability": "not important",
        })
        assert prefs.portability_importance == 3
        assert prefs.discreetness_importance == 8

    def test_temp_control_answer_overrides_medical_relief(self):
        prefs = map_answers_to_preferences({
            "context": "medical relief",
            "temp_control": "not important",
        })
        assert prefs.temp_control_preference is None
        assert prefs.temp_control_importance == TempControlImportance.not_important

    def test_medical_relief_alone_keeps_digital(self):
        prefs = map_answers_to_preferences({"context": "medical relief"})
        assert prefs.temp_control_preference == TempControl.digital
        assert prefs.temp_control_importance is None

    def test_all_failures_reported_together(self):
        with pytest.raises(QuizMappingError) as exc_info:
            map_answers_to_preferences({
                "mood": "grumpy",
                "context": "at home",
                "budget": "a million dollars",
            })
        errors = exc_info.value.errors
        assert [e.dimension for e in errors] == ["mood", "budget"]
        message = str(exc_info.value)
        assert "grumpy" in message
        assert "a million dollars" in message

    def test_unknown_dimension_is_an_error(self):
        with pytest.raises(QuizMappingError) as exc_info:
            map_answers_to_preferences({"favourite_colour": "blue"})
        assert exc_info.value.errors[0].dimension == "favourite_colour"

    def test_camel_case_dimension_names(self):
        prefs = map_answers_to_preferences({
            "heatingMethod": "hybrid",
            "deliveryMethod": "balloon/bag",
            "tempControl": "very important",
        })
        assert prefs.heating_method_preference == HeatingMethod.hybrid
        assert prefs.delivery_methods == {"balloon"}
        assert prefs.temp_control_importance == TempControlImportance.very_important

    def test_every_table_answer_maps(self):
        for dimension, options in answer_options().items():
            for answer in options:
                map_answers_to_preferences({dimension: answer})

    def test_rule_tables_cover_every_mapper(self):
        assert [d for d, _ in MAPPERS] == list(RULE_TABLES)

    def test_duplicate_dimension_is_an_error(self):
        with pytest.raises(QuizMappingError) as exc_info:
            map_answers_to_preferences({"heating_method": "hybrid", "heatingMethod": "convection"})
        errors = exc_info.value.errors
        assert len(errors) == 1
        assert errors[0].dimension == "heating_method"
        assert "Duplicate" in errors[0].message
