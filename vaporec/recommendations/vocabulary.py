from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping

# Canonical tag -> related terms. A preference tag that misses exactly can
# still earn partial credit through this table.
SYNONYMS: Mapping[str, tuple[str, ...]] = MappingProxyType({
    # Moods
    "relaxed": ("calm", "peaceful", "soothed", "chill"),
    "energetic": ("uplifting", "active", "stimulating"),
    "creative": ("inspired", "artistic", "imaginative"),
    "focused": ("concentrated", "attentive", "alert"),
    "sleepy": ("sedated", "drowsy", "bedtime"),
    "euphoric": ("blissful", "ecstatic", "happy"),
    # Contexts
    "home": ("at_home", "at_home_office", "indoor", "daily_use"),
    "medical_relief": ("therapeutic", "medicinal", "treatment"),
    "social_gathering": ("party", "group_sessions", "social"),
})


@dataclass(frozen=True)
class Vocabulary:
    """Immutable controlled vocabularies plus the synonym table.

    Passed into the scoring functions instead of living as module state so a
    request can be scored against a different vocabulary without touching
    anyone else's.
    """

    moods: frozenset[str] = frozenset()
    contexts: frozenset[str] = frozenset()
    scenarios: frozenset[str] = frozenset()
    best_for: frozenset[str] = frozenset()
    delivery_methods: frozenset[str] = frozenset()
    synonyms: Mapping[str, tuple[str, ...]] = field(default_factory=lambda: SYNONYMS)

    def are_related(self, a: str, b: str) -> bool:
        """True when *a* and *b* are linked through the synonym table.

        Either one is canonical and the other is listed under it, or both
        are listed under the same canonical term.
        """
        a, b = a.lower(), b.lower()
        if b in self.synonyms.get(a, ()) or a in self.synonyms.get(b, ()):
            return True
        return any(a in related and b in related for related in self.synonyms.values())

    def as_dict(self) -> dict[str, list[str]]:
        return {
            "moods": sorted(self.moods),
            "contexts": sorted(self.contexts),
            "scenarios": sorted(self.scenarios),
            "best_for": sorted(self.best_for),
            "delivery_methods": sorted(self.delivery_methods),
        }


DEFAULT_VOCABULARY = Vocabulary(
    moods=frozenset({
        "relaxed", "energetic", "creative", "focused", "sleepy",
        "euphoric", "happy", "sad", "grateful",
    }),
    contexts=frozenset({
        "home", "daily_use", "medical_relief", "social_gathering",
        "special_occasion", "work_study", "graduated", "engaged", "birthday",
    }),
    scenarios=frozenset({
        "solo_at_home", "on_the_go", "outdoor_activity", "party_sharing",
        "travel", "in_the_car", "at_the_club",
    }),
    best_for=frozenset({
        "microdosing", "heavy_user", "flavor_chaser", "cloud_chaser",
        "beginner_friendly", "group_sessions", "concentrates", "daily_use",
    }),
    delivery_methods=frozenset({
        "whip", "balloon", "direct_draw", "water_pipe_compatible",
    }),
)
