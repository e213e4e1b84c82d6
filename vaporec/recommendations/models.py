from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ExperienceLevel(str, Enum):
    beginner = "beginner"
    intermediate = "intermediate"
    experienced = "experienced"
    expert = "expert"


class UsageFrequency(str, Enum):
    rarely = "rarely"
    occasionally = "occasionally"
    regularly = "regularly"
    daily = "daily"
    multiple_daily = "multiple_daily"


class HeatingMethod(str, Enum):
    conduction = "conduction"
    convection = "convection"
    hybrid = "hybrid"


class TempControl(str, Enum):
    digital = "digital"
    analog = "analog"


class TempControlImportance(str, Enum):
    very_important = "very_important"
    somewhat_important = "somewhat_important"
    not_important = "not_important"


# ── Catalog ──────────────────────────────────────────────────────────────


class Tag(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: int
    name: str


class CatalogItem(BaseModel):
    """A vaporizer with its scalar attributes and resolved tag collections."""

    model_config = ConfigDict(frozen=True)

    id: int
    name: str
    slug: str
    manufacturer: str | None = None
    category: str | None = None
    current_price: float | None = None
    msrp: float | None = None
    heating_method: str | None = None
    temp_control: str | None = None
    portability_score: float | None = Field(default=None, ge=0.0, le=10.0)
    discreetness_score: float | None = Field(default=None, ge=0.0, le=10.0)
    ease_of_use_score: float | None = Field(default=None, ge=0.0, le=10.0)
    expert_score: float | None = None
    user_rating: float | None = None
    moods: tuple[Tag, ...] = ()
    contexts: tuple[Tag, ...] = ()
    scenarios: tuple[Tag, ...] = ()
    best_for: tuple[Tag, ...] = ()
    delivery_methods: tuple[Tag, ...] = ()

    @property
    def price(self) -> float | None:
        """Current price, falling back to MSRP when no street price is known."""
        return self.current_price if self.current_price is not None else self.msrp


# ── Preferences ──────────────────────────────────────────────────────────


class UserPreferences(BaseModel):
    """Structured preferences for one recommendation request.

    Every field is optional: an empty set or ``None`` means the user gave no
    constraint for that dimension and the scoring engine skips it.
    """

    moods: set[str] = Field(default_factory=set)
    contexts: set[str] = Field(default_factory=set)
    scenarios: set[str] = Field(default_factory=set)
    best_for: set[str] = Field(default_factory=set)
    delivery_methods: set[str] = Field(default_factory=set)
    experience_level: ExperienceLevel | None = None
    usage_frequency: UsageFrequency | None = None
    heating_method_preference: HeatingMethod | None = None
    temp_control_preference: TempControl | None = None
    temp_control_importance: TempControlImportance | None = None
    portability_importance: int | None = Field(default=None, ge=1, le=10)
    discreetness_importance: int | None = Field(default=None, ge=1, le=10)
    min_budget: float | None = Field(default=None, ge=0.0)
    max_budget: float | None = Field(default=None, ge=0.0)

    @field_validator(
        "experience_level",
        "usage_frequency",
        "heating_method_preference",
        "temp_control_preference",
        "temp_control_importance",
        mode="before",
    )
    @classmethod
    def lowercase_enum_values(cls, value):
        if isinstance(value, str):
            return value.strip().lower()
        return value


# ── Results ──────────────────────────────────────────────────────────────


class MatchDetail(BaseModel):
    model_config = ConfigDict(frozen=True)

    category: str
    score: float
    max_score: float
    details: str


class RecommendationResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    vaporizer: CatalogItem
    score: float
    match_percentage: int = Field(ge=0, le=100)
    match_details: tuple[MatchDetail, ...] = ()


class VibeRecommendation(BaseModel):
    model_config = ConfigDict(frozen=True)

    vaporizer: CatalogItem
    score: float
    reasoning: str


# ── API payloads ─────────────────────────────────────────────────────────


class QuizAnswers(BaseModel):
    """Raw quiz answers; camelCase keys are accepted, unknown keys rejected."""

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    mood: str | None = None
    context: str | None = None
    experience: str | None = None
    frequency: str | None = None
    budget: str | None = None
    heating_method: str | None = Field(default=None, alias="heatingMethod")
    temp_control: str | None = Field(default=None, alias="tempControl")
    portability: str | None = None
    discreetness: str | None = None
    delivery_method: str | None = Field(default=None, alias="deliveryMethod")
    limit: int | None = Field(default=None, ge=1, le=50)


class QuizRecommendationResponse(BaseModel):
    user_preferences: UserPreferences
    recommendations: list[RecommendationResult]


class VibeRequest(BaseModel):
    query: str = Field(..., min_length=1, max_length=1000)
    top_n: int = Field(default=5, ge=1, le=20)


class VibeRecommendationResponse(BaseModel):
    query: str
    recommendations: list[VibeRecommendation]
