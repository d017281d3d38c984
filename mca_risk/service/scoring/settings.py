"""
Scoring Settings for MCA prospect scoring.

Weights and penalties for the intent, health and position sub-scores,
the composite blend, and the industry/state modifier tables. These can
be adjusted via environment variables to tune outreach ranking.

Environment variables use the SCORING_ prefix:
    SCORING_COMPOSITE_INTENT_WEIGHT=0.45
    SCORING_HEALTH_VIOLATION_PENALTY=7
    SCORING_INDUSTRY_MODIFIERS='{"restaurant": 0.8, "retail": 0.9}'

Usage:
    from mca_risk.service.scoring.settings import ScoringConfig

    config = ScoringConfig()             # defaults + env
    custom = ScoringConfig(health_base_score=60)
"""

from types import MappingProxyType
from typing import Dict, Mapping, Optional

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


WEIGHT_SUM_TOLERANCE = 1e-6


class ScoringConfig(BaseSettings):
    """
    Configurable parameters for composite prospect scoring.

    All settings can be overridden via environment variables with SCORING_ prefix.
    All scores are 0-100. Instances are immutable, and the modifier
    tables are exposed as read-only mappings.
    """

    model_config = SettingsConfigDict(
        env_prefix="SCORING_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        frozen=True,
    )

    # === Intent Weights ===
    intent_recency_weight: float = Field(
        default=0.5,
        ge=0.0,
        le=1.0,
        description="Weight of filing recency in the intent score",
    )
    intent_volume_weight: float = Field(
        default=0.3,
        ge=0.0,
        le=1.0,
        description="Weight of filing volume in the intent score",
    )
    intent_pattern_weight: float = Field(
        default=0.2,
        ge=0.0,
        le=1.0,
        description="Weight of the active/lapsed/terminated mix in the intent score",
    )

    # === Health ===
    health_review_weight: float = Field(
        default=0.4,
        ge=0.0,
        le=1.0,
        description="Scale applied to the review rating bonus",
    )
    health_violation_penalty: float = Field(
        default=5,
        ge=0,
        description="Points deducted per violation",
    )
    health_base_score: float = Field(
        default=70,
        ge=0,
        le=100,
        description="Health score before adjustments",
    )

    # === Position ===
    position_per_filing_penalty: float = Field(
        default=15,
        ge=0,
        description="Points deducted per active UCC filing",
    )
    position_max_penalty: float = Field(
        default=60,
        ge=0,
        le=100,
        description="Cap on the total active UCC filing penalty",
    )

    # === Composite Weights ===
    composite_intent_weight: float = Field(default=0.4, ge=0.0, le=1.0)
    composite_health_weight: float = Field(default=0.35, ge=0.0, le=1.0)
    composite_position_weight: float = Field(default=0.25, ge=0.0, le=1.0)

    # === Modifiers (lower = higher risk) ===
    industry_modifiers: Dict[str, float] = Field(
        default={
            "restaurant": 0.85,
            "retail": 0.90,
            "construction": 0.80,
            "healthcare": 0.95,
            "manufacturing": 0.88,
            "services": 0.92,
            "technology": 0.95,
        },
        description="Composite multiplier by industry (lower-case keys)",
    )
    state_modifiers: Dict[str, float] = Field(
        default={
            "CA": 1.0,
            "TX": 0.98,
            "FL": 0.95,
            "NY": 1.02,
            "IL": 0.97,
            "PA": 0.96,
            "OH": 0.94,
            "GA": 0.96,
            "NC": 0.95,
            "MI": 0.93,
        },
        description="Composite multiplier by state code (upper-case keys)",
    )

    # === Enrichment Defaults ===
    default_years_in_business: float = Field(
        default=3,
        ge=0,
        description="Years in business assumed when a prospect has no value",
    )
    default_has_website: bool = Field(
        default=True,
        description="Website presence assumed when a prospect has no value",
    )
    default_social_presence: float = Field(
        default=50,
        ge=0,
        le=100,
        description="Social presence assumed when a prospect has no value",
    )

    @field_validator("industry_modifiers", "state_modifiers")
    @classmethod
    def validate_modifiers(cls, v: Dict[str, float]) -> Mapping[str, float]:
        """Modifiers must be positive multipliers."""
        for key, value in v.items():
            if value <= 0:
                raise ValueError(f"Modifier for {key!r} must be positive: {value}")
        return MappingProxyType(dict(v))

    @model_validator(mode="after")
    def validate_weight_sums(self) -> "ScoringConfig":
        """Intent and composite weights must each sum to 1."""
        intent = self.intent_recency_weight + self.intent_volume_weight + self.intent_pattern_weight
        if abs(intent - 1.0) > WEIGHT_SUM_TOLERANCE:
            raise ValueError(f"Intent weights must sum to 1.0, got {intent}")
        composite = (
            self.composite_intent_weight
            + self.composite_health_weight
            + self.composite_position_weight
        )
        if abs(composite - 1.0) > WEIGHT_SUM_TOLERANCE:
            raise ValueError(f"Composite weights must sum to 1.0, got {composite}")
        return self

    def industry_modifier(self, industry: Optional[str]) -> float:
        """Multiplier for an industry; unknown or missing industries are neutral."""
        if not industry:
            return 1.0
        return self.industry_modifiers.get(industry.strip().lower(), 1.0)

    def state_modifier(self, state: Optional[str]) -> float:
        """Multiplier for a state code; unknown or missing states are neutral."""
        if not state:
            return 1.0
        return self.state_modifiers.get(state.strip().upper(), 1.0)

