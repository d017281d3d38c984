"""
Qualification Rules for the MCA qualification engine.

Per-tier thresholds and pricing. A merchant lands in the best tier
whose thresholds it meets on every factor. These can be tuned per
tenant via environment variables or built explicitly in code.

Environment variables use the QUALIFICATION_ prefix and JSON objects
keyed by tier:
    QUALIFICATION_MIN_ADB='{"A": 30000, "B": 15000, "C": 7500, "D": 3000}'
    QUALIFICATION_FACTOR_RATES='{"A": 1.12, "B": 1.25, "C": 1.35, "D": 1.45}'

Usage:
    from mca_risk.service.qualification.settings import QualificationRules

    rules = QualificationRules()                 # defaults + env
    strict = rules.merged(max_nsf={"A": 0, "B": 1, "C": 2, "D": 4})
"""

from types import MappingProxyType
from typing import Any, Dict, Mapping

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from mca_risk.domain.entities import FUNDABLE_TIERS, QualificationTier, TierRequirements


TierTable = Dict[QualificationTier, float]
CountTable = Dict[QualificationTier, int]

_A, _B, _C, _D = FUNDABLE_TIERS


class QualificationRules(BaseSettings):
    """
    Tiered qualification thresholds.

    Instances are immutable, tier tables included: they are exposed as
    read-only mappings. To change rules, build a new instance (see
    ``merged``) and hand it to the engine as a whole.
    All monetary values are in dollars.
    """

    model_config = SettingsConfigDict(
        env_prefix="QUALIFICATION_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        frozen=True,
    )

    # === Balance ===
    min_adb: TierTable = Field(
        default={_A: 25000, _B: 15000, _C: 7500, _D: 3000},
        description="Minimum average daily balance per tier",
    )

    # === NSF / Overdraft ===
    max_nsf: CountTable = Field(
        default={_A: 0, _B: 2, _C: 4, _D: 8},
        description="Maximum NSF/overdraft events in the window per tier",
    )
    max_negative_days_pct: TierTable = Field(
        default={_A: 0, _B: 3, _C: 7, _D: 15},
        description="Maximum percentage of days with a negative balance per tier",
    )

    # === Stacking ===
    max_positions: CountTable = Field(
        default={_A: 0, _B: 1, _C: 2, _D: 4},
        description="Maximum existing MCA/loan positions per tier",
    )

    # === Business Profile ===
    min_time_in_business_months: CountTable = Field(
        default={_A: 24, _B: 12, _C: 6, _D: 3},
        description="Minimum months in business per tier",
    )
    min_monthly_revenue: TierTable = Field(
        default={_A: 50000, _B: 25000, _C: 15000, _D: 10000},
        description="Minimum average monthly deposits per tier",
    )

    # === Pricing ===
    factor_rates: TierTable = Field(
        default={_A: 1.15, _B: 1.25, _C: 1.35, _D: 1.45},
        description="Factor rate charged per tier",
    )
    max_funding_multiple: TierTable = Field(
        default={_A: 1.5, _B: 1.25, _C: 1.0, _D: 0.75},
        description="Maximum advance as a multiple of monthly revenue per tier",
    )

    @field_validator(
        "min_adb",
        "max_nsf",
        "max_negative_days_pct",
        "max_positions",
        "min_time_in_business_months",
        "min_monthly_revenue",
        "factor_rates",
        "max_funding_multiple",
    )
    @classmethod
    def validate_tier_table(cls, v: TierTable) -> Mapping[QualificationTier, float]:
        """Every fundable tier must be present with a non-negative value."""
        missing = [t.value for t in FUNDABLE_TIERS if t not in v]
        if missing:
            raise ValueError(f"Missing tiers: {', '.join(missing)}")
        if QualificationTier.DECLINE in v:
            raise ValueError("Decline carries no thresholds")
        for tier, value in v.items():
            if value < 0:
                raise ValueError(f"Tier {tier.value} value cannot be negative: {value}")
        return MappingProxyType(dict(v))

    @model_validator(mode="after")
    def validate_tier_ordering(self) -> "QualificationRules":
        """Better tiers must be at least as strict as worse tiers."""
        _require_ordered("min_adb", self.min_adb, descending=True)
        _require_ordered("min_time_in_business_months", self.min_time_in_business_months, descending=True)
        _require_ordered("min_monthly_revenue", self.min_monthly_revenue, descending=True)
        _require_ordered("max_nsf", self.max_nsf, descending=False)
        _require_ordered("max_negative_days_pct", self.max_negative_days_pct, descending=False)
        _require_ordered("max_positions", self.max_positions, descending=False)

        # A qualified merchant always gets a non-zero offer
        if self.min_monthly_revenue[_D] < 1:
            raise ValueError("min_monthly_revenue for tier D must be at least 1")
        for tier in FUNDABLE_TIERS:
            if self.max_funding_multiple[tier] < 0.1:
                raise ValueError(f"max_funding_multiple for tier {tier.value} must be at least 0.1")
            if self.factor_rates[tier] < 1.0:
                raise ValueError(f"factor_rates for tier {tier.value} must be at least 1.0")
        return self

    def factor_rate(self, tier: QualificationTier) -> float:
        """Factor rate for a tier. Decline has no rate (0.0)."""
        if tier == QualificationTier.DECLINE:
            return 0.0
        return self.factor_rates[tier]

    def funding_multiple(self, tier: QualificationTier) -> float:
        """Revenue multiple for a tier. Decline has no multiple (0.0)."""
        if tier == QualificationTier.DECLINE:
            return 0.0
        return self.max_funding_multiple[tier]

    def requirements_for(self, tier: QualificationTier) -> TierRequirements:
        if tier == QualificationTier.DECLINE:
            raise ValueError("Decline has no tier requirements")
        return TierRequirements(
            tier=tier,
            min_adb=self.min_adb[tier],
            max_nsf=self.max_nsf[tier],
            max_negative_days_pct=self.max_negative_days_pct[tier],
            max_positions=self.max_positions[tier],
            min_time_in_business_months=self.min_time_in_business_months[tier],
            min_monthly_revenue=self.min_monthly_revenue[tier],
            factor_rate=self.factor_rates[tier],
            max_funding_multiple=self.max_funding_multiple[tier],
        )

    def merged(self, **overrides: Any) -> "QualificationRules":
        """Return a new, validated rule set with some tables replaced."""
        values = {name: dict(getattr(self, name)) for name in type(self).model_fields}
        values.update(overrides)
        return QualificationRules(**values)


def _require_ordered(name: str, table: Mapping[QualificationTier, float], descending: bool) -> None:
    values = [table[t] for t in FUNDABLE_TIERS]
    for better, worse in zip(values, values[1:]):
        if (descending and better < worse) or (not descending and better > worse):
            order = "non-increasing" if descending else "non-decreasing"
            raise ValueError(f"{name} must be {order} from tier A to D: {values}")
