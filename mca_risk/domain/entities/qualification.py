"""Qualification entities: tiers, reasons and results."""

from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from enum import Enum
from typing import List, Optional, Union


class QualificationTier(str, Enum):
    """Qualification bucket from best (A) to Decline."""

    A = "A"
    B = "B"
    C = "C"
    D = "D"
    DECLINE = "Decline"


# Tiers that carry thresholds, best first
FUNDABLE_TIERS = (
    QualificationTier.A,
    QualificationTier.B,
    QualificationTier.C,
    QualificationTier.D,
)


class ReasonResult(str, Enum):
    """Outcome of a single qualification factor."""

    PASS = "pass"
    WARNING = "warning"
    FAIL = "fail"


@dataclass(frozen=True)
class QualificationReason:
    """
    One evaluated qualification factor.

    Attributes:
        factor: Human-readable factor name (stable, used for tiering)
        result: pass / warning / fail
        message: Short explanation of the outcome
        value: The observed value
        threshold: The threshold the value was compared against
    """

    factor: str
    result: ReasonResult
    message: str
    value: Union[float, int, str, None] = None
    threshold: Union[float, int, str, None] = None


@dataclass(frozen=True)
class ProspectProfile:
    """Business metadata supplied by the prospect directory."""

    prospect_id: str
    company_name: str = ""
    time_in_business_months: Optional[int] = None
    state: Optional[str] = None
    industry: Optional[str] = None


@dataclass(frozen=True)
class QualificationContext:
    """
    Non-bank inputs to a qualification.

    Explicit fields win over the attached prospect profile.
    """

    prospect_id: Optional[str] = None
    time_in_business_months: Optional[int] = None
    industry: Optional[str] = None
    state: Optional[str] = None
    prospect: Optional[ProspectProfile] = None

    def with_prospect(self, prospect: Optional[ProspectProfile]) -> "QualificationContext":
        return replace(self, prospect=prospect)

    def resolve_time_in_business(self, default: int) -> int:
        if self.time_in_business_months is not None:
            return self.time_in_business_months
        if self.prospect is not None and self.prospect.time_in_business_months is not None:
            return self.prospect.time_in_business_months
        return default


@dataclass(frozen=True)
class TierRequirements:
    """Threshold and pricing view of one tier."""

    tier: QualificationTier
    min_adb: float
    max_nsf: int
    max_negative_days_pct: float
    max_positions: int
    min_time_in_business_months: int
    min_monthly_revenue: float
    factor_rate: float
    max_funding_multiple: float


@dataclass(frozen=True)
class QualificationResult:
    """
    The funding qualification for a merchant.

    Attributes:
        qualified: False only when tier is Decline
        tier: Qualification tier
        reasons: The eight evaluated factors, in fixed order
        max_amount: Maximum funding amount (0 when declined)
        min_amount: Funding floor (0 when declined)
        suggested_rate: Factor rate for the tier
        suggested_term_months: Suggested term length
        estimated_daily_payment: Payback spread over business days
        risk_score: 0-100, higher is riskier
        confidence: 0-100 confidence in the data behind the decision
        warnings: Concerns that do not change the tier
        qualified_at: UTC timestamp of evaluation
    """

    qualified: bool
    tier: QualificationTier
    reasons: List[QualificationReason]
    max_amount: float
    min_amount: float
    suggested_rate: float
    suggested_term_months: int
    estimated_daily_payment: float
    risk_score: int
    confidence: int
    warnings: List[str] = field(default_factory=list)
    qualified_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def failed_factors(self) -> List[str]:
        return [r.factor for r in self.reasons if r.result == ReasonResult.FAIL]

    def to_dict(self) -> dict:
        """Convert to a JSON-friendly dict for upstream consumers."""
        return {
            "qualified": self.qualified,
            "tier": self.tier.value,
            "reasons": [
                {
                    "factor": r.factor,
                    "result": r.result.value,
                    "message": r.message,
                    "value": r.value,
                    "threshold": r.threshold,
                }
                for r in self.reasons
            ],
            "max_amount": self.max_amount,
            "min_amount": self.min_amount,
            "suggested_rate": self.suggested_rate,
            "suggested_term_months": self.suggested_term_months,
            "estimated_daily_payment": self.estimated_daily_payment,
            "risk_score": self.risk_score,
            "confidence": self.confidence,
            "warnings": list(self.warnings),
            "qualified_at": self.qualified_at.isoformat(),
        }
