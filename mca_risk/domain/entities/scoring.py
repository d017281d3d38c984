"""Prospect scoring entities: signal inputs and scoring results."""

from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import List, Optional, Tuple


class FilingTrend(str, Enum):
    """Recent UCC filing activity compared to older filings."""

    INCREASING = "increasing"
    STABLE = "stable"
    DECREASING = "decreasing"


class SentimentTrend(str, Enum):
    """Direction of review sentiment."""

    IMPROVING = "improving"
    STABLE = "stable"
    DECLINING = "declining"


class UccFilingStatus(str, Enum):
    ACTIVE = "active"
    LAPSED = "lapsed"
    TERMINATED = "terminated"


class Grade(str, Enum):
    A = "A"
    B = "B"
    C = "C"
    D = "D"
    F = "F"


class Recommendation(str, Enum):
    """Outreach priority derived from the composite score."""

    HIGH_PRIORITY = "high_priority"
    MODERATE_PRIORITY = "moderate_priority"
    LOW_PRIORITY = "low_priority"
    PASS = "pass"


class FactorImpact(str, Enum):
    POSITIVE = "positive"
    NEGATIVE = "negative"
    NEUTRAL = "neutral"


@dataclass(frozen=True)
class IntentScoreInput:
    """UCC filing history summarised for intent scoring."""

    days_since_last_filing: int
    total_filings: int
    active_filings: int
    lapsed_filings: int
    terminated_filings: int
    recent_filings_trend: FilingTrend = FilingTrend.STABLE


@dataclass(frozen=True)
class HealthScoreInput:
    """
    Business health indicators.

    Attributes:
        review_count: Number of public reviews
        avg_rating: Average star rating, 1-5
        sentiment_trend: Direction of review sentiment
        violation_count: Regulatory or licensing violations
        years_in_business: Age of the business in years
        has_website: Whether the business has a website
        social_presence: Social media presence, 0-100
    """

    review_count: int
    avg_rating: float
    sentiment_trend: SentimentTrend
    violation_count: int
    years_in_business: float
    has_website: bool
    social_presence: float


@dataclass(frozen=True)
class PositionScoreInput:
    """Existing financing load."""

    active_ucc_count: int
    known_mca_positions: int
    estimated_monthly_payments: float
    estimated_revenue: float


@dataclass(frozen=True)
class CompositeScoreInput:
    """Sub-scores plus optional industry and state modifiers."""

    intent_score: float
    health_score: float
    position_score: float
    industry_risk_modifier: Optional[float] = None
    state_modifier: Optional[float] = None


@dataclass(frozen=True)
class UccFiling:
    """A UCC filing linked to a prospect."""

    status: UccFilingStatus
    filing_date: date


@dataclass(frozen=True)
class HealthSignals:
    """Latest health snapshot for a prospect (sentiment on a 0-1 scale)."""

    review_count: int = 0
    avg_sentiment: Optional[float] = None
    sentiment_trend: SentimentTrend = SentimentTrend.STABLE
    violation_count: int = 0


@dataclass(frozen=True)
class ProspectSignals:
    """Everything known about a prospect that feeds composite scoring."""

    prospect_id: str
    company_name: str = ""
    industry: Optional[str] = None
    state: Optional[str] = None
    ucc_filings: Tuple[UccFiling, ...] = ()
    health: Optional[HealthSignals] = None
    years_in_business: Optional[float] = None
    has_website: Optional[bool] = None
    social_presence: Optional[float] = None
    known_mca_positions: int = 0
    estimated_monthly_payments: float = 0.0
    estimated_revenue: Optional[float] = None


@dataclass(frozen=True)
class ScoreFactor:
    """A named signal that contributed to a score."""

    name: str
    value: float
    impact: FactorImpact
    weight: float


@dataclass(frozen=True)
class ScoringResult:
    """Composite prospect score used for outreach ranking."""

    intent_score: int
    health_score: int
    position_score: int
    composite_score: int
    grade: Grade
    confidence: int
    factors: List[ScoreFactor] = field(default_factory=list)
    recommendation: Recommendation = Recommendation.PASS

    def to_dict(self) -> dict:
        """Convert to a JSON-friendly dict for upstream consumers."""
        return {
            "intent_score": self.intent_score,
            "health_score": self.health_score,
            "position_score": self.position_score,
            "composite_score": self.composite_score,
            "grade": self.grade.value,
            "confidence": self.confidence,
            "factors": [
                {
                    "name": f.name,
                    "value": f.value,
                    "impact": f.impact.value,
                    "weight": f.weight,
                }
                for f in self.factors
            ],
            "recommendation": self.recommendation.value,
        }


@dataclass(frozen=True)
class ProspectScoreOutcome:
    """Per-item result of batch scoring: a result or an error, never both."""

    prospect_id: str
    result: Optional[ScoringResult] = None
    error: Optional[str] = None
    error_code: Optional[str] = None

    @property
    def succeeded(self) -> bool:
        return self.result is not None
