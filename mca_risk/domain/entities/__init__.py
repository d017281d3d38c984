"""Domain Entities - Core value objects."""

from .features import (
    AnalysisWindow,
    LenderPayment,
    MonthlyRevenue,
    PaymentFrequency,
    RevenueTrend,
    TrendDirection,
    UnderwritingFeatures,
)
from .qualification import (
    FUNDABLE_TIERS,
    ProspectProfile,
    QualificationContext,
    QualificationReason,
    QualificationResult,
    QualificationTier,
    ReasonResult,
    TierRequirements,
)
from .scoring import (
    CompositeScoreInput,
    FactorImpact,
    FilingTrend,
    Grade,
    HealthScoreInput,
    HealthSignals,
    IntentScoreInput,
    PositionScoreInput,
    ProspectScoreOutcome,
    ProspectSignals,
    Recommendation,
    ScoreFactor,
    ScoringResult,
    SentimentTrend,
    UccFiling,
    UccFilingStatus,
)
from .transaction import Account, AccountBalances, BankData, Transaction

__all__ = [
    # Bank feed
    "Account",
    "AccountBalances",
    "BankData",
    "Transaction",
    # Features
    "AnalysisWindow",
    "LenderPayment",
    "MonthlyRevenue",
    "PaymentFrequency",
    "RevenueTrend",
    "TrendDirection",
    "UnderwritingFeatures",
    # Qualification
    "FUNDABLE_TIERS",
    "ProspectProfile",
    "QualificationContext",
    "QualificationReason",
    "QualificationResult",
    "QualificationTier",
    "ReasonResult",
    "TierRequirements",
    # Scoring
    "CompositeScoreInput",
    "FactorImpact",
    "FilingTrend",
    "Grade",
    "HealthScoreInput",
    "HealthSignals",
    "IntentScoreInput",
    "PositionScoreInput",
    "ProspectScoreOutcome",
    "ProspectSignals",
    "Recommendation",
    "ScoreFactor",
    "ScoringResult",
    "SentimentTrend",
    "UccFiling",
    "UccFilingStatus",
]
