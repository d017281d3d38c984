"""
Tiered qualification for merchant cash advances.
"""

from .engine import QualificationEngine, collect_warnings
from .evaluators import (
    CRITICAL_FACTORS,
    FACTOR_ORDER,
    evaluate_adb,
    evaluate_deposit_consistency,
    evaluate_monthly_revenue,
    evaluate_negative_days,
    evaluate_nsf,
    evaluate_positions,
    evaluate_revenue_trend,
    evaluate_time_in_business,
)
from .risk import calculate_confidence, calculate_risk_score
from .settings import QualificationRules
from .tiers import (
    TIER_FUNDING_CAPS,
    calculate_max_funding,
    calculate_min_funding,
    determine_tier,
    estimate_daily_payment,
    suggest_term,
)

__all__ = [
    # Settings
    "QualificationRules",
    # Evaluators
    "CRITICAL_FACTORS",
    "FACTOR_ORDER",
    "evaluate_adb",
    "evaluate_deposit_consistency",
    "evaluate_monthly_revenue",
    "evaluate_negative_days",
    "evaluate_nsf",
    "evaluate_positions",
    "evaluate_revenue_trend",
    "evaluate_time_in_business",
    # Tiers and terms
    "TIER_FUNDING_CAPS",
    "calculate_max_funding",
    "calculate_min_funding",
    "determine_tier",
    "estimate_daily_payment",
    "suggest_term",
    # Risk
    "calculate_confidence",
    "calculate_risk_score",
    # Engine
    "QualificationEngine",
    "collect_warnings",
]
