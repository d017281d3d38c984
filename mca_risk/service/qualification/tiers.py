"""
Tier assignment and funding terms for the MCA qualification engine.

Maps the eight evaluated factors to a tier, then the tier and monthly
revenue to a maximum advance, a term and a daily payment.
"""

from typing import Dict, Sequence

from mca_risk.domain.entities import QualificationReason, QualificationTier, ReasonResult
from mca_risk.domain.entities.features import BUSINESS_DAYS_PER_MONTH

from .evaluators import CRITICAL_FACTORS
from .settings import QualificationRules


# Hard ceiling on the advance per tier, in dollars
TIER_FUNDING_CAPS: Dict[QualificationTier, float] = {
    QualificationTier.A: 500_000,
    QualificationTier.B: 250_000,
    QualificationTier.C: 150_000,
    QualificationTier.D: 75_000,
    QualificationTier.DECLINE: 0,
}

BASE_TERM_MONTHS: Dict[QualificationTier, int] = {
    QualificationTier.A: 12,
    QualificationTier.B: 9,
    QualificationTier.C: 6,
    QualificationTier.D: 4,
    QualificationTier.DECLINE: 0,
}

# (amount above, minimum term in months), largest first
TERM_ESCALATIONS = (
    (200_000, 12),
    (100_000, 9),
    (50_000, 6),
)

MIN_FUNDING_FLOOR = 5000
MIN_FUNDING_SHARE = 0.25


def determine_tier(reasons: Sequence[QualificationReason]) -> QualificationTier:
    """
    Assign a tier from the distribution of factor results.

    Rules, applied in order:
        1. Any critical factor (ADB, Monthly Revenue, NSF count) failed -> Decline
        2. Two or more failures -> Decline
        3. Exactly one non-critical failure -> D
        4. No failures:
           - 0 warnings and at least 7 passes -> A
           - at most 1 warning and at least 6 passes -> B
           - at most 3 warnings -> C
           - otherwise D

    Args:
        reasons: Evaluated qualification factors

    Returns:
        The qualification tier
    """
    fails = [r for r in reasons if r.result == ReasonResult.FAIL]
    if fails:
        if any(r.factor in CRITICAL_FACTORS for r in fails):
            return QualificationTier.DECLINE
        if len(fails) >= 2:
            return QualificationTier.DECLINE
        return QualificationTier.D

    passes = sum(1 for r in reasons if r.result == ReasonResult.PASS)
    warnings = sum(1 for r in reasons if r.result == ReasonResult.WARNING)

    if warnings == 0 and passes >= 7:
        return QualificationTier.A
    elif warnings <= 1 and passes >= 6:
        return QualificationTier.B
    elif warnings <= 3:
        return QualificationTier.C
    else:
        return QualificationTier.D


def calculate_max_funding(
    tier: QualificationTier,
    monthly_revenue: float,
    rules: QualificationRules,
) -> float:
    """
    Maximum advance in dollars, rounded to cents.

    The lesser of the tier's revenue multiple and the tier's hard cap.
    Decline is always 0.
    """
    if tier == QualificationTier.DECLINE:
        return 0.0
    from_revenue = max(0.0, monthly_revenue) * rules.funding_multiple(tier)
    return round(min(from_revenue, TIER_FUNDING_CAPS[tier]), 2)


def calculate_min_funding(tier: QualificationTier, max_amount: float) -> float:
    """Smallest advance offered: $5,000 or a quarter of the maximum, whichever is less."""
    if tier == QualificationTier.DECLINE:
        return 0.0
    return round(min(MIN_FUNDING_FLOOR, max_amount * MIN_FUNDING_SHARE), 2)


def suggest_term(tier: QualificationTier, amount: float) -> int:
    """
    Suggested term in months.

    Starts from the tier's base term and is lengthened, never
    shortened, for larger advances.
    """
    term = BASE_TERM_MONTHS[tier]
    for threshold, minimum_term in TERM_ESCALATIONS:
        if amount > threshold:
            return max(term, minimum_term)
    return term


def estimate_daily_payment(amount: float, factor_rate: float, term_months: int) -> float:
    """Total payback spread over the business days in the term, rounded to cents."""
    if amount <= 0 or term_months <= 0:
        return 0.0
    return round(amount * factor_rate / (term_months * BUSINESS_DAYS_PER_MONTH), 2)
