"""
Qualification factor evaluators.

Each evaluator compares one feature against the tier tables and
returns a QualificationReason. Table factors walk the tiers from A to
D and stop at the first tier whose threshold is met:

    A or B met  -> pass
    C or D met  -> warning
    none met    -> fail
"""

from typing import Callable, Dict, Union

from mca_risk.domain.entities import (
    FUNDABLE_TIERS,
    QualificationReason,
    QualificationTier,
    ReasonResult,
    TrendDirection,
)

from .settings import QualificationRules


# Factor names, in evaluation order
FACTOR_ADB = "Average Daily Balance"
FACTOR_NSF = "NSF/Overdraft Count"
FACTOR_NEGATIVE_DAYS = "Negative Balance Days"
FACTOR_POSITIONS = "Existing Positions"
FACTOR_TIME_IN_BUSINESS = "Time in Business"
FACTOR_MONTHLY_REVENUE = "Monthly Revenue"
FACTOR_DEPOSIT_CONSISTENCY = "Deposit Consistency"
FACTOR_REVENUE_TREND = "Revenue Trend"

FACTOR_ORDER = (
    FACTOR_ADB,
    FACTOR_NSF,
    FACTOR_NEGATIVE_DAYS,
    FACTOR_POSITIONS,
    FACTOR_TIME_IN_BUSINESS,
    FACTOR_MONTHLY_REVENUE,
    FACTOR_DEPOSIT_CONSISTENCY,
    FACTOR_REVENUE_TREND,
)

# A fail on any of these declines outright
CRITICAL_FACTORS = frozenset({FACTOR_ADB, FACTOR_MONTHLY_REVENUE, FACTOR_NSF})

CONSISTENCY_PASS_THRESHOLD = 75
CONSISTENCY_WARNING_THRESHOLD = 50

Number = Union[int, float]


def _result_for_tier(tier: QualificationTier) -> ReasonResult:
    if tier in (QualificationTier.A, QualificationTier.B):
        return ReasonResult.PASS
    return ReasonResult.WARNING


def _walk_tiers(
    factor: str,
    value: Number,
    table: Dict[QualificationTier, Number],
    meets: Callable[[Number, Number], bool],
    met_message: Callable[[QualificationTier], str],
    failed_message: str,
) -> QualificationReason:
    for tier in FUNDABLE_TIERS:
        if meets(value, table[tier]):
            return QualificationReason(
                factor=factor,
                result=_result_for_tier(tier),
                message=met_message(tier),
                value=value,
                threshold=table[tier],
            )
    return QualificationReason(
        factor=factor,
        result=ReasonResult.FAIL,
        message=failed_message,
        value=value,
        threshold=table[QualificationTier.D],
    )


def _at_least(value: Number, threshold: Number) -> bool:
    return value >= threshold


def _at_most(value: Number, threshold: Number) -> bool:
    return value <= threshold


def _dollars(amount: float) -> str:
    return f"${round(amount):,}"


def evaluate_adb(adb: float, rules: QualificationRules) -> QualificationReason:
    return _walk_tiers(
        FACTOR_ADB,
        adb,
        rules.min_adb,
        _at_least,
        lambda tier: f"ADB of {_dollars(adb)} meets {tier.value}-tier threshold",
        f"ADB of {_dollars(adb)} is below minimum threshold",
    )


def evaluate_nsf(nsf_count: int, rules: QualificationRules) -> QualificationReason:
    def met(tier: QualificationTier) -> str:
        if nsf_count == 0:
            return "No NSF/overdraft events"
        return f"{nsf_count} NSF/overdraft events is within {tier.value}-tier threshold"

    return _walk_tiers(
        FACTOR_NSF,
        nsf_count,
        rules.max_nsf,
        _at_most,
        met,
        f"{nsf_count} NSF/overdraft events exceeds maximum threshold",
    )


def evaluate_negative_days(percentage: float, rules: QualificationRules) -> QualificationReason:
    def met(tier: QualificationTier) -> str:
        if percentage == 0:
            return "No negative balance days"
        return f"{percentage:.1f}% negative days meets {tier.value}-tier threshold"

    return _walk_tiers(
        FACTOR_NEGATIVE_DAYS,
        percentage,
        rules.max_negative_days_pct,
        _at_most,
        met,
        f"{percentage:.1f}% negative balance days exceeds maximum threshold",
    )


def evaluate_positions(position_count: int, rules: QualificationRules) -> QualificationReason:
    def met(tier: QualificationTier) -> str:
        if position_count == 0:
            return "No existing MCA/loan positions detected"
        return f"{position_count} existing position(s) meets {tier.value}-tier threshold"

    return _walk_tiers(
        FACTOR_POSITIONS,
        position_count,
        rules.max_positions,
        _at_most,
        met,
        f"{position_count} existing positions exceeds maximum threshold",
    )


def evaluate_time_in_business(months: int, rules: QualificationRules) -> QualificationReason:
    return _walk_tiers(
        FACTOR_TIME_IN_BUSINESS,
        months,
        rules.min_time_in_business_months,
        _at_least,
        lambda tier: f"{months} months in business meets {tier.value}-tier threshold",
        f"{months} months in business is below minimum threshold",
    )


def evaluate_monthly_revenue(revenue: float, rules: QualificationRules) -> QualificationReason:
    return _walk_tiers(
        FACTOR_MONTHLY_REVENUE,
        revenue,
        rules.min_monthly_revenue,
        _at_least,
        lambda tier: f"{_dollars(revenue)}/month meets {tier.value}-tier threshold",
        f"{_dollars(revenue)}/month is below minimum threshold",
    )


def evaluate_deposit_consistency(score: float) -> QualificationReason:
    """Fixed bands: 75+ pass, 50+ warning, below 50 fail."""
    if score >= CONSISTENCY_PASS_THRESHOLD:
        return QualificationReason(
            factor=FACTOR_DEPOSIT_CONSISTENCY,
            result=ReasonResult.PASS,
            message=f"Strong deposit consistency ({score}/100)",
            value=score,
            threshold=CONSISTENCY_PASS_THRESHOLD,
        )
    if score >= CONSISTENCY_WARNING_THRESHOLD:
        return QualificationReason(
            factor=FACTOR_DEPOSIT_CONSISTENCY,
            result=ReasonResult.WARNING,
            message=f"Moderate deposit consistency ({score}/100)",
            value=score,
            threshold=CONSISTENCY_WARNING_THRESHOLD,
        )
    return QualificationReason(
        factor=FACTOR_DEPOSIT_CONSISTENCY,
        result=ReasonResult.FAIL,
        message=f"Low deposit consistency ({score}/100) indicates irregular revenue",
        value=score,
        threshold=CONSISTENCY_WARNING_THRESHOLD,
    )


_TREND_OUTCOMES = {
    TrendDirection.INCREASING: (ReasonResult.PASS, "Revenue is increasing"),
    TrendDirection.STABLE: (ReasonResult.PASS, "Revenue is stable"),
    TrendDirection.DECREASING: (ReasonResult.WARNING, "Revenue is declining"),
    TrendDirection.VOLATILE: (ReasonResult.WARNING, "Revenue shows high volatility"),
}


def evaluate_revenue_trend(direction: TrendDirection) -> QualificationReason:
    """Growing or flat revenue passes; declining or volatile revenue warns. Never fails."""
    result, message = _TREND_OUTCOMES[direction]
    return QualificationReason(
        factor=FACTOR_REVENUE_TREND,
        result=result,
        message=message,
        value=direction.value,
    )
