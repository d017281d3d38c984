"""Qualification engine: UnderwritingFeatures to QualificationResult."""

from typing import List, Optional

import structlog

from mca_risk.core.metrics import record_qualification, track_qualification_latency
from mca_risk.domain.entities import (
    QualificationContext,
    QualificationReason,
    QualificationResult,
    QualificationTier,
    TierRequirements,
    TrendDirection,
    UnderwritingFeatures,
)

from .evaluators import (
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
    calculate_max_funding,
    calculate_min_funding,
    determine_tier,
    estimate_daily_payment,
    suggest_term,
)

logger = structlog.get_logger(__name__)

STALE_DEPOSIT_DAYS = 7
OBLIGATION_TO_ADB_LIMIT = 0.5
HIGH_SEASONALITY_SCORE = 50


def collect_warnings(features: UnderwritingFeatures) -> List[str]:
    """Concerns worth surfacing that do not change the tier."""
    warnings = []

    if features.days_since_last_deposit > STALE_DEPOSIT_DAYS:
        warnings.append(f"Last deposit was {features.days_since_last_deposit} days ago")

    if features.estimated_payment_obligations > features.average_daily_balance * OBLIGATION_TO_ADB_LIMIT:
        warnings.append("Existing payment obligations are high relative to daily balance")

    if features.revenue_trend.direction == TrendDirection.DECREASING:
        warnings.append("Revenue trend is declining")

    if features.revenue_trend.seasonality_score > HIGH_SEASONALITY_SCORE:
        warnings.append("Revenue shows high seasonality/volatility")

    return warnings


class QualificationEngine:
    """
    Evaluates a merchant's features against tiered rules.

    A decline is an ordinary result with tier Decline, never an
    exception. Rules are an immutable value. ``replace_rules`` swaps
    the whole object, and each evaluation reads the reference once, so
    an in-flight qualification never sees a mix of old and new rules.
    """

    def __init__(
        self,
        rules: Optional[QualificationRules] = None,
        default_time_in_business_months: int = 6,
    ):
        self._rules = rules or QualificationRules()
        self._default_time_in_business_months = default_time_in_business_months

    @property
    def rules(self) -> QualificationRules:
        return self._rules

    def replace_rules(self, rules: QualificationRules) -> None:
        """Swap in a new rule set for subsequent evaluations."""
        self._rules = rules
        logger.info("qualification_rules_replaced")

    def get_tier_requirements(self, tier: QualificationTier) -> TierRequirements:
        """Thresholds and pricing for one fundable tier."""
        return self._rules.requirements_for(tier)

    def evaluate_reasons(
        self,
        features: UnderwritingFeatures,
        time_in_business_months: int,
        rules: QualificationRules,
    ) -> List[QualificationReason]:
        """Run the eight factor evaluators in their fixed order."""
        return [
            evaluate_adb(features.average_daily_balance, rules),
            evaluate_nsf(features.nsf_count, rules),
            evaluate_negative_days(features.negative_days_percentage, rules),
            evaluate_positions(features.estimated_position_count, rules),
            evaluate_time_in_business(time_in_business_months, rules),
            evaluate_monthly_revenue(features.average_monthly_deposits, rules),
            evaluate_deposit_consistency(features.deposit_consistency_score),
            evaluate_revenue_trend(features.revenue_trend.direction),
        ]

    def qualify(
        self,
        features: UnderwritingFeatures,
        context: Optional[QualificationContext] = None,
    ) -> QualificationResult:
        """
        Qualify a merchant for funding.

        Args:
            features: Feature snapshot from the bank feed
            context: Non-bank inputs (time in business, prospect profile)

        Returns:
            QualificationResult, including Decline outcomes
        """
        rules = self._rules
        context = context or QualificationContext()

        with track_qualification_latency():
            time_in_business = context.resolve_time_in_business(
                self._default_time_in_business_months
            )
            reasons = self.evaluate_reasons(features, time_in_business, rules)
            warnings = collect_warnings(features)

            tier = determine_tier(reasons)
            qualified = tier != QualificationTier.DECLINE

            max_amount = calculate_max_funding(tier, features.average_monthly_deposits, rules)
            min_amount = calculate_min_funding(tier, max_amount)
            suggested_rate = rules.factor_rate(tier)
            term_months = suggest_term(tier, max_amount)

            result = QualificationResult(
                qualified=qualified,
                tier=tier,
                reasons=reasons,
                max_amount=max_amount,
                min_amount=min_amount,
                suggested_rate=suggested_rate,
                suggested_term_months=term_months,
                estimated_daily_payment=estimate_daily_payment(max_amount, suggested_rate, term_months),
                risk_score=calculate_risk_score(reasons, features),
                confidence=calculate_confidence(features),
                warnings=warnings,
            )

        record_qualification(tier.value, max_amount)
        logger.info(
            "qualification_completed",
            prospect_id=context.prospect_id,
            tier=tier.value,
            max_amount=max_amount,
            risk_score=result.risk_score,
            failed_factors=result.failed_factors,
        )
        return result
