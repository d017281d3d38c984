"""
Unit Tests for Tier Determination and Factor Evaluators.

Covers:
- Tier assignment from pass/warning/fail distributions
- Critical factor handling
- Term suggestions and funding floors
- Evaluator bands and messages
"""

import pytest

from mca_risk.domain.entities import (
    QualificationReason,
    QualificationTier,
    ReasonResult,
    TrendDirection,
)
from mca_risk.service.qualification import (
    FACTOR_ORDER,
    QualificationRules,
    calculate_max_funding,
    calculate_min_funding,
    determine_tier,
    estimate_daily_payment,
    evaluate_adb,
    evaluate_deposit_consistency,
    evaluate_monthly_revenue,
    evaluate_negative_days,
    evaluate_nsf,
    evaluate_positions,
    evaluate_revenue_trend,
    evaluate_time_in_business,
    suggest_term,
)


PASS, WARNING, FAIL = ReasonResult.PASS, ReasonResult.WARNING, ReasonResult.FAIL


def reasons(*results: ReasonResult) -> list[QualificationReason]:
    """Build reasons in factor order with the given results."""
    return [
        QualificationReason(factor=factor, result=result, message="")
        for factor, result in zip(FACTOR_ORDER, results)
    ]


@pytest.fixture
def rules() -> QualificationRules:
    return QualificationRules()


class TestDetermineTier:
    """Tests for tier assignment."""

    def test_all_pass_is_a(self):
        assert determine_tier(reasons(*[PASS] * 8)) == QualificationTier.A

    def test_one_warning_is_b(self):
        assert determine_tier(reasons(PASS, PASS, PASS, PASS, WARNING, PASS, PASS, PASS)) == QualificationTier.B

    def test_three_warnings_is_c(self):
        results = (WARNING, WARNING, WARNING, PASS, PASS, PASS, PASS, PASS)
        assert determine_tier(reasons(*results)) == QualificationTier.C

    def test_four_warnings_is_d(self):
        results = (WARNING, WARNING, WARNING, WARNING, PASS, PASS, PASS, PASS)
        assert determine_tier(reasons(*results)) == QualificationTier.D

    @pytest.mark.parametrize("index", [0, 1, 5])
    def test_critical_failure_declines(self, index):
        """ADB, NSF count and monthly revenue failures always decline."""
        results = [PASS] * 8
        results[index] = FAIL
        assert determine_tier(reasons(*results)) == QualificationTier.DECLINE

    @pytest.mark.parametrize("index", [2, 3, 4, 6])
    def test_single_non_critical_failure_is_d(self, index):
        results = [PASS] * 8
        results[index] = FAIL
        assert determine_tier(reasons(*results)) == QualificationTier.D

    def test_two_non_critical_failures_decline(self):
        results = (PASS, PASS, FAIL, FAIL, PASS, PASS, PASS, PASS)
        assert determine_tier(reasons(*results)) == QualificationTier.DECLINE


class TestFundingTerms:
    """Tests for funding amount and term helpers."""

    @pytest.mark.parametrize(
        "tier,amount,expected",
        [
            (QualificationTier.A, 0, 12),
            (QualificationTier.B, 40000, 9),
            (QualificationTier.D, 60000, 6),
            (QualificationTier.D, 150000, 9),
            (QualificationTier.C, 250000, 12),
            (QualificationTier.DECLINE, 0, 0),
        ],
    )
    def test_suggest_term(self, tier, amount, expected):
        assert suggest_term(tier, amount) == expected

    def test_max_funding_uses_multiple_and_cap(self, rules):
        assert calculate_max_funding(QualificationTier.C, 40000, rules) == pytest.approx(40000)
        assert calculate_max_funding(QualificationTier.D, 200000, rules) == pytest.approx(75000)
        assert calculate_max_funding(QualificationTier.DECLINE, 200000, rules) == 0

    def test_min_funding(self):
        assert calculate_min_funding(QualificationTier.A, 90000) == pytest.approx(5000)
        assert calculate_min_funding(QualificationTier.D, 12000) == pytest.approx(3000)
        assert calculate_min_funding(QualificationTier.DECLINE, 0) == 0

    def test_daily_payment(self):
        assert estimate_daily_payment(45000, 1.45, 4) == pytest.approx(741.48)
        assert estimate_daily_payment(0, 1.45, 4) == 0
        assert estimate_daily_payment(45000, 1.45, 0) == 0


class TestEvaluators:
    """Tests for per-factor evaluation."""

    def test_adb_bands(self, rules):
        assert evaluate_adb(25000, rules).result == PASS
        assert evaluate_adb(15000, rules).result == PASS
        assert evaluate_adb(7500, rules).result == WARNING
        assert evaluate_adb(2999, rules).result == FAIL

    def test_adb_messages(self, rules):
        met = evaluate_adb(30000, rules)
        assert met.message == "ADB of $30,000 meets A-tier threshold"
        assert met.threshold == 25000

        failed = evaluate_adb(2500, rules)
        assert failed.message == "ADB of $2,500 is below minimum threshold"
        assert failed.threshold == 3000

    def test_nsf(self, rules):
        assert evaluate_nsf(0, rules).message == "No NSF/overdraft events"
        assert evaluate_nsf(2, rules).result == PASS
        assert evaluate_nsf(4, rules).result == WARNING
        failed = evaluate_nsf(9, rules)
        assert failed.result == FAIL
        assert failed.message == "9 NSF/overdraft events exceeds maximum threshold"

    def test_negative_days(self, rules):
        assert evaluate_negative_days(0, rules).message == "No negative balance days"
        assert evaluate_negative_days(3.0, rules).result == PASS
        assert evaluate_negative_days(15.0, rules).result == WARNING
        assert evaluate_negative_days(15.1, rules).result == FAIL

    def test_positions(self, rules):
        assert evaluate_positions(0, rules).message == "No existing MCA/loan positions detected"
        assert evaluate_positions(2, rules).result == WARNING
        assert evaluate_positions(5, rules).result == FAIL

    def test_time_in_business(self, rules):
        assert evaluate_time_in_business(24, rules).result == PASS
        assert evaluate_time_in_business(3, rules).result == WARNING
        assert evaluate_time_in_business(2, rules).result == FAIL

    def test_monthly_revenue(self, rules):
        assert evaluate_monthly_revenue(50000, rules).message == "$50,000/month meets A-tier threshold"
        assert evaluate_monthly_revenue(9999, rules).result == FAIL

    @pytest.mark.parametrize(
        "score,expected",
        [(100, PASS), (75, PASS), (74, WARNING), (50, WARNING), (49, FAIL), (0, FAIL)],
    )
    def test_deposit_consistency_bands(self, score, expected):
        assert evaluate_deposit_consistency(score).result == expected

    @pytest.mark.parametrize(
        "direction,expected",
        [
            (TrendDirection.INCREASING, PASS),
            (TrendDirection.STABLE, PASS),
            (TrendDirection.DECREASING, WARNING),
            (TrendDirection.VOLATILE, WARNING),
        ],
    )
    def test_revenue_trend_never_fails(self, direction, expected):
        reason = evaluate_revenue_trend(direction)
        assert reason.result == expected
        assert reason.value == direction.value
