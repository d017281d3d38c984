"""
Unit Tests for Revenue Trend and Deposit Consistency.

Covers:
- Trend direction from monthly totals
- Monthly bucketing, median and seasonality
- Transfer exclusion
- Deposit consistency scoring
"""

from datetime import date, timedelta

import pytest

from mca_risk.domain.entities import Transaction, TrendDirection
from mca_risk.service.underwriting import (
    KeywordTransactionClassifier,
    analyze_revenue_trend,
    calculate_deposit_consistency,
    calculate_trend_direction,
)


def deposit(day: date, amount: float, name: str = "CARD SETTLEMENT", **kwargs) -> Transaction:
    """Helper to create a deposit (stored with a negative amount)."""
    return Transaction(
        id=f"dep-{day.isoformat()}-{name}",
        account_id="chk-1",
        date=day,
        amount=-abs(amount),
        name=name,
        **kwargs,
    )


@pytest.fixture
def classifier():
    return KeywordTransactionClassifier()


class TestTrendDirection:
    """Tests for trend classification over monthly totals."""

    def test_increasing(self):
        direction, change = calculate_trend_direction([10000, 12000, 15000, 18000])

        assert direction == TrendDirection.INCREASING
        assert change == pytest.approx(50.0)

    def test_decreasing(self):
        direction, change = calculate_trend_direction([18000, 15000, 12000, 10000])

        assert direction == TrendDirection.DECREASING
        assert change < -10

    def test_volatile_overrides_direction(self):
        direction, _ = calculate_trend_direction([1000, 20000, 1000, 20000])
        assert direction == TrendDirection.VOLATILE

    def test_stable_odd_count_skips_middle_month(self):
        """Three months compare month 1 against month 3."""
        direction, change = calculate_trend_direction([10000, 13000, 10500])

        assert direction == TrendDirection.STABLE
        assert change == pytest.approx(5.0)

    def test_single_month_is_stable(self):
        assert calculate_trend_direction([25000]) == (TrendDirection.STABLE, 0.0)

    def test_growth_from_zero(self):
        _, change = calculate_trend_direction([0, 0, 5000, 5000])
        assert change == pytest.approx(100.0)


class TestAnalyzeRevenueTrend:
    """Tests for monthly revenue analysis over transactions."""

    def test_monthly_buckets(self, classifier):
        transactions = [
            deposit(date(2024, 1, 5), 4000),
            deposit(date(2024, 1, 20), 6000),
            deposit(date(2024, 2, 10), 10000),
        ]

        trend = analyze_revenue_trend(transactions, classifier)

        assert [m.month for m in trend.monthly_data] == ["2024-01", "2024-02"]
        january = trend.monthly_data[0]
        assert january.total_deposits == pytest.approx(10000)
        assert january.deposit_count == 2
        assert january.average_deposit == pytest.approx(5000)
        assert january.max_deposit == pytest.approx(6000)
        assert january.min_deposit == pytest.approx(4000)

    def test_median_of_even_count(self, classifier):
        transactions = [
            deposit(date(2024, 1, 5), 10000),
            deposit(date(2024, 2, 5), 20000),
        ]

        trend = analyze_revenue_trend(transactions, classifier)

        assert trend.median_monthly_revenue == pytest.approx(15000)
        assert trend.average_monthly_revenue == pytest.approx(15000)

    def test_transfers_are_not_revenue(self, classifier):
        transactions = [
            deposit(date(2024, 1, 5), 10000),
            deposit(date(2024, 1, 6), 50000, name="ONLINE TRANSFER FROM SAVINGS"),
            deposit(date(2024, 1, 7), 7000, name="INTERNAL", category_hints=("Transfer",)),
        ]

        trend = analyze_revenue_trend(transactions, classifier)

        assert trend.average_monthly_revenue == pytest.approx(10000)

    def test_withdrawals_ignored(self, classifier):
        withdrawal = Transaction(id="w1", account_id="chk-1", date=date(2024, 1, 3), amount=900.0, name="RENT")
        trend = analyze_revenue_trend([withdrawal], classifier)

        assert trend.monthly_data == ()
        assert trend.direction == TrendDirection.STABLE

    def test_seasonality(self, classifier):
        """Flat revenue has no seasonality; swings raise it."""
        flat = [deposit(date(2024, m, 1), 10000) for m in range(1, 5)]
        swinging = [deposit(date(2024, m, 1), 5000 if m % 2 else 15000) for m in range(1, 5)]

        assert analyze_revenue_trend(flat, classifier).seasonality_score == pytest.approx(0)
        assert analyze_revenue_trend(swinging, classifier).seasonality_score == pytest.approx(50.0)


class TestDepositConsistency:
    """Tests for deposit consistency scoring."""

    def test_fewer_than_two_deposits(self, classifier):
        assert calculate_deposit_consistency([], classifier) == 0
        assert calculate_deposit_consistency([deposit(date(2024, 1, 1), 500)], classifier) == 0

    def test_perfectly_regular(self, classifier):
        transactions = [deposit(date(2024, 1, 1) + timedelta(days=7 * i), 2500) for i in range(10)]
        assert calculate_deposit_consistency(transactions, classifier) == 100

    def test_same_day_deposits(self, classifier):
        """Zero-day intervals give no usable spacing signal."""
        transactions = [deposit(date(2024, 1, 1), 1000, name=f"SALE {i}") for i in range(3)]

        # Interval CV falls back to 1.0 (50 points), identical amounts score 100
        assert calculate_deposit_consistency(transactions, classifier) == 70

    def test_irregular_scores_lower(self, classifier):
        regular = [deposit(date(2024, 1, 1) + timedelta(days=7 * i), 2500) for i in range(6)]
        irregular = [
            deposit(date(2024, 1, 1), 300),
            deposit(date(2024, 1, 2), 9000),
            deposit(date(2024, 1, 20), 1200),
            deposit(date(2024, 2, 28), 150),
        ]

        assert calculate_deposit_consistency(irregular, classifier) < calculate_deposit_consistency(
            regular, classifier
        )

    def test_bounded(self, classifier):
        transactions = [
            deposit(date(2024, 1, 1), 1),
            deposit(date(2024, 6, 1), 1000000),
            deposit(date(2024, 6, 2), 5),
        ]
        assert 0 <= calculate_deposit_consistency(transactions, classifier) <= 100
