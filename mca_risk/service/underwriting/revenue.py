"""
Revenue trend and deposit consistency analysis.

Business deposits are bucketed by calendar month to measure revenue
level, direction and seasonality. Transfers between the merchant's own
accounts are not revenue and are excluded throughout.
"""

import math
import statistics
from collections import OrderedDict
from typing import Dict, List, Sequence, Tuple

from mca_risk.domain.entities import MonthlyRevenue, RevenueTrend, Transaction, TrendDirection
from mca_risk.domain.interfaces import TransactionClassifier

from .lender_payments import coefficient_of_variation


VOLATILITY_CV_THRESHOLD = 0.5
TREND_CHANGE_THRESHOLD_PCT = 10.0

INTERVAL_WEIGHT = 0.6
AMOUNT_WEIGHT = 0.4


def revenue_deposits(
    transactions: Sequence[Transaction],
    classifier: TransactionClassifier,
) -> List[Transaction]:
    """Deposits that count as business revenue, oldest first."""
    deposits = [
        t for t in transactions
        if classifier.is_deposit(t) and not classifier.is_transfer(t)
    ]
    return sorted(deposits, key=lambda t: t.date)


def bucket_by_month(deposits: Sequence[Transaction]) -> Tuple[MonthlyRevenue, ...]:
    """Group deposits into per-month totals in calendar order."""
    buckets: Dict[str, List[float]] = OrderedDict()
    for txn in sorted(deposits, key=lambda t: t.date):
        buckets.setdefault(txn.date.strftime("%Y-%m"), []).append(abs(txn.amount))

    return tuple(
        MonthlyRevenue(
            month=month,
            total_deposits=sum(amounts),
            deposit_count=len(amounts),
            average_deposit=sum(amounts) / len(amounts),
            max_deposit=max(amounts),
            min_deposit=min(amounts),
        )
        for month, amounts in buckets.items()
    )


def calculate_trend_direction(monthly_totals: Sequence[float]) -> Tuple[TrendDirection, float]:
    """
    Classify the direction of a monthly revenue series.

    The mean of the earlier half of the months is compared to the mean
    of the later half; with an odd count the middle month is left out.
    A series whose CV exceeds 0.5 is volatile regardless of direction.

    Returns:
        (direction, percentage change from earlier to later half)
    """
    if len(monthly_totals) < 2:
        return TrendDirection.STABLE, 0.0

    half = len(monthly_totals) // 2
    earlier = monthly_totals[:half]
    later = monthly_totals[-half:]

    earlier_mean = statistics.fmean(earlier)
    later_mean = statistics.fmean(later)
    if earlier_mean > 0:
        change = (later_mean - earlier_mean) / earlier_mean * 100
    else:
        change = 100.0 if later_mean > 0 else 0.0

    if coefficient_of_variation(monthly_totals) > VOLATILITY_CV_THRESHOLD:
        return TrendDirection.VOLATILE, change
    if change > TREND_CHANGE_THRESHOLD_PCT:
        return TrendDirection.INCREASING, change
    if change < -TREND_CHANGE_THRESHOLD_PCT:
        return TrendDirection.DECREASING, change
    return TrendDirection.STABLE, change


def analyze_revenue_trend(
    transactions: Sequence[Transaction],
    classifier: TransactionClassifier,
) -> RevenueTrend:
    """
    Analyze monthly revenue level, direction and seasonality.

    Seasonality is the CV of monthly totals scaled to 0-100.
    """
    monthly = bucket_by_month(revenue_deposits(transactions, classifier))
    if not monthly:
        return RevenueTrend()

    totals = [m.total_deposits for m in monthly]
    direction, change = calculate_trend_direction(totals)

    average = statistics.fmean(totals)
    seasonality = 0.0
    if len(totals) > 1 and average > 0:
        seasonality = min(100.0, statistics.pstdev(totals) / average * 100)

    return RevenueTrend(
        direction=direction,
        percentage_change=change,
        average_monthly_revenue=average,
        median_monthly_revenue=statistics.median(totals),
        seasonality_score=seasonality,
        monthly_data=monthly,
    )


def _consistency_component(cv: float) -> float:
    # CV 0 scores 100, CV 1 scores 50, CV 2 and above score 0
    return max(0.0, min(100.0, 100 - cv * 50))


def calculate_deposit_consistency(
    transactions: Sequence[Transaction],
    classifier: TransactionClassifier,
) -> int:
    """
    Score (0-100) how regular the merchant's deposits are.

    Combines the regularity of the gaps between deposits (60%) with the
    regularity of deposit amounts (40%). Fewer than two deposits score 0.
    """
    deposits = revenue_deposits(transactions, classifier)
    if len(deposits) < 2:
        return 0

    intervals = [
        (later.date - earlier.date).days
        for earlier, later in zip(deposits, deposits[1:])
    ]
    amounts = [abs(t.amount) for t in deposits]

    interval_score = _consistency_component(coefficient_of_variation(intervals))
    amount_score = _consistency_component(coefficient_of_variation(amounts))

    score = math.floor(interval_score * INTERVAL_WEIGHT + amount_score * AMOUNT_WEIGHT + 0.5)
    return max(0, min(100, score))
