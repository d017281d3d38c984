"""Underwriting feature entities derived from a bank feed."""

import calendar
from dataclasses import dataclass
from datetime import date, timedelta
from enum import Enum
from typing import Optional, Tuple


BUSINESS_DAYS_PER_WEEK = 5
BUSINESS_DAYS_PER_MONTH = 22


class PaymentFrequency(str, Enum):
    """How often a lender debits the account."""

    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"


class TrendDirection(str, Enum):
    """Direction of monthly revenue over the analysis window."""

    INCREASING = "increasing"
    STABLE = "stable"
    DECREASING = "decreasing"
    VOLATILE = "volatile"


@dataclass(frozen=True)
class AnalysisWindow:
    """Inclusive date range a feature snapshot covers."""

    start: date
    end: date

    def __post_init__(self):
        if self.start > self.end:
            raise ValueError(f"Window start {self.start} is after end {self.end}")

    @property
    def total_days(self) -> int:
        return (self.end - self.start).days + 1

    def contains(self, day: date) -> bool:
        return self.start <= day <= self.end

    def days(self):
        """Iterate over every day in the window."""
        current = self.start
        while current <= self.end:
            yield current
            current += timedelta(days=1)

    @classmethod
    def trailing_months(cls, months: int, end: Optional[date] = None) -> "AnalysisWindow":
        """Window covering the ``months`` calendar months before ``end``."""
        end = end or date.today()
        month_index = end.year * 12 + (end.month - 1) - months
        year, month = divmod(month_index, 12)
        month += 1
        day = min(end.day, calendar.monthrange(year, month)[1])
        return cls(start=date(year, month, day), end=end)


@dataclass(frozen=True)
class LenderPayment:
    """
    A recurring debit attributed to a known lender.

    Attributes:
        lender_name: Canonical lender name from the registry
        amounts: Payment amounts in chronological order (positive dollars)
        frequency: Inferred debit cadence
        confidence: 0-1 confidence that this is a funded position
        payment_dates: Posting dates matching ``amounts``
    """

    lender_name: str
    amounts: Tuple[float, ...]
    frequency: PaymentFrequency
    confidence: float
    payment_dates: Tuple[date, ...] = ()

    @property
    def average_amount(self) -> float:
        if not self.amounts:
            return 0.0
        return sum(self.amounts) / len(self.amounts)

    @property
    def last_payment_date(self) -> Optional[date]:
        return self.payment_dates[-1] if self.payment_dates else None

    @property
    def daily_obligation(self) -> float:
        """Average payment spread over business days."""
        if self.frequency == PaymentFrequency.DAILY:
            return self.average_amount
        if self.frequency == PaymentFrequency.WEEKLY:
            return self.average_amount / BUSINESS_DAYS_PER_WEEK
        return self.average_amount / BUSINESS_DAYS_PER_MONTH


@dataclass(frozen=True)
class MonthlyRevenue:
    """Deposit totals for one calendar month (``YYYY-MM``)."""

    month: str
    total_deposits: float
    deposit_count: int
    average_deposit: float
    max_deposit: float
    min_deposit: float


@dataclass(frozen=True)
class RevenueTrend:
    """
    Revenue trend analysis over monthly deposit totals.

    Attributes:
        direction: Trend classification
        percentage_change: Later-period mean vs earlier-period mean, in percent
        average_monthly_revenue: Mean of monthly deposit totals
        median_monthly_revenue: Median of monthly deposit totals
        seasonality_score: Coefficient of variation of monthly totals, 0-100
        monthly_data: Per-month breakdown in calendar order
    """

    direction: TrendDirection = TrendDirection.STABLE
    percentage_change: float = 0.0
    average_monthly_revenue: float = 0.0
    median_monthly_revenue: float = 0.0
    seasonality_score: float = 0.0
    monthly_data: Tuple[MonthlyRevenue, ...] = ()


@dataclass(frozen=True)
class UnderwritingFeatures:
    """
    Fixed-shape snapshot of a merchant's bank behaviour.

    Computed once per extraction and never mutated. Every qualification
    factor reads from this object.
    """

    # Balances
    average_daily_balance: float
    minimum_daily_balance: float
    maximum_daily_balance: float
    current_balance: float

    # NSF and overdraft
    nsf_count: int
    nsf_fee_total: float
    negative_days: int
    negative_days_percentage: float

    # Existing positions
    lender_payments: Tuple[LenderPayment, ...]
    estimated_position_count: int
    estimated_payment_obligations: float

    # Revenue
    revenue_trend: RevenueTrend
    average_monthly_deposits: float
    total_deposits: float
    deposit_consistency_score: float
    days_since_last_deposit: int

    # Coverage
    analysis_start_date: date
    analysis_end_date: date
    total_days_analyzed: int
    total_transactions_analyzed: int
    primary_account_id: str
    primary_account_type: str

    def to_dict(self) -> dict:
        """Convert to a JSON-friendly dict for upstream consumers."""
        return {
            "average_daily_balance": round(self.average_daily_balance, 2),
            "minimum_daily_balance": round(self.minimum_daily_balance, 2),
            "maximum_daily_balance": round(self.maximum_daily_balance, 2),
            "current_balance": round(self.current_balance, 2),
            "nsf_count": self.nsf_count,
            "nsf_fee_total": round(self.nsf_fee_total, 2),
            "negative_days": self.negative_days,
            "negative_days_percentage": round(self.negative_days_percentage, 2),
            "lender_payments": [
                {
                    "lender_name": p.lender_name,
                    "amounts": list(p.amounts),
                    "frequency": p.frequency.value,
                    "confidence": p.confidence,
                }
                for p in self.lender_payments
            ],
            "estimated_position_count": self.estimated_position_count,
            "estimated_payment_obligations": round(self.estimated_payment_obligations, 2),
            "revenue_trend": {
                "direction": self.revenue_trend.direction.value,
                "percentage_change": round(self.revenue_trend.percentage_change, 2),
                "seasonality_score": round(self.revenue_trend.seasonality_score, 2),
            },
            "average_monthly_deposits": round(self.average_monthly_deposits, 2),
            "total_deposits": round(self.total_deposits, 2),
            "deposit_consistency_score": self.deposit_consistency_score,
            "days_since_last_deposit": self.days_since_last_deposit,
            "analysis_start_date": self.analysis_start_date.isoformat(),
            "analysis_end_date": self.analysis_end_date.isoformat(),
            "total_days_analyzed": self.total_days_analyzed,
            "total_transactions_analyzed": self.total_transactions_analyzed,
            "primary_account_id": self.primary_account_id,
            "primary_account_type": self.primary_account_type,
        }
