"""
Daily balance reconstruction for MCA underwriting.

This module replays a bank feed to derive:
- Average / minimum / maximum daily balance
- Negative balance days
- NSF/overdraft count and fee total
- Total deposits

Providers return the current balance and a list of transactions, not
a balance per day, so the series is rebuilt by walking the window.
"""

from collections import defaultdict
from dataclasses import dataclass
from datetime import date
from typing import Dict, List, Optional, Sequence, Tuple

from mca_risk.domain.entities import AnalysisWindow, Transaction
from mca_risk.domain.interfaces import TransactionClassifier


@dataclass(frozen=True)
class DailyBalance:
    """End-of-day balance with the day's flows."""

    date: date
    balance: float
    deposits: float
    withdrawals: float


@dataclass(frozen=True)
class BalanceAnalysis:
    """Balance statistics over an analysis window."""

    average_daily_balance: float
    minimum_daily_balance: float
    maximum_daily_balance: float
    nsf_count: int
    nsf_fee_total: float
    negative_days: int
    total_days: int
    total_deposits: float
    daily_balances: Tuple[DailyBalance, ...]

    @property
    def negative_days_percentage(self) -> float:
        if self.total_days == 0:
            return 0.0
        return self.negative_days / self.total_days * 100


def calculate_opening_balance(transactions: Sequence[Transaction], current_balance: float) -> float:
    """
    Back out the balance before the first transaction.

    An outflow (positive amount) lowered the balance and an inflow
    (negative amount) raised it, so the opening balance is the current
    balance plus the sum of signed amounts.
    """
    return current_balance + sum(t.amount for t in transactions)


def analyze_transactions(
    transactions: Sequence[Transaction],
    start: date,
    end: date,
    classifier: TransactionClassifier,
    current_balance: float = 0.0,
) -> BalanceAnalysis:
    """
    Rebuild the daily balance series and derive balance statistics.

    Algorithm:
        1. Keep transactions dated inside [start, end]
        2. Derive the opening balance from the known current balance
        3. Walk every day in the window in order:
           - Apply that day's transactions to the running balance
           - Days with no activity carry the previous balance forward
        4. Min / max / mean over the per-day end balances; count days
           that end below zero

    Business Rationale:
        ADB is the merchant's cushion against the daily debit of an
        advance. Negative days and NSF fees show how often that
        cushion has already run out.

    Args:
        transactions: Posted transactions for a single account
        start: First day of the analysis window
        end: Last day of the analysis window
        classifier: Labels deposits and NSF fees
        current_balance: Balance reported at the end of the window

    Returns:
        BalanceAnalysis for the window (zeros when the window has no days)
    """
    window = AnalysisWindow(start=start, end=end)
    in_window = sorted(
        (t for t in transactions if window.contains(t.date)),
        key=lambda t: t.date,
    )

    by_day: Dict[date, List[Transaction]] = defaultdict(list)
    for txn in in_window:
        by_day[txn.date].append(txn)

    nsf_count = 0
    nsf_fee_total = 0.0
    total_deposits = 0.0
    running_balance = calculate_opening_balance(in_window, current_balance)

    daily_balances: List[DailyBalance] = []
    for day in window.days():
        deposits = 0.0
        withdrawals = 0.0
        for txn in by_day.get(day, ()):
            if classifier.is_deposit(txn):
                deposits += abs(txn.amount)
            elif classifier.is_withdrawal(txn):
                withdrawals += txn.amount

            if classifier.is_nsf_fee(txn):
                nsf_count += 1
                nsf_fee_total += abs(txn.amount)

            running_balance -= txn.amount

        total_deposits += deposits
        daily_balances.append(
            DailyBalance(
                date=day,
                balance=running_balance,
                deposits=deposits,
                withdrawals=withdrawals,
            )
        )

    balances = [d.balance for d in daily_balances]
    total_days = len(balances)

    return BalanceAnalysis(
        average_daily_balance=sum(balances) / total_days if total_days else 0.0,
        minimum_daily_balance=min(balances) if balances else 0.0,
        maximum_daily_balance=max(balances) if balances else 0.0,
        nsf_count=nsf_count,
        nsf_fee_total=nsf_fee_total,
        negative_days=sum(1 for b in balances if b < 0),
        total_days=total_days,
        total_deposits=total_deposits,
        daily_balances=tuple(daily_balances),
    )


def days_since_last_deposit(
    deposits: Sequence[Transaction],
    as_of: date,
    default: Optional[int] = None,
) -> int:
    """Whole days between the latest deposit and ``as_of``."""
    if not deposits:
        return default if default is not None else 0
    latest = max(t.date for t in deposits)
    return max(0, (as_of - latest).days)
