"""
Existing position detection.

Recurring debits to MCA and small-business lenders are the strongest
signal that a merchant is already funded. This module groups those
debits by lender, infers the debit cadence and estimates the daily
obligation they put on the account.
"""

import statistics
from collections import Counter, defaultdict
from datetime import date
from typing import Dict, List, Optional, Sequence, Tuple

from mca_risk.domain.entities import LenderPayment, PaymentFrequency, Transaction
from mca_risk.domain.interfaces import TransactionClassifier

from .classifier import LenderRegistry, normalize_merchant_name


# Modal gap (days) upper bounds per cadence
DAILY_MAX_GAP_DAYS = 3
WEEKLY_MAX_GAP_DAYS = 10

# Longest fallback group name for lenders not in the registry
MAX_UNKNOWN_LENDER_NAME = 50


def coefficient_of_variation(values: Sequence[float]) -> float:
    """Population CV (stdev / mean). Returns 1.0 when the mean is not positive."""
    if not values:
        return 1.0
    mean = statistics.fmean(values)
    if mean <= 0:
        return 1.0
    return statistics.pstdev(values) / mean


def determine_payment_frequency(payment_dates: Sequence[date]) -> PaymentFrequency:
    """
    Infer the debit cadence from the modal gap between payments.

    Gaps of up to 3 days are daily (this absorbs weekends), up to 10
    days weekly, anything longer monthly. When two gaps are equally
    common the shorter one wins. A single payment has no gap and is
    treated as monthly.
    """
    ordered = sorted(payment_dates)
    gaps = [(later - earlier).days for earlier, later in zip(ordered, ordered[1:])]
    if not gaps:
        return PaymentFrequency.MONTHLY

    counts = Counter(gaps)
    modal_gap = min(counts, key=lambda gap: (-counts[gap], gap))

    if modal_gap <= DAILY_MAX_GAP_DAYS:
        return PaymentFrequency.DAILY
    if modal_gap <= WEEKLY_MAX_GAP_DAYS:
        return PaymentFrequency.WEEKLY
    return PaymentFrequency.MONTHLY


def calculate_lender_confidence(amounts: Sequence[float]) -> float:
    """
    Confidence (0-1) that a payment group is a funded position.

    Starts at 0.5. More payments and steadier amounts both raise it,
    since advances are repaid in fixed installments.
    """
    score = 0.5

    count = len(amounts)
    if count >= 20:
        score += 0.2
    elif count >= 10:
        score += 0.15
    elif count >= 5:
        score += 0.1

    cv = coefficient_of_variation(amounts)
    if cv < 0.1:
        score += 0.2
    elif cv < 0.25:
        score += 0.1

    return round(max(0.0, min(1.0, score)), 2)


def _lender_key(transaction: Transaction, registry: LenderRegistry) -> str:
    canonical = registry.resolve(transaction.display_name) or registry.resolve(transaction.name)
    if canonical:
        return canonical
    return normalize_merchant_name(transaction.display_name)[:MAX_UNKNOWN_LENDER_NAME]


def detect_lender_payments(
    transactions: Sequence[Transaction],
    classifier: TransactionClassifier,
    registry: Optional[LenderRegistry] = None,
) -> List[LenderPayment]:
    """
    Detect recurring lender debits.

    Withdrawals the classifier flags as lender payments are grouped by
    canonical lender name. Descriptions the registry does not know
    (matched through loan categories or generic MCA wording) are
    grouped under their normalized name.

    Args:
        transactions: Posted transactions for the primary account
        classifier: Flags withdrawals and lender payments
        registry: Known lenders (defaults to the built-in list)

    Returns:
        One LenderPayment per lender, ordered by lender name
    """
    registry = registry or LenderRegistry()
    grouped: Dict[str, List[Transaction]] = defaultdict(list)

    for txn in transactions:
        if not classifier.is_withdrawal(txn) or not classifier.is_lender_payment(txn):
            continue
        key = _lender_key(txn, registry)
        if key:
            grouped[key].append(txn)

    payments: List[LenderPayment] = []
    for lender_name in sorted(grouped):
        ordered = sorted(grouped[lender_name], key=lambda t: t.date)
        amounts = tuple(abs(t.amount) for t in ordered)
        dates = tuple(t.date for t in ordered)
        payments.append(
            LenderPayment(
                lender_name=lender_name,
                amounts=amounts,
                frequency=determine_payment_frequency(dates),
                confidence=calculate_lender_confidence(amounts),
                payment_dates=dates,
            )
        )

    return payments


def estimate_positions(payments: Sequence[LenderPayment]) -> Tuple[int, float]:
    """
    Estimate open positions and their combined daily obligation.

    Returns:
        (distinct lender count, daily payment obligations in dollars)
    """
    position_count = len({p.lender_name for p in payments})
    daily_obligations = sum(p.daily_obligation for p in payments)
    return position_count, daily_obligations
