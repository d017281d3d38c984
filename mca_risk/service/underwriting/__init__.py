"""
Underwriting feature extraction.

Turns a merchant's bank feed into a fixed-shape UnderwritingFeatures
snapshot: balances, NSF events, existing positions and revenue.
"""

from .balances import BalanceAnalysis, DailyBalance, analyze_transactions
from .classifier import KeywordTransactionClassifier, LenderRegistry, normalize_merchant_name
from .extractor import TransactionFeatureExtractor, select_primary_account
from .lender_payments import (
    calculate_lender_confidence,
    determine_payment_frequency,
    detect_lender_payments,
    estimate_positions,
)
from .revenue import analyze_revenue_trend, calculate_deposit_consistency, calculate_trend_direction

__all__ = [
    # Balances
    "BalanceAnalysis",
    "DailyBalance",
    "analyze_transactions",
    # Classification
    "KeywordTransactionClassifier",
    "LenderRegistry",
    "normalize_merchant_name",
    # Lender payments
    "calculate_lender_confidence",
    "determine_payment_frequency",
    "detect_lender_payments",
    "estimate_positions",
    # Revenue
    "analyze_revenue_trend",
    "calculate_deposit_consistency",
    "calculate_trend_direction",
    # Extraction
    "TransactionFeatureExtractor",
    "select_primary_account",
]
