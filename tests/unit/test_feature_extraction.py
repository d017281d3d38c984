"""
Unit Tests for Underwriting Feature Extraction.

These tests verify:
1. Transaction classification (deposits, NSF fees, lender payments, transfers)
2. Daily balance reconstruction (ADB, negative days, NSF totals)
3. Primary account selection
4. End-to-end feature extraction from a bank feed
"""

from datetime import date, timedelta

import pytest

from mca_risk.domain.entities import (
    Account,
    AccountBalances,
    AnalysisWindow,
    PaymentFrequency,
    Transaction,
    TrendDirection,
)
from mca_risk.domain.exceptions import NoSuitableAccountException
from mca_risk.service.underwriting import (
    KeywordTransactionClassifier,
    LenderRegistry,
    TransactionFeatureExtractor,
    analyze_transactions,
    normalize_merchant_name,
    select_primary_account,
)


# =============================================================================
# Test Fixtures
# =============================================================================

_counter = 0


def make_txn(
    day: date,
    amount: float,
    name: str = "",
    account_id: str = "chk-1",
    category_hints: tuple = (),
    pending: bool = False,
    merchant_name: str | None = None,
) -> Transaction:
    """Helper to create a transaction (negative amount = deposit)."""
    global _counter
    _counter += 1
    return Transaction(
        id=f"txn-{_counter}",
        account_id=account_id,
        date=day,
        amount=amount,
        name=name,
        category_hints=category_hints,
        pending=pending,
        merchant_name=merchant_name,
    )


def checking(account_id: str = "chk-1", current: float = 0.0) -> Account:
    return Account(
        account_id=account_id,
        name="Business Checking",
        type="depository",
        subtype="checking",
        balances=AccountBalances(current=current, available=current),
    )


def savings(account_id: str = "sav-1", current: float = 0.0) -> Account:
    return Account(
        account_id=account_id,
        name="Business Savings",
        type="depository",
        subtype="savings",
        balances=AccountBalances(current=current),
    )


@pytest.fixture
def classifier() -> KeywordTransactionClassifier:
    return KeywordTransactionClassifier()


# =============================================================================
# Classifier Tests
# =============================================================================

class TestTransactionClassifier:
    """Tests for the keyword classifier."""

    def test_sign_convention(self, classifier):
        """Negative amounts are deposits, positive amounts withdrawals."""
        deposit = make_txn(date(2024, 1, 2), -1500.0, "STRIPE PAYOUT")
        withdrawal = make_txn(date(2024, 1, 2), 200.0, "OFFICE DEPOT")

        assert classifier.is_deposit(deposit)
        assert not classifier.is_withdrawal(deposit)
        assert classifier.is_withdrawal(withdrawal)
        assert not classifier.is_deposit(withdrawal)

    @pytest.mark.parametrize("name", [
        "NSF FEE",
        "OVERDRAFT FEE",
        "OD FEE 01/12",
        "RETURNED ITEM FEE",
        "INSUFFICIENT FUNDS CHARGE",
        "UNCOLLECTED FUNDS FEE",
    ])
    def test_nsf_indicators(self, classifier, name):
        """Known NSF/overdraft descriptions are flagged."""
        assert classifier.is_nsf_fee(make_txn(date(2024, 1, 2), 35.0, name))

    def test_transfer_is_not_nsf(self, classifier):
        """'TRANSFER' contains the letters NSF but is not an NSF fee."""
        assert not classifier.is_nsf_fee(make_txn(date(2024, 1, 2), 100.0, "ONLINE TRANSFER TO SAVINGS"))

    def test_nsf_refund_is_not_a_fee(self, classifier):
        """A refunded NSF fee is an inflow, not a fee."""
        assert not classifier.is_nsf_fee(make_txn(date(2024, 1, 2), -35.0, "NSF FEE REFUND"))

    def test_known_lender_payment(self, classifier):
        assert classifier.is_lender_payment(make_txn(date(2024, 1, 2), 450.0, "ONDECK CAPITAL 8812"))

    def test_lender_payment_by_merchant_name(self, classifier):
        txn = make_txn(date(2024, 1, 2), 300.0, "ACH DEBIT 99812", merchant_name="Kapitus")
        assert classifier.is_lender_payment(txn)

    def test_lender_payment_by_loan_category(self, classifier):
        txn = make_txn(date(2024, 1, 2), 300.0, "ACME CREDIT", category_hints=("Loan Payments",))
        assert classifier.is_lender_payment(txn)

    def test_funding_deposit_is_not_a_payment(self, classifier):
        """Money received from a lender is a deposit, not a payment."""
        assert not classifier.is_lender_payment(make_txn(date(2024, 1, 2), -25000.0, "ONDECK FUNDING"))

    def test_transfer_detection(self, classifier):
        assert classifier.is_transfer(make_txn(date(2024, 1, 2), 100.0, "Online XFER to 1234"))
        assert classifier.is_transfer(make_txn(date(2024, 1, 2), 100.0, "Move", category_hints=("Transfer",)))
        assert not classifier.is_transfer(make_txn(date(2024, 1, 2), -900.0, "SQUARE INC DEPOSIT"))


class TestLenderRegistry:
    """Tests for lender name normalization and resolution."""

    def test_normalize_strips_digits_and_punctuation(self):
        assert normalize_merchant_name("OnDeck #48812") == "ONDECK"
        assert normalize_merchant_name("  Can   Capital, Inc. ") == "CAN CAPITAL INC"

    def test_resolve_alias(self):
        registry = LenderRegistry()
        assert registry.resolve("ON DECK 8812") == "ONDECK"
        assert registry.resolve("BLUE VINE PAYMENT") == "BLUEVINE"

    def test_resolve_requires_whole_words(self):
        """A lender name embedded inside another word does not match."""
        assert LenderRegistry().resolve("AMERICAN CAPITAL PARTNERS") is None

    def test_unknown_description(self):
        assert LenderRegistry().resolve("SHELL OIL 5521") is None

    def test_with_lender(self):
        registry = LenderRegistry().with_lender("Acme Funding", aliases=["ACME ADV"])
        assert registry.resolve("ACME FUNDING LLC") == "ACME FUNDING"
        assert registry.resolve("ACME ADV 0091") == "ACME FUNDING"
        # Base registry is unchanged
        assert LenderRegistry().resolve("ACME FUNDING LLC") is None


# =============================================================================
# Balance Reconstruction Tests
# =============================================================================

class TestAnalyzeTransactions:
    """Tests for daily balance replay."""

    START = date(2024, 1, 1)
    END = date(2024, 1, 10)

    def test_replays_from_current_balance(self, classifier):
        """
        Opening balance is backed out from the current balance and
        carried forward over days without activity.

        Opening = 1000 + (-500 + 200) = 700
        Days 1-2: 700, days 3-4: 1200, days 5-10: 1000
        """
        transactions = [
            make_txn(date(2024, 1, 3), -500.0, "DEPOSIT"),
            make_txn(date(2024, 1, 5), 200.0, "RENT"),
        ]

        analysis = analyze_transactions(transactions, self.START, self.END, classifier, current_balance=1000.0)

        assert analysis.total_days == 10
        assert analysis.average_daily_balance == pytest.approx(980.0)
        assert analysis.minimum_daily_balance == pytest.approx(700.0)
        assert analysis.maximum_daily_balance == pytest.approx(1200.0)
        assert analysis.negative_days == 0
        assert analysis.total_deposits == pytest.approx(500.0)

    def test_unordered_input(self, classifier):
        """Input order does not change the replay."""
        transactions = [
            make_txn(date(2024, 1, 5), 200.0, "RENT"),
            make_txn(date(2024, 1, 3), -500.0, "DEPOSIT"),
        ]

        analysis = analyze_transactions(transactions, self.START, self.END, classifier, current_balance=1000.0)

        assert analysis.average_daily_balance == pytest.approx(980.0)

    def test_negative_days(self, classifier):
        """An overdrawn account with no activity is negative every day."""
        analysis = analyze_transactions([], self.START, self.END, classifier, current_balance=-100.0)

        assert analysis.negative_days == 10
        assert analysis.negative_days_percentage == pytest.approx(100.0)

    def test_nsf_count_and_fees(self, classifier):
        transactions = [
            make_txn(date(2024, 1, 4), 35.0, "NSF FEE"),
            make_txn(date(2024, 1, 6), 36.0, "OVERDRAFT FEE"),
            make_txn(date(2024, 1, 7), 100.0, "ONLINE TRANSFER TO SAVINGS"),
        ]

        analysis = analyze_transactions(transactions, self.START, self.END, classifier, current_balance=500.0)

        assert analysis.nsf_count == 2
        assert analysis.nsf_fee_total == pytest.approx(71.0)

    def test_ignores_transactions_outside_window(self, classifier):
        transactions = [
            make_txn(date(2023, 12, 31), 1000.0, "BEFORE WINDOW"),
            make_txn(date(2024, 1, 11), -1000.0, "AFTER WINDOW"),
        ]

        analysis = analyze_transactions(transactions, self.START, self.END, classifier, current_balance=250.0)

        assert analysis.minimum_daily_balance == pytest.approx(250.0)
        assert analysis.maximum_daily_balance == pytest.approx(250.0)
        assert analysis.total_deposits == 0


# =============================================================================
# Primary Account Selection Tests
# =============================================================================

class TestSelectPrimaryAccount:
    """Tests for deterministic primary account selection."""

    def test_prefers_checking(self):
        accounts = [savings(), checking("chk-9")]
        assert select_primary_account(accounts).account_id == "chk-9"

    def test_first_checking_wins(self):
        accounts = [checking("chk-1"), checking("chk-2")]
        assert select_primary_account(accounts).account_id == "chk-1"

    def test_falls_back_to_first_account(self):
        accounts = [savings("sav-1"), savings("sav-2")]
        assert select_primary_account(accounts).account_id == "sav-1"

    def test_no_accounts_raises(self):
        with pytest.raises(NoSuitableAccountException) as exc_info:
            select_primary_account([])
        assert exc_info.value.code == "NO_SUITABLE_ACCOUNT"


# =============================================================================
# Feature Extraction Tests
# =============================================================================

def generate_merchant_feed() -> list[Transaction]:
    """
    Three months of a steady merchant.

    - $5,000 card settlements on the 1st and 15th of each month
    - A weekly $500 OnDeck debit every Tuesday from Jan 2
    - Noise that must be excluded (pending, other account, out of window)
    """
    transactions = []
    for month in (1, 2, 3):
        for day in (1, 15):
            transactions.append(make_txn(date(2024, month, day), -5000.0, "STRIPE PAYOUT"))

    payment_day = date(2024, 1, 2)
    while payment_day <= date(2024, 3, 31):
        transactions.append(make_txn(payment_day, 500.0, "ONDECK CAPITAL 8812"))
        payment_day += timedelta(days=7)

    transactions.append(make_txn(date(2024, 3, 30), 900.0, "PENDING CHARGE", pending=True))
    transactions.append(make_txn(date(2024, 2, 1), -7000.0, "INTEREST", account_id="sav-1"))
    transactions.append(make_txn(date(2023, 12, 20), -9000.0, "STRIPE PAYOUT"))
    return transactions


class TestTransactionFeatureExtractor:
    """End-to-end extraction over a realistic feed."""

    WINDOW = AnalysisWindow(start=date(2024, 1, 1), end=date(2024, 3, 31))

    def extract(self):
        extractor = TransactionFeatureExtractor()
        accounts = [savings("sav-1", 20000.0), checking("chk-1", 30000.0)]
        return extractor.extract_features(generate_merchant_feed(), accounts, self.WINDOW)

    def test_primary_account(self):
        features = self.extract()

        assert features.primary_account_id == "chk-1"
        assert features.primary_account_type == "depository/checking"
        assert features.current_balance == pytest.approx(30000.0)

    def test_only_posted_primary_transactions_in_window(self):
        """6 deposits + 13 weekly payments; pending, savings and pre-window rows excluded."""
        features = self.extract()

        assert features.total_transactions_analyzed == 19
        assert features.total_days_analyzed == 91

    def test_existing_position_detected(self):
        features = self.extract()

        assert features.estimated_position_count == 1
        payment = features.lender_payments[0]
        assert payment.lender_name == "ONDECK"
        assert payment.frequency == PaymentFrequency.WEEKLY
        assert len(payment.amounts) == 13
        assert payment.confidence == pytest.approx(0.85)
        # $500 weekly over 5 business days
        assert features.estimated_payment_obligations == pytest.approx(100.0)

    def test_revenue_features(self):
        features = self.extract()

        assert features.average_monthly_deposits == pytest.approx(10000.0)
        assert features.total_deposits == pytest.approx(30000.0)
        assert features.revenue_trend.direction == TrendDirection.STABLE
        assert [m.month for m in features.revenue_trend.monthly_data] == ["2024-01", "2024-02", "2024-03"]
        assert features.deposit_consistency_score >= 90

    def test_balances(self):
        """Opening balance = 30000 + (13 x 500 - 30000) = 6500 and never goes negative."""
        features = self.extract()

        assert features.negative_days == 0
        assert features.negative_days_percentage == 0
        assert features.minimum_daily_balance >= 6500.0
        assert features.nsf_count == 0

    def test_days_since_last_deposit_measured_to_window_end(self):
        features = self.extract()
        assert features.days_since_last_deposit == 16

    def test_no_deposits_uses_window_length(self):
        extractor = TransactionFeatureExtractor()
        features = extractor.extract_features([], [checking(current=100.0)], self.WINDOW)

        assert features.days_since_last_deposit == 91
        assert features.deposit_consistency_score == 0
        assert features.average_monthly_deposits == 0

    def test_no_accounts_raises(self):
        extractor = TransactionFeatureExtractor()
        with pytest.raises(NoSuitableAccountException):
            extractor.extract_features(generate_merchant_feed(), [], self.WINDOW)

    def test_to_dict(self):
        data = self.extract().to_dict()

        assert data["primary_account_id"] == "chk-1"
        assert data["analysis_start_date"] == "2024-01-01"
        assert data["lender_payments"][0]["frequency"] == "weekly"
