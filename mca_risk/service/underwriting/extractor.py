"""Feature extraction: bank feed to UnderwritingFeatures."""

from typing import Optional, Sequence

import structlog

from mca_risk.domain.entities import (
    Account,
    AnalysisWindow,
    Transaction,
    UnderwritingFeatures,
)
from mca_risk.domain.exceptions import NoSuitableAccountException
from mca_risk.domain.interfaces import TransactionClassifier

from .balances import analyze_transactions, days_since_last_deposit
from .classifier import KeywordTransactionClassifier, LenderRegistry
from .lender_payments import detect_lender_payments, estimate_positions
from .revenue import analyze_revenue_trend, calculate_deposit_consistency, revenue_deposits

logger = structlog.get_logger(__name__)


def select_primary_account(accounts: Sequence[Account]) -> Account:
    """
    Pick the account to underwrite.

    The first depository checking account in input order, otherwise the
    first account.

    Raises:
        NoSuitableAccountException: If there are no accounts
    """
    if not accounts:
        raise NoSuitableAccountException()
    for account in accounts:
        if account.is_checking:
            return account
    return accounts[0]


class TransactionFeatureExtractor:
    """
    Derives underwriting features from a merchant's bank feed.

    Stateless apart from its collaborators, so one instance can serve
    any number of extractions.
    """

    def __init__(
        self,
        classifier: Optional[TransactionClassifier] = None,
        registry: Optional[LenderRegistry] = None,
    ):
        self._registry = registry or LenderRegistry()
        self._classifier = classifier or KeywordTransactionClassifier(self._registry)

    @property
    def classifier(self) -> TransactionClassifier:
        return self._classifier

    def extract_features(
        self,
        transactions: Sequence[Transaction],
        accounts: Sequence[Account],
        window: AnalysisWindow,
    ) -> UnderwritingFeatures:
        """
        Extract the feature snapshot for the primary account.

        Only posted transactions on the primary account that fall inside
        the window are analysed.

        Args:
            transactions: Transactions across all linked accounts
            accounts: Linked accounts in provider order
            window: Inclusive analysis window

        Returns:
            UnderwritingFeatures for the primary account

        Raises:
            NoSuitableAccountException: If no account is available
        """
        primary = select_primary_account(accounts)
        log = logger.bind(account_id=primary.account_id)

        account_transactions = [
            t for t in transactions
            if t.account_id == primary.account_id
            and not t.pending
            and window.contains(t.date)
        ]
        current_balance = primary.balances.current or 0.0

        analysis = analyze_transactions(
            account_transactions,
            window.start,
            window.end,
            self._classifier,
            current_balance=current_balance,
        )
        lender_payments = detect_lender_payments(
            account_transactions, self._classifier, self._registry
        )
        position_count, obligations = estimate_positions(lender_payments)
        revenue_trend = analyze_revenue_trend(account_transactions, self._classifier)
        consistency = calculate_deposit_consistency(account_transactions, self._classifier)
        last_deposit_days = days_since_last_deposit(
            revenue_deposits(account_transactions, self._classifier),
            window.end,
            default=window.total_days,
        )

        features = UnderwritingFeatures(
            average_daily_balance=analysis.average_daily_balance,
            minimum_daily_balance=analysis.minimum_daily_balance,
            maximum_daily_balance=analysis.maximum_daily_balance,
            current_balance=current_balance,
            nsf_count=analysis.nsf_count,
            nsf_fee_total=analysis.nsf_fee_total,
            negative_days=analysis.negative_days,
            negative_days_percentage=analysis.negative_days_percentage,
            lender_payments=tuple(lender_payments),
            estimated_position_count=position_count,
            estimated_payment_obligations=obligations,
            revenue_trend=revenue_trend,
            average_monthly_deposits=revenue_trend.average_monthly_revenue,
            total_deposits=analysis.total_deposits,
            deposit_consistency_score=consistency,
            days_since_last_deposit=last_deposit_days,
            analysis_start_date=window.start,
            analysis_end_date=window.end,
            total_days_analyzed=analysis.total_days,
            total_transactions_analyzed=len(account_transactions),
            primary_account_id=primary.account_id,
            primary_account_type=primary.type_label,
        )

        log.info(
            "features_extracted",
            transactions=len(account_transactions),
            days=analysis.total_days,
            positions=position_count,
            nsf_count=analysis.nsf_count,
        )
        return features
