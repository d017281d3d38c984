"""Transaction classifier interface."""

from abc import ABC, abstractmethod

from mca_risk.domain.entities import Transaction


class TransactionClassifier(ABC):
    """
    Strategy that labels bank transactions for feature extraction.

    The extractor never inspects names or categories itself; every
    deposit, NSF and lender decision goes through a classifier.
    """

    @abstractmethod
    def is_deposit(self, transaction: Transaction) -> bool:
        """Money flowing into the account."""
        ...

    @abstractmethod
    def is_withdrawal(self, transaction: Transaction) -> bool:
        """Money flowing out of the account."""
        ...

    @abstractmethod
    def is_nsf_fee(self, transaction: Transaction) -> bool:
        """A non-sufficient-funds or overdraft fee."""
        ...

    @abstractmethod
    def is_lender_payment(self, transaction: Transaction) -> bool:
        """A payment to an MCA or loan provider."""
        ...

    @abstractmethod
    def is_transfer(self, transaction: Transaction) -> bool:
        """A movement between the merchant's own accounts."""
        ...
