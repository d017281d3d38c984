"""Bank feed entities: transactions and accounts."""

from dataclasses import dataclass, field
from datetime import date
from typing import List, Optional, Tuple


@dataclass(frozen=True)
class Transaction:
    """
    Immutable representation of a bank transaction.

    Follows the bank-data provider's sign convention: a negative amount
    is money flowing in (deposit), a positive amount is money flowing out.

    Attributes:
        id: Provider transaction identifier
        account_id: Account the transaction posted to
        date: Posting date
        amount: Signed amount in dollars (negative = inflow)
        name: Raw transaction description
        category_hints: Provider category labels, most general first
        pending: True while the transaction has not posted
        merchant_name: Cleaned merchant name, when the provider has one
    """

    id: str
    account_id: str
    date: date
    amount: float
    name: str = ""
    category_hints: Tuple[str, ...] = ()
    pending: bool = False
    merchant_name: Optional[str] = None

    @property
    def is_inflow(self) -> bool:
        """Check if money flowed into the account."""
        return self.amount < 0

    @property
    def is_outflow(self) -> bool:
        """Check if money flowed out of the account."""
        return self.amount > 0

    @property
    def display_name(self) -> str:
        """Merchant name when known, raw description otherwise."""
        return self.merchant_name or self.name


@dataclass(frozen=True)
class AccountBalances:
    """Balances reported by the provider at fetch time."""

    current: Optional[float] = None
    available: Optional[float] = None


@dataclass(frozen=True)
class Account:
    """A bank account connected for underwriting."""

    account_id: str
    name: str
    type: str
    subtype: Optional[str] = None
    balances: AccountBalances = field(default_factory=AccountBalances)

    @property
    def is_checking(self) -> bool:
        return self.type == "depository" and self.subtype == "checking"

    @property
    def type_label(self) -> str:
        """Type and subtype as a single ``type/subtype`` label."""
        return f"{self.type}/{self.subtype or 'unknown'}"


@dataclass(frozen=True)
class BankData:
    """Accounts and transactions returned by a bank data provider."""

    accounts: List[Account]
    transactions: List[Transaction]
