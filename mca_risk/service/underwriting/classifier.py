"""
Keyword-based transaction classification.

Default TransactionClassifier used by the feature extractor, plus the
known-lender registry shared with lender payment detection.
"""

import re
from dataclasses import dataclass, field
from typing import Dict, Iterable, Optional, Tuple

from mca_risk.domain.entities import Transaction
from mca_risk.domain.interfaces import TransactionClassifier


NSF_PATTERNS = [
    r"\bNSF\b",
    r"\bOVERDRAFT\b",
    r"\bOD\s*FEE\b",
    r"\bINSUFFICIENT\s+FUNDS\b",
    r"\bRETURNED\s+ITEM\b",
    r"\bRETURNED\s+CHECK\b",
    r"\bUNCOLLECTED\s+FUNDS\b",
    r"\bNON-SUFFICIENT\b",
]

TRANSFER_PATTERNS = [
    r"\bTRANSFER\b",
    r"\bXFER\b",
    r"\bACH\s+CREDIT\b",
    r"\bACH\s+DEBIT\b",
]

# Generic descriptors that mark a lender payment without naming the lender
GENERIC_LENDER_PATTERNS = [
    r"\bMERCHANT\s+CASH\b",
    r"\bBUSINESS\s+FUNDING\b",
]

LOAN_CATEGORIES = {"LOAN", "LOAN PAYMENTS", "LOAN_PAYMENTS"}
TRANSFER_CATEGORIES = {"TRANSFER", "TRANSFER_IN", "TRANSFER_OUT"}

DEFAULT_LENDERS: Dict[str, Tuple[str, ...]] = {
    "KAPITUS": (),
    "CAN CAPITAL": (),
    "BLUEVINE": ("BLUE VINE",),
    "ONDECK": ("ON DECK",),
    "KABBAGE": (),
    "SQUARE CAPITAL": ("SQ CAPITAL", "SQUARE LOAN"),
    "PAYPAL WORKING CAPITAL": ("PAYPAL WC", "PYPL WORKING CAP"),
    "FUNDBOX": (),
    "CREDIBLY": (),
    "NATIONAL FUNDING": (),
    "RAPID FINANCE": (),
    "FORWARD FINANCING": (),
    "LIBERTAS FUNDING": ("LIBERTAS",),
    "ALLIED FUNDING": (),
    "GREENBOX CAPITAL": ("GREEN BOX CAPITAL",),
    "PEARL CAPITAL": (),
    "RELIANT FUNDING": (),
    "FUNDING CIRCLE": (),
}


def _compile(patterns: Iterable[str]) -> re.Pattern:
    return re.compile("|".join(patterns))


_NSF_RE = _compile(NSF_PATTERNS)
_TRANSFER_RE = _compile(TRANSFER_PATTERNS)
_GENERIC_LENDER_RE = _compile(GENERIC_LENDER_PATTERNS)
_NON_ALPHA_RE = re.compile(r"[^A-Z]+")


def normalize_merchant_name(name: str) -> str:
    """
    Normalize a transaction description for grouping.

    Upper-cases, replaces digits and punctuation with spaces and
    collapses whitespace, so "OnDeck #48812" and "ONDECK 48817"
    both become "ONDECK".
    """
    return _NON_ALPHA_RE.sub(" ", (name or "").upper()).strip()


@dataclass(frozen=True)
class LenderRegistry:
    """
    Known MCA / small-business lenders and their description aliases.

    Matching is a whole-word substring test of the canonical name or
    any alias against the normalized transaction description, so
    "AMERICAN CAPITAL" does not match "CAN CAPITAL".
    """

    lenders: Dict[str, Tuple[str, ...]] = field(default_factory=lambda: dict(DEFAULT_LENDERS))

    def resolve(self, name: str) -> Optional[str]:
        """Return the canonical lender for a description, or None."""
        normalized = normalize_merchant_name(name)
        if not normalized:
            return None
        padded = f" {normalized} "
        for canonical, aliases in self.lenders.items():
            for candidate in (canonical, *aliases):
                if f" {normalize_merchant_name(candidate)} " in padded:
                    return canonical
        return None

    def with_lender(self, name: str, aliases: Iterable[str] = ()) -> "LenderRegistry":
        """Return a new registry that also recognises ``name``."""
        lenders = dict(self.lenders)
        lenders[name.upper()] = tuple(a.upper() for a in aliases)
        return LenderRegistry(lenders=lenders)

    @classmethod
    def from_names(cls, names: Iterable[str]) -> "LenderRegistry":
        return cls(lenders={n.upper(): () for n in names})


def _upper_hints(transaction: Transaction) -> set:
    return {hint.upper() for hint in transaction.category_hints}


class KeywordTransactionClassifier(TransactionClassifier):
    """
    Classifies transactions from descriptions and provider categories.

    Amount sign follows the provider convention: negative amounts are
    inflows.
    """

    def __init__(self, registry: Optional[LenderRegistry] = None):
        self._registry = registry or LenderRegistry()

    @property
    def registry(self) -> LenderRegistry:
        return self._registry

    def is_deposit(self, transaction: Transaction) -> bool:
        return transaction.amount < 0

    def is_withdrawal(self, transaction: Transaction) -> bool:
        return transaction.amount > 0

    def is_nsf_fee(self, transaction: Transaction) -> bool:
        if transaction.amount <= 0:
            return False
        return bool(
            _NSF_RE.search((transaction.name or "").upper())
            or _NSF_RE.search((transaction.merchant_name or "").upper())
        )

    def is_lender_payment(self, transaction: Transaction) -> bool:
        if transaction.amount <= 0 or self.is_nsf_fee(transaction):
            return False
        if self._registry.resolve(transaction.display_name) is not None:
            return True
        if self._registry.resolve(transaction.name) is not None:
            return True
        if _GENERIC_LENDER_RE.search((transaction.name or "").upper()):
            return True
        return bool(_upper_hints(transaction) & LOAN_CATEGORIES)

    def is_transfer(self, transaction: Transaction) -> bool:
        if _upper_hints(transaction) & TRANSFER_CATEGORIES:
            return True
        return bool(_TRANSFER_RE.search((transaction.name or "").upper()))
