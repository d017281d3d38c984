"""Domain Exceptions - Fatal extraction, validation and collaborator errors."""

from .base import UnderwritingException
from .underwriting import NoSuitableAccountException
from .scoring import InvalidScoringInputException
from .bank import BankDataException, BankDataTimeoutException

__all__ = [
    "UnderwritingException",
    "NoSuitableAccountException",
    "InvalidScoringInputException",
    "BankDataException",
    "BankDataTimeoutException",
]
