"""Domain Interfaces - Collaborator contracts."""

from .classifier import TransactionClassifier
from .clients import BankDataProvider
from .directories import ProspectDirectory

__all__ = [
    "TransactionClassifier",
    "BankDataProvider",
    "ProspectDirectory",
]
