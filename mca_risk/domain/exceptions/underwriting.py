"""Feature extraction exceptions."""

from .base import UnderwritingException


class NoSuitableAccountException(UnderwritingException):
    """Raised when a bank feed has no account to analyze."""

    def __init__(self):
        super().__init__(
            message="No suitable account found for underwriting analysis",
            code="NO_SUITABLE_ACCOUNT",
        )
