"""Bank data provider exceptions."""

from .base import UnderwritingException


# Provider responses worth retrying: throttling and upstream outages
RETRYABLE_STATUS_CODES = frozenset({408, 429, 500, 502, 503, 504})


class BankDataException(UnderwritingException):
    """
    Raised by bank data providers when transactions cannot be fetched.

    ``status_code`` is the aggregator's HTTP status when there was a
    response: 400 for an unknown or malformed access token, 401/403 when
    the merchant's bank login has expired or consent was revoked, 429
    when throttled and 5xx for an aggregator or institution outage. It is
    None when no response arrived (timeouts, connection errors, or a
    service with no provider configured).

    The qualification service records the failure and re-raises it
    unchanged; callers decide whether to retry using ``retryable``.
    """

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(
            message=message,
            code="BANK_DATA_ERROR",
        )
        self.status_code = status_code

    @property
    def retryable(self) -> bool:
        """True for throttling and outages; token and consent errors need the merchant."""
        return self.status_code in RETRYABLE_STATUS_CODES


class BankDataTimeoutException(BankDataException):
    """Raised when the provider did not answer within the client timeout."""

    def __init__(self):
        super().__init__(
            message="Bank data request timed out",
            status_code=None,
        )
        self.code = "BANK_DATA_TIMEOUT"

    @property
    def retryable(self) -> bool:
        return True
