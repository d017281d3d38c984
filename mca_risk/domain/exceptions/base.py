"""Root of the underwriting exception hierarchy."""


class UnderwritingException(Exception):
    """
    Base exception for fatal underwriting-core errors.

    Raised only when a merchant cannot be evaluated at all: the bank
    feed has nothing to analyze, the bank data provider failed, or
    prospect signals are malformed. A funding decline is never an
    exception; it is an ordinary QualificationResult with tier Decline.

    Attributes:
        message: Human-readable description, safe to log
        code: Stable upper-case identifier for callers and metrics labels
    """

    def __init__(self, message: str, code: str = "UNDERWRITING_ERROR"):
        self.message = message
        self.code = code
        super().__init__(self.message)
