"""Scoring-related domain exceptions."""

from .base import UnderwritingException


class InvalidScoringInputException(UnderwritingException):
    """Raised when prospect signals cannot be scored."""

    def __init__(self, message: str, prospect_id: str | None = None):
        super().__init__(
            message=message,
            code="INVALID_SCORING_INPUT",
        )
        self.prospect_id = prospect_id
