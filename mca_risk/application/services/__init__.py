"""Application services (use cases)."""

from .qualification_service import LookupResult, QualificationService, safe_lookup

__all__ = [
    "LookupResult",
    "QualificationService",
    "safe_lookup",
]
