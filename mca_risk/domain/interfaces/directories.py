"""Prospect directory interface."""

from abc import ABC, abstractmethod
from typing import Optional

from mca_risk.domain.entities import ProspectProfile


class ProspectDirectory(ABC):
    """
    Read-only source of prospect metadata.

    Lookups are optional context for qualification. Callers must go
    through ``safe_lookup`` so a failing directory never fails a
    qualification.
    """

    @abstractmethod
    def get_profile(self, prospect_id: str) -> Optional[ProspectProfile]:
        """Return the prospect's profile, or None if unknown."""
        ...
