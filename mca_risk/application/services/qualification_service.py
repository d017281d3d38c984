"""Qualification service - orchestrates the merchant qualification use case."""

from dataclasses import dataclass
from datetime import date
from typing import Any, Callable, Generic, Optional, TypeVar

import structlog

from mca_risk.core.config import Settings, get_settings
from mca_risk.core.metrics import (
    record_bank_fetch_failure,
    record_prospect_lookup_failure,
    track_bank_fetch_latency,
)
from mca_risk.domain.entities import (
    AnalysisWindow,
    ProspectProfile,
    QualificationContext,
    QualificationResult,
    UnderwritingFeatures,
)
from mca_risk.domain.exceptions import BankDataException
from mca_risk.domain.interfaces import BankDataProvider, ProspectDirectory
from mca_risk.service.qualification import QualificationEngine
from mca_risk.service.underwriting import TransactionFeatureExtractor

logger = structlog.get_logger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class LookupResult(Generic[T]):
    """Outcome of an optional lookup: a value (possibly None) or the error that replaced it."""

    value: Optional[T] = None
    error: Optional[Exception] = None

    @property
    def ok(self) -> bool:
        return self.error is None


def safe_lookup(fn: Callable[..., Optional[T]], *args: Any) -> LookupResult[T]:
    """
    Run an optional lookup without letting it fail the caller.

    Missing auxiliary data must never block a qualification, so any
    exception is logged, counted and returned in the result instead of
    raised. Callers fall back to defaults when ``value`` is None.
    """
    try:
        return LookupResult(value=fn(*args))
    except Exception as e:
        logger.warning(
            "prospect_lookup_failed",
            lookup=getattr(fn, "__qualname__", repr(fn)),
            error_type=type(e).__name__,
            error=str(e),
        )
        record_prospect_lookup_failure()
        return LookupResult(error=e)


class QualificationService:
    """
    Application service for merchant qualification use cases.
    """

    def __init__(
        self,
        engine: QualificationEngine,
        extractor: TransactionFeatureExtractor,
        bank_data_provider: Optional[BankDataProvider] = None,
        prospect_directory: Optional[ProspectDirectory] = None,
        settings: Optional[Settings] = None,
    ):
        self._engine = engine
        self._extractor = extractor
        self._bank_data_provider = bank_data_provider
        self._prospect_directory = prospect_directory
        self._settings = settings or get_settings()

    @property
    def engine(self) -> QualificationEngine:
        return self._engine

    def qualify(
        self,
        features: UnderwritingFeatures,
        context: Optional[QualificationContext] = None,
    ) -> QualificationResult:
        """
        Qualify a merchant from an existing feature snapshot.

        When the context names a prospect but carries no profile, the
        profile is looked up in the prospect directory. A failed lookup
        is logged and the qualification proceeds with defaults.
        """
        context = self._with_prospect_profile(context or QualificationContext())
        return self._engine.qualify(features, context)

    async def qualify_with_bank_access(
        self,
        access_token: str,
        context: Optional[QualificationContext] = None,
        months_to_analyze: Optional[int] = None,
        as_of: Optional[date] = None,
    ) -> QualificationResult:
        """
        Fetch bank data, extract features and qualify in one call.

        The provider call is the only await. Everything after it is the
        same synchronous path as ``qualify``.

        Args:
            access_token: Bank-data provider access token
            context: Non-bank qualification inputs
            months_to_analyze: Window length (defaults to settings)
            as_of: Window end date (defaults to today)

        Returns:
            QualificationResult

        Raises:
            BankDataException: If the provider fails
            NoSuitableAccountException: If the feed has no accounts
        """
        if self._bank_data_provider is None:
            raise BankDataException("No bank data provider configured")

        context = context or QualificationContext()
        months = months_to_analyze or self._settings.default_months_to_analyze
        window = AnalysisWindow.trailing_months(months, end=as_of)

        log = logger.bind(
            prospect_id=context.prospect_id,
            months_to_analyze=months,
        )
        log.info("bank_qualification_requested")

        try:
            with track_bank_fetch_latency():
                bank_data = await self._bank_data_provider.fetch_bank_data(access_token, window)
        except BankDataException as e:
            record_bank_fetch_failure(e.code.lower())
            log.error(
                "bank_data_fetch_failed",
                error_code=e.code,
                status_code=e.status_code,
                retryable=e.retryable,
                error=e.message,
            )
            raise

        log.info(
            "bank_data_fetched",
            accounts=len(bank_data.accounts),
            transactions=len(bank_data.transactions),
        )

        features = self._extractor.extract_features(
            bank_data.transactions,
            bank_data.accounts,
            window,
        )
        return self.qualify(features, context)

    def _with_prospect_profile(self, context: QualificationContext) -> QualificationContext:
        if (
            context.prospect is not None
            or context.prospect_id is None
            or self._prospect_directory is None
        ):
            return context

        lookup: LookupResult[ProspectProfile] = safe_lookup(
            self._prospect_directory.get_profile, context.prospect_id
        )
        if lookup.value is None:
            return context
        return context.with_prospect(lookup.value)
