"""Composition root: builds services explicitly from settings."""

from typing import Optional

from mca_risk.application.services import QualificationService
from mca_risk.core.config import Settings, get_settings
from mca_risk.core.logging import setup_logging
from mca_risk.domain.interfaces import BankDataProvider, ProspectDirectory, TransactionClassifier
from mca_risk.service.qualification import QualificationEngine, QualificationRules
from mca_risk.service.scoring import CompositeScorer, ScoringConfig
from mca_risk.service.underwriting import (
    KeywordTransactionClassifier,
    LenderRegistry,
    TransactionFeatureExtractor,
)


def build_classifier(registry: Optional[LenderRegistry] = None) -> KeywordTransactionClassifier:
    """Get the default keyword classifier."""
    return KeywordTransactionClassifier(registry or LenderRegistry())


def build_feature_extractor(
    classifier: Optional[TransactionClassifier] = None,
    registry: Optional[LenderRegistry] = None,
) -> TransactionFeatureExtractor:
    """Get a TransactionFeatureExtractor instance."""
    registry = registry or LenderRegistry()
    return TransactionFeatureExtractor(
        classifier=classifier or build_classifier(registry),
        registry=registry,
    )


def build_qualification_engine(
    settings: Optional[Settings] = None,
    rules: Optional[QualificationRules] = None,
) -> QualificationEngine:
    """Get a QualificationEngine with rules from the environment unless given."""
    settings = settings or get_settings()
    return QualificationEngine(
        rules=rules or QualificationRules(),
        default_time_in_business_months=settings.default_time_in_business_months,
    )


def build_composite_scorer(config: Optional[ScoringConfig] = None) -> CompositeScorer:
    """Get a CompositeScorer instance."""
    return CompositeScorer(config=config or ScoringConfig())


def build_qualification_service(
    settings: Optional[Settings] = None,
    rules: Optional[QualificationRules] = None,
    bank_data_provider: Optional[BankDataProvider] = None,
    prospect_directory: Optional[ProspectDirectory] = None,
    registry: Optional[LenderRegistry] = None,
) -> QualificationService:
    """Get a QualificationService instance with all dependencies."""
    settings = settings or get_settings()
    return QualificationService(
        engine=build_qualification_engine(settings, rules),
        extractor=build_feature_extractor(registry=registry),
        bank_data_provider=bank_data_provider,
        prospect_directory=prospect_directory,
        settings=settings,
    )


def configure(settings: Optional[Settings] = None) -> Settings:
    """Apply process-wide setup (logging) once at startup and return the settings used."""
    settings = settings or get_settings()
    setup_logging(settings)
    return settings
