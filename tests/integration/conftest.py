"""
Fixtures for integration tests.

Provides:
- Bank feed loading from JSON fixture files
- Mock bank data providers (recording, failing)
- In-memory and failing prospect directories
- A qualification service wired through the composition root
"""

import json
from datetime import date
from pathlib import Path
from typing import Dict, List, Optional

import pytest

from mca_risk.core.config import Settings
from mca_risk.core.dependencies import build_qualification_service
from mca_risk.domain.entities import (
    Account,
    AccountBalances,
    AnalysisWindow,
    BankData,
    ProspectProfile,
    Transaction,
)
from mca_risk.domain.exceptions import BankDataException
from mca_risk.domain.interfaces import BankDataProvider, ProspectDirectory
from mca_risk.service.qualification import QualificationRules


# =============================================================================
# Test Data Loading
# =============================================================================

FEEDS_DIR = Path(__file__).parent.parent / "fixtures" / "bank_feeds"

AS_OF = date(2024, 3, 31)


def load_bank_feed(name: str) -> BankData:
    """Load a provider-shaped bank feed from the fixture files."""
    file_path = FEEDS_DIR / f"{name}.json"

    with open(file_path) as f:
        data = json.load(f)

    accounts = [
        Account(
            account_id=item["account_id"],
            name=item.get("name", ""),
            type=item.get("type", ""),
            subtype=item.get("subtype"),
            balances=AccountBalances(
                current=item.get("balances", {}).get("current"),
                available=item.get("balances", {}).get("available"),
            ),
        )
        for item in data.get("accounts", [])
    ]

    transactions = [
        Transaction(
            id=item["transaction_id"],
            account_id=item["account_id"],
            date=date.fromisoformat(item["date"]),
            amount=item["amount"],
            name=item.get("name", ""),
            category_hints=tuple(item.get("category") or ()),
            pending=item.get("pending", False),
            merchant_name=item.get("merchant_name"),
        )
        for item in data.get("transactions", [])
    ]

    return BankData(accounts=accounts, transactions=transactions)


# =============================================================================
# Mock Collaborators
# =============================================================================

class MockBankDataProvider(BankDataProvider):
    """Bank data provider that serves fixture feeds by access token."""

    def __init__(self, feeds: Optional[Dict[str, BankData]] = None):
        self.feeds = feeds or {}
        self.calls: List[tuple] = []

    async def fetch_bank_data(self, access_token: str, window: AnalysisWindow) -> BankData:
        self.calls.append((access_token, window))
        if access_token not in self.feeds:
            raise BankDataException(f"Unknown access token: {access_token}", status_code=400)
        return self.feeds[access_token]


class FailingBankDataProvider(BankDataProvider):
    """Bank data provider that always fails with the given error."""

    def __init__(self, error: Optional[BankDataException] = None):
        self.error = error or BankDataException("upstream down", status_code=503)
        self.call_count = 0

    async def fetch_bank_data(self, access_token: str, window: AnalysisWindow) -> BankData:
        self.call_count += 1
        raise self.error


class InMemoryProspectDirectory(ProspectDirectory):
    """Prospect directory backed by a dict."""

    def __init__(self, profiles: Optional[Dict[str, ProspectProfile]] = None):
        self.profiles = profiles or {}
        self.lookups: List[str] = []

    def get_profile(self, prospect_id: str) -> Optional[ProspectProfile]:
        self.lookups.append(prospect_id)
        return self.profiles.get(prospect_id)


class FailingProspectDirectory(ProspectDirectory):
    """Prospect directory whose backing store is unavailable."""

    def __init__(self):
        self.call_count = 0

    def get_profile(self, prospect_id: str) -> Optional[ProspectProfile]:
        self.call_count += 1
        raise RuntimeError("prospect store unavailable")


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture
def settings() -> Settings:
    return Settings(default_months_to_analyze=3, default_time_in_business_months=6)


@pytest.fixture
def rules() -> QualificationRules:
    return QualificationRules()


@pytest.fixture
def steady_feed() -> BankData:
    return load_bank_feed("steady_merchant")


@pytest.fixture
def overdrawn_feed() -> BankData:
    return load_bank_feed("overdrawn_merchant")


@pytest.fixture
def bank_provider(steady_feed: BankData, overdrawn_feed: BankData) -> MockBankDataProvider:
    return MockBankDataProvider(
        {
            "access-steady": steady_feed,
            "access-overdrawn": overdrawn_feed,
            "access-empty": BankData(accounts=[], transactions=[]),
        }
    )


@pytest.fixture
def failing_bank_provider() -> FailingBankDataProvider:
    return FailingBankDataProvider()


@pytest.fixture
def prospect_directory() -> InMemoryProspectDirectory:
    return InMemoryProspectDirectory(
        {
            "prospect-veteran": ProspectProfile(
                prospect_id="prospect-veteran",
                company_name="Harbor Diner LLC",
                time_in_business_months=36,
                state="NY",
                industry="restaurant",
            ),
        }
    )


@pytest.fixture
def failing_prospect_directory() -> FailingProspectDirectory:
    return FailingProspectDirectory()


@pytest.fixture
def service(settings, rules, bank_provider, prospect_directory):
    """Qualification service with mock collaborators."""
    return build_qualification_service(
        settings=settings,
        rules=rules,
        bank_data_provider=bank_provider,
        prospect_directory=prospect_directory,
    )
