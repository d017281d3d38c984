"""External client interfaces."""

from abc import ABC, abstractmethod

from mca_risk.domain.entities import AnalysisWindow, BankData


class BankDataProvider(ABC):
    """
    Abstract client for a bank data aggregator.

    Implemented outside this package; retry and timeout policy
    belong to the implementation.
    """

    @abstractmethod
    async def fetch_bank_data(self, access_token: str, window: AnalysisWindow) -> BankData:
        """
        Fetch accounts and transactions for a bank connection.

        Args:
            access_token: Provider token for the merchant's bank connection
            window: Date range to fetch

        Returns:
            Accounts and transactions covering the window

        Raises:
            BankDataException: If the provider returns an error
            BankDataTimeoutException: If the request times out
        """
        ...
