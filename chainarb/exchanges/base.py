"""Base venue client interface."""

from abc import ABC, abstractmethod
from decimal import Decimal
from typing import Any

from chainarb.models.market import Quote, TransferChain


class VenueConnectivityError(Exception):
    """A request to a venue failed (network, auth, rate limit, bad payload)."""

    def __init__(self, venue: str, message: str) -> None:
        super().__init__(f"{venue}: {message}")
        self.venue = venue
        self.message = message


class BaseVenueClient(ABC):
    """Abstract base class for venue clients."""

    def __init__(self, name: str, fee_rate: Decimal = Decimal("0.00075")) -> None:
        """
        Initialize venue client.

        Args:
            name: Venue name used as key in snapshots
            fee_rate: Taker fee as decimal (e.g., 0.00075 for 0.075%)
        """
        self.name = name
        self.fee_rate = fee_rate

    @abstractmethod
    async def list_currencies(self) -> dict[str, list[TransferChain]]:
        """
        Get transfer networks for every listed currency.

        Returns:
            Mapping currency -> chains, chain names as reported by the venue
        """
        pass

    @abstractmethod
    async def list_tickers(self) -> dict[str, Quote]:
        """
        Get best bid/ask for every listed pair.

        Returns:
            Mapping venue symbol -> quote
        """
        pass

    @abstractmethod
    async def fetch_order_book(self, pair: str, limit: int | None = None) -> dict[str, Any]:
        """
        Get an order book snapshot.

        Args:
            pair: Trading pair (e.g., "BTC/USDT")
            limit: Number of levels to request

        Returns:
            Dict with "asks" and "bids" lists of [price, size]
        """
        pass

    async def close(self) -> None:
        """Release connections held by the client."""
        return None

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r}, fee_rate={self.fee_rate})"
