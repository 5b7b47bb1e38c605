"""Venue client backed by CCXT."""

from decimal import Decimal
from typing import Any

import ccxt.async_support as ccxt
from loguru import logger

from chainarb.exchanges.base import BaseVenueClient, VenueConnectivityError
from chainarb.models.market import Quote, TransferChain


def to_decimal(value: Any) -> Decimal:
    """Convert a CCXT number (possibly None) to Decimal."""
    if value is None:
        return Decimal("0")
    return Decimal(str(value))


class CcxtVenueClient(BaseVenueClient):
    """Venue client wrapping a CCXT async exchange."""

    def __init__(
        self,
        name: str,
        client: Any,
        fee_rate: Decimal = Decimal("0.00075"),
    ) -> None:
        """
        Initialize CCXT venue client.

        Args:
            name: Venue name
            client: ccxt.async_support exchange instance
            fee_rate: Taker fee as decimal
        """
        super().__init__(name, fee_rate)
        self._client = client

    @classmethod
    def create(
        cls,
        exchange_id: str,
        fee_rate: Decimal,
        credentials: dict[str, str] | None = None,
    ) -> "CcxtVenueClient":
        """
        Build a client for a CCXT exchange id.

        Args:
            exchange_id: CCXT id (e.g., "binance")
            fee_rate: Taker fee as decimal
            credentials: apiKey/secret/password, optional for public data

        Returns:
            Venue client

        Raises:
            ValueError: If CCXT does not know the exchange id
        """
        if exchange_id not in ccxt.exchanges:
            raise ValueError(f"Unknown exchange: {exchange_id}")
        exchange_class = getattr(ccxt, exchange_id)

        config: dict[str, Any] = {"enableRateLimit": True}
        config.update(credentials or {})
        return cls(exchange_id, exchange_class(config), fee_rate)

    async def list_currencies(self) -> dict[str, list[TransferChain]]:
        """Get transfer networks per currency."""
        try:
            currencies = await self._client.fetch_currencies()
        except ccxt.BaseError as e:
            raise VenueConnectivityError(self.name, f"fetch_currencies failed: {e}") from e

        result: dict[str, list[TransferChain]] = {}
        for code, data in (currencies or {}).items():
            networks = (data or {}).get("networks") or {}
            result[code] = [
                TransferChain(
                    chain_name=str(label),
                    deposit_enabled=bool(network.get("deposit")),
                    withdraw_enabled=bool(network.get("withdraw")),
                    withdraw_fee=to_decimal(network.get("fee")),
                )
                for label, network in networks.items()
                if network is not None
            ]

        logger.debug(f"{self.name}: {len(result)} currencies listed")
        return result

    async def list_tickers(self) -> dict[str, Quote]:
        """Get best bid/ask for every pair."""
        try:
            tickers = await self._client.fetch_tickers()
        except ccxt.BaseError as e:
            raise VenueConnectivityError(self.name, f"fetch_tickers failed: {e}") from e

        return {
            symbol: Quote(
                bid=to_decimal(data.get("bid")),
                bid_volume=to_decimal(data.get("bidVolume")),
                ask=to_decimal(data.get("ask")),
                ask_volume=to_decimal(data.get("askVolume")),
            )
            for symbol, data in (tickers or {}).items()
            if data is not None
        }

    async def fetch_order_book(self, pair: str, limit: int | None = None) -> dict[str, Any]:
        """Get an order book snapshot."""
        try:
            book = await self._client.fetch_order_book(pair, limit)
        except ccxt.BaseError as e:
            raise VenueConnectivityError(self.name, f"fetch_order_book {pair} failed: {e}") from e

        return {"asks": book.get("asks") or [], "bids": book.get("bids") or []}

    async def close(self) -> None:
        """Close the underlying CCXT session."""
        await self._client.close()
        logger.debug(f"Closed {self.name}")
