"""Market snapshot store."""

import asyncio
from collections.abc import Awaitable, Callable, Sequence
from typing import Any, TypeVar

from loguru import logger

from chainarb.arbitrage.chains import ChainNormalizer
from chainarb.exchanges.base import BaseVenueClient
from chainarb.models.market import Quote, Snapshot, TransferChain

T = TypeVar("T")


class MarketSnapshotStore:
    """
    Holds the current market snapshot and rebuilds it from venue clients.

    Each refresh fans out one request per venue. A venue either contributes its
    whole payload or nothing at all; failures are recorded on the snapshot.
    New data is assembled off to the side and published by swapping the
    snapshot reference once every venue has answered, so a scan holding the
    previous snapshot never observes a partial refresh.
    """

    def __init__(
        self,
        venues: Sequence[BaseVenueClient],
        normalizer: ChainNormalizer | None = None,
        settlement_currency: str = "USDT",
        semaphore: asyncio.Semaphore | None = None,
    ) -> None:
        """
        Initialize snapshot store.

        Args:
            venues: Venue clients to fetch from
            normalizer: Chain label normalizer
            settlement_currency: Quote currency of retained pairs
            semaphore: Limits concurrent venue requests
        """
        self.venues = list(venues)
        self.normalizer = normalizer or ChainNormalizer()
        self.settlement_currency = settlement_currency.upper()
        self._semaphore = semaphore or asyncio.Semaphore(10)
        self._lock = asyncio.Lock()
        self._snapshot = Snapshot()

    @property
    def snapshot(self) -> Snapshot:
        """Currently published snapshot."""
        return self._snapshot

    async def refresh_chains(self) -> Snapshot:
        """Rebuild transfer chain metadata from every venue."""
        async with self._lock:
            results = await self._fan_out(
                lambda venue: venue.list_currencies(), self._normalize_chains
            )

            chains: dict[str, dict[str, tuple[TransferChain, ...]]] = {}
            failures: dict[str, str] = {}
            for venue, result in results:
                if isinstance(result, BaseException):
                    failures[venue.name] = str(result)
                    logger.warning(f"Chain refresh failed for {venue.name}: {result}")
                    continue
                for currency, venue_chains in result.items():
                    chains.setdefault(currency, {})[venue.name] = venue_chains

            self._snapshot = self._snapshot.model_copy(
                update={"chains": chains, "chain_failures": failures}
            )
            logger.info(
                f"Chains refreshed: {len(chains)} currencies, "
                f"{len(self.venues) - len(failures)}/{len(self.venues)} venues"
            )
            return self._snapshot

    async def refresh_quotes(self) -> Snapshot:
        """Rebuild quotes of settlement-currency pairs from every venue."""
        async with self._lock:
            results = await self._fan_out(lambda venue: venue.list_tickers(), self._filter_quotes)

            quotes: dict[str, dict[str, Quote]] = {}
            failures: dict[str, str] = {}
            for venue, result in results:
                if isinstance(result, BaseException):
                    failures[venue.name] = str(result)
                    logger.warning(f"Quote refresh failed for {venue.name}: {result}")
                    continue
                for pair, quote in result.items():
                    quotes.setdefault(pair, {})[venue.name] = quote

            self._snapshot = self._snapshot.model_copy(
                update={"quotes": quotes, "quote_failures": failures}
            )
            logger.info(
                f"Quotes refreshed: {len(quotes)} pairs, "
                f"{len(self.venues) - len(failures)}/{len(self.venues)} venues"
            )
            return self._snapshot

    async def _fan_out(
        self,
        call: Callable[[BaseVenueClient], Awaitable[T]],
        convert: Callable[[T], Any],
    ) -> list[tuple[BaseVenueClient, Any]]:
        """Run one task per venue and pair each venue with its payload or exception."""
        tasks = [self._fetch_venue(venue, call, convert) for venue in self.venues]
        results = await asyncio.gather(*tasks, return_exceptions=True)
        return list(zip(self.venues, results, strict=True))

    async def _fetch_venue(
        self,
        venue: BaseVenueClient,
        call: Callable[[BaseVenueClient], Awaitable[T]],
        convert: Callable[[T], Any],
    ) -> Any:
        """Fetch one venue's payload and convert it completely before it is merged."""
        async with self._semaphore:
            logger.debug(f"Fetching from {venue.name}...")
            payload = await call(venue)

        return convert(payload)

    def _normalize_chains(
        self,
        currencies: dict[str, list[TransferChain]],
    ) -> dict[str, tuple[TransferChain, ...]]:
        """Replace raw network labels with canonical chain names."""
        return {
            currency: tuple(
                chain.model_copy(update={"chain_name": self.normalizer.normalize(chain.chain_name)})
                for chain in chains
            )
            for currency, chains in currencies.items()
        }

    def _filter_quotes(self, tickers: dict[str, Quote]) -> dict[str, Quote]:
        """Keep settlement-currency pairs under a venue-independent symbol."""
        marker = f":{self.settlement_currency}"
        quotes: dict[str, Quote] = {}
        derived: dict[str, Quote] = {}

        for symbol, quote in tickers.items():
            pair = symbol[: -len(marker)] if symbol.endswith(marker) else symbol
            parts = pair.split("/")
            if len(parts) != 2 or parts[1] != self.settlement_currency:
                continue
            if pair == symbol:
                quotes[pair] = quote
            else:
                derived[pair] = quote

        # Plain spot symbols take precedence over settlement-marked ones
        for pair, quote in derived.items():
            quotes.setdefault(pair, quote)
        return quotes
