"""Arbitrage scanner: the operations exposed to a transport."""

import asyncio
from collections.abc import Sequence
from decimal import Decimal

from loguru import logger

from chainarb.arbitrage.chains import ChainNormalizer, ChainResolver
from chainarb.arbitrage.detector import ALL_VENUES, DepthSampler, OpportunityMatcher
from chainarb.arbitrage.ranker import rank_opportunities
from chainarb.arbitrage.snapshot import MarketSnapshotStore
from chainarb.config.constants import ORDERBOOK_FETCH_LIMIT
from chainarb.config.settings import Settings
from chainarb.exchanges.base import BaseVenueClient
from chainarb.models.market import Snapshot
from chainarb.models.opportunity import ScanRequest, ScanResult


class ArbitrageScanner:
    """Refreshes market data and scans it for cross-venue opportunities."""

    def __init__(
        self,
        venues: Sequence[BaseVenueClient],
        settings: Settings,
        normalizer: ChainNormalizer | None = None,
    ) -> None:
        """
        Initialize the scanner.

        Args:
            venues: Venue clients
            settings: Scanner configuration
            normalizer: Chain label normalizer, loaded from CHAIN_ALIASES_FILE when omitted
        """
        self.venues = list(venues)
        self.settings = settings

        if normalizer is None:
            normalizer = (
                ChainNormalizer.from_file(settings.CHAIN_ALIASES_FILE)
                if settings.CHAIN_ALIASES_FILE
                else ChainNormalizer()
            )

        semaphore = asyncio.Semaphore(settings.MAX_CONCURRENT_REQUESTS)
        self.store = MarketSnapshotStore(
            self.venues,
            normalizer=normalizer,
            settlement_currency=settings.SETTLEMENT_CURRENCY,
            semaphore=semaphore,
        )
        self.matcher = OpportunityMatcher(
            fee_rates={venue.name: venue.fee_rate for venue in self.venues},
            resolver=ChainResolver(
                {normalizer.normalize(name) for name in settings.excluded_chains}
            ),
            excluded_currencies=settings.EXCLUDED_CURRENCIES,
            min_profit=settings.MIN_PROFIT,
            max_profit=settings.MAX_PROFIT,
            withdraw_cost_ceiling=settings.WITHDRAW_COST_CEILING,
            default_fee_rate=settings.DEFAULT_VENUE_FEE,
        )
        self.depth_sampler = DepthSampler(
            self.venues,
            depth=settings.ORDERBOOK_DEPTH_SAMPLE,
            fetch_limit=max(settings.ORDERBOOK_DEPTH_SAMPLE, ORDERBOOK_FETCH_LIMIT),
            semaphore=semaphore,
        )

    @property
    def snapshot(self) -> Snapshot:
        """Currently published snapshot."""
        return self.store.snapshot

    async def refresh_chains(self) -> Snapshot:
        """Reload transfer chain metadata from all venues."""
        return await self.store.refresh_chains()

    async def refresh_quotes(self) -> Snapshot:
        """Reload quotes from all venues."""
        return await self.store.refresh_quotes()

    async def scan_arbitrage(
        self,
        source_venue: str = ALL_VENUES,
        dest_venue: str = ALL_VENUES,
        min_profit: Decimal | None = None,
        max_profit: Decimal | None = None,
        refresh: bool = True,
    ) -> ScanResult:
        """
        Scan for opportunities and rank them by net profit.

        Args:
            source_venue: Buy venue filter ("all" or venue name)
            dest_venue: Sell venue filter ("all" or venue name)
            min_profit: Override of the minimum net ratio
            max_profit: Override of the maximum net ratio
            refresh: Reload quotes first, and chains while any venue lacks them

        Returns:
            Ranked opportunities with the venues whose fetches failed
        """
        if refresh:
            current = self.store.snapshot
            if not current.has_chains or current.chain_failures:
                await self.store.refresh_chains()
            await self.store.refresh_quotes()

        # Everything below works on this one snapshot, later refreshes do not affect it
        snapshot = self.store.snapshot
        if not snapshot.has_quotes:
            logger.warning("No quote data available")
            return ScanResult(failed_venues=snapshot.failed_venues, has_data=False)

        candidates = self.matcher.find_opportunities(
            snapshot,
            source_venue=source_venue,
            dest_venue=dest_venue,
            min_profit=min_profit,
            max_profit=max_profit,
        )
        with_depth = await self.depth_sampler.attach(candidates)
        ranked = rank_opportunities(with_depth)

        logger.info(
            f"Scan {source_venue}->{dest_venue}: {len(ranked)} opportunities "
            f"across {len(snapshot.quotes)} pairs"
        )
        return ScanResult(opportunities=ranked, failed_venues=snapshot.failed_venues)

    async def scan(self, request: ScanRequest, refresh: bool = True) -> ScanResult:
        """Run scan_arbitrage with the arguments of a transport request."""
        return await self.scan_arbitrage(
            source_venue=request.source_venue,
            dest_venue=request.dest_venue,
            min_profit=request.min_profit,
            max_profit=request.max_profit,
            refresh=refresh,
        )

    async def close(self) -> None:
        """Close all venue clients."""
        for venue in self.venues:
            try:
                await venue.close()
            except Exception as e:
                logger.error(f"Failed to close {venue.name}: {e}")
        logger.info("All venue connections closed")
