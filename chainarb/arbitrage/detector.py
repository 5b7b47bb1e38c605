"""Cross-venue arbitrage opportunity detection."""

import asyncio
from collections.abc import Iterable, Iterator, Mapping, Sequence
from decimal import Decimal
from typing import Any

from loguru import logger

from chainarb.arbitrage.calculator import DegenerateQuoteError, ProfitCalculator
from chainarb.arbitrage.chains import ChainResolver
from chainarb.exchanges.base import BaseVenueClient
from chainarb.models.market import DepthLevel, Quote, Snapshot
from chainarb.models.opportunity import Opportunity

ALL_VENUES = "all"


def venue_matches(venue_filter: str, venue: str) -> bool:
    """Check a venue against an "all" or venue-name filter, ignoring case."""
    return venue_filter == ALL_VENUES or venue_filter.lower() == venue.lower()


class OpportunityMatcher:
    """Match buy and sell quotes of the same pair across venues."""

    def __init__(
        self,
        fee_rates: Mapping[str, Decimal],
        resolver: ChainResolver | None = None,
        calculator: ProfitCalculator | None = None,
        excluded_currencies: Iterable[str] = (),
        min_profit: Decimal = Decimal("0.005"),
        max_profit: Decimal = Decimal("0.02"),
        withdraw_cost_ceiling: Decimal = Decimal("0.4"),
        default_fee_rate: Decimal = Decimal("0.00075"),
    ) -> None:
        """
        Initialize the matcher.

        Args:
            fee_rates: Venue name -> taker fee (decimal)
            resolver: Transfer chain resolver
            calculator: Profit calculator
            excluded_currencies: Currencies never traded
            min_profit: Lowest accepted net ratio (inclusive)
            max_profit: Highest accepted net ratio (inclusive), guards against bad quotes
            withdraw_cost_ceiling: Highest accepted withdrawal cost in settlement currency
            default_fee_rate: Fee for venues missing from fee_rates
        """
        self.fee_rates = dict(fee_rates)
        self.resolver = resolver or ChainResolver()
        self.calculator = calculator or ProfitCalculator()
        self.excluded_currencies = {currency.upper() for currency in excluded_currencies}
        self.min_profit = min_profit
        self.max_profit = max_profit
        self.withdraw_cost_ceiling = withdraw_cost_ceiling
        self.default_fee_rate = default_fee_rate

    def fee_for(self, venue: str) -> Decimal:
        """Taker fee of a venue."""
        return self.fee_rates.get(venue, self.default_fee_rate)

    def find_opportunities(
        self,
        snapshot: Snapshot,
        source_venue: str = ALL_VENUES,
        dest_venue: str = ALL_VENUES,
        min_profit: Decimal | None = None,
        max_profit: Decimal | None = None,
    ) -> list[Opportunity]:
        """
        Scan a snapshot for opportunities, without order book depth.

        Args:
            snapshot: Market snapshot to scan
            source_venue: Buy venue filter ("all" or venue name)
            dest_venue: Sell venue filter ("all" or venue name)
            min_profit: Override of the minimum net ratio
            max_profit: Override of the maximum net ratio

        Returns:
            Candidates in snapshot order
        """
        low = self.min_profit if min_profit is None else min_profit
        high = self.max_profit if max_profit is None else max_profit

        opportunities = []
        for pair, venue_quotes in snapshot.quotes.items():
            currencies = pair.split("/")
            if len(currencies) != 2:
                continue
            base, quote = currencies
            if {base.upper(), quote.upper()} & self.excluded_currencies:
                continue

            for buy_venue, buy_quote, sell_venue, sell_quote in self._venue_pairs(venue_quotes):
                if not venue_matches(source_venue, buy_venue):
                    continue
                if not venue_matches(dest_venue, sell_venue):
                    continue

                opp = self._check_pair(
                    snapshot, pair, base, buy_venue, buy_quote, sell_venue, sell_quote, low, high
                )
                if opp:
                    opportunities.append(opp)

        return opportunities

    @staticmethod
    def _venue_pairs(
        venue_quotes: Mapping[str, Quote],
    ) -> Iterator[tuple[str, Quote, str, Quote]]:
        """Cross join venues with ask liquidity and venues with bid liquidity, no self-pairs."""
        buy_side = [(venue, q) for venue, q in venue_quotes.items() if q.can_buy]
        sell_side = [(venue, q) for venue, q in venue_quotes.items() if q.can_sell]

        for buy_venue, buy_quote in buy_side:
            for sell_venue, sell_quote in sell_side:
                if buy_venue == sell_venue:
                    continue
                yield buy_venue, buy_quote, sell_venue, sell_quote

    def _check_pair(
        self,
        snapshot: Snapshot,
        pair: str,
        base: str,
        buy_venue: str,
        buy_quote: Quote,
        sell_venue: str,
        sell_quote: Quote,
        min_profit: Decimal,
        max_profit: Decimal,
    ) -> Opportunity | None:
        """Apply the transfer, profit and withdrawal cost checks to one venue pair."""
        source_chains = snapshot.chains_for(base, buy_venue)
        dest_chains = snapshot.chains_for(base, sell_venue)
        if not source_chains or not dest_chains:
            logger.debug(f"{pair} {buy_venue}->{sell_venue}: no chain data")
            return None

        chain = self.resolver.resolve(source_chains, dest_chains)
        if chain is None:
            return None

        buy_price = buy_quote.ask
        sell_price = sell_quote.bid
        if not buy_price < sell_price:
            return None

        try:
            profit = self.calculator.compute(
                buy_price, sell_price, self.fee_for(buy_venue), self.fee_for(sell_venue)
            )
        except DegenerateQuoteError as e:
            logger.debug(f"{pair} {buy_venue}->{sell_venue}: {e}")
            return None

        if profit.net_ratio < min_profit or profit.net_ratio > max_profit:
            return None

        withdraw_cost = self.calculator.withdraw_cost(chain.withdraw_fee, buy_price)
        if withdraw_cost > self.withdraw_cost_ceiling:
            return None

        return Opportunity(
            pair=pair,
            buy_venue=buy_venue,
            sell_venue=sell_venue,
            buy_price=buy_price,
            sell_price=sell_price,
            profit_ratio=profit.net_ratio,
            gross_ratio=profit.gross_ratio,
            withdraw_cost=withdraw_cost,
            chain_name=chain.chain_name,
        )


class DepthSampler:
    """Attach the top order book levels of both venues to opportunities."""

    def __init__(
        self,
        venues: Sequence[BaseVenueClient],
        depth: int = 5,
        fetch_limit: int | None = None,
        semaphore: asyncio.Semaphore | None = None,
    ) -> None:
        """
        Initialize depth sampler.

        Args:
            venues: Venue clients to fetch order books from
            depth: Levels kept per side
            fetch_limit: Levels requested from the venue
            semaphore: Limits concurrent venue requests
        """
        self.venues = {venue.name: venue for venue in venues}
        self.depth = depth
        self.fetch_limit = fetch_limit
        self._semaphore = semaphore or asyncio.Semaphore(10)

    async def attach(self, opportunities: Sequence[Opportunity]) -> list[Opportunity]:
        """
        Return the opportunities, in the same order, with depth samples filled in.

        Each (venue, pair) book is fetched once per call, however many
        opportunities share it.
        """
        keys = list(
            dict.fromkeys(
                key
                for opp in opportunities
                for key in ((opp.buy_venue, opp.pair), (opp.sell_venue, opp.pair))
            )
        )
        fetched = await asyncio.gather(*(self._fetch_book(venue, pair) for venue, pair in keys))
        books = dict(zip(keys, fetched, strict=True))

        return [
            opp.model_copy(
                update={
                    "buy_depth": self._levels(books[(opp.buy_venue, opp.pair)], "asks"),
                    "sell_depth": self._levels(books[(opp.sell_venue, opp.pair)], "bids"),
                }
            )
            for opp in opportunities
        ]

    async def _fetch_book(
        self, venue_name: str, pair: str
    ) -> dict[str, list[DepthLevel]] | None:
        """Fetch the top levels of both sides of a venue's book, None when unavailable."""
        venue = self.venues.get(venue_name)
        if venue is None:
            return None

        try:
            async with self._semaphore:
                book: dict[str, Any] = await venue.fetch_order_book(pair, self.fetch_limit)
            return {
                side: [
                    DepthLevel(price=Decimal(str(level[0])), size=Decimal(str(level[1])))
                    for level in book.get(side, [])[: self.depth]
                ]
                for side in ("asks", "bids")
            }
        except Exception as e:
            logger.debug(f"Depth unavailable for {pair} on {venue_name}: {e}")
            return None

    @staticmethod
    def _levels(book: dict[str, list[DepthLevel]] | None, side: str) -> list[DepthLevel] | None:
        return None if book is None else book[side]
