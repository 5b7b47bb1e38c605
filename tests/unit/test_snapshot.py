"""Unit tests for the market snapshot store."""

import asyncio
from decimal import Decimal

import pytest

from chainarb.arbitrage.chains import ChainNormalizer
from chainarb.arbitrage.snapshot import MarketSnapshotStore
from chainarb.models.market import Quote
from tests.factories import FakeVenueClient, chain, quote


class SlowVenueClient(FakeVenueClient):
    """Venue client whose ticker call blocks until released."""

    def __init__(self, name: str, **kwargs) -> None:
        super().__init__(name, **kwargs)
        self.release = asyncio.Event()

    async def list_tickers(self) -> dict[str, Quote]:
        await self.release.wait()
        return await super().list_tickers()


class TestRefreshChains:
    """Tests for MarketSnapshotStore.refresh_chains."""

    @pytest.mark.asyncio
    async def test_merged_by_currency_then_venue(self) -> None:
        """Chains from all venues end up under currency -> venue."""
        binance = FakeVenueClient("binance", currencies={"BTC": [chain("BTC")]})
        kraken = FakeVenueClient(
            "kraken", currencies={"BTC": [chain("BTC")], "TRX": [chain("TRC20")]}
        )
        store = MarketSnapshotStore([binance, kraken])

        snapshot = await store.refresh_chains()

        assert set(snapshot.chains) == {"BTC", "TRX"}
        assert set(snapshot.chains["BTC"]) == {"binance", "kraken"}
        assert snapshot.chains_for("TRX", "binance") is None
        assert store.snapshot is snapshot

    @pytest.mark.asyncio
    async def test_labels_normalized(self) -> None:
        """Raw network labels are mapped to canonical names."""
        venue = FakeVenueClient(
            "okx",
            currencies={"USDC": [chain("tron"), chain("Bsc"), chain("SomethingNew")]},
        )
        store = MarketSnapshotStore(
            [venue], normalizer=ChainNormalizer({"TRC20": ["TRON"], "BEP20": ["BSC"]})
        )

        snapshot = await store.refresh_chains()

        names = [c.chain_name for c in snapshot.chains_for("USDC", "okx")]
        assert names == ["TRC20", "BEP20", "SOMETHINGNEW"]

    @pytest.mark.asyncio
    async def test_failed_venue_contributes_nothing(self) -> None:
        """A failing venue is recorded and omitted, others still load."""
        good = FakeVenueClient("binance", currencies={"BTC": [chain("BTC")]})
        bad = FakeVenueClient("kraken", currencies={"BTC": [chain("BTC")]}, fail_currencies=True)
        store = MarketSnapshotStore([good, bad])

        snapshot = await store.refresh_chains()

        assert set(snapshot.chains["BTC"]) == {"binance"}
        assert "kraken" in snapshot.chain_failures
        assert "kraken" in snapshot.failed_venues

    @pytest.mark.asyncio
    async def test_refresh_replaces_wholesale(self) -> None:
        """A second refresh does not keep data from the first one."""
        venue = FakeVenueClient("binance", currencies={"BTC": [chain("BTC")]})
        store = MarketSnapshotStore([venue])
        await store.refresh_chains()

        venue.currencies = {"ETH": [chain("ARBITRUM")]}
        snapshot = await store.refresh_chains()

        assert set(snapshot.chains) == {"ETH"}

    @pytest.mark.asyncio
    async def test_quotes_untouched(self) -> None:
        """Refreshing chains keeps the published quotes."""
        venue = FakeVenueClient(
            "binance",
            currencies={"BTC": [chain("BTC")]},
            tickers={"BTC/USDT": quote(bid="1", ask="2")},
        )
        store = MarketSnapshotStore([venue])
        await store.refresh_quotes()

        snapshot = await store.refresh_chains()

        assert "BTC/USDT" in snapshot.quotes


class TestRefreshQuotes:
    """Tests for MarketSnapshotStore.refresh_quotes."""

    @pytest.mark.asyncio
    async def test_only_settlement_pairs_kept(self) -> None:
        """Pairs not quoted in the settlement currency are dropped."""
        venue = FakeVenueClient(
            "binance",
            tickers={
                "BTC/USDT": quote(bid="1", ask="2"),
                "ETH/BTC": quote(bid="1", ask="2"),
                "USDT/TRY": quote(bid="1", ask="2"),
                "SOL/USDC": quote(bid="1", ask="2"),
            },
        )
        store = MarketSnapshotStore([venue])

        snapshot = await store.refresh_quotes()

        assert list(snapshot.quotes) == ["BTC/USDT"]

    @pytest.mark.asyncio
    async def test_settlement_marker_stripped(self) -> None:
        """Symbols with a trailing settlement marker are comparable with plain ones."""
        binance = FakeVenueClient("binance", tickers={"BTC/USDT": quote(bid="1", ask="2")})
        bybit = FakeVenueClient("bybit", tickers={"BTC/USDT:USDT": quote(bid="3", ask="4")})
        store = MarketSnapshotStore([binance, bybit])

        snapshot = await store.refresh_quotes()

        assert set(snapshot.quotes["BTC/USDT"]) == {"binance", "bybit"}
        assert snapshot.quotes["BTC/USDT"]["bybit"].bid == Decimal("3")

    @pytest.mark.asyncio
    async def test_spot_symbol_preferred(self) -> None:
        """When a venue lists both forms, the plain symbol is kept."""
        venue = FakeVenueClient(
            "bybit",
            tickers={
                "BTC/USDT:USDT": quote(bid="3", ask="4"),
                "BTC/USDT": quote(bid="1", ask="2"),
            },
        )
        store = MarketSnapshotStore([venue])

        snapshot = await store.refresh_quotes()

        assert snapshot.quotes["BTC/USDT"]["bybit"].bid == Decimal("1")

    @pytest.mark.asyncio
    async def test_custom_settlement_currency(self) -> None:
        """Settlement currency is configurable."""
        venue = FakeVenueClient(
            "kraken",
            tickers={"BTC/USDT": quote(bid="1", ask="2"), "BTC/USDC": quote(bid="1", ask="2")},
        )
        store = MarketSnapshotStore([venue], settlement_currency="usdc")

        snapshot = await store.refresh_quotes()

        assert list(snapshot.quotes) == ["BTC/USDC"]

    @pytest.mark.asyncio
    async def test_failed_venue_has_no_quotes(self) -> None:
        """A failing venue contributes zero quotes, never stale ones."""
        binance = FakeVenueClient("binance", tickers={"BTC/USDT": quote(bid="1", ask="2")})
        kraken = FakeVenueClient("kraken", tickers={"BTC/USDT": quote(bid="3", ask="4")})
        store = MarketSnapshotStore([binance, kraken])
        await store.refresh_quotes()

        kraken.fail_tickers = True
        snapshot = await store.refresh_quotes()

        assert set(snapshot.quotes["BTC/USDT"]) == {"binance"}
        assert set(snapshot.quote_failures) == {"kraken"}

    @pytest.mark.asyncio
    async def test_all_venues_failed(self) -> None:
        """With every venue down the snapshot has no quotes."""
        store = MarketSnapshotStore([FakeVenueClient("binance", fail_tickers=True)])

        snapshot = await store.refresh_quotes()

        assert not snapshot.has_quotes
        assert set(snapshot.failed_venues) == {"binance"}

    @pytest.mark.asyncio
    async def test_readers_keep_their_snapshot(self) -> None:
        """A snapshot taken before a refresh is not changed by it."""
        venue = FakeVenueClient("binance", tickers={"BTC/USDT": quote(bid="1", ask="2")})
        store = MarketSnapshotStore([venue])
        before = await store.refresh_quotes()

        venue.tickers = {"ETH/USDT": quote(bid="1", ask="2")}
        after = await store.refresh_quotes()

        assert list(before.quotes) == ["BTC/USDT"]
        assert list(after.quotes) == ["ETH/USDT"]

    @pytest.mark.asyncio
    async def test_nothing_published_until_all_venues_answer(self) -> None:
        """A refresh in flight is invisible, and a cancelled one publishes nothing."""
        fast = FakeVenueClient("binance", tickers={"BTC/USDT": quote(bid="1", ask="2")})
        slow = SlowVenueClient("kraken", tickers={"BTC/USDT": quote(bid="3", ask="4")})
        store = MarketSnapshotStore([fast, slow])

        task = asyncio.create_task(store.refresh_quotes())
        await asyncio.sleep(0.01)
        assert not store.snapshot.has_quotes

        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task
        assert not store.snapshot.has_quotes

        slow.release.set()
        snapshot = await store.refresh_quotes()
        assert set(snapshot.quotes["BTC/USDT"]) == {"binance", "kraken"}
