"""Pytest configuration and fixtures."""

from decimal import Decimal
from typing import Any

import pytest

from chainarb.config.settings import Settings
from chainarb.models.market import Snapshot
from tests.factories import chain, quote


@pytest.fixture
def test_settings() -> Settings:
    """Settings independent of the environment."""
    return Settings(
        _env_file=None,
        VENUES=["binance", "kraken"],
        MIN_PROFIT=Decimal("0.005"),
        MAX_PROFIT=Decimal("0.02"),
        EXCLUDED_CURRENCIES=[],
        EXCLUDED_CHAINS=["ERC20"],
        WITHDRAW_COST_CEILING=Decimal("0.4"),
        ORDERBOOK_DEPTH_SAMPLE=5,
        CHAIN_ALIASES_FILE="",
        MAX_CONCURRENT_REQUESTS=4,
    )


@pytest.fixture
def sample_snapshot() -> Snapshot:
    """BTC/USDT cheaper on binance than on kraken, shared BTC network."""
    return Snapshot(
        chains={
            "BTC": {
                "binance": (chain("BTC"),),
                "kraken": (chain("BTC"),),
            },
        },
        quotes={
            "BTC/USDT": {
                "binance": quote(bid="99", ask="100"),
                "kraken": quote(bid="102", ask="103"),
            },
        },
    )


@pytest.fixture
def sample_book() -> dict[str, Any]:
    """Order book with six levels per side."""
    return {
        "asks": [[100 + i, 0.5] for i in range(6)],
        "bids": [[102 - i, 0.25] for i in range(6)],
    }
