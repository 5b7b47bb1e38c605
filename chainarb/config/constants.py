"""Application constants."""

from decimal import Decimal

# ccxt exchange ids scanned by default
DEFAULT_VENUES = [
    "binance",
    "okx",
    "kucoin",
    "htx",
    "mexc",
    "bybit",
    "bitget",
    "bitfinex",
    "btcturk",
    "kraken",
]

# Taker fee by venue (as decimal, e.g., 0.00075 = 0.075%)
VENUE_FEES = {venue: Decimal("0.00075") for venue in DEFAULT_VENUES}

# Legacy general purpose token network, never used for transfers (high, volatile fees)
LEGACY_CHAIN = "ERC20"

# Canonical chain name -> labels used by venues for the same network
DEFAULT_CHAIN_ALIASES: dict[str, list[str]] = {
    "ERC20": ["ETH", "ERC20", "ETHEREUM", "ETH-ERC20"],
    "TRC20": ["TRX", "TRC20", "TRON", "USDT-TRC20"],
    "BEP20": ["BSC", "BEP20", "BNB SMART CHAIN", "BEP20(BSC)", "BNB-SMART-CHAIN"],
    "BEP2": ["BNB", "BEP2"],
    "SOL": ["SOL", "SOLANA", "SPL"],
    "MATIC": ["MATIC", "POLYGON", "POLYGON POS", "PLASMA"],
    "ARBITRUM": ["ARB", "ARBITRUM", "ARBITRUM ONE", "ARBONE", "ARBI"],
    "OPTIMISM": ["OP", "OPTIMISM", "OPETH"],
    "AVAXC": ["AVAX", "AVAXC", "AVAX C-CHAIN", "AVAX-C", "CCHAIN"],
    "BTC": ["BTC", "BITCOIN"],
    "LTC": ["LTC", "LITECOIN"],
    "TON": ["TON", "TONCOIN"],
    "BASE": ["BASE", "BASEEVM"],
}

# Order book levels requested from venues when sampling depth
ORDERBOOK_FETCH_LIMIT = 20
