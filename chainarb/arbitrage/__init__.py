"""Arbitrage detection and calculation module."""

from chainarb.arbitrage.calculator import DegenerateQuoteError, ProfitCalculator
from chainarb.arbitrage.chains import ChainNormalizer, ChainResolver
from chainarb.arbitrage.detector import DepthSampler, OpportunityMatcher
from chainarb.arbitrage.ranker import rank_opportunities
from chainarb.arbitrage.scanner import ArbitrageScanner
from chainarb.arbitrage.snapshot import MarketSnapshotStore

__all__ = [
    "ArbitrageScanner",
    "ChainNormalizer",
    "ChainResolver",
    "DegenerateQuoteError",
    "DepthSampler",
    "MarketSnapshotStore",
    "OpportunityMatcher",
    "ProfitCalculator",
    "rank_opportunities",
]
