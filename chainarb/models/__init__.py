"""Pydantic models for the arbitrage scanner."""

from chainarb.models.market import DepthLevel, Quote, Snapshot, TransferChain
from chainarb.models.opportunity import Opportunity, ScanRequest, ScanResult

__all__ = [
    "TransferChain",
    "Quote",
    "DepthLevel",
    "Snapshot",
    "Opportunity",
    "ScanRequest",
    "ScanResult",
]
