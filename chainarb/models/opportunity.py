"""Arbitrage opportunity models."""

from decimal import Decimal
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from chainarb.models.market import DepthLevel


class Opportunity(BaseModel):
    """A detected cross-venue opportunity: buy on one venue, transfer, sell on another."""

    model_config = ConfigDict(frozen=True)

    pair: str = Field(..., description="Trading pair symbol (e.g., BTC/USDT)")
    buy_venue: str = Field(..., description="Venue to buy on")
    sell_venue: str = Field(..., description="Venue to sell on")

    # Prices
    buy_price: Decimal = Field(..., description="Ask on the buy venue")
    sell_price: Decimal = Field(..., description="Bid on the sell venue")

    # Profit
    profit_ratio: Decimal = Field(..., description="Net profit ratio after trading fees")
    gross_ratio: Decimal = Field(..., description="Spread ratio before fees (diagnostic only)")

    # Transfer
    withdraw_cost: Decimal = Field(..., description="Withdrawal fee in settlement currency")
    chain_name: str = Field(..., description="Network used to move the asset")

    # Depth samples, None when the order book could not be fetched
    buy_depth: list[DepthLevel] | None = Field(default=None, description="Top asks on buy venue")
    sell_depth: list[DepthLevel] | None = Field(default=None, description="Top bids on sell venue")

    diagnostics: dict[str, Any] | None = Field(default=None, description="Optional debug payload")

    @property
    def profit_percent(self) -> Decimal:
        """Net profit as percentage."""
        return self.profit_ratio * 100

    @property
    def has_depth(self) -> bool:
        """Whether both depth samples are present."""
        return self.buy_depth is not None and self.sell_depth is not None


class ScanRequest(BaseModel):
    """Arguments of a scan as received from a transport."""

    source_venue: str = Field(default="all", description="Buy venue filter or 'all'")
    dest_venue: str = Field(default="all", description="Sell venue filter or 'all'")
    min_profit: Decimal | None = Field(default=None, description="Override minimum net ratio")
    max_profit: Decimal | None = Field(default=None, description="Override maximum net ratio")


class ScanResult(BaseModel):
    """Ranked scan output handed back to a transport."""

    opportunities: list[Opportunity] = Field(default_factory=list)
    failed_venues: dict[str, str] = Field(
        default_factory=dict, description="Venue -> error for fetches that failed"
    )
    has_data: bool = Field(default=True, description="False when no quote data was available")

    @property
    def count(self) -> int:
        """Number of opportunities."""
        return len(self.opportunities)
