"""Market data models."""

from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field


class TransferChain(BaseModel):
    """A network over which a currency can be deposited to or withdrawn from a venue."""

    model_config = ConfigDict(frozen=True)

    chain_name: str = Field(..., description="Canonical chain name (e.g., TRC20)")
    deposit_enabled: bool = Field(default=False, description="Venue accepts deposits")
    withdraw_enabled: bool = Field(default=False, description="Venue allows withdrawals")
    withdraw_fee: Decimal = Field(
        default=Decimal("0"), ge=Decimal("0"), description="Withdrawal fee in currency units"
    )


class Quote(BaseModel):
    """Best bid/ask of a pair on one venue."""

    model_config = ConfigDict(frozen=True)

    bid: Decimal = Field(default=Decimal("0"), ge=Decimal("0"), description="Best bid price")
    bid_volume: Decimal = Field(
        default=Decimal("0"), ge=Decimal("0"), description="Volume at best bid"
    )
    ask: Decimal = Field(default=Decimal("0"), ge=Decimal("0"), description="Best ask price")
    ask_volume: Decimal = Field(
        default=Decimal("0"), ge=Decimal("0"), description="Volume at best ask"
    )

    @property
    def can_buy(self) -> bool:
        """Ask side has liquidity."""
        return self.ask_volume > 0

    @property
    def can_sell(self) -> bool:
        """Bid side has liquidity."""
        return self.bid_volume > 0


class DepthLevel(BaseModel):
    """Single order book level (price + size)."""

    model_config = ConfigDict(frozen=True)

    price: Decimal = Field(..., description="Price at this level")
    size: Decimal = Field(..., description="Size available at this price")

    @property
    def notional(self) -> Decimal:
        """Level value in settlement currency."""
        return self.price * self.size


class Snapshot(BaseModel):
    """
    Point-in-time market view the matcher runs over.

    Never mutated after construction; the snapshot store publishes a new
    instance on every refresh.
    """

    model_config = ConfigDict(frozen=True)

    chains: dict[str, dict[str, tuple[TransferChain, ...]]] = Field(
        default_factory=dict, description="currency -> venue -> transfer chains"
    )
    quotes: dict[str, dict[str, Quote]] = Field(
        default_factory=dict, description="pair -> venue -> quote"
    )
    chain_failures: dict[str, str] = Field(
        default_factory=dict, description="Venues whose last chain refresh failed"
    )
    quote_failures: dict[str, str] = Field(
        default_factory=dict, description="Venues whose last quote refresh failed"
    )

    def chains_for(self, currency: str, venue: str) -> tuple[TransferChain, ...] | None:
        """Transfer chains of a currency on a venue, None when the venue has no data."""
        venues = self.chains.get(currency)
        if venues is None:
            return None
        return venues.get(venue)

    @property
    def has_chains(self) -> bool:
        """Whether any chain metadata has been loaded."""
        return bool(self.chains)

    @property
    def has_quotes(self) -> bool:
        """Whether any quote data has been loaded."""
        return bool(self.quotes)

    @property
    def failed_venues(self) -> dict[str, str]:
        """All venues with a failure in the current snapshot."""
        return {**self.chain_failures, **self.quote_failures}
