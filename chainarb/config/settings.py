"""Application settings using Pydantic."""

from decimal import Decimal

from pydantic_settings import BaseSettings

from chainarb.config.constants import DEFAULT_VENUES, LEGACY_CHAIN
from chainarb.config.constants import VENUE_FEES as DEFAULT_VENUE_FEES


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Venues
    VENUES: list[str] = list(DEFAULT_VENUES)
    VENUE_FEES: dict[str, Decimal] = dict(DEFAULT_VENUE_FEES)
    DEFAULT_VENUE_FEE: Decimal = Decimal("0.00075")

    # Credentials per venue, e.g. {"okx": {"apiKey": "...", "secret": "...", "password": "..."}}
    API_CREDENTIALS: dict[str, dict[str, str]] = {}

    # Market scope
    SETTLEMENT_CURRENCY: str = "USDT"
    EXCLUDED_CURRENCIES: list[str] = []
    EXCLUDED_CHAINS: list[str] = [LEGACY_CHAIN]
    CHAIN_ALIASES_FILE: str = ""

    # Profit band (fractions, 0.005 = 0.5%)
    MIN_PROFIT: Decimal = Decimal("0.005")
    MAX_PROFIT: Decimal = Decimal("0.02")

    # Withdrawal cost ceiling in settlement currency units
    WITHDRAW_COST_CEILING: Decimal = Decimal("0.4")

    # Order book levels attached to each opportunity
    ORDERBOOK_DEPTH_SAMPLE: int = 5

    # Performance settings
    MAX_CONCURRENT_REQUESTS: int = 10
    SCAN_INTERVAL_MS: int = 30000

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_FILE: str = "logs/chainarb.log"

    class Config:
        """Pydantic config."""

        env_file = ".env"
        case_sensitive = True

    @property
    def excluded_chains(self) -> set[str]:
        """Excluded chain names, always including the legacy token network."""
        return {chain.upper() for chain in self.EXCLUDED_CHAINS} | {LEGACY_CHAIN}

    def fee_for(self, venue: str) -> Decimal:
        """Trading fee rate for a venue."""
        return self.VENUE_FEES.get(venue, self.DEFAULT_VENUE_FEE)


# Global settings instance
settings = Settings()
