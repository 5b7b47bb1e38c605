"""Venue clients module."""

from loguru import logger

from chainarb.config.settings import Settings
from chainarb.exchanges.base import BaseVenueClient, VenueConnectivityError
from chainarb.exchanges.ccxt_venue import CcxtVenueClient


class VenueFactory:
    """Factory for creating venue clients from settings."""

    @classmethod
    def create_all(cls, settings: Settings) -> list[BaseVenueClient]:
        """Create one client per configured venue, skipping unknown ids."""
        clients: list[BaseVenueClient] = []
        for venue in settings.VENUES:
            try:
                clients.append(
                    CcxtVenueClient.create(
                        venue,
                        fee_rate=settings.fee_for(venue),
                        credentials=settings.API_CREDENTIALS.get(venue),
                    )
                )
            except ValueError as e:
                logger.error(f"Skipping venue {venue}: {e}")
        logger.info(f"Configured {len(clients)} venues: {[c.name for c in clients]}")
        return clients


__all__ = ["VenueFactory", "BaseVenueClient", "CcxtVenueClient", "VenueConnectivityError"]
