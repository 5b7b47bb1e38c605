"""Main entry point for the arbitrage scanner."""

import argparse
import asyncio
from decimal import Decimal

from loguru import logger

from chainarb.arbitrage.scanner import ArbitrageScanner
from chainarb.config.logging_config import setup_logging
from chainarb.config.settings import settings
from chainarb.exchanges import VenueFactory
from chainarb.models.opportunity import Opportunity, ScanRequest


def format_opportunity(opp: Opportunity) -> str:
    """One-line summary of an opportunity."""
    line = (
        f"{opp.pair} {opp.buy_venue} -> {opp.sell_venue} "
        f"buy={opp.buy_price} sell={opp.sell_price} "
        f"profit={opp.profit_percent:.3f}% "
        f"chain={opp.chain_name} withdraw={opp.withdraw_cost} {settings.SETTLEMENT_CURRENCY}"
    )
    if opp.buy_depth:
        line += f" ask_depth={sum(level.notional for level in opp.buy_depth):.3f}"
    if opp.sell_depth:
        line += f" bid_depth={sum(level.notional for level in opp.sell_depth):.3f}"
    return line


async def main(
    request: ScanRequest,
    interval: float = 0,
    iterations: int = 1,
    log_level: str | None = None,
) -> None:
    """
    Main entry point for the arbitrage scanner.

    Args:
        request: Venue filters and profit band overrides
        interval: Seconds between scans
        iterations: Number of scans (0 = infinite)
        log_level: Console log level, defaults to LOG_LEVEL
    """
    setup_logging(settings, log_level)
    logger.info("Starting arbitrage scanner")

    scanner = ArbitrageScanner(VenueFactory.create_all(settings), settings)
    iteration = 0

    try:
        await scanner.refresh_chains()

        while True:
            iteration += 1
            result = await scanner.scan(request)

            if not result.has_data:
                logger.warning("No market data, nothing to scan")
            for opp in result.opportunities:
                logger.info(format_opportunity(opp))
            for venue, error in result.failed_venues.items():
                logger.warning(f"Fetch failed for {venue}: {error}")

            if iterations and iteration >= iterations:
                break
            await asyncio.sleep(interval)

    except KeyboardInterrupt:
        logger.info("Shutting down...")
    finally:
        await scanner.close()


def run() -> None:
    """CLI entry point."""
    parser = argparse.ArgumentParser(description="Cross-exchange arbitrage scanner")
    parser.add_argument("--source", default="all", help="Buy venue (default: all)")
    parser.add_argument("--dest", default="all", help="Sell venue (default: all)")
    parser.add_argument("--min-profit", type=Decimal, default=None, help="Minimum net ratio")
    parser.add_argument("--max-profit", type=Decimal, default=None, help="Maximum net ratio")
    parser.add_argument(
        "--interval",
        type=float,
        default=settings.SCAN_INTERVAL_MS / 1000,
        help="Seconds between scans",
    )
    parser.add_argument(
        "--iterations",
        type=int,
        default=1,
        help="Number of scans (0=infinite)",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        choices=["TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL"],
        type=str.upper,
        help=f"Console log level (default: {settings.LOG_LEVEL})",
    )
    args = parser.parse_args()

    request = ScanRequest(
        source_venue=args.source,
        dest_venue=args.dest,
        min_profit=args.min_profit,
        max_profit=args.max_profit,
    )
    asyncio.run(
        main(
            request,
            interval=args.interval,
            iterations=args.iterations,
            log_level=args.log_level,
        )
    )


if __name__ == "__main__":
    run()
