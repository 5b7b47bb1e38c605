"""Unit tests for logging setup."""

from collections.abc import Iterator

import pytest
from loguru import logger

from chainarb.config.logging_config import error_log_path, setup_logging
from chainarb.config.settings import Settings


@pytest.fixture(autouse=True)
def reset_sinks() -> Iterator[None]:
    """Drop sinks added by a test so files are closed."""
    yield
    logger.remove()


class TestSetupLogging:
    """Tests for setup_logging."""

    def test_error_log_path(self) -> None:
        """Error log sits beside the main log."""
        assert error_log_path("logs/chainarb.log").as_posix() == "logs/chainarb.errors.log"
        assert error_log_path("logs/scan").as_posix() == "logs/scan.errors.log"

    def test_file_sinks(self, tmp_path) -> None:
        """Main log gets everything, error log only errors."""
        log_file = tmp_path / "logs" / "scan.log"
        config = Settings(_env_file=None, LOG_FILE=str(log_file))

        setup_logging(config, level="warning")
        logger.debug("fetching binance")
        logger.error("kraken down")
        logger.remove()

        main_log = log_file.read_text()
        error_log = (tmp_path / "logs" / "scan.errors.log").read_text()
        assert "fetching binance" in main_log
        assert "kraken down" in main_log
        assert "kraken down" in error_log
        assert "fetching binance" not in error_log

    def test_console_level_override(self, tmp_path, capsys) -> None:
        """The level argument wins over LOG_LEVEL on the console."""
        config = Settings(_env_file=None, LOG_FILE="", LOG_LEVEL="DEBUG")

        setup_logging(config, level="WARNING")
        logger.info("scan finished")
        logger.warning("okx quotes stale")

        err = capsys.readouterr().err
        assert "okx quotes stale" in err
        assert "scan finished" not in err
        assert list(tmp_path.iterdir()) == []
