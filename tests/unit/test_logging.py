"""Unit tests for logging setup."""

from loguru import logger

from gdp_rewards.config.settings import settings
from gdp_rewards.utils.logging import setup_logging


class TestSetupLogging:
    """Test loguru sink configuration."""

    def test_writes_to_log_file(self, tmp_path, monkeypatch):
        """A configured log file receives records."""
        log_file = tmp_path / "rewards.log"
        monkeypatch.setattr(settings, "log_file", str(log_file))

        setup_logging()
        logger.info("reward engine test record")
        # Removing the sinks closes the file
        logger.remove()

        assert "reward engine test record" in log_file.read_text(encoding="utf-8")

        monkeypatch.setattr(settings, "log_file", None)
        setup_logging()
