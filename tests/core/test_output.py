"""Tests for loguru setup."""

from loguru import logger

from cloud_minion.core.config import LoggingConfig
from cloud_minion.core.output import setup_logging, setup_loguru


class TestSetupLoguru:
    """Tests for setup_loguru() and setup_logging()."""

    def teardown_method(self) -> None:
        logger.remove()

    def test_writes_to_log_file(self, tmp_path) -> None:
        log_file = tmp_path / "logs" / "cloud-minion.log"
        setup_loguru(log_file, level="DEBUG")

        logger.debug("hello from the test")

        content = log_file.read_text()
        assert "Loguru initialized" in content
        assert "hello from the test" in content

    def test_level_filters(self, tmp_path) -> None:
        log_file = tmp_path / "cloud-minion.log"
        setup_logging(LoggingConfig(level="WARNING"), log_file)

        logger.info("quiet")
        logger.warning("loud")

        content = log_file.read_text()
        assert "quiet" not in content
        assert "loud" in content
