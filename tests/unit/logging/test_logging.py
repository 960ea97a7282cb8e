"""Unit tests for logging configuration."""

import pytest
import structlog

from grokloc.config import Settings
from grokloc.core.logging import configure_logging


pytestmark = pytest.mark.unit


class TestConfigureLogging:
    """Tests for configure_logging."""

    @pytest.fixture(autouse=True)
    def reset_structlog(self):
        yield
        structlog.reset_defaults()

    def test_json_output(self, capsys: pytest.CaptureFixture[str]):
        configure_logging(Settings(_env_file=None, log_json=True, log_level="DEBUG"))

        structlog.get_logger().info("org_created", org_id="abc")

        out = capsys.readouterr().out
        assert '"event": "org_created"' in out
        assert '"org_id": "abc"' in out

    def test_level_filters(self, capsys: pytest.CaptureFixture[str]):
        configure_logging(Settings(_env_file=None, log_json=True, log_level="WARNING"))

        structlog.get_logger().info("org_created")

        assert capsys.readouterr().out == ""
