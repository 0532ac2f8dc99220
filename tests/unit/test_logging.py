"""Tests for structlog configuration."""

from __future__ import annotations

import sys
from collections.abc import Iterator

import pytest
import structlog

from kubestalk.observability.logging import LOG_FORMATS, get_logger, setup_logging


@pytest.fixture(autouse=True)
def _reset_structlog() -> Iterator[None]:
    yield
    structlog.reset_defaults()


class TestSetupLogging:
    def test_console_renderer_by_default(self) -> None:
        setup_logging()
        assert isinstance(structlog.get_config()["processors"][-1], structlog.dev.ConsoleRenderer)

    def test_json_renderer(self) -> None:
        setup_logging("info", "json")
        assert isinstance(structlog.get_config()["processors"][-1], structlog.processors.JSONRenderer)

    def test_logs_go_to_stderr(self) -> None:
        setup_logging("debug", "json")
        factory = structlog.get_config()["logger_factory"]
        assert factory._file is sys.stderr

    def test_known_formats(self) -> None:
        assert LOG_FORMATS == ("console", "json")


class TestGetLogger:
    def test_binds_component(self) -> None:
        logger = get_logger("diff.differ")
        assert logger.bind()._context["component"] == "diff.differ"  # type: ignore[attr-defined]
