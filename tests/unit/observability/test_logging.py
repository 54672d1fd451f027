"""Tests for structured logging configuration."""

from __future__ import annotations

import io
import json
import logging
from types import SimpleNamespace

import pytest
import structlog

from cvmatch_agents.observability.logging import (
    _resolve_level,
    bind_run_context,
    clear_run_context,
    configure_logging,
)


def _settings(log_format: str = "console", log_level: str = "INFO") -> SimpleNamespace:
    return SimpleNamespace(log_format=log_format, log_level=log_level)


def _capture_root() -> io.StringIO:
    """Point the root handler at a string buffer."""
    stream = io.StringIO()
    handler = logging.getLogger().handlers[0]
    assert isinstance(handler, logging.StreamHandler)
    handler.setStream(stream)
    return stream


@pytest.mark.unit
class TestConfigureLogging:
    """Tests for configure_logging."""

    def test_single_root_handler(self) -> None:
        """Reconfiguring replaces the root handler instead of stacking."""
        configure_logging(_settings())  # type: ignore[arg-type]
        configure_logging(_settings())  # type: ignore[arg-type]
        assert len(logging.getLogger().handlers) == 1

    def test_json_output_includes_run_context(self) -> None:
        """JSON lines carry the event, level and bound run_id."""
        configure_logging(_settings(log_format="json"))  # type: ignore[arg-type]
        stream = _capture_root()

        bind_run_context("match_001", dossier="DOS-1")
        try:
            structlog.get_logger("cvmatch.test").info("score_computed", overall=0.72)
        finally:
            clear_run_context()

        line = stream.getvalue().strip().splitlines()[-1]
        entry = json.loads(line)
        assert entry["event"] == "score_computed"
        assert entry["level"] == "info"
        assert entry["run_id"] == "match_001"
        assert entry["dossier"] == "DOS-1"
        assert entry["overall"] == 0.72

    def test_stdlib_records_are_rendered(self) -> None:
        """Plain logging calls go through the same renderer."""
        configure_logging(_settings(log_format="json"))  # type: ignore[arg-type]
        stream = _capture_root()

        logging.getLogger("cvmatch.stdlib").warning("données reçues")

        entry = json.loads(stream.getvalue().strip().splitlines()[-1])
        assert entry["event"] == "données reçues"

    def test_sets_levels(self) -> None:
        """Root level follows settings; noisy libraries stay at WARNING or above."""
        configure_logging(_settings(log_level="DEBUG"))  # type: ignore[arg-type]
        assert logging.getLogger().level == logging.DEBUG
        assert logging.getLogger("httpx").level == logging.WARNING

        configure_logging(_settings(log_level="ERROR"))  # type: ignore[arg-type]
        assert logging.getLogger("sqlalchemy.engine").level == logging.ERROR


@pytest.mark.unit
class TestResolveLevel:
    """Tests for _resolve_level."""

    @pytest.mark.parametrize(
        ("name", "expected"),
        [
            ("DEBUG", logging.DEBUG),
            ("warning", logging.WARNING),
            ("ERROR", logging.ERROR),
            ("verbeux", logging.INFO),
        ],
    )
    def test_resolve_level(self, name: str, expected: int) -> None:
        """Level names resolve case-insensitively; unknown names give INFO."""
        assert _resolve_level(name) == expected
