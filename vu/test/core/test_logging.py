"""Tests for vu.core.logging."""

from __future__ import annotations

import io

import pytest
from loguru import logger

from vu.core.logging import init_logging, resolve_level


class TestResolveLevel:
    def test_explicit_level(self) -> None:
        assert resolve_level("debug") == "DEBUG"

    def test_env_fallback(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("VU_LOG", "trace")
        assert resolve_level(None) == "TRACE"

    def test_warn_alias(self) -> None:
        assert resolve_level("warn") == "WARNING"

    def test_unknown_level_defaults_to_info(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("VU_LOG", raising=False)
        assert resolve_level("verbose") == "INFO"


class TestInitLogging:
    def test_format_and_level(self) -> None:
        sink = io.StringIO()
        handler_id = init_logging("WARNING", sink=sink)
        try:
            logger.info("hidden")
            logger.warning("Rate limited: GitHub(acme/web) API")
        finally:
            logger.remove(handler_id)

        output = sink.getvalue()
        assert "hidden" not in output
        assert "][WARNING] Rate limited: GitHub(acme/web) API" in output
        assert output.startswith("[")
