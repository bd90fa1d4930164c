"""Tests for vu.output.summary module."""

from __future__ import annotations

from vu.output.console import MockConsole, Style
from vu.output.summary import RunSummary, print_summary
from vu.services.processor import ServiceResult


def _results() -> dict[str, ServiceResult]:
    return {
        "web": ServiceResult.updated("ghcr.io/acme/web", "3.4.0"),
        "db": ServiceResult.updated("postgres", "16"),
        "api": ServiceResult.not_found("registry.gitlab.com/acme/api"),
        "cache": ServiceResult.rate_limited("redis"),
        "broken": ServiceResult.failed("nginx", "Failed to validate image tag: boom"),
    }


class TestRunSummary:
    def test_buckets(self) -> None:
        summary = RunSummary.from_results(_results())

        assert summary.updated == ("db", "web")
        assert summary.not_found == ("api",)
        assert summary.rate_limited == ("cache",)
        assert summary.failed == (("broken", "Failed to validate image tag: boom"),)
        assert summary.total == 5
        assert summary.has_failures

    def test_expected_states_are_not_failures(self) -> None:
        summary = RunSummary.from_results(
            {"a": ServiceResult.not_found("x"), "b": ServiceResult.rate_limited("y")}
        )
        assert not summary.has_failures


class TestPrintSummary:
    def test_full_summary(self) -> None:
        console = MockConsole()

        print_summary(RunSummary.from_results(_results()), console)

        assert console.messages[0] == "Processed 5 services"
        assert console.find("2 updated")
        assert console.find("1 not found: api")
        assert console.find("1 rate limited: cache")
        assert console.find("1 services failed to process:")
        assert console.find("  broken: Failed to validate image tag: boom")[0].style == Style.DIM

    def test_all_updated(self) -> None:
        console = MockConsole()

        print_summary(
            RunSummary.from_results({"web": ServiceResult.updated("a", "1")}), console
        )

        assert not console.has_error()
        assert console.count(Style.WARNING) == 0
        assert console.messages == ["Processed 1 services", "OK 1 updated"]
