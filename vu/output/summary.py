"""End-of-run summary.

Not-found and rate-limited services are expected, transient states and are
reported apart from services that actually failed.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import TYPE_CHECKING

from vu.output.console import Style
from vu.services.processor import ResultStatus, ServiceResult

if TYPE_CHECKING:
    from vu.output.console import ConsoleProtocol

__all__ = ["RunSummary", "print_summary"]


@dataclass(frozen=True, slots=True)
class RunSummary:
    updated: tuple[str, ...]
    not_found: tuple[str, ...]
    rate_limited: tuple[str, ...]
    failed: tuple[tuple[str, str], ...]

    @classmethod
    def from_results(cls, results: Mapping[str, ServiceResult]) -> RunSummary:
        buckets: dict[ResultStatus, list[str]] = {status: [] for status in ResultStatus}
        failed: list[tuple[str, str]] = []
        for name in sorted(results):
            result = results[name]
            buckets[result.status].append(name)
            if result.status is ResultStatus.FAILED:
                failed.append((name, result.error or ""))
        return cls(
            updated=tuple(buckets[ResultStatus.UPDATED]),
            not_found=tuple(buckets[ResultStatus.NOT_FOUND]),
            rate_limited=tuple(buckets[ResultStatus.RATE_LIMITED]),
            failed=tuple(failed),
        )

    @property
    def total(self) -> int:
        return len(self.updated) + len(self.not_found) + len(self.rate_limited) + len(self.failed)

    @property
    def has_failures(self) -> bool:
        return bool(self.failed)


def print_summary(summary: RunSummary, console: ConsoleProtocol) -> None:
    console.header(f"Processed {summary.total} services")
    console.success(f"{len(summary.updated)} updated")
    if summary.not_found:
        console.warning(f"{len(summary.not_found)} not found: {', '.join(summary.not_found)}")
    if summary.rate_limited:
        console.warning(
            f"{len(summary.rate_limited)} rate limited: {', '.join(summary.rate_limited)}"
        )
    if summary.failed:
        console.error(f"{len(summary.failed)} services failed to process:")
        for name, error in summary.failed:
            console.print(f"  {name}: {error}", Style.DIM)
