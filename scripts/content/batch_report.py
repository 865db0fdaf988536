#!/usr/bin/env python3
from __future__ import annotations

import sys
from dataclasses import dataclass, field

UPDATED = "updated"
SKIPPED = "skipped"
FAILED = "failed"
STATUSES = (UPDATED, SKIPPED, FAILED)

MISSING_TARGET = "missing target"
UNCHANGED = "unchanged"
QUIET_DETAILS = (MISSING_TARGET, UNCHANGED)


@dataclass(frozen=True)
class ItemResult:
    item: str
    status: str
    detail: str = ""


@dataclass
class BatchReport:
    title: str
    results: list[ItemResult] = field(default_factory=list)

    def add(self, result: ItemResult) -> ItemResult:
        self.results.append(result)
        return result

    def extend(self, other: BatchReport) -> None:
        self.results.extend(other.results)

    def counts(self) -> dict[str, int]:
        counts = {status: 0 for status in STATUSES}
        for result in self.results:
            counts[result.status] += 1
        return counts

    def by_status(self, status: str) -> list[ItemResult]:
        return [result for result in self.results if result.status == status]

    @property
    def failed(self) -> bool:
        return any(result.status == FAILED for result in self.results)

    def print_summary(self, verbose: bool = False) -> None:
        for result in self.results:
            if result.status == FAILED:
                print(f"ERROR: {result.item}: {result.detail}", file=sys.stderr)
            elif result.status == SKIPPED and (verbose or result.detail not in QUIET_DETAILS):
                print(f"SKIPPED {result.item}: {result.detail}")
            elif verbose:
                print(f"UPDATED {result.item}")

        counts = self.counts()
        print(
            f"{self.title}: {counts[UPDATED]} updated, "
            f"{counts[SKIPPED]} skipped, {counts[FAILED]} failed."
        )
