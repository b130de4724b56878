from __future__ import annotations

import dataclasses
from collections import defaultdict
from typing import TYPE_CHECKING, Dict, List

from .logging import getLogger

if TYPE_CHECKING:
    from blnverify.chain.verifier import Verdict

# summaries go to the log file only; the CLI prints them itself
logger = getLogger("BLN.report")


@dataclasses.dataclass
class BlockResult:
    """Record of a single verified block."""

    block: int  # 1-based position of the block in its file
    first_line: int  # 1-based line number where the block starts
    verdict: "Verdict"

    @property
    def accepted(self) -> bool:
        return self.verdict.accepted


@dataclasses.dataclass
class BatchStatistics:
    """Counters for one batch of chain blocks.

    ``solutions`` counts every block, ``violations`` the rejected ones; the
    score of a batch is ``points = solutions / 2 ** violations``.
    """

    solutions: int = 0
    violations: int = 0
    symmetry_violations: int = 0

    # rejections by failure kind name (e.g. "SupportNotCoLex")
    failures_by_kind: Dict[str, int] = dataclasses.field(
        default_factory=lambda: defaultdict(int)
    )

    results: List[BlockResult] = dataclasses.field(default_factory=list)

    def reset(self) -> None:
        self.solutions = 0
        self.violations = 0
        self.symmetry_violations = 0
        self.failures_by_kind.clear()
        self.results.clear()

    # -------------------------------------------------------------------------
    # Recording
    # -------------------------------------------------------------------------

    def record(self, result: BlockResult) -> None:
        self.solutions += 1
        verdict = result.verdict
        self.symmetry_violations += len(verdict.symmetry_violations)
        if not verdict.accepted:
            self.violations += 1
            self.failures_by_kind[str(verdict.kind)] += 1
        self.results.append(result)

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    @property
    def accepted(self) -> int:
        return self.solutions - self.violations

    @property
    def points(self) -> float:
        return self.solutions / (1 << self.violations)

    def rejected(self) -> List[BlockResult]:
        return [r for r in self.results if not r.accepted]

    def report(self) -> List[str]:
        """The summary lines printed at the end of a batch."""
        return [
            f"violations = {self.violations}",
            f"solutions = {self.solutions}",
            f"points = {self.points:g}",
        ]

    def log_report(self) -> None:
        for line in self.report():
            logger.info(line)
        for kind, count in sorted(self.failures_by_kind.items()):
            logger.info("  %s: %d", kind, count)
