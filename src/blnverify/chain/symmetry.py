"""Symmetry compatibility between a chain and its target function.

If the target is symmetric in inputs ``i < j``, swapping them maps every
chain for it onto another chain for it. Search keeps the variant in which
``i`` is used no later than ``j``; a chain that introduces ``j`` first is a
duplicate.
"""

from __future__ import annotations

import dataclasses
import typing

from blnverify.chain.model import Chain, variable_letter
from blnverify.core.logging import getLogger
from blnverify.truth_table import TruthTable

logger = getLogger("BLN.symmetry")


@dataclasses.dataclass(frozen=True, slots=True)
class SymmetryViolation:
    """The target is symmetric in inputs ``i < j`` but ``j`` is used first."""

    i: int
    j: int

    def __str__(self) -> str:
        return f"symmetry property violated in {self.i} and {self.j}"


def symmetric_pairs(spec: TruthTable) -> list[tuple[int, int]]:
    """All input pairs ``(i, j)``, ``i < j``, that *spec* is symmetric in."""
    return [
        (i, j)
        for j in range(1, spec.num_vars)
        for i in range(j)
        if spec.is_symmetric_in(i, j)
    ]


def first_occurrences(history: typing.Iterable[int]) -> dict[int, int]:
    positions: dict[int, int] = {}
    for pos, var in enumerate(history):
        positions.setdefault(var, pos)
    return positions


def check_symmetry(chain: Chain, spec: TruthTable) -> tuple[SymmetryViolation, ...]:
    """Return every symmetric input pair the chain introduces out of order.

    An input that never appears counts as appearing after all others.
    """
    history = chain.support_history()
    first = first_occurrences(history)
    never = len(history)
    violations = []
    for i, j in symmetric_pairs(spec):
        if first.get(j, never) < first.get(i, never):
            violation = SymmetryViolation(i, j)
            logger.info(
                "%s (%s before %s)", violation, variable_letter(j), variable_letter(i)
            )
            violations.append(violation)
    return tuple(violations)
