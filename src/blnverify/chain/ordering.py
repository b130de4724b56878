"""Canonical step order.

Exact synthesis only enumerates one representative of each family of chains
that differ by reordering independent steps. Two consecutive steps ``i-1`` and
``i`` are in canonical order when

* they have the same support and the gate string of step ``i`` is
  lexicographically greater than the one of step ``i-1``, or
* their supports differ and either step ``i`` reads the output of step
  ``i-1`` or the support of step ``i-1`` is co-lexicographically not greater
  than the support of step ``i``.
"""

from __future__ import annotations

import typing

from blnverify.chain.model import Step, SupportSet, variable_name
from blnverify.errors import FailureKind, OrderingError


def colex_compare(a: typing.Sequence[int], b: typing.Sequence[int]) -> int:
    """Compare two sequences from their last element backward.

    Returns -1, 0 or 1. When one sequence is a proper suffix of the other the
    shorter one is smaller.

    >>> colex_compare((0, 2), (1, 2))
    -1
    >>> colex_compare((1, 2), (0, 3))
    -1
    >>> colex_compare((1, 3), (0, 2))
    1
    """
    for x, y in zip(reversed(a), reversed(b)):
        if x != y:
            return -1 if x < y else 1
    if len(a) == len(b):
        return 0
    return -1 if len(a) < len(b) else 1


class OrderValidator:
    """Checks each new step against its predecessor.

    Feed the steps of one chain in order with :meth:`accept`; an
    :class:`OrderingError` is raised at the first violation.
    """

    def __init__(self, num_vars: int):
        self.num_vars = num_vars
        self._prev_support: SupportSet | None = None
        self._prev_gate: str | None = None
        self._prev_output: int | None = None
        self._index = 0

    def accept(self, step: Step) -> None:
        support = step.support
        gate = step.gate_string

        if self._prev_support is not None:
            if support == self._prev_support:
                if not self._prev_gate < gate:
                    raise OrderingError(
                        FailureKind.SAME_SUPPORT_NOT_INCREASING,
                        f"gates with same support are not ordered in step "
                        f"{variable_name(self.num_vars, step.output)}",
                        self._index,
                    )
            elif self._prev_output not in support and (
                colex_compare(self._prev_support, support) > 0
            ):
                raise OrderingError(
                    FailureKind.SUPPORT_NOT_COLEX,
                    f"co-lexicographic order violated in step "
                    f"{variable_name(self.num_vars, step.output)}",
                    self._index,
                )

        self._prev_support = support
        self._prev_gate = gate
        self._prev_output = step.output
        self._index += 1
