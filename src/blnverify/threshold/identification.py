"""Threshold logic function identification.

A Boolean function is a threshold function (TF) if it can be written as

    f(x_1, ..., x_n) = [ sum_i w_i * x_i >= T ]

for integer weights ``w_i`` and threshold ``T``; ``[w_1, ..., w_n; T]`` is
its linear form. Every TF is unate in each variable, so identification first
substitutes each negative unate variable by its complement (rejecting
binate functions), then asks an integer-programming backend for non-negative
weights and threshold separating onset from offset with the smallest
``sum(w) + T``, and finally undoes the substitution.
"""

from __future__ import annotations

import dataclasses
import typing

from blnverify.core.logging import getLogger
from blnverify.threshold.solver import (
    IntegerProgram,
    Sense,
    SolverOptions,
    ThresholdSolver,
    get_default_solver,
)
from blnverify.truth_table import TruthTable

logger = getLogger("BLN.threshold")


@dataclasses.dataclass(frozen=True)
class LinearForm:
    weights: typing.Tuple[int, ...]
    threshold: int

    @property
    def num_vars(self) -> int:
        return len(self.weights)

    def evaluate(self, assignment: int) -> bool:
        """Value of the form for the assignment encoded by the bits of *assignment*."""
        total = sum(w for i, w in enumerate(self.weights) if (assignment >> i) & 1)
        return total >= self.threshold

    def realizes(self, tt: TruthTable) -> bool:
        if tt.num_vars != self.num_vars:
            return False
        return all(
            self.evaluate(p) == bool(tt.get_bit(p)) for p in range(tt.num_bits)
        )

    def as_list(self) -> list[int]:
        return [*self.weights, self.threshold]

    def __str__(self) -> str:
        weights = ", ".join(str(w) for w in self.weights)
        return f"[{weights}; {self.threshold}]"


@dataclasses.dataclass(frozen=True)
class UnateDecomposition:
    """Positive unate version of a function and the variables complemented to get it."""

    table: TruthTable
    flipped: typing.Tuple[bool, ...]


def unate_decomposition(tt: TruthTable) -> UnateDecomposition | None:
    """Complement every negative unate variable; ``None`` if *tt* is binate in any.

    A variable the function does not depend on is both positive and negative
    unate; it is complemented, which leaves the table unchanged.
    """
    table = tt
    flipped = []
    for var in range(tt.num_vars):
        if tt.is_negative_unate(var):
            table = table.flip(var)
            flipped.append(True)
        elif tt.is_positive_unate(var):
            flipped.append(False)
        else:
            logger.debug("function is binate in variable %d", var)
            return None
    return UnateDecomposition(table, tuple(flipped))


def build_threshold_program(tt: TruthTable) -> IntegerProgram:
    """Integer program whose solutions are linear forms of the positive unate *tt*.

    Columns ``w_0 ... w_{n-1}, T``, all non-negative; per truth-table row ``x``
    the row ``sum(w_i x_i) - T >= 0`` for onset rows and ``<= -1`` for offset
    rows; objective ``min sum(w) + T``.
    """
    n = tt.num_vars
    columns = [f"w_{i}" for i in range(n)] + ["T"]
    program = IntegerProgram(
        columns=columns,
        objective=[1] * (n + 1),
        lower_bounds=[0] * (n + 1),
    )
    for p in range(tt.num_bits):
        row = {i: 1 for i in range(n) if (p >> i) & 1}
        row[n] = -1
        if tt.get_bit(p):
            program.add_constraint(row, Sense.GE, 0)
        else:
            program.add_constraint(row, Sense.LE, -1)
    return program


def is_threshold(
    tt: TruthTable,
    solver: ThresholdSolver | None = None,
    options: SolverOptions | None = None,
) -> LinearForm | None:
    """Return a linear form of *tt*, or ``None`` if it is not a threshold function.

    Binate functions, infeasible programs and backend failures all yield
    ``None``.

    Raises:
        ThresholdSolverError: If no *solver* is given and the default backend
            is not available.
    """
    decomposition = unate_decomposition(tt)
    if decomposition is None:
        return None

    program = build_threshold_program(decomposition.table)
    solver = solver if solver is not None else get_default_solver()
    try:
        result = solver.solve(program, options if options is not None else SolverOptions())
    except Exception as e:
        logger.warning("threshold solver failed for %s: %r", tt.to_hex(), e)
        return None

    if not result.is_optimal:
        logger.debug(
            "no linear form for %s: %s %s", tt.to_hex(), result.status.value, result.reason
        )
        return None

    n = tt.num_vars
    threshold = result.values[n]
    weights = []
    for var, weight in enumerate(result.values[:n]):
        if decomposition.flipped[var]:
            weights.append(-weight)
            threshold -= weight
        else:
            weights.append(weight)
    return LinearForm(tuple(weights), threshold)
