"""Integer-programming boundary for threshold identification.

This module defines:
1. IntegerProgram - a small, solver-independent model of an integer linear program
2. ThresholdSolver protocol - interface for solving backends
3. SolverResult - the outcome reported by a backend

The module is BACKEND-AGNOSTIC. Backend implementations (Z3, etc.) are in
blnverify.threshold.backends.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Any, Dict, List, Protocol, Tuple, runtime_checkable

# =============================================================================
# Model
# =============================================================================


class Sense(enum.Enum):
    GE = ">="
    LE = "<="
    EQ = "=="


@dataclass(frozen=True)
class Constraint:
    """``sum(coefficients[k] * column_k) <sense> rhs``.

    Columns missing from ``coefficients`` have coefficient 0.
    """

    coefficients: Tuple[Tuple[int, int], ...]  # (column index, coefficient)
    sense: Sense
    rhs: int

    def holds(self, values: List[int]) -> bool:
        lhs = sum(coef * values[col] for col, coef in self.coefficients)
        if self.sense is Sense.GE:
            return lhs >= self.rhs
        if self.sense is Sense.LE:
            return lhs <= self.rhs
        return lhs == self.rhs


@dataclass
class IntegerProgram:
    """Minimize ``sum(objective[k] * column_k)`` over integer columns.

    Attributes:
        columns: Column names, in column order.
        constraints: Rows of the program.
        objective: One coefficient per column.
        lower_bounds: Per-column lower bound, ``None`` for unbounded.
    """

    columns: List[str]
    constraints: List[Constraint] = field(default_factory=list)
    objective: List[int] = field(default_factory=list)
    lower_bounds: List[int | None] = field(default_factory=list)

    def __post_init__(self):
        if not self.objective:
            self.objective = [0] * len(self.columns)
        if not self.lower_bounds:
            self.lower_bounds = [None] * len(self.columns)

    @property
    def num_columns(self) -> int:
        return len(self.columns)

    def add_constraint(self, row: Dict[int, int], sense: Sense, rhs: int) -> None:
        self.constraints.append(
            Constraint(tuple(sorted(row.items())), sense, rhs)
        )

    def is_feasible(self, values: List[int]) -> bool:
        """True if *values* satisfies every bound and constraint."""
        for value, bound in zip(values, self.lower_bounds):
            if bound is not None and value < bound:
                return False
        return all(c.holds(values) for c in self.constraints)

    def objective_value(self, values: List[int]) -> int:
        return sum(coef * value for coef, value in zip(self.objective, values))

    def _format_terms(self, terms: List[Tuple[int, int]]) -> str:
        parts = []
        for col, coef in terms:
            if coef == 0:
                continue
            sign = "-" if coef < 0 else "+"
            mag = "" if abs(coef) == 1 else f"{abs(coef)} "
            parts.append(f"{sign}{mag}{self.columns[col]}")
        if not parts:
            return "0"
        text = " ".join(parts)
        return text[1:] if text.startswith("+") else text

    def to_lp(self) -> str:
        """Render the program in lp_solve's LP text format."""
        lines = [f"min: {self._format_terms(list(enumerate(self.objective)))};", ""]
        for k, c in enumerate(self.constraints, start=1):
            lines.append(
                f"R{k}: {self._format_terms(list(c.coefficients))} {c.sense.value.replace('==', '=')} {c.rhs};"
            )
        lines.append("")
        for name, bound in zip(self.columns, self.lower_bounds):
            if bound is not None:
                lines.append(f"{name} >= {bound};")
        lines.append("")
        lines.append(f"int {','.join(self.columns)};")
        return "\n".join(lines)


# =============================================================================
# Solver options and result
# =============================================================================


@dataclass
class SolverOptions:
    """Configuration options for solving backends.

    Attributes:
        timeout_ms: Solver timeout in milliseconds (0 = no timeout).
        verbose: Log the model and the solution.
        extra: Additional backend-specific options.
    """

    timeout_ms: int = 0
    verbose: bool = False
    extra: Dict[str, Any] = field(default_factory=dict)


DEFAULT_OPTIONS = SolverOptions()


class SolverStatus(enum.Enum):
    OPTIMAL = "optimal"
    INFEASIBLE = "infeasible"
    ERROR = "error"


@dataclass(frozen=True)
class SolverResult:
    status: SolverStatus
    values: Tuple[int, ...] = ()
    objective: int | None = None
    reason: str = ""

    @property
    def is_optimal(self) -> bool:
        return self.status is SolverStatus.OPTIMAL

    @classmethod
    def optimal(cls, values: List[int], objective: int) -> "SolverResult":
        return cls(SolverStatus.OPTIMAL, tuple(values), objective)

    @classmethod
    def infeasible(cls, reason: str = "") -> "SolverResult":
        return cls(SolverStatus.INFEASIBLE, reason=reason)

    @classmethod
    def error(cls, reason: str) -> "SolverResult":
        return cls(SolverStatus.ERROR, reason=reason)


# =============================================================================
# Solver protocol
# =============================================================================


@runtime_checkable
class ThresholdSolver(Protocol):
    """Protocol defining the interface for integer-programming backends.

    Any backend must implement this protocol to be usable with
    :func:`blnverify.threshold.identification.is_threshold`.

    Example implementation:
        class MyBackend:
            def solve(self, program, options=DEFAULT_OPTIONS):
                ...
                return SolverResult.optimal(values, objective)
    """

    def solve(
        self, program: IntegerProgram, options: SolverOptions = DEFAULT_OPTIONS
    ) -> SolverResult:
        """Find an optimal integral assignment of *program*.

        Returns:
            ``OPTIMAL`` with the column values, ``INFEASIBLE`` or ``ERROR``.
        """
        ...


def get_default_solver() -> ThresholdSolver:
    """Get the default solving backend (Z3).

    Raises:
        ThresholdSolverError: If Z3 is not installed.
    """
    from blnverify.threshold.backends.z3 import Z3ThresholdSolver

    return Z3ThresholdSolver()


__all__ = [
    "Constraint",
    "DEFAULT_OPTIONS",
    "IntegerProgram",
    "Sense",
    "SolverOptions",
    "SolverResult",
    "SolverStatus",
    "ThresholdSolver",
    "get_default_solver",
]
