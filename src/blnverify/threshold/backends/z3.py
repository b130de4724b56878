"""Z3 backend for threshold identification.

Solves :class:`~blnverify.threshold.solver.IntegerProgram` instances with
``z3.Optimize``: every column becomes a ``z3.Int``, rows become linear
constraints and the objective is minimized.

Example:
    from blnverify.threshold.backends.z3 import Z3ThresholdSolver
    from blnverify.threshold.identification import is_threshold
    from blnverify.truth_table import TruthTable

    majority = TruthTable.from_hex(3, "e8")
    assert is_threshold(majority, solver=Z3ThresholdSolver()).as_list() == [1, 1, 1, 2]
"""

from __future__ import annotations

import functools
import typing

from blnverify.core.logging import getLogger
from blnverify.errors import ThresholdSolverError
from blnverify.threshold.solver import (
    DEFAULT_OPTIONS,
    IntegerProgram,
    Sense,
    SolverOptions,
    SolverResult,
)

logger = getLogger("BLN.threshold")

try:
    import z3

    Z3_INSTALLED = True
except ImportError:
    logger.info("Z3 features disabled. Install z3-solver to enable them")
    Z3_INSTALLED = False


def requires_z3_installed(func: typing.Callable[..., typing.Any]):
    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        if not Z3_INSTALLED:
            raise ThresholdSolverError("Z3 is not installed")
        return func(*args, **kwargs)

    return wrapper


@requires_z3_installed
def _linear(terms: typing.Iterable[tuple[int, int]], columns: list["z3.ArithRef"]):
    products = [coef * columns[col] for col, coef in terms if coef]
    if not products:
        return z3.IntVal(0)
    return z3.Sum(products)


@requires_z3_installed
def build_optimizer(
    program: IntegerProgram, options: SolverOptions = DEFAULT_OPTIONS
) -> tuple["z3.Optimize", list["z3.ArithRef"]]:
    """Translate *program* to a ``z3.Optimize`` instance and its column variables."""
    columns = [z3.Int(name) for name in program.columns]
    optimizer = z3.Optimize()
    if options.timeout_ms > 0:
        optimizer.set("timeout", options.timeout_ms)

    for column, bound in zip(columns, program.lower_bounds):
        if bound is not None:
            optimizer.add(column >= bound)

    for constraint in program.constraints:
        lhs = _linear(constraint.coefficients, columns)
        if constraint.sense is Sense.GE:
            optimizer.add(lhs >= constraint.rhs)
        elif constraint.sense is Sense.LE:
            optimizer.add(lhs <= constraint.rhs)
        else:
            optimizer.add(lhs == constraint.rhs)

    optimizer.minimize(_linear(enumerate(program.objective), columns))
    return optimizer, columns


class Z3ThresholdSolver:
    """Z3 implementation of the ThresholdSolver protocol.

    Usage:
        >>> from blnverify.threshold.solver import IntegerProgram, Sense
        >>> program = IntegerProgram(columns=["x"], objective=[1], lower_bounds=[0])
        >>> program.add_constraint({0: 1}, Sense.GE, 3)
        >>> Z3ThresholdSolver().solve(program).values
        (3,)
    """

    def __init__(self):
        """Initialize the Z3 solving backend.

        Raises:
            ThresholdSolverError: If Z3 is not installed.
        """
        if not Z3_INSTALLED:
            raise ThresholdSolverError(
                "Z3 is not installed. Install z3-solver to use Z3ThresholdSolver."
            )

    def solve(
        self, program: IntegerProgram, options: SolverOptions | None = None
    ) -> SolverResult:
        options = options if options is not None else DEFAULT_OPTIONS
        if options.verbose:
            logger.info("Solving integer program:\n%s", program.to_lp())

        try:
            optimizer, columns = build_optimizer(program, options)
            result = optimizer.check()
        except z3.Z3Exception as e:
            logger.warning("Z3 failed on integer program: %s", e)
            return SolverResult.error(str(e))

        if result == z3.unsat:
            return SolverResult.infeasible("constraints are unsatisfiable")

        if result == z3.sat:
            model = optimizer.model()
            values = [
                model.eval(column, model_completion=True).as_long()
                for column in columns
            ]
            objective = program.objective_value(values)
            if options.verbose:
                logger.info("Objective value: %d", objective)
                for name, value in zip(program.columns, values):
                    logger.info("%s: %d", name, value)
            return SolverResult.optimal(values, objective)

        # Z3 returned unknown (timeout, resource limit)
        return SolverResult.error(optimizer.reason_unknown())
