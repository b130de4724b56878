"""blnverify.threshold - threshold logic function identification.

The unate decomposition and the integer program are built here; solving is
delegated to a pluggable backend (see ``ThresholdSolver``), Z3 by default.
"""

from .identification import (
    LinearForm,
    UnateDecomposition,
    build_threshold_program,
    is_threshold,
    unate_decomposition,
)
from .solver import (
    DEFAULT_OPTIONS,
    Constraint,
    IntegerProgram,
    Sense,
    SolverOptions,
    SolverResult,
    SolverStatus,
    ThresholdSolver,
    get_default_solver,
)

__all__ = [
    "LinearForm",
    "UnateDecomposition",
    "build_threshold_program",
    "is_threshold",
    "unate_decomposition",
    "DEFAULT_OPTIONS",
    "Constraint",
    "IntegerProgram",
    "Sense",
    "SolverOptions",
    "SolverResult",
    "SolverStatus",
    "ThresholdSolver",
    "get_default_solver",
]
