"""Chain parsing, simulation and verification."""

from .evaluator import TableArena, evaluate_step, simulate_gate
from .model import (
    Chain,
    Step,
    SupportSet,
    parse_variable,
    step_name,
    variable_letter,
    variable_name,
)
from .ordering import OrderValidator, colex_compare
from .parser import ParseFailure, parse_chain, tokenize_step
from .symmetry import SymmetryViolation, check_symmetry, symmetric_pairs
from .verifier import (
    ChainVerifier,
    Verdict,
    VerificationState,
    check_equivalence,
    verify,
)

__all__ = [
    "TableArena",
    "evaluate_step",
    "simulate_gate",
    "Chain",
    "Step",
    "SupportSet",
    "parse_variable",
    "step_name",
    "variable_letter",
    "variable_name",
    "OrderValidator",
    "colex_compare",
    "ParseFailure",
    "parse_chain",
    "tokenize_step",
    "SymmetryViolation",
    "check_symmetry",
    "symmetric_pairs",
    "ChainVerifier",
    "Verdict",
    "VerificationState",
    "check_equivalence",
    "verify",
]
