"""Chain verification.

:func:`verify` runs the stages of one verification in a fixed order::

    Parsing -> Evaluating/OrderChecking -> EquivalenceChecking
            -> SymmetryChecking -> Accepted

Each stage raises a :class:`~blnverify.errors.ChainError` subclass on the
first problem it finds; :func:`verify` catches it and returns a
``Rejected`` :class:`Verdict` that carries the error. Bad chains therefore
never raise, which lets a batch driver continue with the next block.
"""

from __future__ import annotations

import dataclasses
import enum
import typing

from blnverify.chain.evaluator import TableArena, evaluate_step
from blnverify.chain.model import Chain
from blnverify.chain.ordering import OrderValidator
from blnverify.chain.parser import ParseFailure, parse_chain
from blnverify.chain.symmetry import SymmetryViolation, check_symmetry
from blnverify.core.config import SymmetryPolicy
from blnverify.core.logging import getLogger
from blnverify.errors import (
    ChainError,
    FailureKind,
    FunctionalError,
    SymmetryError,
)
from blnverify.truth_table import TruthTable

logger = getLogger("BLN.chain")


class VerificationState(enum.Enum):
    PARSING = "Parsing"
    EVALUATING = "Evaluating"
    ORDER_CHECKING = "OrderChecking"
    EQUIVALENCE_CHECKING = "EquivalenceChecking"
    SYMMETRY_CHECKING = "SymmetryChecking"
    ACCEPTED = "Accepted"
    REJECTED = "Rejected"


@dataclasses.dataclass(frozen=True)
class Verdict:
    """Outcome of one :func:`verify` call.

    Attributes:
        accepted: True when the chain passed every check.
        state: ``ACCEPTED`` or ``REJECTED``.
        error: The failure that rejected the chain, ``None`` when accepted.
        failed_in: The state the failure was detected in.
        symmetry_violations: Symmetric input pairs introduced out of order.
        chain: The parsed chain, ``None`` if parsing failed.
        tables: Output tables of the steps that were evaluated.
    """

    accepted: bool
    state: VerificationState
    error: ChainError | None = None
    failed_in: VerificationState | None = None
    symmetry_violations: typing.Tuple[SymmetryViolation, ...] = ()
    chain: Chain | None = dataclasses.field(default=None, compare=False, repr=False)
    tables: typing.Tuple[TruthTable, ...] = dataclasses.field(
        default=(), compare=False, repr=False
    )

    @property
    def kind(self) -> FailureKind | None:
        return self.error.kind if self.error is not None else None

    def __bool__(self) -> bool:
        return self.accepted


def check_equivalence(output: TruthTable, spec: TruthTable) -> None:
    """Raise :class:`FunctionalError` unless *output* equals *spec* bit for bit."""
    if output != spec:
        differing = (output ^ spec).count_ones()
        raise FunctionalError(
            FailureKind.FUNCTION_MISMATCH,
            f"chain does not compute the target function "
            f"({differing} of {spec.num_bits} bits differ)",
        )


def _check_arguments(spec: TruthTable, fanin: int, steps: int) -> None:
    if fanin <= 0:
        raise ValueError(f"fanin must be positive, got {fanin}")
    if steps <= 0:
        raise ValueError(f"steps must be positive, got {steps}")
    if spec.num_vars <= 0:
        raise ValueError("spec must have at least one variable")


def verify(
    lines: typing.Sequence[str],
    spec: TruthTable,
    fanin: int,
    steps: int,
    *,
    symmetry_policy: SymmetryPolicy | str = SymmetryPolicy.INFORMATIONAL,
) -> Verdict:
    """Verify one chain block against *spec*.

    Args:
        lines: Trimmed, non-blank lines of the block.
        spec: Target function over ``spec.num_vars`` inputs.
        fanin: Number of inputs of every gate.
        steps: Expected number of steps.
        symmetry_policy: ``informational`` reports symmetry violations
            without rejecting; ``reject`` turns them into a ``SymmetryError``.

    Returns:
        The :class:`Verdict`. Invalid chains never raise.

    Raises:
        ValueError: If ``fanin``, ``steps`` or the spec size is not positive.
    """
    _check_arguments(spec, fanin, steps)
    policy = SymmetryPolicy.parse(symmetry_policy)
    num_vars = spec.num_vars

    state = VerificationState.PARSING
    chain: Chain | None = None
    arena = TableArena(num_vars)
    violations: typing.Tuple[SymmetryViolation, ...] = ()
    try:
        parsed = parse_chain(lines, num_vars, fanin, steps)
        if isinstance(parsed, ParseFailure):
            raise parsed.to_error()
        chain = parsed

        validator = OrderValidator(num_vars)
        for step in chain:
            state = VerificationState.ORDER_CHECKING
            validator.accept(step)
            state = VerificationState.EVALUATING
            evaluate_step(step, arena)

        state = VerificationState.EQUIVALENCE_CHECKING
        check_equivalence(arena[chain.output], spec)

        state = VerificationState.SYMMETRY_CHECKING
        violations = check_symmetry(chain, spec)
        if violations and policy is SymmetryPolicy.REJECT:
            raise SymmetryError(
                FailureKind.SYMMETRY_VIOLATION,
                "; ".join(str(v) for v in violations),
            )
    except ChainError as e:
        if logger.debug_on:
            logger.debug("[e] %s in %s: %s", e.category, state.value, e.message)
        return Verdict(
            accepted=False,
            state=VerificationState.REJECTED,
            error=e,
            failed_in=state,
            symmetry_violations=violations,
            chain=chain,
            tables=arena.step_tables(),
        )

    return Verdict(
        accepted=True,
        state=VerificationState.ACCEPTED,
        symmetry_violations=violations,
        chain=chain,
        tables=arena.step_tables(),
    )


class ChainVerifier:
    """Verifies many blocks against the same spec and chain shape.

    >>> verifier = ChainVerifier.from_hex(2, "6", fanin=2, steps=1)
    >>> verifier.verify(["C = 0110 a b"]).accepted
    True
    """

    def __init__(
        self,
        spec: TruthTable,
        fanin: int,
        steps: int,
        symmetry_policy: SymmetryPolicy | str = SymmetryPolicy.INFORMATIONAL,
    ):
        _check_arguments(spec, fanin, steps)
        self.spec = spec
        self.fanin = fanin
        self.steps = steps
        self.symmetry_policy = SymmetryPolicy.parse(symmetry_policy)

    @classmethod
    def from_hex(
        cls,
        num_vars: int,
        hex_spec: str,
        fanin: int,
        steps: int,
        symmetry_policy: SymmetryPolicy | str = SymmetryPolicy.INFORMATIONAL,
    ) -> "ChainVerifier":
        return cls(TruthTable.from_hex(num_vars, hex_spec), fanin, steps, symmetry_policy)

    @property
    def num_vars(self) -> int:
        return self.spec.num_vars

    def verify(self, lines: typing.Sequence[str]) -> Verdict:
        return verify(
            lines,
            self.spec,
            self.fanin,
            self.steps,
            symmetry_policy=self.symmetry_policy,
        )
