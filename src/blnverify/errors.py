"""Exception hierarchy for blnverify.

Chain failures are raised by the individual verification stages and caught by
:func:`blnverify.chain.verifier.verify`, which turns them into a failed
verdict. The remaining exceptions signal misuse of the library (bad literals,
out-of-range indices, an unavailable solver) and propagate to the caller.
"""

from __future__ import annotations

import enum


class FailureKind(enum.Enum):
    """Specific reason a chain was rejected."""

    WRONG_STEP_COUNT = "WrongStepCount"
    WRONG_STEP_NAME = "WrongStepName"
    MALFORMED_STEP = "MalformedStep"
    UNNORMALIZED_GATE = "UnnormalizedGate"
    FANIN_OUT_OF_ORDER = "FaninOutOfOrder"
    FANIN_UNDEFINED = "FaninUndefined"
    SAME_SUPPORT_NOT_INCREASING = "SameSupportNotIncreasing"
    SUPPORT_NOT_COLEX = "SupportNotCoLex"
    FUNCTION_MISMATCH = "FunctionMismatch"
    SYMMETRY_VIOLATION = "SymmetryViolation"

    def __str__(self) -> str:
        return self.value


class BlnVerifyError(Exception):
    """Base class of every error raised by blnverify."""


class TruthTableError(BlnVerifyError, ValueError):
    """Invalid truth-table literal, variable index or bit position."""


class ArenaError(BlnVerifyError):
    """A table was bound out of order or an undefined variable was read."""


class ThresholdSolverError(BlnVerifyError):
    """The integer-programming backend is unavailable or failed."""


class ChainError(BlnVerifyError):
    """A chain failed verification.

    Attributes:
        kind: The specific failure.
        step_index: Zero-based index of the offending step, when known.
    """

    category = "ChainError"

    def __init__(self, kind: FailureKind, message: str, step_index: int | None = None):
        super().__init__(message)
        self.kind = kind
        self.message = message
        self.step_index = step_index

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}(kind={self.kind}, "
            f"step_index={self.step_index}, message={self.message!r})"
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ChainError):
            return NotImplemented
        return (
            type(self) is type(other)
            and self.kind is other.kind
            and self.step_index == other.step_index
            and self.message == other.message
        )

    def __hash__(self) -> int:
        return hash((type(self), self.kind, self.step_index, self.message))


class LexicalError(ChainError):
    """Malformed line shape."""

    category = "LexicalError"


class StructuralError(ChainError):
    """Wrong step count, step naming mismatch, unordered or undefined fan-in."""

    category = "StructuralError"


class NormalizationError(ChainError):
    """A gate outputs 1 for the all-zero input pattern."""

    category = "NormalizationError"


class OrderingError(ChainError):
    """Two consecutive steps violate the canonical step order."""

    category = "OrderingError"


class FunctionalError(ChainError):
    """The chain does not compute the target function."""

    category = "FunctionalError"


class SymmetryError(ChainError):
    """The chain introduces symmetric inputs out of order (``reject`` policy only)."""

    category = "SymmetryError"


_ERROR_CLASSES: dict[FailureKind, type[ChainError]] = {
    FailureKind.WRONG_STEP_COUNT: StructuralError,
    FailureKind.WRONG_STEP_NAME: StructuralError,
    FailureKind.MALFORMED_STEP: LexicalError,
    FailureKind.UNNORMALIZED_GATE: NormalizationError,
    FailureKind.FANIN_OUT_OF_ORDER: StructuralError,
    FailureKind.FANIN_UNDEFINED: StructuralError,
    FailureKind.SAME_SUPPORT_NOT_INCREASING: OrderingError,
    FailureKind.SUPPORT_NOT_COLEX: OrderingError,
    FailureKind.FUNCTION_MISMATCH: FunctionalError,
    FailureKind.SYMMETRY_VIOLATION: SymmetryError,
}


def error_class_for(kind: FailureKind) -> type[ChainError]:
    """Return the :class:`ChainError` subclass that reports *kind*."""
    return _ERROR_CLASSES[kind]


def make_error(kind: FailureKind, message: str, step_index: int | None = None) -> ChainError:
    return error_class_for(kind)(kind, message, step_index)
