"""Truth tables over a fixed number of Boolean variables.

A :class:`TruthTable` stores the ``2**num_vars`` output bits of a Boolean
function in a single Python integer: bit ``p`` is the function value for the
assignment whose binary encoding is ``p`` (variable ``i`` is bit ``i`` of
``p``). Binary and hexadecimal literals are written most-significant bit
first, so the rightmost digit of a literal is bit 0.

Tables are immutable; every operation returns a new table.
"""

from __future__ import annotations

import dataclasses
import functools
import string

from blnverify.errors import TruthTableError

_HEX_DIGITS = frozenset(string.hexdigits)


# =============================================================================
# Bit masks
# =============================================================================


def full_mask(num_vars: int) -> int:
    """All-ones mask for a table over *num_vars* variables."""
    return (1 << (1 << num_vars)) - 1


@functools.lru_cache(maxsize=None)
def projection_mask(num_vars: int, var: int) -> int:
    """Bits set exactly at the assignments where variable *var* is 1.

    For ``num_vars=3``: var 0 -> ``0b10101010``, var 1 -> ``0b11001100``,
    var 2 -> ``0b11110000``.
    """
    mask = 0
    for p in range(1 << num_vars):
        if (p >> var) & 1:
            mask |= 1 << p
    return mask


# =============================================================================
# TruthTable
# =============================================================================


@dataclasses.dataclass(frozen=True, slots=True)
class TruthTable:
    """Immutable truth table of a Boolean function of ``num_vars`` inputs."""

    num_vars: int
    bits: int = 0

    def __post_init__(self):
        if self.num_vars < 0:
            raise TruthTableError(f"num_vars must be non-negative, got {self.num_vars}")
        if self.bits < 0 or self.bits > full_mask(self.num_vars):
            raise TruthTableError(
                f"bits 0x{self.bits:x} do not fit a table over {self.num_vars} variables"
            )

    # -------------------------------------------------------------------------
    # Construction
    # -------------------------------------------------------------------------

    @classmethod
    def from_hex(cls, num_vars: int, literal: str) -> "TruthTable":
        """Build a table from a hexadecimal literal such as ``"e8"``."""
        text = literal.strip()
        if not text or not all(c in _HEX_DIGITS for c in text):
            raise TruthTableError(f"invalid hexadecimal truth table {literal!r}")
        value = int(text, 16)
        if value > full_mask(num_vars):
            raise TruthTableError(
                f"hexadecimal truth table {literal!r} does not fit {num_vars} variables"
            )
        return cls(num_vars, value)

    @classmethod
    def from_binary(cls, num_vars: int, literal: str) -> "TruthTable":
        """Build a table from a binary literal of exactly ``2**num_vars`` digits."""
        text = literal.strip()
        if len(text) != 1 << num_vars or any(c not in "01" for c in text):
            raise TruthTableError(
                f"binary truth table {literal!r} must have {1 << num_vars} binary digits"
            )
        return cls(num_vars, int(text, 2))

    @classmethod
    def nth_var(cls, num_vars: int, index: int) -> "TruthTable":
        """Projection table of input *index*."""
        if not 0 <= index < num_vars:
            raise TruthTableError(f"variable {index} out of range for {num_vars} variables")
        return cls(num_vars, projection_mask(num_vars, index))

    # -------------------------------------------------------------------------
    # Inspection
    # -------------------------------------------------------------------------

    @property
    def num_bits(self) -> int:
        return 1 << self.num_vars

    def _check_var(self, var: int) -> None:
        if not 0 <= var < self.num_vars:
            raise TruthTableError(
                f"variable {var} out of range for {self.num_vars} variables"
            )

    def _check_bit(self, position: int) -> None:
        if not 0 <= position < self.num_bits:
            raise TruthTableError(
                f"bit {position} out of range for a table of {self.num_bits} bits"
            )

    def get_bit(self, position: int) -> int:
        self._check_bit(position)
        return (self.bits >> position) & 1

    def set_bit(self, position: int) -> "TruthTable":
        self._check_bit(position)
        return TruthTable(self.num_vars, self.bits | (1 << position))

    def clear_bit(self, position: int) -> "TruthTable":
        self._check_bit(position)
        return TruthTable(self.num_vars, self.bits & ~(1 << position))

    def count_ones(self) -> int:
        return bin(self.bits).count("1")

    def to_binary(self) -> str:
        return format(self.bits, f"0{self.num_bits}b")

    def to_hex(self) -> str:
        width = max(1, self.num_bits // 4)
        return format(self.bits, f"0{width}x")

    def __str__(self) -> str:
        return self.to_binary()

    # -------------------------------------------------------------------------
    # Bitwise operators
    # -------------------------------------------------------------------------

    def _check_compatible(self, other: "TruthTable") -> None:
        if self.num_vars != other.num_vars:
            raise TruthTableError(
                f"tables over {self.num_vars} and {other.num_vars} variables are incompatible"
            )

    def __invert__(self) -> "TruthTable":
        return TruthTable(self.num_vars, ~self.bits & full_mask(self.num_vars))

    def __and__(self, other: "TruthTable") -> "TruthTable":
        self._check_compatible(other)
        return TruthTable(self.num_vars, self.bits & other.bits)

    def __or__(self, other: "TruthTable") -> "TruthTable":
        self._check_compatible(other)
        return TruthTable(self.num_vars, self.bits | other.bits)

    def __xor__(self, other: "TruthTable") -> "TruthTable":
        self._check_compatible(other)
        return TruthTable(self.num_vars, self.bits ^ other.bits)

    # -------------------------------------------------------------------------
    # Variable operations
    # -------------------------------------------------------------------------

    def cofactor0(self, var: int) -> "TruthTable":
        """Table of f with *var* fixed to 0 (still over all variables)."""
        self._check_var(var)
        shift = 1 << var
        low = self.bits & ~projection_mask(self.num_vars, var) & full_mask(self.num_vars)
        return TruthTable(self.num_vars, low | (low << shift))

    def cofactor1(self, var: int) -> "TruthTable":
        """Table of f with *var* fixed to 1 (still over all variables)."""
        self._check_var(var)
        shift = 1 << var
        high = self.bits & projection_mask(self.num_vars, var)
        return TruthTable(self.num_vars, high | (high >> shift))

    def flip(self, var: int) -> "TruthTable":
        """Complement input *var*: the result is f with x_var replaced by its negation."""
        self._check_var(var)
        shift = 1 << var
        proj = projection_mask(self.num_vars, var)
        high = self.bits & proj
        low = self.bits & ~proj & full_mask(self.num_vars)
        return TruthTable(self.num_vars, (high >> shift) | (low << shift))

    def swap(self, i: int, j: int) -> "TruthTable":
        """Exchange inputs *i* and *j*."""
        self._check_var(i)
        self._check_var(j)
        if i == j:
            return self
        if i > j:
            i, j = j, i
        shift = (1 << j) - (1 << i)
        # assignments with x_i = 1 and x_j = 0 trade places with x_i = 0, x_j = 1
        move = projection_mask(self.num_vars, i) & ~projection_mask(self.num_vars, j)
        move &= full_mask(self.num_vars)
        keep = self.bits & ~(move | (move << shift))
        swapped = ((self.bits & move) << shift) | ((self.bits >> shift) & move)
        return TruthTable(self.num_vars, keep | swapped)

    def is_symmetric_in(self, i: int, j: int) -> bool:
        return self.swap(i, j) == self

    def implies(self, other: "TruthTable") -> bool:
        """True when every assignment in the onset of self is in the onset of other."""
        self._check_compatible(other)
        return self.bits & ~other.bits == 0

    def is_positive_unate(self, var: int) -> bool:
        return self.cofactor0(var).implies(self.cofactor1(var))

    def is_negative_unate(self, var: int) -> bool:
        return self.cofactor1(var).implies(self.cofactor0(var))

    def has_var(self, var: int) -> bool:
        """True when the function depends on *var*."""
        return self.cofactor0(var) != self.cofactor1(var)
