"""Data model shared by the chain parser, evaluator and validators.

Variables are dense integer ids: primary inputs occupy ``[0, num_vars)`` and
step outputs follow in chain order. In text every id has a letter name:
ids 0-25 are ``a``-``z`` and larger ids continue bijectively (``aa``, ``ab``,
...). Inputs are written in lower case and step outputs in upper case, so
with three inputs the first step is called ``D``.
"""

from __future__ import annotations

import dataclasses
import string
import typing

from blnverify.truth_table import TruthTable

# Ordered fan-in ids of one step; only used for ordering comparisons.
SupportSet = typing.Tuple[int, ...]

_LETTERS = string.ascii_lowercase


# =============================================================================
# Variable names
# =============================================================================


def variable_letter(var_id: int) -> str:
    """Lower-case letter name of *var_id* (``0 -> 'a'``, ``26 -> 'aa'``)."""
    if var_id < 0:
        raise ValueError(f"variable id must be non-negative, got {var_id}")
    name = ""
    n = var_id + 1
    while n:
        n, rem = divmod(n - 1, 26)
        name = _LETTERS[rem] + name
    return name


def parse_variable(token: str) -> int | None:
    """Inverse of :func:`variable_letter`; case-insensitive, ``None`` if not a name."""
    if not token or not token.isascii() or not token.isalpha():
        return None
    value = 0
    for c in token.lower():
        value = value * 26 + (ord(c) - ord("a") + 1)
    return value - 1


def step_name(num_vars: int, index: int) -> str:
    """Name of the output of step *index* (zero-based) as it heads a chain line."""
    return variable_letter(num_vars + index).upper()


def variable_name(num_vars: int, var_id: int) -> str:
    """Name of *var_id* as written in a chain: lower case for inputs, upper case for steps."""
    letter = variable_letter(var_id)
    return letter if var_id < num_vars else letter.upper()


# =============================================================================
# Step and Chain
# =============================================================================


@dataclasses.dataclass(frozen=True, slots=True)
class Step:
    """One gate of a chain.

    Attributes:
        output: Id of the variable the step defines.
        gate: Gate function over ``fanin`` variables, bit 0 always 0.
        fanins: Strictly ascending ids of the gate inputs; fan-in ``j`` drives
            gate variable ``j``.
    """

    output: int
    gate: TruthTable
    fanins: SupportSet

    @property
    def fanin(self) -> int:
        return len(self.fanins)

    @property
    def support(self) -> SupportSet:
        return self.fanins

    @property
    def gate_string(self) -> str:
        """Gate truth table as written in a chain file (bit 0 rightmost)."""
        return self.gate.to_binary()

    def format(self, num_vars: int) -> str:
        fanins = " ".join(variable_name(num_vars, v) for v in self.fanins)
        return f"{variable_name(num_vars, self.output)} = {self.gate_string} {fanins}"


@dataclasses.dataclass(frozen=True, slots=True)
class Chain:
    """Ordered gates over ``num_vars`` primary inputs; the last step is the result."""

    num_vars: int
    fanin: int
    steps: typing.Tuple[Step, ...]

    def __len__(self) -> int:
        return len(self.steps)

    def __iter__(self) -> typing.Iterator[Step]:
        return iter(self.steps)

    def __getitem__(self, index: int) -> Step:
        return self.steps[index]

    @property
    def output(self) -> int:
        return self.steps[-1].output

    def support_history(self) -> list[int]:
        """Concatenation of every step's support in chain order."""
        history: list[int] = []
        for step in self.steps:
            history.extend(step.support)
        return history

    def to_lines(self) -> list[str]:
        return [step.format(self.num_vars) for step in self.steps]
