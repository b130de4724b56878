"""Chain parser: text lines of one block to a :class:`Chain`.

Line grammar (``fanin`` trailing names)::

    <name> = <2**fanin binary digits>( <name>){fanin}

for example ``D = 0110 a b``. The gate literal is written with bit 0 as its
rightmost digit and must be normalized (bit 0 equal to ``0``). The gate
segment runs up to the next space; one of the wrong length, with a digit
other than 0 or 1, or ending in 1 is an unnormalized gate. Fan-in names
are case-insensitive, strictly ascending and refer to inputs or to earlier
steps.

Parsing never raises on bad text; the tokenizer and :func:`parse_chain`
return a :class:`ParseFailure` naming the first check that failed.
"""

from __future__ import annotations

import dataclasses
import typing

from blnverify.chain.model import Chain, Step, parse_variable, step_name, variable_name
from blnverify.core.logging import getLogger
from blnverify.errors import ChainError, FailureKind, make_error
from blnverify.truth_table import TruthTable

logger = getLogger("BLN.chain")

SEPARATOR = " = "


@dataclasses.dataclass(frozen=True, slots=True)
class ParseFailure:
    """Why a block (``line_index is None``) or one of its lines was rejected."""

    kind: FailureKind
    message: str
    line_index: int | None = None
    line: str | None = None

    def to_error(self) -> ChainError:
        return make_error(self.kind, self.message, self.line_index)


def _scan_name(line: str, pos: int) -> int:
    """Return the end of the run of ASCII letters starting at *pos*."""
    end = pos
    while end < len(line) and line[end].isascii() and line[end].isalpha():
        end += 1
    return end


def tokenize_step(
    line: str, index: int, num_vars: int, fanin: int
) -> Step | ParseFailure:
    """Parse line *index* of a block into a :class:`Step`.

    Variables ``[0, num_vars + index)`` are defined when the line is read.
    """

    def fail(kind: FailureKind, message: str) -> ParseFailure:
        return ParseFailure(kind, f"{message} in {line!r}", index, line)

    expected = step_name(num_vars, index)
    end = _scan_name(line, 0)
    if line[:end] != expected:
        return fail(FailureKind.WRONG_STEP_NAME, f"expected step {expected}")
    pos = end

    if line[pos : pos + len(SEPARATOR)] != SEPARATOR:
        return fail(FailureKind.MALFORMED_STEP, "missing ' = '")
    pos += len(SEPARATOR)

    gate_length = 1 << fanin
    end = line.find(" ", pos)
    if end < 0:
        end = len(line)
    gate_literal = line[pos:end]
    if (
        len(gate_literal) != gate_length
        or any(c not in "01" for c in gate_literal)
        or gate_literal[-1] != "0"
    ):
        return fail(
            FailureKind.UNNORMALIZED_GATE,
            f"gate is not {gate_length} binary digits ending in 0",
        )
    pos = end

    defined = num_vars + index
    fanins: list[int] = []
    for _ in range(fanin):
        if line[pos : pos + 1] != " ":
            return fail(FailureKind.MALFORMED_STEP, f"expected {fanin} fan-ins")
        pos += 1
        end = _scan_name(line, pos)
        var = parse_variable(line[pos:end])
        if var is None:
            return fail(FailureKind.MALFORMED_STEP, "fan-in is not a variable name")
        if fanins and var <= fanins[-1]:
            return fail(FailureKind.FANIN_OUT_OF_ORDER, "fan-ins are in wrong order")
        if var >= defined:
            return fail(
                FailureKind.FANIN_UNDEFINED,
                f"fan-in {variable_name(num_vars, var)} is not defined yet",
            )
        fanins.append(var)
        pos = end

    if pos != len(line):
        return fail(FailureKind.MALFORMED_STEP, "trailing characters")

    return Step(
        output=defined,
        gate=TruthTable.from_binary(fanin, gate_literal),
        fanins=tuple(fanins),
    )


def parse_chain(
    lines: typing.Sequence[str], num_vars: int, fanin: int, steps: int
) -> Chain | ParseFailure:
    """Parse one block of trimmed lines into a :class:`Chain`."""
    if len(lines) != steps:
        return ParseFailure(
            FailureKind.WRONG_STEP_COUNT,
            f"chain has {len(lines)} steps, expected {steps}",
        )

    parsed: list[Step] = []
    for index, line in enumerate(lines):
        result = tokenize_step(line, index, num_vars, fanin)
        if isinstance(result, ParseFailure):
            if logger.debug_on:
                logger.debug("[e] %s: %s", result.kind, result.message)
            return result
        parsed.append(result)

    return Chain(num_vars=num_vars, fanin=fanin, steps=tuple(parsed))
