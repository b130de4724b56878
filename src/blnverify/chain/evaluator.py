"""Gate simulation over complete truth tables."""

from __future__ import annotations

import typing

from blnverify.chain.model import Step
from blnverify.errors import ArenaError
from blnverify.truth_table import TruthTable


class TableArena:
    """Append-only store of variable tables indexed by dense variable id.

    The projections of the primary inputs occupy ids ``[0, num_vars)``; each
    evaluated step appends its output table at the next id.
    """

    def __init__(self, num_vars: int):
        self.num_vars = num_vars
        self._tables: list[TruthTable] = [
            TruthTable.nth_var(num_vars, i) for i in range(num_vars)
        ]

    def __len__(self) -> int:
        return len(self._tables)

    def __contains__(self, var_id: int) -> bool:
        return 0 <= var_id < len(self._tables)

    def __getitem__(self, var_id: int) -> TruthTable:
        if var_id not in self:
            raise ArenaError(f"variable {var_id} has no table yet")
        return self._tables[var_id]

    @property
    def next_id(self) -> int:
        return len(self._tables)

    def append(self, var_id: int, table: TruthTable) -> None:
        if var_id != self.next_id:
            raise ArenaError(f"expected table for variable {self.next_id}, got {var_id}")
        if table.num_vars != self.num_vars:
            raise ArenaError(
                f"table over {table.num_vars} variables does not fit arena over {self.num_vars}"
            )
        self._tables.append(table)

    def step_tables(self) -> typing.Tuple[TruthTable, ...]:
        return tuple(self._tables[self.num_vars :])


def simulate_gate(gate: TruthTable, inputs: typing.Sequence[TruthTable]) -> TruthTable:
    """Compose *gate* with the tables of its fan-ins.

    Output bit ``p`` is the gate bit at the pattern whose bit ``j`` is the
    bit ``p`` of ``inputs[j]``.
    """
    if len(inputs) != gate.num_vars:
        raise ValueError(
            f"gate over {gate.num_vars} variables given {len(inputs)} inputs"
        )
    num_vars = inputs[0].num_vars
    gate_bits = gate.bits
    input_bits = [table.bits for table in inputs]
    result = 0
    for p in range(1 << num_vars):
        pattern = 0
        for j, bits in enumerate(input_bits):
            pattern |= ((bits >> p) & 1) << j
        if (gate_bits >> pattern) & 1:
            result |= 1 << p
    return TruthTable(num_vars, result)


def evaluate_step(step: Step, arena: TableArena) -> TruthTable:
    """Simulate *step* against *arena* and bind its output table."""
    table = simulate_gate(step.gate, [arena[v] for v in step.fanins])
    arena.append(step.output, table)
    return table
