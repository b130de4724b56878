"""Unit tests for gate simulation and the table arena."""

import pytest

from blnverify.chain.evaluator import TableArena, evaluate_step, simulate_gate
from blnverify.chain.parser import tokenize_step
from blnverify.errors import ArenaError
from blnverify.truth_table import TruthTable


def _var(num_vars, i):
    return TruthTable.nth_var(num_vars, i)


class TestSimulateGate:
    @pytest.mark.parametrize(
        "gate, expected",
        [("1000", "1000"), ("1110", "1110"), ("0110", "0110"), ("0100", "0100"), ("0010", "0010")],
    )
    def test_two_input_gates_over_projections(self, gate, expected):
        out = simulate_gate(TruthTable.from_binary(2, gate), [_var(2, 0), _var(2, 1)])
        assert out.to_binary() == expected

    def test_fanin_order_drives_gate_variables(self):
        # gate 0010 is x0 & ~x1; with fan-ins (b, a) it computes b & ~a
        gate = TruthTable.from_binary(2, "0010")
        out = simulate_gate(gate, [_var(2, 1), _var(2, 0)])
        assert out.to_binary() == "0100"

    def test_three_input_majority(self):
        gate = TruthTable.from_hex(3, "e8")
        out = simulate_gate(gate, [_var(4, 1), _var(4, 2), _var(4, 3)])
        expected = (
            (_var(4, 1) & _var(4, 2))
            | (_var(4, 1) & _var(4, 3))
            | (_var(4, 2) & _var(4, 3))
        )
        assert out == expected

    def test_wrong_number_of_inputs(self):
        with pytest.raises(ValueError):
            simulate_gate(TruthTable.from_binary(2, "1000"), [_var(2, 0)])


class TestTableArena:
    def test_inputs_first(self):
        arena = TableArena(3)
        assert len(arena) == 3
        assert arena.next_id == 3
        assert arena[2] == _var(3, 2)
        assert arena.step_tables() == ()

    def test_append_only_in_order(self):
        arena = TableArena(2)
        with pytest.raises(ArenaError):
            arena.append(3, TruthTable(2))
        arena.append(2, TruthTable(2))
        assert 2 in arena
        with pytest.raises(ArenaError):
            arena.append(2, TruthTable(2))

    def test_table_size_must_match(self):
        with pytest.raises(ArenaError):
            TableArena(2).append(2, TruthTable(3))

    def test_undefined_variable(self):
        with pytest.raises(ArenaError):
            TableArena(2)[2]

    def test_evaluate_steps(self):
        arena = TableArena(3)
        evaluate_step(tokenize_step("D = 0110 a b", 0, 3, 2), arena)
        out = evaluate_step(tokenize_step("E = 0110 c D", 1, 3, 2), arena)
        assert out == TruthTable.from_hex(3, "96")
        assert arena.step_tables() == (TruthTable.from_hex(3, "66"), out)
