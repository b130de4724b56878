"""Unit tests for the chain line tokenizer and block parser."""

import pytest

from blnverify.chain.model import (
    Chain,
    Step,
    parse_variable,
    step_name,
    variable_letter,
    variable_name,
)
from blnverify.chain.parser import ParseFailure, parse_chain, tokenize_step
from blnverify.errors import FailureKind, LexicalError, StructuralError


class TestVariableNames:
    def test_single_letters(self):
        assert variable_letter(0) == "a"
        assert variable_letter(25) == "z"
        assert parse_variable("c") == 2
        assert parse_variable("C") == 2

    def test_names_past_the_alphabet(self):
        assert variable_letter(26) == "aa"
        assert variable_letter(27) == "ab"
        assert variable_letter(52) == "ba"
        for var_id in (0, 25, 26, 51, 52, 701, 702):
            assert parse_variable(variable_letter(var_id)) == var_id

    @pytest.mark.parametrize("token", ["", "1", "a1", "ä"])
    def test_parse_variable_rejects_non_names(self, token):
        assert parse_variable(token) is None

    def test_step_and_variable_names(self):
        assert step_name(3, 0) == "D"
        assert step_name(2, 1) == "D"
        assert variable_name(3, 1) == "b"
        assert variable_name(3, 3) == "D"


class TestTokenizeStep:
    def test_valid_step(self):
        step = tokenize_step("D = 0110 a b", 0, 3, 2)
        assert isinstance(step, Step)
        assert step.output == 3
        assert step.fanins == (0, 1)
        assert step.gate_string == "0110"
        assert step.gate.num_vars == 2

    def test_fanins_are_case_insensitive(self):
        step = tokenize_step("E = 0110 c D", 1, 3, 2)
        assert step.fanins == (2, 3)
        assert tokenize_step("E = 0110 c d", 1, 3, 2).fanins == (2, 3)

    def test_format_round_trip(self):
        line = "E = 1000 c D"
        assert tokenize_step(line, 1, 3, 2).format(3) == line

    @pytest.mark.parametrize(
        "line, kind",
        [
            ("E = 0110 a b", FailureKind.WRONG_STEP_NAME),
            ("d = 0110 a b", FailureKind.WRONG_STEP_NAME),
            ("D= 0110 a b", FailureKind.MALFORMED_STEP),
            ("D =0110 a b", FailureKind.MALFORMED_STEP),
            ("D = 011 a b", FailureKind.UNNORMALIZED_GATE),
            ("D = 01100 a b", FailureKind.UNNORMALIZED_GATE),
            ("D = 01a0 a b", FailureKind.UNNORMALIZED_GATE),
            ("D = 0111 a b", FailureKind.UNNORMALIZED_GATE),
            ("D = 0110 b a", FailureKind.FANIN_OUT_OF_ORDER),
            ("D = 0110 a a", FailureKind.FANIN_OUT_OF_ORDER),
            ("D = 0110 a d", FailureKind.FANIN_UNDEFINED),
            ("D = 0110 a D", FailureKind.FANIN_UNDEFINED),
            ("D = 0110 a", FailureKind.MALFORMED_STEP),
            ("D = 0110 a  b", FailureKind.MALFORMED_STEP),
            ("D = 0110 a b c", FailureKind.MALFORMED_STEP),
            ("D = 0110 a b ", FailureKind.MALFORMED_STEP),
            ("D = 0110 a b1", FailureKind.MALFORMED_STEP),
            ("D = 0110ab", FailureKind.UNNORMALIZED_GATE),
        ],
    )
    def test_failures(self, line, kind):
        result = tokenize_step(line, 0, 3, 2)
        assert isinstance(result, ParseFailure)
        assert result.kind is kind
        assert result.line_index == 0
        assert result.line == line

    def test_unnormalized_independent_of_other_content(self):
        # bit 0 is checked before the fan-ins are even looked at
        for line in ("D = 1001 b a", "D = 0001 a z", "D = 1111"):
            result = tokenize_step(line, 0, 3, 2)
            assert result.kind is FailureKind.UNNORMALIZED_GATE

    def test_three_input_gate(self):
        step = tokenize_step("D = 11101000 a b c", 0, 3, 3)
        assert step.fanins == (0, 1, 2)
        assert step.gate.to_hex() == "e8"


class TestParseChain:
    def test_valid_chain(self):
        chain = parse_chain(["D = 0110 a b", "E = 0110 c D"], 3, 2, 2)
        assert isinstance(chain, Chain)
        assert len(chain) == 2
        assert chain.output == 4
        assert chain.support_history() == [0, 1, 2, 3]
        assert chain.to_lines() == ["D = 0110 a b", "E = 0110 c D"]

    @pytest.mark.parametrize("lines", [["D = 0110 a b"], ["D = 0110 a b"] * 3, []])
    def test_wrong_step_count(self, lines):
        result = parse_chain(lines, 3, 2, 2)
        assert isinstance(result, ParseFailure)
        assert result.kind is FailureKind.WRONG_STEP_COUNT
        assert result.line_index is None

    def test_second_step_reference_to_itself_is_undefined(self):
        result = parse_chain(["D = 0110 a b", "E = 0110 a E"], 3, 2, 2)
        assert result.kind is FailureKind.FANIN_UNDEFINED
        assert result.line_index == 1

    def test_failure_converts_to_typed_error(self):
        lexical = parse_chain(["D = 0110 a b", "E == 0110 c D"], 3, 2, 2)
        error = lexical.to_error()
        assert isinstance(error, LexicalError)
        assert error.step_index == 1
        structural = parse_chain(["D = 0110 a b"], 3, 2, 2).to_error()
        assert isinstance(structural, StructuralError)
        assert structural.kind is FailureKind.WRONG_STEP_COUNT
