"""Tests for the expression engine: tokenizer, shunting-yard, evaluator, formatter."""

import math
from collections import Counter

import pytest

from Calculator import MathEngine
from Calculator import error as E
from Calculator.MathEngine import (
    LEFT_PAREN,
    RIGHT_PAREN,
    TokenType,
    number,
    operator,
)


def run(expression):
    return MathEngine.evaluate(MathEngine.to_postfix(MathEngine.tokenize(expression)))


def postfix_text(expression):
    return MathEngine.render_postfix(MathEngine.to_postfix(MathEngine.tokenize(expression)))


# --- Tokenizer ---

def test_tokenize_simple_expression():
    assert MathEngine.tokenize("2 + 3") == [number("2"), operator("+"), number("3")]


def test_tokenize_skips_whitespace():
    assert MathEngine.tokenize(" 12\t×  4 ") == [number("12"), operator("×"), number("4")]


def test_ascii_operators_are_normalized():
    tokens = MathEngine.tokenize("6*7/2-1")
    assert [t.text for t in tokens if t.kind == TokenType.OPERATOR] == ["×", "÷", "−"]


def test_parentheses_tokens():
    assert MathEngine.tokenize("(1)") == [LEFT_PAREN, number("1"), RIGHT_PAREN]


def test_unknown_character_raises_syntax_error():
    with pytest.raises(E.SyntaxError) as excinfo:
        MathEngine.tokenize("2 & 3")
    assert excinfo.value.code == "3011"
    assert excinfo.value.equation == "2 & 3"


def test_second_decimal_point_starts_new_token():
    assert MathEngine.tokenize("1.2.3") == [number("1.2"), number(".3")]
    assert MathEngine.scan("1..") == [number("1."), number(".")]


def test_leading_minus_becomes_zero_minus():
    assert MathEngine.tokenize("-5 + 3") == [
        number("0"), operator("−"), number("5"), operator("+"), number("3"),
    ]


def test_minus_after_operator_and_paren_is_rewritten():
    assert MathEngine.tokenize("2 × (-3)") == [
        number("2"), operator("×"), LEFT_PAREN, number("0"), operator("−"), number("3"), RIGHT_PAREN,
    ]
    assert MathEngine.tokenize("2 - -3") == [
        number("2"), operator("−"), number("0"), operator("−"), number("3"),
    ]


def test_binary_minus_is_left_alone():
    assert MathEngine.tokenize("4-1") == [number("4"), operator("−"), number("1")]


def test_token_repr():
    assert repr(number("5")) == "Number('5')"
    assert repr(operator("*")) == "Operator('×')"
    assert repr(LEFT_PAREN) == "LeftParen"


def test_unknown_operator_symbol():
    with pytest.raises(E.CalculationError):
        operator("^")


# --- Shunting-yard ---

def test_postfix_respects_precedence():
    assert postfix_text("2 + 3 × 4") == "2 3 4 × +"


def test_postfix_parentheses_override_precedence():
    assert postfix_text("(2 + 3) × 4") == "2 3 + 4 ×"


def test_postfix_left_associative():
    assert postfix_text("8 − 3 − 2") == "8 3 − 2 −"
    assert postfix_text("8 ÷ 4 × 2") == "8 4 ÷ 2 ×"


def test_unmatched_closing_paren_is_ignored():
    assert postfix_text("2 + 3)") == "2 3 +"
    assert run("2 + 3) × 2") == 10


def test_unmatched_opening_paren_is_flushed():
    assert postfix_text("(2 + 3") == "2 3 +"
    assert run("((2 + 3) × 2") == 10


@pytest.mark.parametrize("expression", [
    "2 + 3 × 4",
    "(1.5 + 2) × (3 ÷ 4)",
    "10 − 4 + 2",
    "-5 + 3",
    "((7))",
])
def test_postfix_render_round_trip(expression):
    original = MathEngine.tokenize(expression)
    again = MathEngine.tokenize(MathEngine.render_postfix(MathEngine.to_postfix(original)))

    def operators(tokens):
        return Counter(t.text for t in tokens if t.kind == TokenType.OPERATOR)

    def operands(tokens):
        return sorted(float(t.text) for t in tokens if t.kind == TokenType.NUMBER)

    assert operators(again) == operators(original)
    assert operands(again) == operands(original)


# --- Evaluator ---

def test_precedence():
    assert run("2 + 3 × 4") == 14


def test_parentheses():
    assert run("(2 + 3) × 4") == 20


def test_nested_parentheses():
    assert run("((2 + 3) * (4 - 1))") == 15


def test_unary_minus():
    assert run("-5 + 3") == -2


def test_left_associativity():
    assert run("8 − 3 − 2") == 3
    assert run("8 ÷ 4 ÷ 2") == 1


def test_decimals():
    assert run("1.5 × 4") == 6
    assert run(".5 + 1.") == pytest.approx(1.5)


def test_division_by_zero_is_nan():
    assert math.isnan(run("5 ÷ 0"))


def test_operator_without_operands_is_nan():
    assert math.isnan(run("+"))
    assert math.isnan(MathEngine.evaluate([]))


def test_leftover_values_are_nan():
    assert math.isnan(run("1.2.3"))


def test_lone_dot_is_nan():
    assert math.isnan(run("5 + ."))


def test_faults_are_reported():
    faults = []
    MathEngine.evaluate(MathEngine.to_postfix(MathEngine.tokenize("1 ÷ 0")), faults)
    assert faults == ["3003"]


# --- Formatter ---

@pytest.mark.parametrize("value, expected", [
    (0.0, "0"),
    (-0.0, "0"),
    (14.0, "14"),
    (-2.0, "-2"),
    (123.456, "123.456"),
    (0.5, "0.5"),
    (1e-6, "0.000001"),
    (999999999999.0, "999999999999"),
])
def test_plain_decimal(value, expected):
    assert MathEngine.format_number(value) == expected


@pytest.mark.parametrize("value, expected", [
    (0.0000001, "1.0000000e-07"),
    (1e13, "1.0000000e+13"),
    (1e12, "1.0000000e+12"),
    (-123456789012345.0, "-1.2345679e+14"),
])
def test_scientific_notation(value, expected):
    assert MathEngine.format_number(value) == expected


def test_long_plain_decimal_is_capped():
    assert MathEngine.format_number(0.1 + 0.2) == "0.3"
    assert MathEngine.format_number(-(0.1 + 0.2)) == "-0.3"


def test_eighteen_characters_are_not_capped():
    assert MathEngine.format_number(1 / 3) == "0.3333333333333333"


def test_non_finite_is_error_text():
    assert MathEngine.format_number(math.nan) == MathEngine.ERROR_TEXT
    assert MathEngine.format_number(math.inf) == MathEngine.ERROR_TEXT
    assert MathEngine.format_number(-math.inf) == MathEngine.ERROR_TEXT


# --- calculate() ---

def test_calculate():
    assert MathEngine.calculate("2 + 2") == 4


def test_calculate_division_by_zero():
    with pytest.raises(E.CalculationError) as excinfo:
        MathEngine.calculate("5 ÷ 0")
    assert excinfo.value.code == "3003"
    assert excinfo.value.equation == "5 ÷ 0"


def test_calculate_malformed():
    with pytest.raises(E.CalculationError) as excinfo:
        MathEngine.calculate("+")
    assert excinfo.value.code == "3012"


def test_calculate_overflow():
    huge = "1" + "0" * 200
    with pytest.raises(E.CalculationError) as excinfo:
        MathEngine.calculate(f"{huge} × {huge}")
    assert excinfo.value.code == "3026"


def test_calculate_syntax_error():
    with pytest.raises(E.SyntaxError):
        MathEngine.calculate("2 $ 2")


def test_describe_error():
    assert E.describe(E.CalculationError("Division by zero", code="3003")) == "Error 3003: Division by Zero"
    assert E.describe(E.SyntaxError("'$'", code="3011")) == "Error 3011: Unexpected Token: '$'"
