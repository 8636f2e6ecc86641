"""Tests for the Number | Error boundary and result formatting."""

import pytest

from calculator_engine import ERROR_TEXT, CalculatorEngine, EvaluationOutcome, evaluate
from formula_evaluator import DEGREES, RADIANS


@pytest.fixture
def engine():
    return CalculatorEngine()


@pytest.mark.parametrize(
    "a, b, expected",
    [
        ("1", "2", "3"),
        ("1.5", "2.25", "3.75"),
        ("0.1", "0.2", "0.3"),
        ("-3", "10", "7"),
        ("123456789", "987654321", "1111111110"),
    ],
)
def test_sum_of_literals(a, b, expected):
    outcome = evaluate(f"{a}+{b}")
    assert outcome.ok
    assert outcome.text == expected
    assert outcome.value == pytest.approx(float(a) + float(b))


@pytest.mark.parametrize(
    "expr, expected",
    [
        ("5!", "120"),
        ("2(3+4)", "14"),
        ("1/3", "0.3333333333"),
        ("2/3", "0.6666666667"),
        ("10^20", "100000000000000000000"),
        ("sin(PI)", "0"),
        ("-sin(PI)", "0"),
        ("√2", "1.4142135624"),
        ("2π", "6.2831853072"),
        ("e", "2.7182818285"),
        ("25%", "0.25"),
    ],
)
def test_formatting(engine, expr, expected):
    assert engine.evaluate(expr).text == expected


@pytest.mark.parametrize(
    "expr",
    [
        "1/0",
        "-1!",
        "171!",
        "asin(2)",
        "log(0)",
        "ln(-1)",
        "√(-4)",
        "10^400",
        "(1+2",
        "3+",
        "2e5",
        "",
        "hello",
        "(" * 3000 + "1" + ")" * 3000,
    ],
)
def test_every_failure_collapses_to_error(engine, expr):
    outcome = engine.evaluate(expr)
    assert outcome == EvaluationOutcome.error()
    assert outcome.text == ERROR_TEXT
    assert not outcome.ok


def test_degrees_and_radians():
    assert evaluate("sin(90)", DEGREES).value == pytest.approx(1, abs=1e-9)
    assert evaluate("sin(PI/2)", RADIANS).value == pytest.approx(1, abs=1e-9)
    assert evaluate("sin(90)", RADIANS).text != evaluate("sin(90)", DEGREES).text


def test_angle_mode_property(engine):
    assert engine.angle_mode == RADIANS
    engine.angle_mode = DEGREES
    assert engine.evaluate("cos(180)").text == "-1"
    with pytest.raises(ValueError):
        engine.angle_mode = "gradians"


def test_format_result_never_uses_scientific_notation():
    assert CalculatorEngine.format_result(1e22) == "10000000000000000000000"
    assert CalculatorEngine.format_result(1e-12) == "0"
    assert CalculatorEngine.format_result(-2.5) == "-2.5"


def test_long_operator_chains_evaluate():
    assert evaluate("+".join(["1"] * 1500)).text == "1500"
    assert evaluate("×".join(["1"] * 1500)).text == "1"
    assert evaluate("-".join(["2"] * 1200)).text == "-2396"


def test_mixed_chain_keeps_left_to_right_order():
    assert evaluate("8÷2÷2+3×2-1").text == "7"
