"""Tests for the parser, the function provider and FormulaEvaluator."""

import math

import pytest

import formula_evaluator
from formula_evaluator import (
    DEGREES,
    RADIANS,
    BinaryOpNode,
    CallNode,
    ConstantNode,
    FormulaEvaluator,
    NumberNode,
    Parser,
    PythonMathProvider,
    UnaryOpNode,
    factorial,
)


@pytest.fixture
def evaluator():
    return FormulaEvaluator(PythonMathProvider())


@pytest.fixture
def degrees_evaluator():
    return FormulaEvaluator(PythonMathProvider(DEGREES))


# --- factorial ---

def test_factorial_small_values():
    assert factorial(0) == 1
    assert factorial(1) == 1
    assert factorial(5) == 120


def test_factorial_negative_is_nan():
    assert math.isnan(factorial(-1))


def test_factorial_overflows_to_infinity():
    assert math.isinf(factorial(171))
    assert math.isfinite(factorial(170))


def test_factorial_rejects_fractions():
    with pytest.raises(ValueError):
        factorial(2.5)


# --- provider ---

def test_provider_rejects_unknown_angle_mode():
    with pytest.raises(ValueError):
        PythonMathProvider("grad")


def test_namespace_contains_only_the_calculator_table():
    names = set(PythonMathProvider().build_namespace())
    assert names == {
        "PI", "E", "factorial",
        "sin", "cos", "tan", "asin", "acos", "atan",
        "sinh", "cosh", "tanh", "ln", "log", "sqrt", "rand",
    }


# --- parser ---

def test_parser_builds_closed_node_set():
    tree = Parser.parse_text("-2*sin(PI)+1")
    assert tree == BinaryOpNode(
        "+",
        BinaryOpNode(
            "*",
            UnaryOpNode("-", NumberNode(2.0)),
            CallNode("sin", (ConstantNode("PI"),)),
        ),
        NumberNode(1.0),
    )


@pytest.mark.parametrize(
    "canonical",
    ["(1+2", "1+", "1+2)", "*3", "sin", "2!", "1 2", ""],
)
def test_parser_rejects_malformed_input(canonical):
    with pytest.raises(ValueError):
        Parser.parse_text(canonical)


# --- evaluation ---

@pytest.mark.parametrize(
    "expr, expected",
    [
        ("2+3*4", 14),
        ("(2+3)*4", 20),
        ("10-2*3+4/2", 6),
        ("2**3**2", 512),
        ("-2**2", -4),
        ("2**-1", 0.5),
        ("2(3+4)", 14),
        ("5!", 120),
        ("50%", 0.5),
        ("√16", 4),
        ("2^10", 1024),
        ("ln(e)", 1),
        ("log(1000)", 3),
    ],
)
def test_evaluate_arithmetic(evaluator, expr, expected):
    assert evaluator.evaluate(expr) == pytest.approx(expected)


def test_trig_in_radians(evaluator):
    assert evaluator.evaluate("sin(PI/2)") == pytest.approx(1, abs=1e-9)


def test_trig_in_degrees(degrees_evaluator):
    assert degrees_evaluator.evaluate("sin(90)") == pytest.approx(1, abs=1e-9)
    assert degrees_evaluator.evaluate("cos(60)") == pytest.approx(0.5, abs=1e-9)


def test_inverse_trig_converts_output(evaluator, degrees_evaluator):
    assert evaluator.evaluate("asin(1)") == pytest.approx(math.pi / 2)
    assert degrees_evaluator.evaluate("asin(1)") == pytest.approx(90)
    assert degrees_evaluator.evaluate("atan(1)") == pytest.approx(45)


def test_hyperbolic_ignores_angle_mode(evaluator, degrees_evaluator):
    assert evaluator.evaluate("sinh(1)") == degrees_evaluator.evaluate("sinh(1)")


def test_rand_is_called_on_every_evaluation(evaluator, monkeypatch):
    values = iter([0.25, 0.5])
    monkeypatch.setattr(formula_evaluator.random, "random", lambda: next(values))
    assert evaluator.evaluate("rand()+rand()") == pytest.approx(0.75)


def test_rand_in_unit_interval(evaluator):
    for _ in range(20):
        assert 0 <= evaluator.evaluate("rand()") < 1


@pytest.mark.parametrize(
    "expr, error",
    [
        ("", ValueError),
        ("   ", ValueError),
        ("foo(1)", ValueError),
        ("PI(2)", ValueError),
        ("sqrt(1,2)", ValueError),
        ("asin(2)", ValueError),
        ("log(0)", ValueError),
        ("1/0", ZeroDivisionError),
        ("10^400", OverflowError),
    ],
)
def test_evaluate_raises(evaluator, expr, error):
    with pytest.raises(error):
        evaluator.evaluate(expr)


def test_no_access_to_python_builtins(evaluator):
    with pytest.raises(ValueError):
        evaluator.evaluate("abs(-1)")
    with pytest.raises(ValueError):
        evaluator.evaluate("__import__(1)")
