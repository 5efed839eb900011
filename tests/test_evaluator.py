"""Tests for the SymPy expression evaluator."""

import math

import pytest

from nrcalc._errors import EvaluationError
from nrcalc._evaluator import SympyEvaluator, SympyExpression


@pytest.fixture
def evaluator() -> SympyEvaluator:
    return SympyEvaluator()


class TestParse:
    """Tests for parsing calculator notation."""

    @pytest.mark.parametrize(
        ("text", "x", "expected"),
        [
            ("x^2 - 4", 3.0, 5.0),
            ("x**2 - 4", 3.0, 5.0),
            ("2x + 1", 2.0, 5.0),
            ("12*x^3 - 30*x^2 - 84*x + 48", -1.0, 90.0),
            ("exp(x) - 3*x", 0.0, 1.0),
            ("sin(x)", math.pi / 2, 1.0),
            ("e^x", 1.0, math.e),
            ("pi*x", 2.0, 2 * math.pi),
            ("log(x)", math.e, 1.0),
            ("sqrt(x)", 9.0, 3.0),
            ("5", 123.0, 5.0),
        ],
    )
    def test_evaluates(self, evaluator: SympyEvaluator, text: str, x: float, expected: float) -> None:
        expression = evaluator.parse(text)

        assert evaluator.evaluate(expression, {"x": x}) == pytest.approx(expected)

    def test_returns_handle(self, evaluator: SympyEvaluator) -> None:
        expression = evaluator.parse("x^2 - 4")

        assert isinstance(expression, SympyExpression)
        assert str(expression) == "x**2 - 4"

    @pytest.mark.parametrize("text", ["", "   ", "x^2 +", "(x", "3 +* x"])
    def test_malformed(self, evaluator: SympyEvaluator, text: str) -> None:
        with pytest.raises(EvaluationError):
            evaluator.parse(text)

    def test_undefined_symbol(self, evaluator: SympyEvaluator) -> None:
        with pytest.raises(EvaluationError, match="Undefined symbol a, b"):
            evaluator.parse("a*x + b")

    def test_custom_variable(self) -> None:
        evaluator = SympyEvaluator(variable="t")
        expression = evaluator.parse("t^2")

        assert evaluator.evaluate(expression, {"t": 3.0}) == pytest.approx(9.0)
        with pytest.raises(EvaluationError, match="Undefined symbol x"):
            evaluator.parse("x + t")


class TestDifferentiate:
    """Tests for symbolic differentiation."""

    def test_polynomial(self, evaluator: SympyEvaluator) -> None:
        f = evaluator.parse("12*x^3 - 30*x^2 - 84*x + 48")
        f_prime = evaluator.differentiate(f, "x")
        f_double_prime = evaluator.differentiate(f_prime, "x")

        assert evaluator.to_text(f_prime) == "36*x**2 - 60*x - 84"
        assert evaluator.evaluate(f_prime, {"x": -1.0}) == pytest.approx(12.0)
        assert evaluator.evaluate(f_double_prime, {"x": -1.0}) == pytest.approx(-132.0)

    def test_constant_derivative_is_zero(self, evaluator: SympyEvaluator) -> None:
        f_prime = evaluator.differentiate(evaluator.parse("7"), "x")

        assert evaluator.evaluate(f_prime, {"x": 2.0}) == 0.0

    def test_transcendental(self, evaluator: SympyEvaluator) -> None:
        f_prime = evaluator.differentiate(evaluator.parse("exp(x) - 3*x"), "x")

        assert evaluator.evaluate(f_prime, {"x": 0.0}) == pytest.approx(-2.0)


class TestEvaluate:
    """Tests for numeric evaluation."""

    def test_returns_float(self, evaluator: SympyEvaluator) -> None:
        value = evaluator.evaluate(evaluator.parse("x + 1"), {"x": 1.0})

        assert type(value) is float

    def test_domain_error(self, evaluator: SympyEvaluator) -> None:
        with pytest.raises(EvaluationError, match="Cannot evaluate"):
            evaluator.evaluate(evaluator.parse("log(x)"), {"x": -1.0})

    def test_square_root_of_negative(self, evaluator: SympyEvaluator) -> None:
        with pytest.raises(EvaluationError):
            evaluator.evaluate(evaluator.parse("sqrt(x)"), {"x": -4.0})

    def test_division_by_zero(self, evaluator: SympyEvaluator) -> None:
        with pytest.raises(EvaluationError):
            evaluator.evaluate(evaluator.parse("1/x"), {"x": 0.0})

    def test_overflow_is_infinite(self, evaluator: SympyEvaluator) -> None:
        value = evaluator.evaluate(evaluator.parse("exp(x)"), {"x": 1000.0})

        assert value == math.inf

    def test_infinite_point_gives_nan(self, evaluator: SympyEvaluator) -> None:
        """inf - inf at an infinite point is a value, not a failure."""
        value = evaluator.evaluate(evaluator.parse("x^3 - 3*x"), {"x": math.inf})

        assert math.isnan(value)

    @pytest.mark.parametrize(
        ("text", "x", "expected"),
        [
            ("3*x^2 - 3", math.inf, math.inf),
            ("x^2 + 1", -math.inf, math.inf),
            ("1/x", math.inf, 0.0),
        ],
    )
    def test_infinite_point(self, evaluator: SympyEvaluator, text: str, x: float, expected: float) -> None:
        assert evaluator.evaluate(evaluator.parse(text), {"x": x}) == expected

    def test_domain_error_at_infinite_point_is_nan(self, evaluator: SympyEvaluator) -> None:
        value = evaluator.evaluate(evaluator.parse("log(x)"), {"x": -math.inf})

        assert math.isnan(value)

    def test_overflow_then_invalid_gives_nan(self, evaluator: SympyEvaluator) -> None:
        """Both terms overflow at a finite point, so inf - inf is a value."""
        value = evaluator.evaluate(evaluator.parse("x^3 - x^2"), {"x": 1e200})

        assert math.isnan(value)

    def test_domain_error_message(self, evaluator: SympyEvaluator) -> None:
        with pytest.raises(EvaluationError, match="invalid value"):
            evaluator.evaluate(evaluator.parse("sqrt(x)"), {"x": -4.0})

    def test_nan_propagates(self, evaluator: SympyEvaluator) -> None:
        value = evaluator.evaluate(evaluator.parse("x^2 + 1"), {"x": math.nan})

        assert math.isnan(value)

    def test_missing_binding(self, evaluator: SympyEvaluator) -> None:
        with pytest.raises(EvaluationError, match="Missing value"):
            evaluator.evaluate(evaluator.parse("x"), {"y": 1.0})
