"""Expression evaluation capability used by the iteration engine.

The engine contains no symbolic math. It talks to an ``ExpressionEvaluator``,
which parses an expression once into a reusable handle, differentiates handles
and evaluates them at a given variable binding. ``SympyEvaluator`` is the
default implementation.
"""

from __future__ import annotations

import logging
import math
import tokenize
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Protocol, TypeVar

import numpy as np
import sympy as sp
from sympy.parsing.sympy_parser import (
    convert_xor,
    implicit_multiplication,
    parse_expr,
    standard_transformations,
)

from ._errors import EvaluationError

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping

logger = logging.getLogger(__name__)

_E = TypeVar("_E")

# `^` is power and `2x` is `2*x`, as users type them in calculator forms
_TRANSFORMATIONS = (*standard_transformations, implicit_multiplication, convert_xor)


class _FloatingPointFlags:
    """``numpy.errstate`` callback recording which floating point errors occurred."""

    def __init__(self) -> None:
        self.raised: list[str] = []

    def __call__(self, error: str, flag: int) -> None:  # noqa: ARG002
        if error not in self.raised:
            self.raised.append(error)

    @property
    def overflowed(self) -> bool:
        return "overflow" in self.raised

    @property
    def domain_errors(self) -> list[str]:
        return [error for error in self.raised if error != "overflow"]


class ExpressionEvaluator(Protocol[_E]):
    """Capability to parse, differentiate and evaluate single-variable expressions.

    ``_E`` is the implementation's expression handle type. Implementations
    signal failures by raising; the engine reports any such failure as an
    ``EvaluationError``.
    """

    def parse(self, text: str) -> _E:
        """Parse expression text into a reusable handle."""
        ...

    def differentiate(self, expression: _E, variable: str) -> _E:
        """Return the symbolic derivative of an expression with respect to ``variable``."""
        ...

    def evaluate(self, expression: _E, bindings: Mapping[str, float]) -> float:
        """Evaluate an expression at the given variable bindings."""
        ...


@dataclass(frozen=True, slots=True)
class SympyExpression:
    """A parsed SymPy expression together with its compiled numeric function."""

    expr: sp.Expr
    variable: sp.Symbol
    func: Callable[[float], Any]

    def __str__(self) -> str:
        return str(self.expr)


class SympyEvaluator:
    """``ExpressionEvaluator`` backed by SymPy.

    Expressions use calculator notation: ``x^2``, ``2x``, ``sin(x)``,
    ``exp(x)``, ``log(x)`` (natural logarithm), and the constants ``e`` and
    ``pi``. The only free symbol allowed is the iteration variable.

    Example:
        >>> evaluator = SympyEvaluator()
        >>> f = evaluator.parse("x^2 - 4")
        >>> evaluator.evaluate(evaluator.differentiate(f, "x"), {"x": 3.0})
        6.0

    """

    def __init__(self, variable: str = "x") -> None:
        self.variable = variable
        self._symbol = sp.Symbol(variable)
        self._local_dict: dict[str, Any] = {"e": sp.E, "pi": sp.pi, variable: self._symbol}

    def parse(self, text: str) -> SympyExpression:
        if not text.strip():
            msg = "Expression is empty"
            raise EvaluationError(msg)

        try:
            expr = parse_expr(text, local_dict=dict(self._local_dict), transformations=_TRANSFORMATIONS)
        except (SyntaxError, TypeError, ValueError, AttributeError, sp.SympifyError, tokenize.TokenError) as e:
            msg = f"Invalid expression {text!r}: {e}"
            raise EvaluationError(msg) from e

        if not isinstance(expr, sp.Expr):
            msg = f"Invalid expression {text!r}: not a real-valued function of {self.variable}"
            raise EvaluationError(msg)

        undefined = sorted(str(s) for s in expr.free_symbols if s != self._symbol)
        if undefined:
            msg = f"Undefined symbol {', '.join(undefined)}"
            raise EvaluationError(msg)

        logger.debug("Parsed %r as %s", text, expr)
        return self._compile(expr)

    def differentiate(self, expression: SympyExpression, variable: str) -> SympyExpression:
        derivative = sp.diff(expression.expr, sp.Symbol(variable))
        logger.debug("d/d%s %s = %s", variable, expression.expr, derivative)
        return self._compile(derivative)

    def evaluate(self, expression: SympyExpression, bindings: Mapping[str, float]) -> float:
        name = str(expression.variable)
        try:
            value = bindings[name]
        except KeyError as e:
            msg = f"Missing value for variable {name!r}"
            raise EvaluationError(msg) from e

        flags = _FloatingPointFlags()
        try:
            with np.errstate(call=flags, divide="call", invalid="call", over="call", under="ignore"):
                result = expression.func(np.float64(value))
        except (ArithmeticError, ValueError, TypeError, NameError) as e:
            msg = f"Cannot evaluate {expression.expr} at {name} = {value}: {e}"
            raise EvaluationError(msg) from e

        # Domain errors and divisions by zero at a finite point are failures.
        # Once the point or an intermediate value is infinite, inf and nan
        # results are returned as values.
        if math.isfinite(value) and not flags.overflowed and flags.domain_errors:
            msg = f"Cannot evaluate {expression.expr} at {name} = {value}: {', '.join(flags.domain_errors)}"
            raise EvaluationError(msg)

        if np.iscomplexobj(result):
            if np.imag(result) != 0:
                msg = f"{expression.expr} is not real at {name} = {value}"
                raise EvaluationError(msg)
            result = np.real(result)

        try:
            return float(result)
        except (TypeError, ValueError) as e:
            msg = f"Cannot evaluate {expression.expr} at {name} = {value}: {e}"
            raise EvaluationError(msg) from e

    def to_text(self, expression: SympyExpression) -> str:
        """Render an expression handle back to text."""
        return str(expression.expr)

    def _compile(self, expr: sp.Expr) -> SympyExpression:
        func = sp.lambdify(self._symbol, expr, modules="numpy")
        return SympyExpression(expr=expr, variable=self._symbol, func=func)
