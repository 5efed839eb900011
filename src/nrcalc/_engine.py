"""Fixed-length Newton-Raphson iteration engine."""

from __future__ import annotations

import logging
import math
from typing import TYPE_CHECKING, Any, TypeVar

import numpy as np

from ._errors import EvaluationError, ParseError
from ._evaluator import SympyEvaluator
from ._method import Method
from ._models import IterationRecord

if TYPE_CHECKING:
    from collections.abc import Callable

    from ._evaluator import ExpressionEvaluator
    from ._models import RunConfig

logger = logging.getLogger(__name__)

VARIABLE = "x"

_T = TypeVar("_T")


def _call_evaluator(fn: Callable[..., _T], *args: Any) -> _T:
    """Call into the evaluator, reporting any failure as an EvaluationError."""
    try:
        return fn(*args)
    except EvaluationError:
        raise
    except (ArithmeticError, ValueError, TypeError, KeyError, AttributeError, RuntimeError) as e:
        raise EvaluationError(str(e)) from e


def _next_iterate(
    method: Method,
    x: np.float64,
    fx: np.float64,
    fpx: np.float64,
    fppx: np.float64 | None,
) -> np.float64:
    """Compute x_{i+1}. Must be called with numpy floating point errors ignored."""
    match method:
        case Method.STANDARD:
            return x - fx / fpx
        case Method.MODIFIED:
            if fppx is None:
                msg = "The modified method requires f''(x)"
                raise ValueError(msg)
            return x - (fx * fpx) / (fpx**2 - fx * fppx)


def run(config: RunConfig, evaluator: ExpressionEvaluator[Any] | None = None) -> tuple[IterationRecord, ...]:
    """Run exactly ``config.iterations`` iterations and return one record per iteration.

    The expression and its derivatives are parsed and differentiated once, then
    evaluated at each iterate. There is no convergence check: the trace always
    has ``config.iterations`` rows.

    Divisions by zero in the update formula or the error metrics do not fail the
    run. They produce ``inf``/``nan`` values which are recorded and carried into
    the following iterations.

    Args:
        config: The run configuration.
        evaluator: Expression evaluator to use. Defaults to ``SympyEvaluator``.

    Returns:
        The iteration records in order, with full-precision values.

    Raises:
        EvaluationError: If the expression or a derivative cannot be parsed or
            evaluated. No partial result is returned.
        ParseError: If the initial guess is not finite.

    Example:
        >>> config = RunConfig(expression="x^2 - 4", x0=3, iterations=3, method="standard")
        >>> records = run(config)
        >>> records[0].display().x_next
        '2.17'

    """
    if not math.isfinite(config.x0):
        msg = f"Initial guess must be a finite number, got {config.x0}"
        raise ParseError(msg)

    if evaluator is None:
        evaluator = SympyEvaluator(VARIABLE)

    method = config.method
    f = _call_evaluator(evaluator.parse, config.expression)
    f_prime = _call_evaluator(evaluator.differentiate, f, VARIABLE)
    f_double_prime = (
        _call_evaluator(evaluator.differentiate, f_prime, VARIABLE) if method.uses_second_derivative else None
    )

    def at(expression: Any, x: np.float64) -> np.float64:
        return np.float64(_call_evaluator(evaluator.evaluate, expression, {VARIABLE: float(x)}))

    root = np.float64(config.true_root_value)
    x = np.float64(config.x0)
    records: list[IterationRecord] = []

    logger.debug("Running %d %s iterations of %r from x0 = %r", config.iterations, method, config.expression, config.x0)

    for i in range(1, config.iterations + 1):
        fx = at(f, x)
        fpx = at(f_prime, x)
        fppx = at(f_double_prime, x) if f_double_prime is not None else None

        with np.errstate(all="ignore"):
            x_next = _next_iterate(method, x, fx, fpx, fppx)
            ea = np.abs((x_next - x) / x_next) * 100
            et = np.abs((root - x_next) / root) * 100

        record = IterationRecord(
            iteration=i,
            x=float(x),
            fx=float(fx),
            fpx=float(fpx),
            fppx=None if fppx is None else float(fppx),
            x_next=float(x_next),
            ea=float(ea),
            et=float(et),
            method=method,
        )
        logger.debug("Iteration %d: %r", i, record)
        records.append(record)

        x = x_next

    return tuple(records)
