"""Build a RunConfig from the raw text fields of an input form."""

import math

from pydantic import ValidationError

from ._errors import ParseError
from ._method import Method
from ._models import RunConfig


def _parse_finite_float(text: str, field_name: str) -> float:
    try:
        value = float(text.strip())
    except ValueError as e:
        msg = f"{field_name} must be a number, got {text!r}"
        raise ParseError(msg) from e
    if not math.isfinite(value):
        msg = f"{field_name} must be a finite number, got {text!r}"
        raise ParseError(msg)
    return value


def _parse_iterations(text: str | int) -> int:
    if isinstance(text, int):
        value = text
    else:
        try:
            value = int(text.strip())
        except ValueError as e:
            msg = f"Number of iterations must be an integer, got {text!r}"
            raise ParseError(msg) from e
    if value < 1:
        msg = f"Number of iterations must be at least 1, got {value}"
        raise ParseError(msg)
    return value


def _parse_method(text: str | Method) -> Method:
    try:
        return Method(text.strip().lower())
    except ValueError as e:
        choices = ", ".join(m.value for m in Method)
        msg = f"Unknown method {text!r}, expected one of: {choices}"
        raise ParseError(msg) from e


def parse_run_config(
    expression: str,
    initial_guess: str,
    iterations: str | int,
    method: str | Method = Method.MODIFIED,
    true_root: str = "",
) -> RunConfig:
    """Validate the text fields of a calculator form and build a RunConfig.

    A blank ``true_root`` means no true root was supplied.

    Raises:
        ParseError: If a field is not a valid value.

    """
    expression = expression.strip()
    if not expression:
        msg = "Expression is empty"
        raise ParseError(msg)

    true_root_value = None if not true_root.strip() else _parse_finite_float(true_root, "True root")

    try:
        return RunConfig(
            expression=expression,
            x0=_parse_finite_float(initial_guess, "Initial guess"),
            iterations=_parse_iterations(iterations),
            method=_parse_method(method),
            true_root=true_root_value,
        )
    except ValidationError as e:
        msg = f"Invalid input: {e}"
        raise ParseError(msg) from e
