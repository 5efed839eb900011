"""Root-finding update formulas."""

from enum import StrEnum, unique
from typing import Self


@unique
class Method(StrEnum):
    """Newton-Raphson variant used to compute the next iterate.

    Each member carries a docstring, a human readable label and the LaTeX
    form of its update formula.
    """

    STANDARD = (
        "standard",
        "Standard Newton-Raphson",
        r"x_{i+1} = x_i - \frac{f(x_i)}{f'(x_i)}",
        "First-derivative update.",
    )
    MODIFIED = (
        "modified",
        "Modified Newton-Raphson",
        r"x_{i+1} = x_i - \frac{f(x_i) \cdot f'(x_i)}{[f'(x_i)]^2 - f(x_i) \cdot f''(x_i)}",
        "First- and second-derivative update, quadratically convergent near multiple roots.",
    )

    label: str
    formula: str

    def __new__(cls, value: str, label: str, formula: str, doc: str = "") -> Self:
        """Create a new enum member with its label, formula and docstring."""
        obj = str.__new__(cls, value)
        obj._value_ = value
        obj.label = label
        obj.formula = formula
        obj.__doc__ = doc
        return obj

    @property
    def uses_second_derivative(self) -> bool:
        """Whether the update needs f''(x)."""
        return self is Method.MODIFIED
