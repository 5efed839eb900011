"""Run configuration and per-iteration records."""

from dataclasses import dataclass
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field

from ._format import DEFAULT_DECIMALS, format_fixed, format_percent
from ._method import Method

FiniteFloat = Annotated[float, Field(allow_inf_nan=False)]


class RunConfig(BaseModel):
    """Inputs of one engine run.

    Immutable for the duration of the run. When ``true_root`` is not supplied
    the true relative error is computed against ``0.0``.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    expression: Annotated[str, Field(min_length=1)]
    x0: FiniteFloat
    iterations: Annotated[int, Field(ge=1)]
    method: Method = Method.MODIFIED
    true_root: FiniteFloat | None = None

    @property
    def true_root_value(self) -> float:
        """Reference value used for Et."""
        return 0.0 if self.true_root is None else self.true_root


@dataclass(frozen=True, slots=True)
class DisplayRow:
    """An iteration record rendered for display.

    All numbers are rounded strings; ``fppx`` is None for the standard method.
    """

    iteration: int
    x: str
    fx: str
    fpx: str
    fppx: str | None
    x_next: str
    ea: str
    et: str
    formula: str


@dataclass(frozen=True, slots=True)
class IterationRecord:
    """Values of a single iteration, kept at full precision.

    Attributes:
        iteration: 1-based iteration index.
        x: The iterate entering this iteration.
        fx: f(x).
        fpx: f'(x).
        fppx: f''(x), only present for the modified method.
        x_next: The next iterate.
        ea: Approximate relative error in percent, ``|(x_next - x) / x_next| * 100``.
        et: True relative error in percent, ``|(root - x_next) / root| * 100``.
        method: The method that produced this record.

    Any of the values may be non-finite when a division by zero occurred.

    """

    iteration: int
    x: float
    fx: float
    fpx: float
    fppx: float | None
    x_next: float
    ea: float
    et: float
    method: Method

    @property
    def formula(self) -> str:
        """LaTeX label of the update formula used."""
        return self.method.formula

    def display(self, decimals: int = DEFAULT_DECIMALS) -> DisplayRow:
        """Round the values for display."""
        return DisplayRow(
            iteration=self.iteration,
            x=format_fixed(self.x, decimals),
            fx=format_fixed(self.fx, decimals),
            fpx=format_fixed(self.fpx, decimals),
            fppx=None if self.fppx is None else format_fixed(self.fppx, decimals),
            x_next=format_fixed(self.x_next, decimals),
            ea=format_percent(self.ea, decimals),
            et=format_percent(self.et, decimals),
            formula=self.formula,
        )
