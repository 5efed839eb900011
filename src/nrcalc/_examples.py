"""Example problems that can be loaded into a run."""

from dataclasses import dataclass

from ._method import Method
from ._models import RunConfig


@dataclass(frozen=True, slots=True)
class ExampleProblem:
    """A ready-made problem for demonstrating the methods."""

    title: str
    expression: str
    initial_guess: float
    method: Method
    description: str

    def to_config(self, iterations: int = 3, true_root: float | None = None) -> RunConfig:
        """Create a run configuration for this example."""
        return RunConfig(
            expression=self.expression,
            x0=self.initial_guess,
            iterations=iterations,
            method=self.method,
            true_root=true_root,
        )


EXAMPLES: tuple[ExampleProblem, ...] = (
    ExampleProblem(
        title="Example 1",
        expression="12*x^3 - 30*x^2 - 84*x + 48",
        initial_guess=-1.0,
        method=Method.MODIFIED,
        description="Finding root of cubic equation",
    ),
    ExampleProblem(
        title="Example 2",
        expression="x^2 - 4",
        initial_guess=3.0,
        method=Method.STANDARD,
        description="Finding square root of 4",
    ),
    ExampleProblem(
        title="Example 3",
        expression="exp(x) - 3*x",
        initial_guess=1.0,
        method=Method.MODIFIED,
        description="Exponential equation",
    ),
)


def get_example(number: int) -> ExampleProblem:
    """Get an example by its 1-based number.

    Raises:
        KeyError: If there is no example with that number.

    """
    if not 1 <= number <= len(EXAMPLES):
        msg = f"No example {number}, choose 1 to {len(EXAMPLES)}"
        raise KeyError(msg)
    return EXAMPLES[number - 1]
