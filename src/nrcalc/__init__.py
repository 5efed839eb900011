"""Fixed-length Newton-Raphson iteration traces."""

__all__ = [
    "EXAMPLES",
    "DisplayRow",
    "EvaluationError",
    "ExampleProblem",
    "ExpressionEvaluator",
    "IterationRecord",
    "Method",
    "NRCalcError",
    "ParseError",
    "RunConfig",
    "SympyEvaluator",
    "SympyExpression",
    "export_trace_to_toml",
    "format_fixed",
    "format_percent",
    "get_example",
    "load_run_config_from_toml",
    "parse_run_config",
    "run",
    "trace_to_dict",
]

from ._engine import run
from ._errors import EvaluationError, NRCalcError, ParseError
from ._evaluator import ExpressionEvaluator, SympyEvaluator, SympyExpression
from ._examples import EXAMPLES, ExampleProblem, get_example
from ._format import format_fixed, format_percent
from ._io import export_trace_to_toml, load_run_config_from_toml, trace_to_dict
from ._method import Method
from ._models import DisplayRow, IterationRecord, RunConfig
from ._parse import parse_run_config
