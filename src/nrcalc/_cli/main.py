import logging
from pathlib import Path
from typing import Annotated

import tomli_w
import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.panel import Panel

from nrcalc._engine import VARIABLE, run
from nrcalc._errors import EvaluationError, ParseError
from nrcalc._evaluator import SympyEvaluator
from nrcalc._examples import EXAMPLES, get_example
from nrcalc._io import RUN_TABLE, export_trace_to_toml, load_run_config_from_toml
from nrcalc._models import RunConfig
from nrcalc._parse import parse_run_config

from .config import ConfigError, NRCalcConfig, get_config
from .render import build_examples_table, build_trace_table

app = typer.Typer()

logger = logging.getLogger(__name__)
# Console for stderr (info/errors)
err_console = Console(stderr=True)
# Console for stdout (results)
out_console = Console()


@app.callback()
def callback(
    *,
    verbose: bool = typer.Option(default=False, help="Enable verbose output"),
) -> None:
    """Newton-Raphson iteration calculator."""
    log_level = logging.DEBUG if verbose else logging.INFO

    # Configure rich logging handler to output to stderr
    logging.basicConfig(
        level=log_level,
        format="%(message)s",
        handlers=[
            RichHandler(
                console=err_console,
                show_time=False,
                show_path=verbose,
                rich_tracebacks=True,
            ),
        ],
    )


def _fail(message: str) -> typer.Exit:
    err_console.print(f"[red]Error: {escape(message)}[/red]")
    return typer.Exit(code=1)


def _load_settings() -> NRCalcConfig:
    try:
        return get_config()
    except ConfigError as e:
        raise _fail(str(e)) from e


def _resolve_run_config(  # noqa: PLR0913
    settings: NRCalcConfig,
    *,
    expression: str | None,
    x0: str | None,
    iterations: int | None,
    method: str | None,
    true_root: str,
    input_path: Path | None,
    example_number: int | None,
) -> RunConfig:
    """Build the run configuration from exactly one source: expression, input file or example."""
    sources = [s for s in (expression, input_path, example_number) if s is not None]
    if len(sources) != 1:
        msg = "Provide exactly one of EXPRESSION, --input or --example"
        raise ParseError(msg)

    if input_path is not None:
        err_console.print(f"[cyan]Loading input from:[/cyan] {input_path}")
        return load_run_config_from_toml(input_path)

    if example_number is not None:
        try:
            example = get_example(example_number)
        except KeyError as e:
            raise ParseError(e.args[0]) from e
        err_console.print(f"[cyan]Loading example:[/cyan] {example.title} ({escape(example.description)})")
        return parse_run_config(
            example.expression,
            repr(example.initial_guess),
            iterations if iterations is not None else settings.iterations,
            method if method is not None else example.method,
            true_root,
        )

    if expression is None or x0 is None:
        msg = "An initial guess (--x0) is required"
        raise ParseError(msg)

    return parse_run_config(
        expression,
        x0,
        iterations if iterations is not None else settings.iterations,
        method if method is not None else settings.method,
        true_root,
    )


def _print_derivatives(evaluator: SympyEvaluator, config: RunConfig) -> None:
    f = evaluator.parse(config.expression)
    f_prime = evaluator.differentiate(f, VARIABLE)
    lines = [
        f"[cyan]f(x)[/cyan]   = {escape(evaluator.to_text(f))}",
        f"[cyan]f'(x)[/cyan]  = {escape(evaluator.to_text(f_prime))}",
    ]
    if config.method.uses_second_derivative:
        f_double_prime = evaluator.differentiate(f_prime, VARIABLE)
        lines.append(f"[cyan]f''(x)[/cyan] = {escape(evaluator.to_text(f_double_prime))}")
    lines.append(f"[cyan]Update[/cyan] {escape(config.method.formula)}")
    out_console.print(Panel("\n".join(lines), title="[bold]Problem[/bold]", border_style="cyan"))


@app.command(name="run")
def run_command(  # noqa: PLR0913
    expression: Annotated[
        str | None,
        typer.Argument(help="Function of x, e.g. '12*x^3 - 30*x^2 - 84*x + 48'"),
    ] = None,
    *,
    x0: Annotated[
        str | None,
        typer.Option("--x0", help="Initial guess"),
    ] = None,
    iterations: Annotated[
        int | None,
        typer.Option("-n", "--iterations", help="Number of iterations to perform"),
    ] = None,
    method: Annotated[
        str | None,
        typer.Option("-m", "--method", help="Update formula: 'standard' or 'modified'"),
    ] = None,
    true_root: Annotated[
        str,
        typer.Option("--true-root", help="Known root used for the true error Et (Et uses 0 when omitted)"),
    ] = "",
    input: Annotated[  # noqa: A002
        Path | None,
        typer.Option("-i", "--input", help="Path to input TOML file with a [run] table"),
    ] = None,
    example: Annotated[
        int | None,
        typer.Option("--example", help="Number of a built-in example (see 'nrcalc examples')"),
    ] = None,
    output: Annotated[
        Path | None,
        typer.Option("-o", "--output", help="Path to output TOML file for the trace"),
    ] = None,
    decimals: Annotated[
        int | None,
        typer.Option("--decimals", min=0, help="Decimals shown in the table"),
    ] = None,
) -> None:
    """Perform a fixed number of Newton-Raphson iterations and show every step."""
    settings = _load_settings()

    try:
        config = _resolve_run_config(
            settings,
            expression=expression,
            x0=x0,
            iterations=iterations,
            method=method,
            true_root=true_root,
            input_path=input,
            example_number=example,
        )
        logger.debug("Run configuration: %r", config)
        evaluator = SympyEvaluator(VARIABLE)
        records = run(config, evaluator)
    except (ParseError, EvaluationError) as e:
        raise _fail(str(e)) from e

    _print_derivatives(evaluator, config)

    shown_decimals = decimals if decimals is not None else settings.decimals
    out_console.print(build_trace_table(records, config.method, shown_decimals))

    if config.true_root is None:
        err_console.print("[dim]No true root given: Et is computed against 0.[/dim]")

    if output is not None:
        err_console.print(f"[cyan]Exporting trace to:[/cyan] {output}")
        export_trace_to_toml(config, records, output)
        err_console.print("[green]✓ Trace exported[/green]")


@app.command()
def examples() -> None:
    """List the built-in example problems."""
    out_console.print(build_examples_table(EXAMPLES))


@app.command()
def init(
    *,
    output: Annotated[
        Path,
        typer.Option("-o", "--output", help="Path to output TOML file"),
    ],
    example: Annotated[
        int,
        typer.Option("--example", help="Number of the example to start from"),
    ] = 1,
    iterations: Annotated[
        int,
        typer.Option("-n", "--iterations", min=1, help="Number of iterations"),
    ] = 3,
) -> None:
    """Generate a sample input TOML file from an example problem."""
    try:
        config = get_example(example).to_config(iterations=iterations)
    except KeyError as e:
        raise _fail(e.args[0]) from e

    err_console.print(f"[cyan]Writing sample input to:[/cyan] {output}")
    output.parent.mkdir(parents=True, exist_ok=True)
    with output.open("wb") as f:
        tomli_w.dump({RUN_TABLE: config.model_dump(mode="json", exclude_none=True)}, f)

    err_console.print("[green]✓ Sample input file generated[/green]")


def main() -> None:
    app()
