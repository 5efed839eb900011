"""TOML input and output for runs.

Input files hold a single ``[run]`` table::

    [run]
    expression = "x^2 - 4"
    x0 = 3.0
    iterations = 3
    method = "standard"
    true_root = 2.0  # optional

Exported traces add an ``[[iterations]]`` array of tables with the
full-precision values of every record.
"""

from __future__ import annotations

import logging
import tomllib
from pathlib import Path
from typing import TYPE_CHECKING, Any

import tomli_w
from pydantic import ValidationError

from ._errors import ParseError
from ._models import RunConfig

if TYPE_CHECKING:
    from collections.abc import Sequence

    from ._models import IterationRecord

logger = logging.getLogger(__name__)

RUN_TABLE = "run"
ITERATIONS_TABLE = "iterations"


def load_run_config_from_toml(path: Path) -> RunConfig:
    """Load a run configuration from the ``[run]`` table of a TOML file.

    Raises:
        ParseError: If the file is not valid TOML or the table is missing or invalid.

    """
    with path.open("rb") as f:
        try:
            data = tomllib.load(f)
        except tomllib.TOMLDecodeError as e:
            msg = f"Invalid TOML in {path}: {e}"
            raise ParseError(msg) from e

    run_data = data.get(RUN_TABLE)
    if not isinstance(run_data, dict):
        msg = f"Missing [{RUN_TABLE}] table in {path}"
        raise ParseError(msg)

    try:
        config = RunConfig.model_validate(run_data)
    except ValidationError as e:
        msg = f"Invalid [{RUN_TABLE}] table in {path}: {e}"
        raise ParseError(msg) from e

    logger.debug("Loaded %r from %s", config, path)
    return config


def _record_to_dict(record: IterationRecord) -> dict[str, Any]:
    data: dict[str, Any] = {
        "iteration": record.iteration,
        "x": record.x,
        "fx": record.fx,
        "fpx": record.fpx,
    }
    # TOML has no null; f''(x) is only present for the modified method
    if record.fppx is not None:
        data["fppx"] = record.fppx
    data |= {
        "x_next": record.x_next,
        "ea": record.ea,
        "et": record.et,
        "formula": record.formula,
    }
    return data


def trace_to_dict(config: RunConfig, records: Sequence[IterationRecord]) -> dict[str, Any]:
    """Convert a run and its records to a dictionary suitable for TOML export.

    Non-finite values are kept as floats (``inf``/``nan`` in TOML).
    """
    run_data = config.model_dump(mode="python", exclude_none=True)
    run_data["method"] = config.method.value
    return {
        RUN_TABLE: run_data,
        ITERATIONS_TABLE: [_record_to_dict(record) for record in records],
    }


def export_trace_to_toml(config: RunConfig, records: Sequence[IterationRecord], path: Path) -> None:
    """Write a run and its records to a TOML file."""
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("wb") as f:
        tomli_w.dump(trace_to_dict(config, records), f)
    logger.debug("Exported %d iterations to %s", len(records), path)
