"""Configuration loading from pyproject.toml."""

import tomllib
from dataclasses import dataclass
from pathlib import Path

from nrcalc._format import DEFAULT_DECIMALS
from nrcalc._method import Method

DEFAULT_ITERATIONS = 3
DEFAULT_METHOD = Method.MODIFIED


class ConfigError(Exception):
    """Error in nrcalc configuration."""


@dataclass(slots=True, frozen=True)
class NRCalcConfig:
    """Defaults for the command-line interface, loaded from ``[tool.nrcalc]``.

    Values given on the command line take precedence over these.
    """

    method: Method = DEFAULT_METHOD
    iterations: int = DEFAULT_ITERATIONS
    decimals: int = DEFAULT_DECIMALS
    project_root: Path | None = None


def find_pyproject_toml(start_dir: Path | None = None) -> Path | None:
    """Find pyproject.toml by walking up from start_dir.

    Args:
        start_dir: Starting directory. Defaults to current working directory.

    Returns:
        Path to pyproject.toml if found, None otherwise.

    """
    if start_dir is None:
        start_dir = Path.cwd()

    current = start_dir.resolve()

    while True:
        candidate = current / "pyproject.toml"
        if candidate.is_file():
            return candidate
        parent = current.parent
        if parent == current:
            return None
        current = parent


def _parse_method(value: object) -> Method:
    if not isinstance(value, str):
        msg = "Invalid [tool.nrcalc].method: expected string"
        raise ConfigError(msg)
    try:
        return Method(value.lower())
    except ValueError as e:
        choices = ", ".join(m.value for m in Method)
        msg = f"Invalid [tool.nrcalc].method '{value}'. Expected one of: {choices}"
        raise ConfigError(msg) from e


def _parse_int(value: object, key: str, minimum: int) -> int:
    # bool is an int subclass but never a valid count
    if not isinstance(value, int) or isinstance(value, bool):
        msg = f"Invalid [tool.nrcalc].{key}: expected integer"
        raise ConfigError(msg)
    if value < minimum:
        msg = f"Invalid [tool.nrcalc].{key}: must be at least {minimum}, got {value}"
        raise ConfigError(msg)
    return value


def load_config(pyproject_path: Path) -> NRCalcConfig:
    """Load and validate [tool.nrcalc] config from pyproject.toml.

    Args:
        pyproject_path: Path to pyproject.toml

    Returns:
        Parsed NRCalcConfig

    Raises:
        ConfigError: If the configuration is invalid

    """
    project_root = pyproject_path.parent

    with pyproject_path.open("rb") as f:
        try:
            data = tomllib.load(f)
        except tomllib.TOMLDecodeError as e:
            msg = f"Invalid TOML in {pyproject_path}: {e}"
            raise ConfigError(msg) from e

    section = data.get("tool", {}).get("nrcalc", {})
    if not section:
        return NRCalcConfig(project_root=project_root)

    unknown = sorted(set(section) - {"method", "iterations", "decimals"})
    if unknown:
        msg = f"Unknown [tool.nrcalc] keys: {', '.join(unknown)}"
        raise ConfigError(msg)

    method = _parse_method(section["method"]) if "method" in section else DEFAULT_METHOD
    iterations = _parse_int(section["iterations"], "iterations", 1) if "iterations" in section else DEFAULT_ITERATIONS
    decimals = _parse_int(section["decimals"], "decimals", 0) if "decimals" in section else DEFAULT_DECIMALS

    return NRCalcConfig(
        method=method,
        iterations=iterations,
        decimals=decimals,
        project_root=project_root,
    )


def get_config() -> NRCalcConfig:
    """Get config from pyproject.toml in current directory or parents.

    Returns:
        NRCalcConfig (built-in defaults if no pyproject.toml or no [tool.nrcalc] section)

    """
    pyproject_path = find_pyproject_toml()
    if pyproject_path is None:
        return NRCalcConfig()
    return load_config(pyproject_path)
