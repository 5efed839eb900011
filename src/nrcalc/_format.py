"""Display formatting for iteration values.

Rounding happens here and only here; the engine always carries full precision.
"""

import math

DEFAULT_DECIMALS = 2


def format_fixed(value: float, decimals: int = DEFAULT_DECIMALS) -> str:
    """Format a number with a fixed number of decimals.

    Non-finite values are rendered as ``NaN``, ``Infinity`` or ``-Infinity`` so
    they stay visible in a trace instead of being hidden.

    Examples:
        >>> format_fixed(2.1666666)
        '2.17'
        >>> format_fixed(float("inf"))
        'Infinity'
        >>> format_fixed(-0.0)
        '0.00'

    """
    if decimals < 0:
        msg = f"decimals must be non-negative, got {decimals}"
        raise ValueError(msg)
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "Infinity" if value > 0 else "-Infinity"
    if value == 0:
        # Negative zero is displayed as zero
        value = 0.0
    return f"{value:.{decimals}f}"


def format_percent(value: float, decimals: int = DEFAULT_DECIMALS) -> str:
    """Format a relative error given in percent, e.g. ``12.50%`` or ``NaN%``."""
    return f"{format_fixed(value, decimals)}%"
