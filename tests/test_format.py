import math

import pytest

from nrcalc._format import format_fixed, format_percent


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        (2.1666666666666665, "2.17"),
        (2.0, "2.00"),
        (-1.0898203592814371, "-1.09"),
        (90.0, "90.00"),
        (0.004, "0.00"),
        (-0.0, "0.00"),
        (1234567.891, "1234567.89"),
        (math.inf, "Infinity"),
        (-math.inf, "-Infinity"),
        (math.nan, "NaN"),
    ],
)
def test_format_fixed(value: float, expected: str) -> None:
    assert format_fixed(value) == expected


def test_format_fixed_decimals() -> None:
    assert format_fixed(math.pi, 0) == "3"
    assert format_fixed(math.pi, 5) == "3.14159"


def test_format_fixed_rejects_negative_decimals() -> None:
    with pytest.raises(ValueError, match="non-negative"):
        format_fixed(1.0, -1)


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        (38.46153846153846, "38.46%"),
        (0.0, "0.00%"),
        (math.inf, "Infinity%"),
        (math.nan, "NaN%"),
    ],
)
def test_format_percent(value: float, expected: str) -> None:
    assert format_percent(value) == expected
