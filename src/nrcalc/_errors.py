"""Exceptions raised by nrcalc."""


class NRCalcError(Exception):
    """Base class for all nrcalc errors."""


class ParseError(NRCalcError, ValueError):
    """Caller-supplied input (initial guess, iteration count, true root, ...) is not valid."""


class EvaluationError(NRCalcError):
    """The expression or one of its derivatives could not be parsed or evaluated.

    Attributes:
        message: The message of the underlying failure.

    """

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message
