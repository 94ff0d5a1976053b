"""
Exceptions raised by the sense ranking core.

    SenseRankError (base)
    ├── ConfigurationError - invalid RankConfig values
    ├── NumericDegeneracyError - zero normalizer met during an update
    └── GraphFormatError - malformed .senses text
"""


class SenseRankError(Exception):
    """Base exception for all senserank errors."""

    def __init__(self, message: str, cause: Exception | None = None):
        super().__init__(message)
        self.cause = cause

    def __str__(self) -> str:
        if self.cause:
            return f"{super().__str__()} (caused by: {self.cause})"
        return super().__str__()


class ConfigurationError(SenseRankError):
    """A RankConfig field is outside its valid range."""


class NumericDegeneracyError(SenseRankError, ArithmeticError):
    """
    A neighbor's incoming weight sum was zero while updating a sense.

    Only raised when RankConfig.on_degenerate == "raise".
    """

    def __init__(self, sense_ref: str, neighbor_ref: str):
        super().__init__(
            f"incoming weight of {neighbor_ref} is zero while updating {sense_ref}"
        )
        self.sense_ref = sense_ref
        self.neighbor_ref = neighbor_ref


class GraphFormatError(SenseRankError, ValueError):
    """Malformed sense graph text."""

    def __init__(self, message: str, line_no: int | None = None):
        if line_no is not None:
            message = f"line {line_no}: {message}"
        super().__init__(message)
        self.line_no = line_no
