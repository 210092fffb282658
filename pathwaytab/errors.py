"""Exceptions raised while building a pathway factor graph."""

from __future__ import annotations


class PathwayError(Exception):
    """Base class for every error raised by pathwaytab."""


class FormatError(PathwayError, ValueError):
    """An input line has the wrong number of fields."""

    def __init__(self, source: str, line_number: int, expected: str, found: int) -> None:
        self.source = source
        self.line_number = line_number
        self.expected = expected
        self.found = found
        super().__init__(
            f"{source} line {line_number}: expected {expected} fields, found {found}"
        )


class UnknownInteractionError(PathwayError, LookupError):
    """An interaction symbol is not present in the interaction map."""

    def __init__(self, symbol: str) -> None:
        self.symbol = symbol
        super().__init__(f"unrecognized interaction type: {symbol!r}")


class FactorTableError(PathwayError, AssertionError):
    """A generated table does not match its variables' cardinality product.

    This is an internal invariant violation, not a user input problem.
    """
