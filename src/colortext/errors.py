"""Exception types raised by colortext.

``FormatError`` and ``RangeError`` subclass the built-in exceptions callers
would naturally catch (``ValueError`` and ``IndexError``), so existing
handlers keep working.
"""

from __future__ import annotations


class FormatError(ValueError):
    """Malformed color pattern, malformed markup or unknown format style."""

    def __init__(self, message: str, pattern: str | None = None) -> None:
        self.pattern = pattern
        super().__init__(message)

    def __str__(self) -> str:
        if self.pattern is None:
            return self.args[0]
        return f"{self.args[0]} (got {self.pattern!r})"


class RangeError(IndexError):
    """Index into an annotated string's runs or text is out of bounds."""


class InvariantError(AssertionError):
    """A marker list reached a state normalisation should have prevented.

    Indicates a defect in colortext itself, not caller misuse.
    """
