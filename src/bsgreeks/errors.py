"""Exception types raised by the pricing engine."""

from __future__ import annotations

__all__ = ["BSGreeksError", "InvalidParameter", "NumericOverflow"]


class BSGreeksError(Exception):
    """Base class for every error raised by ``bsgreeks``."""


class InvalidParameter(BSGreeksError, ValueError):
    """A contract input makes d1/d2 (or the payoff selector) undefined.

    Subclasses ``ValueError`` so callers catching the plain built-in keep
    working.
    """

    def __init__(self, name: str, value, reason: str = "must be positive"):
        self.name = name
        self.value = value
        super().__init__(f"{name} {reason}, got {value!r}")


class NumericOverflow(BSGreeksError, ArithmeticError):
    """An intermediate or final value left the double-precision range."""
