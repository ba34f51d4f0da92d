"""
Exception hierarchy for ZeroDXC.

Every error raised for bad user input is a ``ValueError`` so callers that
only care about "the arguments were wrong" can keep catching that.
"""


class ZeroDXCError(ValueError):
    """Base class for all ZeroDXC errors."""


class ConfigurationError(ZeroDXCError):
    """Bad or missing run parameters (columns, widths, counts)."""


class InputConsistencyError(ZeroDXCError):
    """Unreadable input, ragged columns or too few sequences."""


class WindowingError(ZeroDXCError):
    """Window settings that leave no valid window position."""


class OutputError(ZeroDXCError, OSError):
    """A computed diagram could not be written."""
