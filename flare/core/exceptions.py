"""Exceptions raised by the Flare core."""


class FlareError(Exception):
    """Base class for Flare errors."""


class MissingLocationInfo(FlareError, ValueError):
    """Raised when a Frame has no filename, function or module."""


class SexpParseError(FlareError, ValueError):
    """Raised when text is not a single well-formed s-expression."""


class RenderingMismatch(AssertionError):
    """An exception rendering parsed but did not start with its type name.

    Signals a broken assumption inside capture rather than a user error.
    """
