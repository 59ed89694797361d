"""Capture heuristics: turn raised exceptions into ExceptionValues.

This module provides the core algorithm for recovering a stack trace from
an exception's traceback and for deriving a display type and message from
the exception's textual rendering.
"""

import logging
import traceback
from types import TracebackType

from . import sexp
from .errors import Error, RawException, find_backtrace
from .exceptions import RenderingMismatch, SexpParseError
from .models import ExceptionValue, Frame
from .rendering import exception_to_string, short_type_name

logger = logging.getLogger(__name__)

WRAPPED_ERROR_TYPE = "Error"


class ExceptionCapture:
    """Derives ExceptionValues from exceptions and wrapped errors.

    Pure functions over the exception objects.
    All methods are static as the class carries no state.
    """

    @staticmethod
    def stacktrace(tb: TracebackType | None) -> tuple[Frame, ...]:
        """Convert a traceback into frames, oldest call first.

        A traceback chain already runs from the frame that caught the
        exception down to the raise site, so no reordering is needed.
        Entries without a filename or line number are dropped.
        """
        if tb is None:
            return ()
        frames = []
        for entry in traceback.extract_tb(tb):
            if not entry.filename or entry.lineno is None:
                continue
            frames.append(
                Frame.make_exn(
                    filename=entry.filename,
                    lineno=entry.lineno,
                    colno=entry.colno,
                )
            )
        return tuple(frames)

    @staticmethod
    def _matches(head: sexp.Sexp, type_name: str) -> bool:
        return isinstance(head, sexp.Atom) and head.text.endswith(type_name)

    @staticmethod
    def value_from_sexp(parsed: sexp.Sexp, type_name: str) -> str | None:
        """Extract the display message from a parsed exception rendering.

        Raises:
            RenderingMismatch: If the rendering does not start with the
                exception's type name.
        """
        if isinstance(parsed, sexp.Atom):
            # Argument-less exceptions render as their bare name.
            if ExceptionCapture._matches(parsed, type_name):
                return None
        elif parsed.items and ExceptionCapture._matches(parsed.items[0], type_name):
            rest = parsed.items[1:]
            if not rest:
                return None
            if len(rest) == 1 and isinstance(rest[0], sexp.Atom):
                return rest[0].text
            return sexp.to_string(sexp.SexpList(rest))
        raise RenderingMismatch(
            f"rendering {sexp.to_string(parsed)!r} does not start with {type_name!r}"
        )

    @staticmethod
    def derive_value(rendered: str, type_name: str) -> str | None:
        """Best-effort display message for an exception rendering.

        Structured renderings are taken apart; anything else, including
        renderings nested too deeply to parse, is returned unmodified.
        """
        try:
            parsed = sexp.parse(rendered)
        except (SexpParseError, RecursionError):
            return rendered
        try:
            return ExceptionCapture.value_from_sexp(parsed, type_name)
        except RenderingMismatch as e:
            logger.warning(
                f"Falling back to raw exception text: {e}",
                extra={"type_name": type_name},
            )
            return rendered

    @staticmethod
    def from_exception(exc: BaseException) -> ExceptionValue:
        """Capture an exception together with its traceback.

        Call this from the handler that caught ``exc``, so the traceback
        still describes where it was raised. An exception that cannot be
        rendered is reported as ``<unprintable Type object>``.
        """
        type_name = short_type_name(exc)
        try:
            rendered = exception_to_string(exc)
        except Exception as e:
            logger.warning(
                f"Could not render {type_name}: {e!r}",
                extra={"type_name": type_name},
            )
            value: str | None = f"<unprintable {type_name} object>"
        else:
            value = ExceptionCapture.derive_value(rendered, type_name)
        return ExceptionValue(
            type=type_name,
            value=value,
            stacktrace=ExceptionCapture.stacktrace(exc.__traceback__),
        )

    @staticmethod
    def from_error(error: Error) -> ExceptionValue:
        """Capture a wrapped error.

        An error that is just a wrapped exception is captured as that
        exception. Anything else becomes a generic ``Error`` entry without
        frames: an attached backtrace is only available as text, and its
        text stays in the rendered value rather than being parsed into
        frames.
        """
        if isinstance(error.info, RawException):
            return ExceptionCapture.from_exception(error.info.exc)
        backtrace = find_backtrace(error.info)
        if backtrace is not None:
            logger.debug("Wrapped error carries a backtrace that is not converted to frames")
        return ExceptionValue(type=WRAPPED_ERROR_TYPE, value=error.to_string_hum())


def capture_exception(exc: BaseException) -> ExceptionValue:
    """Capture an exception. See :meth:`ExceptionCapture.from_exception`."""
    return ExceptionCapture.from_exception(exc)


def capture_error(error: Error) -> ExceptionValue:
    """Capture a wrapped error. See :meth:`ExceptionCapture.from_error`."""
    return ExceptionCapture.from_error(error)
