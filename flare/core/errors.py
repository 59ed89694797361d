"""Wrapped error values.

An :class:`Error` carries a tree of context around an optional underlying
exception: plain messages, tags (with or without an extra argument),
attached backtraces and combinations of several errors. Code that prefers
returning errors to raising them can build one with :func:`try_with` and
still report it through :func:`flare.core.capture.capture_error`.
"""

import logging
import traceback
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from typing import Any, Generic, TypeAlias, TypeVar

from . import sexp
from .rendering import exception_to_sexp, exception_to_string

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Deep enough for any hand-built error, shallow enough to never exhaust memory.
MAX_SEARCH_DEPTH = 1000


@dataclass(frozen=True)
class StringInfo:
    """A plain message."""

    message: str


@dataclass(frozen=True)
class RawException:
    """An underlying exception."""

    exc: BaseException


@dataclass(frozen=True)
class Tagged:
    """A child error annotated with a tag."""

    tag: str
    child: "ErrorInfo"


@dataclass(frozen=True)
class TaggedWithArg:
    """A child error annotated with a tag and an extra argument."""

    tag: str
    arg: Any
    child: "ErrorInfo"


@dataclass(frozen=True)
class WithBacktrace:
    """A child error with the formatted backtrace it was raised with."""

    child: "ErrorInfo"
    backtrace: str


@dataclass(frozen=True)
class Combined:
    """Several errors reported together."""

    children: tuple["ErrorInfo", ...]


ErrorInfo: TypeAlias = (
    StringInfo | RawException | Tagged | TaggedWithArg | WithBacktrace | Combined
)


def _children(info: ErrorInfo) -> tuple[ErrorInfo, ...]:
    if isinstance(info, Tagged | TaggedWithArg | WithBacktrace):
        return (info.child,)
    if isinstance(info, Combined):
        return info.children
    raise TypeError(f"not an error info node: {info!r}")


def info_to_sexp(info: ErrorInfo) -> sexp.Sexp:
    """Render an error-info tree as an s-expression.

    Uses an explicit stack, so arbitrarily deep chains of tags render
    without hitting the interpreter's recursion limit.
    """
    done: list[sexp.Sexp] = []
    stack: list[tuple[ErrorInfo, bool]] = [(info, False)]
    while stack:
        node, expanded = stack.pop()
        if isinstance(node, StringInfo):
            done.append(sexp.Atom(node.message))
            continue
        if isinstance(node, RawException):
            structured = exception_to_sexp(node.exc)
            done.append(structured if structured is not None else sexp.Atom(str(node.exc)))
            continue
        children = _children(node)
        if not expanded:
            stack.append((node, True))
            stack.extend((c, False) for c in reversed(children))
            continue
        # Children were rendered in order onto the end of ``done``.
        split = len(done) - len(children)
        rendered = tuple(done[split:])
        del done[split:]
        if isinstance(node, Tagged):
            done.append(sexp.SexpList((sexp.Atom(node.tag), *rendered)))
        elif isinstance(node, TaggedWithArg):
            done.append(sexp.SexpList((sexp.Atom(node.tag), sexp.of_value(node.arg), *rendered)))
        elif isinstance(node, WithBacktrace):
            done.append(sexp.SexpList((*rendered, sexp.Atom(node.backtrace))))
        else:
            done.append(sexp.SexpList(rendered))
    return done[0]


def find_backtrace(info: ErrorInfo, max_depth: int = MAX_SEARCH_DEPTH) -> str | None:
    """Return the first backtrace attached anywhere in the tree.

    Walks tags and combinations in their nesting order using an explicit
    stack. Nodes nested deeper than ``max_depth`` are not visited; a
    warning is logged when that cuts part of the tree off.
    """
    truncated = False
    stack: list[tuple[ErrorInfo, int]] = [(info, 0)]
    while stack:
        node, depth = stack.pop()
        if depth > max_depth:
            truncated = True
            continue
        if isinstance(node, WithBacktrace):
            return node.backtrace
        if isinstance(node, Tagged | TaggedWithArg):
            stack.append((node.child, depth + 1))
        elif isinstance(node, Combined):
            # Reversed so the first child is popped first.
            stack.extend((c, depth + 1) for c in reversed(node.children))
    if truncated:
        logger.warning(f"Backtrace search stopped at depth {max_depth}")
    return None


@dataclass(frozen=True)
class Error:
    """A wrapped error value."""

    info: ErrorInfo

    @classmethod
    def of_string(cls, message: str) -> "Error":
        return cls(StringInfo(message))

    @classmethod
    def of_exception(cls, exc: BaseException, with_backtrace: bool = False) -> "Error":
        """Wrap an exception, optionally keeping its formatted traceback."""
        info: ErrorInfo = RawException(exc)
        if with_backtrace and exc.__traceback__ is not None:
            backtrace = "".join(traceback.format_tb(exc.__traceback__))
            info = WithBacktrace(info, backtrace)
        return cls(info)

    @classmethod
    def combine(cls, errors: Iterable["Error"]) -> "Error":
        return cls(Combined(tuple(e.info for e in errors)))

    def tag(self, tag: str) -> "Error":
        return Error(Tagged(tag, self.info))

    def tag_arg(self, tag: str, arg: Any) -> "Error":
        return Error(TaggedWithArg(tag, arg, self.info))

    def with_backtrace(self, backtrace: str) -> "Error":
        return Error(WithBacktrace(self.info, backtrace))

    def to_string_hum(self) -> str:
        """Human-readable rendering.

        A bare message renders as itself; anything structured renders as
        an s-expression.
        """
        if isinstance(self.info, StringInfo):
            return self.info.message
        if isinstance(self.info, RawException):
            return exception_to_string(self.info.exc)
        return sexp.to_string(info_to_sexp(self.info))

    def __str__(self) -> str:
        return self.to_string_hum()


@dataclass(frozen=True)
class Ok(Generic[T]):
    """A successful result from :func:`try_with`."""

    value: T


def try_with(fn: Callable[[], T]) -> Ok[T] | Error:
    """Call ``fn``, turning any exception it raises into an :class:`Error`."""
    try:
        return Ok(fn())
    except Exception as e:
        return Error.of_exception(e)
