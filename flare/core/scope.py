"""Scoped current reporter.

Application code that cannot pass a Reporter around explicitly installs
one for the duration of a block with :func:`use_reporter`. The previous
reporter is restored when the block exits, however it exits. The value
lives in a ContextVar, so concurrent asyncio tasks keep separate scopes.
"""

from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar

from .reporter import Reporter

_CURRENT_REPORTER: ContextVar[Reporter | None] = ContextVar(
    "flare_current_reporter", default=None
)


def current_reporter() -> Reporter | None:
    """Return the reporter installed for the current scope, if any."""
    return _CURRENT_REPORTER.get()


@contextmanager
def use_reporter(reporter: Reporter | None) -> Iterator[Reporter | None]:
    """Install ``reporter`` as the current reporter for the block.

    Passing None disables reporting inside the block.
    """
    token = _CURRENT_REPORTER.set(reporter)
    try:
        yield reporter
    finally:
        _CURRENT_REPORTER.reset(token)
