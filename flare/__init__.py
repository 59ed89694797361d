"""Flare: capture Python errors and report them to an error-tracking service.

The module-level capture functions report through the reporter installed
with :func:`use_reporter`. With no reporter installed they do nothing.
"""

import logging
import uuid
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

from flare._version import __version__
from flare.core.errors import Error, try_with
from flare.core.models import Event, ExceptionValue, Frame, Mechanism, Platform, SeverityLevel
from flare.core.reporter import ContextOutcome, Reporter
from flare.core.scope import current_reporter, use_reporter

logger = logging.getLogger(__name__)


async def capture_message(message: str, **kwargs: Any) -> uuid.UUID | None:
    """Report a message through the current reporter."""
    reporter = current_reporter()
    if reporter is None:
        logger.debug("No reporter installed, dropping message")
        return None
    return await reporter.capture_message(message, **kwargs)


async def capture_exception(exc: BaseException, **kwargs: Any) -> uuid.UUID | None:
    """Report a caught exception through the current reporter."""
    reporter = current_reporter()
    if reporter is None:
        logger.debug("No reporter installed, dropping exception")
        return None
    return await reporter.capture_exception(exc, **kwargs)


async def capture_error(error: Error, **kwargs: Any) -> uuid.UUID | None:
    """Report a wrapped error through the current reporter."""
    reporter = current_reporter()
    if reporter is None:
        logger.debug("No reporter installed, dropping error")
        return None
    return await reporter.capture_error(error, **kwargs)


@asynccontextmanager
async def context(**kwargs: Any) -> AsyncIterator[ContextOutcome]:
    """Report any exception escaping the block, then re-raise it.

    The yielded outcome carries the event id once the exception has been
    delivered through the current reporter.
    """
    outcome = ContextOutcome()
    try:
        yield outcome
    except Exception as e:
        outcome.event_id = await capture_exception(e, **kwargs)
        raise


__all__ = [
    "ContextOutcome",
    "Error",
    "Event",
    "ExceptionValue",
    "Frame",
    "Mechanism",
    "Platform",
    "Reporter",
    "SeverityLevel",
    "__version__",
    "capture_error",
    "capture_exception",
    "capture_message",
    "context",
    "current_reporter",
    "try_with",
    "use_reporter",
]
