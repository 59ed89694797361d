"""Reporter: builds events from captures and hands them to a transport.

Implements ReportingPort. Events are always built synchronously at the
call site, before any await, so exception tracebacks are read while the
handler that caught them is still running.
"""

import logging
import uuid
from collections.abc import AsyncIterator, Mapping, Sequence
from contextlib import asynccontextmanager
from dataclasses import dataclass

from .capture import ExceptionCapture
from .errors import Error
from .models import Event, ExceptionValue, Message, SeverityLevel
from .ports import ReportingPort, TransportPort

logger = logging.getLogger(__name__)


@dataclass
class ContextOutcome:
    """What happened to an exception that escaped a reporting context."""

    event_id: uuid.UUID | None = None


class Reporter(ReportingPort):
    """Reports incidents through a transport, adding configured defaults."""

    def __init__(
        self,
        transport: TransportPort,
        environment: str | None = None,
        release: str | None = None,
        server_name: str | None = None,
        tags: Mapping[str, str] | None = None,
        modules: Mapping[str, str] | None = None,
    ):
        """Initialize the reporter.

        Args:
            transport: TransportPort implementation that delivers events.
            environment: Environment name added to every event.
            release: Release identifier added to every event.
            server_name: Server name added to every event.
            tags: Tags added to every event. Tags passed to a capture call
                take precedence.
            modules: Module versions added to every event.
        """
        self.transport = transport
        self.environment = environment
        self.release = release
        self.server_name = server_name
        self.tags = dict(tags or {})
        self.modules = dict(modules or {})

    def build_event(
        self,
        exceptions: Sequence[ExceptionValue] | None = None,
        message: str | None = None,
        level: SeverityLevel | None = None,
        tags: Mapping[str, str] | None = None,
        extra: Mapping[str, str] | None = None,
        fingerprint: Sequence[str] | None = None,
    ) -> Event:
        """Assemble an event from capture results and reporter defaults."""
        return Event(
            level=level,
            server_name=self.server_name,
            release=self.release,
            tags={**self.tags, **(tags or {})},
            environment=self.environment,
            modules=self.modules,
            extra=extra,
            fingerprint=fingerprint,
            exception=exceptions,
            message=Message(message=message) if message is not None else None,
        )

    async def send(self, event: Event) -> uuid.UUID | None:
        """Deliver an event, logging instead of raising on failure."""
        try:
            remote_id = await self.transport.send(event)
        except Exception as e:
            logger.error(
                f"Failed to deliver event {event.event_id.hex}: {e}",
                exc_info=True,
                extra={"event_id": event.event_id.hex},
            )
            return None

        logger.info(
            f"Delivered event {event.event_id.hex}",
            extra={"event_id": event.event_id.hex, "remote_id": remote_id},
        )
        return event.event_id

    async def capture_message(
        self,
        message: str,
        level: SeverityLevel | None = None,
        tags: Mapping[str, str] | None = None,
        extra: Mapping[str, str] | None = None,
        fingerprint: Sequence[str] | None = None,
    ) -> uuid.UUID | None:
        event = self.build_event(
            message=message,
            level=level,
            tags=tags,
            extra=extra,
            fingerprint=fingerprint,
        )
        return await self.send(event)

    async def capture_exception(
        self,
        exc: BaseException,
        message: str | None = None,
        level: SeverityLevel | None = SeverityLevel.ERROR,
        tags: Mapping[str, str] | None = None,
        extra: Mapping[str, str] | None = None,
        fingerprint: Sequence[str] | None = None,
    ) -> uuid.UUID | None:
        try:
            captured = ExceptionCapture.from_exception(exc)
        except Exception as e:
            logger.error(f"Failed to capture {type(exc).__name__}: {e!r}", exc_info=True)
            return None
        event = self.build_event(
            exceptions=[captured],
            message=message,
            level=level,
            tags=tags,
            extra=extra,
            fingerprint=fingerprint,
        )
        return await self.send(event)

    async def capture_error(
        self,
        error: Error,
        message: str | None = None,
        level: SeverityLevel | None = SeverityLevel.ERROR,
        tags: Mapping[str, str] | None = None,
        extra: Mapping[str, str] | None = None,
        fingerprint: Sequence[str] | None = None,
    ) -> uuid.UUID | None:
        try:
            captured = ExceptionCapture.from_error(error)
        except Exception as e:
            logger.error(f"Failed to capture wrapped error: {e!r}", exc_info=True)
            return None
        event = self.build_event(
            exceptions=[captured],
            message=message,
            level=level,
            tags=tags,
            extra=extra,
            fingerprint=fingerprint,
        )
        return await self.send(event)

    @asynccontextmanager
    async def context(
        self,
        tags: Mapping[str, str] | None = None,
        extra: Mapping[str, str] | None = None,
    ) -> AsyncIterator[ContextOutcome]:
        """Report any exception escaping the block, then re-raise it.

        Yields a :class:`ContextOutcome` whose ``event_id`` is set once an
        escaping exception has been delivered.
        """
        outcome = ContextOutcome()
        try:
            yield outcome
        except Exception as e:
            outcome.event_id = await self.capture_exception(e, tags=tags, extra=extra)
            raise

    async def close(self) -> None:
        """Close the underlying transport."""
        await self.transport.close()
