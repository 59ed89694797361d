"""Port interfaces for the Flare error-reporting SDK.

These abstract base classes define the boundaries between core
domain logic and external adapters. Implementations live in the
adapters/ package.

Port Interface Categories:

1. **Driven Ports** (core calls out to adapters)
   - TransportPort: Deliver finished events to the error-tracking service

2. **Driving Ports** (application code calls into core)
   - ReportingPort: Capture messages, exceptions and wrapped errors
"""

import uuid
from abc import ABC, abstractmethod
from collections.abc import Mapping, Sequence

from .errors import Error
from .models import Event, SeverityLevel


# ============================================================================
# DRIVEN PORTS (Core calls out to adapters)
# ============================================================================


class TransportPort(ABC):
    """Port for delivering events to the error-tracking service.

    Adapters implementing this port take a finished Event, encode it with
    flare.core.payload and hand it to their delivery channel (HTTP,
    stdout, etc.).

    Implementations must handle:
    - Authentication required by the service
    - Translating delivery failures into exceptions
    """

    @abstractmethod
    async def send(self, event: Event) -> str | None:
        """Deliver a single event.

        Args:
            event: The event to deliver.

        Returns:
            The identifier the service assigned to the event, or None if
            the channel does not report one.

        Raises:
            Exception: If delivery fails. The caller logs and drops the
                event; reporting must never mask the error being reported.
        """

    @abstractmethod
    async def close(self) -> None:
        """Release any resources held by the transport."""


# ============================================================================
# DRIVING PORTS (Application code calls into core)
# ============================================================================


class ReportingPort(ABC):
    """Port for reporting incidents from application code."""

    @abstractmethod
    async def capture_message(
        self,
        message: str,
        level: SeverityLevel | None = None,
        tags: Mapping[str, str] | None = None,
        extra: Mapping[str, str] | None = None,
        fingerprint: Sequence[str] | None = None,
    ) -> uuid.UUID | None:
        """Report a plain text message.

        Returns:
            The event id if the event was delivered, None otherwise.
        """

    @abstractmethod
    async def capture_exception(
        self,
        exc: BaseException,
        message: str | None = None,
        level: SeverityLevel | None = None,
        tags: Mapping[str, str] | None = None,
        extra: Mapping[str, str] | None = None,
        fingerprint: Sequence[str] | None = None,
    ) -> uuid.UUID | None:
        """Report a caught exception with its stack trace.

        Must be called from the handler that caught ``exc``.

        Returns:
            The event id if the event was delivered, None otherwise.
        """

    @abstractmethod
    async def capture_error(
        self,
        error: Error,
        message: str | None = None,
        level: SeverityLevel | None = None,
        tags: Mapping[str, str] | None = None,
        extra: Mapping[str, str] | None = None,
        fingerprint: Sequence[str] | None = None,
    ) -> uuid.UUID | None:
        """Report a wrapped error value.

        Returns:
            The event id if the event was delivered, None otherwise.
        """
