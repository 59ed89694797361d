"""Stdout transport adapter.

Implements TransportPort by printing each encoded event on its own line.
Used when no DSN is configured, and handy for inspecting payloads.
"""

import asyncio

from flare.core.models import Event
from flare.core.payload import event_to_json
from flare.core.ports import TransportPort


class StdoutTransport(TransportPort):
    """Prints encoded events to stdout."""

    async def send(self, event: Event) -> str | None:
        """Print the event's JSON document."""
        await asyncio.to_thread(print, event_to_json(event))
        return event.event_id.hex

    async def close(self) -> None:
        """Nothing to release."""
