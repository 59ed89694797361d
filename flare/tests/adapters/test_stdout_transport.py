"""Unit tests for StdoutTransport."""

import json
import uuid
from datetime import UTC, datetime

import pytest

from flare.adapters.transport.stdout import StdoutTransport
from flare.core.models import Event


@pytest.mark.asyncio
async def test_prints_event_json(capsys):
    """Each event is printed as one JSON line."""
    event = Event(
        event_id=uuid.UUID("bce345569e7548a384bac4512a9ad909"),
        timestamp=datetime(2018, 8, 3, 11, 44, 21, 298019, tzinfo=UTC),
        tags={"a": "b"},
    )
    transport = StdoutTransport()

    remote_id = await transport.send(event)
    await transport.close()

    output = capsys.readouterr().out
    assert output.count("\n") == 1
    payload = json.loads(output)
    assert payload["event_id"] == "bce345569e7548a384bac4512a9ad909"
    assert payload["tags"] == [["a", "b"]]
    assert remote_id == event.event_id.hex
