"""Payload encoding for the event API.

Maps the domain models onto the JSON document shape the error-tracking
service accepts. Every object goes through :func:`_compact`, the single
place where absent values and empty collections are dropped.
"""

import json
from collections.abc import Iterable, Mapping
from datetime import UTC, datetime
from typing import Any

from .models import Event, ExceptionValue, Frame, Mechanism, Message, Sdk

MESSAGE_KEY = "sentry.interfaces.Message"


def _compact(fields: Iterable[tuple[str, Any]]) -> dict[str, Any]:
    """Build a JSON object, omitting None values and empty collections."""
    result: dict[str, Any] = {}
    for key, value in fields:
        if value is None:
            continue
        if isinstance(value, list | dict) and not value:
            continue
        result[key] = value
    return result


def _pairs(mapping: Mapping[str, str] | None) -> list[list[str]] | None:
    """Encode a mapping as key-sorted ``[key, value]`` pairs."""
    if not mapping:
        return None
    return [[key, value] for key, value in sorted(mapping.items())]


def _list(items: Iterable[str] | None) -> list[str] | None:
    return list(items) if items else None


def format_timestamp(timestamp: datetime) -> str:
    """Format as UTC ISO-8601 without a zone suffix.

    Naive datetimes are taken to be UTC already. Microseconds appear only
    when non-zero.
    """
    if timestamp.tzinfo is not None:
        timestamp = timestamp.astimezone(UTC).replace(tzinfo=None)
    return timestamp.isoformat()


def mechanism_to_payload(mechanism: Mechanism) -> dict[str, Any]:
    return _compact([
        ("type", mechanism.type),
        ("description", mechanism.description),
        ("help_link", mechanism.help_link),
        ("handled", mechanism.handled),
        ("data", _pairs(mechanism.data)),
    ])


def frame_to_payload(frame: Frame) -> dict[str, Any]:
    return _compact([
        ("filename", frame.filename),
        ("function", frame.function),
        ("module", frame.module),
        ("lineno", frame.lineno),
        ("colno", frame.colno),
        ("abs_path", frame.abs_path),
        ("context_line", frame.context_line),
        ("pre_context", _list(frame.pre_context)),
        ("post_context", _list(frame.post_context)),
        ("in_app", frame.in_app),
        ("vars", _pairs(frame.vars)),
        ("package", frame.package),
        ("platform", frame.platform.value if frame.platform else None),
    ])


def exception_to_payload(exception: ExceptionValue) -> dict[str, Any]:
    """Encode one exception; frames are wrapped in ``{"frames": [...]}``."""
    frames = [frame_to_payload(frame) for frame in exception.stacktrace]
    return _compact([
        ("type", exception.type),
        ("value", exception.value),
        ("module", exception.module),
        ("thread_id", exception.thread_id),
        ("mechanism", mechanism_to_payload(exception.mechanism) if exception.mechanism else None),
        ("stacktrace", {"frames": frames} if frames else None),
    ])


def exception_list_to_payload(exceptions: Iterable[ExceptionValue]) -> dict[str, Any] | None:
    """Encode exceptions as ``{"values": [...]}``, or None when there are none."""
    values = [exception_to_payload(e) for e in exceptions]
    return {"values": values} if values else None


def message_to_payload(message: Message) -> dict[str, Any]:
    return _compact([
        ("message", message.message),
        ("params", _list(message.params)),
        ("formatted", message.formatted),
    ])


def sdk_to_payload(sdk: Sdk) -> dict[str, Any]:
    return {"name": sdk.name, "version": sdk.version}


def event_to_payload(event: Event) -> dict[str, Any]:
    """Encode an event as a JSON-ready dict with the API's key order."""
    return _compact([
        ("event_id", event.event_id.hex),
        ("timestamp", format_timestamp(event.timestamp)),
        ("logger", event.logger),
        ("platform", event.platform.value),
        ("sdk", sdk_to_payload(event.sdk)),
        ("level", event.level.value if event.level else None),
        ("culprit", event.culprit),
        ("server_name", event.server_name),
        ("release", event.release),
        ("tags", _pairs(event.tags)),
        ("environment", event.environment),
        ("modules", _pairs(event.modules)),
        ("extra", _pairs(event.extra)),
        ("fingerprint", _list(event.fingerprint)),
        ("exception", exception_list_to_payload(event.exception or ())),
        (MESSAGE_KEY, message_to_payload(event.message) if event.message else None),
    ])


def to_json(payload: dict[str, Any]) -> str:
    """Serialize a payload compactly, keeping its key order."""
    return json.dumps(payload, separators=(",", ":"), ensure_ascii=False)


def event_to_json(event: Event) -> str:
    return to_json(event_to_payload(event))


def exception_to_json(exception: ExceptionValue) -> str:
    return to_json(exception_to_payload(exception))
