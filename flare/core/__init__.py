"""Core domain logic for the Flare error-reporting SDK.

This package contains zero external dependencies and represents
the capture-and-encode pipeline. Transports and the command-line
harness are handled by the adapters package.
"""

from .capture import ExceptionCapture, capture_error, capture_exception
from .errors import Error, try_with
from .exceptions import FlareError, MissingLocationInfo
from .models import (
    Event,
    ExceptionValue,
    Frame,
    Mechanism,
    Message,
    Platform,
    Sdk,
    SeverityLevel,
)
from .payload import event_to_json, event_to_payload, exception_to_json

__all__ = [
    "Error",
    "Event",
    "ExceptionCapture",
    "ExceptionValue",
    "FlareError",
    "Frame",
    "Mechanism",
    "Message",
    "MissingLocationInfo",
    "Platform",
    "Sdk",
    "SeverityLevel",
    "capture_error",
    "capture_exception",
    "event_to_json",
    "event_to_payload",
    "exception_to_json",
    "try_with",
]
