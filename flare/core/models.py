"""Domain models for the Flare error-reporting SDK.

All models in this module use only Python standard library types,
ensuring zero external dependencies in the core domain.

Empty mappings and sequences are normalized to ``None`` on construction,
so an empty collection and an absent one are the same value by the time
the payload encoder sees them.
"""

import uuid
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum
from types import MappingProxyType
from typing import TypeAlias

from flare._version import __version__

from .exceptions import MissingLocationInfo

StrMapping: TypeAlias = Mapping[str, str]

DEFAULT_LOGGER = "flare"
SDK_NAME = "flare-python"


class Platform(Enum):
    """Platform tags understood by the event API."""

    AS3 = "as3"
    C = "c"
    CFML = "cfml"
    COCOA = "cocoa"
    CSHARP = "csharp"
    GO = "go"
    JAVA = "java"
    JAVASCRIPT = "javascript"
    NODE = "node"
    OBJC = "objc"
    OTHER = "other"
    PERL = "perl"
    PHP = "php"
    PYTHON = "python"
    RUBY = "ruby"


class SeverityLevel(Enum):
    """Event severity levels."""

    FATAL = "fatal"
    ERROR = "error"
    WARNING = "warning"
    INFO = "info"
    DEBUG = "debug"


def _frozen_mapping(value: StrMapping | None) -> StrMapping | None:
    """Return a read-only, key-sorted copy, or None when empty."""
    if not value:
        return None
    return MappingProxyType(dict(sorted(value.items())))


def _frozen_sequence(value: Iterable | None) -> tuple | None:
    """Return a tuple copy, or None when empty."""
    if value is None:
        return None
    items = tuple(value)
    return items or None


@dataclass(frozen=True)
class Mechanism:
    """How an exception was captured or handled."""

    type: str
    description: str | None = None
    help_link: str | None = None
    handled: bool | None = None
    data: StrMapping | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "data", _frozen_mapping(self.data))


@dataclass(frozen=True)
class Frame:
    """A single frame in a stack trace.

    At least one of ``filename``, ``function`` or ``module`` must be set.
    """

    filename: str | None = None
    function: str | None = None
    module: str | None = None
    lineno: int | None = None
    colno: int | None = None
    abs_path: str | None = None
    context_line: str | None = None
    pre_context: Sequence[str] | None = None
    post_context: Sequence[str] | None = None
    in_app: bool | None = None
    vars: StrMapping | None = None
    package: str | None = None
    platform: Platform | None = None

    def __post_init__(self) -> None:
        """Validate frame invariants on creation."""
        if self.filename is None and self.function is None and self.module is None:
            raise MissingLocationInfo(
                "One of filename, function or module is required in Frame"
            )
        object.__setattr__(self, "pre_context", _frozen_sequence(self.pre_context))
        object.__setattr__(self, "post_context", _frozen_sequence(self.post_context))
        object.__setattr__(self, "vars", _frozen_mapping(self.vars))

    @classmethod
    def make(cls, **fields) -> "Frame | MissingLocationInfo":
        """Build a frame, returning the error instead of raising it.

        Lets callers decide whether a frame without location info is
        fatal or simply skipped.
        """
        try:
            return cls(**fields)
        except MissingLocationInfo as e:
            return e

    @classmethod
    def make_exn(cls, **fields) -> "Frame":
        """Build a frame, raising MissingLocationInfo on invalid input."""
        return cls(**fields)


@dataclass(frozen=True)
class ExceptionValue:
    """One logical error within an event.

    ``stacktrace`` runs from the oldest (outermost) call to the newest
    (innermost) one.
    """

    type: str
    value: str | None = None
    module: str | None = None
    thread_id: str | None = None
    mechanism: Mechanism | None = None
    stacktrace: tuple[Frame, ...] = ()

    def __post_init__(self) -> None:
        if not self.type:
            raise ValueError("type must be a non-empty string")
        object.__setattr__(self, "stacktrace", tuple(self.stacktrace))


@dataclass(frozen=True)
class Message:
    """A plain text message attached to an event."""

    message: str
    params: Sequence[str] | None = None
    formatted: str | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "params", _frozen_sequence(self.params))


@dataclass(frozen=True)
class Sdk:
    """Identity of the SDK that produced an event."""

    name: str
    version: str

    @classmethod
    def default(cls) -> "Sdk":
        return cls(name=SDK_NAME, version=__version__)


@dataclass(frozen=True)
class Event:
    """The document submitted to the error-tracking service for one incident.

    Only ``event_id``, ``timestamp``, ``logger``, ``platform`` and ``sdk``
    have defaults; every other field stays absent unless supplied.
    """

    event_id: uuid.UUID = field(default_factory=uuid.uuid4)
    timestamp: datetime = field(default_factory=lambda: datetime.now(UTC))
    logger: str = DEFAULT_LOGGER
    platform: Platform = Platform.OTHER
    sdk: Sdk = field(default_factory=Sdk.default)
    level: SeverityLevel | None = None
    culprit: str | None = None
    server_name: str | None = None
    release: str | None = None
    tags: StrMapping | None = None
    environment: str | None = None
    modules: StrMapping | None = None
    extra: StrMapping | None = None
    fingerprint: Sequence[str] | None = None
    exception: Sequence[ExceptionValue] | None = None
    message: Message | None = None

    def __post_init__(self) -> None:
        """Freeze collections and normalize empty ones to None."""
        object.__setattr__(self, "tags", _frozen_mapping(self.tags))
        object.__setattr__(self, "modules", _frozen_mapping(self.modules))
        object.__setattr__(self, "extra", _frozen_mapping(self.extra))
        object.__setattr__(self, "fingerprint", _frozen_sequence(self.fingerprint))
        object.__setattr__(self, "exception", _frozen_sequence(self.exception))
