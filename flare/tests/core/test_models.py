"""Unit tests for the core domain models."""

import uuid
from dataclasses import FrozenInstanceError
from datetime import UTC, datetime, timedelta

import pytest

from flare import __version__
from flare.core.exceptions import MissingLocationInfo
from flare.core.models import (
    DEFAULT_LOGGER,
    SDK_NAME,
    Event,
    ExceptionValue,
    Frame,
    Mechanism,
    Message,
    Platform,
    Sdk,
)


class TestFrame:
    """Tests for Frame construction."""

    @pytest.mark.parametrize(
        "fields",
        [
            {"filename": "app.py"},
            {"function": "handler"},
            {"module": "app.views"},
            {"filename": "app.py", "function": "handler", "module": "app"},
        ],
    )
    def test_any_location_field_is_enough(self, fields) -> None:
        """A frame with at least one location field is valid."""
        frame = Frame(**fields)
        for key, value in fields.items():
            assert getattr(frame, key) == value

    def test_missing_location_raises(self) -> None:
        """A frame without filename, function or module is rejected."""
        with pytest.raises(MissingLocationInfo):
            Frame(lineno=10, colno=4, in_app=True)

    def test_missing_location_is_value_error(self) -> None:
        with pytest.raises(ValueError):
            Frame()

    def test_make_returns_error_instead_of_raising(self) -> None:
        result = Frame.make(lineno=3)
        assert isinstance(result, MissingLocationInfo)

    def test_make_returns_frame(self) -> None:
        result = Frame.make(filename="app.py", lineno=3)
        assert isinstance(result, Frame)
        assert result.lineno == 3

    def test_make_exn_raises(self) -> None:
        with pytest.raises(MissingLocationInfo):
            Frame.make_exn(colno=1)

    def test_no_defaults_invented(self) -> None:
        frame = Frame(filename="app.py")
        assert frame.lineno is None
        assert frame.colno is None
        assert frame.in_app is None
        assert frame.platform is None

    def test_empty_collections_become_absent(self) -> None:
        frame = Frame(filename="app.py", pre_context=[], post_context=[], vars={})
        assert frame.pre_context is None
        assert frame.post_context is None
        assert frame.vars is None

    def test_frame_is_immutable(self) -> None:
        frame = Frame(filename="app.py", vars={"x": "1"})
        with pytest.raises(FrozenInstanceError):
            frame.lineno = 5  # type: ignore[misc]
        with pytest.raises(TypeError):
            frame.vars["y"] = "2"  # type: ignore[index]


class TestMechanism:
    def test_data_is_sorted_and_frozen(self) -> None:
        mechanism = Mechanism(type="generic", data={"b": "2", "a": "1"})
        assert list(mechanism.data) == ["a", "b"]
        with pytest.raises(TypeError):
            mechanism.data["c"] = "3"  # type: ignore[index]

    def test_empty_data_is_absent(self) -> None:
        assert Mechanism(type="generic", data={}).data is None


class TestExceptionValue:
    def test_type_required(self) -> None:
        with pytest.raises(ValueError):
            ExceptionValue(type="")

    def test_stacktrace_kept_in_order(self) -> None:
        frames = [Frame(filename="outer.py"), Frame(filename="inner.py")]
        exc = ExceptionValue(type="Failure", stacktrace=frames)
        assert isinstance(exc.stacktrace, tuple)
        assert [f.filename for f in exc.stacktrace] == ["outer.py", "inner.py"]


class TestEvent:
    def test_defaults(self) -> None:
        before = datetime.now(UTC)
        event = Event()
        after = datetime.now(UTC)

        assert isinstance(event.event_id, uuid.UUID)
        assert event.event_id.version == 4
        assert before <= event.timestamp <= after
        assert event.logger == DEFAULT_LOGGER
        assert event.platform is Platform.OTHER
        assert event.sdk == Sdk(name=SDK_NAME, version=__version__)

    def test_no_other_defaults(self) -> None:
        event = Event()
        for name in (
            "level", "culprit", "server_name", "release", "tags", "environment",
            "modules", "extra", "fingerprint", "exception", "message",
        ):
            assert getattr(event, name) is None, name

    def test_event_ids_are_unique(self) -> None:
        assert Event().event_id != Event().event_id

    def test_explicit_id_and_timestamp_kept(self) -> None:
        event_id = uuid.UUID("bce345569e7548a384bac4512a9ad909")
        timestamp = datetime(2018, 8, 3, 11, 44, 21, 298019, tzinfo=UTC)
        event = Event(event_id=event_id, timestamp=timestamp)
        assert event.event_id == event_id
        assert event.timestamp == timestamp

    def test_empty_collections_become_absent(self) -> None:
        event = Event(tags={}, modules={}, extra={}, fingerprint=[], exception=[])
        assert event.tags is None
        assert event.modules is None
        assert event.extra is None
        assert event.fingerprint is None
        assert event.exception is None

    def test_collections_are_frozen_copies(self) -> None:
        tags = {"a": "b"}
        fingerprint = ["x"]
        event = Event(tags=tags, fingerprint=fingerprint)
        tags["c"] = "d"
        fingerprint.append("y")
        assert dict(event.tags) == {"a": "b"}
        assert event.fingerprint == ("x",)

    def test_event_is_immutable(self) -> None:
        event = Event()
        with pytest.raises(FrozenInstanceError):
            event.event_id = uuid.uuid4()  # type: ignore[misc]

    def test_timestamp_default_is_capture_time(self) -> None:
        event = Event()
        assert datetime.now(UTC) - event.timestamp < timedelta(seconds=5)


class TestMessage:
    def test_empty_params_absent(self) -> None:
        assert Message(message="hello", params=[]).params is None

    def test_params_kept(self) -> None:
        assert Message(message="hello %s", params=["world"]).params == ("world",)
