"""Unit tests for payload encoding."""

import json
import uuid
from datetime import UTC, datetime, timedelta, timezone

import pytest

from flare import __version__
from flare.core.capture import capture_exception
from flare.core.models import (
    Event,
    ExceptionValue,
    Frame,
    Mechanism,
    Message,
    Platform,
    Sdk,
    SeverityLevel,
)
from flare.core.payload import (
    MESSAGE_KEY,
    event_to_json,
    event_to_payload,
    exception_to_json,
    exception_to_payload,
    format_timestamp,
    frame_to_payload,
    mechanism_to_payload,
)

EVENT_ID = uuid.UUID("bce345569e7548a384bac4512a9ad909")
TIMESTAMP = datetime(2018, 8, 3, 11, 44, 21, 298019, tzinfo=UTC)


class Failure(Exception):
    pass


@pytest.fixture
def basic_event() -> Event:
    """Create an event with only identifier and timestamp set."""
    return Event(event_id=EVENT_ID, timestamp=TIMESTAMP)


class TestEventEncoding:
    def test_basic_event(self, basic_event: Event) -> None:
        assert event_to_json(basic_event) == (
            '{"event_id":"bce345569e7548a384bac4512a9ad909",'
            '"timestamp":"2018-08-03T11:44:21.298019",'
            '"logger":"flare","platform":"other",'
            f'"sdk":{{"name":"flare-python","version":"{__version__}"}}}}'
        )

    def test_basic_event_has_only_defaulted_keys(self, basic_event: Event) -> None:
        assert list(event_to_payload(basic_event)) == [
            "event_id", "timestamp", "logger", "platform", "sdk",
        ]

    def test_everything(self) -> None:
        try:
            raise Failure("test")
        except Failure as e:
            exception = capture_exception(e)

        event = Event(
            event_id=uuid.UUID("ad2579b4f62f486498781636c1450148"),
            timestamp=datetime(2014, 12, 23, 22, 44, 21, 230900, tzinfo=UTC),
            logger="test",
            platform=Platform.PYTHON,
            sdk=Sdk(name="test-sdk", version="10.5"),
            level=SeverityLevel.ERROR,
            culprit="the tests",
            server_name="example.com",
            release="5",
            tags={"a": "b", "c": "d"},
            environment="dev",
            modules={"python": "3.12", "core": "v0.10"},
            extra={"a thing": "value"},
            fingerprint=["039432409", "asdf"],
            exception=[exception],
            message=Message(message="Testy test test"),
        )
        payload = json.loads(event_to_json(event))
        frame = exception.stacktrace[0]

        assert payload == {
            "event_id": "ad2579b4f62f486498781636c1450148",
            "timestamp": "2014-12-23T22:44:21.230900",
            "logger": "test",
            "platform": "python",
            "sdk": {"name": "test-sdk", "version": "10.5"},
            "level": "error",
            "culprit": "the tests",
            "server_name": "example.com",
            "release": "5",
            "tags": [["a", "b"], ["c", "d"]],
            "environment": "dev",
            "modules": [["core", "v0.10"], ["python", "3.12"]],
            "extra": [["a thing", "value"]],
            "fingerprint": ["039432409", "asdf"],
            "exception": {
                "values": [
                    {
                        "type": "Failure",
                        "value": "test",
                        "stacktrace": {
                            "frames": [
                                {
                                    "filename": frame.filename,
                                    "lineno": frame.lineno,
                                    "colno": frame.colno,
                                }
                            ]
                        },
                    }
                ]
            },
            MESSAGE_KEY: {"message": "Testy test test"},
        }
        assert list(payload) == [
            "event_id", "timestamp", "logger", "platform", "sdk", "level",
            "culprit", "server_name", "release", "tags", "environment",
            "modules", "extra", "fingerprint", "exception", MESSAGE_KEY,
        ]

    def test_tags_encoded_as_pairs(self) -> None:
        event = Event(event_id=EVENT_ID, timestamp=TIMESTAMP, tags={"c": "d", "a": "b"})
        assert '"tags":[["a","b"],["c","d"]]' in event_to_json(event)

    @pytest.mark.parametrize(
        ("field", "empty"),
        [
            ("tags", {}),
            ("modules", {}),
            ("extra", {}),
            ("fingerprint", []),
            ("exception", []),
        ],
    )
    def test_empty_collections_omitted(self, field: str, empty) -> None:
        event = Event(event_id=EVENT_ID, timestamp=TIMESTAMP, **{field: empty})
        assert field not in event_to_payload(event)

    def test_no_nulls_emitted(self) -> None:
        event = Event(
            event_id=EVENT_ID,
            timestamp=TIMESTAMP,
            exception=[ExceptionValue(type="Failure", stacktrace=[Frame(module="m")])],
        )
        assert "null" not in event_to_json(event)

    def test_encoding_is_deterministic(self) -> None:
        event = Event(
            tags={"z": "1", "a": "2"},
            extra={"k": "v"},
            exception=[ExceptionValue(type="Failure", value="x")],
        )
        assert event_to_json(event) == event_to_json(event)

    def test_message_params_and_formatted(self) -> None:
        event = Event(
            event_id=EVENT_ID,
            timestamp=TIMESTAMP,
            message=Message(message="hello %s", params=["world"], formatted="hello world"),
        )
        assert event_to_payload(event)[MESSAGE_KEY] == {
            "message": "hello %s",
            "params": ["world"],
            "formatted": "hello world",
        }

    def test_non_ascii_kept(self) -> None:
        event = Event(event_id=EVENT_ID, timestamp=TIMESTAMP, culprit="héllo")
        assert '"culprit":"héllo"' in event_to_json(event)


class TestTimestamp:
    def test_microseconds(self) -> None:
        assert format_timestamp(TIMESTAMP) == "2018-08-03T11:44:21.298019"

    def test_zero_microseconds_omitted(self) -> None:
        assert format_timestamp(datetime(2018, 8, 3, 11, 44, 21, tzinfo=UTC)) == (
            "2018-08-03T11:44:21"
        )

    def test_converted_to_utc(self) -> None:
        local = datetime(2018, 8, 3, 13, 44, 21, tzinfo=timezone(timedelta(hours=2)))
        assert format_timestamp(local) == "2018-08-03T11:44:21"

    def test_naive_taken_as_utc(self) -> None:
        assert format_timestamp(datetime(2018, 8, 3, 11, 44, 21)) == "2018-08-03T11:44:21"


class TestExceptionEncoding:
    def test_minimal(self) -> None:
        assert exception_to_json(ExceptionValue(type="Failure")) == '{"type":"Failure"}'

    def test_frames_keep_order(self) -> None:
        exception = ExceptionValue(
            type="Failure",
            stacktrace=[Frame(filename="outer.py", lineno=1), Frame(filename="inner.py", lineno=2)],
        )
        frames = exception_to_payload(exception)["stacktrace"]["frames"]
        assert [f["filename"] for f in frames] == ["outer.py", "inner.py"]

    def test_mechanism(self) -> None:
        exception = ExceptionValue(
            type="Failure",
            mechanism=Mechanism(type="generic", handled=False, data={"b": "2", "a": "1"}),
        )
        assert exception_to_payload(exception)["mechanism"] == {
            "type": "generic",
            "handled": False,
            "data": [["a", "1"], ["b", "2"]],
        }

    def test_all_scalar_fields(self) -> None:
        exception = ExceptionValue(
            type="Failure", value="v", module="app.core", thread_id="main"
        )
        assert exception_to_payload(exception) == {
            "type": "Failure",
            "value": "v",
            "module": "app.core",
            "thread_id": "main",
        }


class TestFrameEncoding:
    def test_full_frame(self) -> None:
        frame = Frame(
            filename="app.py",
            function="handler",
            module="app",
            lineno=10,
            colno=4,
            abs_path="/srv/app.py",
            context_line="    raise Failure()",
            pre_context=["def handler():"],
            post_context=[""],
            in_app=True,
            vars={"y": "2", "x": "1"},
            package="app",
            platform=Platform.PYTHON,
        )
        assert frame_to_payload(frame) == {
            "filename": "app.py",
            "function": "handler",
            "module": "app",
            "lineno": 10,
            "colno": 4,
            "abs_path": "/srv/app.py",
            "context_line": "    raise Failure()",
            "pre_context": ["def handler():"],
            "post_context": [""],
            "in_app": True,
            "vars": [["x", "1"], ["y", "2"]],
            "package": "app",
            "platform": "python",
        }

    def test_false_in_app_kept(self) -> None:
        assert frame_to_payload(Frame(filename="a.py", in_app=False)) == {
            "filename": "a.py",
            "in_app": False,
        }

    def test_empty_contexts_omitted(self) -> None:
        assert frame_to_payload(Frame(function="f", pre_context=[], vars={})) == {
            "function": "f",
        }


class TestMechanismEncoding:
    def test_minimal(self) -> None:
        assert mechanism_to_payload(Mechanism(type="generic")) == {"type": "generic"}
