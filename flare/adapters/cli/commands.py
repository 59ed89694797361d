"""CLI demo commands for Flare.

Each command reports one kind of incident through a Reporter so the
whole pipeline (capture, encoding, delivery) can be exercised against a
real project from the command line.
"""

import logging
from typing import Any

import flare
from flare.core.errors import Error, try_with
from flare.core.reporter import Reporter
from flare.core.scope import use_reporter

logger = logging.getLogger(__name__)


class DemoCommandHandler:
    """Sends demo events through a Reporter.

    Every command returns a result dictionary with the operation name,
    a status and, on success, the id of the delivered event.
    """

    def __init__(self, reporter: Reporter):
        """Initialize the demo command handler.

        Args:
            reporter: Reporter used to deliver the demo events.
        """
        self.reporter = reporter

    @staticmethod
    def _result(operation: str, event_id: Any) -> dict[str, Any]:
        if event_id is None:
            return {
                "status": "error",
                "operation": operation,
                "message": "Event was not delivered",
            }
        return {
            "status": "success",
            "operation": operation,
            "event_id": event_id.hex,
        }

    async def send_message(self) -> dict[str, Any]:
        """Send a plain message."""
        event_id = await self.reporter.capture_message("test from Python")
        return self._result("send-message", event_id)

    async def send_error(self) -> dict[str, Any]:
        """Send a wrapped error produced by try_with."""

        def fail() -> None:
            raise RuntimeError("Test error!")

        result = try_with(fail)
        if not isinstance(result, Error):
            raise AssertionError("try_with did not return an Error")
        event_id = await self.reporter.capture_error(result)
        return self._result("send-error", event_id)

    async def send_exn(self) -> dict[str, Any]:
        """Send a caught exception with an attached message."""
        try:
            raise RuntimeError("Test exception!")
        except RuntimeError as e:
            event_id = await self.reporter.capture_exception(e, message="test from Python")
        return self._result("send-exn", event_id)

    async def send_exn_context(self) -> dict[str, Any]:
        """Send an exception escaping a reporting context.

        Uses the scoped module-level API rather than the reporter directly.
        """
        with use_reporter(self.reporter):
            try:
                async with flare.context() as outcome:
                    raise RuntimeError("Test context!")
            except RuntimeError as e:
                logger.info(f"Context re-raised: {e}")
        return self._result("send-exn-context", outcome.event_id)
