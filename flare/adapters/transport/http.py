"""HTTP transport adapter.

Implements TransportPort by POSTing events to the service's store
endpoint, authenticating with the DSN's keys.
"""

import logging
import time

import httpx

from flare.core.exceptions import FlareError
from flare.core.models import Event
from flare.core.payload import event_to_json
from flare.core.ports import TransportPort

from .dsn import Dsn

logger = logging.getLogger(__name__)

PROTOCOL_VERSION = 7


class TransportError(FlareError, RuntimeError):
    """Raised when the service rejects an event."""

    def __init__(self, status_code: int, detail: str):
        super().__init__(f"Event rejected with HTTP {status_code}: {detail}")
        self.status_code = status_code
        self.detail = detail


class HttpTransport(TransportPort):
    """Delivers events to the service over HTTP."""

    def __init__(
        self,
        dsn: Dsn,
        timeout_seconds: float = 10.0,
        client: httpx.AsyncClient | None = None,
    ):
        """Initialize HTTP transport.

        Args:
            dsn: Parsed DSN naming the endpoint and credentials.
            timeout_seconds: Timeout for each delivery request.
            client: Optional preconfigured client (used by tests).
        """
        self.dsn = dsn
        self.timeout_seconds = timeout_seconds
        self._client = client

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create async HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self.timeout_seconds)
        return self._client

    def auth_header(self, event: Event, now: float | None = None) -> str:
        """Build the ``X-Sentry-Auth`` header value for an event."""
        timestamp = int(now if now is not None else time.time())
        parts = [
            f"sentry_version={PROTOCOL_VERSION}",
            f"sentry_client={event.sdk.name}/{event.sdk.version}",
            f"sentry_timestamp={timestamp}",
            f"sentry_key={self.dsn.public_key}",
        ]
        if self.dsn.secret_key:
            parts.append(f"sentry_secret={self.dsn.secret_key}")
        return "Sentry " + ", ".join(parts)

    async def send(self, event: Event) -> str | None:
        """POST an event and return the id the service assigned to it."""
        client = await self._get_client()
        body = event_to_json(event)

        response = await client.post(
            self.dsn.store_url,
            content=body.encode("utf-8"),
            headers={
                "Content-Type": "application/json",
                "X-Sentry-Auth": self.auth_header(event),
            },
        )

        if response.is_success:
            logger.debug(
                f"Event accepted: HTTP {response.status_code}",
                extra={"event_id": event.event_id.hex},
            )
            try:
                data = response.json()
            except ValueError:
                return None
            return data.get("id") if isinstance(data, dict) else None

        detail = response.headers.get("X-Sentry-Error") or response.text
        raise TransportError(response.status_code, detail)

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None
