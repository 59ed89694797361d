"""DSN parsing.

A DSN names the service endpoint and the credentials for a project:

    https://<public_key>[:<secret_key>]@<host>[:<port>]/[<path>/]<project_id>
"""

import urllib.parse
from dataclasses import dataclass

from flare.core.exceptions import FlareError


class InvalidDsn(FlareError, ValueError):
    """Raised when a DSN string cannot be parsed."""


@dataclass(frozen=True)
class Dsn:
    """A parsed DSN."""

    scheme: str
    public_key: str
    secret_key: str | None
    host: str
    port: int | None
    path: str
    project_id: str

    def __post_init__(self) -> None:
        """Validate DSN invariants on creation."""
        if self.scheme not in {"http", "https"}:
            raise InvalidDsn(f"Unsupported DSN scheme: {self.scheme!r}")
        if not self.public_key:
            raise InvalidDsn("DSN is missing the public key")
        if not self.host:
            raise InvalidDsn("DSN is missing the host")
        if not self.project_id:
            raise InvalidDsn("DSN is missing the project id")

    @classmethod
    def parse(cls, value: str) -> "Dsn":
        """Parse a DSN string.

        Raises:
            InvalidDsn: If the string is not a valid DSN.
        """
        parsed = urllib.parse.urlsplit(value.strip())
        try:
            port = parsed.port
        except ValueError as e:
            raise InvalidDsn(f"Invalid DSN port in {value!r}") from e

        path, _, project_id = parsed.path.rstrip("/").rpartition("/")
        return cls(
            scheme=parsed.scheme,
            public_key=urllib.parse.unquote(parsed.username or ""),
            secret_key=urllib.parse.unquote(parsed.password) if parsed.password else None,
            host=parsed.hostname or "",
            port=port,
            path=path,
            project_id=project_id,
        )

    @property
    def netloc(self) -> str:
        host = f"[{self.host}]" if ":" in self.host else self.host
        return f"{host}:{self.port}" if self.port is not None else host

    @property
    def store_url(self) -> str:
        """URL events are POSTed to."""
        return f"{self.scheme}://{self.netloc}{self.path}/api/{self.project_id}/store/"

    def __str__(self) -> str:
        credentials = self.public_key
        if self.secret_key:
            credentials += f":{self.secret_key}"
        return f"{self.scheme}://{credentials}@{self.netloc}{self.path}/{self.project_id}"
