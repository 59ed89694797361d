"""Transport adapters for delivering events.

Implementations:
- HTTP (store endpoint named by a DSN)
- Stdout (print the JSON document)
"""

from .dsn import Dsn, InvalidDsn
from .http import HttpTransport, TransportError
from .stdout import StdoutTransport

__all__ = [
    "Dsn",
    "HttpTransport",
    "InvalidDsn",
    "StdoutTransport",
    "TransportError",
]
