"""External adapters for the Flare error-reporting SDK.

This package contains all external dependencies (httpx, stdout, the
command line) and provides implementations of the core port interfaces.

Adapter Organization:

- transport/: Adapters for delivering events (HTTP, stdout)
- cli/: Command-line demo commands
"""
