"""Test suite for the Flare error-reporting SDK.

Organized into three categories, plus test_composition_root.py for
configuration and command-line wiring:

1. core/: Unit tests for core domain logic
   - No external dependencies, fast execution
   - Uses the in-memory FakeTransport

2. adapters/: Tests for adapter implementations
   - HTTP transport against httpx.MockTransport
   - DSN parsing, stdout transport, CLI commands

3. fakes/: Port implementations for testing
   - In-memory implementation of TransportPort
"""
