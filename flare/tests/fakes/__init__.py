"""Fake implementations of core ports for testing.

These in-memory implementations allow core domain logic to be tested
without external dependencies:

- FakeTransport: Captured events for assertion
"""

from .transport import FakeTransport

__all__ = [
    "FakeTransport",
]
