"""CLI adapter for sending demo events.

Provides the command implementations behind ``python -m flare.main``.
"""

from .commands import DemoCommandHandler

__all__ = ["DemoCommandHandler"]
