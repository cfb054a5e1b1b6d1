"""Command dispatch and HTTP transport."""

from .dispatcher import CommandDispatcher
from .transport import BotocoreTransport

__all__: list[str] = ["BotocoreTransport", "CommandDispatcher"]
