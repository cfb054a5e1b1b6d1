"""Command lifecycle."""

from .aggregate import Command, CommandState, ResponseDecoding

__all__: list[str] = ["Command", "CommandState", "ResponseDecoding"]
