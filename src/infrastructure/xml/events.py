"""Parse events consumed by decoders."""

from dataclasses import dataclass, field
from typing import Union


@dataclass(frozen=True)
class StartElement:
    name: str
    attributes: dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class EndElement:
    name: str


@dataclass(frozen=True)
class Text:
    fragment: str


ParseEvent = Union[StartElement, EndElement, Text]


def local_name(qualified: str) -> str:
    """Strip a ``{namespace}`` or ``prefix:`` qualifier from a name."""
    if qualified.startswith("{"):
        qualified = qualified.rsplit("}", 1)[-1]
    if ":" in qualified:
        qualified = qualified.rsplit(":", 1)[-1]
    return qualified


def cleanse_attributes(attributes: dict[str, str]) -> dict[str, str]:
    """Key attributes by local name; later duplicates win."""
    return {local_name(name): value for name, value in attributes.items()}
