"""
Streaming decoder engine.

A decoder consumes start, end and text events for one document and builds a
single typed result. Decoders can host child decoders: every event the parent
does not handle itself is forwarded verbatim to the children, in the order
they were registered, so one event stream can feed several independent
sub-structure decoders.

Each decoder owns its text buffer. The buffer is cleared at every element
boundary, which keeps text seen by one decoder out of another's fields.
"""

from abc import ABC, abstractmethod
from collections.abc import Sequence
from typing import Generic, Optional, TypeVar

from domain.base.exceptions import DecodingError
from domain.base.ports.logging_port import LoggingPort, NullLogger
from infrastructure.xml.events import EndElement, ParseEvent, StartElement, Text

T = TypeVar("T")

_TRUE_VALUES = frozenset({"true", "1"})
_FALSE_VALUES = frozenset({"false", "0"})


class XmlDecoder(ABC, Generic[T]):
    """Base class for all decoders.

    Subclasses override ``start_element`` and ``end_element``. The default
    implementations forward to the children, so a subclass only needs to
    special-case the names it owns and call ``super()`` for the rest.
    """

    def __init__(
        self,
        children: Sequence["XmlDecoder"] = (),
        logger: Optional[LoggingPort] = None,
    ) -> None:
        self._children: list[XmlDecoder] = list(children)
        self._text: list[str] = []
        self._path: list[str] = []
        self._logger = logger or NullLogger()

    @property
    def current_text(self) -> str:
        """Text accumulated since the last element boundary, stripped."""
        return "".join(self._text).strip()

    def within(self, name: str) -> bool:
        """True if ``name`` is an ancestor of the element being handled."""
        return name in self._path[:-1]

    def handle(self, event: ParseEvent) -> None:
        if isinstance(event, StartElement):
            self.on_start(event.name, event.attributes)
        elif isinstance(event, EndElement):
            self.on_end(event.name)
        elif isinstance(event, Text):
            self.on_text(event.fragment)
        else:
            raise TypeError(f"Unsupported parse event: {event!r}")

    def on_start(self, name: str, attributes: dict[str, str]) -> None:
        self._path.append(name)
        self._text = []
        self.start_element(name, attributes)

    def on_end(self, name: str) -> None:
        self.end_element(name)
        if self._path and self._path[-1] == name:
            self._path.pop()
        self._text = []

    def on_text(self, fragment: str) -> None:
        self._text.append(fragment)
        for child in self._children:
            child.on_text(fragment)

    def start_element(self, name: str, attributes: dict[str, str]) -> None:
        self.forward_start(name, attributes)

    def end_element(self, name: str) -> None:
        self.forward_end(name)

    def forward_start(self, name: str, attributes: dict[str, str]) -> None:
        for child in self._children:
            child.on_start(name, attributes)

    def forward_end(self, name: str) -> None:
        for child in self._children:
            child.on_end(name)

    def end_document(self) -> None:
        """Signal that the document is complete; extraction is valid after this."""
        if self._path:
            raise DecodingError(
                f"Document ended inside <{self._path[-1]}>", element=self._path[-1]
            )

    @abstractmethod
    def extract(self) -> T:
        """Build the result from the accumulated state."""


def parse_int(value: Optional[str], element: str) -> Optional[int]:
    """Decimal ASCII to int; empty means absent, anything else fails fast."""
    if value is None or value.strip() == "":
        return None
    try:
        return int(value.strip())
    except ValueError:
        raise DecodingError(
            f"Non-numeric value {value!r} in <{element}>", element=element, value=value
        ) from None


def parse_bool(value: Optional[str], element: str) -> Optional[bool]:
    if value is None or value.strip() == "":
        return None
    normalized = value.strip().lower()
    if normalized in _TRUE_VALUES:
        return True
    if normalized in _FALSE_VALUES:
        return False
    raise DecodingError(
        f"Invalid boolean {value!r} in <{element}>", element=element, value=value
    )


def require(value: Optional[T], element: str) -> T:
    if value is None or value == "":
        raise DecodingError(f"Missing required <{element}>", element=element)
    return value
