"""Streaming XML decoding."""

from .decoder import XmlDecoder, parse_bool, parse_int, require
from .events import EndElement, ParseEvent, StartElement, Text
from .parser import decode, replay

__all__: list[str] = [
    "EndElement",
    "ParseEvent",
    "StartElement",
    "Text",
    "XmlDecoder",
    "decode",
    "parse_bool",
    "parse_int",
    "replay",
    "require",
]
