"""Feed XML bytes to a decoder without building a document tree."""

from collections.abc import Iterable, Iterator
from typing import IO, Optional, TypeVar, Union

from lxml import etree

from domain.base.exceptions import DecodingError
from infrastructure.xml.decoder import XmlDecoder
from infrastructure.xml.events import ParseEvent, cleanse_attributes, local_name

T = TypeVar("T")

DEFAULT_CHUNK_SIZE = 8192

XmlSource = Union[bytes, str, IO[bytes], Iterable[bytes]]


class _DecoderTarget:
    """lxml parser target turning parser callbacks into decoder events."""

    def __init__(self, decoder: XmlDecoder) -> None:
        self._decoder = decoder

    def start(self, tag: str, attrib: dict, nsmap: Optional[dict] = None) -> None:
        self._decoder.on_start(local_name(tag), cleanse_attributes(dict(attrib)))

    def end(self, tag: str) -> None:
        self._decoder.on_end(local_name(tag))

    def data(self, data: str) -> None:
        self._decoder.on_text(data)

    def close(self) -> None:
        # lxml also calls this after a parse error; extraction happens in decode
        return None


def _iter_chunks(source: XmlSource, chunk_size: int) -> Iterator[bytes]:
    if isinstance(source, str):
        source = source.encode("utf-8")
    if isinstance(source, (bytes, bytearray)):
        for start in range(0, len(source), chunk_size):
            yield bytes(source[start : start + chunk_size])
    elif hasattr(source, "read"):
        while True:
            chunk = source.read(chunk_size)
            if not chunk:
                break
            yield chunk
    else:
        for chunk in source:
            if chunk:
                yield chunk


def new_parser(decoder: XmlDecoder) -> etree.XMLParser:
    """Parser with entity expansion and network access disabled."""
    return etree.XMLParser(
        target=_DecoderTarget(decoder),
        resolve_entities=False,
        no_network=True,
        huge_tree=False,
        remove_comments=True,
        remove_pis=True,
    )


def decode(source: XmlSource, decoder: XmlDecoder[T], chunk_size: int = DEFAULT_CHUNK_SIZE) -> T:
    """Stream ``source`` through ``decoder`` and return its result.

    Raises:
        DecodingError: the XML is malformed or the decoder rejected a value
    """
    parser = new_parser(decoder)
    try:
        for chunk in _iter_chunks(source, chunk_size):
            parser.feed(chunk)
        parser.close()
    except DecodingError:
        raise
    except etree.XMLSyntaxError as e:
        raise DecodingError(f"Malformed XML: {e}") from e
    decoder.end_document()
    return decoder.extract()


def replay(events: Iterable[ParseEvent], decoder: XmlDecoder[T]) -> T:
    """Feed already-parsed events, then extract after end of document."""
    for event in events:
        decoder.handle(event)
    decoder.end_document()
    return decoder.extract()
