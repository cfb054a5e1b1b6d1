"""Inbound HTTP response as supplied by a transport."""

from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from typing import IO, Optional, Union

from domain.http.headers import HttpHeaders

ResponseBody = Union[bytes, IO[bytes], Iterable[bytes]]

DEFAULT_CHUNK_SIZE = 8192


@dataclass
class HttpResponse:
    """Status, headers and an optional body that may be a live stream."""

    status_code: int
    headers: HttpHeaders = field(default_factory=HttpHeaders)
    body: Optional[ResponseBody] = None
    reason: Optional[str] = None

    def __post_init__(self) -> None:
        if not isinstance(self.headers, HttpHeaders):
            self.headers = HttpHeaders(self.headers)

    @property
    def is_success(self) -> bool:
        return 200 <= self.status_code < 300

    @property
    def has_body(self) -> bool:
        if self.body is None:
            return False
        if isinstance(self.body, (bytes, bytearray)):
            return len(self.body) > 0
        return True

    def first_header(self, name: str) -> Optional[str]:
        return self.headers.get_first(name)

    def iter_content(self, chunk_size: int = DEFAULT_CHUNK_SIZE) -> Iterator[bytes]:
        """Yield the body in chunks without reading it all into memory."""
        body = self.body
        if body is None:
            return
        if isinstance(body, (bytes, bytearray)):
            for start in range(0, len(body), chunk_size):
                yield bytes(body[start : start + chunk_size])
        elif hasattr(body, "read"):
            while True:
                chunk = body.read(chunk_size)
                if not chunk:
                    break
                yield chunk
        else:
            for chunk in body:
                if chunk:
                    yield chunk

    def close(self) -> None:
        """Release the underlying stream, if any."""
        close = getattr(self.body, "close", None)
        if callable(close):
            close()
