"""Outbound HTTP request value object."""

from dataclasses import dataclass, field, replace
from typing import Optional
from urllib.parse import urlsplit

from domain.base.exceptions import ValidationError
from domain.http.headers import HttpHeaders


@dataclass(frozen=True)
class HttpRequest:
    """Logical request handed to a signer and then to the transport."""

    method: str
    uri: str
    headers: HttpHeaders = field(default_factory=HttpHeaders)
    body: Optional[bytes] = None

    def __post_init__(self) -> None:
        if not self.method:
            raise ValidationError("HTTP method is required")
        parts = urlsplit(self.uri)
        if not parts.scheme or not parts.netloc:
            raise ValidationError("Request URI must be absolute", details={"uri": self.uri})
        object.__setattr__(self, "method", self.method.upper())
        if not isinstance(self.headers, HttpHeaders):
            object.__setattr__(self, "headers", HttpHeaders(self.headers))

    @property
    def host(self) -> str:
        return urlsplit(self.uri).netloc

    @property
    def path(self) -> str:
        return urlsplit(self.uri).path or "/"

    @property
    def query(self) -> str:
        return urlsplit(self.uri).query

    def first_header(self, name: str) -> Optional[str]:
        return self.headers.get_first(name)

    def with_header(self, name: str, value: str) -> "HttpRequest":
        """Return a copy with ``name`` set to ``value``."""
        return replace(self, headers=self.headers.with_header(name, value))
