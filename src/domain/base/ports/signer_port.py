"""Domain port for request signing strategies."""

from abc import ABC, abstractmethod

from domain.http.request import HttpRequest


class RequestSigner(ABC):
    """Computes an authentication signature for a request.

    Signing is a pure function of the request: the same request with the same
    timestamp header always yields the same signature.
    """

    @abstractmethod
    def sign(self, request: HttpRequest) -> HttpRequest:
        """Return a copy of ``request`` carrying the authentication header."""

    @abstractmethod
    def string_to_sign(self, request: HttpRequest) -> str:
        """Return the canonical string the signature is computed over."""
