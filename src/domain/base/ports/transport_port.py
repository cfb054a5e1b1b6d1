"""Domain port for the HTTP transport."""

from abc import ABC, abstractmethod

from domain.http.request import HttpRequest
from domain.http.response import HttpResponse


class HttpTransport(ABC):
    """Performs the network exchange for a signed request.

    Implementations raise ``TransportError`` for connection and timeout
    failures and return every HTTP status, success or not, as a response.
    """

    @abstractmethod
    def send(self, request: HttpRequest) -> HttpResponse:
        """Send ``request`` and return the response with a streamable body."""

    def close(self) -> None:
        """Release pooled connections."""
