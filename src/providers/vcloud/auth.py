"""vCloud session-token authentication."""

from typing import Optional

from domain.base.exceptions import ConfigurationError
from domain.base.ports.logging_port import LoggingPort, NullLogger
from domain.base.ports.signer_port import RequestSigner
from domain.http.request import HttpRequest

AUTHORIZATION_HEADER = "x-vcloud-authorization"


class SessionTokenSigner(RequestSigner):
    """Attaches the session token returned by the vCloud login call.

    There is no signature to compute, so ``string_to_sign`` is empty.
    """

    def __init__(self, token: str, logger: Optional[LoggingPort] = None) -> None:
        if not token:
            raise ConfigurationError("vCloud session token is required")
        self._token = token
        self._logger = logger or NullLogger()

    def sign(self, request: HttpRequest) -> HttpRequest:
        return request.with_header(AUTHORIZATION_HEADER, self._token)

    def string_to_sign(self, request: HttpRequest) -> str:
        return ""
