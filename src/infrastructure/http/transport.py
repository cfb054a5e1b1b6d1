"""HTTP transport on botocore's urllib3 session."""

from collections.abc import Iterator
from typing import Any, Optional

import urllib3
from botocore.awsrequest import AWSRequest
from botocore.exceptions import ConnectionError as BotocoreConnectionError
from botocore.exceptions import HTTPClientError
from botocore.httpsession import URLLib3Session

from domain.base.exceptions import TransportError
from domain.base.ports.logging_port import LoggingPort, NullLogger
from domain.base.ports.transport_port import HttpTransport
from domain.http.headers import HttpHeaders
from domain.http.request import HttpRequest
from domain.http.response import DEFAULT_CHUNK_SIZE, HttpResponse


class BotocoreTransport(HttpTransport):
    """Sends signed requests with connection pooling, TLS and proxies from botocore.

    Response bodies are streamed: the returned ``HttpResponse.body`` is an
    iterator over the socket, and read failures surface as ``TransportError``.
    """

    def __init__(
        self,
        connect_timeout: float = 5,
        read_timeout: float = 10,
        max_pool_connections: int = 10,
        verify: Any = True,
        proxies: Optional[dict[str, str]] = None,
        logger: Optional[LoggingPort] = None,
        session: Optional[URLLib3Session] = None,
    ) -> None:
        self._logger = logger or NullLogger()
        self._session = session or URLLib3Session(
            verify=verify,
            proxies=proxies,
            timeout=(connect_timeout, read_timeout),
            max_pool_connections=max_pool_connections,
        )
        self._logger.debug(
            "Transport initialized: timeouts connect=%ss read=%ss, pool=%d",
            connect_timeout,
            read_timeout,
            max_pool_connections,
        )

    def send(self, request: HttpRequest) -> HttpResponse:
        aws_request = AWSRequest(
            method=request.method,
            url=request.uri,
            headers=request.headers,
            data=request.body,
            stream_output=True,
        )
        try:
            response = self._session.send(aws_request.prepare())
        except (HTTPClientError, BotocoreConnectionError) as e:
            raise TransportError(
                f"{request.method} {request.uri} failed: {e}", url=request.uri
            ) from e

        return HttpResponse(
            status_code=response.status_code,
            headers=HttpHeaders(list(response.headers.items())),
            body=_stream_body(response.raw, request.uri),
            reason=getattr(response.raw, "reason", None),
        )

    def close(self) -> None:
        self._session.close()


def _stream_body(raw: Any, url: str, chunk_size: int = DEFAULT_CHUNK_SIZE) -> Iterator[bytes]:
    try:
        yield from raw.stream(chunk_size, decode_content=True)
    except urllib3.exceptions.HTTPError as e:
        raise TransportError(f"Reading response body failed: {e}", url=url) from e
    finally:
        raw.release_conn()
