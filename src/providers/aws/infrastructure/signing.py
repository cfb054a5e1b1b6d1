"""
Request signers for AWS endpoints.

Both signers are pure functions of the request they are given: the timestamp
is read from the request's own date header, and only added from the clock when
the request has none. Re-signing a signed request therefore yields the same
signature, and ``string_to_sign`` can be recomputed at any time to diagnose a
``SignatureDoesNotMatch`` response.
"""

import hashlib
import re
import time
from datetime import datetime, timezone
from email.utils import formatdate
from typing import Callable, Optional
from urllib.parse import urlsplit

from botocore.auth import SIGV4_TIMESTAMP, HmacV1Auth, S3SigV4Auth, SigV4Auth
from botocore.awsrequest import AWSRequest
from botocore.credentials import Credentials

from domain.base.ports.logging_port import LoggingPort, NullLogger
from domain.base.ports.signer_port import RequestSigner
from domain.http.request import HttpRequest
from infrastructure.logging.wire import SignatureWire

AMZ_HEADER_PREFIX = "x-amz-"
CONTENT_SHA256_HEADER = "X-Amz-Content-SHA256"

VIRTUAL_HOST_PATTERN = re.compile(r"^(?P<bucket>.+)\.s3(?:[.-][a-z0-9-]+)?\.amazonaws\.com$")


class HmacV1RequestSigner(RequestSigner):
    """S3 signature (HMAC-SHA1 over method, standard headers, x-amz-* and resource)."""

    STANDARD_HEADERS = ("content-md5", "content-type", "date")

    def __init__(
        self,
        credentials: Credentials,
        clock: Callable[[], float] = time.time,
        wire: Optional[SignatureWire] = None,
        logger: Optional[LoggingPort] = None,
    ) -> None:
        self._credentials = credentials
        self._auth = HmacV1Auth(credentials)
        self._clock = clock
        self._wire = wire or SignatureWire()
        self._logger = logger or NullLogger()

    def sign(self, request: HttpRequest) -> HttpRequest:
        if request.first_header("Date") is None and request.first_header("x-amz-date") is None:
            request = request.with_header("Date", formatdate(self._clock(), usegmt=True))
        if self._credentials.token:
            request = request.with_header("x-amz-security-token", self._credentials.token)

        string_to_sign = self.string_to_sign(request)
        self._wire.string_to_sign(string_to_sign)
        signature = self._auth.sign_string(string_to_sign)
        self._logger.debug("Signed %s %s", request.method, request.uri)
        return request.with_header(
            "Authorization", f"AWS {self._credentials.access_key}:{signature}"
        )

    def string_to_sign(self, request: HttpRequest) -> str:
        lines = [request.method]
        has_amz_date = request.first_header("x-amz-date") is not None
        for name in self.STANDARD_HEADERS:
            value = request.first_header(name)
            if name == "date" and has_amz_date:
                value = None
            lines.append(value.strip() if value else "")
        lines.extend(self._canonical_amz_headers(request))
        lines.append(self.resource_path(request))
        return "\n".join(lines)

    def resource_path(self, request: HttpRequest) -> str:
        """Canonical resource: bucket-qualified path plus signed sub-resources."""
        split = urlsplit(request.uri)
        path = request.path
        match = VIRTUAL_HOST_PATTERN.match(split.hostname or "")
        if match:
            path = "/" + match.group("bucket") + path
        return self._auth.canonical_resource(split, auth_path=path)

    def _canonical_amz_headers(self, request: HttpRequest) -> list[str]:
        amz: dict[str, str] = {}
        for name in request.headers.names():
            key = name.lower()
            if key.startswith(AMZ_HEADER_PREFIX):
                amz[key] = ",".join(v.strip() for v in request.headers.get_all(name))
        return [f"{key}:{amz[key]}" for key in sorted(amz)]


class SigV4RequestSigner(RequestSigner):
    """AWS Signature Version 4, computed with botocore's SigV4Auth primitives.

    S3 signs the already-escaped path as sent, so the ``s3`` service uses
    ``S3SigV4Auth``, which leaves the path unnormalised.
    """

    def __init__(
        self,
        credentials: Credentials,
        service_name: str,
        region_name: str,
        clock: Callable[[], float] = time.time,
        wire: Optional[SignatureWire] = None,
        logger: Optional[LoggingPort] = None,
    ) -> None:
        self._credentials = credentials
        auth_class = S3SigV4Auth if service_name == "s3" else SigV4Auth
        self._auth = auth_class(credentials, service_name, region_name)
        self._clock = clock
        self._wire = wire or SignatureWire()
        self._logger = logger or NullLogger()

    def sign(self, request: HttpRequest) -> HttpRequest:
        if request.first_header("X-Amz-Date") is None:
            timestamp = datetime.fromtimestamp(self._clock(), tz=timezone.utc)
            request = request.with_header("X-Amz-Date", timestamp.strftime(SIGV4_TIMESTAMP))
        if request.first_header(CONTENT_SHA256_HEADER) is None:
            payload_hash = hashlib.sha256(request.body or b"").hexdigest()
            request = request.with_header(CONTENT_SHA256_HEADER, payload_hash)
        if self._credentials.token:
            request = request.with_header("X-Amz-Security-Token", self._credentials.token)

        aws_request = self._to_aws_request(request)
        string_to_sign = self._string_to_sign(aws_request)
        self._wire.string_to_sign(string_to_sign)
        signature = self._auth.signature(string_to_sign, aws_request)
        headers_to_sign = self._auth.headers_to_sign(aws_request)
        authorization = (
            f"AWS4-HMAC-SHA256 Credential={self._auth.scope(aws_request)}, "
            f"SignedHeaders={self._auth.signed_headers(headers_to_sign)}, "
            f"Signature={signature}"
        )
        self._logger.debug("Signed %s %s with SigV4", request.method, request.uri)
        return request.with_header("Authorization", authorization)

    def string_to_sign(self, request: HttpRequest) -> str:
        return self._string_to_sign(self._to_aws_request(request))

    def _string_to_sign(self, aws_request: AWSRequest) -> str:
        canonical_request = self._auth.canonical_request(aws_request)
        return self._auth.string_to_sign(aws_request, canonical_request)

    def _to_aws_request(self, request: HttpRequest) -> AWSRequest:
        headers = request.headers.without("Authorization")
        aws_request = AWSRequest(
            method=request.method,
            url=request.uri,
            headers=headers,
            data=request.body or b"",
        )
        timestamp = request.first_header("X-Amz-Date")
        if timestamp is None:
            timestamp = datetime.fromtimestamp(self._clock(), tz=timezone.utc).strftime(
                SIGV4_TIMESTAMP
            )
        aws_request.context["timestamp"] = timestamp
        return aws_request
