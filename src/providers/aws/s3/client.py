"""S3 bucket and object operations built on the command dispatcher."""

from collections.abc import Iterable
from typing import Optional
from urllib.parse import quote, urlencode

from domain.base.exceptions import ValidationError
from domain.base.ports.logging_port import LoggingPort, NullLogger
from domain.command.aggregate import Command, ResponseDecoding
from domain.http.request import HttpRequest
from domain.storage.models import BucketMetadata, CopyObjectResult, ListBucketResponse
from infrastructure.http.dispatcher import CommandDispatcher
from providers.aws.exceptions.aws_exceptions import SIGNATURE_MISMATCH_CODES, convert_s3_error
from providers.aws.s3 import headers
from providers.aws.s3.decoders import (
    CopyObjectDecoder,
    ErrorDecoder,
    ListAllMyBucketsDecoder,
    ListBucketDecoder,
)

DEFAULT_ENDPOINT = "https://s3.amazonaws.com"


class S3Client:
    """Path-style S3 requests; every operation returns a ``Command``."""

    def __init__(
        self,
        dispatcher: CommandDispatcher,
        endpoint: str = DEFAULT_ENDPOINT,
        logger: Optional[LoggingPort] = None,
        signature_mismatch_codes: Iterable[str] = SIGNATURE_MISMATCH_CODES,
    ) -> None:
        self._dispatcher = dispatcher
        self.endpoint = endpoint.rstrip("/")
        self.signature_mismatch_codes = frozenset(signature_mismatch_codes)
        self._logger = logger or NullLogger()

    def list_owned_buckets(self) -> Command[list[BucketMetadata]]:
        """GET Service: buckets owned by the authenticated sender."""
        return self._submit(HttpRequest("GET", self.endpoint + "/"), ListAllMyBucketsDecoder)

    def list_bucket(
        self,
        bucket: str,
        prefix: Optional[str] = None,
        marker: Optional[str] = None,
        max_keys: Optional[int] = None,
        delimiter: Optional[str] = None,
    ) -> Command[ListBucketResponse]:
        """GET Bucket: one page of the bucket listing."""
        params: list[tuple[str, str]] = []
        if delimiter is not None:
            params.append(("delimiter", delimiter))
        if marker is not None:
            params.append(("marker", marker))
        if max_keys is not None:
            if max_keys < 0:
                raise ValidationError("max_keys must not be negative", details={"max_keys": max_keys})
            params.append(("max-keys", str(max_keys)))
        if prefix is not None:
            params.append(("prefix", prefix))

        uri = self._bucket_uri(bucket) + "/"
        if params:
            uri += "?" + urlencode(params, quote_via=quote)
        return self._submit(HttpRequest("GET", uri), ListBucketDecoder)

    def copy_object(
        self,
        source_bucket: str,
        source_key: str,
        destination_bucket: str,
        destination_key: str,
        metadata: Optional[dict[str, str]] = None,
        if_match: Optional[str] = None,
        if_none_match: Optional[str] = None,
    ) -> Command[CopyObjectResult]:
        """PUT Object (Copy). Supplying ``metadata`` replaces the source metadata."""
        request_headers: list[tuple[str, str]] = [
            (headers.COPY_SOURCE, f"/{source_bucket}/{quote(source_key, safe='/')}")
        ]
        if metadata is not None:
            request_headers.append((headers.METADATA_DIRECTIVE, "REPLACE"))
            for name, value in metadata.items():
                request_headers.append((headers.USER_METADATA_PREFIX + name.lower(), value))
        if if_match is not None:
            request_headers.append((headers.COPY_SOURCE_IF_MATCH, if_match))
        if if_none_match is not None:
            request_headers.append((headers.COPY_SOURCE_IF_NONE_MATCH, if_none_match))

        uri = self._object_uri(destination_bucket, destination_key)
        return self._submit(HttpRequest("PUT", uri, headers=request_headers), CopyObjectDecoder)

    def _submit(self, request: HttpRequest, success) -> Command:
        decoding = ResponseDecoding(
            error=ErrorDecoder,
            success=success,
            request_id_header=headers.REQUEST_ID,
            request_token_header=headers.REQUEST_TOKEN,
            signature_mismatch_codes=self.signature_mismatch_codes,
            error_factory=convert_s3_error,
        )
        self._logger.debug("Submitting %s %s", request.method, request.uri)
        return self._dispatcher.submit(request, decoding)

    def _bucket_uri(self, bucket: str) -> str:
        if not bucket:
            raise ValidationError("Bucket name is required")
        return f"{self.endpoint}/{quote(bucket, safe='')}"

    def _object_uri(self, bucket: str, key: str) -> str:
        if not key:
            raise ValidationError("Object key is required", details={"bucket": bucket})
        return f"{self._bucket_uri(bucket)}/{quote(key, safe='/')}"
