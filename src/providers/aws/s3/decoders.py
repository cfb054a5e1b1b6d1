"""Decoders for S3 response documents."""

from datetime import datetime
from typing import Optional

from domain.http.error_info import ErrorInfo
from domain.storage.models import (
    BucketMetadata,
    CanonicalUser,
    CopyObjectResult,
    ListBucketResponse,
    ObjectMetadata,
)
from infrastructure.utilities.date_utils import parse_iso8601
from infrastructure.xml.decoder import XmlDecoder, parse_bool, parse_int, require


def _strip_etag(value: str) -> str:
    return value.strip().strip('"')


class ListAllMyBucketsDecoder(XmlDecoder[list[BucketMetadata]]):
    """ListAllMyBucketsResult -> buckets in document order, each with the owner."""

    def __init__(self) -> None:
        super().__init__()
        self._buckets: list[BucketMetadata] = []
        self._owner_id: Optional[str] = None
        self._owner_name: Optional[str] = None
        self._name: Optional[str] = None
        self._creation_date: Optional[datetime] = None

    def end_element(self, name: str) -> None:
        if name == "ID":
            self._owner_id = self.current_text
        elif name == "DisplayName":
            self._owner_name = self.current_text
        elif name == "Name":
            self._name = self.current_text
        elif name == "CreationDate":
            self._creation_date = parse_iso8601(self.current_text, name)
        elif name == "Bucket":
            owner = (
                CanonicalUser(id=self._owner_id, display_name=self._owner_name)
                if self._owner_id
                else None
            )
            self._buckets.append(
                BucketMetadata(
                    name=require(self._name, "Name"),
                    creation_date=require(self._creation_date, "CreationDate"),
                    owner=owner,
                )
            )
            self._name = None
            self._creation_date = None

    def extract(self) -> list[BucketMetadata]:
        return list(self._buckets)


class ListBucketDecoder(XmlDecoder[ListBucketResponse]):
    """ListBucketResult -> one page of object metadata and common prefixes."""

    def __init__(self) -> None:
        super().__init__()
        self._bucket_name: Optional[str] = None
        self._prefix: Optional[str] = None
        self._marker: Optional[str] = None
        self._delimiter: Optional[str] = None
        self._max_keys: Optional[int] = None
        self._is_truncated = False
        self._contents: list[ObjectMetadata] = []
        self._common_prefixes: list[str] = []
        self._object: dict = {}
        self._owner_id: Optional[str] = None
        self._owner_name: Optional[str] = None

    def start_element(self, name: str, attributes: dict[str, str]) -> None:
        if name == "Contents":
            self._object = {}
            self._owner_id = None
            self._owner_name = None

    def end_element(self, name: str) -> None:
        text = self.current_text
        if self.within("Contents"):
            self._end_contents_field(name, text)
        elif name == "Contents":
            if self._owner_id:
                self._object["owner"] = CanonicalUser(
                    id=self._owner_id, display_name=self._owner_name
                )
            self._object["key"] = require(self._object.get("key"), "Key")
            self._contents.append(ObjectMetadata(**self._object))
        elif name == "Prefix" and self.within("CommonPrefixes"):
            self._common_prefixes.append(text)
        elif name == "Name":
            self._bucket_name = text
        elif name == "Prefix":
            self._prefix = text or None
        elif name == "Marker":
            self._marker = text or None
        elif name == "Delimiter":
            self._delimiter = text or None
        elif name == "MaxKeys":
            self._max_keys = parse_int(text, name)
        elif name == "IsTruncated":
            self._is_truncated = bool(parse_bool(text, name))

    def _end_contents_field(self, name: str, text: str) -> None:
        if name == "Key":
            self._object["key"] = text
        elif name == "LastModified":
            self._object["last_modified"] = parse_iso8601(text, name)
        elif name == "ETag":
            self._object["etag"] = _strip_etag(text)
        elif name == "Size":
            self._object["size"] = parse_int(text, name)
        elif name == "StorageClass":
            self._object["storage_class"] = text
        elif name == "ID":
            self._owner_id = text
        elif name == "DisplayName":
            self._owner_name = text

    def extract(self) -> ListBucketResponse:
        return ListBucketResponse(
            bucket_name=require(self._bucket_name, "Name"),
            contents=tuple(self._contents),
            common_prefixes=tuple(self._common_prefixes),
            prefix=self._prefix,
            marker=self._marker,
            delimiter=self._delimiter,
            max_keys=self._max_keys,
            is_truncated=self._is_truncated,
        )


class CopyObjectDecoder(XmlDecoder[CopyObjectResult]):
    """CopyObjectResult -> last-modified date and ETag of the new object."""

    def __init__(self) -> None:
        super().__init__()
        self._last_modified: Optional[datetime] = None
        self._etag: Optional[str] = None

    def end_element(self, name: str) -> None:
        if name == "LastModified":
            self._last_modified = parse_iso8601(self.current_text, name)
        elif name == "ETag":
            self._etag = _strip_etag(self.current_text)

    def extract(self) -> CopyObjectResult:
        return CopyObjectResult(
            last_modified=require(self._last_modified, "LastModified"),
            etag=require(self._etag, "ETag"),
        )


class ErrorDecoder(XmlDecoder[ErrorInfo]):
    """S3 ``<Error>`` body -> ErrorInfo.

    Unknown leaf elements land in ``details`` so provider extras such as
    ``BucketName`` or ``StringToSignBytes`` are not lost.
    """

    _KNOWN = {
        "Code": "code",
        "Message": "message",
        "RequestId": "request_id",
        "HostId": "request_token",
        "Resource": "resource",
    }

    def __init__(self) -> None:
        super().__init__()
        self._fields: dict[str, str] = {}
        self._details: dict[str, str] = {}

    def end_element(self, name: str) -> None:
        if name == "Error":
            return
        text = self.current_text
        field = self._KNOWN.get(name)
        if field is not None:
            self._fields[field] = text
        elif text:
            self._details[name] = text

    def extract(self) -> ErrorInfo:
        return ErrorInfo(details=dict(self._details), **self._fields)
