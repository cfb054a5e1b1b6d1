"""Bucket and object listings returned by storage providers."""

from collections.abc import Iterator
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict


class CanonicalUser(BaseModel):
    """Owner of a bucket or object."""

    model_config = ConfigDict(frozen=True)

    id: str
    display_name: Optional[str] = None


class BucketMetadata(BaseModel):
    """One entry of a bucket listing."""

    model_config = ConfigDict(frozen=True)

    name: str
    creation_date: datetime
    owner: Optional[CanonicalUser] = None


class ObjectMetadata(BaseModel):
    """One entry of an object listing."""

    model_config = ConfigDict(frozen=True)

    key: str
    last_modified: Optional[datetime] = None
    etag: Optional[str] = None
    size: Optional[int] = None
    owner: Optional[CanonicalUser] = None
    storage_class: Optional[str] = None

    @property
    def etag_bytes(self) -> Optional[bytes]:
        """The MD5 digest when the ETag is a plain hex digest."""
        if not self.etag:
            return None
        try:
            return bytes.fromhex(self.etag)
        except ValueError:
            return None


class CopyObjectResult(BaseModel):
    """Result document of a server-side object copy."""

    model_config = ConfigDict(frozen=True)

    last_modified: datetime
    etag: str


@dataclass(frozen=True)
class ListBucketResponse:
    """Contents of one bucket listing page."""

    bucket_name: str
    contents: tuple[ObjectMetadata, ...] = ()
    common_prefixes: tuple[str, ...] = ()
    prefix: Optional[str] = None
    marker: Optional[str] = None
    delimiter: Optional[str] = None
    max_keys: Optional[int] = None
    is_truncated: bool = False

    def __iter__(self) -> Iterator[ObjectMetadata]:
        return iter(self.contents)

    def __len__(self) -> int:
        return len(self.contents)

    def size(self) -> int:
        return len(self.contents)
