"""Storage domain results."""

from .models import (
    BucketMetadata,
    CanonicalUser,
    CopyObjectResult,
    ListBucketResponse,
    ObjectMetadata,
)

__all__: list[str] = [
    "BucketMetadata",
    "CanonicalUser",
    "CopyObjectResult",
    "ListBucketResponse",
    "ObjectMetadata",
]
