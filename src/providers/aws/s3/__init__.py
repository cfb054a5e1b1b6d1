"""Amazon S3 operations and response decoders."""

from .client import S3Client

__all__: list[str] = ["S3Client"]
