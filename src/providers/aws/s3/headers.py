"""S3 header names."""

REQUEST_ID = "x-amz-request-id"
REQUEST_TOKEN = "x-amz-id-2"
COPY_SOURCE = "x-amz-copy-source"
METADATA_DIRECTIVE = "x-amz-metadata-directive"
COPY_SOURCE_IF_MATCH = "x-amz-copy-source-if-match"
COPY_SOURCE_IF_NONE_MATCH = "x-amz-copy-source-if-none-match"
USER_METADATA_PREFIX = "x-amz-meta-"
