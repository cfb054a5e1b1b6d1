"""AWS-specific failures raised when an S3 command settles with an error status."""

from typing import Optional

from domain.base.exceptions import HttpResponseError
from domain.http.error_info import ErrorInfo
from domain.http.request import HttpRequest

SIGNATURE_MISMATCH_CODES = frozenset({"SignatureDoesNotMatch"})


class S3ResponseError(HttpResponseError):
    """S3 answered with a failure status."""


class AuthorizationError(S3ResponseError):
    """Credentials were rejected or the signature did not match."""


class AWSEntityNotFoundError(S3ResponseError):
    """Bucket or key does not exist."""


class RateLimitError(S3ResponseError):
    """Request rate exceeded; callers may resubmit a fresh command later."""


class AWSValidationError(S3ResponseError):
    """Request parameters were rejected."""


def convert_s3_error(
    error_info: ErrorInfo, status_code: int, request: Optional[HttpRequest] = None
) -> S3ResponseError:
    """Map an S3 error code to the matching exception type."""
    code = error_info.code

    if code in ["AccessDenied", "InvalidAccessKeyId", "SignatureDoesNotMatch"]:
        return AuthorizationError(error_info, status_code, request)
    elif code in ["NoSuchBucket", "NoSuchKey", "NoSuchUpload"]:
        return AWSEntityNotFoundError(error_info, status_code, request)
    elif code in ["SlowDown", "RequestLimitExceeded"]:
        return RateLimitError(error_info, status_code, request)
    elif code in ["InvalidArgument", "InvalidBucketName", "MalformedXML"]:
        return AWSValidationError(error_info, status_code, request)
    else:
        return S3ResponseError(error_info, status_code, request)
