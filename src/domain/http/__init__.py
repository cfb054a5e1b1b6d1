"""HTTP value objects exchanged with signers and transports."""

from .error_info import ErrorInfo
from .headers import HttpHeaders
from .request import HttpRequest
from .response import HttpResponse

__all__: list[str] = ["ErrorInfo", "HttpHeaders", "HttpRequest", "HttpResponse"]
