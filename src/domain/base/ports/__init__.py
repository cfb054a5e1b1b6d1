"""Domain ports implemented by infrastructure adapters."""

from .logging_port import LoggingPort, NullLogger
from .signer_port import RequestSigner
from .transport_port import HttpTransport

__all__: list[str] = [
    "HttpTransport",
    "LoggingPort",
    "NullLogger",
    "RequestSigner",
]
