"""
Cloudwire - provider-agnostic client runtime for cloud HTTP APIs.

This package provides the cloudwire namespace for the public API.
Users can import as: from cloudwire import CommandDispatcher, S3Client
"""

__version__ = "0.1.0"

from config.settings import RuntimeConfig, load_config
from domain.base.exceptions import (
    CommandCancelledError,
    CommandError,
    CommandStateError,
    DecodingError,
    DomainException,
    HttpResponseError,
    TransportError,
)
from domain.command.aggregate import Command, CommandState, ResponseDecoding
from domain.http import ErrorInfo, HttpHeaders, HttpRequest, HttpResponse
from infrastructure.http.dispatcher import CommandDispatcher
from infrastructure.http.transport import BotocoreTransport
from infrastructure.logging.logger import setup_logging
from infrastructure.xml.parser import decode, replay
from providers.aws.infrastructure.aws_client import AWSClient
from providers.aws.infrastructure.signing import HmacV1RequestSigner, SigV4RequestSigner
from providers.aws.s3.client import S3Client
from providers.vcloud.client import VAppClient

__all__: list[str] = [
    "AWSClient",
    "BotocoreTransport",
    "Command",
    "CommandCancelledError",
    "CommandDispatcher",
    "CommandError",
    "CommandState",
    "CommandStateError",
    "DecodingError",
    "DomainException",
    "ErrorInfo",
    "HmacV1RequestSigner",
    "HttpHeaders",
    "HttpRequest",
    "HttpResponse",
    "HttpResponseError",
    "ResponseDecoding",
    "RuntimeConfig",
    "S3Client",
    "SigV4RequestSigner",
    "TransportError",
    "VAppClient",
    "decode",
    "load_config",
    "replay",
    "setup_logging",
]
