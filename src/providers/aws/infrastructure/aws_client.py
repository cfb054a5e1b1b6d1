"""AWS client wrapper assembling credentials, signer and dispatcher for S3."""

import threading
from typing import Any, Optional

import boto3
from botocore.credentials import Credentials
from botocore.exceptions import BotoCoreError, ProfileNotFound

from config.settings import RuntimeConfig, load_config
from domain.base.exceptions import ConfigurationError
from domain.base.ports.logging_port import LoggingPort
from domain.base.ports.signer_port import RequestSigner
from domain.base.ports.transport_port import HttpTransport
from infrastructure.adapters.logging_adapter import LoggingAdapter
from infrastructure.factories.dispatcher_factory import DispatcherFactory
from infrastructure.http.dispatcher import CommandDispatcher
from providers.aws.infrastructure.signing import HmacV1RequestSigner, SigV4RequestSigner
from providers.aws.s3.client import S3Client


class AWSClient:
    """Wrapper owning the S3 command pipeline for one region and profile."""

    def __init__(
        self,
        config: Optional[RuntimeConfig] = None,
        logger: Optional[LoggingPort] = None,
        session: Optional[boto3.Session] = None,
        transport: Optional[HttpTransport] = None,
    ) -> None:
        """
        Initialize the AWS client wrapper.

        Args:
            config: Runtime configuration; loaded from settings when omitted
            logger: Logger for logging messages
            session: boto3 session to take credentials from
            transport: Transport override, mostly for tests
        """
        self.config = config or load_config()
        self._logger = logger or LoggingAdapter("aws")
        self._transport = transport
        self._factory = DispatcherFactory(self.config, self._logger)
        self._lock = threading.RLock()
        self._dispatcher: Optional[CommandDispatcher] = None
        self._s3: Optional[S3Client] = None

        self.region_name = self.config.region
        self.profile_name = self.config.profile

        try:
            self.session = session or boto3.Session(
                region_name=self.region_name, profile_name=self.profile_name
            )
        except ProfileNotFound as e:
            raise ConfigurationError(
                f"AWS profile not found: {self.profile_name}",
                details={"profile": self.profile_name},
            ) from e

        self._logger.info(
            "AWS client initialized with region: %s, profile: %s, signature: %s, endpoint: %s",
            self.region_name,
            self.profile_name or "default",
            self.config.signature_version,
            self.config.endpoint,
        )

    @property
    def credentials(self) -> Credentials:
        try:
            credentials = self.session.get_credentials()
        except BotoCoreError as e:
            raise ConfigurationError(f"Could not resolve AWS credentials: {e}") from e
        if credentials is None:
            raise ConfigurationError(
                "No AWS credentials found",
                details={"profile": self.profile_name, "region": self.region_name},
            )
        return credentials

    def create_signer(self) -> RequestSigner:
        wire = self._factory.create_signature_wire()
        if self.config.signature_version == "s3v4":
            return SigV4RequestSigner(
                self.credentials, "s3", self.region_name, wire=wire, logger=self._logger
            )
        return HmacV1RequestSigner(self.credentials, wire=wire, logger=self._logger)

    @property
    def dispatcher(self) -> CommandDispatcher:
        with self._lock:
            if self._dispatcher is None:
                self._dispatcher = self._factory.create_dispatcher(
                    self.create_signer(), transport=self._transport
                )
            return self._dispatcher

    @property
    def s3(self) -> S3Client:
        """Lazily created S3 client."""
        with self._lock:
            if self._s3 is None:
                self._s3 = S3Client(
                    self.dispatcher,
                    self.config.endpoint,
                    logger=self._logger,
                    signature_mismatch_codes=self.config.signature_mismatch_codes,
                )
                self._logger.debug("Created S3 client for %s", self.config.endpoint)
            return self._s3

    def close(self, wait: bool = True) -> None:
        with self._lock:
            if self._dispatcher is not None:
                self._dispatcher.shutdown(wait=wait)
                self._dispatcher = None
                self._s3 = None

    def __enter__(self) -> "AWSClient":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()
