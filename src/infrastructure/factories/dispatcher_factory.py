"""Factory wiring a command dispatcher from runtime configuration."""

from typing import Optional

from config.settings import RuntimeConfig
from domain.base.ports.logging_port import LoggingPort
from domain.base.ports.signer_port import RequestSigner
from domain.base.ports.transport_port import HttpTransport
from infrastructure.adapters.logging_adapter import LoggingAdapter
from infrastructure.http.dispatcher import CommandDispatcher
from infrastructure.http.transport import BotocoreTransport
from infrastructure.logging.wire import SignatureWire, WireLogger


class DispatcherFactory:
    """Creates dispatchers, transports and wire sinks for one configuration."""

    def __init__(self, config: RuntimeConfig, logger: Optional[LoggingPort] = None) -> None:
        self.config = config
        self.logger = logger or LoggingAdapter("dispatcher")

    def create_wire(self) -> WireLogger:
        if not self.config.wire_logging:
            return WireLogger()
        return WireLogger(LoggingAdapter("wire"))

    def create_signature_wire(self) -> SignatureWire:
        if not self.config.wire_logging:
            return SignatureWire()
        return SignatureWire(LoggingAdapter("signature"))

    def create_transport(self) -> HttpTransport:
        return BotocoreTransport(
            connect_timeout=self.config.connect_timeout,
            read_timeout=self.config.read_timeout,
            max_pool_connections=self.config.max_workers,
            logger=LoggingAdapter("transport"),
        )

    def create_dispatcher(
        self, signer: RequestSigner, transport: Optional[HttpTransport] = None
    ) -> CommandDispatcher:
        """
        Create a dispatcher that signs with ``signer``.

        Args:
            signer: Request signer for the target provider
            transport: Transport to send with; a ``BotocoreTransport`` by default

        Returns:
            A running dispatcher; the caller owns its shutdown
        """
        dispatcher = CommandDispatcher(
            transport=transport or self.create_transport(),
            signer=signer,
            max_workers=self.config.max_workers,
            logger=self.logger,
            wire=self.create_wire(),
        )
        self.logger.debug(
            "Created dispatcher with %d workers, wire logging %s",
            self.config.max_workers,
            "on" if self.config.wire_logging else "off",
        )
        return dispatcher
