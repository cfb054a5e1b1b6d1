"""vCloud Express vApp operations."""

from typing import Optional

from config.settings import RuntimeConfig, load_config
from domain.base.ports.logging_port import LoggingPort, NullLogger
from domain.command.aggregate import Command, ResponseDecoding
from domain.compute.models import VApp
from domain.http.request import HttpRequest
from infrastructure.http.dispatcher import CommandDispatcher
from providers.vcloud import media_types
from providers.vcloud.decoders import VAppDecoder, VCloudErrorDecoder


class VAppClient:
    """Issues vApp commands through a dispatcher.

    The API version decides how the ``status`` attribute is read; it is
    fixed for the lifetime of the client.
    """

    def __init__(
        self,
        dispatcher: CommandDispatcher,
        api_version: str,
        logger: Optional[LoggingPort] = None,
    ) -> None:
        self._dispatcher = dispatcher
        self.api_version = str(api_version)
        self._logger = logger or NullLogger()

    @classmethod
    def from_config(
        cls,
        dispatcher: CommandDispatcher,
        config: Optional[RuntimeConfig] = None,
        logger: Optional[LoggingPort] = None,
    ) -> "VAppClient":
        """Client speaking the API version named in the runtime configuration."""
        config = config or load_config()
        return cls(dispatcher, config.api_version, logger=logger)

    def get_vapp(self, href: str) -> Command[VApp]:
        """GET a vApp by its href; the command settles with a ``VApp``."""
        request = HttpRequest("GET", href, headers={"Accept": media_types.VAPP_XML})
        decoding = ResponseDecoding(
            error=VCloudErrorDecoder,
            success=lambda: VAppDecoder(self.api_version),
        )
        self._logger.debug("Fetching vApp %s (API %s)", href, self.api_version)
        return self._dispatcher.submit(request, decoding)
