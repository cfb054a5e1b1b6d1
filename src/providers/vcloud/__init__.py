"""vCloud Express provider: vApp decoding and client."""

from .client import VAppClient
from .decoders import VAppDecoder, VCloudErrorDecoder
from .status import StatusResolver

__all__: list[str] = ["StatusResolver", "VAppClient", "VAppDecoder", "VCloudErrorDecoder"]
