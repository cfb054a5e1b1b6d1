"""
Decoders for vCloud Express documents.

``VAppDecoder`` hosts two CIM decoders and shares one event stream with them.
It owns the ``VApp`` and ``Link`` elements and everything inside
``OperatingSystemSection`` and ``NetworkConnection``; those events are never
forwarded. Everything else goes to the children in registration order
(system first, then allocations). ``System`` and ``Item`` closings are handed
to the children before their results are collected.
"""

from typing import Optional

from domain.compute.models import (
    ReferenceType,
    ResourceAllocationSettingData,
    VApp,
    VirtualSystemSettingData,
)
from domain.http.error_info import ErrorInfo
from infrastructure.xml.decoder import XmlDecoder, parse_int, require
from providers.vcloud import media_types
from providers.vcloud.cim_decoders import (
    ResourceAllocationSettingDataDecoder,
    VirtualSystemSettingDataDecoder,
)
from providers.vcloud.status import StatusResolver

OS_SECTION = "OperatingSystemSection"
NETWORK_CONNECTION = "NetworkConnection"


def new_reference(attributes: dict[str, str], element: str) -> ReferenceType:
    return ReferenceType(
        href=require(attributes.get("href"), element + "@href"),
        name=attributes.get("name"),
        type=attributes.get("type"),
    )


class VAppDecoder(XmlDecoder[VApp]):
    """``<VApp>`` -> VApp, with system and resource allocation sections."""

    def __init__(
        self,
        api_version: str,
        system_decoder: Optional[VirtualSystemSettingDataDecoder] = None,
        allocation_decoder: Optional[ResourceAllocationSettingDataDecoder] = None,
    ) -> None:
        self._system_decoder = system_decoder or VirtualSystemSettingDataDecoder()
        self._allocation_decoder = allocation_decoder or ResourceAllocationSettingDataDecoder()
        super().__init__(children=(self._system_decoder, self._allocation_decoder))
        self._status_resolver = StatusResolver.for_version(api_version)

        self._name: Optional[str] = None
        self._location: Optional[str] = None
        self._status = None
        self._size: Optional[int] = None
        self._vdc: Optional[ReferenceType] = None
        self._extended_info: list[ReferenceType] = []
        self._network_to_addresses: dict[str, list[str]] = {}
        self._network_name: Optional[str] = None
        self._in_os = False
        self._os_type: Optional[int] = None
        self._os_description: Optional[str] = None
        self._system: Optional[VirtualSystemSettingData] = None
        self._allocations: list[ResourceAllocationSettingData] = []

    @property
    def status_resolver(self) -> StatusResolver:
        return self._status_resolver

    def start_element(self, name: str, attributes: dict[str, str]) -> None:
        if name == "VApp":
            self._name = attributes.get("name")
            self._location = attributes.get("href")
            self._status = self._status_resolver.resolve(attributes.get("status"))
            self._size = parse_int(attributes.get("size"), "VApp@size")
        elif name == "Link":
            self._start_link(attributes)
        elif name == OS_SECTION:
            self._in_os = True
            self._os_type = parse_int(attributes.get("id"), OS_SECTION + "@id")
        elif name == NETWORK_CONNECTION:
            self._network_name = attributes.get("Network") or attributes.get("name")
        elif self._in_os or self.within(NETWORK_CONNECTION):
            pass
        else:
            self.forward_start(name, attributes)

    def _start_link(self, attributes: dict[str, str]) -> None:
        link_type = attributes.get("type")
        if link_type is None:
            return
        if link_type == media_types.VDC_XML:
            self._vdc = new_reference(attributes, "Link")
        else:
            reference = new_reference(attributes, "Link")
            if reference not in self._extended_info:
                self._extended_info.append(reference)

    def end_element(self, name: str) -> None:
        if name in ("VApp", "Link"):
            return
        if name == OS_SECTION:
            self._in_os = False
        elif self._in_os:
            if name == "Description":
                self._os_description = self.current_text
        elif name == NETWORK_CONNECTION:
            self._network_name = None
        elif self.within(NETWORK_CONNECTION):
            if name == "IpAddress":
                self._add_address(self.current_text)
        elif name == VirtualSystemSettingDataDecoder.SECTION:
            self.forward_end(name)
            self._system = self._system_decoder.extract()
        elif name == ResourceAllocationSettingDataDecoder.SECTION:
            self.forward_end(name)
            allocation = self._allocation_decoder.extract()
            if allocation is not None and allocation not in self._allocations:
                self._allocations.append(allocation)
        else:
            self.forward_end(name)

    def _add_address(self, address: str) -> None:
        network = self._network_name or ""
        self._network_to_addresses.setdefault(network, []).append(address)

    def extract(self) -> VApp:
        return VApp(
            name=require(self._name, "VApp@name"),
            location=require(self._location, "VApp@href"),
            status=self._status,
            size=self._size,
            vdc=self._vdc,
            network_to_addresses={
                network: tuple(addresses)
                for network, addresses in self._network_to_addresses.items()
            },
            os_type=self._os_type,
            operating_system_description=self._os_description,
            system=self._system,
            resource_allocations=tuple(self._allocations),
            extended_info=tuple(self._extended_info),
        )


class VCloudErrorDecoder(XmlDecoder[ErrorInfo]):
    """``<Error minorErrorCode=... message=... majorErrorCode=...>`` -> ErrorInfo."""

    def __init__(self) -> None:
        super().__init__()
        self._code: Optional[str] = None
        self._message: Optional[str] = None
        self._details: dict[str, str] = {}

    def start_element(self, name: str, attributes: dict[str, str]) -> None:
        if name != "Error":
            return
        self._code = attributes.get("minorErrorCode")
        self._message = attributes.get("message")
        for key in ("majorErrorCode", "vendorSpecificErrorCode", "stackTrace"):
            if attributes.get(key):
                self._details[key] = attributes[key]

    def extract(self) -> ErrorInfo:
        return ErrorInfo(code=self._code, message=self._message, details=dict(self._details))
