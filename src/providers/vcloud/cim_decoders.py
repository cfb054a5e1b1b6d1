"""
Decoders for the DMTF CIM sections embedded in OVF-style documents.

Both decoders are meant to be hosted by a parent decoder. They see every
event the parent forwards and only capture text while inside their own
section (``System`` or ``Item``). The parent calls ``extract`` once the
section closes; extraction resets the decoder for the next section.
"""

from typing import Any, Optional

from domain.compute.models import ResourceAllocationSettingData, VirtualSystemSettingData
from infrastructure.xml.decoder import XmlDecoder, parse_bool, parse_int


class VirtualSystemSettingDataDecoder(XmlDecoder[Optional[VirtualSystemSettingData]]):
    """``<System>`` -> VirtualSystemSettingData."""

    SECTION = "System"

    _FIELDS = {
        "ElementName": "element_name",
        "InstanceID": "instance_id",
        "Caption": "caption",
        "Description": "description",
        "VirtualSystemIdentifier": "virtual_system_identifier",
        "VirtualSystemType": "virtual_system_type",
    }

    def __init__(self) -> None:
        super().__init__()
        self._in_section = False
        self._values: dict[str, Any] = {}

    def start_element(self, name: str, attributes: dict[str, str]) -> None:
        if name == self.SECTION:
            self._in_section = True
            self._values = {}

    def end_element(self, name: str) -> None:
        if name == self.SECTION:
            self._in_section = False
        elif self._in_section and name in self._FIELDS:
            self._values[self._FIELDS[name]] = self.current_text or None

    def extract(self) -> Optional[VirtualSystemSettingData]:
        if not self._values:
            return None
        result = VirtualSystemSettingData(**self._values)
        self._values = {}
        return result


class ResourceAllocationSettingDataDecoder(XmlDecoder[Optional[ResourceAllocationSettingData]]):
    """``<Item>`` -> ResourceAllocationSettingData."""

    SECTION = "Item"

    _TEXT_FIELDS = {
        "InstanceID": "instance_id",
        "ElementName": "element_name",
        "Caption": "caption",
        "Description": "description",
        "Address": "address",
        "AddressOnParent": "address_on_parent",
        "AllocationUnits": "allocation_units",
        "Parent": "parent",
        "ResourceSubType": "resource_sub_type",
        "VirtualQuantityUnits": "virtual_quantity_units",
    }
    _INT_FIELDS = {
        "ResourceType": "resource_type",
        "VirtualQuantity": "virtual_quantity",
        "Reservation": "reservation",
        "Limit": "limit",
        "Weight": "weight",
    }

    def __init__(self) -> None:
        super().__init__()
        self._in_section = False
        self._reset()

    def _reset(self) -> None:
        self._values: dict[str, Any] = {}
        self._connections: list[str] = []
        self._host_resources: list[str] = []

    def start_element(self, name: str, attributes: dict[str, str]) -> None:
        if name == self.SECTION:
            self._in_section = True
            self._reset()

    def end_element(self, name: str) -> None:
        if name == self.SECTION:
            self._in_section = False
            return
        if not self._in_section:
            return

        text = self.current_text
        if name in self._TEXT_FIELDS:
            self._values[self._TEXT_FIELDS[name]] = text or None
        elif name in self._INT_FIELDS:
            self._values[self._INT_FIELDS[name]] = parse_int(text, name)
        elif name == "AutomaticAllocation":
            self._values["automatic_allocation"] = parse_bool(text, name)
        elif name == "Connection":
            if text:
                self._connections.append(text)
        elif name == "HostResource":
            if text:
                self._host_resources.append(text)

    def extract(self) -> Optional[ResourceAllocationSettingData]:
        if not (self._values or self._connections or self._host_resources):
            return None
        result = ResourceAllocationSettingData(
            connections=tuple(self._connections),
            host_resources=tuple(self._host_resources),
            **self._values,
        )
        self._reset()
        return result
