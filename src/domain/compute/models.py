"""Virtual appliance (vApp) descriptors and their CIM sections."""

from collections.abc import Mapping
from enum import Enum
from types import MappingProxyType
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator


class Status(int, Enum):
    """Power and deployment status of a vApp."""

    FAILED_CREATION = -1
    UNRESOLVED = 0
    RESOLVED = 1
    DEPLOYED = 2
    SUSPENDED = 3
    ON = 4
    WAITING_FOR_INPUT = 5
    UNKNOWN = 6
    UNRECOGNIZED = 7
    OFF = 8
    INCONSISTENT = 9
    MIXED = 10

    @classmethod
    def from_value(cls, value: str) -> "Status":
        try:
            return cls(int(value))
        except ValueError:
            return cls.UNRECOGNIZED


class ResourceType(int, Enum):
    """DMTF CIM resource types commonly seen in virtual hardware sections."""

    OTHER = 1
    COMPUTER_SYSTEM = 2
    PROCESSOR = 3
    MEMORY = 4
    IDE_CONTROLLER = 5
    PARALLEL_SCSI_HBA = 6
    FC_HBA = 7
    ISCSI_HBA = 8
    IB_HCA = 9
    ETHERNET_ADAPTER = 10
    OTHER_NETWORK_ADAPTER = 11
    IO_SLOT = 12
    IO_DEVICE = 13
    FLOPPY_DRIVE = 14
    CD_DRIVE = 15
    DVD_DRIVE = 16
    DISK_DRIVE = 17
    TAPE_DRIVE = 18
    STORAGE_EXTENT = 19
    OTHER_STORAGE_DEVICE = 20
    SERIAL_PORT = 21
    PARALLEL_PORT = 22
    USB_CONTROLLER = 23
    GRAPHICS_CONTROLLER = 24
    IEEE_1394_CONTROLLER = 25
    PARTITIONABLE_UNIT = 26
    BASE_PARTITIONABLE_UNIT = 27
    POWER = 28
    COOLING_CAPACITY = 29
    ETHERNET_SWITCH_PORT = 30
    LOGICAL_DISK = 31
    STORAGE_VOLUME = 32
    ETHERNET_CONNECTION = 33


class ReferenceType(BaseModel):
    """Typed link to another provider resource."""

    model_config = ConfigDict(frozen=True)

    href: str
    name: Optional[str] = None
    type: Optional[str] = None


class VirtualSystemSettingData(BaseModel):
    """CIM_VirtualSystemSettingData section of a vApp."""

    model_config = ConfigDict(frozen=True)

    element_name: Optional[str] = None
    instance_id: Optional[str] = None
    caption: Optional[str] = None
    description: Optional[str] = None
    virtual_system_identifier: Optional[str] = None
    virtual_system_type: Optional[str] = None


class ResourceAllocationSettingData(BaseModel):
    """CIM_ResourceAllocationSettingData item of a virtual hardware section."""

    model_config = ConfigDict(frozen=True)

    instance_id: Optional[str] = None
    element_name: Optional[str] = None
    caption: Optional[str] = None
    description: Optional[str] = None
    address: Optional[str] = None
    address_on_parent: Optional[str] = None
    allocation_units: Optional[str] = None
    automatic_allocation: Optional[bool] = None
    connections: tuple[str, ...] = ()
    host_resources: tuple[str, ...] = ()
    parent: Optional[str] = None
    resource_sub_type: Optional[str] = None
    resource_type: Optional[int] = None
    virtual_quantity: Optional[int] = None
    virtual_quantity_units: Optional[str] = None
    reservation: Optional[int] = None
    limit: Optional[int] = None
    weight: Optional[int] = None

    @property
    def kind(self) -> Optional[ResourceType]:
        """Known CIM resource type, or None for reserved or vendor values."""
        if self.resource_type is None:
            return None
        try:
            return ResourceType(self.resource_type)
        except ValueError:
            return None


class VApp(BaseModel):
    """Virtual appliance as described by a vCloud Express API."""

    model_config = ConfigDict(frozen=True)

    name: str
    location: str
    status: Optional[Status] = None
    size: Optional[int] = None
    vdc: Optional[ReferenceType] = None
    network_to_addresses: Mapping[str, tuple[str, ...]] = Field(
        default_factory=dict, validate_default=True
    )
    os_type: Optional[int] = None
    operating_system_description: Optional[str] = None
    system: Optional[VirtualSystemSettingData] = None
    resource_allocations: tuple[ResourceAllocationSettingData, ...] = ()
    extended_info: tuple[ReferenceType, ...] = ()

    @field_validator("network_to_addresses", mode="after")
    @classmethod
    def _read_only_addresses(
        cls, value: Mapping[str, tuple[str, ...]]
    ) -> Mapping[str, tuple[str, ...]]:
        return MappingProxyType(dict(value))

    @field_serializer("network_to_addresses")
    def _serialize_addresses(
        self, value: Mapping[str, tuple[str, ...]]
    ) -> dict[str, tuple[str, ...]]:
        return dict(value)
