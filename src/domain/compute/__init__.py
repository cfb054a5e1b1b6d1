"""Compute domain results."""

from .models import (
    ReferenceType,
    ResourceAllocationSettingData,
    ResourceType,
    Status,
    VApp,
    VirtualSystemSettingData,
)

__all__: list[str] = [
    "ReferenceType",
    "ResourceAllocationSettingData",
    "ResourceType",
    "Status",
    "VApp",
    "VirtualSystemSettingData",
]
