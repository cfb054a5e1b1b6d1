"""Structured description of a failed exchange."""

from collections.abc import Mapping
from types import MappingProxyType
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator


class ErrorInfo(BaseModel):
    """Error body and request context of a failed command.

    ``string_to_sign`` is only populated for signature mismatches.
    """

    model_config = ConfigDict(frozen=True)

    code: Optional[str] = None
    message: Optional[str] = None
    request_id: Optional[str] = None
    request_token: Optional[str] = None
    resource: Optional[str] = None
    string_to_sign: Optional[str] = None
    details: Mapping[str, str] = Field(default_factory=dict, validate_default=True)

    @field_validator("details", mode="after")
    @classmethod
    def _read_only_details(cls, value: Mapping[str, str]) -> Mapping[str, str]:
        return MappingProxyType(dict(value))

    @field_serializer("details")
    def _serialize_details(self, value: Mapping[str, str]) -> dict[str, str]:
        return dict(value)

    @property
    def is_degraded(self) -> bool:
        """True when nothing was decoded from the error body."""
        return self.code is None and self.message is None
