"""Version-dependent interpretation of the vApp ``status`` attribute."""

from typing import Optional

from domain.compute.models import Status

LEGACY_API_VERSION_MARKER = "0.8"
LEGACY_OFF_VALUE = "2"


class StatusResolver:
    """Maps a raw status attribute to ``Status`` for one API version.

    Build one per decoder with ``for_version``; the version is inspected once.
    """

    def __init__(self, api_version: str, legacy_off: bool = False) -> None:
        self.api_version = api_version
        self.legacy_off = legacy_off

    @classmethod
    def for_version(cls, api_version: Optional[str]) -> "StatusResolver":
        version = str(api_version or "")
        return cls(version, legacy_off=uses_legacy_off_status(version))

    def resolve(self, value: Optional[str]) -> Optional[Status]:
        if value is None or value.strip() == "":
            return None
        value = value.strip()
        if self.legacy_off and value == LEGACY_OFF_VALUE:
            return Status.OFF
        return Status.from_value(value)

    def __repr__(self) -> str:
        return f"StatusResolver(api_version={self.api_version!r}, legacy_off={self.legacy_off})"


def uses_legacy_off_status(api_version: str) -> bool:
    """Servers speaking a 0.8 API report a powered-off vApp as status 2."""
    return LEGACY_API_VERSION_MARKER in api_version
