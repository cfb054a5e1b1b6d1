"""
Runtime settings.

``settings`` is the Dynaconf object every component reads from: values come
from ``cloudwire.toml`` / ``cloudwire.json`` in the config directory, a
``.env`` file, and ``CLOUDWIRE_*`` environment variables, in that order.
``load_config`` validates them into a typed ``RuntimeConfig``.
"""

from typing import Any, Optional

from dynaconf import Dynaconf
from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic import ValidationError as PydanticValidationError

from config.platform_dirs import get_config_location
from domain.base.exceptions import ConfigurationError

def build_settings() -> Dynaconf:
    """Create the settings object, rooted at the config directory when it exists."""
    options: dict[str, Any] = {}
    config_dir = get_config_location()
    if config_dir.is_dir():
        options["root_path"] = str(config_dir)
    return Dynaconf(
        envvar_prefix="CLOUDWIRE",
        settings_files=["cloudwire.toml", "cloudwire.json"],
        environments=True,
        env_switcher="CLOUDWIRE_ENV",
        load_dotenv=True,
        **options,
    )


settings = build_settings()

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
LOG_DESTINATIONS = ("stdout", "file", "both")
SIGNATURE_VERSIONS = ("s3", "s3v4")


class RuntimeConfig(BaseModel):
    """Validated runtime configuration."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    api_version: str = "0.8"
    endpoint: str = "https://s3.amazonaws.com"
    region: str = "us-east-1"
    profile: Optional[str] = None
    signature_version: str = "s3"
    max_workers: int = Field(default=10, ge=1)
    connect_timeout: float = Field(default=5, gt=0)
    read_timeout: float = Field(default=10, gt=0)
    wire_logging: bool = False
    log_level: str = "INFO"
    log_destination: str = "stdout"
    log_dir: Optional[str] = None
    log_filename: str = "cloudwire.log"
    signature_mismatch_codes: frozenset[str] = frozenset({"SignatureDoesNotMatch"})

    @field_validator("api_version", mode="before")
    @classmethod
    def _version_as_string(cls, value: Any) -> Any:
        # TOML and env loaders turn 0.8 into a float
        if isinstance(value, (int, float)):
            return str(value)
        return value

    @field_validator("log_level")
    @classmethod
    def _known_level(cls, value: str) -> str:
        value = value.upper()
        if value not in LOG_LEVELS:
            raise ValueError(f"log_level must be one of {', '.join(LOG_LEVELS)}")
        return value

    @field_validator("signature_version")
    @classmethod
    def _known_signature_version(cls, value: str) -> str:
        if value not in SIGNATURE_VERSIONS:
            raise ValueError(f"signature_version must be one of {', '.join(SIGNATURE_VERSIONS)}")
        return value

    @field_validator("log_destination")
    @classmethod
    def _known_destination(cls, value: str) -> str:
        value = value.lower()
        if value not in LOG_DESTINATIONS:
            raise ValueError(f"log_destination must be one of {', '.join(LOG_DESTINATIONS)}")
        return value


def load_config(source: Optional[Any] = None, **overrides: Any) -> RuntimeConfig:
    """Build a ``RuntimeConfig`` from Dynaconf settings plus explicit overrides."""
    source = settings if source is None else source
    values: dict[str, Any] = {}
    for name in RuntimeConfig.model_fields:
        value = source.get(name.upper())
        if value is not None:
            values[name] = value
    values.update({k: v for k, v in overrides.items() if v is not None})

    try:
        return RuntimeConfig(**values)
    except PydanticValidationError as e:
        raise ConfigurationError(
            f"Invalid runtime configuration: {e}",
            details={"errors": e.errors(include_url=False)},
        ) from e
