"""Runtime configuration."""

from .settings import RuntimeConfig, load_config, settings

__all__: list[str] = ["RuntimeConfig", "load_config", "settings"]
