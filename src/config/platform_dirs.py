"""Platform-specific directory detection for runtime configuration."""

import os
import sys
from pathlib import Path


def in_virtualenv() -> bool:
    """Check if running in a virtual environment."""
    return sys.prefix != sys.base_prefix


def is_user_install() -> bool:
    return sys.prefix.startswith(str(Path.home()))


def is_system_install() -> bool:
    return sys.prefix.startswith(("/usr", "/opt"))


def get_config_location() -> Path:
    """Get the directory searched for ``cloudwire.toml`` and ``cloudwire.json``.

    Priority:
    1. CLOUDWIRE_CONFIG_DIR environment variable
    2. Development: ./config next to the nearest pyproject.toml
    3. User install: ~/.config/cloudwire
    4. System install: <prefix>/etc/cloudwire
    5. Virtualenv: config directory sibling to the venv
    6. Fallback: current directory
    """
    if env_dir := os.environ.get("CLOUDWIRE_CONFIG_DIR"):
        return Path(env_dir)

    cwd = Path.cwd()
    for parent in [cwd] + list(cwd.parents):
        if (parent / "pyproject.toml").exists():
            return parent / "config"

    if is_user_install():
        return Path.home() / ".config" / "cloudwire"

    if is_system_install():
        return Path(sys.prefix) / "etc" / "cloudwire"

    if in_virtualenv():
        return Path(sys.prefix).parent / "config"

    return cwd


def get_logs_location() -> Path:
    """Get the log directory: CLOUDWIRE_LOG_DIR, else a sibling of the config directory."""
    if env_dir := os.environ.get("CLOUDWIRE_LOG_DIR"):
        return Path(env_dir)
    return get_config_location().parent / "logs"
