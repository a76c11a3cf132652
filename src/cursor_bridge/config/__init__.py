"""Settings model and loader for cursor-bridge.yaml."""

from cursor_bridge.config.models import BridgeSettings
from cursor_bridge.config.parser import ConfigError, load_settings

__all__ = [
    "BridgeSettings",
    "ConfigError",
    "load_settings",
]
