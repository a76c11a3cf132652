"""Model catalog — static table and ``agent models`` discovery."""

from cursor_bridge.catalog.discovery import (
    DiscoveryError,
    discover_models,
    infer_reasoning,
    load_models,
    parse_models_output,
)
from cursor_bridge.catalog.static import (
    STATIC_MODELS,
    STATIC_MODELS_BY_ID,
    ModelDefinition,
)

__all__ = [
    "STATIC_MODELS",
    "STATIC_MODELS_BY_ID",
    "DiscoveryError",
    "ModelDefinition",
    "discover_models",
    "infer_reasoning",
    "load_models",
    "parse_models_output",
]
