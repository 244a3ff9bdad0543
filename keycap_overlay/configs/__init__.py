"""Overlay profile loading and validation."""

from keycap_overlay.configs.loader import (
    CellOverride,
    ConfigError,
    DegenerateGeometryError,
    KeyLayout,
    LegendStyle,
    LineStyle,
    OverlayConfig,
    OverlayGeometry,
    OverlayModel,
    PageConfig,
    RegistrationGeometry,
    load_config,
)

__all__ = [
    "CellOverride",
    "ConfigError",
    "DegenerateGeometryError",
    "KeyLayout",
    "LegendStyle",
    "LineStyle",
    "OverlayConfig",
    "OverlayGeometry",
    "OverlayModel",
    "PageConfig",
    "RegistrationGeometry",
    "load_config",
]
