"""Overlay configuration loading and legend tables."""

from keypad_overlay.configs.legends import (
    DuplicateKeyCodeError,
    LegendTable,
    key_code,
    load_legends,
)
from keypad_overlay.configs.loader import (
    ConfigError,
    LayoutSettings,
    OverlayConfig,
    OverlayModel,
    load_config,
)

__all__ = [
    "ConfigError",
    "DuplicateKeyCodeError",
    "LayoutSettings",
    "LegendTable",
    "OverlayConfig",
    "OverlayModel",
    "key_code",
    "load_config",
    "load_legends",
]
