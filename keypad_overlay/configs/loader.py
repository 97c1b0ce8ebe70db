"""Configuration loader for the overlay generator.

Loads and validates ``overlays.yaml`` into typed, frozen dataclasses.
Page size, registration insets, layout settings and the per-model keypad
geometry all come from the config -- nothing is hardcoded in the
renderers.

Lengths are stored in **inches**.  Keys ending in ``_mm`` are converted
on load; ``_pt`` font sizes are converted to inches by
``LayoutSettings.legend_size_in``.

The ``page`` section may be omitted, in which case US letter is used.

Usage::

    from keypad_overlay.configs.loader import load_config
    cfg = load_config()                        # default path
    cfg = load_config("/custom/overlays.yaml") # explicit path
    geom = cfg.get_model("voyager").geometry
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

from keypad_overlay.geometry.types import (
    LETTER,
    PT_PER_IN,
    OverlayGeometry,
    PageSize,
    RegistrationGeometry,
    mm_to_in,
)
from src.utils.fs import load_yaml

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path(__file__).parent / "overlays.yaml"


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------


class ConfigError(Exception):
    """Raised when configuration validation fails."""

    pass


# ---------------------------------------------------------------------------
# Dataclasses -- mirror the YAML structure
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class LayoutSettings:
    """Page-level drawing settings shared by all models."""

    minimum_gap_in: float
    additional_inset_in: float
    key_line_width_in: float
    legend_font: str
    legend_base_font: str
    legend_size_pt: float
    legend_nudge_x_in: float = -0.125
    legend_rise_in: float = 0.03

    @property
    def legend_size_in(self) -> float:
        """Legend font size in the inch coordinate system."""
        return self.legend_size_pt / PT_PER_IN


@dataclass(frozen=True)
class OverlayModel:
    """A named calculator keypad preset."""

    name: str
    label: str
    flag: str
    geometry: OverlayGeometry


@dataclass(frozen=True)
class OverlayConfig:
    """Top-level validated configuration."""

    page: PageSize
    registration_name: str
    registration: RegistrationGeometry
    layout: LayoutSettings
    models: dict[str, OverlayModel]
    default_model: str

    def get_model(self, name: str | None = None) -> OverlayModel:
        """Look up a model by name; ``None`` returns the default model.

        Raises
        ------
        ConfigError
            If the model is not defined.
        """
        key = self.default_model if name is None else name
        if key not in self.models:
            raise ConfigError(
                f"Unknown model {key!r}; available: {', '.join(sorted(self.models))}"
            )
        return self.models[key]

    def model_for_flag(self, flag: str) -> OverlayModel:
        """Look up a model by its command-line flag (``hp``, ``sm``)."""
        for model in self.models.values():
            if model.flag == flag:
                return model
        raise ConfigError(f"No model selected by flag {flag!r}")


# ---------------------------------------------------------------------------
# Section parsers
# ---------------------------------------------------------------------------


_GEOMETRY_FIELDS = (
    "width_in",
    "height_in",
    "corner_radius_in",
    "key_col_pitch_in",
    "key_row_pitch_in",
    "key_row_1_offset_in",
    "key_width_in",
    "key_height_in",
    "key_corner_radius_in",
)


def _parse_page(data: dict[str, Any]) -> PageSize:
    return PageSize(
        name=str(data.get("name", "custom")),
        width_in=float(data["width_in"]),
        height_in=float(data["height_in"]),
    )


def _parse_registration(data: dict[str, Any]) -> RegistrationGeometry:
    return RegistrationGeometry(
        inset_left_in=float(data["inset_left_in"]),
        inset_right_in=float(data["inset_right_in"]),
        inset_top_in=float(data["inset_top_in"]),
        inset_bottom_in=float(data["inset_bottom_in"]),
        square_size_in=float(data["square_size_in"]),
        line_length_in=float(data.get("line_length_in", data["square_size_in"])),
        line_width_in=mm_to_in(float(data["line_width_mm"])),
    )


def _parse_layout(data: dict[str, Any]) -> LayoutSettings:
    return LayoutSettings(
        minimum_gap_in=float(data["minimum_gap_in"]),
        additional_inset_in=float(data.get("additional_inset_in", 0.0)),
        key_line_width_in=mm_to_in(float(data["key_line_width_mm"])),
        legend_font=str(data.get("legend_font", "F1")),
        legend_base_font=str(data.get("legend_base_font", "Helvetica")),
        legend_size_pt=float(data.get("legend_size_pt", 6.0)),
        legend_nudge_x_in=float(data.get("legend_nudge_x_in", -0.125)),
        legend_rise_in=float(data.get("legend_rise_in", 0.03)),
    )


def _parse_model(name: str, data: dict[str, Any]) -> OverlayModel:
    try:
        geometry = OverlayGeometry(**{f: float(data[f]) for f in _GEOMETRY_FIELDS})
    except ValueError as e:
        raise ConfigError(f"Model {name!r}: {e}") from e
    return OverlayModel(
        name=name,
        label=str(data.get("label", name)),
        flag=str(data.get("flag", name)),
        geometry=geometry,
    )


def _validate_config(cfg: OverlayConfig) -> None:
    """Validate cross-field consistency.

    Raises
    ------
    ConfigError
        On any invalid combination.
    """
    # -- Registration insets leave a cut area ------------------------------
    try:
        interior = cfg.registration.interior_size(cfg.page.width_in, cfg.page.height_in)
    except ValueError as e:
        raise ConfigError(str(e)) from e

    # -- Marks fit inside the cut area ---------------------------------------
    reg = cfg.registration
    if max(reg.square_size_in, reg.line_length_in) * 2 > min(interior.width, interior.height):
        raise ConfigError(
            f"Registration marks ({reg.square_size_in} in square, "
            f"{reg.line_length_in} in arms) do not fit the cut area "
            f"{interior.width:.3f} x {interior.height:.3f} in"
        )

    if cfg.layout.minimum_gap_in < 0:
        raise ConfigError(
            f"minimum_gap_in must be >= 0, got {cfg.layout.minimum_gap_in}"
        )
    if cfg.layout.key_line_width_in <= 0:
        raise ConfigError("key_line_width_mm must be positive")
    if cfg.layout.legend_size_pt <= 0:
        raise ConfigError("legend_size_pt must be positive")

    if not cfg.models:
        raise ConfigError("Configuration must define at least one model")
    if cfg.default_model not in cfg.models:
        raise ConfigError(f"default_model {cfg.default_model!r} is not defined")

    flags = [m.flag for m in cfg.models.values()]
    if len(flags) != len(set(flags)):
        raise ConfigError(f"Model flags must be unique, got {flags}")

    # -- Each overlay fits on the page ---------------------------------------
    for model in cfg.models.values():
        g = model.geometry
        if g.width_in > interior.width:
            raise ConfigError(
                f"Model {model.name!r} is {g.width_in} in wide; the cut area "
                f"is only {interior.width:.3f} in"
            )
        if 10 * g.key_col_pitch_in > g.width_in + 1e-9:
            logger.warning(
                "Model %r: 10 key columns (%.3f in) overhang the overlay width %.3f in",
                model.name, 10 * g.key_col_pitch_in, g.width_in,
            )


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def load_config(path: str | Path | None = None) -> OverlayConfig:
    """Load and validate overlay configuration from YAML.

    Parameters
    ----------
    path : str | Path | None
        Path to ``overlays.yaml``.  ``None`` loads the default shipped
        alongside this module.

    Returns
    -------
    OverlayConfig
        Fully validated, frozen configuration object.

    Raises
    ------
    ConfigError
        If any field is missing or fails validation.
    FileNotFoundError
        If *path* does not exist.
    """
    path = DEFAULT_CONFIG_PATH if path is None else Path(path)

    if not path.exists():
        raise FileNotFoundError(f"Configuration file not found: {path}")

    logger.info("Loading configuration from %s", path)

    try:
        data: dict[str, Any] = load_yaml(path)
    except yaml.YAMLError as e:
        raise ConfigError(str(e)) from e
    if data is None:
        raise ConfigError(f"Empty configuration file: {path}")

    try:
        page = _parse_page(data["page"]) if "page" in data else LETTER
        reg_data = data["registration"]
        registration = _parse_registration(reg_data)
        layout = _parse_layout(data["layout"])
        models = {
            str(name): _parse_model(str(name), cfg)
            for name, cfg in data["models"].items()
        }
        default_model = str(data.get("default_model", next(iter(models), "")))
    except KeyError as e:
        raise ConfigError(f"Missing configuration key: {e}") from e
    except (AttributeError, TypeError, ValueError) as e:
        raise ConfigError(f"Invalid configuration value: {e}") from e

    cfg = OverlayConfig(
        page=page,
        registration_name=str(reg_data.get("name", "registration")),
        registration=registration,
        layout=layout,
        models=models,
        default_model=default_model,
    )
    _validate_config(cfg)

    logger.info(
        "Configuration OK: %s page, %d model(s)", cfg.page.name, len(cfg.models)
    )
    return cfg
