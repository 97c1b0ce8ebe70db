"""Tests for overlay configuration loading and geometry validation.

Validates that:
    - overlays.yaml loads with both shipped models
    - mm and pt values are converted to inches
    - model lookup by name and by command-line flag
    - malformed or inconsistent configs raise ConfigError
    - OverlayGeometry / RegistrationGeometry reject impossible shapes
"""

from __future__ import annotations

import copy
from pathlib import Path
from typing import Any

import pytest
import yaml

from keypad_overlay.configs.loader import (
    DEFAULT_CONFIG_PATH,
    ConfigError,
    OverlayConfig,
    load_config,
)
from keypad_overlay.geometry.types import (
    LETTER,
    OverlayGeometry,
    PageSize,
    RegistrationGeometry,
    mm_to_in,
)
from src.utils.fs import load_yaml


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def config() -> OverlayConfig:
    """Load the default overlays.yaml shipped with the package."""
    return load_config()


@pytest.fixture()
def raw() -> dict[str, Any]:
    """Editable copy of the shipped YAML document."""
    return copy.deepcopy(load_yaml(DEFAULT_CONFIG_PATH))


def _write(tmp_path: Path, data: Any) -> Path:
    path = tmp_path / "overlays.yaml"
    path.write_text(yaml.safe_dump(data), encoding="utf-8")
    return path


# ---------------------------------------------------------------------------
# Default config
# ---------------------------------------------------------------------------


class TestDefaultConfig:
    def test_letter_page(self, config: OverlayConfig) -> None:
        assert config.page.name == "letter"
        assert config.page.width_in == 8.5
        assert config.page.height_in == 11.0

    def test_registration_insets(self, config: OverlayConfig) -> None:
        reg = config.registration
        assert config.registration_name == "cameo4_no_mat"
        assert reg.inset_left_in == pytest.approx(0.625)
        assert reg.inset_bottom_in == pytest.approx(1.024)
        assert reg.line_width_in == pytest.approx(0.5 / 25.4)

    def test_layout_units(self, config: OverlayConfig) -> None:
        assert config.layout.key_line_width_in == pytest.approx(0.1 / 25.4)
        assert config.layout.legend_size_in == pytest.approx(6.0 / 72.0)
        assert config.layout.legend_font == "F1"
        assert config.layout.legend_base_font == "Helvetica"

    def test_models(self, config: OverlayConfig) -> None:
        assert set(config.models) == {"voyager", "dm1xl"}
        assert config.models["voyager"].geometry.width_in == pytest.approx(4.65)
        assert config.models["dm1xl"].geometry.height_in == pytest.approx(1.95)

    def test_default_model(self, config: OverlayConfig) -> None:
        assert config.get_model().name == "voyager"

    def test_model_by_name(self, config: OverlayConfig) -> None:
        assert config.get_model("dm1xl").flag == "sm"

    def test_model_by_flag(self, config: OverlayConfig) -> None:
        assert config.model_for_flag("hp").name == "voyager"
        assert config.model_for_flag("sm").name == "dm1xl"

    def test_unknown_model(self, config: OverlayConfig) -> None:
        with pytest.raises(ConfigError, match="Unknown model"):
            config.get_model("hp41")

    def test_unknown_flag(self, config: OverlayConfig) -> None:
        with pytest.raises(ConfigError):
            config.model_for_flag("ti")

    def test_config_is_frozen(self, config: OverlayConfig) -> None:
        with pytest.raises(AttributeError):
            config.default_model = "dm1xl"  # type: ignore[misc]


# ---------------------------------------------------------------------------
# Custom files
# ---------------------------------------------------------------------------


class TestCustomConfig:
    def test_roundtrip_of_shipped_file(self, tmp_path: Path, raw: dict[str, Any]) -> None:
        cfg = load_config(_write(tmp_path, raw))
        assert cfg.get_model().name == "voyager"

    def test_page_defaults_to_letter(self, tmp_path: Path, raw: dict[str, Any]) -> None:
        del raw["page"]
        cfg = load_config(_write(tmp_path, raw))
        assert cfg.page == LETTER

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            load_config(tmp_path / "nope.yaml")

    def test_empty_file(self, tmp_path: Path) -> None:
        path = tmp_path / "overlays.yaml"
        path.write_text("", encoding="utf-8")
        with pytest.raises(ConfigError, match="Empty"):
            load_config(path)

    def test_missing_section(self, tmp_path: Path, raw: dict[str, Any]) -> None:
        del raw["registration"]
        with pytest.raises(ConfigError, match="Missing configuration key"):
            load_config(_write(tmp_path, raw))

    def test_missing_geometry_field(self, tmp_path: Path, raw: dict[str, Any]) -> None:
        del raw["models"]["voyager"]["key_width_in"]
        with pytest.raises(ConfigError, match="key_width_in"):
            load_config(_write(tmp_path, raw))

    def test_non_numeric_value(self, tmp_path: Path, raw: dict[str, Any]) -> None:
        raw["page"]["width_in"] = "wide"
        with pytest.raises(ConfigError, match="Invalid configuration value"):
            load_config(_write(tmp_path, raw))

    def test_key_wider_than_pitch(self, tmp_path: Path, raw: dict[str, Any]) -> None:
        raw["models"]["voyager"]["key_width_in"] = 0.5
        with pytest.raises(ConfigError, match="voyager"):
            load_config(_write(tmp_path, raw))

    def test_corner_radius_too_large(self, tmp_path: Path, raw: dict[str, Any]) -> None:
        raw["models"]["dm1xl"]["key_corner_radius_in"] = 0.2
        with pytest.raises(ConfigError, match="key_corner_radius_in"):
            load_config(_write(tmp_path, raw))

    def test_insets_leave_no_interior(self, tmp_path: Path, raw: dict[str, Any]) -> None:
        raw["registration"]["inset_left_in"] = 5.0
        raw["registration"]["inset_right_in"] = 5.0
        with pytest.raises(ConfigError, match="no interior"):
            load_config(_write(tmp_path, raw))

    def test_overlay_wider_than_cut_area(self, tmp_path: Path, raw: dict[str, Any]) -> None:
        raw["registration"]["inset_left_in"] = 2.0
        raw["registration"]["inset_right_in"] = 2.0
        with pytest.raises(ConfigError, match="wide"):
            load_config(_write(tmp_path, raw))

    def test_negative_minimum_gap(self, tmp_path: Path, raw: dict[str, Any]) -> None:
        raw["layout"]["minimum_gap_in"] = -0.1
        with pytest.raises(ConfigError, match="minimum_gap_in"):
            load_config(_write(tmp_path, raw))

    def test_undefined_default_model(self, tmp_path: Path, raw: dict[str, Any]) -> None:
        raw["default_model"] = "hp41"
        with pytest.raises(ConfigError, match="default_model"):
            load_config(_write(tmp_path, raw))

    def test_duplicate_flags(self, tmp_path: Path, raw: dict[str, Any]) -> None:
        raw["models"]["dm1xl"]["flag"] = "hp"
        with pytest.raises(ConfigError, match="unique"):
            load_config(_write(tmp_path, raw))

    def test_no_models(self, tmp_path: Path, raw: dict[str, Any]) -> None:
        raw["models"] = {}
        del raw["default_model"]
        with pytest.raises(ConfigError, match="at least one model"):
            load_config(_write(tmp_path, raw))

    def test_line_length_defaults_to_square(self, tmp_path: Path, raw: dict[str, Any]) -> None:
        raw["registration"]["square_size_in"] = 0.2
        del raw["registration"]["line_length_in"]
        cfg = load_config(_write(tmp_path, raw))
        assert cfg.registration.line_length_in == pytest.approx(0.2)


# ---------------------------------------------------------------------------
# Geometry types
# ---------------------------------------------------------------------------


def _overlay(**overrides: float) -> OverlayGeometry:
    values = dict(
        width_in=4.65,
        height_in=2.10,
        corner_radius_in=0.025,
        key_col_pitch_in=0.45,
        key_row_pitch_in=0.50,
        key_row_1_offset_in=0.133,
        key_width_in=0.34,
        key_height_in=0.32,
        key_corner_radius_in=0.025,
    )
    values.update(overrides)
    return OverlayGeometry(**values)


class TestGeometryTypes:
    def test_valid_overlay(self) -> None:
        geom = _overlay()
        assert geom.key_dimensions.width == pytest.approx(0.34)

    @pytest.mark.parametrize(
        "overrides",
        [
            {"width_in": 0.0},
            {"key_height_in": -0.1},
            {"key_width_in": 0.45},
            {"key_height_in": 0.50},
            {"corner_radius_in": -0.01},
            {"key_corner_radius_in": 0.2},
        ],
    )
    def test_invalid_overlay(self, overrides: dict[str, float]) -> None:
        with pytest.raises(ValueError):
            _overlay(**overrides)

    def test_zero_radius_allowed(self) -> None:
        assert _overlay(corner_radius_in=0.0, key_corner_radius_in=0.0)

    def test_registration_interior(self) -> None:
        reg = RegistrationGeometry(0.625, 0.625, 0.625, 1.024, 0.25, 0.25, 0.02)
        interior = reg.interior_size(8.5, 11.0)
        assert interior.width == pytest.approx(7.25)
        assert interior.height == pytest.approx(9.351)

    def test_registration_rejects_zero_square(self) -> None:
        with pytest.raises(ValueError, match="square_size_in"):
            RegistrationGeometry(0.5, 0.5, 0.5, 0.5, 0.0, 0.25, 0.02)

    def test_page_size_positive(self) -> None:
        with pytest.raises(ValueError):
            PageSize("bad", 0.0, 11.0)

    def test_mm_to_in(self) -> None:
        assert mm_to_in(25.4) == pytest.approx(1.0)
