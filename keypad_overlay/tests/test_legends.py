"""Tests for key legend tables and the legends.yaml schema."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import pytest
import yaml

from keypad_overlay.configs.legends import (
    DuplicateKeyCodeError,
    LegendTable,
    key_code,
    load_legends,
    load_legends_file,
)
from keypad_overlay.configs.loader import ConfigError


def _write(tmp_path: Path, data: Any) -> Path:
    path = tmp_path / "legends.yaml"
    path.write_text(yaml.safe_dump(data), encoding="utf-8")
    return path


def _doc(**sets: Any) -> dict[str, Any]:
    return {"schema": "legends.v1", "default": next(iter(sets)), "sets": sets}


# ---------------------------------------------------------------------------
# Key codes
# ---------------------------------------------------------------------------


class TestKeyCode:
    @pytest.mark.parametrize(
        "row, col, code",
        [(0, 0, 11), (0, 8, 19), (0, 9, 10), (2, 5, 36), (3, 5, 46), (3, 9, 40)],
    )
    def test_code(self, row: int, col: int, code: int) -> None:
        assert key_code(row, col) == code


# ---------------------------------------------------------------------------
# LegendTable
# ---------------------------------------------------------------------------


class TestLegendTable:
    def test_mapping_protocol(self) -> None:
        table = LegendTable([(12, "B"), (11, "A")], name="t")
        assert table[11] == "A"
        assert list(table) == [11, 12]
        assert len(table) == 2
        assert 13 not in table
        assert table.get(13, "") == ""

    def test_duplicate_code_rejected(self) -> None:
        with pytest.raises(DuplicateKeyCodeError, match="key code 30"):
            LegendTable([(30, "AND"), (30, "NOT")], name="hp16c")

    def test_duplicate_is_config_error(self) -> None:
        assert issubclass(DuplicateKeyCodeError, ConfigError)

    def test_legend_for_grid_position(self) -> None:
        table = LegendTable([(10, "XOR")])
        assert table.legend_for(0, 9) == "XOR"
        assert table.legend_for(0, 0) == ""

    def test_overrides(self) -> None:
        base = LegendTable([(11, "A"), (12, "B")], name="base")
        merged = base.with_overrides(LegendTable([(12, "C")], name="child"))
        assert dict(merged) == {11: "A", 12: "C"}
        assert merged.name == "child"
        assert dict(base) == {11: "A", 12: "B"}


# ---------------------------------------------------------------------------
# Shipped legends
# ---------------------------------------------------------------------------


class TestShippedLegends:
    def test_default_set(self) -> None:
        table = load_legends()
        assert table.name == "hp16c"
        assert len(table) == 39
        assert table[10] == "XOR"
        assert table[20] == "AND"
        assert table[30] == "NOT"
        assert table[40] == "OR"
        assert table[21] == "x<>(i)"

    def test_enter_lower_half_has_no_legend(self) -> None:
        assert 46 not in load_legends()

    def test_blank_keys(self) -> None:
        table = load_legends()
        assert [table[c] for c in (41, 42, 43)] == ["", "", ""]

    def test_bitops_set_extends_default(self) -> None:
        table = load_legends(name="hp16c-bitops")
        assert table.name == "hp16c-bitops"
        assert [table[c] for c in range(11, 17)] == ["SL", "SR", "RL", "RR", "RLn", "RRn"]
        assert table[17] == "MASKL"
        assert table[20] == "AND"

    def test_unknown_set(self) -> None:
        with pytest.raises(ConfigError, match="Unknown legend set"):
            load_legends(name="hp12c")

    def test_all_legends_encodable(self) -> None:
        for text in load_legends().values():
            text.encode("cp1252")


# ---------------------------------------------------------------------------
# Schema validation
# ---------------------------------------------------------------------------


class TestLegendsFile:
    def test_minimal_file(self, tmp_path: Path) -> None:
        path = _write(tmp_path, _doc(a={"legends": [{"code": 11, "text": "A"}]}))
        assert dict(load_legends(path)) == {11: "A"}

    def test_duplicate_code_in_file(self, tmp_path: Path) -> None:
        legends = [{"code": 30, "text": "AND"}, {"code": 30, "text": "NOT"}]
        path = _write(tmp_path, _doc(a={"legends": legends}))
        with pytest.raises(DuplicateKeyCodeError):
            load_legends(path)

    def test_child_may_override_parent_code(self, tmp_path: Path) -> None:
        path = _write(
            tmp_path,
            _doc(
                child={"extends": "base", "legends": [{"code": 11, "text": "B"}]},
                base={"legends": [{"code": 11, "text": "A"}]},
            ),
        )
        assert load_legends(path)[11] == "B"

    def test_wrong_schema(self, tmp_path: Path) -> None:
        doc = _doc(a={"legends": []})
        doc["schema"] = "legends.v2"
        with pytest.raises(ConfigError, match="legends.v1"):
            load_legends_file(_write(tmp_path, doc))

    def test_code_out_of_range(self, tmp_path: Path) -> None:
        path = _write(tmp_path, _doc(a={"legends": [{"code": 50, "text": "X"}]}))
        with pytest.raises(ConfigError):
            load_legends_file(path)

    def test_text_not_winansi(self, tmp_path: Path) -> None:
        path = _write(tmp_path, _doc(a={"legends": [{"code": 11, "text": "→"}]}))
        with pytest.raises(ConfigError, match="WinAnsiEncoding"):
            load_legends_file(path)

    def test_undefined_default(self, tmp_path: Path) -> None:
        doc = _doc(a={"legends": []})
        doc["default"] = "b"
        with pytest.raises(ConfigError, match="Default set"):
            load_legends_file(_write(tmp_path, doc))

    def test_undefined_parent(self, tmp_path: Path) -> None:
        path = _write(tmp_path, _doc(a={"extends": "missing", "legends": []}))
        with pytest.raises(ConfigError, match="undefined set"):
            load_legends_file(path)

    def test_cyclic_extends(self, tmp_path: Path) -> None:
        path = _write(
            tmp_path,
            _doc(a={"extends": "b", "legends": []}, b={"extends": "a", "legends": []}),
        )
        with pytest.raises(ConfigError, match="cyclic"):
            load_legends_file(path)

    def test_empty_file(self, tmp_path: Path) -> None:
        path = tmp_path / "legends.yaml"
        path.write_text("", encoding="utf-8")
        with pytest.raises(ConfigError, match="Empty"):
            load_legends_file(path)

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            load_legends(tmp_path / "nope.yaml")
