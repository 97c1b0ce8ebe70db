"""Key legend tables.

A legend table maps a key code to the short label printed above that
key.  Key codes encode the grid position as
``(row + 1) * 10 + (col + 1) % 10`` (rows and columns 0-based), so the
tenth column of the top row is code 10.

``legends.yaml`` holds named legend sets and is validated with pydantic.
A set may ``extends`` another set; its entries replace the inherited
ones.  Within one set a key code may appear only once -- a repeated code
is reported as ``DuplicateKeyCodeError`` instead of silently keeping one
of the two labels.

Usage::

    from keypad_overlay.configs.legends import load_legends
    table = load_legends()                     # default set
    table = load_legends(name="hp16c-bitops")
    table[20]                                  # "AND"
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator, Mapping
from pathlib import Path
from typing import Dict, List, Optional, Tuple, Union

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

from keypad_overlay.configs.loader import ConfigError
from src.utils.fs import load_yaml

logger = logging.getLogger(__name__)

DEFAULT_LEGENDS_PATH = Path(__file__).parent / "legends.yaml"


class DuplicateKeyCodeError(ConfigError):
    """Raised when a legend table assigns two labels to one key code."""

    pass


def key_code(row: int, col: int) -> int:
    """Key code of a 0-based grid position."""
    return (row + 1) * 10 + (col + 1) % 10


# ============================================================================
# TABLE
# ============================================================================

class LegendTable(Mapping):
    """Read-only key code → legend mapping.

    Parameters
    ----------
    entries : Iterable[tuple[int, str]]
        ``(code, text)`` pairs.

    Raises
    ------
    DuplicateKeyCodeError
        If a code appears more than once.
    """

    def __init__(self, entries: Iterable[Tuple[int, str]] = (), name: str = "") -> None:
        table: Dict[int, str] = {}
        for code, text in entries:
            if code in table:
                raise DuplicateKeyCodeError(
                    f"Legend set {name or '<anonymous>'!r}: key code {code} is assigned "
                    f"both {table[code]!r} and {text!r}"
                )
            table[code] = text
        self._table = table
        self.name = name

    def __getitem__(self, code: int) -> str:
        return self._table[code]

    def __iter__(self) -> Iterator[int]:
        return iter(sorted(self._table))

    def __len__(self) -> int:
        return len(self._table)

    def __repr__(self) -> str:
        return f"LegendTable(name={self.name!r}, entries={len(self)})"

    def legend_for(self, row: int, col: int) -> str:
        """Legend of a 0-based grid position; empty when none is defined."""
        return self._table.get(key_code(row, col), "")

    def with_overrides(self, overrides: "LegendTable", name: str = "") -> "LegendTable":
        """New table where *overrides* replace matching codes."""
        merged = {**self._table, **overrides._table}
        return LegendTable(merged.items(), name=name or overrides.name)


# ============================================================================
# LEGENDS SCHEMA V1
# ============================================================================

class LegendEntry(BaseModel):
    """One key legend."""
    code: int = Field(..., ge=10, le=49, description="Key code (row+1)*10 + (col+1)%10")
    text: str = Field("", description="Label printed above the key")

    @field_validator('text')
    @classmethod
    def validate_text(cls, v: str) -> str:
        try:
            v.encode("cp1252")
        except UnicodeEncodeError as e:
            raise ValueError(f"Legend {v!r} is not representable in WinAnsiEncoding") from e
        return v


class LegendSetV1(BaseModel):
    """A named set of legends, optionally extending another set."""
    label: str = Field("", description="Human readable description")
    extends: Optional[str] = Field(None, description="Base set name")
    legends: List[LegendEntry] = Field(default_factory=list)


class LegendsFileV1(BaseModel):
    """Container for legend sets (YAML file format)."""
    model_config = ConfigDict(populate_by_name=True)

    schema_version: str = Field("legends.v1", alias="schema", description="Schema version")
    default: str = Field(..., description="Set used when none is requested")
    sets: Dict[str, LegendSetV1] = Field(..., description="Legend sets by name")

    @field_validator('schema_version')
    @classmethod
    def validate_schema(cls, v: str) -> str:
        if v != "legends.v1":
            raise ValueError(f"Expected schema 'legends.v1', got '{v}'")
        return v

    @model_validator(mode='after')
    def validate_references(self) -> 'LegendsFileV1':
        if self.default not in self.sets:
            raise ValueError(f"Default set '{self.default}' is not defined")
        for name, legend_set in self.sets.items():
            seen = [name]
            parent = legend_set.extends
            while parent is not None:
                if parent not in self.sets:
                    raise ValueError(f"Set '{name}' extends undefined set '{parent}'")
                if parent in seen:
                    raise ValueError(f"Set '{name}' has cyclic extends: {' -> '.join(seen + [parent])}")
                seen.append(parent)
                parent = self.sets[parent].extends
        return self

    def resolve(self, name: Optional[str] = None) -> LegendTable:
        """Build the table for *name* (default set when None).

        Raises
        ------
        ConfigError
            If the set is not defined.
        DuplicateKeyCodeError
            If any set in the ``extends`` chain repeats a key code.
        """
        name = self.default if name is None else name
        if name not in self.sets:
            raise ConfigError(
                f"Unknown legend set {name!r}; available: {', '.join(sorted(self.sets))}"
            )
        legend_set = self.sets[name]
        own = LegendTable(((e.code, e.text) for e in legend_set.legends), name=name)
        if legend_set.extends is None:
            return own
        return self.resolve(legend_set.extends).with_overrides(own, name=name)


# ============================================================================
# PUBLIC API
# ============================================================================

def load_legends_file(path: Union[str, Path, None] = None) -> LegendsFileV1:
    """Load and validate a legends file.

    Raises
    ------
    FileNotFoundError
        If path doesn't exist
    ConfigError
        If validation fails
    """
    path = DEFAULT_LEGENDS_PATH if path is None else Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Legends file not found: {path}")

    try:
        data = load_yaml(path)
    except yaml.YAMLError as e:
        raise ConfigError(str(e)) from e
    if data is None:
        raise ConfigError(f"Empty legends file: {path}")
    if not isinstance(data, dict):
        raise ConfigError(f"Legends file must hold a mapping: {path}")
    try:
        return LegendsFileV1(**data)
    except ValidationError as e:
        raise ConfigError(f"Legends validation failed at {path}: {e}") from e


def load_legends(
    path: Union[str, Path, None] = None,
    name: Optional[str] = None,
) -> LegendTable:
    """Load a legends file and resolve one set into a ``LegendTable``."""
    legends_file = load_legends_file(path)
    table = legends_file.resolve(name)
    logger.info("Loaded legend set %r (%d legends)", table.name, len(table))
    return table
