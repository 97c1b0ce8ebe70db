"""File helpers for the overlay generator.

Two concerns live here:
    - reading the YAML configs (PyYAML ``safe_load``)
    - writing output files so that an interrupted run never leaves a
      truncated PDF in place of a good one

Writes go to a uniquely named sibling file first (``tempfile.mkstemp`` in
the target directory), are fsynced, then renamed over the target.  Two
runs writing the same file therefore never share a temporary name.

Usage:
    from src.utils import fs
    cfg = fs.load_yaml("keypad_overlay/configs/overlays.yaml")
    fs.atomic_write_bytes("voyager-overlay-cut.pdf", data)
"""

import os
import tempfile
from pathlib import Path
from typing import Any, Union

import yaml

PathLike = Union[str, Path]


def ensure_dir(p: PathLike) -> Path:
    """Create *p* (and parents) if missing; return it as a Path."""
    p = Path(p)
    p.mkdir(parents=True, exist_ok=True)
    return p


def atomic_write_bytes(path: PathLike, data: bytes) -> Path:
    """Replace *path* with *data* in one rename.

    Parameters
    ----------
    path : str | Path
        Destination.  Missing parent directories are created.
    data : bytes
        Full file contents.

    Returns
    -------
    Path
        The destination path.

    Raises
    ------
    RuntimeError
        If the data cannot be written or moved into place.  The
        temporary file is removed and an existing *path* is untouched.
    """
    path = Path(path)
    parent = ensure_dir(path.parent)

    fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".part", dir=parent)
    tmp_path = Path(tmp_name)
    try:
        with os.fdopen(fd, "wb") as f:
            f.write(data)
            f.flush()
            os.fsync(f.fileno())
        os.replace(tmp_path, path)
    except OSError as e:
        tmp_path.unlink(missing_ok=True)
        raise RuntimeError(f"Could not write {path}: {e}") from e
    return path


def load_yaml(path: PathLike) -> Any:
    """Parse a YAML file with ``yaml.safe_load``.

    Returns whatever the document holds; ``None`` for an empty file.

    Raises
    ------
    FileNotFoundError
        If *path* does not exist.
    yaml.YAMLError
        If the document is malformed; the message names the file.
    """
    path = Path(path)
    if not path.is_file():
        raise FileNotFoundError(f"YAML file not found: {path}")

    with path.open("r", encoding="utf-8") as f:
        try:
            return yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise yaml.YAMLError(f"{path}: {e}") from e
