"""Filesystem helpers: atomic writes and YAML loading.

Provides:
    - Atomic writes: hidden tmp file beside the target → fsync → rename,
      so a failed render never leaves a half-written PDF behind
    - YAML load that only accepts a mapping at the top level
    - Directory creation with exist_ok semantics

Usage:
    from keycap_overlay.utils import fs
    data = fs.load_yaml("profiles.yaml")
    fs.atomic_write_bytes("voyager-overlay-cut.pdf", pdf_bytes)
"""

import os
from pathlib import Path
from typing import Any, Dict, Union

import yaml


def ensure_dir(p: Union[str, Path]) -> Path:
    """Create directory *p* (and parents) if missing; return it as a Path."""
    p = Path(p)
    p.mkdir(parents=True, exist_ok=True)
    return p


def atomic_write_bytes(path: Union[str, Path], data: bytes) -> Path:
    """Write *data* to *path* atomically.

    The bytes go to ``.<name>.tmp`` in the target directory first and
    replace the target only once fully flushed to disk.

    Parameters
    ----------
    path : Union[str, Path]
        Target file path; parent directories are created.
    data : bytes
        File contents.

    Returns
    -------
    Path
        The written path.

    Raises
    ------
    OSError
        If the directory cannot be created or the file written.  The
        temporary file is removed and the target left untouched.
    """
    path = Path(path)
    ensure_dir(path.parent)
    tmp_path = path.with_name(f".{path.name}.tmp")

    try:
        with open(tmp_path, "wb") as f:
            f.write(data)
            f.flush()
            os.fsync(f.fileno())
        tmp_path.replace(path)
    except OSError:
        tmp_path.unlink(missing_ok=True)
        raise
    return path


def load_yaml(path: Union[str, Path]) -> Dict[str, Any]:
    """Load a YAML mapping with ``safe_load``.

    An empty file loads as ``{}``.

    Raises
    ------
    FileNotFoundError
        If the file doesn't exist.
    ValueError
        If the YAML cannot be parsed or its top level is not a mapping.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"YAML file not found: {path}")

    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ValueError(f"Failed to parse YAML file {path}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError(
            f"YAML file {path} must contain a mapping at the top level, "
            f"got {type(data).__name__}"
        )
    return data
