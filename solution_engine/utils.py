"""Utility helpers for reading the datasets bundled with the solution engine."""

from __future__ import annotations

import json
import math
import os
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, Mapping, TextIO, Union
from os import PathLike

import yaml

__all__ = [
    "load_json",
    "load_data",
    "load_dataset",
    "clear_dataset_cache",
    "dataset_paths",
    "get_data_dir",
    "get_extra_dirs",
    "overlay_dir",
    "normalize_key",
    "list_dataset_entries",
    "deep_update",
    "to_float",
]


PathType = Union[str, PathLike]


def _open_text(path: Path) -> TextIO:
    return open(path, "r", encoding="utf-8")


def load_json(path: PathType) -> Dict[str, Any]:
    """Return the parsed JSON contents of ``path``.

    A :class:`FileNotFoundError` is raised if the file does not exist and a
    :class:`ValueError` is raised when the contents cannot be decoded as JSON.
    The error message always includes the file path to aid debugging.
    """

    p = Path(path)
    if not p.exists():
        raise FileNotFoundError(p)

    try:
        with _open_text(p) as f:
            return json.load(f)
    except json.JSONDecodeError as exc:
        raise ValueError(f"Invalid JSON in {p}: {exc}") from exc


def load_data(path: PathType) -> Any:
    """Return the parsed contents of ``path`` supporting JSON or YAML."""

    p = Path(path)
    if not p.exists():
        raise FileNotFoundError(p)

    try:
        with _open_text(p) as f:
            if p.suffix.lower() in {".yaml", ".yml"}:
                return yaml.safe_load(f) or {}
            return json.load(f)
    except yaml.YAMLError as exc:
        raise ValueError(f"Invalid YAML in {p}: {exc}") from exc
    except json.JSONDecodeError as exc:
        raise ValueError(f"Invalid JSON in {p}: {exc}") from exc


def deep_update(base: Dict[str, Any], other: Mapping[str, Any]) -> Dict[str, Any]:
    """Recursively merge ``other`` into ``base`` and return ``base``."""

    for key, value in other.items():
        if (
            key in base
            and isinstance(base[key], dict)
            and isinstance(value, Mapping)
        ):
            deep_update(base[key], value)
        else:
            base[key] = value
    return base


# The bundled ``data`` folder ships inside the package. It can be replaced
# using ``SOLUTION_ENGINE_DATA_DIR``. Directories listed in
# ``SOLUTION_ENGINE_EXTRA_DATA_DIRS`` (``os.pathsep`` separated) are merged
# after it and ``SOLUTION_ENGINE_OVERLAY_DIR`` is merged last so users can
# add custom substances or presets without copying the bundled files.
DEFAULT_DATA_DIR = Path(__file__).resolve().parent / "data"
DATA_ENV = "SOLUTION_ENGINE_DATA_DIR"
EXTRA_ENV = "SOLUTION_ENGINE_EXTRA_DATA_DIRS"
OVERLAY_ENV = "SOLUTION_ENGINE_OVERLAY_DIR"


def get_data_dir() -> Path:
    """Return base dataset directory honoring ``SOLUTION_ENGINE_DATA_DIR``."""

    env = os.getenv(DATA_ENV)
    return Path(env).expanduser() if env else DEFAULT_DATA_DIR


def overlay_dir() -> Path | None:
    """Return the overlay directory defined via ``SOLUTION_ENGINE_OVERLAY_DIR``."""

    env = os.getenv(OVERLAY_ENV)
    return Path(env).expanduser() if env else None


def get_extra_dirs() -> tuple[Path, ...]:
    """Return additional dataset directories from ``SOLUTION_ENGINE_EXTRA_DATA_DIRS``."""

    env = os.getenv(EXTRA_ENV)
    if not env:
        return ()
    dirs: list[Path] = []
    for part in env.split(os.pathsep):
        path = Path(part).expanduser()
        if path.is_dir():
            dirs.append(path)
    return tuple(dirs)


def dataset_paths() -> tuple[Path, ...]:
    """Return directories searched when loading datasets, overlay last."""

    paths = [get_data_dir(), *get_extra_dirs()]
    overlay = overlay_dir()
    if overlay:
        paths.append(overlay)
    return tuple(paths)


@lru_cache(maxsize=None)
def _load_dataset_cached(filename: str, paths: tuple[Path, ...]) -> Dict[str, Any]:
    data: Dict[str, Any] = {}
    for base in paths:
        path = base / filename
        if path.exists():
            extra = load_data(path)
            if isinstance(extra, dict) and isinstance(data, dict):
                deep_update(data, extra)
            else:
                data = extra
    return data


def load_dataset(filename: str) -> Dict[str, Any]:
    """Return dataset ``filename`` merged across all search directories.

    Results are cached per search path so changing the environment variables
    picks up the new directories on the next call. A missing file yields an
    empty mapping.
    """

    return _load_dataset_cached(filename, dataset_paths())


def clear_dataset_cache() -> None:
    """Clear cached datasets so files are re-read on the next load."""

    _load_dataset_cached.cache_clear()


def normalize_key(key: str) -> str:
    """Return ``key`` normalized for case-insensitive dataset lookups.

    The function uses :meth:`str.casefold` for robust case-insensitive
    matching and normalizes whitespace, hyphens and underscores to a single
    underscore character. Multiple adjacent separators are collapsed to avoid
    accidental duplication.
    """

    value = str(key).casefold()
    for sep in ("_", "-"):
        value = value.replace(sep, " ")
    parts = [p for p in value.strip().split() if p]
    return "_".join(parts)


def list_dataset_entries(dataset: Mapping[str, Any]) -> list[str]:
    """Return sorted top-level keys from a dataset mapping."""

    return sorted(str(k) for k in dataset.keys())


def to_float(value: Any) -> float | None:
    """Return ``value`` as a finite ``float`` or ``None`` when not numeric."""

    if isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(number):
        return None
    return number
