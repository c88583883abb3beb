"""Reader registry for crystal structure sources."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path
from typing import Any

from pegrid.modeling.schema import Framework


Reader = Callable[[Any], Framework]
_READERS: dict[str, Reader] = {}
_SUFFIXES: dict[str, str] = {".cssr": "cssr", ".json": "json"}


def register_reader(name: str, reader: Reader) -> None:
    key = name.strip().lower()
    if not key:
        raise ValueError("Reader name must be non-empty.")
    _READERS[key] = reader


def get_reader(name: str) -> Reader:
    key = name.strip().lower()
    try:
        return _READERS[key]
    except KeyError as exc:
        available = ", ".join(sorted(_READERS)) or "<none>"
        raise KeyError(f"Unknown structure reader '{name}'. Available readers: {available}") from exc


def list_readers() -> tuple[str, ...]:
    return tuple(sorted(_READERS.keys()))


def _infer_reader(source: Any) -> str:
    if isinstance(source, dict):
        return "json"
    suffix = Path(source).suffix.lower()
    try:
        return _SUFFIXES[suffix]
    except KeyError as exc:
        raise KeyError(f"Cannot infer a structure reader for '{source}'; pass reader explicitly.") from exc


def read_structure(source: Any, reader: str = "auto") -> Framework:
    if reader.strip().lower() == "auto":
        reader = _infer_reader(source)
    return get_reader(reader)(source)
