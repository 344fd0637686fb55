"""Deterministic output naming.

The output path doubles as the cache key: a file existing at the computed path
means the same work was already done.
"""

from __future__ import annotations

import hashlib
from pathlib import Path

from .config import ProcessorSettings
from .types import Rectangle
from .utils import ensure_dir


def source_identity(source: Path, alternative_key: str = "") -> str:
    """Return the part of the cache key that identifies *source*.

    Normally this is the full path plus the modification time, so touching the
    source invalidates its outputs. With an *alternative_key* only the base name
    and the key are used, which keeps names stable across checkouts.
    """

    if alternative_key:
        return source.name + alternative_key
    return f"{source}{int(source.stat().st_mtime)}"


def output_name(
    command: str,
    crop_area: Rectangle | None,
    source: Path,
    frame: int,
    *,
    alternative_key: str = "",
) -> str:
    """Return the hash based file name body for a conversion."""

    crop = str(crop_area) if crop_area is not None else ""
    material = f"{command}{crop}{source_identity(source, alternative_key)}[{frame}]"
    return hashlib.md5(material.encode("utf-8")).hexdigest()


def output_path(settings: ProcessorSettings, name: str, target_format: str) -> Path:
    """Return the location for *name* inside the configured assets directory."""

    directory = ensure_dir(settings.temp_assets_dir)
    return directory / f"{settings.filename_prefix}{name}.{target_format}"


__all__ = ["output_name", "output_path", "source_identity"]
