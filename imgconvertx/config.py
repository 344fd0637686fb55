"""Immutable configuration for :mod:`imgconvertx`."""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

_LOGGER = logging.getLogger("imgconvertx.config")

DEFAULT_JPEG_QUALITY = 85

DEFAULT_IMAGE_FILE_EXT: tuple[str, ...] = (
    "gif",
    "jpg",
    "jpeg",
    "png",
    "tif",
    "bmp",
    "tga",
    "pcx",
    "ai",
    "pdf",
    "webp",
)

ALLOWED_COLORSPACES: frozenset[str] = frozenset(
    {
        "CMY",
        "CMYK",
        "Gray",
        "HCL",
        "HSB",
        "HSL",
        "HWB",
        "Lab",
        "LCH",
        "LMS",
        "Log",
        "Luv",
        "OHTA",
        "Rec601Luma",
        "Rec601YCbCr",
        "Rec709Luma",
        "Rec709YCbCr",
        "RGB",
        "sRGB",
        "Transparent",
        "XYZ",
        "YCbCr",
        "YCC",
        "YIQ",
        "YUV",
    }
)

ProcessorName = Literal["ImageMagick", "GraphicsMagick"]


class ProcessorSettings(BaseModel):
    """Settings shared by the probe, the processor invoker and the converter."""

    processor: ProcessorName = "ImageMagick"
    processor_path: str = ""
    processor_enabled: bool = True
    jpeg_quality: int = DEFAULT_JPEG_QUALITY
    allow_frame_selection: bool = True
    image_file_ext: tuple[str, ...] = DEFAULT_IMAGE_FILE_EXT
    processor_effects: bool = False
    allow_upscaling: bool = True
    colorspace: str = ""
    strip_profile_command: str = "+profile '*'"
    scale_command: str = "-auto-orient -geometry"
    sample_command: str = "-auto-orient -sample"
    pixel_limit: int = Field(10000, ge=0)
    temp_assets_dir: Path = Path("var/assets/images")
    transient_dir: Path = Path("var/transient")
    filename_prefix: str = ""
    alternative_output_key: str = ""
    ignore_existing_files: bool = False
    file_permissions: int = 0o664
    audit_log_size: int = Field(500, ge=1)

    model_config = ConfigDict(frozen=True)

    @field_validator("jpeg_quality", mode="before")
    @classmethod
    def _clamp_quality(cls, value: Any) -> int:
        try:
            quality = int(value)
        except (TypeError, ValueError):
            return DEFAULT_JPEG_QUALITY
        if not quality:
            return DEFAULT_JPEG_QUALITY
        return min(max(quality, 10), 100)

    @field_validator("image_file_ext", mode="before")
    @classmethod
    def _split_extensions(cls, value: Any) -> tuple[str, ...]:
        if isinstance(value, str):
            value = value.split(",")
        return tuple(ext.strip().lower() for ext in value if ext and ext.strip())

    @property
    def resolved_colorspace(self) -> str:
        """Return the configured colorspace or the processor's recommended one."""

        if not self.colorspace:
            return "sRGB" if self.processor == "ImageMagick" else "RGB"
        if self.colorspace in ALLOWED_COLORSPACES:
            return self.colorspace
        _LOGGER.debug("Ignoring unknown colorspace %r, falling back to RGB", self.colorspace)
        return "RGB"

    def is_allowed_extension(self, extension: str) -> bool:
        return extension.lower() in self.image_file_ext

    @classmethod
    def from_file(cls, path: str | os.PathLike[str]) -> "ProcessorSettings":
        """Load settings from the JSON document at *path*."""

        config_path = Path(path).expanduser()
        data = json.loads(config_path.read_text(encoding="utf-8"))
        if not isinstance(data, dict):
            raise ValueError(f"Configuration root must be an object: {config_path}")
        _LOGGER.debug("Loaded settings from %s", config_path)
        return cls(**data)


__all__ = [
    "ALLOWED_COLORSPACES",
    "DEFAULT_IMAGE_FILE_EXT",
    "DEFAULT_JPEG_QUALITY",
    "ProcessorSettings",
]
