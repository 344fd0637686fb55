"""Processor command construction for :mod:`imgconvertx`."""

from __future__ import annotations

import logging

from .config import ProcessorSettings
from .filters import sharpen
from .types import ConversionOptions, GeometryResult, Rectangle

_LOGGER = logging.getLogger("imgconvertx.commands")

STRIP_PROFILE_SKIP_MARKER = "###SkipStripProfile###"
JPEG_FORMATS: tuple[str, ...] = ("jpg", "jpeg")


def default_commands(settings: ProcessorSettings) -> dict[str, str]:
    """Return the per-format parameters used when a request carries none."""

    jpeg_default = sharpen(10) if settings.processor_effects else ""
    return {
        "jpg": jpeg_default,
        "jpeg": jpeg_default,
        "gif": "",
        "png": "",
    }


def crop_clause(area: Rectangle) -> str:
    """Return the crop operator for *area*, resetting the canvas afterwards."""

    return f"-crop {area.width}x{area.height}+{area.offset_left}+{area.offset_top}! +repage"


def apply_strip_profile(params: str, options: ConversionOptions, strip_command: str) -> str:
    """Prepend the profile stripping command to *params* when requested.

    If stripping was requested but no command is configured, or stripping was
    explicitly switched off, :data:`STRIP_PROFILE_SKIP_MARKER` is appended so the
    skipped step stays visible in the command.
    """

    if options.strip_profile is None:
        return params
    if options.strip_profile and strip_command:
        return f"{strip_command} {params}".rstrip()
    return params + STRIP_PROFILE_SKIP_MARKER


def build_convert_command(
    geometry: GeometryResult,
    target_format: str,
    settings: ProcessorSettings,
    *,
    params: str = "",
    sample: bool = False,
    default_commands: dict[str, str] | None = None,
) -> str:
    """Assemble the ``convert`` parameters for *geometry*.

    *params* must already have been passed through :func:`apply_strip_profile`.
    When empty, the per-format entry of *default_commands* is used instead.
    """

    command = settings.sample_command if sample else settings.scale_command
    # "!" forces the exact size, aspect handling happened in the resolver
    command += f" {geometry.width}x{geometry.height}!"
    if geometry.crop_area is not None:
        command += " " + crop_clause(geometry.crop_area)

    if params:
        command += " " + params
    elif default_commands:
        command += default_commands.get(target_format, "")

    if target_format in JPEG_FORMATS:
        command += f" -quality {settings.jpeg_quality}"
    if "-colorspace" not in command:
        command += f" -colorspace {settings.resolved_colorspace}"

    _LOGGER.debug("Built convert command for %s output: %s", target_format, command)
    return command


__all__ = [
    "JPEG_FORMATS",
    "STRIP_PROFILE_SKIP_MARKER",
    "apply_strip_profile",
    "build_convert_command",
    "crop_clause",
    "default_commands",
]
