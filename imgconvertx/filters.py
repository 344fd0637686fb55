"""Filter strength quantization and web format policy."""

from __future__ import annotations

import math

SHARPEN_STEPS = "1x2,2x2,3x2,2x3,3x3,4x3,3x4,4x4,4x5,5x5"
BLUR_STEPS = "1x2,2x2,3x2,4x3,5x3,5x4,6x4,7x5,8x5,9x5"

WEB_IMAGE_EXTENSIONS: tuple[str, ...] = ("gif", "jpg", "jpeg", "png")
VECTOR_FORMATS: frozenset[str] = frozenset({"ai", "eps", "svg"})


def _filter_level(factor: float) -> int:
    """Map a 0-100 *factor* onto one of the eleven table slots."""

    return min(max(int(math.ceil(factor / 10)), 0), 10)


def _filter_command(flag: str, steps: str, factor: float) -> str:
    # slot 0 is the empty entry
    table = ("," + steps).split(",")
    strength = table[_filter_level(factor)].strip()
    if strength:
        return f" {flag} {strength}"
    return ""


def sharpen(factor: float) -> str:
    """Return the sharpening clause for *factor*, e.g. ``" -sharpen 3x4"``."""

    return _filter_command("-sharpen", SHARPEN_STEPS, factor)


def blur(factor: float) -> str:
    """Return the blurring clause for *factor*, e.g. ``" -blur 3x4"``."""

    return _filter_command("-blur", BLUR_STEPS, factor)


def web_fallback_format(image_format: str, width: int, height: int, pixel_limit: int) -> str:
    """Pick ``png`` for vector or small images and ``jpg`` for everything else."""

    if image_format in VECTOR_FORMATS or width * height < pixel_limit:
        return "png"
    return "jpg"


def is_web_format(image_format: str) -> bool:
    return image_format in WEB_IMAGE_EXTENSIONS


__all__ = [
    "BLUR_STEPS",
    "SHARPEN_STEPS",
    "VECTOR_FORMATS",
    "WEB_IMAGE_EXTENSIONS",
    "blur",
    "is_web_format",
    "sharpen",
    "web_fallback_format",
]
