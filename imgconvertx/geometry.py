"""Target geometry computation.

The converter only depends on the :class:`GeometryResolver` protocol;
:class:`ScaleGeometryResolver` is the implementation used when none is injected.
Resolvers must be deterministic because output file names are derived from
their results.
"""

from __future__ import annotations

import dataclasses
import json
import logging
import math
import re
from typing import Protocol

from .exceptions import InvalidCropError
from .types import ConversionOptions, GeometryResult, ImageDescriptor, Rectangle, SizeSpec

_LOGGER = logging.getLogger("imgconvertx.geometry")

_SIZE_PATTERN = re.compile(r"^(\d*)\s*([mc]?)\s*([+-]?\d+)?$")


@dataclasses.dataclass(frozen=True, slots=True)
class SizeValue:
    """A parsed width or height specification."""

    pixels: int = 0
    mode: str = ""
    offset: int = 0


def parse_size(spec: SizeSpec) -> SizeValue:
    """Parse ``""``, ``200``, ``"200m"`` or ``"200c-30"`` into a :class:`SizeValue`."""

    if isinstance(spec, int):
        return SizeValue(pixels=max(spec, 0))
    text = spec.strip()
    if not text:
        return SizeValue()
    match = _SIZE_PATTERN.match(text)
    if not match:
        raise ValueError(f"Invalid size specification: {spec!r}")
    pixels = int(match.group(1) or 0)
    mode = match.group(2)
    offset = int(match.group(3)) if match.group(3) and mode == "c" else 0
    return SizeValue(pixels=pixels, mode=mode, offset=min(max(offset, -100), 100))


def _round(value: float) -> int:
    return int(math.floor(value + 0.5))


class GeometryResolver(Protocol):
    """Protocol for components computing target dimensions and crop areas."""

    def resolve(
        self,
        source: ImageDescriptor,
        target_format: str,
        width: SizeSpec,
        height: SizeSpec,
        options: ConversionOptions,
    ) -> GeometryResult:
        """Return the geometry to apply to *source*."""


class ScaleGeometryResolver(GeometryResolver):
    """Proportional scaling with max-box, crop-scaling and min/max bounds."""

    def __init__(self, *, allow_upscaling: bool = True) -> None:
        self.allow_upscaling = allow_upscaling

    def resolve(
        self,
        source: ImageDescriptor,
        target_format: str,
        width: SizeSpec,
        height: SizeSpec,
        options: ConversionOptions,
    ) -> GeometryResult:
        width_spec = parse_size(width)
        height_spec = parse_size(height)
        user_crop = options.crop
        if user_crop is not None and (user_crop.width <= 0 or user_crop.height <= 0):
            raise InvalidCropError(f"Crop area must not be empty: {user_crop}")
        base_w, base_h = (user_crop.width, user_crop.height) if user_crop else (source.width, source.height)

        max_mode = "m" in (width_spec.mode, height_spec.mode)
        crop_scale = "c" in (width_spec.mode, height_spec.mode)
        w, h = width_spec.pixels, height_spec.pixels

        if options.max_width:
            if (w or base_w) > options.max_width:
                w = options.max_width
                max_mode = True
        if options.max_height:
            if (h or base_h) > options.max_height:
                h = options.max_height
                max_mode = True

        if not self.allow_upscaling:
            w = min(w, base_w)
            h = min(h, base_h)

        out_w, out_h = base_w, base_h
        if w and not h:
            out_w, out_h = w, int(math.ceil(base_h * w / base_w))
        elif h and not w:
            out_w, out_h = int(math.ceil(base_w * h / base_h)), h
        elif w and h:
            ratio = base_w / base_h
            if max_mode:
                if h * ratio > w:
                    out_w, out_h = w, _round(w / ratio)
                else:
                    out_w, out_h = _round(h * ratio), h
            elif crop_scale:
                if h * ratio < w:
                    out_w, out_h = w, _round(w / ratio)
                else:
                    out_w, out_h = _round(h * ratio), h
            else:
                out_w, out_h = w, h

        if options.min_width and out_w < options.min_width:
            if (max_mode or crop_scale) and out_w:
                out_h = _round(out_h * options.min_width / out_w)
            out_w = options.min_width
        if options.min_height and out_h < options.min_height:
            if (max_mode or crop_scale) and out_h:
                out_w = _round(out_w * options.min_height / out_h)
            out_h = options.min_height

        crop_area: Rectangle | None = None
        if crop_scale and w and h and not max_mode:
            target_w, target_h = min(w, out_w), min(h, out_h)
            crop_area = Rectangle(
                width=target_w,
                height=target_h,
                offset_left=int((out_w - target_w) * (width_spec.offset + 100) / 200),
                offset_top=int((out_h - target_h) * (height_spec.offset + 100) / 200),
            )

        if user_crop:
            scale_x = out_w / user_crop.width
            scale_y = out_h / user_crop.height
            left = _round(user_crop.offset_left * scale_x)
            top = _round(user_crop.offset_top * scale_y)
            if crop_area:
                crop_area = dataclasses.replace(
                    crop_area,
                    offset_left=crop_area.offset_left + left,
                    offset_top=crop_area.offset_top + top,
                )
            else:
                crop_area = Rectangle(out_w, out_h, left, top)
            out_w = _round(source.width * scale_x)
            out_h = _round(source.height * scale_y)

        result = GeometryResult(width=out_w, height=out_h, crop_area=crop_area)
        _LOGGER.debug("Resolved geometry for %s (%s x %s): %s", source.path, width, height, result)
        return result


def parse_crop_information(crop_information: str | Rectangle) -> Rectangle:
    """Parse JSON ``{"x", "y", "width", "height"}`` or ``"left,top,width,height"``."""

    if isinstance(crop_information, Rectangle):
        return crop_information

    try:
        data = json.loads(crop_information)
    except ValueError:
        data = None

    try:
        if isinstance(data, dict):
            return Rectangle(
                width=int(data.get("width") or 0),
                height=int(data.get("height") or 0),
                offset_left=int(data.get("x") or 0),
                offset_top=int(data.get("y") or 0),
            )
        left, top, width, height = (int(float(part)) for part in crop_information.split(",", 3))
    except (TypeError, ValueError) as exc:
        raise InvalidCropError(f"Invalid crop information: {crop_information!r}") from exc
    return Rectangle(width=width, height=height, offset_left=left, offset_top=top)


__all__ = [
    "GeometryResolver",
    "ScaleGeometryResolver",
    "SizeValue",
    "parse_crop_information",
    "parse_size",
]
