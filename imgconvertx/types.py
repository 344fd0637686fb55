"""
Type definitions and dataclasses for imgconvertx.

This module defines the value objects passed between the probe, the geometry
resolver, the command builder and the converter.
"""

from __future__ import annotations

import dataclasses
from pathlib import Path
from typing import Literal

Operation = Literal["identify", "convert", "combine"]
SizeSpec = str | int


@dataclasses.dataclass(frozen=True, slots=True)
class ImageDescriptor:
    """
    Dimensions of an image file on disk at a point in time.

    Attributes:
        width: Width in pixels
        height: Height in pixels
        format: Lower-case file extension, e.g. ``"png"``
        path: Location of the file
    """

    width: int
    height: int
    format: str
    path: Path


@dataclasses.dataclass(frozen=True, slots=True)
class IdentifiedImage:
    """Result of a processor ``identify`` call."""

    width: int
    height: int
    format: str
    path: Path
    real_type: str

    def to_descriptor(self) -> ImageDescriptor:
        return ImageDescriptor(self.width, self.height, self.format, self.path)


@dataclasses.dataclass(frozen=True, slots=True)
class Rectangle:
    """A crop rectangle, offsets measured from the top left corner."""

    width: int
    height: int
    offset_left: int = 0
    offset_top: int = 0

    def __str__(self) -> str:
        return f"{self.width}x{self.height}+{self.offset_left}+{self.offset_top}"


@dataclasses.dataclass(frozen=True, slots=True)
class GeometryResult:
    """
    Target geometry computed by a geometry resolver.

    ``width`` and ``height`` are forced onto the image first; ``crop_area`` is
    then cut in the coordinates of that resized image.
    """

    width: int
    height: int
    crop_area: Rectangle | None = None

    @property
    def output_width(self) -> int:
        return self.crop_area.width if self.crop_area else self.width

    @property
    def output_height(self) -> int:
        return self.crop_area.height if self.crop_area else self.height


@dataclasses.dataclass(frozen=True, slots=True)
class ConversionOptions:
    """
    Behavioural toggles for a single conversion.

    Attributes:
        no_scale: Keep the source dimensions even if the geometry differs
        sample: Use the nearest-neighbour ``-sample`` resize
        strip_profile: ``None`` when not requested, otherwise whether embedded
            profiles should be removed
        skip_profile: Carried through :meth:`ImageConverter.crop`
        max_width: Upper bound for the computed width
        max_height: Upper bound for the computed height
        min_width: Lower bound for the computed width
        min_height: Lower bound for the computed height
        crop: User crop rectangle in source coordinates
    """

    no_scale: bool = False
    sample: bool = False
    strip_profile: bool | None = None
    skip_profile: bool | None = None
    max_width: int | None = None
    max_height: int | None = None
    min_width: int | None = None
    min_height: int | None = None
    crop: Rectangle | None = None


@dataclasses.dataclass(frozen=True, slots=True)
class ConversionRequest:
    """A request to turn *source_path* into a (possibly) new image file."""

    source_path: Path
    target_format: str = ""
    width: SizeSpec = ""
    height: SizeSpec = ""
    params: str = ""
    frame: int | None = None
    options: ConversionOptions = dataclasses.field(default_factory=ConversionOptions)
    force_new_file: bool = False


@dataclasses.dataclass(frozen=True, slots=True)
class InvocationRecord:
    """A single processor invocation kept in the audit log."""

    operation: Operation
    command: str
    output: str
    return_code: int | None = None
    stderr: str = ""
