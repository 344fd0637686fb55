"""Conversion orchestration for :mod:`imgconvertx`.

:class:`ImageConverter` turns a :class:`~imgconvertx.types.ConversionRequest`
into a processor run whose output lands at a deterministic, hash based path.
An existing file at that path is reused as-is.
"""

from __future__ import annotations

import dataclasses
import logging
import os
from pathlib import Path

from . import cache
from .commands import apply_strip_profile, build_convert_command, crop_clause, default_commands
from .config import ProcessorSettings
from .exceptions import SourceUnreadableError, UnsupportedFormatError
from .filters import is_web_format, web_fallback_format
from .geometry import GeometryResolver, ScaleGeometryResolver, parse_crop_information, parse_size
from .mask import MaskCompositor
from .probe import DimensionProbe
from .processor import ImageProcessor
from .types import (
    ConversionOptions,
    ConversionRequest,
    IdentifiedImage,
    ImageDescriptor,
    InvocationRecord,
    Rectangle,
    SizeSpec,
)
from .utils import resolve_path

_LOGGER = logging.getLogger("imgconvertx.converter")

WEB_TARGETS: tuple[str, ...] = ("web", "auto-web")


class ImageConverter:
    """Converts, scales and crops images through the external processor."""

    def __init__(
        self,
        settings: ProcessorSettings | None = None,
        *,
        processor: ImageProcessor | None = None,
        probe: DimensionProbe | None = None,
        resolver: GeometryResolver | None = None,
    ) -> None:
        self.settings = settings or ProcessorSettings()
        self.processor = processor or ImageProcessor(self.settings)
        self.probe = probe or DimensionProbe(self.settings, self.processor)
        self.resolver = resolver or ScaleGeometryResolver(allow_upscaling=self.settings.allow_upscaling)
        self.default_commands = default_commands(self.settings)
        self.compositor = MaskCompositor(self.settings, self.processor)

    @property
    def commands(self) -> list[InvocationRecord]:
        """Processor invocations made through this converter, oldest first."""

        return self.processor.commands

    def get_image_dimensions(self, image_file: str | os.PathLike[str]) -> ImageDescriptor | None:
        return self.probe.probe(image_file)

    def identify(self, image_file: str | os.PathLike[str]) -> IdentifiedImage | None:
        return self.processor.identify(resolve_path(image_file))

    def resolve_target_format(self, target_format: str, source: ImageDescriptor) -> str:
        """Return the output extension for *target_format* applied to *source*."""

        resolved = target_format.strip().lower()
        if not resolved:
            resolved = source.format
        if resolved in WEB_TARGETS:
            if is_web_format(source.format):
                resolved = source.format
            else:
                resolved = web_fallback_format(
                    source.format, source.width, source.height, self.settings.pixel_limit
                )
        if not self.settings.is_allowed_extension(resolved):
            raise UnsupportedFormatError(f"Target format '{resolved}' is not allowed")
        return resolved

    def convert(self, request: ConversionRequest, *, output_name: str | None = None) -> ImageDescriptor | None:
        """Convert the request's source image.

        Returns the descriptor of the resulting file, the source descriptor when
        no work is needed, or ``None`` when the processor produced no output.
        *output_name* replaces the computed hash in the output file name.

        Raises:
            SourceUnreadableError: If the source cannot be probed
            UnsupportedFormatError: If the target format is not allow-listed
            InvalidCropError: If the requested crop area is empty
        """

        source_path = resolve_path(request.source_path)
        info = self.probe.probe(source_path)
        if info is None:
            raise SourceUnreadableError(f"Unable to read image: {source_path}")
        if not self.processor.enabled:
            _LOGGER.debug("Processor disabled, returning %s unchanged", source_path)
            return info

        target_format = self.resolve_target_format(request.target_format, info)
        options = request.options
        params = request.params.strip()
        geometry = self.resolver.resolve(info, target_format, request.width, request.height, options)

        no_scale = (
            not (_is_requested(request.width) or _is_requested(request.height))
            or (geometry.width == info.width and geometry.height == info.height)
            or options.no_scale
        )
        if (
            no_scale
            and geometry.crop_area is None
            and not params
            and not request.frame
            and target_format == info.format
            and not request.force_new_file
        ):
            if options.no_scale:
                return dataclasses.replace(info, width=geometry.width, height=geometry.height)
            return info

        frame = int(request.frame or 0) if self.settings.allow_frame_selection else 0
        params = apply_strip_profile(params, options, self.settings.strip_profile_command)
        command = build_convert_command(
            geometry,
            target_format,
            self.settings,
            params=params,
            sample=options.sample,
            default_commands=self.default_commands,
        )

        name = output_name or cache.output_name(
            command,
            geometry.crop_area,
            source_path,
            frame,
            alternative_key=self.settings.alternative_output_key,
        )
        output = cache.output_path(self.settings, name, target_format)
        if self.settings.ignore_existing_files or not output.exists():
            _LOGGER.debug("Rendering %s to %s", source_path, output)
            self.processor.convert(source_path, output, command, frame)
        else:
            _LOGGER.debug("Reusing existing output %s", output)

        if not output.exists():
            _LOGGER.debug("Processor produced no output for %s", source_path)
            return None
        if params:
            # free-form params may change the dimensions
            return self.probe.probe(output)
        return ImageDescriptor(
            width=geometry.output_width,
            height=geometry.output_height,
            format=target_format,
            path=output,
        )

    def convert_image(
        self,
        image_file: str | os.PathLike[str],
        target_format: str = "",
        width: SizeSpec = "",
        height: SizeSpec = "",
        params: str = "",
        frame: int | None = None,
        options: ConversionOptions | None = None,
        force_new_file: bool = False,
    ) -> ImageDescriptor | None:
        """Keyword friendly wrapper around :meth:`convert`."""

        request = ConversionRequest(
            source_path=Path(image_file),
            target_format=target_format,
            width=width,
            height=height,
            params=params,
            frame=frame,
            options=options or ConversionOptions(),
            force_new_file=force_new_file,
        )
        return self.convert(request)

    def crop(
        self,
        image_file: str | os.PathLike[str],
        target_format: str,
        crop_information: str | Rectangle,
        options: ConversionOptions | None = None,
    ) -> ImageDescriptor | None:
        """Cut a rectangle out of *image_file* without any further scaling."""

        area = parse_crop_information(crop_information)
        skip_profile = options.skip_profile if options else None
        return self.convert(
            ConversionRequest(
                source_path=Path(image_file),
                target_format=target_format,
                params=crop_clause(area),
                options=ConversionOptions(skip_profile=skip_profile),
                force_new_file=True,
            )
        )

    def mask(
        self,
        input_file: str | os.PathLike[str],
        output_file: str | os.PathLike[str],
        mask_image: str | os.PathLike[str],
        mask_background_image: str | os.PathLike[str],
        params: str = "",
        options: ConversionOptions | None = None,
    ) -> None:
        self.compositor.mask(input_file, output_file, mask_image, mask_background_image, params, options)


def _is_requested(spec: SizeSpec) -> bool:
    return parse_size(spec).pixels > 0


__all__ = ["ImageConverter", "WEB_TARGETS"]
