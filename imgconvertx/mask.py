"""Three step mask compositing built on :class:`ImageProcessor`."""

from __future__ import annotations

import logging
import os
from pathlib import Path

from .commands import apply_strip_profile
from .config import ProcessorSettings
from .processor import ImageProcessor
from .types import ConversionOptions
from .utils import random_name, unlink_quietly

_LOGGER = logging.getLogger("imgconvertx.mask")


class MaskCompositor:
    """Composites a background onto an image through a grayscale mask."""

    def __init__(self, settings: ProcessorSettings, processor: ImageProcessor) -> None:
        self.settings = settings
        self.processor = processor

    def mask(
        self,
        input_file: str | os.PathLike[str],
        output_file: str | os.PathLike[str],
        mask_image: str | os.PathLike[str],
        mask_background_image: str | os.PathLike[str],
        params: str = "",
        options: ConversionOptions | None = None,
    ) -> None:
        """Write *input_file* masked onto *mask_background_image* to *output_file*.

        The mask and the background are first converted with *params* into
        transient files, then combined. A failing step does not stop the
        following ones; check whether *output_file* exists to learn the outcome.
        Both transient files are removed in every case.
        """

        params = apply_strip_profile(params, options or ConversionOptions(), self.settings.strip_profile_command)
        base = random_name(self.settings.transient_dir)
        intermediate_mask = base.with_name(f"{base.name}_mask.png")
        intermediate_background = base.with_name(f"{base.name}_bgImg.miff")

        try:
            self.processor.convert(Path(mask_image), intermediate_mask, params)
            self.processor.convert(Path(mask_background_image), intermediate_background, params)
            self.processor.combine(intermediate_background, Path(input_file), intermediate_mask, Path(output_file))
        finally:
            unlink_quietly(intermediate_mask)
            unlink_quietly(intermediate_background)

        if not Path(output_file).exists():
            _LOGGER.debug("Mask compositing produced no output at %s", output_file)


__all__ = ["MaskCompositor"]
