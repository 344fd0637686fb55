"""Image dimension probing for :mod:`imgconvertx`."""

from __future__ import annotations

import logging
import os
from pathlib import Path

from PIL import Image
from pypdf import PdfReader
from pypdf.errors import PdfReadError

from .config import ProcessorSettings
from .processor import ImageProcessor
from .types import ImageDescriptor

_LOGGER = logging.getLogger("imgconvertx.probe")


def _pdf_size(path: Path) -> tuple[int, int] | None:
    try:
        reader = PdfReader(str(path))
        page = reader.pages[0]
    except (PdfReadError, OSError, IndexError, ValueError) as exc:
        _LOGGER.debug("Unable to read PDF page box of %s: %s", path, exc)
        return None

    box = page.mediabox
    width, height = round(float(box.width)), round(float(box.height))
    if (page.rotation or 0) % 180:
        width, height = height, width
    return width, height


def _raster_size(path: Path) -> tuple[int, int] | None:
    try:
        with Image.open(path) as image:
            return image.size
    except (OSError, Image.DecompressionBombError) as exc:
        _LOGGER.debug("Pillow could not read %s: %s", path, exc)
        return None


class DimensionProbe:
    """Reads width, height and format of allow-listed image files."""

    def __init__(self, settings: ProcessorSettings, processor: ImageProcessor | None = None) -> None:
        self.settings = settings
        self.processor = processor

    def probe(self, path: str | os.PathLike[str]) -> ImageDescriptor | None:
        """Return the :class:`ImageDescriptor` of *path* or ``None``.

        Files whose extension is not in ``settings.image_file_ext`` are rejected
        even if they hold a valid image.
        """

        image_path = Path(path)
        if not image_path.is_file():
            _LOGGER.debug("Image file not found: %s", image_path)
            return None

        extension = image_path.suffix[1:].lower()
        if not self.settings.is_allowed_extension(extension):
            _LOGGER.debug("Extension %r of %s is not allowed", extension, image_path)
            return None

        size = self._read_size(image_path, extension)
        if size is None or not size[0]:
            return None
        return ImageDescriptor(width=size[0], height=size[1], format=extension, path=image_path)

    def _read_size(self, path: Path, extension: str) -> tuple[int, int] | None:
        size = _pdf_size(path) if extension == "pdf" else _raster_size(path)
        if size is not None:
            return size
        if self.processor is None:
            return None
        identified = self.processor.identify(path)
        if identified is None:
            return None
        return identified.width, identified.height


__all__ = ["DimensionProbe"]
