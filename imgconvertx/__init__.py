"""
imgconvertx - cached image conversion on top of ImageMagick/GraphicsMagick.

The pixel work is done by the external processor; this package decides what
to run, names the output after a hash of the work (so repeated requests are
served from disk), and keeps an audit log of every processor call.

Quick Start:
    >>> from imgconvertx import ImageConverter, ProcessorSettings
    >>> converter = ImageConverter(ProcessorSettings(temp_assets_dir="cache"))
    >>> result = converter.convert_image("photo.tif", "web", width="800m", height="600m")

Main Classes:
    - ImageConverter: Conversion, cropping and masking
    - ImageProcessor: Direct access to identify/convert/combine
    - DimensionProbe: Width/height/format of image files
    - ProcessorSettings: Immutable configuration

For CLI usage, use the 'imgconvertx' command after installation.
"""

from imgconvertx.config import ProcessorSettings
from imgconvertx.converter import ImageConverter
from imgconvertx.exceptions import (
    ConversionFailedError,
    ImgConvertXError,
    InvalidCropError,
    SourceUnreadableError,
    UnsupportedFormatError,
)
from imgconvertx.filters import blur, sharpen, web_fallback_format
from imgconvertx.geometry import GeometryResolver, ScaleGeometryResolver
from imgconvertx.mask import MaskCompositor
from imgconvertx.probe import DimensionProbe
from imgconvertx.processor import ImageProcessor, ProcessorType
from imgconvertx.types import (
    ConversionOptions,
    ConversionRequest,
    GeometryResult,
    IdentifiedImage,
    ImageDescriptor,
    InvocationRecord,
    Rectangle,
)

__version__ = "1.0.0"
__license__ = "MIT"

__all__ = [
    # Main classes
    "ImageConverter",
    "ImageProcessor",
    "ProcessorType",
    "DimensionProbe",
    "MaskCompositor",
    "GeometryResolver",
    "ScaleGeometryResolver",
    "ProcessorSettings",
    # Data types
    "ConversionOptions",
    "ConversionRequest",
    "GeometryResult",
    "IdentifiedImage",
    "ImageDescriptor",
    "InvocationRecord",
    "Rectangle",
    # Exceptions
    "ImgConvertXError",
    "SourceUnreadableError",
    "UnsupportedFormatError",
    "ConversionFailedError",
    "InvalidCropError",
    # Filters
    "sharpen",
    "blur",
    "web_fallback_format",
    # Version info
    "__version__",
]
