"""
Custom exceptions for imgconvertx.

Probing and format resolution failures are raised before any subprocess is
spawned. A conversion that ran but produced no file is reported as ``None`` by
:meth:`imgconvertx.converter.ImageConverter.convert`; :class:`ConversionFailedError`
exists for callers such as the CLI that prefer to raise.
"""


class ImgConvertXError(Exception):
    """Base exception for all imgconvertx errors."""

    def __init__(self, message: str = "") -> None:
        super().__init__(message or self.default_message)
        self.message = message or self.default_message

    @property
    def default_message(self) -> str:
        return "An unknown image conversion error occurred."


class SourceUnreadableError(ImgConvertXError):
    """Raised when the source image is missing, unreadable or not allow-listed."""

    @property
    def default_message(self) -> str:
        return "Source image is missing or cannot be read."


class UnsupportedFormatError(ImgConvertXError):
    """Raised when the resolved target format is not in the allow-list."""

    @property
    def default_message(self) -> str:
        return "Target image format is not supported."


class ConversionFailedError(ImgConvertXError):
    """Raised when the processor ran but the expected output file is absent."""

    @property
    def default_message(self) -> str:
        return "Image processor did not produce an output file."


class InvalidCropError(ImgConvertXError):
    """Raised when crop information cannot be parsed."""

    @property
    def default_message(self) -> str:
        return "Invalid crop specification."
