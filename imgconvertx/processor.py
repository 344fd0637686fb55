"""External image processor integration for :mod:`imgconvertx`.

All pixel work is delegated to ImageMagick or GraphicsMagick. Every invocation
is appended to a bounded audit log; exit codes are recorded there but success is
judged by the caller from the presence of the output file.
"""

from __future__ import annotations

import logging
import shlex
import subprocess
from collections import deque
from enum import Enum
from pathlib import Path
from typing import Sequence

from .commands import STRIP_PROFILE_SKIP_MARKER
from .config import ProcessorSettings
from .types import IdentifiedImage, InvocationRecord, Operation
from .utils import fix_permissions, random_name, run_subprocess, unlink_quietly, which

_LOGGER = logging.getLogger("imgconvertx.processor")

IDENTIFY_FORMAT = "%w %h %e %m"


class ProcessorType(str, Enum):
    """Enumeration of supported processors."""

    IMAGEMAGICK = "ImageMagick"
    GRAPHICSMAGICK = "GraphicsMagick"


_SUBCOMMANDS: dict[Operation, str] = {
    "identify": "identify",
    "convert": "convert",
    "combine": "composite",
}


def image_file_reference(path: Path | str, frame: int | None = None) -> str:
    """Return the processor's file reference, selecting *frame* if given."""

    if frame is None:
        return str(path)
    return f"{path}[{frame}]"


def split_parameters(params: str) -> list[str]:
    """Tokenize a free-form parameter string for the processor."""

    return shlex.split(params.replace(STRIP_PROFILE_SKIP_MARKER, ""))


def build_base_command(
    processor_type: ProcessorType,
    operation: Operation,
    search_path: str | None = None,
) -> list[str]:
    """Return the executable (and subcommand) for *operation*."""

    subcommand = _SUBCOMMANDS[operation]
    if processor_type is ProcessorType.GRAPHICSMAGICK:
        return [which(("gm",), search_path) or "gm", subcommand]

    magick = which(("magick",), search_path)
    if magick:
        return [magick] if operation == "convert" else [magick, subcommand]
    return [which((subcommand,), search_path) or subcommand]


class ImageProcessor:
    """Runs ``identify``, ``convert`` and ``combine`` against the processor."""

    def __init__(self, settings: ProcessorSettings) -> None:
        self.settings = settings
        self.type = ProcessorType(settings.processor)
        self._search_path = settings.processor_path or None
        self._base_commands: dict[Operation, list[str]] = {}
        self._log: deque[InvocationRecord] = deque(maxlen=settings.audit_log_size)

    @property
    def enabled(self) -> bool:
        return self.settings.processor_enabled

    @property
    def commands(self) -> list[InvocationRecord]:
        """Snapshot of the audit log, oldest first."""

        return list(self._log)

    def _base_command(self, operation: Operation) -> list[str]:
        if operation not in self._base_commands:
            self._base_commands[operation] = build_base_command(self.type, operation, self._search_path)
        return list(self._base_commands[operation])

    def _execute(
        self,
        operation: Operation,
        argv: Sequence[str],
        output: str,
    ) -> subprocess.CompletedProcess[str] | None:
        command = shlex.join(argv)
        try:
            completed = run_subprocess(argv)
        except OSError as exc:
            _LOGGER.warning("Unable to start %s for %s: %s", argv[0], operation, exc)
            self._log.append(InvocationRecord(operation, command, output, None, str(exc)))
            return None

        if operation == "identify":
            output = _last_line(completed.stdout)
        self._log.append(
            InvocationRecord(operation, command, output, completed.returncode, completed.stderr or "")
        )
        return completed

    def identify(self, image_file: Path) -> IdentifiedImage | None:
        """Ask the processor for the dimensions and type of *image_file*."""

        if not self.enabled:
            return None

        frame = 0 if self.settings.allow_frame_selection else None
        argv = self._base_command("identify") + [
            "-format",
            IDENTIFY_FORMAT,
            image_file_reference(image_file, frame),
        ]
        completed = self._execute("identify", argv, "")
        if completed is None:
            return None

        fields = _last_line(completed.stdout).split(" ")
        if len(fields) < 4:
            return None
        width, height = _to_int(fields[0]), _to_int(fields[1])
        if width <= 0 or height <= 0:
            return None
        return IdentifiedImage(
            width=width,
            height=height,
            format=fields[2].lower(),
            path=Path(image_file),
            real_type=fields[3].strip().lower(),
        )

    def convert(self, input_file: Path, output_file: Path, params: str, frame: int = 0) -> str:
        """Run ``convert`` with *params* from *input_file* into *output_file*."""

        if not self.enabled:
            return ""

        try:
            tokens = split_parameters(params)
        except ValueError as exc:
            _LOGGER.warning("Unable to parse convert parameters %r: %s", params, exc)
            self._log.append(InvocationRecord("convert", params, str(output_file), None, str(exc)))
            return ""

        frame_selection = int(frame) if self.settings.allow_frame_selection else None
        argv = (
            self._base_command("convert")
            + tokens
            + [image_file_reference(input_file, frame_selection), str(output_file)]
        )
        completed = self._execute("convert", argv, str(output_file))
        fix_permissions(Path(output_file), self.settings.file_permissions)
        return completed.stdout if completed else ""

    def combine(self, input_file: Path, overlay: Path, mask: Path, output_file: Path) -> str:
        """Composite *overlay* onto *input_file* through *mask* into *output_file*."""

        if not self.enabled:
            return ""

        gray_mask = random_name(self.settings.transient_dir).with_suffix(".png")
        try:
            # +matte drops the alpha channel of the normalized mask
            self.convert(mask, gray_mask, "-colorspace GRAY +matte")
            argv = self._base_command("combine") + [
                "-compose",
                "over",
                "-quality",
                str(self.settings.jpeg_quality),
                "+matte",
                image_file_reference(input_file),
                image_file_reference(overlay),
                image_file_reference(gray_mask),
                str(output_file),
            ]
            completed = self._execute("combine", argv, str(output_file))
            fix_permissions(Path(output_file), self.settings.file_permissions)
        finally:
            unlink_quietly(gray_mask)
        return completed.stdout if completed else ""


def _last_line(text: str | None) -> str:
    lines = [line for line in (text or "").splitlines() if line.strip()]
    return lines[-1].strip() if lines else ""


def _to_int(value: str) -> int:
    try:
        return int(value)
    except ValueError:
        return 0


__all__ = [
    "IDENTIFY_FORMAT",
    "ImageProcessor",
    "ProcessorType",
    "build_base_command",
    "image_file_reference",
    "split_parameters",
]
