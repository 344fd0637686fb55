from __future__ import annotations

import re
import sys
from pathlib import Path
from types import SimpleNamespace
from typing import Callable, Sequence

import pytest
from PIL import Image

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from imgconvertx.config import ProcessorSettings  # noqa: E402

_FRAME_REF = re.compile(r"^(.*)\[(\d+)\]$")
_GEOMETRY = re.compile(r"^(\d+)x(\d+)!$")
_CROP = re.compile(r"^(\d+)x(\d+)\+(\d+)\+(\d+)!$")


def _split_reference(reference: str) -> tuple[Path, int]:
    match = _FRAME_REF.match(reference)
    if match:
        return Path(match.group(1)), int(match.group(2))
    return Path(reference), 0


def _save(image: Image.Image, output: Path) -> None:
    image_format = Image.registered_extensions().get(output.suffix.lower(), "PNG")
    if image_format in ("JPEG", "GIF", "PCX"):
        image = image.convert("RGB")
    image.save(output, format=image_format)


class FakeMagick:
    """Pillow based stand-in for the ImageMagick command line tools."""

    def __init__(self) -> None:
        self.calls: list[list[str]] = []
        self.fail_inputs: set[Path] = set()
        self.identify_output: str | None = None

    def __call__(self, command: Sequence[str], **_: object) -> SimpleNamespace:
        argv = list(command)
        self.calls.append(argv)
        tool, args = Path(argv[0]).name, argv[1:]
        if tool in ("gm", "magick") and args and args[0] in ("convert", "identify", "composite"):
            tool, args = args[0], args[1:]
        elif tool == "magick":
            tool = "convert"

        handler = {
            "convert": self._convert,
            "identify": self._identify,
            "composite": self._composite,
        }[tool]
        try:
            return handler(args)
        except (OSError, EOFError) as exc:
            return SimpleNamespace(returncode=1, stdout="", stderr=str(exc))

    def _open(self, reference: str) -> Image.Image:
        path, frame = _split_reference(reference)
        if path in self.fail_inputs:
            raise OSError(f"unable to open image {path}")
        with Image.open(path) as image:
            if frame:
                image.seek(frame)
            return image.convert("RGBA")

    def _convert(self, args: list[str]) -> SimpleNamespace:
        image = self._open(args[-2])
        tokens = args[:-2]
        for index, token in enumerate(tokens):
            value = tokens[index + 1] if index + 1 < len(tokens) else ""
            if token in ("-geometry", "-sample") and _GEOMETRY.match(value):
                width, height = (int(part) for part in _GEOMETRY.match(value).groups())
                image = image.resize((width, height))
            elif token == "-crop" and _CROP.match(value):
                width, height, left, top = (int(part) for part in _CROP.match(value).groups())
                image = image.crop((left, top, left + width, top + height))
            elif token == "-colorspace" and value.lower() == "gray":
                image = image.convert("L")
            elif token == "+matte" and image.mode == "RGBA":
                image = image.convert("RGB")
        _save(image, Path(args[-1]))
        return SimpleNamespace(returncode=0, stdout="", stderr="")

    def _identify(self, args: list[str]) -> SimpleNamespace:
        if self.identify_output is not None:
            return SimpleNamespace(returncode=0, stdout=self.identify_output + "\n", stderr="")
        path, _ = _split_reference(args[-1])
        with Image.open(path) as image:
            line = f"{image.width} {image.height} {path.suffix[1:]} {image.format}"
        return SimpleNamespace(returncode=0, stdout=line + "\n", stderr="")

    def _composite(self, args: list[str]) -> SimpleNamespace:
        background, overlay, mask = (self._open(reference) for reference in args[-4:-1])
        overlay = overlay.resize(background.size)
        mask = mask.convert("L").resize(background.size)
        _save(Image.composite(overlay, background, mask), Path(args[-1]))
        return SimpleNamespace(returncode=0, stdout="", stderr="")


@pytest.fixture()
def fake_magick(monkeypatch: pytest.MonkeyPatch) -> FakeMagick:
    fake = FakeMagick()
    monkeypatch.setattr("imgconvertx.processor.run_subprocess", fake)
    monkeypatch.setattr("imgconvertx.processor.which", lambda executables, search_path=None: None)
    return fake


@pytest.fixture()
def settings(tmp_path: Path) -> ProcessorSettings:
    return ProcessorSettings(
        temp_assets_dir=tmp_path / "assets",
        transient_dir=tmp_path / "transient",
    )


@pytest.fixture()
def image_factory(tmp_path: Path) -> Callable[..., Path]:
    def _create(filename: str, width: int = 400, height: int = 300, color: str = "red", frames: int = 1) -> Path:
        path = tmp_path / filename
        image = Image.new("RGB", (width, height), color)
        if frames > 1:
            extra = [Image.new("RGB", (width, height), (0, 0, 50 * index)) for index in range(1, frames)]
            image.save(path, save_all=True, append_images=extra)
        else:
            image.save(path)
        return path

    return _create


@pytest.fixture()
def sample_png(image_factory: Callable[..., Path]) -> Path:
    return image_factory("sample.png")
