"""Utility helpers for :mod:`imgconvertx`."""

from __future__ import annotations

import logging
import os
import shlex
import shutil
import subprocess
import uuid
from pathlib import Path
from typing import Sequence

_LOGGER = logging.getLogger("imgconvertx")


def get_logger(name: str) -> logging.Logger:
    logger = logging.getLogger(name)
    if not logger.handlers:
        handler = logging.StreamHandler()
        formatter = logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")
        handler.setFormatter(formatter)
        logger.addHandler(handler)
        logger.propagate = False
    return logger


def resolve_path(path: os.PathLike[str] | str) -> Path:
    """Return *path* as an absolute path; the processor and the cache key both see this form."""

    return Path(path).expanduser().resolve()


def ensure_dir(path: Path) -> Path:
    """Create *path* (and parents) if it does not exist."""

    path.mkdir(parents=True, exist_ok=True)
    return path


def fix_permissions(path: Path, mode: int) -> None:
    """Apply *mode* to *path* when the file exists."""

    if not path.is_file():
        return
    try:
        os.chmod(path, mode)
    except OSError as exc:
        _LOGGER.debug("Unable to change permissions of %s: %s", path, exc)


def random_name(directory: Path) -> Path:
    """Return a random, extension-less file path inside *directory*."""

    ensure_dir(directory)
    return directory / uuid.uuid4().hex


def unlink_quietly(path: Path) -> None:
    """Remove *path*, ignoring any error."""

    try:
        path.unlink(missing_ok=True)
    except OSError as exc:
        _LOGGER.debug("Failed to remove temporary file %s: %s", path, exc)


def which(executables: Sequence[str], search_path: str | None = None) -> str | None:
    """Locate the first of *executables* in *search_path*, or on ``PATH`` when unset."""

    for candidate in executables:
        found = shutil.which(candidate, path=search_path)
        if found:
            _LOGGER.debug("Using %s for %s", found, candidate)
            return found
    _LOGGER.debug("None of %s found in %s", ", ".join(executables), search_path or "PATH")
    return None


def run_subprocess(command: Sequence[str], *, check: bool = False) -> subprocess.CompletedProcess[str]:
    """Run a processor *command* and capture its text output.

    The exit status is left to the caller unless *check* is set. Spawn
    failures surface as :class:`OSError`.
    """

    argv = list(command)
    _LOGGER.debug("Running %s", shlex.join(argv))
    completed = subprocess.run(argv, capture_output=True, check=check, text=True)
    if completed.returncode:
        _LOGGER.debug("%s exited with %s: %s", argv[0], completed.returncode, completed.stderr.strip())
    return completed


def format_file_size(num_bytes: int) -> str:
    """Render a file size for display, e.g. ``"12.3 KiB"``."""

    size = float(num_bytes)
    units = ("bytes", "KiB", "MiB", "GiB")
    for unit in units[:-1]:
        if size < 1024:
            return f"{size:.1f} {unit}"
        size /= 1024
    return f"{size:.1f} {units[-1]}"
