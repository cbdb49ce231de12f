"""Serialization of rendered image buffers."""

from __future__ import annotations

import os
import stat
import tempfile
from pathlib import Path
from typing import IO, Union

import numpy as np
import PIL.Image

from .errors import OutputError

MAGIC = "P3"
MAX_CHANNEL_VALUE = 255

Destination = Union[str, "os.PathLike[str]", IO[str]]


def encode_header(width: int, height: int) -> str:
    return f"{MAGIC}\n{width} {height}\n{MAX_CHANNEL_VALUE}\n"


def _write_stream(pixels: np.ndarray, stream: IO[str]) -> None:
    height, width = pixels.shape[:2]
    stream.write(encode_header(width, height))
    np.savetxt(stream, pixels.reshape(-1, 3), fmt="%d", delimiter=" ")


def _check_pixels(pixels: np.ndarray) -> np.ndarray:
    pixels = np.asarray(pixels)
    if pixels.ndim != 3 or pixels.shape[2] != 3:
        raise ValueError(f"expected an image buffer of shape (height, width, 3), got {pixels.shape}")
    return pixels


def _file_mode(path: Path) -> int:
    """Permissions a freshly created file at ``path`` would get.

    An existing destination keeps its mode; otherwise the process umask
    applies, as it would for a plain ``open``.
    """

    try:
        return stat.S_IMODE(os.stat(path).st_mode)
    except FileNotFoundError:
        pass
    umask = os.umask(0)
    os.umask(umask)
    return 0o666 & ~umask


def write_ppm(pixels: np.ndarray, destination: Destination) -> None:
    """Write ``pixels`` as a plain-text ``P3`` image.

    ``destination`` is either a path or a writable text stream. A path is
    filled through a temporary sibling file that is moved into place once the
    whole image has been written, so a failed write never leaves a truncated
    image behind.
    """

    pixels = _check_pixels(pixels)

    if hasattr(destination, "write"):
        try:
            _write_stream(pixels, destination)
        except (OSError, ValueError, TypeError) as exc:
            raise OutputError(destination, f"Could not write image to stream: {exc}") from exc
        return

    path = Path(destination)
    tmp_name = None
    try:
        with tempfile.NamedTemporaryFile(
            "w",
            dir=path.parent,
            prefix=f".{path.name}.",
            suffix=".tmp",
            delete=False,
            newline="\n",
        ) as handle:
            tmp_name = handle.name
            _write_stream(pixels, handle)
        os.chmod(tmp_name, _file_mode(path))
        os.replace(tmp_name, path)
    except OSError as exc:
        if tmp_name is not None and os.path.exists(tmp_name):
            os.unlink(tmp_name)
        raise OutputError(path, f"Could not open file {path} for writing: {exc}") from exc


def _pil_format_name(ext: str) -> str:
    upper = ext.upper()
    if upper == "JPG":
        return "JPEG"
    if upper == "TIF":
        return "TIFF"
    return upper


def write_image(pixels: np.ndarray, path: Union[str, "os.PathLike[str]"], image_format: str) -> None:
    """Write ``pixels`` through Pillow in any format it can encode."""

    pixels = _check_pixels(pixels)
    path = Path(path)
    image = PIL.Image.fromarray(np.ascontiguousarray(pixels, dtype=np.uint8))
    try:
        image.save(str(path), format=_pil_format_name(image_format))
    except OSError as exc:
        raise OutputError(path, f"Could not open file {path} for writing: {exc}") from exc
