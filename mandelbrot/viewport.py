"""Mapping between the pixel grid and the complex plane."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Optional

import numpy as np

from .errors import ConfigurationError


@dataclass(frozen=True)
class Framing:
    """Bounds of the unzoomed view of the complex plane."""

    real_min: float
    real_max: float
    imag_min: float
    imag_max: float


DEFAULT_FRAMING = Framing(real_min=-2.0, real_max=1.0, imag_min=-1.5, imag_max=1.5)


@dataclass(frozen=True)
class Viewport:
    """Rectangle of the complex plane mapped onto the output image."""

    real_min: float
    real_max: float
    imag_min: float
    imag_max: float

    def __post_init__(self) -> None:
        bounds = (self.real_min, self.real_max, self.imag_min, self.imag_max)
        if not all(math.isfinite(value) for value in bounds):
            raise ConfigurationError(f"viewport bounds must be finite, got {bounds}")
        if not self.real_min < self.real_max:
            raise ConfigurationError(
                f"viewport real range is empty: [{self.real_min}, {self.real_max}]"
            )
        if not self.imag_min < self.imag_max:
            raise ConfigurationError(
                f"viewport imaginary range is empty: [{self.imag_min}, {self.imag_max}]"
            )

    @property
    def real_span(self) -> float:
        return self.real_max - self.real_min

    @property
    def imag_span(self) -> float:
        return self.imag_max - self.imag_min

    @property
    def center(self) -> complex:
        return complex((self.real_min + self.real_max) / 2.0, (self.imag_min + self.imag_max) / 2.0)


def validate_zoom(zoom: float) -> float:
    try:
        zoom = float(zoom)
    except (TypeError, ValueError) as exc:
        raise ConfigurationError(f"zoom must be a real number, got {zoom!r}") from exc
    if not math.isfinite(zoom) or zoom <= 0.0:
        raise ConfigurationError(f"zoom must be positive and finite, got {zoom}")
    return zoom


def viewport_from_zoom(
    zoom: float,
    offset_x: float,
    offset_y: float,
    *,
    framing: Framing = DEFAULT_FRAMING,
    aspect: Optional[float] = None,
) -> Viewport:
    """Scale ``framing`` by ``zoom`` and pan it by the negated offsets.

    With ``aspect`` (image height over width) the imaginary range is resized
    around its centre so that it spans ``aspect`` times the real range.
    """

    zoom = validate_zoom(zoom)
    real_min = framing.real_min * zoom - offset_x
    real_max = framing.real_max * zoom - offset_x
    imag_min = framing.imag_min * zoom - offset_y
    imag_max = framing.imag_max * zoom - offset_y

    if aspect is not None:
        half_height = (real_max - real_min) * aspect / 2.0
        imag_center = (imag_min + imag_max) / 2.0
        imag_min = imag_center - half_height
        imag_max = imag_center + half_height

    return Viewport(real_min=real_min, real_max=real_max, imag_min=imag_min, imag_max=imag_max)


def _check_grid(width: int, height: int) -> None:
    if width < 2 or height < 2:
        raise ConfigurationError(f"image must be at least 2x2 pixels, got {width}x{height}")


def pixel_to_complex(viewport: Viewport, width: int, height: int, x: int, y: int) -> complex:
    _check_grid(width, height)
    real = viewport.real_min + (x / (width - 1)) * (viewport.real_max - viewport.real_min)
    imag = viewport.imag_min + (y / (height - 1)) * (viewport.imag_max - viewport.imag_min)
    return complex(real, imag)


def sample_axes(viewport: Viewport, width: int, height: int) -> tuple[np.ndarray, np.ndarray]:
    """Return the real and imaginary coordinates of every column and row.

    Uses the same element-wise arithmetic as :func:`pixel_to_complex`, so
    ``complex(real_axis[x], imag_axis[y]) == pixel_to_complex(..., x, y)``.
    """

    _check_grid(width, height)
    columns = np.arange(width, dtype=np.float64) / np.float64(width - 1)
    rows = np.arange(height, dtype=np.float64) / np.float64(height - 1)
    real_axis = np.float64(viewport.real_min) + columns * np.float64(viewport.real_max - viewport.real_min)
    imag_axis = np.float64(viewport.imag_min) + rows * np.float64(viewport.imag_max - viewport.imag_min)
    return real_axis, imag_axis
