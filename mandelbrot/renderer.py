"""Rendering primitives for Mandelbrot images."""

from __future__ import annotations

import math
import numbers
from dataclasses import dataclass
from typing import Optional

import numpy as np

from .coloring import colorize, validate_strategy
from .errors import ConfigurationError, OutputError
from .evaluator import escape_counts, iterate, validate_max_iterations
from .ppm import Destination, write_ppm
from .viewport import DEFAULT_FRAMING, Framing, Viewport, pixel_to_complex, sample_axes, viewport_from_zoom

BACKENDS = ("scalar", "tensor")


@dataclass(frozen=True)
class RenderParameters:
    """Parameters that describe a single render of the Mandelbrot set."""

    width: int
    height: int
    max_iterations: int
    zoom: float = 1.0
    offset_x: float = 0.0
    offset_y: float = 0.0
    coloring: str = "reference"
    lock_aspect: bool = False
    backend: str = "scalar"


@dataclass(frozen=True)
class RenderResult:
    """Container for a rendered image and the counts it was coloured from."""

    params: RenderParameters
    viewport: Viewport
    iterations: np.ndarray
    pixels: np.ndarray

    def flat_pixels(self) -> np.ndarray:
        """Pixels in row-major order, one ``(r, g, b)`` row per pixel."""

        return self.pixels.reshape(-1, 3)


def _check_dimension(name: str, value: int) -> None:
    if isinstance(value, bool) or not isinstance(value, numbers.Integral):
        raise ConfigurationError(f"{name} must be an integer, got {value!r}")
    if value < 2:
        raise ConfigurationError(f"{name} must be at least 2 pixels, got {value}")


def validate_parameters(params: RenderParameters, framing: Framing = DEFAULT_FRAMING) -> None:
    """Reject parameters that cannot produce a well-formed image.

    This includes zoom and offset combinations whose viewport collapses or
    overflows in double precision.
    """

    _check_dimension("width", params.width)
    _check_dimension("height", params.height)
    validate_max_iterations(params.max_iterations)
    for name in ("zoom", "offset_x", "offset_y"):
        value = getattr(params, name)
        if isinstance(value, bool) or not isinstance(value, numbers.Real):
            raise ConfigurationError(f"{name} must be a real number, got {value!r}")
        if not math.isfinite(value):
            raise ConfigurationError(f"{name} must be finite, got {value}")
    if params.zoom <= 0:
        raise ConfigurationError(f"zoom must be positive, got {params.zoom}")
    if params.backend not in BACKENDS:
        raise ConfigurationError(f"unknown backend '{params.backend}'; choose from {', '.join(BACKENDS)}")
    validate_strategy(params.coloring)
    compute_viewport(params, framing)


def compute_viewport(params: RenderParameters, framing: Framing = DEFAULT_FRAMING) -> Viewport:
    aspect = params.height / params.width if params.lock_aspect else None
    return viewport_from_zoom(params.zoom, params.offset_x, params.offset_y, framing=framing, aspect=aspect)


def evaluate_pixel(x: int, y: int, viewport: Viewport, width: int, height: int, max_iterations: int) -> int:
    """Escape-time count of pixel ``(x, y)``; depends on nothing but its arguments."""

    return iterate(pixel_to_complex(viewport, width, height, x, y), max_iterations)


def _scalar_counts(params: RenderParameters, viewport: Viewport) -> np.ndarray:
    counts = np.empty((params.height, params.width), dtype=np.int64)
    for y in range(params.height):
        for x in range(params.width):
            counts[y, x] = evaluate_pixel(x, y, viewport, params.width, params.height, params.max_iterations)
    return counts


def render_frame(
    params: RenderParameters,
    *,
    framing: Framing = DEFAULT_FRAMING,
    device: Optional[str] = None,
) -> RenderResult:
    """Render the image buffer described by ``params``."""

    validate_parameters(params, framing)
    viewport = compute_viewport(params, framing)

    if params.backend == "tensor":
        real_axis, imag_axis = sample_axes(viewport, params.width, params.height)
        counts = escape_counts(real_axis, imag_axis, params.max_iterations, device=device)
    else:
        counts = _scalar_counts(params, viewport)

    pixels = colorize(counts, params.max_iterations, strategy=params.coloring)
    return RenderResult(params=params, viewport=viewport, iterations=counts, pixels=pixels)


def render(
    params: RenderParameters,
    destination: Destination,
    *,
    framing: Framing = DEFAULT_FRAMING,
    device: Optional[str] = None,
) -> RenderResult:
    """Render ``params`` and write the result to ``destination`` as a PPM file.

    Raises :class:`ConfigurationError` before any work is done for invalid
    parameters. Raises :class:`OutputError` if the image cannot be written;
    the finished :class:`RenderResult` is attached to the exception as
    ``result`` so the write can be retried.
    """

    result = render_frame(params, framing=framing, device=device)
    try:
        write_ppm(result.pixels, destination)
    except OutputError as exc:
        exc.result = result
        raise
    return result
