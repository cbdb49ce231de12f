"""Public API for Mandelbrot rendering utilities."""

from .coloring import available_strategies, colorize, pixel_color
from .errors import ConfigurationError, OutputError
from .evaluator import ESCAPE_RADIUS_SQUARED, escape_counts, iterate
from .ppm import encode_header, write_image, write_ppm
from .renderer import (
    BACKENDS,
    RenderParameters,
    RenderResult,
    evaluate_pixel,
    render,
    render_frame,
    validate_parameters,
)
from .viewport import DEFAULT_FRAMING, Framing, Viewport, pixel_to_complex, sample_axes, viewport_from_zoom

__all__ = [
    "BACKENDS",
    "ConfigurationError",
    "DEFAULT_FRAMING",
    "ESCAPE_RADIUS_SQUARED",
    "Framing",
    "OutputError",
    "RenderParameters",
    "RenderResult",
    "Viewport",
    "available_strategies",
    "colorize",
    "encode_header",
    "escape_counts",
    "evaluate_pixel",
    "iterate",
    "pixel_color",
    "pixel_to_complex",
    "render",
    "render_frame",
    "sample_axes",
    "validate_parameters",
    "viewport_from_zoom",
    "write_image",
    "write_ppm",
]
