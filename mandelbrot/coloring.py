"""Colour schemes that turn escape-time counts into RGB pixels.

Every scheme is a pure function of ``(count, max_iterations)``. Counts equal
to ``max_iterations`` are treated as inside the set and painted black.

``reference`` is the compatibility scheme. It keeps the
modulus of 255 on each scaled channel. ``wrap`` uses a true 8-bit
wraparound instead. Any other name is looked up as a matplotlib colormap.
"""

from __future__ import annotations

import numpy as np
from matplotlib import colormaps

from .errors import ConfigurationError

INSIDE_COLOR = (0, 0, 0)

_CHANNEL_FACTORS = np.array([1, 2, 4], dtype=np.int64)

_MODULAR_STRATEGIES = {
    "reference": 255,
    "wrap": 256,
}


def available_strategies() -> tuple[str, ...]:
    return tuple(_MODULAR_STRATEGIES)


def _get_colormap(name: str):
    try:
        return colormaps[name]
    except KeyError as exc:
        known = ", ".join(available_strategies())
        raise ConfigurationError(
            f"unknown coloring '{name}'; use one of {known} or a matplotlib colormap name"
        ) from exc


def validate_strategy(strategy: str) -> str:
    if strategy not in _MODULAR_STRATEGIES:
        _get_colormap(strategy)
    return strategy


def pixel_color(count: int, max_iterations: int, *, modulus: int = 255) -> tuple[int, int, int]:
    """Colour a single escape-time count."""

    if not 0 <= count <= max_iterations:
        raise ConfigurationError(f"count must lie in [0, {max_iterations}], got {count}")
    if count == max_iterations:
        return INSIDE_COLOR
    value = (count * 255) // max_iterations
    return (value % modulus, (value * 2) % modulus, (value * 4) % modulus)


def colorize(counts: np.ndarray, max_iterations: int, *, strategy: str = "reference") -> np.ndarray:
    """Vectorized colouring of an array of counts.

    Returns a ``uint8`` array with a trailing channel axis of size 3.
    """

    counts = np.asarray(counts, dtype=np.int64)
    if counts.size and (counts.min() < 0 or counts.max() > max_iterations):
        raise ConfigurationError(f"counts must lie in [0, {max_iterations}]")
    inside = counts == max_iterations
    rgb = np.zeros(counts.shape + (3,), dtype=np.uint8)
    if max_iterations == 0:
        return rgb

    if strategy in _MODULAR_STRATEGIES:
        modulus = _MODULAR_STRATEGIES[strategy]
        value = (counts * 255) // max_iterations
        channels = (value[..., np.newaxis] * _CHANNEL_FACTORS) % modulus
        rgb[...] = channels.astype(np.uint8)
    else:
        cmap = _get_colormap(strategy)
        rgba = cmap(counts.astype(np.float64) / float(max_iterations))
        rgb[...] = np.uint8(np.clip(np.asarray(rgba)[..., :3] * 255, 0, 255))

    rgb[inside] = INSIDE_COLOR
    return rgb
