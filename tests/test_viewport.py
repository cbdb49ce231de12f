import math

import numpy as np
import pytest

from mandelbrot import (
    DEFAULT_FRAMING,
    ConfigurationError,
    Framing,
    Viewport,
    pixel_to_complex,
    sample_axes,
    viewport_from_zoom,
)


def test_standard_framing():
    viewport = viewport_from_zoom(1.0, 0.0, 0.0)
    assert viewport == Viewport(real_min=-2.0, real_max=1.0, imag_min=-1.5, imag_max=1.5)
    assert (viewport.real_min, viewport.real_max) == (DEFAULT_FRAMING.real_min, DEFAULT_FRAMING.real_max)


def test_zoom_and_offset_are_applied():
    viewport = viewport_from_zoom(0.5, 1.0, -1.0)
    assert viewport == Viewport(real_min=-2.0, real_max=-0.5, imag_min=0.25, imag_max=1.75)


def test_custom_framing():
    framing = Framing(real_min=-1.0, real_max=1.0, imag_min=-1.0, imag_max=1.0)
    viewport = viewport_from_zoom(2.0, 0.0, 0.0, framing=framing)
    assert viewport == Viewport(-2.0, 2.0, -2.0, 2.0)


def test_aspect_lock_keeps_center():
    viewport = viewport_from_zoom(1.0, 0.0, 0.0, aspect=0.5)
    assert viewport.real_span == 3.0
    assert viewport.imag_span == 1.5
    assert viewport.center == complex(-0.5, 0.0)


@pytest.mark.parametrize("zoom", [0.0, -1.0, -0.001, math.inf, math.nan])
def test_rejects_bad_zoom(zoom):
    with pytest.raises(ConfigurationError):
        viewport_from_zoom(zoom, 0.0, 0.0)


@pytest.mark.parametrize(
    "bounds",
    [
        (1.0, 1.0, -1.0, 1.0),
        (1.0, -1.0, -1.0, 1.0),
        (-1.0, 1.0, 0.5, 0.5),
        (-1.0, math.inf, -1.0, 1.0),
    ],
)
def test_rejects_degenerate_viewport(bounds):
    with pytest.raises(ConfigurationError):
        Viewport(*bounds)


def test_corner_pixels_map_exactly():
    viewport = viewport_from_zoom(1.0, 0.0, 0.0)
    assert pixel_to_complex(viewport, 800, 600, 0, 0) == complex(-2.0, -1.5)
    assert pixel_to_complex(viewport, 800, 600, 799, 599) == complex(1.0, 1.5)
    assert pixel_to_complex(viewport, 800, 600, 799, 0) == complex(1.0, -1.5)


def test_row_zero_is_imag_min():
    viewport = viewport_from_zoom(1.0, 0.0, 0.0)
    top = pixel_to_complex(viewport, 10, 10, 3, 0)
    bottom = pixel_to_complex(viewport, 10, 10, 3, 9)
    assert top.imag == viewport.imag_min
    assert bottom.imag == viewport.imag_max


@pytest.mark.parametrize("width, height", [(1, 10), (10, 1), (1, 1)])
def test_single_pixel_axis_is_rejected(width, height):
    viewport = viewport_from_zoom(1.0, 0.0, 0.0)
    with pytest.raises(ConfigurationError):
        pixel_to_complex(viewport, width, height, 0, 0)
    with pytest.raises(ConfigurationError):
        sample_axes(viewport, width, height)


def test_sample_axes_match_pixel_mapping():
    viewport = viewport_from_zoom(0.37, -0.21, 0.08)
    width, height = 7, 5
    real_axis, imag_axis = sample_axes(viewport, width, height)

    assert real_axis.dtype == np.float64
    assert real_axis.shape == (width,)
    assert imag_axis.shape == (height,)
    for y in range(height):
        for x in range(width):
            assert complex(real_axis[x], imag_axis[y]) == pixel_to_complex(viewport, width, height, x, y)
