"""Escape-time evaluation of the Mandelbrot recurrence ``z <- z*z + c``."""

from __future__ import annotations

import numbers
from typing import Optional

import numpy as np
import tensorflow as tf

from .errors import ConfigurationError

ESCAPE_RADIUS_SQUARED = 4.0


def validate_max_iterations(max_iterations: int) -> int:
    if isinstance(max_iterations, bool) or not isinstance(max_iterations, numbers.Integral):
        raise ConfigurationError(f"max_iterations must be an integer, got {max_iterations!r}")
    if max_iterations < 0:
        raise ConfigurationError(f"max_iterations must be >= 0, got {max_iterations}")
    return int(max_iterations)


def iterate(c: complex, max_iterations: int) -> int:
    """Return the number of iterations performed before ``c`` escapes.

    The escape test runs before every update, so a point whose orbit never
    reaches ``|z|**2 >= 4`` returns ``max_iterations``.
    """

    max_iterations = validate_max_iterations(max_iterations)
    c_re = float(c.real)
    c_im = float(c.imag)
    z_re = 0.0
    z_im = 0.0
    count = 0
    while z_re * z_re + z_im * z_im < ESCAPE_RADIUS_SQUARED and count < max_iterations:
        z_re, z_im = z_re * z_re - z_im * z_im + c_re, 2.0 * z_re * z_im + c_im
        count += 1
    return count


@tf.function
def _escape_step(
    z_re: tf.Tensor,
    z_im: tf.Tensor,
    c_re: tf.Tensor,
    c_im: tf.Tensor,
    counts: tf.Tensor,
    active: tf.Tensor,
) -> tuple[tf.Tensor, tf.Tensor, tf.Tensor, tf.Tensor]:
    """Advance every sample that has not escaped by one iteration."""

    next_re = z_re * z_re - z_im * z_im + c_re
    next_im = 2.0 * z_re * z_im + c_im
    z_re = tf.where(active, next_re, z_re)
    z_im = tf.where(active, next_im, z_im)
    counts = counts + tf.cast(active, tf.int32)
    radius = tf.constant(ESCAPE_RADIUS_SQUARED, dtype=z_re.dtype)
    active = tf.logical_and(active, z_re * z_re + z_im * z_im < radius)
    return z_re, z_im, counts, active


@tf.function
def _escape_run(c_re: tf.Tensor, c_im: tf.Tensor, max_iterations: tf.Tensor) -> tf.Tensor:
    i = tf.constant(0, dtype=tf.int32)
    z_re = tf.zeros_like(c_re)
    z_im = tf.zeros_like(c_im)
    counts = tf.zeros(tf.shape(c_re), dtype=tf.int32)
    active = tf.fill(tf.shape(c_re), tf.greater(max_iterations, 0))

    def cond(i, z_re, z_im, counts, active):
        return tf.logical_and(tf.less(i, max_iterations), tf.reduce_any(active))

    def body(i, z_re, z_im, counts, active):
        z_re, z_im, counts, active = _escape_step(z_re, z_im, c_re, c_im, counts, active)
        return i + 1, z_re, z_im, counts, active

    _, _, _, counts, _ = tf.while_loop(cond, body, (i, z_re, z_im, counts, active))
    return counts


def escape_counts(
    real_axis: np.ndarray,
    imag_axis: np.ndarray,
    max_iterations: int,
    *,
    device: Optional[str] = None,
) -> np.ndarray:
    """Evaluate :func:`iterate` over the grid spanned by two sampling axes.

    Returns an ``int64`` array of shape ``(len(imag_axis), len(real_axis))``
    whose entries match the scalar evaluator sample for sample.
    """

    max_iterations = validate_max_iterations(max_iterations)
    if max_iterations > np.iinfo(np.int32).max:
        raise ConfigurationError("max_iterations is too large for the tensor backend")

    with tf.device(device if device is not None else "/CPU:0"):
        re = tf.convert_to_tensor(np.asarray(real_axis, dtype=np.float64), dtype=tf.float64)
        im = tf.convert_to_tensor(np.asarray(imag_axis, dtype=np.float64), dtype=tf.float64)
        c_re, c_im = tf.meshgrid(re, im)
        counts = _escape_run(c_re, c_im, tf.constant(max_iterations, dtype=tf.int32))

    return counts.numpy().astype(np.int64)
