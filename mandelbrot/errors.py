"""Exceptions raised by the Mandelbrot renderer."""

from __future__ import annotations

from typing import Any


class ConfigurationError(ValueError):
    """Raised when render parameters are rejected before any computation."""


class OutputError(OSError):
    """Raised when a rendered image cannot be written to its destination."""

    def __init__(self, destination: Any, message: str, *, result: Any = None) -> None:
        super().__init__(message)
        self.destination = destination
        self.result = result
