"""Mapping from pixel coordinates to complex-plane samples."""

from __future__ import annotations

from dataclasses import dataclass
from fractions import Fraction
from typing import Callable, Optional

import numpy as np


@dataclass(frozen=True)
class ViewWindow:
    """Region of the complex plane covered by a render.

    ``top`` is the half-height of the window. ``right`` is the half-width before
    it is stretched by the image aspect ratio, so that square pixels stay
    square. When ``right`` is omitted it matches ``top``.
    """

    top: float = 2.0
    right: Optional[float] = None
    x_center: float = 0.0
    y_center: float = 0.0

    def bounds(self, width: int, height: int) -> tuple[float, float, float, float]:
        aspect = np.float64(width) / np.float64(height)
        right = np.float64(self.top if self.right is None else self.right) * aspect
        top = np.float64(self.top)
        x_center = np.float64(self.x_center)
        y_center = np.float64(self.y_center)
        return (
            float(x_center - right),
            float(x_center + right),
            float(y_center - top),
            float(y_center + top),
        )


@dataclass(frozen=True)
class SamplingMetadata:
    """Metadata describing the sampling grid for a rendered field."""

    x_min: float
    x_max: float
    y_min: float
    y_max: float
    width: int
    height: int


@dataclass(frozen=True)
class MobiusTransform:
    """Translate, rotate by quarter turns, then invert every sample.

    The pre-image of the inversion point has no finite image; it maps to
    ``fallback`` instead.
    """

    shift: complex = 0.25
    quarter_turns: int = 1
    fallback: complex = 0j

    def __call__(self, z: complex) -> complex:
        u = (z + self.shift) * (1j ** (self.quarter_turns % 4))
        if u == 0:
            return complex(self.fallback)
        return 1 / u


def float_axis(low: float, high: float, count: int) -> list[float]:
    """Evenly spaced floats from ``low`` to ``high`` inclusive."""

    if count == 1:
        return [float((np.float64(low) + np.float64(high)) / 2.0)]
    return np.linspace(low, high, count, dtype=np.float64).tolist()


def rational_axis(low: float, high: float, count: int) -> list[float]:
    """Like :func:`float_axis`, but every coordinate is computed exactly.

    Each value is a ratio of integers until the final conversion, so no
    rounding error accumulates across a wide axis.
    """

    low_q = Fraction(low)
    high_q = Fraction(high)
    if count == 1:
        return [float((low_q + high_q) / 2)]
    span = high_q - low_q
    last = count - 1
    return [float(low_q + span * Fraction(i, last)) for i in range(count)]


AxisStrategy = Callable[[float, float, int], list]


class SampleGrid:
    """Complex sample points for every pixel of a ``width`` x ``height`` image."""

    def __init__(
        self,
        width: int,
        height: int,
        window: ViewWindow = ViewWindow(),
        *,
        exact: bool = False,
        transform: Optional[Callable[[complex], complex]] = None,
    ) -> None:
        if int(width) != width or int(height) != height or width <= 0 or height <= 0:
            raise ValueError(f"grid dimensions must be positive integers, got {width}x{height}")

        self.width = int(width)
        self.height = int(height)
        self.window = window
        self.exact = exact
        self.transform = transform

        x_min, x_max, y_min, y_max = window.bounds(self.width, self.height)
        self.metadata = SamplingMetadata(
            x_min=x_min,
            x_max=x_max,
            y_min=y_min,
            y_max=y_max,
            width=self.width,
            height=self.height,
        )
        self._xs = self.axis_values(x_min, x_max, self.width)
        self._ys = self.axis_values(y_min, y_max, self.height)

    def axis_values(self, low: float, high: float, count: int) -> list[float]:
        strategy: AxisStrategy = rational_axis if self.exact else float_axis
        return strategy(low, high, count)

    def sample(self, x: int, y: int) -> complex:
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise IndexError(f"pixel ({x}, {y}) outside {self.width}x{self.height} grid")
        c = complex(self._xs[x], self._ys[y])
        if self.transform is not None:
            c = self.transform(c)
        return c

    def row(self, y: int) -> list[complex]:
        if not 0 <= y < self.height:
            raise IndexError(f"row {y} outside grid of height {self.height}")
        imag = self._ys[y]
        row = [complex(real, imag) for real in self._xs]
        if self.transform is not None:
            row = [self.transform(c) for c in row]
        return row

    def samples(self) -> np.ndarray:
        """Return every sample as a ``(height, width)`` complex128 array."""

        out = np.empty((self.height, self.width), dtype=np.complex128)
        for y in range(self.height):
            out[y, :] = self.row(y)
        return out
