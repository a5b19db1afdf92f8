"""Piecewise-linear color ramps."""

from __future__ import annotations

import bisect
from dataclasses import dataclass
from fractions import Fraction
from typing import Iterable

from matplotlib import colormaps

Color = tuple[int, int, int]

DEFAULT_STOPS: tuple[tuple[float, Color], ...] = (
    (0.0, (72, 67, 73)),
    (0.1, (72, 67, 73)),
    (0.5, (255, 89, 100)),
    (1.0, (72, 67, 73)),
)


class EmptyPaletteError(ValueError):
    """Raised when a color is requested from a palette without stops."""


@dataclass(frozen=True)
class ColorStop:
    """An anchor of the ramp: a normalized position and its color."""

    position: float
    color: Color


def _check_color(color: Iterable[int]) -> Color:
    channels = tuple(color)
    if len(channels) != 3:
        raise ValueError(f"colors need exactly three channels, got {channels!r}")
    for channel in channels:
        if int(channel) != channel or not 0 <= channel <= 255:
            raise ValueError(f"color channels must be integers in [0, 255], got {channels!r}")
    return (int(channels[0]), int(channels[1]), int(channels[2]))


class Palette:
    """Ordered color stops with linear interpolation between neighbours.

    Lookups below the first stop return the first color and lookups above the
    last stop return the last color.
    """

    def __init__(self, stops: Iterable[tuple[float, Color]] = ()) -> None:
        self._positions: list[float] = []
        self._stops: list[ColorStop] = []
        for position, color in stops:
            self.add_stop(position, color)

    @classmethod
    def from_stops(cls, stops: Iterable[tuple[float, Color]]) -> "Palette":
        palette = cls(stops)
        if not palette:
            raise EmptyPaletteError("a palette needs at least one color stop")
        return palette

    @classmethod
    def default(cls) -> "Palette":
        return cls.from_stops(DEFAULT_STOPS)

    @classmethod
    def from_colormap(cls, name: str, count: int = 8) -> "Palette":
        """Sample ``count`` evenly spaced stops from a matplotlib colormap."""

        if count < 2:
            raise ValueError(f"a colormap palette needs at least two stops, got {count}")
        cmap = colormaps[name]
        stops = []
        for i in range(count):
            position = i / (count - 1)
            r, g, b, _ = cmap(position)
            stops.append((position, (int(round(r * 255)), int(round(g * 255)), int(round(b * 255)))))
        return cls.from_stops(stops)

    @property
    def stops(self) -> tuple[ColorStop, ...]:
        return tuple(self._stops)

    def __len__(self) -> int:
        return len(self._stops)

    def __repr__(self) -> str:
        return f"Palette({[(s.position, s.color) for s in self._stops]!r})"

    def add_stop(self, position: float, color: Color) -> None:
        """Insert a stop, replacing any stop already at ``position``."""

        if not 0.0 <= position <= 1.0:
            raise ValueError(f"stop position must lie in [0, 1], got {position}")
        stop = ColorStop(float(position), _check_color(color))
        index = bisect.bisect_left(self._positions, stop.position)
        if index < len(self._positions) and self._positions[index] == stop.position:
            self._stops[index] = stop
            return
        self._positions.insert(index, stop.position)
        self._stops.insert(index, stop)

    def color_at(self, position: float) -> Color:
        """Interpolated color for a normalized ``position``."""

        if not self._stops:
            raise EmptyPaletteError("cannot look up a color in an empty palette")

        position = float(position)
        first = self._stops[0]
        if position <= first.position:
            return first.color

        index = bisect.bisect_left(self._positions, position)
        if index == len(self._stops):
            return self._stops[-1].color

        prev = self._stops[index - 1]
        cur = self._stops[index]
        # Blend in exact arithmetic; only the final channel rounding is lossy.
        t = (Fraction(position) - Fraction(prev.position)) / (Fraction(cur.position) - Fraction(prev.position))
        return (
            round(prev.color[0] * (1 - t) + cur.color[0] * t),
            round(prev.color[1] * (1 - t) + cur.color[1] * t),
            round(prev.color[2] * (1 - t) + cur.color[2] * t),
        )
