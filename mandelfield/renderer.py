"""Turn velocity fields into images."""

from __future__ import annotations

from pathlib import Path
from typing import Callable

import numpy as np
import PIL.Image

from .palette import Color, Palette

Colorizer = Callable[[int], Color]


def greyscale_colorizer(itermax: int) -> Colorizer:
    """Flat linear ramp from black (velocity 0) to white (velocity ``itermax``)."""

    def color(velocity: int) -> Color:
        level = int(round(velocity / itermax * 255)) if itermax else 255
        return (level, level, level)

    return color


def palette_colorizer(palette: Palette, itermax: int) -> Colorizer:
    def color(velocity: int) -> Color:
        return palette.color_at(velocity / itermax if itermax else 1.0)

    return color


def colorize(velocities: np.ndarray, color_fn: Colorizer, itermax: int) -> np.ndarray:
    """Map every velocity through ``color_fn`` into an ``(h, w, 3)`` uint8 array."""

    lut = np.array([color_fn(v) for v in range(itermax + 1)], dtype=np.uint8).reshape(itermax + 1, 3)
    return lut[np.clip(velocities, 0, itermax)]


def to_image(velocities: np.ndarray, color_fn: Colorizer, itermax: int) -> PIL.Image.Image:
    return PIL.Image.fromarray(colorize(velocities, color_fn, itermax))


def default_filename(width: int, height: int, image_format: str = "png") -> str:
    return f"mandelbrot{width}x{height}.{image_format.lower().lstrip('.')}"


def _pil_format_name(ext: str) -> str:
    upper = ext.upper()
    if upper == "JPG":
        return "JPEG"
    if upper == "TIF":
        return "TIFF"
    return upper


def write_single_image(image: PIL.Image.Image, output_path: Path, image_format: str) -> None:
    """Write a single image to ``output_path`` using the provided format."""

    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    image.save(str(output_path), format=_pil_format_name(image_format))
