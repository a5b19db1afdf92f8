"""Public API for escape-time fields and their color ramps."""

from .compute import RenderParameters, RenderResult, compute_band, compute_field, render_field, row_bands
from .divergence import ITERMAX, DivergenceEngine, FiniteDifferenceBailout, diverge
from .grid import (
    MobiusTransform,
    SampleGrid,
    SamplingMetadata,
    ViewWindow,
    float_axis,
    rational_axis,
)
from .palette import ColorStop, EmptyPaletteError, Palette
from .renderer import (
    colorize,
    default_filename,
    greyscale_colorizer,
    palette_colorizer,
    to_image,
    write_single_image,
)

__all__ = [
    "ITERMAX",
    "ColorStop",
    "DivergenceEngine",
    "EmptyPaletteError",
    "FiniteDifferenceBailout",
    "MobiusTransform",
    "Palette",
    "RenderParameters",
    "RenderResult",
    "SampleGrid",
    "SamplingMetadata",
    "ViewWindow",
    "colorize",
    "compute_band",
    "compute_field",
    "default_filename",
    "diverge",
    "float_axis",
    "greyscale_colorizer",
    "palette_colorizer",
    "rational_axis",
    "render_field",
    "row_bands",
    "to_image",
    "write_single_image",
]
