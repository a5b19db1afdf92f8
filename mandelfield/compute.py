"""Velocity-field computation over a whole sample grid."""

from __future__ import annotations

import os
from concurrent.futures import Executor, ProcessPoolExecutor, ThreadPoolExecutor
from dataclasses import dataclass
from typing import Callable, Optional

import numpy as np

from .divergence import ITERMAX, DivergenceEngine, FiniteDifferenceBailout
from .grid import MobiusTransform, SampleGrid, SamplingMetadata, ViewWindow

EXECUTORS = ("sequential", "thread", "process", "tensorflow")

ProgressCallback = Callable[[int, int], None]


@dataclass(frozen=True)
class RenderParameters:
    """Parameters that describe a single escape-time render."""

    width: int
    height: int
    threshold: float = 300.0
    itermax: int = ITERMAX
    window: ViewWindow = ViewWindow()
    exact: bool = False
    transform: Optional[MobiusTransform] = None
    bailout: Optional[FiniteDifferenceBailout] = None


@dataclass(frozen=True)
class RenderResult:
    """Container for the velocity field of a render."""

    velocities: np.ndarray
    metadata: SamplingMetadata
    itermax: int


def row_bands(height: int, workers: int) -> list[tuple[int, int]]:
    """Split ``range(height)`` into at most ``workers`` contiguous bands."""

    workers = max(1, min(int(workers), height))
    base, extra = divmod(height, workers)
    bands = []
    start = 0
    for i in range(workers):
        stop = start + base + (1 if i < extra else 0)
        bands.append((start, stop))
        start = stop
    return bands


def compute_band(grid: SampleGrid, engine: DivergenceEngine, start: int, stop: int) -> np.ndarray:
    band = np.empty((stop - start, grid.width), dtype=np.int32)
    for y in range(start, stop):
        band[y - start, :] = [engine(c) for c in grid.row(y)]
    return band


def _make_executor(kind: str, workers: int) -> Executor:
    if kind == "thread":
        return ThreadPoolExecutor(max_workers=workers)
    return ProcessPoolExecutor(max_workers=workers)


def compute_field(
    grid: SampleGrid,
    engine: DivergenceEngine,
    *,
    executor: str = "sequential",
    workers: Optional[int] = None,
    progress: Optional[ProgressCallback] = None,
) -> np.ndarray:
    """Compute the ``(height, width)`` escape velocity of every grid sample."""

    if executor not in EXECUTORS:
        raise ValueError(f"Unknown executor '{executor}'. Valid choices: {', '.join(EXECUTORS)}.")

    height = grid.height
    field = np.empty((height, grid.width), dtype=np.int32)

    if executor == "tensorflow":
        if engine.bailout is not None:
            raise ValueError("the tensorflow executor does not support a bailout policy")
        from .tensor import compute_field_tf

        field[:, :] = compute_field_tf(grid.samples(), engine.threshold, engine.itermax)
        if progress is not None:
            progress(height, height)
        return field

    if executor == "sequential":
        for y in range(height):
            field[y : y + 1, :] = compute_band(grid, engine, y, y + 1)
            if progress is not None:
                progress(y + 1, height)
        return field

    workers = workers or os.cpu_count() or 1
    # Twice as many bands as workers keeps the pool busy when rows differ in cost.
    bands = row_bands(height, workers * 2)
    done = 0
    with _make_executor(executor, workers) as pool:
        futures = {pool.submit(compute_band, grid, engine, start, stop): (start, stop) for start, stop in bands}
        for future, (start, stop) in futures.items():
            field[start:stop, :] = future.result()
            done += stop - start
            if progress is not None:
                progress(done, height)
    return field


def render_field(
    params: RenderParameters,
    *,
    executor: str = "sequential",
    workers: Optional[int] = None,
    progress: Optional[ProgressCallback] = None,
) -> RenderResult:
    """Render the velocity field described by ``params``."""

    grid = SampleGrid(
        params.width,
        params.height,
        params.window,
        exact=params.exact,
        transform=params.transform,
    )
    engine = DivergenceEngine(params.threshold, params.itermax, params.bailout)
    velocities = compute_field(grid, engine, executor=executor, workers=workers, progress=progress)
    return RenderResult(velocities=velocities, metadata=grid.metadata, itermax=params.itermax)
