import numpy as np
import pytest

from mandelfield import ColorStop, EmptyPaletteError, Palette
from mandelfield.palette import DEFAULT_STOPS

A = (0, 10, 100)
B = (100, 20, 200)


def test_two_stop_ramp():
    palette = Palette([(0.0, A), (1.0, B)])

    assert palette.color_at(0.0) == A
    assert palette.color_at(1.0) == B
    assert palette.color_at(0.5) == (50, 15, 150)


def test_default_ramp_blend():
    palette = Palette.default()

    assert palette.color_at(0.3) == (163, 78, 86)
    assert palette.color_at(0.05) == (72, 67, 73)
    assert palette.color_at(0.5) == (255, 89, 100)
    assert palette.color_at(1.0) == (72, 67, 73)


def test_blend_rounds_to_nearest():
    palette = Palette([(0.0, (0, 0, 0)), (1.0, (10, 10, 10))])
    assert palette.color_at(0.26) == (3, 3, 3)
    assert palette.color_at(0.24) == (2, 2, 2)


@pytest.mark.parametrize("k", [0.2, 0.0, -0.5])
def test_below_range_clamps_to_first_stop(k):
    palette = Palette([(0.2, A), (0.8, B)])
    assert palette.color_at(k) == A


@pytest.mark.parametrize("k", [0.9, 1.0, 3.0])
def test_above_range_clamps_to_last_stop(k):
    palette = Palette([(0.0, A), (0.5, B)])
    assert palette.color_at(k) == B


def test_single_stop_palette():
    palette = Palette([(0.4, A)])
    assert palette.color_at(0.1) == A
    assert palette.color_at(0.9) == A


def test_stops_are_kept_sorted():
    palette = Palette([(1.0, B), (0.0, A), (0.5, (1, 2, 3))])
    assert [stop.position for stop in palette.stops] == [0.0, 0.5, 1.0]
    assert palette.stops[0] == ColorStop(0.0, A)


def test_add_stop_overwrites_same_position():
    palette = Palette([(0.0, A), (1.0, B)])
    palette.add_stop(1.0, (7, 8, 9))

    assert len(palette) == 2
    assert palette.color_at(1.0) == (7, 8, 9)


def test_empty_palette_fails_fast():
    with pytest.raises(EmptyPaletteError):
        Palette().color_at(0.5)
    with pytest.raises(EmptyPaletteError):
        Palette.from_stops([])
    assert issubclass(EmptyPaletteError, ValueError)


@pytest.mark.parametrize("position", [-0.1, 1.5])
def test_rejects_positions_outside_unit_interval(position):
    with pytest.raises(ValueError):
        Palette().add_stop(position, A)


@pytest.mark.parametrize("color", [(256, 0, 0), (-1, 0, 0), (1, 2), (0.5, 0, 0)])
def test_rejects_invalid_colors(color):
    with pytest.raises(ValueError):
        Palette().add_stop(0.5, color)


def test_default_stops():
    palette = Palette.default()
    assert [(stop.position, stop.color) for stop in palette.stops] == list(DEFAULT_STOPS)


@pytest.mark.parametrize("position", [np.float32(0.5), np.float64(0.5), np.float16(0.5), 0.5])
def test_position_numeric_types(position):
    assert Palette.default().color_at(position) == (255, 89, 100)


@pytest.mark.parametrize("position,expected", [(0, (72, 67, 73)), (1, (72, 67, 73)), (np.float32(0.05), (72, 67, 73)), (np.float32(2.0), (72, 67, 73))])
def test_position_numeric_type_boundaries(position, expected):
    assert Palette.default().color_at(position) == expected


def test_from_colormap():
    palette = Palette.from_colormap("viridis", 4)

    assert len(palette) == 4
    assert palette.color_at(0.0) == (68, 1, 84)
    for stop in palette.stops:
        assert all(0 <= channel <= 255 for channel in stop.color)


def test_from_colormap_unknown_name():
    with pytest.raises(KeyError):
        Palette.from_colormap("not-a-colormap")
