import numpy as np
import PIL.Image

from mandelfield import (
    Palette,
    colorize,
    default_filename,
    greyscale_colorizer,
    palette_colorizer,
    to_image,
    write_single_image,
)


def test_greyscale_ramp():
    color = greyscale_colorizer(100)
    assert color(0) == (0, 0, 0)
    assert color(50) == (128, 128, 128)
    assert color(100) == (255, 255, 255)


def test_palette_colorizer_normalizes_by_cap():
    color = palette_colorizer(Palette.default(), 100)
    assert color(30) == (163, 78, 86)
    assert color(100) == (72, 67, 73)


def test_colorize_uses_lookup_table():
    velocities = np.array([[0, 100], [50, 30]], dtype=np.int32)
    pixels = colorize(velocities, palette_colorizer(Palette.default(), 100), 100)

    assert pixels.shape == (2, 2, 3)
    assert pixels.dtype == np.uint8
    assert tuple(pixels[0, 0]) == (72, 67, 73)
    assert tuple(pixels[1, 0]) == (255, 89, 100)
    assert tuple(pixels[1, 1]) == (163, 78, 86)


def test_to_image_orientation():
    velocities = np.zeros((2, 3), dtype=np.int32)
    velocities[1, 2] = 10
    image = to_image(velocities, greyscale_colorizer(10), 10)

    assert image.size == (3, 2)
    assert image.getpixel((2, 1)) == (255, 255, 255)
    assert image.getpixel((0, 0)) == (0, 0, 0)


def test_default_filename():
    assert default_filename(1920, 1080) == "mandelbrot1920x1080.png"
    assert default_filename(3, 2, ".JPG") == "mandelbrot3x2.jpg"


def test_write_single_image_creates_parents(tmp_path):
    image = PIL.Image.new("RGB", (4, 3), (10, 20, 30))
    target = tmp_path / "nested" / "out.jpg"
    write_single_image(image, target, "jpg")

    assert target.is_file()
    with PIL.Image.open(target) as saved:
        assert saved.format == "JPEG"
        assert saved.size == (4, 3)
