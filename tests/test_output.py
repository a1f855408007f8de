"""Tests for the image sinks (PNG through Pillow, plain-text PPM)."""

import io

import numpy as np
import pytest
from PIL import Image

from renderer.framebuffer import FrameBuffer
from renderer.output import save_image, save_png, save_ppm, to_image, write_ppm


@pytest.fixture
def framebuffer():
    fb = FrameBuffer(3, 2)
    fb.pixels[0, 0] = (255, 0, 0)
    fb.pixels[0, 2] = (0, 0, 255)
    fb.pixels[1, 1] = (10, 20, 30)
    return fb


def test_to_image(framebuffer):
    image = to_image(framebuffer)
    assert image.mode == "RGB"
    assert image.size == (3, 2)
    assert image.getpixel((2, 0)) == (0, 0, 255)


def test_save_png_round_trip(framebuffer, tmp_path):
    path = save_png(framebuffer, tmp_path / "out.png")
    with Image.open(path) as image:
        assert image.format == "PNG"
        assert np.array_equal(np.asarray(image.convert("RGB")), framebuffer.pixels)


def test_write_ppm(framebuffer):
    stream = io.StringIO()
    write_ppm(framebuffer, stream)
    lines = stream.getvalue().splitlines()
    assert lines[:3] == ["P3", "3 2", "255"]
    assert lines[3:] == [
        "255 0 0", "0 0 0", "0 0 255",
        "0 0 0", "10 20 30", "0 0 0",
    ]


def test_save_image_dispatches_on_suffix(framebuffer, tmp_path):
    ppm = save_image(framebuffer, tmp_path / "out.ppm")
    assert ppm.read_text().startswith("P3\n3 2\n255\n")

    png = save_image(framebuffer, tmp_path / "out.PNG")
    with Image.open(png) as image:
        assert image.format == "PNG"

    bmp = save_image(framebuffer, tmp_path / "out.bmp")
    with Image.open(bmp) as image:
        assert image.format == "BMP"


def test_save_ppm(framebuffer, tmp_path):
    path = save_ppm(framebuffer, tmp_path / "plain.ppm")
    assert len(path.read_text().splitlines()) == 3 + 6


def test_unknown_format(framebuffer, tmp_path):
    with pytest.raises(ValueError):
        save_image(framebuffer, tmp_path / "out.notaformat")
