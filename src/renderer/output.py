# renderer/output.py
import logging
from pathlib import Path
from typing import TextIO, Union

from PIL import Image

from renderer.framebuffer import FrameBuffer

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


def to_image(framebuffer: FrameBuffer) -> Image.Image:
    return Image.fromarray(framebuffer.pixels)


def save_png(framebuffer: FrameBuffer, path: PathLike) -> Path:
    path = Path(path)
    to_image(framebuffer).save(path, format="PNG")
    return path


def write_ppm(framebuffer: FrameBuffer, stream: TextIO):
    """
    Write the frame buffer as a plain-text (P3) PPM listing, top row first,
    one "r g b" triple per line.
    """
    stream.write(f"P3\n{framebuffer.width} {framebuffer.height}\n255\n")
    for row in framebuffer.pixels:
        for r, g, b in row:
            stream.write(f"{r} {g} {b}\n")


def save_ppm(framebuffer: FrameBuffer, path: PathLike) -> Path:
    path = Path(path)
    with path.open("w", encoding="ascii") as f:
        write_ppm(framebuffer, f)
    return path


def save_image(framebuffer: FrameBuffer, path: PathLike) -> Path:
    """
    Write the frame buffer to path. ".ppm" files are written as plain text;
    every other suffix is handed to Pillow, which raises ValueError for
    formats it does not know.
    """
    path = Path(path)
    if path.suffix.lower() == ".ppm":
        save_ppm(framebuffer, path)
    elif path.suffix.lower() == ".png":
        save_png(framebuffer, path)
    else:
        to_image(framebuffer).save(path)
    logger.info("Saved %s", path)
    return path
