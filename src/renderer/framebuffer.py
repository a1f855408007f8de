# renderer/framebuffer.py
import threading
import numpy as np
from renderer.tiles import Tile


class FrameBuffer:
    """
    8-bit RGB image shared by the render workers. Row 0 is the top of the image.

    Tiles never overlap, so workers never write the same pixel; the lock only
    serializes the bulk copy of each finished tile.
    """
    def __init__(self, width: int, height: int):
        self.width = width
        self.height = height
        self.pixels = np.zeros((height, width, 3), dtype=np.uint8)
        self._lock = threading.Lock()

    def write_tile(self, tile: Tile, block: np.ndarray):
        if block.shape != (tile.height, tile.width, 3):
            raise ValueError(f"Block of shape {block.shape} does not match tile {tile}")
        with self._lock:
            self.pixels[tile.y0:tile.y1, tile.x0:tile.x1] = block

    def get_pixel(self, x: int, y: int):
        return tuple(int(c) for c in self.pixels[y, x])

    def __repr__(self) -> str:
        return f"FrameBuffer({self.width}x{self.height})"
