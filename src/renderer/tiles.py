# renderer/tiles.py
from typing import Iterator, List, NamedTuple, Tuple


class Tile(NamedTuple):
    """Half-open pixel rectangle [x0, x1) x [y0, y1) in frame buffer coordinates (row 0 on top)."""
    index: int
    x0: int
    y0: int
    x1: int
    y1: int

    @property
    def width(self) -> int:
        return self.x1 - self.x0

    @property
    def height(self) -> int:
        return self.y1 - self.y0

    def pixels(self) -> Iterator[Tuple[int, int]]:
        """Yield (x, y) for every pixel of the tile, row by row."""
        for y in range(self.y0, self.y1):
            for x in range(self.x0, self.x1):
                yield x, y


def make_tiles(width: int, height: int, tile_size: int) -> List[Tile]:
    """
    Partition a width x height image into tiles of at most tile_size pixels per side,
    scanning tile rows top to bottom, then tile columns left to right.
    Tiles on the right and bottom edges are clipped to the image.
    """
    if tile_size < 1:
        raise ValueError(f"tile_size must be at least 1, got {tile_size}")
    tiles = []
    for y0 in range(0, height, tile_size):
        for x0 in range(0, width, tile_size):
            tiles.append(Tile(len(tiles), x0, y0,
                              min(x0 + tile_size, width),
                              min(y0 + tile_size, height)))
    return tiles
