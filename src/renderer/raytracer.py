# renderer/raytracer.py
import logging
import math
import random
import threading
import time
from concurrent.futures import ThreadPoolExecutor
from typing import List

import numpy as np

from camera.camera import Camera
from core.ray import Ray
from core.vector import Color
from geometry.hittable import Hittable
from renderer.framebuffer import FrameBuffer
from renderer.settings import RenderSettings
from renderer.tiles import Tile, make_tiles
from renderer.tone_mapping import to_rgb8

logger = logging.getLogger(__name__)

INFINITY = math.inf
# Lower bound of the hit interval; keeps scattered rays from re-hitting their origin (shadow acne)
T_MIN = 0.001

SKY_WHITE = (1.0, 1.0, 1.0)
SKY_BLUE = (0.5, 0.7, 1.0)


def background(ray: Ray) -> Color:
    """Vertical white-to-blue gradient seen by rays that escape the scene."""
    t = 0.5 * (ray.direction.normalize().y + 1.0)
    return Color(*SKY_WHITE) * (1.0 - t) + Color(*SKY_BLUE) * t


def ray_color(ray: Ray, world: Hittable, depth: int, rng) -> Color:
    """
    Radiance carried back along ray, following at most depth bounces.
    Exhausting the bounce budget contributes black.
    """
    if depth <= 0:
        return Color(0.0, 0.0, 0.0)

    rec = world.hit(ray, T_MIN, INFINITY)
    if rec is None:
        return background(ray)

    scatter = rec.material.scatter(ray, rec, rng)
    if scatter is None:
        return Color(0.0, 0.0, 0.0)

    scattered, attenuation = scatter
    return attenuation * ray_color(scattered, world, depth - 1, rng)


def sample_pixel(i: int, j: int, world: Hittable, camera: Camera, rng,
                 width: int, height: int, samples_per_pixel: int, max_depth: int) -> Color:
    """
    Sum of samples_per_pixel radiance estimates for pixel column i and row j,
    where j counts up from the bottom of the image. Each sample jitters the
    ray inside the pixel.
    """
    pixel_color = Color(0.0, 0.0, 0.0)
    for _ in range(samples_per_pixel):
        u = (i + rng.random()) / (width - 1)
        v = (j + rng.random()) / (height - 1)
        pixel_color += ray_color(camera.get_ray(u, v, rng), world, max_depth, rng)
    return pixel_color


class Renderer:
    """
    Renders a scene with a fixed pool of worker threads.

    All tiles go into one shared list. Each worker pops a tile under a lock,
    renders every pixel of it, copies the result into the frame buffer and
    comes back for the next one until the list is empty.
    """
    def __init__(self, settings: RenderSettings):
        self.settings = settings.validate()

    @property
    def width(self) -> int:
        return self.settings.width

    @property
    def height(self) -> int:
        return self.settings.height

    def render_tile(self, tile: Tile, world: Hittable, camera: Camera, rng) -> np.ndarray:
        s = self.settings
        block = np.zeros((tile.height, tile.width, 3), dtype=np.uint8)
        for x, y in tile.pixels():
            color = sample_pixel(x, s.height - 1 - y, world, camera, rng,
                                 s.width, s.height, s.samples_per_pixel, s.max_depth)
            block[y - tile.y0, x - tile.x0] = to_rgb8(color, s.samples_per_pixel)
        return block

    def _seed_for(self, tile: Tile) -> str:
        return f"{self.settings.seed}:{tile.index}"

    def _worker(self, tiles: List[Tile], tiles_lock: threading.Lock, abort: threading.Event,
                world: Hittable, camera: Camera, framebuffer: FrameBuffer) -> int:
        # Per-worker generator; reseeded per tile so seeded output does not
        # depend on which worker picks up which tile.
        rng = random.Random()
        done = 0
        try:
            while not abort.is_set():
                with tiles_lock:
                    if not tiles:
                        break
                    tile = tiles.pop()
                if self.settings.seed is not None:
                    rng.seed(self._seed_for(tile))
                framebuffer.write_tile(tile, self.render_tile(tile, world, camera, rng))
                done += 1
                logger.debug("Tile %d (%d,%d)-(%d,%d) done", tile.index, tile.x0, tile.y0, tile.x1, tile.y1)
        except BaseException:
            abort.set()
            raise
        return done

    def render(self, world: Hittable, camera: Camera) -> FrameBuffer:
        """
        Render world as seen by camera and return the finished frame buffer.
        Any exception raised by a worker aborts the render and is re-raised here.
        """
        s = self.settings
        framebuffer = FrameBuffer(s.width, s.height)
        tiles = make_tiles(s.width, s.height, s.tile_size)
        workers = min(s.workers, len(tiles))
        tiles_lock = threading.Lock()
        abort = threading.Event()

        logger.info("Rendering %dx%d, %d spp, depth %d: %d tiles on %d workers",
                    s.width, s.height, s.samples_per_pixel, s.max_depth, len(tiles), workers)
        start = time.perf_counter()

        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="render") as pool:
            futures = [
                pool.submit(self._worker, tiles, tiles_lock, abort, world, camera, framebuffer)
                for _ in range(workers)
            ]
        counts = [future.result() for future in futures]

        logger.info("Rendered %d tiles in %.2fs", sum(counts), time.perf_counter() - start)
        return framebuffer
