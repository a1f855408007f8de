"""Tests for the tile scheduler, shading recursion and output assembly.

Tests cover:
- Tile partition (row-major order, clipping, full disjoint coverage)
- FrameBuffer tile writes
- Gamma correction and 8-bit quantization
- ray_color: depth cutoff, background gradient, absorption, attenuation
- End-to-end renders: fixed pixels, seeded reproducibility, worker errors
"""

import numpy as np
import pytest

from camera.camera import Camera
from core.ray import Ray
from core.vector import Color, Point3, Vector3
from geometry.sphere import Sphere
from geometry.world import HittableList
from materials.lambertian import Lambertian
from materials.material import Material
from renderer.framebuffer import FrameBuffer
from renderer.raytracer import Renderer, background, ray_color, sample_pixel
from renderer.settings import RenderSettings
from renderer.tiles import Tile, make_tiles
from renderer.tone_mapping import gamma_correct, to_rgb8
from scenes import three_spheres_camera, three_spheres_scene

INF = float("inf")


class Absorber(Material):
    def scatter(self, ray_in, rec, rng):
        return None


class SkyMirror(Material):
    """Sends every ray straight up with a fixed attenuation."""

    def __init__(self, attenuation):
        self.attenuation = attenuation

    def scatter(self, ray_in, rec, rng):
        return Ray(rec.p, Vector3(0, 1, 0)), self.attenuation


class Exploding(Material):
    def scatter(self, ray_in, rec, rng):
        raise RuntimeError("scatter failed")


def single_sphere_world(material=None):
    return HittableList([Sphere(Point3(0, 0, -1), 0.5, material or Lambertian(Color(0.5, 0.5, 0.5)))])


def pinhole_camera(aspect_ratio):
    return Camera(Point3(0, 0, 0), Point3(0, 0, -1), Vector3(0, 1, 0),
                  vfov=90.0, aspect_ratio=aspect_ratio, focus_dist=1.0)


class TestTiles:
    def test_row_major_order_and_clipping(self):
        tiles = make_tiles(10, 7, 4)
        assert [(t.x0, t.y0) for t in tiles] == [(0, 0), (4, 0), (8, 0), (0, 4), (4, 4), (8, 4)]
        assert [t.index for t in tiles] == list(range(6))
        assert tiles[-1] == Tile(5, 8, 4, 10, 7)
        assert (tiles[-1].width, tiles[-1].height) == (2, 3)

    @pytest.mark.parametrize("width,height,size", [(10, 7, 4), (16, 9, 32), (5, 5, 1), (64, 36, 16)])
    def test_every_pixel_covered_once(self, width, height, size):
        counts = np.zeros((height, width), dtype=int)
        for tile in make_tiles(width, height, size):
            for x, y in tile.pixels():
                counts[y, x] += 1
        assert (counts == 1).all()

    def test_invalid_size(self):
        with pytest.raises(ValueError):
            make_tiles(10, 10, 0)


class TestFrameBuffer:
    def test_write_tile(self):
        fb = FrameBuffer(6, 4)
        tile = Tile(0, 2, 1, 5, 3)
        block = np.full((2, 3, 3), 7, dtype=np.uint8)
        fb.write_tile(tile, block)
        assert fb.get_pixel(2, 1) == (7, 7, 7)
        assert fb.get_pixel(4, 2) == (7, 7, 7)
        assert fb.get_pixel(1, 1) == (0, 0, 0)
        assert fb.pixels.sum() == 7 * 3 * 6

    def test_shape_mismatch(self):
        with pytest.raises(ValueError):
            FrameBuffer(4, 4).write_tile(Tile(0, 0, 0, 2, 2), np.zeros((3, 2, 3), dtype=np.uint8))


class TestToneMapping:
    def test_gamma_two(self):
        assert gamma_correct(0.25) == 0.5
        assert gamma_correct(0.0) == 0.0
        assert gamma_correct(-1.0) == 0.0

    def test_average_and_quantize(self):
        assert to_rgb8(Color(1.0, 0.25, 0.0) * 4, 4) == (255, 128, 0)

    def test_clamps_out_of_range(self):
        assert to_rgb8(Color(9.0, -3.0, 1.0), 1) == (255, 0, 255)


class TestRayColor:
    def test_depth_exhausted_is_black(self, rng):
        ray = Ray(Point3(0, 0, 0), Vector3(0, 1, 0))
        assert ray_color(ray, HittableList(), 0, rng) == Color(0, 0, 0)

    def test_background_gradient(self, rng):
        up = ray_color(Ray(Point3(0, 0, 0), Vector3(0, 3, 0)), HittableList(), 5, rng)
        down = ray_color(Ray(Point3(0, 0, 0), Vector3(0, -1, 0)), HittableList(), 5, rng)
        assert tuple(up) == pytest.approx((0.5, 0.7, 1.0))
        assert tuple(down) == pytest.approx((1.0, 1.0, 1.0))

    def test_horizon_is_halfway(self):
        c = background(Ray(Point3(0, 0, 0), Vector3(1, 0, 0)))
        assert tuple(c) == pytest.approx((0.75, 0.85, 1.0))

    def test_absorbed_is_black(self, rng):
        world = single_sphere_world(Absorber())
        ray = Ray(Point3(0, 0, 0), Vector3(0, 0, -1))
        assert ray_color(ray, world, 10, rng) == Color(0, 0, 0)

    def test_attenuation_multiplies_recursion(self, rng):
        world = single_sphere_world(SkyMirror(Color(0.5, 0.5, 0.5)))
        ray = Ray(Point3(0, 0, 0), Vector3(0, 0, -1))
        assert tuple(ray_color(ray, world, 2, rng)) == pytest.approx((0.25, 0.35, 0.5))
        # One bounce only: the scattered ray has no budget left
        assert ray_color(ray, world, 1, rng) == Color(0, 0, 0)

    def test_sample_pixel_sums_samples(self, rng):
        # Nothing to hit, camera looking straight up: every sample is sky blue
        cam = Camera(Point3(0, 0, 0), Point3(0, 1, 0), Vector3(0, 0, -1),
                     vfov=1.0, aspect_ratio=1.0)
        total = sample_pixel(1, 1, HittableList(), cam, rng, 3, 3, 5, 4)
        assert tuple(total) == pytest.approx((2.5, 3.5, 5.0), abs=1e-3)


class TestRenderer:
    def settings(self, **overrides):
        params = dict(width=20, height=10, samples_per_pixel=1, max_depth=1,
                      tile_size=4, workers=3, seed=7)
        params.update(overrides)
        return RenderSettings(**params)

    def test_single_sphere_fixed_pixels(self):
        settings = self.settings()
        fb = Renderer(settings).render(single_sphere_world(), pinhole_camera(settings.aspect_ratio))
        assert fb.pixels.shape == (10, 20, 3)
        # Center pixel sees the sphere; with one bounce the scattered ray contributes black
        assert fb.get_pixel(10, 5) == (0, 0, 0)
        # Top-left pixel sees the sky: blue is saturated, red is not
        r, g, b = fb.get_pixel(0, 0)
        assert b == 255
        assert 0 < r < g < 255

    def test_image_is_upright(self):
        settings = self.settings(width=8, height=8, tile_size=8)
        fb = Renderer(settings).render(HittableList(), pinhole_camera(1.0))
        # Sky gets bluer towards the top, so red drops going up the image
        assert fb.get_pixel(4, 0)[0] < fb.get_pixel(4, 7)[0]

    def test_same_seed_same_image(self):
        settings = self.settings(width=16, height=8, samples_per_pixel=2, max_depth=4)
        camera = three_spheres_camera(settings.aspect_ratio)
        world = three_spheres_scene()
        first = Renderer(settings).render(world, camera)
        second = Renderer(settings.with_overrides(workers=1)).render(world, camera)
        assert np.array_equal(first.pixels, second.pixels)

    def test_different_seeds(self):
        settings = self.settings(width=12, height=6, samples_per_pixel=8, max_depth=4, seed=1)
        camera = three_spheres_camera(settings.aspect_ratio)
        world = three_spheres_scene()
        a = Renderer(settings).render(world, camera).pixels
        b = Renderer(settings.with_overrides(seed=2)).render(world, camera).pixels
        assert not np.array_equal(a, b)
        assert abs(a.mean() - b.mean()) < 10.0

    def test_unseeded_render_completes(self):
        settings = self.settings(seed=None)
        fb = Renderer(settings).render(single_sphere_world(), pinhole_camera(settings.aspect_ratio))
        assert fb.get_pixel(10, 5) == (0, 0, 0)

    def test_more_workers_than_tiles(self):
        settings = self.settings(width=4, height=4, tile_size=8, workers=16)
        fb = Renderer(settings).render(HittableList(), pinhole_camera(1.0))
        assert (fb.pixels[:, :, 2] == 255).all()

    def test_worker_failure_aborts_render(self):
        settings = self.settings()
        with pytest.raises(RuntimeError, match="scatter failed"):
            Renderer(settings).render(single_sphere_world(Exploding()), pinhole_camera(settings.aspect_ratio))

    def test_invalid_settings_rejected(self):
        with pytest.raises(ValueError):
            Renderer(self.settings(width=1))
