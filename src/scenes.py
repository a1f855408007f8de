# scenes.py
import logging
from typing import Callable, Dict, Tuple

from camera.camera import Camera
from core.utils import random_vector
from core.vector import Color, Point3, Vector3
from geometry.sphere import Sphere
from geometry.world import HittableList
from materials.dielectric import Dielectric
from materials.lambertian import Lambertian
from materials.metal import Metal

logger = logging.getLogger(__name__)


def random_spheres_scene(rng) -> HittableList:
    """
    Ground plane covered with a grid of small random spheres, plus one large
    glass, one diffuse and one mirror sphere.
    """
    world = HittableList()

    world.add(Sphere(Point3(0, -1000, 0), 1000, Lambertian(Color(0.5, 0.5, 0.5))))

    clearing = Point3(4, 0.2, 0)
    for a in range(-11, 11):
        for b in range(-11, 11):
            choose_mat = rng.random()
            center = Point3(a + 0.9 * rng.random(), 0.2, b + 0.9 * rng.random())

            if (center - clearing).length() <= 0.9:
                continue

            if choose_mat < 0.8:
                # Diffuse
                material = Lambertian(random_vector(rng) * random_vector(rng))
            elif choose_mat < 0.95:
                # Metal
                material = Metal(random_vector(rng, 0.5, 1.0), rng.uniform(0.0, 0.5))
            else:
                # Glass
                material = Dielectric(1.5)
            world.add(Sphere(center, 0.2, material))

    world.add(Sphere(Point3(0, 1, 0), 1.0, Dielectric(1.5)))
    world.add(Sphere(Point3(-4, 1, 0), 1.0, Lambertian(Color(0.4, 0.2, 0.1))))
    world.add(Sphere(Point3(4, 1, 0), 1.0, Metal(Color(0.7, 0.6, 0.5), 0.0)))

    logger.info("Built random spheres scene with %d objects", len(world))
    return world


def random_spheres_camera(aspect_ratio: float) -> Camera:
    return Camera(
        eye=Point3(13, 2, 3),
        target=Point3(0, 0, 0),
        global_up=Vector3(0, 1, 0),
        vfov=20.0,
        aspect_ratio=aspect_ratio,
        aperture=0.1,
        focus_dist=10.0,
    )


def three_spheres_scene(rng=None) -> HittableList:
    """Small fixed scene: diffuse sphere in the middle, glass on the left, metal on the right."""
    world = HittableList()
    world.add(Sphere(Point3(0, -100.5, -1), 100, Lambertian(Color(0.8, 0.8, 0.0))))
    world.add(Sphere(Point3(0, 0, -1), 0.5, Lambertian(Color(0.1, 0.2, 0.5))))
    world.add(Sphere(Point3(-1, 0, -1), 0.5, Dielectric(1.5)))
    # Negative radius flips the normals: a hollow glass bubble
    world.add(Sphere(Point3(-1, 0, -1), -0.45, Dielectric(1.5)))
    world.add(Sphere(Point3(1, 0, -1), 0.5, Metal(Color(0.8, 0.6, 0.2), 0.0)))
    logger.info("Built three spheres scene with %d objects", len(world))
    return world


def three_spheres_camera(aspect_ratio: float) -> Camera:
    return Camera(
        eye=Point3(0, 0, 0),
        target=Point3(0, 0, -1),
        global_up=Vector3(0, 1, 0),
        vfov=90.0,
        aspect_ratio=aspect_ratio,
        focus_dist=1.0,
    )


SceneBuilder = Callable[..., HittableList]
CameraBuilder = Callable[[float], Camera]

SCENES: Dict[str, Tuple[SceneBuilder, CameraBuilder]] = {
    "random_spheres": (random_spheres_scene, random_spheres_camera),
    "three_spheres": (three_spheres_scene, three_spheres_camera),
}
