# camera/camera.py
import math
from core.vector import Point3, Vector3
from core.ray import Ray
from core.utils import random_in_unit_disk

class Camera:
    """
    Look-at camera with a thin lens. With aperture 0 it is a pinhole camera.

    vfov is the vertical field of view in degrees. Everything on the plane
    focus_dist in front of the eye is in perfect focus.
    """
    def __init__(self, eye: Point3, target: Point3, global_up: Vector3,
                 vfov: float, aspect_ratio: float,
                 aperture: float = 0.0, focus_dist: float = 10.0):
        if not 0 < vfov < 180:
            raise ValueError(f"vfov must be in (0, 180) degrees, got {vfov}")
        if aspect_ratio <= 0:
            raise ValueError(f"aspect_ratio must be positive, got {aspect_ratio}")
        if aperture < 0:
            raise ValueError(f"aperture must be non-negative, got {aperture}")
        if focus_dist <= 0:
            raise ValueError(f"focus_dist must be positive, got {focus_dist}")

        view = target - eye
        if view.near_zero():
            raise ValueError("eye and target must be distinct points")
        if view.cross(global_up).near_zero():
            raise ValueError("global_up must not be parallel to the view direction")

        self.eye = eye
        self.vfov = vfov
        self.aspect_ratio = aspect_ratio
        self.aperture = aperture
        self.focus_dist = focus_dist
        self.lens_radius = aperture / 2.0

        # Orthonormal basis
        self.forward = view.normalize()
        self.right = self.forward.cross(global_up).normalize()
        self.up = self.right.cross(self.forward)

        viewport_height = 2.0 * math.tan(math.radians(vfov) / 2)
        viewport_width = aspect_ratio * viewport_height

        # Scale by focus distance
        self.horizontal = self.right * (viewport_width * focus_dist)
        self.vertical = self.up * (viewport_height * focus_dist)

        self.lower_left_corner = (eye +
                                  self.forward * focus_dist -
                                  self.horizontal * 0.5 -
                                  self.vertical * 0.5)

    def get_ray(self, u: float, v: float, rng) -> Ray:
        """
        Generates the ray through normalized screen coordinates (u, v),
        with (0, 0) the lower-left and (1, 1) the upper-right corner.
        """
        target = self.lower_left_corner + self.horizontal * u + self.vertical * v
        if self.lens_radius <= 0:
            return Ray(self.eye, target - self.eye)

        # Random point on the lens
        rd = random_in_unit_disk(rng) * self.lens_radius
        offset = self.right * rd.x + self.up * rd.y

        ray_origin = self.eye + offset
        return Ray(ray_origin, target - ray_origin)
