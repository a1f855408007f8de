# materials/material.py
from typing import Optional, Tuple
from core.ray import Ray
from core.vector import Color
from geometry.hittable import HitRecord

class Material:
    """
    Abstract material class. Subclasses must implement scatter().
    Materials hold no per-ray state, so one instance can be shared by
    any number of surfaces and worker threads.
    """
    def scatter(self, ray_in: Ray, rec: HitRecord, rng) -> Optional[Tuple[Ray, Color]]:
        """
        Computes the scattered ray and attenuation.
        Returns a tuple (scattered_ray, attenuation), or None if the ray is absorbed.
        """
        raise NotImplementedError("scatter() must be implemented by subclasses.")
