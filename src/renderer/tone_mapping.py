# renderer/tone_mapping.py
import math
from typing import Tuple
from core.vector import Color

def gamma_correct(value: float) -> float:
    """
    Gamma-2 correction of a linear channel value.
    """
    return math.sqrt(value) if value > 0.0 else 0.0

def to_rgb8(color_sum: Color, samples_per_pixel: int) -> Tuple[int, int, int]:
    """
    Average a sum of samples, apply gamma correction and quantize each
    channel to 0..255, clamping values outside [0, 1).
    """
    scale = 1.0 / samples_per_pixel
    return tuple(
        int(256 * min(max(gamma_correct(c * scale), 0.0), 0.999))
        for c in color_sum
    )
