# renderer/settings.py
import os
from dataclasses import dataclass, field, replace
from typing import Optional

ASPECT_RATIO = 16.0 / 9.0
IMAGE_WIDTH = 400
SAMPLES_PER_PIXEL = 100
MAX_DEPTH = 50
TILE_SIZE = 32

# Named sample/bounce budgets selectable from the command line
QUALITY_LEVELS = {
    "interactive": {"samples": 1, "bounces": 2},
    "balanced": {"samples": 16, "bounces": 8},
    "high_quality": {"samples": SAMPLES_PER_PIXEL, "bounces": MAX_DEPTH},
}


def default_workers() -> int:
    return os.cpu_count() or 1


@dataclass(frozen=True)
class RenderSettings:
    """
    Tunable parameters of one render.

    Attributes:
        width, height: Image size in pixels. Both must be at least 2, since
            jittered screen coordinates are divided by (dimension - 1).
        samples_per_pixel: Camera rays averaged per pixel.
        max_depth: Maximum number of bounces followed per camera ray.
        tile_size: Side length of the square tiles handed to workers.
        workers: Number of worker threads.
        seed: Base seed for the per-worker generators. None draws from OS entropy.
    """
    width: int = IMAGE_WIDTH
    height: int = int(IMAGE_WIDTH / ASPECT_RATIO)
    samples_per_pixel: int = SAMPLES_PER_PIXEL
    max_depth: int = MAX_DEPTH
    tile_size: int = TILE_SIZE
    workers: int = field(default_factory=default_workers)
    seed: Optional[int] = None

    @classmethod
    def from_width(cls, width: int, aspect_ratio: float = ASPECT_RATIO, **kwargs) -> "RenderSettings":
        """Build settings whose height is derived from the width and aspect ratio."""
        if aspect_ratio <= 0:
            raise ValueError(f"aspect_ratio must be positive, got {aspect_ratio}")
        return cls(width=width, height=int(width / aspect_ratio), **kwargs)

    @classmethod
    def from_quality(cls, quality: str, width: int = IMAGE_WIDTH,
                     aspect_ratio: float = ASPECT_RATIO, **kwargs) -> "RenderSettings":
        if quality not in QUALITY_LEVELS:
            raise ValueError(f"Unknown quality level {quality!r}; "
                             f"expected one of {sorted(QUALITY_LEVELS)}")
        level = QUALITY_LEVELS[quality]
        kwargs.setdefault("samples_per_pixel", level["samples"])
        kwargs.setdefault("max_depth", level["bounces"])
        return cls.from_width(width, aspect_ratio, **kwargs)

    @property
    def aspect_ratio(self) -> float:
        return self.width / self.height

    def with_overrides(self, **changes) -> "RenderSettings":
        """Return a copy with the non-None values in changes applied."""
        return replace(self, **{k: v for k, v in changes.items() if v is not None})

    def validate(self) -> "RenderSettings":
        if self.width < 2 or self.height < 2:
            raise ValueError(f"Image must be at least 2x2 pixels, got {self.width}x{self.height}")
        for name in ("samples_per_pixel", "max_depth", "tile_size", "workers"):
            if getattr(self, name) < 1:
                raise ValueError(f"{name} must be at least 1, got {getattr(self, name)}")
        return self
