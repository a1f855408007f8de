# main.py
import argparse
import logging
import random
import sys
from typing import List, Optional

from renderer.output import save_image
from renderer.raytracer import Renderer
from renderer.settings import ASPECT_RATIO, IMAGE_WIDTH, QUALITY_LEVELS, TILE_SIZE, RenderSettings
from scenes import SCENES

logger = logging.getLogger("tiletracer")


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Render a scene of spheres with a tiled, multi-threaded path tracer.",
    )
    parser.add_argument("--scene", choices=sorted(SCENES), default="random_spheres",
                        help="Scene to render (default: random_spheres)")
    parser.add_argument("--width", type=int, default=IMAGE_WIDTH,
                        help=f"Image width in pixels (default: {IMAGE_WIDTH})")
    parser.add_argument("--aspect-ratio", type=float, default=ASPECT_RATIO,
                        help="Width / height; the height is derived from it (default: 16/9)")
    parser.add_argument("--quality", choices=list(QUALITY_LEVELS), default="high_quality",
                        help="Sample and bounce budget (default: high_quality)")
    parser.add_argument("--samples", type=int, default=None,
                        help="Samples per pixel, overriding --quality")
    parser.add_argument("--max-depth", type=int, default=None,
                        help="Maximum bounces per ray, overriding --quality")
    parser.add_argument("--tile-size", type=int, default=TILE_SIZE,
                        help=f"Tile side length in pixels (default: {TILE_SIZE})")
    parser.add_argument("--workers", type=int, default=None,
                        help="Worker threads (default: number of CPUs)")
    parser.add_argument("--seed", type=int, default=None,
                        help="Seed for scene generation and sampling; makes the output reproducible")
    parser.add_argument("--output", "-o", default="out.png",
                        help="Output file; .ppm writes a plain-text image (default: out.png)")
    parser.add_argument("--preview", action="store_true",
                        help="Show the finished image in a window")
    verbosity = parser.add_mutually_exclusive_group()
    verbosity.add_argument("--verbose", "-v", action="store_true", help="Log every finished tile")
    verbosity.add_argument("--quiet", "-q", action="store_true", help="Only log warnings and errors")
    return parser.parse_args(argv)


def configure_logging(verbose: bool = False, quiet: bool = False):
    level = logging.DEBUG if verbose else logging.WARNING if quiet else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s [%(threadName)s] %(name)s: %(message)s",
    )


def build_settings(args: argparse.Namespace) -> RenderSettings:
    settings = RenderSettings.from_quality(
        args.quality, width=args.width, aspect_ratio=args.aspect_ratio,
        tile_size=args.tile_size, seed=args.seed,
    )
    return settings.with_overrides(
        samples_per_pixel=args.samples,
        max_depth=args.max_depth,
        workers=args.workers,
    ).validate()


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    configure_logging(args.verbose, args.quiet)

    try:
        settings = build_settings(args)
        build_world, build_camera = SCENES[args.scene]
        world = build_world(random.Random(args.seed))
        camera = build_camera(settings.aspect_ratio)
    except ValueError as e:
        logger.error("Invalid configuration: %s", e)
        return 1

    framebuffer = Renderer(settings).render(world, camera)

    try:
        save_image(framebuffer, args.output)
    except (OSError, ValueError) as e:
        logger.error("Could not write %s: %s", args.output, e)
        return 1

    if args.preview:
        from renderer.preview import show_image
        show_image(framebuffer, title=f"{args.scene} ({settings.width}x{settings.height})")

    return 0


if __name__ == "__main__":
    sys.exit(main())
