"""Command line entry point: generate terrain textures and save them."""

import argparse
import sys
from pathlib import Path

import structlog

from ..config import load_settings
from ..errors import ConfigurationError, GenerationError
from ..utils.logging import configure_logging
from .session import TerrainMapSession

logger = structlog.get_logger()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="terrain-map",
        description="Generate a diamond-square height texture and a matching biome color texture",
    )
    parser.add_argument("--edge-size", type=int, help="Grid side is 2**edge_size + 1 (default 9)")
    parser.add_argument("--roughness", type=float, help="Displacement damping in [0, 1] (default 0.7)")
    parser.add_argument("--width", type=int, dest="texture_width", help="Texture width (default 512)")
    parser.add_argument("--height", type=int, dest="texture_height", help="Texture height (default 512)")
    parser.add_argument("--seed", help="PRNG seed; omitted seeds from the system clock")
    parser.add_argument("--output-dir", help="Directory for the exported files")
    parser.add_argument(
        "--text", action="store_true", default=None, dest="save_terrain_text",
        help="Also write the terrain text dump",
    )
    parser.add_argument(
        "--count", type=int, default=1,
        help="Number of maps to generate; more than one saves into numbered subdirectories",
    )
    parser.add_argument("--log-level", help="Logging level")
    parser.add_argument("--log-format", choices=["plain", "json"], help="Logging format")
    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)

    try:
        settings = load_settings(
            edge_size=args.edge_size,
            roughness=args.roughness,
            texture_width=args.texture_width,
            texture_height=args.texture_height,
            seed=args.seed,
            output_dir=args.output_dir,
            save_terrain_text=args.save_terrain_text,
            log_level=args.log_level,
            log_format=args.log_format,
        )
    except ConfigurationError as e:
        print(f"terrain-map: {e}", file=sys.stderr)
        return 2

    configure_logging(settings.log_level, settings.log_format)

    if args.count < 1:
        logger.error("Invalid map count", count=args.count)
        return 2

    try:
        session = TerrainMapSession(settings)
        for index in range(args.count):
            maps = session.generate() if index == 0 else session.regenerate()
            output_dir = Path(settings.output_dir)
            if args.count > 1:
                output_dir = output_dir / f"map_{index:03d}"
            paths = session.save(output_dir, maps)
            logger.info("Map exported", seed=maps.seed, files=[str(p) for p in paths.values()])
    except ConfigurationError as e:
        logger.error("Invalid configuration", error=str(e))
        return 2
    except GenerationError as e:
        logger.error("Generation failed", error=str(e))
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
