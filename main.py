import os
import sys
import argparse

import config
import logutil
from atlas import TileAtlas
from errors import ConfigLoadError, RendererError
from mapgen import (GENERATORS, SimpleConfig, SimpleGenerator, StratifiedConfig,
    StratifiedGenerator, TestingGenerator)
from renderer import IsometricRenderer


def build_parser():
    parser = argparse.ArgumentParser(
        description="Generate a voxel landscape and render it as an isometric image.")
    parser.add_argument('--generator', choices=sorted(GENERATORS), default='stratified')
    parser.add_argument('--len', type=int, default=config.DEFAULT_LEN, help="edge length of the map cube")
    parser.add_argument('--frequency', type=float, default=config.DEFAULT_FREQUENCY)
    parser.add_argument('--layer-height', type=int, default=config.DEFAULT_LAYER_HEIGHT)
    parser.add_argument('--min-soil-cutoff', type=int, default=config.DEFAULT_MIN_SOIL_CUTOFF)
    parser.add_argument('--max-water-level', type=int, default=config.DEFAULT_MAX_WATER_LEVEL)
    parser.add_argument('--tiles', help="tile atlas descriptor (TOML); flat colored tiles if omitted")
    parser.add_argument('--tile-size', type=int, nargs=2, metavar=('W', 'H'),
        default=(config.DEFAULT_TILE_WIDTH, config.DEFAULT_TILE_HEIGHT),
        help="tile size for flat colored tiles")
    parser.add_argument('--seed', type=int)
    parser.add_argument('--out', default=config.OUTPUT_PATH)
    parser.add_argument('--slices', metavar='DIR', help="also render a snapshot per x slice into DIR")
    parser.add_argument('--no-color', action='store_true', help="plain log output")
    return parser


def make_generator(args):
    if args.generator == TestingGenerator.name:
        return TestingGenerator(args.len)
    if args.generator == 'simple':
        return SimpleGenerator(SimpleConfig(len=args.len, frequency=args.frequency))
    return StratifiedGenerator(StratifiedConfig(
        len=args.len,
        frequency=args.frequency,
        layer_height=args.layer_height,
        min_soil_cutoff=args.min_soil_cutoff,
        max_water_level=args.max_water_level,
    ))


def run(args):
    if args.no_color:
        config.LOG_COLOR = False
    if args.tiles:
        atlas = TileAtlas.from_config_file(args.tiles)
    else:
        atlas = TileAtlas.from_colors(*args.tile_size)
    renderer = IsometricRenderer(atlas)
    generator = make_generator(args)

    if args.slices:
        os.makedirs(args.slices, exist_ok=True)
        snapshots = generator.generate_slices(seed=args.seed)
        for n, image in enumerate(renderer.render_slices(snapshots)):
            path = os.path.join(args.slices, f"slice_{n:03d}.png")
            image.save(path)
            logutil.log("MAIN", f"wrote {path}")

    isomap = generator.generate(seed=args.seed)
    image = renderer.render(isomap)
    image.save(args.out)
    logutil.log("MAIN", f"wrote {args.out} {image.size[0]}x{image.size[1]}")


def main(argv=None):
    args = build_parser().parse_args(argv)
    try:
        run(args)
    except (ConfigLoadError, RendererError) as err:
        logutil.log("MAIN", str(err), level="ERROR")
        return 1
    except ValueError as err:
        logutil.log("MAIN", f"invalid settings: {err}", level="ERROR")
        return 1
    except OSError as err:
        logutil.log("MAIN", f"could not write image: {err}", level="ERROR")
        return 1
    return 0


if __name__ == '__main__':
    sys.exit(main())
