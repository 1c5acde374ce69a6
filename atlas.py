"""Tile atlases: the sprites the renderer may draw for each material.

Tiles are assumed to be a 2:1 isometric projection. They can represent a cube
or a cuboid, in which case the top face should adjoin the top of the tile and
take up the whole width; the rest of the cube is below it.

Multiple tiles can be cut from one file, forming a sprite sheet, and a
descriptor can list multiple files::

    # Width and height of an individual tile in pixels
    width = 24
    height = 26
    # Optional, relative to the descriptor's directory
    base_path = "assets"

    [[files]]
    filename = "cubes.png"

        [[files.tiles]]
        kind = "Rock"

        # Offsets are optional and default to 0,0, the upper left corner
        [[files.tiles]]
        kind = "Rock"
        x = 25
        y = 0

Every material except `Empty` needs at least one tile. When a material has
several, one is picked at random each time a block is drawn.
"""
import os
import random
import tomllib
import collections

from PIL import Image, ImageDraw

import config
import logutil
from blocks import Material, BLOCK_COLORS
from errors import ConfigLoadError, ConfigLoadErrorKind


class Tile(collections.namedtuple('Tile', 'sheet box')):
    """A sprite within a sheet.

    Sheets are shared between all the tiles cut from them and only cropped at
    draw time. `box` is (left, upper, right, lower).
    """
    __slots__ = ()

    def sprite(self):
        return self.sheet.crop(self.box)


def load_image(path):
    with Image.open(path) as im:
        return im.convert('RGBA')


def _parse_error(detail):
    return ConfigLoadError(ConfigLoadErrorKind.DESCRIPTOR_PARSE, detail)


def _require_int(table, key, where, default=None):
    value = table.get(key, default)
    if value is None:
        raise _parse_error(f"{where}: missing '{key}'")
    if isinstance(value, bool) or not isinstance(value, int):
        raise _parse_error(f"{where}: '{key}' must be an integer, got {value!r}")
    return value


def parse_descriptor(text):
    """Parse descriptor TOML into (width, height, base_path, files).

    `files` is a list of (filename, [(material, x, y), ...]).
    """
    try:
        parsed = tomllib.loads(text)
    except tomllib.TOMLDecodeError as err:
        raise _parse_error(str(err)) from err

    width = _require_int(parsed, 'width', 'descriptor')
    height = _require_int(parsed, 'height', 'descriptor')
    base_path = parsed.get('base_path', '')
    if not isinstance(base_path, str):
        raise _parse_error(f"descriptor: 'base_path' must be a string, got {base_path!r}")
    files_in = parsed.get('files', [])
    if not isinstance(files_in, list):
        raise _parse_error("descriptor: 'files' must be an array of tables")

    files = []
    for n, entry in enumerate(files_in):
        where = f"files[{n}]"
        if not isinstance(entry, dict) or not isinstance(entry.get('filename'), str):
            raise _parse_error(f"{where}: missing 'filename'")
        tiles = []
        for m, tiledef in enumerate(entry.get('tiles', [])):
            tile_where = f"{where}.tiles[{m}]"
            if not isinstance(tiledef, dict) or 'kind' not in tiledef:
                raise _parse_error(f"{tile_where}: missing 'kind'")
            try:
                material = Material.from_name(tiledef['kind'])
            except ValueError as err:
                raise _parse_error(f"{tile_where}: {err}") from err
            x = _require_int(tiledef, 'x', tile_where, default=0)
            y = _require_int(tiledef, 'y', tile_where, default=0)
            tiles.append((material, x, y))
        files.append((entry['filename'], tiles))
    return width, height, base_path, files


class TileAtlas(object):
    """Immutable map of material to the tiles that can draw it.

    Construction fails with `ConfigLoadError` unless every material except
    `Empty` has at least one tile, so rendering never has to handle a missing
    sprite.
    """

    def __init__(self, tile_width, tile_height, tiles):
        if tile_width <= 0 or tile_height <= 0:
            raise ConfigLoadError(ConfigLoadErrorKind.INVALID_GEOMETRY,
                f"tile size must be positive, got {tile_width}x{tile_height}")
        if tile_height < tile_width // 2:
            raise ConfigLoadError(ConfigLoadErrorKind.INVALID_GEOMETRY,
                f"tile height {tile_height} is less than the top face height {tile_width // 2}")
        self.tile_width = tile_width
        self.tile_height = tile_height
        self._tiles = {material: tuple(found) for material, found in tiles.items() if found}
        for material in Material.drawable():
            if material not in self._tiles:
                raise ConfigLoadError.missing_tile(material)

    @classmethod
    def from_config_str(cls, text, base_path=None, loader=None):
        """Build an atlas from descriptor TOML.

        Image filenames are resolved against the descriptor's own `base_path`,
        which is itself relative to `base_path` (default: the current directory).
        """
        loader = loader or load_image
        tile_width, tile_height, descriptor_base, files = parse_descriptor(text)
        base_dir = os.path.join(base_path or '', descriptor_base)

        tiles = collections.defaultdict(list)
        for filename, tiledefs in files:
            path = os.path.join(base_dir, filename)
            # load each file once, then refer to it from every tile cut from it
            try:
                sheet = loader(path)
            except (OSError, ValueError) as err:
                raise ConfigLoadError(ConfigLoadErrorKind.IMAGE_LOAD, f"{path}: {err}") from err
            logutil.log("ATLAS", f"loaded sheet {path} size={sheet.size} tiles={len(tiledefs)}")
            for material, x, y in tiledefs:
                tiles[material].append(Tile(sheet, (x, y, x + tile_width, y + tile_height)))
        return cls(tile_width, tile_height, tiles)

    @classmethod
    def from_config_file(cls, path, loader=None):
        try:
            with open(path, encoding='utf-8') as f:
                text = f.read()
        except (OSError, UnicodeDecodeError) as err:
            raise _parse_error(f"{path}: {err}") from err
        logutil.log("ATLAS", f"reading descriptor {path}")
        return cls.from_config_str(text, base_path=os.path.dirname(os.path.abspath(path)), loader=loader)

    @classmethod
    def from_colors(cls, tile_width=config.DEFAULT_TILE_WIDTH,
            tile_height=config.DEFAULT_TILE_HEIGHT, colors=None):
        """Draw one flat colored cube per material into a single shared sheet."""
        colors = dict(colors or {})
        materials = Material.drawable()
        # geometry is checked again by __init__, but drawing needs it first
        if tile_width <= 0 or tile_height < tile_width // 2:
            raise ConfigLoadError(ConfigLoadErrorKind.INVALID_GEOMETRY,
                f"cannot draw {tile_width}x{tile_height} tiles")
        sheet = Image.new('RGBA', (tile_width * len(materials), tile_height), (0, 0, 0, 0))
        draw = ImageDraw.Draw(sheet)
        tiles = {}
        for n, material in enumerate(materials):
            color = tuple(colors.get(material, BLOCK_COLORS[material].tolist()))
            left = n * tile_width
            _draw_cube(draw, left, tile_width, tile_height, color)
            tiles[material] = [Tile(sheet, (left, 0, left + tile_width, tile_height))]
        logutil.log("ATLAS", f"drew flat tile sheet {sheet.size} for {len(materials)} materials")
        return cls(tile_width, tile_height, tiles)

    def tiles_for(self, material):
        return self._tiles[Material(material)]

    def choose(self, material, rng=random):
        """Pick one of the material's tiles uniformly at random."""
        return rng.choice(self._tiles[material])

    @property
    def materials(self):
        return set(self._tiles)

    @property
    def sheets(self):
        seen = {}
        for tiles in self._tiles.values():
            for tile in tiles:
                seen.setdefault(id(tile.sheet), tile.sheet)
        return list(seen.values())

    def covers(self, isomap):
        return isomap.materials() <= self.materials

    def __repr__(self):
        counts = ", ".join(f"{m.name}={len(t)}" for m, t in sorted(self._tiles.items()))
        return f"TileAtlas({self.tile_width}x{self.tile_height}, {counts})"


def _shade(color, k):
    return tuple(int(c * k) for c in color[:3]) + (255,)


def _draw_cube(draw, left, width, height, color):
    top = width // 2
    mid = left + width // 2
    right = left + width - 1
    bottom = height - 1
    # left and right faces first, the top face overlaps their upper edge
    draw.polygon([(left, top // 2), (mid, top), (mid, bottom), (left, bottom - top // 2)],
        fill=_shade(color, config.SIDE_SHADE_LEFT))
    draw.polygon([(mid, top), (right, top // 2), (right, bottom - top // 2), (mid, bottom)],
        fill=_shade(color, config.SIDE_SHADE_RIGHT))
    draw.polygon([(mid, 0), (right, top // 2), (mid, top), (left, top // 2)],
        fill=_shade(color, 1.0))
