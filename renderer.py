"""Renders `IsoMap`s to images in a 2:1 isometric projection.

Layers are drawn bottom to top, and each layer is drawn further up the canvas
than the one below it. Later draws cover earlier ones, so blocks hide the
blocks behind and below them without any depth sorting. Within a layer, tiles
at different (x, y) positions never overlap, so their order does not matter.
"""
import time
import random
import collections

import numpy
from PIL import Image

import config
import logutil
from blocks import Material
from errors import RendererError

CanvasLayout = collections.namedtuple('CanvasLayout',
    'top_height sides_height floor_height width height')


def canvas_layout(tile_width, tile_height, grid_len):
    # Pixel height of the top face of the cube. Since we're in a 2:1
    # projection, it's half the tile's width.
    top_height = tile_width // 2

    # Pixel height of the sides of the cube: the rest of the tile.
    sides_height = tile_height - top_height

    # How much a single floor takes up vertically. The longest part is the
    # diagonal, one full top_height per tile, plus the sides of the frontmost
    # tile.
    floor_height = grid_len * top_height + sides_height

    # Wide enough for a floor plus a one tile margin either side
    width = tile_width * grid_len + tile_width * 2

    # A single floor, then every floor stacked on top of it, then margins
    height = floor_height + sides_height * grid_len + tile_height * 2

    return CanvasLayout(top_height, sides_height, floor_height, width, height)


def tile_position(origin, x, y, tile_width):
    """Pixel position of the tile at map position (x, y) when tile 0,0 is at `origin`."""
    ox, oy = origin
    return (ox + (x - y) * (tile_width // 2), oy + (x + y) * (tile_width // 4))


class IsometricRenderer(object):

    def __init__(self, atlas, background=config.BACKGROUND_COLOR, rng=None):
        self.atlas = atlas
        self.background = tuple(background)
        self.rng = rng if rng is not None else random.Random()

    def layout(self, isomap):
        return canvas_layout(self.atlas.tile_width, self.atlas.tile_height, isomap.len)

    def origin(self, layout):
        """Position of tile 0,0 on the bottom floor.

        Horizontally the tile straddles the midpoint. Vertically we start from
        the bottom, go up past the margin, then up by a floor height.
        """
        return (layout.width // 2 - self.atlas.tile_width // 2,
            layout.height - self.atlas.tile_height - layout.floor_height)

    def draw_order(self, isomap, layout=None):
        """Yield (x, y, z, material, position) for each block, in drawing order.

        Empty blocks are skipped.
        """
        layout = layout or self.layout(isomap)
        ox, oy = self.origin(layout)
        for z, layer in isomap.layers():
            xs, ys = numpy.nonzero(layer)
            for x, y in zip(xs.tolist(), ys.tolist()):
                yield x, y, z, Material(int(layer[x, y])), tile_position((ox, oy), x, y, self.atlas.tile_width)
            # Shift to the floor above
            oy -= layout.sides_height

    def render(self, isomap):
        """Render `isomap` to a new RGB image."""
        t = time.time()
        layout = self.layout(isomap)
        try:
            out = Image.new('RGB', (layout.width, layout.height), self.background)
        except (ValueError, MemoryError) as err:
            raise RendererError(err) from err

        drawn = 0
        for _x, _y, _z, material, dest in self.draw_order(isomap, layout):
            tile = self.atlas.choose(material, self.rng)
            self._blit(tile, out, dest)
            drawn += 1
        logutil.log("RENDER", f"len={isomap.len} canvas={layout.width}x{layout.height} "
            f"blocks={drawn} in {(time.time()-t)*1000.0:.1f}ms")
        return out

    def render_slices(self, snapshots):
        """Render each map of a `generate_slices` sequence."""
        for isomap in snapshots:
            yield self.render(isomap)

    def _blit(self, tile, out, dest):
        try:
            sprite = tile.sprite()
            out.paste(sprite, dest, sprite if sprite.mode == 'RGBA' else None)
        except (ValueError, OSError) as err:
            raise RendererError(err) from err
