import os
import sys
import random

import numpy as np
import pytest
from PIL import Image

ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

import config
from atlas import Tile, TileAtlas
from blocks import Material
from errors import RendererError
from isomap import IsoMap
from mapgen import SimpleConfig, SimpleGenerator, TestingGenerator
from renderer import IsometricRenderer, canvas_layout, tile_position


class SpyAtlas(TileAtlas):
    """Records every material the renderer asks a tile for."""

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.lookups = []

    def choose(self, material, rng=random):
        self.lookups.append(material)
        return super().choose(material, rng)


class BrokenSheet:
    def crop(self, box):
        raise ValueError("sheet is gone")


def _spy_atlas():
    colors = TileAtlas.from_colors(24, 26)
    tiles = {m: colors.tiles_for(m) for m in Material.drawable()}
    return SpyAtlas(24, 26, tiles)


def test_canvas_layout():
    layout = canvas_layout(24, 26, 6)
    assert layout.top_height == 12
    assert layout.sides_height == 14
    assert layout.floor_height == 86
    assert layout.width == 192
    assert layout.height == 222


def test_canvas_layout_other_sizes():
    layout = canvas_layout(32, 32, 64)
    assert layout == (16, 16, 64 * 16 + 16, 32 * 64 + 64, 64 * 16 + 16 + 16 * 64 + 64)


def test_tile_position():
    assert tile_position((100, 50), 0, 0, 24) == (100, 50)
    assert tile_position((100, 50), 1, 0, 24) == (112, 56)
    assert tile_position((100, 50), 0, 1, 24) == (88, 56)
    assert tile_position((100, 50), 2, 3, 24) == (88, 80)


def test_render_testing_map():
    isomap = TestingGenerator(dim=6).generate()
    image = IsometricRenderer(TileAtlas.from_colors(24, 26)).render(isomap)
    assert image.size == (192, 222)
    assert image.mode == "RGB"
    assert image.getpixel((0, 0)) == config.BACKGROUND_COLOR
    assert image.getpixel((191, 221)) == config.BACKGROUND_COLOR


def test_upper_layer_drawn_above_lower_layers():
    isomap = TestingGenerator(dim=6).generate()
    renderer = IsometricRenderer(TileAtlas.from_colors(24, 26))
    order = list(renderer.draw_order(isomap))
    positions = {(x, y, z): dest for x, y, z, _, dest in order}
    for x in (2, 3):
        for y in (2, 3):
            top = positions[(x, y, 3)][1]
            for z in range(3):
                assert top < positions[(x, y, z)][1]
    # floors are drawn bottom to top, each one sides_height further up
    zs = [z for _, _, z, _, _ in order]
    assert zs == sorted(zs)
    assert positions[(0, 0, 1)][1] == positions[(0, 0, 0)][1] - 14
    assert len(order) == 6 * 6 * 3 + 4


def test_draw_order_origin():
    isomap = IsoMap.new_empty(1)
    isomap[0, 0, 0] = Material.Rock
    renderer = IsometricRenderer(TileAtlas.from_colors(24, 26))
    assert list(renderer.draw_order(isomap)) == [(0, 0, 0, Material.Rock, (24, 40))]


def test_single_block_pixels():
    isomap = IsoMap.new_empty(1)
    isomap[0, 0, 0] = Material.Rock
    image = IsometricRenderer(TileAtlas.from_colors(24, 26)).render(isomap)
    assert image.size == (72, 92)
    # the top face center lands at origin + (12, 6)
    assert image.getpixel((36, 46)) == tuple(config.ROCK_COLOR)
    # the transparent sprite corner keeps the background
    assert image.getpixel((24, 40)) == config.BACKGROUND_COLOR


def test_empty_blocks_are_never_looked_up():
    atlas = _spy_atlas()
    renderer = IsometricRenderer(atlas)
    image = renderer.render(IsoMap.new_empty(4))
    assert atlas.lookups == []
    background = Image.new("RGB", image.size, config.BACKGROUND_COLOR)
    assert np.array_equal(np.asarray(image), np.asarray(background))

    isomap = TestingGenerator(dim=6).generate()
    renderer.render(isomap)
    assert Material.Empty not in atlas.lookups
    assert len(atlas.lookups) == int(np.count_nonzero(isomap.blocks))


def test_renders_every_material():
    isomap = IsoMap.new_empty(4)
    for n, material in enumerate(Material.drawable()):
        isomap[n, 0, 0] = material
    atlas = _spy_atlas()
    IsometricRenderer(atlas).render(isomap)
    assert sorted(atlas.lookups) == Material.drawable()


def test_blit_failure_becomes_renderer_error():
    tiles = {m: [Tile(BrokenSheet(), (0, 0, 24, 26))] for m in Material.drawable()}
    renderer = IsometricRenderer(TileAtlas(24, 26, tiles))
    # nothing to draw, nothing to fail
    renderer.render(IsoMap.new_empty(2))
    with pytest.raises(RendererError) as info:
        renderer.render(TestingGenerator().generate())
    assert info.value.message == "sheet is gone"
    assert "sheet is gone" in str(info.value)


def test_seeded_renders_match():
    sheet = Image.new("RGBA", (48, 26))
    sheet.paste((255, 0, 0, 255), (0, 0, 24, 26))
    sheet.paste((0, 0, 255, 255), (24, 0, 48, 26))
    tiles = {m: [Tile(sheet, (0, 0, 24, 26)), Tile(sheet, (24, 0, 48, 26))] for m in Material.drawable()}
    atlas = TileAtlas(24, 26, tiles)
    isomap = TestingGenerator().generate()
    a = IsometricRenderer(atlas, rng=random.Random(5)).render(isomap)
    b = IsometricRenderer(atlas, rng=random.Random(5)).render(isomap)
    assert np.array_equal(np.asarray(a), np.asarray(b))


def test_render_slices():
    gen = SimpleGenerator(SimpleConfig(len=5, frequency=0.1))
    renderer = IsometricRenderer(TileAtlas.from_colors(24, 26))
    images = list(renderer.render_slices(gen.generate_slices(seed=2)))
    assert len(images) == 5
    layout = canvas_layout(24, 26, 5)
    assert all(image.size == (layout.width, layout.height) for image in images)


def test_custom_background():
    image = IsometricRenderer(TileAtlas.from_colors(), background=(1, 2, 3)).render(IsoMap.new_empty(2))
    assert image.getpixel((5, 5)) == (1, 2, 3)
