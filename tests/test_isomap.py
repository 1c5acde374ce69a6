import os
import sys

import numpy as np
import pytest

ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

from blocks import Material
from isomap import IsoMap


def test_new_empty_is_all_empty():
    iso_map = IsoMap.new_empty(2)
    assert iso_map.shape == (2, 2, 2)
    assert iso_map.blocks.dtype == np.uint8
    assert not iso_map.blocks.any()
    assert iso_map.column(1, 1) == [Material.Empty, Material.Empty]


def test_return_len():
    iso_map = IsoMap.new_empty(50)
    assert iso_map.len == 50
    assert len(iso_map) == 50


def test_rejects_non_cubes_and_empty_edges():
    with pytest.raises(ValueError):
        IsoMap(np.zeros((2, 3, 2), dtype=np.uint8))
    with pytest.raises(ValueError):
        IsoMap(np.zeros((4, 4), dtype=np.uint8))
    with pytest.raises(ValueError):
        IsoMap.new_empty(0)


def test_item_access_uses_materials():
    iso_map = IsoMap.new_empty(3)
    iso_map[1, 2, 0] = Material.Water
    iso_map[0, 0, 0:2] = Material.Rock
    assert iso_map[1, 2, 0] is Material.Water
    assert iso_map.column(0, 0) == [Material.Rock, Material.Rock, Material.Empty]


def test_heights_counts_and_materials():
    iso_map = IsoMap.new_empty(4)
    iso_map.fill(Material.Rock, x=0, y=0, z=slice(0, 3))
    iso_map.fill(Material.Grass, x=0, y=0, z=3)
    iso_map.fill(Material.Water, x=2, y=1, z=0)
    heights = iso_map.heights()
    assert heights[0, 0] == 4
    assert heights[2, 1] == 1
    assert heights[3, 3] == 0
    counts = iso_map.counts()
    assert counts[Material.Rock] == 3
    assert counts[Material.Grass] == 1
    assert counts[Material.Empty] == 64 - 5
    assert iso_map.materials() == {Material.Rock, Material.Grass, Material.Water}


def test_copy_is_independent():
    iso_map = IsoMap.new_empty(3)
    snapshot = iso_map.copy()
    iso_map[0, 0, 0] = Material.Soil
    assert snapshot[0, 0, 0] is Material.Empty
    assert snapshot != iso_map
    assert snapshot == IsoMap.new_empty(3)


def test_layers_go_bottom_to_top():
    iso_map = IsoMap.new_empty(3)
    iso_map[1, 1, 2] = Material.Rock
    layers = list(iso_map.layers())
    assert [z for z, _ in layers] == [0, 1, 2]
    assert layers[2][1][1, 1] == Material.Rock
    assert not layers[0][1].any()


def test_material_names():
    assert Material.from_name("Grass") is Material.Grass
    assert Material.from_name("water") is Material.Water
    assert Material.Empty == 0
    assert Material.Empty not in Material.drawable()
    with pytest.raises(ValueError):
        Material.from_name("Lava")
