import enum

import numpy
from config import ROCK_COLOR, GRASS_COLOR, SOIL_COLOR, WATER_COLOR


class Material(enum.IntEnum):
    """The substance of a single voxel.

    Values are the codes stored in an `IsoMap` array, so `Empty` must stay 0.
    """
    Empty = 0
    Rock = 1
    Grass = 2
    Soil = 3
    Water = 4

    @classmethod
    def from_name(cls, name):
        """Look up a material by its descriptor name (case-insensitive)."""
        try:
            return BLOCK_ID[name.lower()]
        except (KeyError, AttributeError):
            raise ValueError(f"unknown material {name!r}") from None

    @classmethod
    def drawable(cls):
        """Every material that needs at least one tile to be rendered."""
        return [m for m in cls if m is not cls.Empty]


class Block(object):
    material = None
    colors = [255, 255, 255]


class Rock(Block):
    material = Material.Rock
    colors = ROCK_COLOR

class Grass(Block):
    material = Material.Grass
    colors = GRASS_COLOR

class Soil(Block):
    material = Material.Soil
    colors = SOIL_COLOR

class Water(Block):
    material = Material.Water
    colors = WATER_COLOR


BLOCKS = [
    Rock,
    Grass,
    Soil,
    Water,
]

BLOCK_ID = {m.name.lower(): m for m in Material}
# Lookup tables indexed by material code.
BLOCK_COLORS = numpy.array([[0, 0, 0]] + [x.colors for x in BLOCKS], dtype=numpy.uint8)
