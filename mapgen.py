"""Generators for procedurally generating `IsoMap`s.

Every generator fills one x-slice of the map at a time, so the same code backs
`generate` (the finished map) and `generate_slices` (a snapshot after each
slice, useful for showing blocks that end up obscured in the final render).
"""
#std/external libs
import time
import collections
import dataclasses
import numpy

#local libs
import config
import logutil
from blocks import Material
from isomap import IsoMap
from simplex import FbmNoise, BillowNoise, AbsNoise, MAX_SEED

ROCK = int(Material.Rock)
GRASS = int(Material.Grass)
SOIL = int(Material.Soil)
WATER = int(Material.Water)

# Per-run randomness of the stratified generator.
StrataPlan = collections.namedtuple("StrataPlan", "height_noise layer_noise water_level soil_level")


def resolve_seed(seed=None):
    if seed is None:
        seed = numpy.random.randint(0, MAX_SEED, dtype=numpy.int64)
    return int(seed)


def column_heights(noise, len):
    """Map noise in [-1, 1] to integer column heights in [0, len]."""
    half_height = len / 2.0
    coords = numpy.arange(len)
    samples = noise.sample_grid(coords, coords)
    heights = (half_height + samples * half_height).astype(numpy.int64)
    return numpy.clip(heights, 0, len)


@dataclasses.dataclass(frozen=True)
class SimpleConfig:
    len: int = config.DEFAULT_LEN
    frequency: float = config.DEFAULT_FREQUENCY

    def with_len(self, len):
        return dataclasses.replace(self, len=len)

    def with_frequency(self, frequency):
        """Set the frequency parameter for the noise generator."""
        return dataclasses.replace(self, frequency=frequency)

    def validate(self):
        if self.len < 1:
            raise ValueError(f"len must be at least 1, got {self.len}")
        if self.frequency <= 0:
            raise ValueError(f"frequency must be positive, got {self.frequency}")


@dataclasses.dataclass(frozen=True)
class StratifiedConfig(SimpleConfig):
    # Maximum soil depth; the actual depth follows the layer noise.
    layer_height: int = config.DEFAULT_LAYER_HEIGHT
    # Lowest possible soil line. Terrain above the soil line is bare rock.
    min_soil_cutoff: int = config.DEFAULT_MIN_SOIL_CUTOFF
    # Highest possible water level. Empty space below it fills with water.
    max_water_level: int = config.DEFAULT_MAX_WATER_LEVEL

    def with_layer_height(self, layer_height):
        return dataclasses.replace(self, layer_height=layer_height)

    def with_min_soil_cutoff(self, min_soil_cutoff):
        return dataclasses.replace(self, min_soil_cutoff=min_soil_cutoff)

    def with_max_water_level(self, max_water_level):
        return dataclasses.replace(self, max_water_level=max_water_level)

    def validate(self):
        super().validate()
        if self.layer_height < 0:
            raise ValueError(f"layer_height must not be negative, got {self.layer_height}")
        if self.max_water_level < 0:
            raise ValueError(f"max_water_level must not be negative, got {self.max_water_level}")
        if not 0 <= self.min_soil_cutoff < self.len:
            raise ValueError(
                f"min_soil_cutoff must be in [0, len), got {self.min_soil_cutoff} with len {self.len}")


class Generator(object):
    """Base class for generators that fill an `IsoMap` slice by slice."""

    name = 'generator'

    @property
    def len(self):
        raise NotImplementedError

    def validate(self):
        pass

    def _prepare(self, rng):
        """Draw the per-run randomness and return ``fill(slab, x)``.

        ``slab`` is the (y, z) view of the map at ``x``.
        """
        raise NotImplementedError

    def _start(self, seed):
        self.validate()
        seed = resolve_seed(seed)
        rng = numpy.random.RandomState(seed)
        isomap = IsoMap.new_empty(self.len)
        fill = self._prepare(rng)
        return seed, isomap, fill

    def generate(self, seed=None):
        t = time.time()
        seed, isomap, fill = self._start(seed)
        for x in range(isomap.len):
            fill(isomap.blocks[x], x)
        logutil.log("MAPGEN", f"{self.name} len={isomap.len} seed={seed} done in {(time.time()-t)*1000.0:.1f}ms")
        return isomap

    def generate_slices(self, seed=None):
        """Yield a snapshot of the map each time one slice in the x axis is added."""
        seed, isomap, fill = self._start(seed)
        logutil.log("MAPGEN", f"{self.name} len={isomap.len} seed={seed} generating slices")
        for x in range(isomap.len):
            fill(isomap.blocks[x], x)
            yield isomap.copy()


class _ConfiguredGenerator(Generator):
    config_class = SimpleConfig

    def __init__(self, config=None):
        self.config = config if config is not None else self.config_class()

    @property
    def len(self):
        return self.config.len

    def validate(self):
        self.config.validate()

    def with_len(self, len):
        return type(self)(self.config.with_len(len))

    def with_frequency(self, frequency):
        return type(self)(self.config.with_frequency(frequency))

    def __repr__(self):
        return f"{type(self).__name__}({self.config!r})"


class SimpleGenerator(_ConfiguredGenerator):
    """Fills the landscape with `Rock` only, up to a fractal noise height map."""

    name = 'simple'
    config_class = SimpleConfig

    def _prepare(self, rng):
        noise = FbmNoise(seed=rng.randint(0, MAX_SEED), frequency=self.config.frequency)
        heights = column_heights(noise, self.len)
        z = numpy.arange(self.len)

        def fill(slab, x):
            slab[z < heights[x][:, numpy.newaxis]] = ROCK
        return fill


class StratifiedGenerator(_ConfiguredGenerator):
    """Layers rock, soil, grass and water.

    Each run draws a water level in [0, max_water_level] and a soil line in
    [min_soil_cutoff, len). Columns below the water level are rock topped with
    water, columns below the soil line get a noisy soil layer and a single
    grass block, and anything higher is bare rock.
    """

    name = 'stratified'
    config_class = StratifiedConfig

    def with_layer_height(self, layer_height):
        return type(self)(self.config.with_layer_height(layer_height))

    def with_min_soil_cutoff(self, min_soil_cutoff):
        return type(self)(self.config.with_min_soil_cutoff(min_soil_cutoff))

    def with_max_water_level(self, max_water_level):
        return type(self)(self.config.with_max_water_level(max_water_level))

    def plan(self, seed):
        """The per-run randomness `generate(seed)` would draw."""
        return self._draw(numpy.random.RandomState(resolve_seed(seed)))

    def _draw(self, rng):
        cfg = self.config
        height_noise = FbmNoise(seed=rng.randint(0, MAX_SEED), frequency=cfg.frequency)
        layer_noise = AbsNoise(BillowNoise(seed=rng.randint(0, MAX_SEED), frequency=cfg.frequency))
        water_level = int(rng.randint(0, cfg.max_water_level + 1))
        soil_level = int(rng.randint(cfg.min_soil_cutoff, cfg.len))
        return StrataPlan(height_noise, layer_noise, water_level, soil_level)

    def _prepare(self, rng):
        cfg = self.config
        plan = self._draw(rng)
        water_level = plan.water_level
        soil_level = plan.soil_level
        logutil.log("MAPGEN", f"water_level={water_level} soil_level={soil_level}")

        coords = numpy.arange(cfg.len)
        heights = column_heights(plan.height_noise, cfg.len)
        # At least one block deep, so every soil band column gets its grass
        soil_depth = (plan.layer_noise.sample_grid(coords, coords) * cfg.layer_height).astype(numpy.int64)
        soil_depth = numpy.maximum(soil_depth, 1)
        z = coords

        def fill(slab, x):
            h = heights[x][:, numpy.newaxis]
            underwater = h < water_level
            soil_capable = ~underwater & (h < soil_level)
            bare = ~underwater & ~soil_capable

            # Rock, and then water up to the water level. The split is clamped
            # at 0 so a zero height column is all water.
            top = numpy.maximum(h - 1, 0)
            slab[underwater & (z < top)] = ROCK
            slab[underwater & (z >= top) & (z < water_level - 1)] = WATER

            # Rock, and then soil, then a single block of grass
            rock_height = numpy.maximum(h - soil_depth[x][:, numpy.newaxis], 0)
            slab[soil_capable & (z < rock_height)] = ROCK
            slab[soil_capable & (z >= rock_height) & (z < h - 1)] = SOIL
            slab[soil_capable & (z == h - 1) & (rock_height < h)] = GRASS

            # Just rock
            slab[bare & (z < h)] = ROCK
        return fill


class TestingGenerator(Generator):
    """A simple generator that produces a mostly flat map, for use in tests.

    The minimum size is 6; a smaller `dim` is pegged to 6. The lower half of
    the cube is rock, with a smaller square of rock on the layer above it.
    """

    name = 'testing'
    __test__ = False

    def __init__(self, dim=config.TESTING_MIN_DIM):
        self.dim = dim

    @property
    def len(self):
        return max(self.dim, config.TESTING_MIN_DIM)

    def _prepare(self, rng):
        dim = self.len
        halfway = dim // 2

        def fill(slab, x):
            slab[:, 0:halfway] = ROCK
            if 2 <= x < dim - 2:
                slab[2:dim - 2, halfway] = ROCK
        return fill


GENERATORS = {
    SimpleGenerator.name: SimpleGenerator,
    StratifiedGenerator.name: StratifiedGenerator,
    TestingGenerator.name: TestingGenerator,
}
