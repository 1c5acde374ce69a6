"""Three dimensional block maps.

Order is (x, y, z), z+ is up. Although it's called `IsoMap`, there is nothing
inherently isometric about it, other than the fact it's intended to be
rendered in an isometric perspective.
"""
import numpy

from blocks import Material


class IsoMap(object):
    """A cube of `Material` codes stored in a numpy ``uint8`` array."""

    def __init__(self, blocks):
        blocks = numpy.asarray(blocks, dtype=numpy.uint8)
        if blocks.ndim != 3 or len(set(blocks.shape)) != 1:
            raise ValueError(f"map must be a cube, got shape {blocks.shape}")
        self.blocks = blocks

    @classmethod
    def new_empty(cls, len):
        """Create a cube-shaped map with `len` blocks along every edge, all `Empty`."""
        if len < 1:
            raise ValueError(f"map edge length must be at least 1, got {len}")
        return cls(numpy.zeros((len, len, len), dtype=numpy.uint8))

    @property
    def len(self):
        """Edge length; every edge of the cube is the same."""
        return self.blocks.shape[0]

    def __len__(self):
        return self.len

    @property
    def shape(self):
        return self.blocks.shape

    def __getitem__(self, pos):
        return Material(int(self.blocks[pos]))

    def __setitem__(self, pos, material):
        self.blocks[pos] = int(material)

    def __eq__(self, other):
        if not isinstance(other, IsoMap):
            return NotImplemented
        return numpy.array_equal(self.blocks, other.blocks)

    __hash__ = None

    def __repr__(self):
        return f"IsoMap(len={self.len})"

    def copy(self):
        return IsoMap(self.blocks.copy())

    def column(self, x, y):
        """Materials of the column at (x, y), bottom first."""
        return [Material(int(v)) for v in self.blocks[x, y]]

    def fill(self, material, x=slice(None), y=slice(None), z=slice(None)):
        self.blocks[x, y, z] = int(material)

    def heights(self):
        """Per-column index one past the topmost non-empty block (0 for empty columns)."""
        filled = self.blocks != Material.Empty
        any_filled = filled.any(axis=2)
        top_from_rev = numpy.argmax(filled[:, :, ::-1], axis=2)
        return numpy.where(any_filled, self.len - top_from_rev, 0)

    def counts(self):
        codes, counts = numpy.unique(self.blocks, return_counts=True)
        return {Material(int(c)): int(n) for c, n in zip(codes, counts)}

    def materials(self):
        """Non-empty materials present anywhere in the map."""
        return {m for m in self.counts() if m is not Material.Empty}

    def layers(self):
        """Yield (z, layer) pairs bottom to top, where layer is an (x, y) view."""
        for z in range(self.len):
            yield z, self.blocks[:, :, z]
