#
# Simplex noise for N dimensions, vectorised with numpy.
#
# Based on example code by Stefan Gustavson (stegu@itn.liu.se).
# Optimisations by Peter Eastman (peastman@drizzle.stanford.edu).
# Better rank ordering method by Stefan Gustavson in 2012.
#
# The original code was placed in the public domain by its author,
# Stefan Gustavson. You may use it as you see fit, but
# attribution is appreciated.
#
"""Coherent noise fields used by the terrain generators.

`SimplexNoise` is the raw noise primitive. Generators only talk to the
`NoiseField` interface (`sample`, `sample_points`, `sample_grid` plus the
`with_*` builder options), so the primitive can be swapped without touching
generator code.
"""
import itertools

import numpy

import config


p = numpy.array( [151,160,137,91,90,15,
    131,13,201,95,96,53,194,233,7,225,140,36,103,30,69,142,8,99,37,240,21,10,23,
    190, 6,148,247,120,234,75,0,26,197,62,94,252,219,203,117,35,11,32,57,177,33,
    88,237,149,56,87,174,20,125,136,171,168, 68,175,74,165,71,134,139,48,27,166,
    77,146,158,231,83,111,229,122,60,211,133,230,220,105,92,41,55,46,245,40,244,
    102,143,54, 65,25,63,161, 1,216,80,73,209,76,132,187,208, 89,18,169,200,196,
    135,130,116,188,159,86,164,100,109,198,173,186, 3,64,52,217,226,250,124,123,
    5,202,38,147,118,126,255,82,85,212,207,206,59,227,47,16,58,17,182,189,28,42,
    223,183,170,213,119,248,152, 2,44,154,163, 70,221,153,101,155,167, 43,172,9,
    129,22,39,253, 19,98,108,110,79,113,224,232,178,185, 112,104,218,246,97,228,
    251,34,242,193,238,210,144,12,191,179,162,241, 81,51,145,235,249,14,239,107,
    49,192,214, 31,181,199,106,157,184, 84,204,176,115,121,50,45,127, 4,150,254,
    138,236,205,93,222,114,67,29,24,72,243,141,128,195,78,66,215,61,156,180] )
# To remove the need for index wrapping, double the permutation table length
perm = numpy.arange(512,dtype='i2')
perm = p[perm & 255]

# Largest seed numpy.random.RandomState accepts.
MAX_SEED = 2**32 - 1


# returns floor of floating point array by coercing to integer
def fastfloor(x):
    return numpy.array(numpy.floor(x), dtype = numpy.int64)


#  # N-D simplex noise, better simplex rank ordering method 2012-03-09
class SimplexNoise:
    def __init__(self,seed=None):
        if seed is not None:
            p = numpy.random.RandomState(seed).permutation(256)
            # To remove the need for index wrapping, double the permutation table length
            perm0 = numpy.arange(512,dtype='i2')
            self.perm0 = p[perm0 & 255]
        else:
            self.perm0 = perm
        self.seed = seed

    def noise(self, Z):
        Z = numpy.asarray(Z, dtype=numpy.float64)
        # Skew the (x,y,z,w) space to determine which cell of simplices we're in
        N = Z.shape[-1] #number of dimensions
        N1 = N+1 # number of simplices
        Fn = 1.0*(N1**0.5 - 1)/N
        Gn = 1.0*(N1 - N1**0.5)/N/N1

        #skew the Z data and store in z0
        s = Z.sum(-1) * Fn # Factor for skewing
        cell = fastfloor(Z+s[:,numpy.newaxis])
        t = (cell.sum(-1) * Gn) # Factor for unskewing
        Z0 = cell - t[:,numpy.newaxis]
        z0 = Z - Z0
        # Lattice coordinates wrapped to the permutation size for hashing only
        i = numpy.mod(cell, 256)

        # Use magnitude ordering to determine the simplices that the point z0 is located in
        rank = numpy.zeros(Z.shape)
        for l,k in itertools.combinations(range(N),2):
            rank[:,k] += z0[:,k]>=z0[:,l]
            rank[:,l] += z0[:,k]<z0[:,l]

        # ind will contain the skewed indices of the N+1 simplices
        b = numpy.arange(N+1)[:,numpy.newaxis,numpy.newaxis]
        ind = rank>= N - b
        # zk contains the skewed locations of the N+1 simplices
        zk = z0 - ind + 1.0 * b * Gn

        indi = ind.astype(numpy.int64) + i
        # the gradients are randomly assigned to each simplex
        grad = ((0,-1,1),)*N
        grad = numpy.array(list(itertools.product(*grad))[1:])
        grad = grad[numpy.abs(grad).sum(-1)>=N-1]

        gik = 0
        for x in range(N-1,-1,-1):
            gik = self.perm0[indi[:,:,x] + gik]
        gik = gik%(grad.shape[0])
        # Calculate the contribution from the simplices
        tk = 0.5 - (zk*zk).sum(-1)
        tp = tk>=0
        tk = tp * tk * tk
        nk = tp * tk * tk * (grad[gik]*zk).sum(-1)

        # Sum up and scale the result to cover the range [-1,1]
        return nk.sum(0) * (2**6 )


class NoiseField(object):
    """Multi-octave noise with a fixed seed and base frequency.

    Octave ``k`` samples a `SimplexNoise` seeded with ``seed + k`` at
    ``frequency * lacunarity**k`` and is weighted by ``persistence**k``. The
    weighted sum is normalised and clipped to [-1, 1]. For a fixed seed the
    field is a pure function of the coordinate.
    """

    def __init__(self, seed=0, frequency=config.DEFAULT_FREQUENCY,
            octaves=config.NOISE_OCTAVES, lacunarity=config.NOISE_LACUNARITY,
            persistence=config.NOISE_PERSISTENCE):
        if octaves < 1:
            raise ValueError(f"octaves must be at least 1, got {octaves}")
        self.seed = int(seed)
        self.frequency = float(frequency)
        self.octaves = int(octaves)
        self.lacunarity = float(lacunarity)
        self.persistence = float(persistence)
        self._sources = [SimplexNoise(seed=(self.seed + k) % (MAX_SEED + 1))
            for k in range(self.octaves)]

    def _options(self):
        return dict(seed=self.seed, frequency=self.frequency, octaves=self.octaves,
            lacunarity=self.lacunarity, persistence=self.persistence)

    def _rebuild(self, **changes):
        options = self._options()
        options.update(changes)
        return type(self)(**options)

    def with_seed(self, seed):
        return self._rebuild(seed=seed)

    def with_frequency(self, frequency):
        return self._rebuild(frequency=frequency)

    def with_octaves(self, octaves):
        return self._rebuild(octaves=octaves)

    def with_lacunarity(self, lacunarity):
        return self._rebuild(lacunarity=lacunarity)

    def with_persistence(self, persistence):
        return self._rebuild(persistence=persistence)

    def _octave(self, values):
        return values

    def sample_points(self, points):
        """Sample an (M, 2) or (M, 3) array of coordinates, returning M values."""
        points = numpy.asarray(points, dtype=numpy.float64)
        if points.ndim != 2 or points.shape[1] not in (2, 3):
            raise ValueError(f"expected (M, 2) or (M, 3) coordinates, got {points.shape}")
        total = numpy.zeros(points.shape[0])
        amplitude = 1.0
        norm = 0.0
        frequency = self.frequency
        for source in self._sources:
            total += self._octave(source.noise(points * frequency)) * amplitude
            norm += amplitude
            amplitude *= self.persistence
            frequency *= self.lacunarity
        return numpy.clip(total / norm, -1.0, 1.0)

    def sample(self, x, y, z=None):
        point = [x, y] if z is None else [x, y, z]
        return float(self.sample_points([point])[0])

    def sample_grid(self, xs, ys):
        """Sample every (x, y) pair, returning an array indexed [x, y]."""
        xs = numpy.asarray(xs, dtype=numpy.float64)
        ys = numpy.asarray(ys, dtype=numpy.float64)
        X, Y = numpy.meshgrid(xs, ys, indexing='ij')
        points = numpy.stack([X.ravel(), Y.ravel()], axis=1)
        return self.sample_points(points).reshape(X.shape)

    def __repr__(self):
        return f"{type(self).__name__}(seed={self.seed}, frequency={self.frequency}, octaves={self.octaves})"


class FbmNoise(NoiseField):
    """Fractal brownian motion: plain sum of octaves, used for elevation."""


class BillowNoise(NoiseField):
    """Billowy noise: each octave is folded with ``2 * |n| - 1``."""

    def _octave(self, values):
        return 2.0 * numpy.abs(values) - 1.0


class AbsNoise(object):
    """Absolute value of another field. Billow returns negative values, this
    keeps a layer thickness in [0, 1]."""

    def __init__(self, source):
        self.source = source

    def sample_points(self, points):
        return numpy.abs(self.source.sample_points(points))

    def sample(self, x, y, z=None):
        return abs(self.source.sample(x, y, z))

    def sample_grid(self, xs, ys):
        return numpy.abs(self.source.sample_grid(xs, ys))

    def __repr__(self):
        return f"AbsNoise({self.source!r})"


if __name__ == '__main__':
    import time
    from PIL import Image

    t=time.time()
    n = FbmNoise(seed=3332, frequency=0.05).sample_grid(numpy.arange(128), numpy.arange(128))
    print('fbm grid',time.time()-t)
    print('STATS')
    print('######')
    print(n.min(),n.max(),numpy.average(n))
    n = numpy.array((n - n.min()) / (n.max()-n.min())*255,dtype='u1')
    im = Image.fromarray(n,'L')
    print(im.size)
    im.save('noise2.png')
