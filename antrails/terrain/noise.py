"""NoiseField — deterministic fractal gradient noise.

Classic 2D Perlin-style gradient noise over a seeded permutation table,
summed over octaves (fractal Brownian motion).  Sampling is vectorized
with NumPy so a whole obstacle grid is evaluated in one call.
"""

from __future__ import annotations

from dataclasses import dataclass, field

import numpy as np
from numpy.typing import ArrayLike, NDArray

# Eight unit-ish gradient directions (axes + diagonals)
_GRADIENTS = np.array(
    [
        (1.0, 0.0),
        (-1.0, 0.0),
        (0.0, 1.0),
        (0.0, -1.0),
        (1.0, 1.0),
        (-1.0, 1.0),
        (1.0, -1.0),
        (-1.0, -1.0),
    ],
    dtype=np.float64,
) / np.array([1.0, 1.0, 1.0, 1.0, 2**0.5, 2**0.5, 2**0.5, 2**0.5])[:, None]


def _fade(t: NDArray[np.float64]) -> NDArray[np.float64]:
    """Quintic smoothstep ``6t^5 - 15t^4 + 10t^3``."""
    return t * t * t * (t * (t * 6.0 - 15.0) + 10.0)


@dataclass
class NoiseField:
    """Seeded gradient-noise sampler.

    Attributes:
        seed: Seed for the permutation table.  Same seed, same noise.
    """

    seed: int = 0
    _perm: NDArray[np.int64] = field(init=False, repr=False)

    def __post_init__(self) -> None:
        """Build the doubled permutation table from the seed."""
        rng = np.random.default_rng(self.seed)
        perm = rng.permutation(256).astype(np.int64)
        self._perm = np.concatenate([perm, perm])

    def sample(self, x: ArrayLike, y: ArrayLike) -> NDArray[np.float64]:
        """Sample single-octave noise at ``(x, y)``.

        Args:
            x: X coordinates (scalar or array).
            y: Y coordinates, broadcastable against ``x``.

        Returns:
            Noise values in roughly [-1, 1]; zero at integer lattice
            points.
        """
        x = np.asarray(x, dtype=np.float64)
        y = np.asarray(y, dtype=np.float64)
        x0 = np.floor(x)
        y0 = np.floor(y)
        fx = x - x0
        fy = y - y0
        xi = x0.astype(np.int64) & 255
        yi = y0.astype(np.int64) & 255

        perm = self._perm

        def corner(dx: int, dy: int) -> NDArray[np.float64]:
            h = perm[perm[xi + dx] + yi + dy] & 7
            g = _GRADIENTS[h]
            return g[..., 0] * (fx - dx) + g[..., 1] * (fy - dy)

        u = _fade(fx)
        v = _fade(fy)
        bottom = corner(0, 0) + u * (corner(1, 0) - corner(0, 0))
        top = corner(0, 1) + u * (corner(1, 1) - corner(0, 1))
        # Gradients are unit length, so the raw range is +/- sqrt(2)/2
        return (bottom + v * (top - bottom)) * 2**0.5

    def fractal(
        self,
        x: ArrayLike,
        y: ArrayLike,
        *,
        octaves: int,
        frequency: float,
        lacunarity: float,
        persistence: float,
    ) -> NDArray[np.float64]:
        """Sample multi-octave fractal noise.

        Octave ``k`` samples at ``frequency * lacunarity**k`` with
        amplitude ``persistence**k``.  The sum is divided by the total
        amplitude, keeping the output in roughly [-1, 1] regardless of
        the octave count.

        Args:
            x: X coordinates in world units.
            y: Y coordinates in world units.
            octaves: Number of layers; zero returns all zeros.
            frequency: Base frequency.
            lacunarity: Frequency multiplier per octave.
            persistence: Amplitude multiplier per octave.

        Returns:
            Array of noise values broadcast from ``x`` and ``y``.
        """
        x = np.asarray(x, dtype=np.float64)
        y = np.asarray(y, dtype=np.float64)
        total = np.zeros(np.broadcast(x, y).shape, dtype=np.float64)
        if octaves <= 0:
            return total

        amplitude = 1.0
        freq = frequency
        norm = 0.0
        for octave in range(octaves):
            # Offset each octave so lattice zeros don't line up
            shift = 31.7 * octave
            total += amplitude * self.sample(x * freq + shift, y * freq + shift)
            norm += amplitude
            amplitude *= persistence
            freq *= lacunarity
        if norm == 0.0:
            return total
        return total / norm
