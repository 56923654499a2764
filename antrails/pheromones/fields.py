"""TrailField — decaying pheromone markers dropped by ants.

Markers are stored struct-of-arrays style: one NumPy array each for
positions, type codes, and strengths.  Sensing runs as a single
vectorized distance computation per ant, and decay is one in-place
multiply followed by a boolean cull.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

import numpy as np
from numpy.typing import ArrayLike, NDArray

# Markers weaker than this are removed
CULL_THRESHOLD = 0.01


class TrailType(Enum):
    """Marker channels.

    ``GATHERING`` markers are laid by ants still searching and lead back
    toward Home.  ``GOT_FOOD`` markers are laid by ants carrying food and
    lead back toward the food source.
    """

    GATHERING = 0
    GOT_FOOD = 1


@dataclass(frozen=True)
class TrailMarker:
    """A read-only view of one marker.

    Attributes:
        x: World x position.
        y: World y position.
        ttype: Marker channel.
        strength: Current strength in (0, 1].
    """

    x: float
    y: float
    ttype: TrailType
    strength: float


@dataclass
class TrailField:
    """All live trail markers.

    Attributes:
        positions: ``(N, 2)`` marker positions.
        types: ``(N,)`` ``TrailType`` values as integers.
        strengths: ``(N,)`` marker strengths.
    """

    positions: NDArray[np.float64] = field(
        default_factory=lambda: np.zeros((0, 2), dtype=np.float64),
    )
    types: NDArray[np.int8] = field(
        default_factory=lambda: np.zeros(0, dtype=np.int8),
    )
    strengths: NDArray[np.float64] = field(
        default_factory=lambda: np.zeros(0, dtype=np.float64),
    )

    def __len__(self) -> int:
        return int(self.strengths.shape[0])

    def spawn(
        self,
        position: tuple[float, float],
        ttype: TrailType,
        initial_strength: float,
    ) -> None:
        """Insert a single marker.

        Args:
            position: World ``(x, y)``.
            ttype: Marker channel.
            initial_strength: Starting strength.
        """
        self.spawn_many([position], [ttype], initial_strength)

    def spawn_many(
        self,
        positions: ArrayLike,
        ttypes: list[TrailType],
        initial_strength: float,
    ) -> None:
        """Insert a batch of markers sharing one starting strength.

        Args:
            positions: ``(K, 2)`` world positions.
            ttypes: One channel per position.
            initial_strength: Starting strength for every new marker.
        """
        if len(ttypes) == 0:
            return
        new_pos = np.asarray(positions, dtype=np.float64).reshape(-1, 2)
        if new_pos.shape[0] != len(ttypes):
            msg = f"{new_pos.shape[0]} positions but {len(ttypes)} types"
            raise ValueError(msg)
        new_types = np.array([t.value for t in ttypes], dtype=np.int8)
        new_str = np.full(len(ttypes), initial_strength, dtype=np.float64)
        self.positions = np.concatenate([self.positions, new_pos])
        self.types = np.concatenate([self.types, new_types])
        self.strengths = np.concatenate([self.strengths, new_str])

    def decay(self, rate: float) -> int:
        """Multiply every strength by ``rate`` and cull weak markers.

        Args:
            rate: Per-tick multiplier in (0, 1].

        Returns:
            Number of markers removed.
        """
        self.strengths *= rate
        return self.cull()

    def cull(self) -> int:
        """Remove markers with strength below ``CULL_THRESHOLD``.

        Returns:
            Number of markers removed.
        """
        keep = self.strengths >= CULL_THRESHOLD
        removed = len(self) - int(keep.sum())
        if removed:
            self.positions = self.positions[keep]
            self.types = self.types[keep]
            self.strengths = self.strengths[keep]
        return removed

    def sense(
        self,
        points: ArrayLike,
        ttype: TrailType,
        radius: float,
    ) -> NDArray[np.float64]:
        """Sum strengths of markers near each sensor point.

        Only markers of ``ttype`` whose distance to a point is strictly
        less than ``radius`` contribute to that point.

        Args:
            points: ``(S, 2)`` sensor positions.
            ttype: Channel to sense.
            radius: Sensing radius; zero senses nothing.

        Returns:
            ``(S,)`` accumulated strengths.
        """
        pts = np.asarray(points, dtype=np.float64).reshape(-1, 2)
        out = np.zeros(pts.shape[0], dtype=np.float64)
        if radius <= 0 or len(self) == 0:
            return out
        mask = self.types == ttype.value
        if not mask.any():
            return out
        pos = self.positions[mask]
        strength = self.strengths[mask]
        diff = pts[:, None, :] - pos[None, :, :]
        d2 = np.einsum("skd,skd->sk", diff, diff)
        near = d2 < radius * radius
        return (near * strength[None, :]).sum(axis=1)

    def alphas(self) -> NDArray[np.float64]:
        """Return a render alpha per marker (its strength, clipped)."""
        return np.clip(self.strengths, 0.0, 1.0)

    def markers(self) -> list[TrailMarker]:
        """Return every marker as a ``TrailMarker`` view."""
        return [
            TrailMarker(
                x=float(p[0]),
                y=float(p[1]),
                ttype=TrailType(int(t)),
                strength=float(s),
            )
            for p, t, s in zip(
                self.positions,
                self.types,
                self.strengths,
                strict=True,
            )
        ]
