"""ObstacleMap — impassable grid cells derived from fractal noise.

The map samples a ``NoiseField`` at every cell centre of the arena grid
and marks a cell as an obstacle when the noise reaches the threshold.
Generation is a pure function of the map parameters; ``regenerate`` is
memoized so calling it every tick only costs a tuple comparison unless
a parameter actually changed.

Cells placed by hand (through the engine's placement API) are kept in
a separate set and survive regeneration.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

import numpy as np

from antrails.terrain.noise import NoiseField

if TYPE_CHECKING:
    from antrails.physics.collision import Box
    from antrails.simulation.config import MapParams
    from antrails.world.arena import Arena, Cell

logger = logging.getLogger(__name__)


@dataclass
class ObstacleMap:
    """Occupancy grid of obstacle cells.

    Attributes:
        arena: The arena whose grid this map occupies.
        noise: Noise sampler used for generation.
        generated: Cells produced by the last regeneration.
        placed: Cells added through the placement API.
        rebuilds: Number of regenerations performed.
    """

    arena: Arena
    noise: NoiseField = field(default_factory=NoiseField)
    generated: frozenset[Cell] = field(default_factory=frozenset)
    placed: set[Cell] = field(default_factory=set)
    rebuilds: int = 0
    _last_key: tuple[int, float, float, float, float] | None = field(
        default=None,
        init=False,
        repr=False,
    )

    def generate(self, params: MapParams) -> frozenset[Cell]:
        """Compute the obstacle cells for ``params`` without storing them.

        Args:
            params: Noise and threshold parameters.

        Returns:
            The set of ``(col, row)`` cells where noise >= threshold.
            Empty when ``params.octaves`` is zero.
        """
        if params.octaves <= 0:
            return frozenset()

        size = self.arena.cell_size
        cols = np.arange(self.arena.cols)
        rows = np.arange(self.arena.rows)
        xs = (cols + 0.5) * size
        ys = (rows + 0.5) * size
        values = self.noise.fractal(
            xs[None, :],
            ys[:, None],
            octaves=params.octaves,
            frequency=params.frequency,
            lacunarity=params.lacunarity,
            persistence=params.persistence,
        )
        row_idx, col_idx = np.nonzero(values >= params.threshold)
        return frozenset(
            (int(c), int(r)) for r, c in zip(row_idx, col_idx, strict=True)
        )

    def regenerate(self, params: MapParams) -> bool:
        """Rebuild the generated cells if any map parameter changed.

        The new set is computed in full before being assigned, so
        readers never observe a partially rebuilt map.

        Args:
            params: Current map parameters.

        Returns:
            True if a rebuild happened, False if the cached map was kept.
        """
        key = params.key
        if key == self._last_key:
            return False
        self.generated = self.generate(params)
        self._last_key = key
        self.rebuilds += 1
        logger.info(
            "obstacle map rebuilt: %d cells (octaves=%d frequency=%g "
            "lacunarity=%g persistence=%g threshold=%g)",
            len(self.generated),
            *key,
        )
        return True

    @property
    def cells(self) -> frozenset[Cell]:
        """All obstacle cells, generated and placed."""
        return self.generated | self.placed

    def __len__(self) -> int:
        return len(self.cells)

    def __iter__(self) -> Iterator[Cell]:
        return iter(sorted(self.cells, key=lambda c: (c[1], c[0])))

    def is_blocked(self, cell: Cell) -> bool:
        """Return True if ``cell`` is an obstacle."""
        return cell in self.generated or cell in self.placed

    def place(self, cell: Cell) -> None:
        """Mark a cell as an obstacle by hand.

        Raises:
            IndexError: If the cell lies outside the grid.
        """
        self._check_in_grid(cell)
        self.placed.add(cell)

    def remove(self, cell: Cell) -> None:
        """Clear a hand-placed or generated obstacle cell.

        Removing a generated cell only lasts until the next rebuild.

        Raises:
            IndexError: If the cell lies outside the grid.
        """
        self._check_in_grid(cell)
        self.placed.discard(cell)
        if cell in self.generated:
            self.generated = self.generated - {cell}

    def clear_around(self, x: float, y: float, radius: float) -> int:
        """Drop generated cells whose centre lies within ``radius``.

        Used to keep the area around Home walkable.

        Returns:
            Number of cells removed.
        """
        r2 = radius * radius
        keep = frozenset(
            cell
            for cell in self.generated
            if _dist2(self.arena.cell_center(cell), (x, y)) > r2
        )
        removed = len(self.generated) - len(keep)
        self.generated = keep
        return removed

    def cells_overlapping(self, box: Box) -> list[Cell]:
        """Return obstacle cells whose grid square intersects ``box``.

        Only the grid range covered by the box is scanned.  Cells are
        returned in row-major order (bottom row first).
        """
        size = self.arena.cell_size
        col_lo = max(0, math.floor(box.min_x / size))
        col_hi = min(self.arena.cols - 1, math.floor(box.max_x / size))
        row_lo = max(0, math.floor(box.min_y / size))
        row_hi = min(self.arena.rows - 1, math.floor(box.max_y / size))
        found: list[Cell] = []
        for row in range(row_lo, row_hi + 1):
            for col in range(col_lo, col_hi + 1):
                if self.is_blocked((col, row)):
                    found.append((col, row))
        return found

    def _check_in_grid(self, cell: Cell) -> None:
        if not self.arena.in_grid(cell):
            msg = (
                f"{cell} out of bounds for "
                f"{self.arena.cols}x{self.arena.rows} grid"
            )
            raise IndexError(msg)


def _dist2(a: tuple[float, float], b: tuple[float, float]) -> float:
    dx = a[0] - b[0]
    dy = a[1] - b[1]
    return dx * dx + dy * dy
