"""Arena — the bounded rectangle the colony lives in.

World coordinates run from ``(0, 0)`` at the bottom-left corner to
``(width, height)`` at the top-right, with y growing upward.  The arena
is tiled by a square grid of ``cell_size`` cells addressed as
``(col, row)``; the grid is what the obstacle map occupies.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

from antrails.physics.collision import Box

Cell = tuple[int, int]


@dataclass(frozen=True)
class Arena:
    """Arena bounds and the obstacle grid that tiles them.

    Attributes:
        width: Width in world units.
        height: Height in world units.
        cell_size: Edge length of one grid cell.
    """

    width: float
    height: float
    cell_size: float

    @property
    def cols(self) -> int:
        """Number of grid columns (partial cells at the edge count)."""
        return math.ceil(self.width / self.cell_size)

    @property
    def rows(self) -> int:
        """Number of grid rows."""
        return math.ceil(self.height / self.cell_size)

    def in_grid(self, cell: Cell) -> bool:
        """Return True if ``cell`` lies inside the grid."""
        col, row = cell
        return 0 <= col < self.cols and 0 <= row < self.rows

    def cell_at(self, x: float, y: float) -> Cell:
        """Return the cell containing world point ``(x, y)``.

        Points outside the arena map to out-of-grid cells; callers
        check with ``in_grid``.
        """
        return (math.floor(x / self.cell_size), math.floor(y / self.cell_size))

    def cell_center(self, cell: Cell) -> tuple[float, float]:
        """Return the world-space centre of a grid cell."""
        col, row = cell
        return ((col + 0.5) * self.cell_size, (row + 0.5) * self.cell_size)

    def cell_box(self, cell: Cell) -> Box:
        """Return the collision box of a grid cell."""
        cx, cy = self.cell_center(cell)
        return Box(cx, cy, self.cell_size, self.cell_size)

    def walls(self) -> list[Box]:
        """Return four boxes lining the outside of the arena.

        Walls are one cell thick.  Order is bottom, top, left, right.
        The boxes overhang the corners so an ant squeezed into a corner
        still hits both walls.
        """
        t = self.cell_size
        w, h = self.width, self.height
        return [
            Box(w / 2, -t / 2, w + 2 * t, t),
            Box(w / 2, h + t / 2, w + 2 * t, t),
            Box(-t / 2, h / 2, t, h + 2 * t),
            Box(w + t / 2, h / 2, t, h + 2 * t),
        ]
