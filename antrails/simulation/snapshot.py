"""Snapshot — read-only state handed to renderers and other observers.

Observers never touch the live entity tables; they get copies of the
positions and derived values (such as trail alpha) they need to draw.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

import numpy as np
from numpy.typing import NDArray

if TYPE_CHECKING:
    from antrails.simulation.engine import SimulationEngine
    from antrails.world.arena import Cell


@dataclass(frozen=True)
class WorldSnapshot:
    """Copy of the observable simulation state after a tick.

    Attributes:
        tick: Ticks completed.
        ants: ``(N, 4)`` rows of x, y, heading, carrying (0/1).
        foods: ``(M, 2)`` food positions.
        homes: ``(H, 3)`` rows of x, y, radius.
        trail_positions: ``(K, 2)`` marker positions.
        trail_types: ``(K,)`` marker type codes.
        trail_alphas: ``(K,)`` render alpha per marker.
        obstacles: Obstacle cells in row-major order.
    """

    tick: int
    ants: NDArray[np.float64]
    foods: NDArray[np.float64]
    homes: NDArray[np.float64]
    trail_positions: NDArray[np.float64]
    trail_types: NDArray[np.int8]
    trail_alphas: NDArray[np.float64]
    obstacles: tuple[Cell, ...]

    @classmethod
    def capture(cls, engine: SimulationEngine) -> WorldSnapshot:
        """Copy the current state of ``engine``."""
        store = engine.store
        ants = np.array(
            [
                (a.x, a.y, a.heading, float(a.carrying_food))
                for a in store.iter_ants()
            ],
            dtype=np.float64,
        ).reshape(-1, 4)
        foods = np.array(
            [f.position for f in store.iter_foods()],
            dtype=np.float64,
        ).reshape(-1, 2)
        homes = np.array(
            [(h.x, h.y, h.radius) for h in store.iter_homes()],
            dtype=np.float64,
        ).reshape(-1, 3)
        trails = engine.trails
        return cls(
            tick=engine.tick,
            ants=ants,
            foods=foods,
            homes=homes,
            trail_positions=trails.positions.copy(),
            trail_types=trails.types.copy(),
            trail_alphas=trails.alphas(),
            obstacles=tuple(engine.obstacles),
        )
