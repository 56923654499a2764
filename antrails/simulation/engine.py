"""SimulationEngine — the fixed-timestep tick loop.

Owns all simulation state and advances it with ``step(dt)``, which runs
these phases exactly once, in this order:

0. Regenerate the obstacle map if a map parameter changed (memoized)
1. Movement: steer every ant from the pre-tick snapshot
2. Collision: damp headings against obstacle cells and arena walls
3. Foraging: pick-ups and deliveries
4. Trail spawn: ants whose emission slot is due drop a marker
5. Trail decay: weaken every marker and cull the faded ones

Later phases consume state written by earlier ones, so the order is
fixed.  The trail field is only read during movement and only written
in phases 4 and 5.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field

import numpy as np
from numpy.random import Generator

from antrails.colony.ant import Ant
from antrails.colony.foraging import ForagingReport, ForagingStateMachine
from antrails.colony.steering import SteeringController
from antrails.pheromones.emission import frame_count, should_emit
from antrails.pheromones.fields import TrailField, TrailType
from antrails.physics.collision import CollisionResolver
from antrails.simulation.config import SimulationConfig, SimulationParameters
from antrails.simulation.snapshot import WorldSnapshot
from antrails.terrain.noise import NoiseField
from antrails.terrain.obstacles import ObstacleMap
from antrails.world.arena import Arena, Cell
from antrails.world.entities import HOME_SIZE, Food, Home
from antrails.world.store import EntityStore

logger = logging.getLogger(__name__)

DEFAULT_DT = 1.0 / 60.0


@dataclass
class SimulationEngine:
    """Drives the simulation forward tick by tick.

    Attributes:
        config: Startup configuration.
        params: Parameters used by the next ``step``.
        arena: Arena bounds and obstacle grid geometry.
        store: Ant, food and home tables.
        obstacles: Procedural plus hand-placed obstacle cells.
        trails: Live trail markers.
        rng: Seeded generator for headings and wandering.
        tick: Ticks completed.
        picked_up: Total food pick-ups so far.
        delivered: Total food deliveries so far.
    """

    config: SimulationConfig
    params: SimulationParameters = field(init=False)
    arena: Arena = field(init=False)
    store: EntityStore = field(init=False, default_factory=EntityStore)
    obstacles: ObstacleMap = field(init=False)
    trails: TrailField = field(init=False, default_factory=TrailField)
    rng: Generator = field(init=False)
    tick: int = 0
    picked_up: int = 0
    delivered: int = 0
    _steering: SteeringController = field(
        init=False,
        repr=False,
        default_factory=SteeringController,
    )
    _collisions: CollisionResolver = field(
        init=False,
        repr=False,
        default_factory=CollisionResolver,
    )
    _foraging: ForagingStateMachine = field(
        init=False,
        repr=False,
        default_factory=ForagingStateMachine,
    )

    def __post_init__(self) -> None:
        """Build arena, obstacle map, and RNG from config."""
        self.params = self.config.params.validate()
        self.rng = np.random.default_rng(self.config.seed)
        arena_cfg = self.config.arena
        self.arena = Arena(
            width=arena_cfg.width,
            height=arena_cfg.height,
            cell_size=arena_cfg.cell_size,
        )
        self.obstacles = ObstacleMap(
            arena=self.arena,
            noise=NoiseField(seed=self.config.seed),
        )
        self.obstacles.regenerate(self.params.map)
        logger.info(
            "engine ready: arena %gx%g, %dx%d grid, seed %d",
            self.arena.width,
            self.arena.height,
            self.arena.cols,
            self.arena.rows,
            self.config.seed,
        )

    # -- Placement API ---------------------------------------------------------

    def spawn_ant(
        self,
        position: tuple[float, float],
        heading: float | None = None,
    ) -> Ant:
        """Create an ant; a missing heading is drawn uniformly at random."""
        if heading is None:
            heading = float(self.rng.uniform(-math.pi, math.pi))
        x, y = position
        return self.store.add_ant(x, y, heading, size=self.config.arena.ant_size)

    def spawn_food(self, position: tuple[float, float]) -> Food:
        """Place an unclaimed food item."""
        x, y = position
        return self.store.add_food(x, y)

    def spawn_home(
        self,
        position: tuple[float, float],
        radius: float = HOME_SIZE,
    ) -> Home:
        """Place a home and clear generated obstacles under it."""
        x, y = position
        home = self.store.add_home(x, y, radius)
        self.obstacles.clear_around(x, y, radius)
        return home

    def spawn_obstacle(self, cell: Cell) -> None:
        """Mark a grid cell as an obstacle.

        Raises:
            IndexError: If the cell is outside the grid.
        """
        self.obstacles.place(cell)

    def remove_obstacle(self, cell: Cell) -> None:
        """Clear an obstacle cell.

        Raises:
            IndexError: If the cell is outside the grid.
        """
        self.obstacles.remove(cell)

    def despawn(self, entity_id: int) -> None:
        """Remove a food item or home.

        Raises:
            KeyError: If no entity has this id.
            ValueError: If the id belongs to an ant.
        """
        self.store.remove(entity_id)

    def populate(self) -> None:
        """Create the home, ants, and scattered food described by config.

        Food is placed uniformly at random on free cells away from home.
        """
        colony = self.config.colony
        home = self.spawn_home((colony.home_x, colony.home_y))
        for _ in range(colony.ants):
            self.spawn_ant(home.position)

        placed = 0
        attempts = 0
        while placed < colony.food and attempts < colony.food * 100:
            attempts += 1
            x = float(self.rng.uniform(0.0, self.arena.width))
            y = float(self.rng.uniform(0.0, self.arena.height))
            if self.obstacles.is_blocked(self.arena.cell_at(x, y)):
                continue
            if math.hypot(x - home.x, y - home.y) < home.radius * 2:
                continue
            self.spawn_food((x, y))
            placed += 1
        if placed < colony.food:
            logger.warning(
                "placed only %d of %d food items; arena too crowded",
                placed,
                colony.food,
            )

    # -- Tick loop -------------------------------------------------------------

    def step(
        self,
        dt: float = DEFAULT_DT,
        params: SimulationParameters | None = None,
    ) -> ForagingReport:
        """Advance the simulation by one tick.

        Args:
            dt: Tick duration in seconds.
            params: Replacement parameters, validated before use.  When
                omitted the previous parameters are kept.

        Returns:
            The pick-ups and deliveries made during this tick.

        Raises:
            ValueError: If ``dt`` is not positive.
            ConfigError: If ``params`` fails validation.
        """
        if dt <= 0:
            msg = f"dt must be positive, got {dt}"
            raise ValueError(msg)
        if params is not None and params is not self.params:
            self.params = params.validate()

        # 0. Obstacle map (no-op unless map parameters changed)
        if self.obstacles.regenerate(self.params.map):
            for home in self.store.iter_homes():
                self.obstacles.clear_around(home.x, home.y, home.radius)

        ants = self.store.iter_ants()

        # 1. Movement
        self._steering.steer_all(ants, self.trails, self.params, dt, self.rng)

        # 2. Collision
        self._resolve_collisions(ants)

        # 3. Foraging
        report = self._foraging.update(self.store)
        self.picked_up += len(report.picked_up)
        self.delivered += len(report.delivered)

        # 4. Trail spawn
        self._spawn_trails(ants, dt)

        # 5. Trail decay
        self.trails.decay(self.params.trail.decay_rate)

        self.tick += 1
        return report

    def run(self, ticks: int, dt: float = DEFAULT_DT) -> None:
        """Run the simulation for a fixed number of ticks.

        Args:
            ticks: Number of ticks to advance.
            dt: Tick duration in seconds.
        """
        for _ in range(ticks):
            self.step(dt)

    @property
    def collision_contacts(self) -> int:
        """Ant contacts with walls or obstacle cells since construction."""
        return self._collisions.contacts

    def snapshot(self) -> WorldSnapshot:
        """Return a read-only copy of the observable state."""
        return WorldSnapshot.capture(self)

    def _resolve_collisions(self, ants: list[Ant]) -> None:
        """Damp each ant's heading against walls, then obstacle cells."""
        walls = self.arena.walls()
        for ant in ants:
            box = ant.box
            candidates = walls + [
                self.arena.cell_box(cell)
                for cell in self.obstacles.cells_overlapping(box)
            ]
            ant.heading, _ = self._collisions.resolve(box, ant.heading, candidates)

    def _spawn_trails(self, ants: list[Ant], dt: float) -> None:
        """Drop one marker for every ant whose emission slot is now."""
        frames = frame_count(self.params.trail.spawn_period, dt)
        positions: list[tuple[float, float]] = []
        types: list[TrailType] = []
        for ant in ants:
            if should_emit(ant.ant_id, self.tick, frames):
                positions.append(ant.position)
                types.append(
                    TrailType.GOT_FOOD if ant.carrying_food else TrailType.GATHERING,
                )
        self.trails.spawn_many(positions, types, self.params.trail.initial_strength)
