"""SteeringController — heading updates from wandering and trail sensing.

Each tick, for every ant:

1. Integrate the position along the current heading (explicit Euler).
2. Place three sensor points ahead of the ant: straight ahead and
   rotated by +/- ``sensor.angle``, all at ``sensor.distance``.
3. Sum the strength of nearby markers of the channel that attracts the
   ant's current phase into each sensor.  Searching ants follow
   ``GOT_FOOD`` trails toward food; carrying ants follow ``GATHERING``
   trails toward Home.
4. Weight each sensor's local offset by its reading.  The signed angle
   of the summed vector, scaled by ``sensor.turning_coefficient``, is
   the turning angle.  A zero vector turns by exactly zero.
5. Add a fresh uniform wandering draw scaled by ``ant.wandering``.

All ants are steered from the same pre-tick snapshot and the results
are committed together, so no ant observes another's update within
one tick.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import TYPE_CHECKING

import numpy as np
from numpy.typing import NDArray

from antrails.colony.ant import wrap_angle
from antrails.pheromones.fields import TrailType

if TYPE_CHECKING:
    from numpy.random import Generator

    from antrails.colony.ant import Ant
    from antrails.pheromones.fields import TrailField
    from antrails.simulation.config import SimulationParameters


@dataclass(frozen=True)
class SteeringResult:
    """New kinematic state for one ant, not yet committed."""

    ant_id: int
    x: float
    y: float
    heading: float


def attractive_trail(carrying_food: bool) -> TrailType:
    """Return the trail channel an ant in the given phase follows."""
    return TrailType.GATHERING if carrying_food else TrailType.GOT_FOOD


def sensor_offsets(angle: float, distance: float) -> NDArray[np.float64]:
    """Return the three sensor offsets in the ant's local frame.

    Row order is centre, left (+angle), right (-angle); the local +x
    axis is the ant's forward direction.
    """
    c = math.cos(angle) * distance
    s = math.sin(angle) * distance
    return np.array([(distance, 0.0), (c, s), (c, -s)], dtype=np.float64)


def sensor_points(
    x: float,
    y: float,
    heading: float,
    offsets: NDArray[np.float64],
) -> NDArray[np.float64]:
    """Transform local sensor offsets into world space."""
    cos_h = math.cos(heading)
    sin_h = math.sin(heading)
    rotation = np.array([(cos_h, -sin_h), (sin_h, cos_h)], dtype=np.float64)
    return offsets @ rotation.T + np.array([x, y])


def turning_angle(
    offsets: NDArray[np.float64],
    magnitudes: NDArray[np.float64],
    coefficient: float,
) -> float:
    """Return the scaled signed angle of the magnitude-weighted offsets.

    Args:
        offsets: ``(3, 2)`` local sensor offsets.
        magnitudes: ``(3,)`` sensor readings.
        coefficient: Turning coefficient.

    Returns:
        Turning angle in radians; exactly 0.0 for a zero-length vector.
    """
    tx, ty = (offsets * magnitudes[:, None]).sum(axis=0)
    if tx == 0.0 and ty == 0.0:
        return 0.0
    # Angle from the local forward axis (1, 0) to the turning vector
    return math.atan2(ty, tx) * coefficient


@dataclass
class SteeringController:
    """Computes per-tick movement for every ant."""

    def steer(
        self,
        ant: Ant,
        trails: TrailField,
        params: SimulationParameters,
        dt: float,
        wander_draw: float,
    ) -> SteeringResult:
        """Compute one ant's next position and heading.

        Args:
            ant: The ant (read only).
            trails: Trail markers (read only).
            params: Current simulation parameters.
            dt: Tick duration in seconds.
            wander_draw: Uniform sample in [-1, 1) for this ant and tick.

        Returns:
            The ant's new position and heading.
        """
        dx, dy = ant.direction
        step = params.ant.speed * dt
        x = ant.x + dx * step
        y = ant.y + dy * step

        sensor = params.sensor
        offsets = sensor_offsets(sensor.angle, sensor.distance)
        turn = 0.0
        if sensor.radius > 0:
            points = sensor_points(x, y, ant.heading, offsets)
            magnitudes = trails.sense(
                points,
                attractive_trail(ant.carrying_food),
                sensor.radius,
            )
            turn = turning_angle(offsets, magnitudes, sensor.turning_coefficient)

        wander = wander_draw * params.ant.wandering
        heading = math.atan2(dy, dx) + turn + wander
        return SteeringResult(ant.ant_id, x, y, wrap_angle(heading))

    def steer_all(
        self,
        ants: list[Ant],
        trails: TrailField,
        params: SimulationParameters,
        dt: float,
        rng: Generator,
    ) -> list[SteeringResult]:
        """Compute and commit movement for every ant.

        Wandering draws are taken in the order of ``ants`` so a seeded
        generator yields a reproducible run.

        Args:
            ants: Ants in iteration order.
            trails: Trail markers (read only during this phase).
            params: Current simulation parameters.
            dt: Tick duration in seconds.
            rng: Random source for wandering.

        Returns:
            The committed results, one per ant, in the same order.
        """
        draws = rng.uniform(-1.0, 1.0, size=len(ants))
        results = [
            self.steer(ant, trails, params, dt, float(draw))
            for ant, draw in zip(ants, draws, strict=True)
        ]
        for ant, result in zip(ants, results, strict=True):
            ant.x = result.x
            ant.y = result.y
            ant.heading = result.heading
        return results
