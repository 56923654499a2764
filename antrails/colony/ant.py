"""Ant — a single foraging agent.

An ant is a point with a heading that moves at constant speed.  Its
whole behaviour state is whether it carries food; the id of the carried
item is stored explicitly on the ant rather than through any parent /
child scene graph.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

from antrails.physics.collision import Box

# Default edge length of an ant's collision box
ANT_SIZE = 5.0


def wrap_angle(angle: float) -> float:
    """Wrap an angle to the half-open interval (-pi, pi]."""
    wrapped = math.remainder(angle, 2.0 * math.pi)
    if wrapped == -math.pi:
        return math.pi
    return wrapped


@dataclass
class Ant:
    """A single ant agent.

    Attributes:
        ant_id: Unique identifier (never reused).
        x: World x position.
        y: World y position.
        heading: Movement direction in radians (0 = +x, pi/2 = +y).
        carrying_food: True while in the carrying phase.
        carried_item: Id of the carried Food, if any.
        size: Edge length of the collision box.
    """

    ant_id: int
    x: float
    y: float
    heading: float = 0.0
    carrying_food: bool = False
    carried_item: int | None = None
    size: float = ANT_SIZE

    @property
    def position(self) -> tuple[float, float]:
        return (self.x, self.y)

    @property
    def direction(self) -> tuple[float, float]:
        """Unit vector along the heading."""
        return (math.cos(self.heading), math.sin(self.heading))

    @property
    def box(self) -> Box:
        """Collision box centred on the ant."""
        return Box(self.x, self.y, self.size, self.size)

    def turn_around(self) -> None:
        """Rotate the heading by pi."""
        self.heading = wrap_angle(self.heading + math.pi)
