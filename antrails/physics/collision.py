"""Collision — AABB overlap tests and damped velocity response.

Ants are treated as axis-aligned squares.  When an ant's box overlaps
an obstacle cell or an arena wall, the face of minimum penetration is
found and the direction component driving the ant *into* that face is
flipped and damped to a tenth of its magnitude.  The ant's heading is
then recomputed from the adjusted direction vector.

Multiple overlaps in one tick are applied one after another; each
response sees the direction left by the previous one.
"""

from __future__ import annotations

import math
from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum, auto

# Fraction of the into-face component kept (with its sign flipped)
RESTITUTION = 0.1


class Collision(Enum):
    """Which face of the *other* box the ant hit.

    ``LEFT`` means the ant is on the obstacle's left side (it was moving
    in +x); ``BOTTOM`` means it is below the obstacle (moving in +y).
    """

    LEFT = auto()
    RIGHT = auto()
    TOP = auto()
    BOTTOM = auto()


@dataclass(frozen=True)
class Box:
    """An axis-aligned box given by its centre and full extents."""

    x: float
    y: float
    width: float
    height: float

    @property
    def min_x(self) -> float:
        return self.x - self.width / 2

    @property
    def max_x(self) -> float:
        return self.x + self.width / 2

    @property
    def min_y(self) -> float:
        return self.y - self.height / 2

    @property
    def max_y(self) -> float:
        return self.y + self.height / 2


def collide(a: Box, b: Box) -> Collision | None:
    """Test two boxes for overlap and classify the contact face.

    Args:
        a: The moving box (the ant).
        b: The static box (obstacle cell or wall).

    Returns:
        The face of ``b`` with the smallest penetration depth, or None
        if the boxes do not overlap.  Touching edges do not count.
    """
    if not (
        a.min_x < b.max_x
        and a.max_x > b.min_x
        and a.min_y < b.max_y
        and a.max_y > b.min_y
    ):
        return None

    depths = (
        (a.max_x - b.min_x, Collision.LEFT),
        (b.max_x - a.min_x, Collision.RIGHT),
        (a.max_y - b.min_y, Collision.BOTTOM),
        (b.max_y - a.min_y, Collision.TOP),
    )
    # min() keeps the first of equal depths, so ties resolve x before y
    return min(depths, key=lambda item: item[0])[1]


def damp_direction(
    dx: float,
    dy: float,
    collision: Collision,
) -> tuple[float, float]:
    """Flip and damp the direction component moving into a face.

    Components moving away from (or parallel to) the face are left
    untouched, so an ant already backing out is not pushed back in.

    Args:
        dx: Direction x component.
        dy: Direction y component.
        collision: The face that was hit.

    Returns:
        The adjusted ``(dx, dy)``.
    """
    match collision:
        case Collision.LEFT if dx > 0:
            dx = -RESTITUTION * dx
        case Collision.RIGHT if dx < 0:
            dx = -RESTITUTION * dx
        case Collision.BOTTOM if dy > 0:
            dy = -RESTITUTION * dy
        case Collision.TOP if dy < 0:
            dy = -RESTITUTION * dy
    return dx, dy


def broad_phase_rejects(a: Box, b: Box) -> bool:
    """Return True if ``a`` and ``b`` are too far apart to overlap.

    Uses the centre distance against the sum of both boxes' largest
    extents.  Two boxes that overlap always have centres closer than
    that, so rejecting here never hides a real contact.
    """
    reach = max(b.width, b.height) + max(a.width, a.height)
    dx = a.x - b.x
    dy = a.y - b.y
    return dx * dx + dy * dy > reach * reach


@dataclass
class CollisionResolver:
    """Applies collision response for one ant against a set of boxes.

    Attributes:
        contacts: Overlaps found since construction.
    """

    contacts: int = 0

    def resolve(
        self,
        ant_box: Box,
        heading: float,
        obstacles: Iterable[Box],
    ) -> tuple[float, list[Collision]]:
        """Resolve an ant's heading against every overlapping box.

        Args:
            ant_box: The ant's collision box.
            heading: The ant's current heading in radians.
            obstacles: Candidate boxes, in the order responses apply.

        Returns:
            The new heading and the list of faces hit (in order).  If
            nothing was hit the heading is returned unchanged.
        """
        dx = math.cos(heading)
        dy = math.sin(heading)
        hits: list[Collision] = []
        for box in obstacles:
            if broad_phase_rejects(ant_box, box):
                continue
            collision = collide(ant_box, box)
            if collision is None:
                continue
            hits.append(collision)
            dx, dy = damp_direction(dx, dy, collision)

        if not hits:
            return heading, hits
        self.contacts += len(hits)
        if dx == 0.0 and dy == 0.0:
            return heading, hits
        return math.atan2(dy, dx), hits
