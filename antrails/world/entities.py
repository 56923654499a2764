"""Static and carried world entities: food items and homes."""

from __future__ import annotations

from dataclasses import dataclass

# Radius within which an ant picks up a food item
FOOD_SIZE = 5.0
# Default capture radius of a Home
HOME_SIZE = 20.0


@dataclass
class Food:
    """A food item.

    Attributes:
        food_id: Unique identifier.
        x: World x position (follows the carrier while carried).
        y: World y position.
        carried_by: Id of the ant carrying it, or None if unclaimed.
    """

    food_id: int
    x: float
    y: float
    carried_by: int | None = None

    @property
    def position(self) -> tuple[float, float]:
        return (self.x, self.y)


@dataclass
class Home:
    """A nest where carried food is delivered.

    Attributes:
        home_id: Unique identifier.
        x: World x position.
        y: World y position.
        radius: Capture radius for deliveries.
        delivered: Food items delivered here so far.
    """

    home_id: int
    x: float
    y: float
    radius: float = HOME_SIZE
    delivered: int = 0

    @property
    def position(self) -> tuple[float, float]:
        return (self.x, self.y)
