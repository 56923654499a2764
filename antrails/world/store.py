"""EntityStore — id-keyed tables for ants, food, and homes.

All entities draw ids from one shared counter, so an id identifies an
entity regardless of its kind.  Iteration is always in ascending id
order, which keeps every per-tick loop deterministic.
"""

from __future__ import annotations

import itertools
from collections.abc import Iterator
from dataclasses import dataclass, field

from antrails.colony.ant import ANT_SIZE, Ant
from antrails.world.entities import HOME_SIZE, Food, Home


@dataclass
class EntityStore:
    """Handle tables for every non-grid entity.

    Attributes:
        ants: Ants keyed by id.
        foods: Food items keyed by id.
        homes: Homes keyed by id.
    """

    ants: dict[int, Ant] = field(default_factory=dict)
    foods: dict[int, Food] = field(default_factory=dict)
    homes: dict[int, Home] = field(default_factory=dict)
    _ids: Iterator[int] = field(
        default_factory=lambda: itertools.count(1),
        repr=False,
    )

    def add_ant(
        self,
        x: float,
        y: float,
        heading: float = 0.0,
        size: float = ANT_SIZE,
    ) -> Ant:
        """Create and register an ant."""
        ant = Ant(ant_id=next(self._ids), x=x, y=y, heading=heading, size=size)
        self.ants[ant.ant_id] = ant
        return ant

    def add_food(self, x: float, y: float) -> Food:
        """Create and register an unclaimed food item."""
        food = Food(food_id=next(self._ids), x=x, y=y)
        self.foods[food.food_id] = food
        return food

    def add_home(self, x: float, y: float, radius: float = HOME_SIZE) -> Home:
        """Create and register a home."""
        home = Home(home_id=next(self._ids), x=x, y=y, radius=radius)
        self.homes[home.home_id] = home
        return home

    def remove(self, entity_id: int) -> Food | Home:
        """Remove a food item or home by id.

        Removing a carried food item also clears its carrier's state.

        Args:
            entity_id: Id of the food or home.

        Returns:
            The removed entity.

        Raises:
            ValueError: If the id belongs to an ant.
            KeyError: If no entity has this id.
        """
        if entity_id in self.ants:
            msg = f"ant {entity_id} cannot be removed"
            raise ValueError(msg)
        if entity_id in self.foods:
            food = self.foods.pop(entity_id)
            if food.carried_by is not None:
                carrier = self.ants[food.carried_by]
                carrier.carrying_food = False
                carrier.carried_item = None
            return food
        if entity_id in self.homes:
            return self.homes.pop(entity_id)
        msg = f"no entity with id {entity_id}"
        raise KeyError(msg)

    def iter_ants(self) -> list[Ant]:
        """Return ants in ascending id order."""
        return [self.ants[k] for k in sorted(self.ants)]

    def iter_foods(self) -> list[Food]:
        """Return food items in ascending id order."""
        return [self.foods[k] for k in sorted(self.foods)]

    def iter_homes(self) -> list[Home]:
        """Return homes in ascending id order."""
        return [self.homes[k] for k in sorted(self.homes)]
