"""ForagingStateMachine — pick up food, carry it home, deliver it.

Two phases per ant:

- ``GATHERING`` (not carrying): reaching an unclaimed food item attaches
  it to the ant and turns the ant around.
- ``CARRYING``: reaching a Home destroys the carried food, clears the
  carrying flag, and turns the ant around again.

A claimed set guards each tick so one food item never goes to two
ants.  Ants are visited in ascending id order, so when several ants
reach the same item in one tick the lowest id wins.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from antrails.world.entities import FOOD_SIZE

if TYPE_CHECKING:
    from antrails.colony.ant import Ant
    from antrails.world.entities import Food, Home
    from antrails.world.store import EntityStore

logger = logging.getLogger(__name__)


@dataclass
class ForagingReport:
    """What happened during one foraging pass.

    Attributes:
        picked_up: ``(ant_id, food_id)`` pairs attached this tick.
        delivered: ``(ant_id, food_id, home_id)`` deliveries this tick.
    """

    picked_up: list[tuple[int, int]]
    delivered: list[tuple[int, int, int]]


def _within(ax: float, ay: float, bx: float, by: float, radius: float) -> bool:
    dx = ax - bx
    dy = ay - by
    return dx * dx + dy * dy < radius * radius


@dataclass
class ForagingStateMachine:
    """Applies phase transitions for every ant.

    Attributes:
        food_radius: Pick-up distance.
    """

    food_radius: float = FOOD_SIZE

    def update(self, store: EntityStore) -> ForagingReport:
        """Run one foraging pass over all ants.

        Args:
            store: Entity tables; food and ant records are mutated.

        Returns:
            A report of the pick-ups and deliveries made.
        """
        report = ForagingReport(picked_up=[], delivered=[])
        claimed: set[int] = set()
        foods = store.iter_foods()
        homes = store.iter_homes()

        for ant in store.iter_ants():
            if ant.carrying_food:
                home = self._reached_home(ant, homes)
                if home is not None:
                    food_id = self._deliver(ant, home, store)
                    report.delivered.append((ant.ant_id, food_id, home.home_id))
            else:
                food = self._reached_food(ant, foods, claimed)
                if food is not None:
                    claimed.add(food.food_id)
                    self._pick_up(ant, food)
                    report.picked_up.append((ant.ant_id, food.food_id))

        # Carried food rides along with its carrier
        for food in store.foods.values():
            if food.carried_by is not None:
                carrier = store.ants[food.carried_by]
                food.x, food.y = carrier.x, carrier.y
        return report

    def _reached_food(
        self,
        ant: Ant,
        foods: list[Food],
        claimed: set[int],
    ) -> Food | None:
        for food in foods:
            if food.carried_by is not None or food.food_id in claimed:
                continue
            if _within(ant.x, ant.y, food.x, food.y, self.food_radius):
                return food
        return None

    @staticmethod
    def _reached_home(ant: Ant, homes: list[Home]) -> Home | None:
        for home in homes:
            if _within(ant.x, ant.y, home.x, home.y, home.radius):
                return home
        return None

    @staticmethod
    def _pick_up(ant: Ant, food: Food) -> None:
        assert ant.carried_item is None, f"ant {ant.ant_id} already carries"
        assert food.carried_by is None, f"food {food.food_id} already owned"
        ant.carrying_food = True
        ant.carried_item = food.food_id
        food.carried_by = ant.ant_id
        food.x, food.y = ant.x, ant.y
        ant.turn_around()
        logger.debug("ant %d picked up food %d", ant.ant_id, food.food_id)

    @staticmethod
    def _deliver(ant: Ant, home: Home, store: EntityStore) -> int:
        food_id = ant.carried_item
        assert food_id is not None, f"ant {ant.ant_id} carries nothing"
        store.remove(food_id)
        ant.carrying_food = False
        ant.carried_item = None
        ant.turn_around()
        home.delivered += 1
        logger.debug(
            "ant %d delivered food %d to home %d",
            ant.ant_id,
            food_id,
            home.home_id,
        )
        return food_id
