from __future__ import annotations

import logging
import random
from collections import deque
from typing import Callable, Deque, Dict, List, Optional

from block_puzzle_core.game.pieces import Category, ShapeId

from .catalog import CATEGORY_CAPACITY


LOGGER = logging.getLogger(__name__)


class CategoryBags:
    """One FIFO bag of shape ids per category, drawn without replacement."""

    def __init__(self, rng: random.Random, capacity: Optional[Dict[Category, int]] = None) -> None:
        self.rng = rng
        self.capacity = dict(capacity or CATEGORY_CAPACITY)
        self._bags: Dict[Category, Deque[ShapeId]] = {}
        self.rebuild()

    def rebuild(self) -> None:
        """Drop every bag; each one is refilled lazily on its next draw."""
        self._bags = {category: deque() for category in Category}

    def contents(self, category: Category) -> List[ShapeId]:
        return list(self._bags[category])

    def refill(self, category: Category, members: List[ShapeId]) -> None:
        capacity = self.capacity[category]
        bag: List[ShapeId] = []
        if members:
            while len(bag) < capacity:
                cycle = list(members)
                self.rng.shuffle(cycle)
                bag.extend(cycle)
        self._bags[category] = deque(bag[:capacity])
        LOGGER.debug("Refilled %s bag with %s", category.name, [sid.name for sid in self._bags[category]])

    def draw(self, category: Category, members: List[ShapeId],
             eligible: Callable[[ShapeId], bool]) -> Optional[ShapeId]:
        """Pop the next eligible id, refilling once if the bag runs dry.

        Ids that stopped being eligible since the bag was filled are discarded.
        """
        bag = self._bags[category]
        refilled = False
        while True:
            if not bag:
                if refilled or not members:
                    return None
                self.refill(category, members)
                bag = self._bags[category]
                refilled = True
                continue
            shape_id = bag.popleft()
            if eligible(shape_id):
                return shape_id
