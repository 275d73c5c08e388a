"""Explicit tick scheduler driving everything that changes with time.

Sensors and maintenance rotations advance one simulated minute at a time. The
scheduler is the only caller of their ``elapse_one_minute`` methods; it holds
no global state, so independent simulations never see each other's items.
"""

from __future__ import annotations

import logging
from typing import Iterable, Protocol

from bmsim.maintenance.rotation import MaintenanceRotation
from bmsim.model.building import Building

logger = logging.getLogger(__name__)


class TimedItem(Protocol):
    def elapse_one_minute(self) -> None: ...


class TickScheduler:
    """Advance registered items once per simulated minute."""

    def __init__(self, items: Iterable[TimedItem] = ()) -> None:
        self._items: list[TimedItem] = []
        self._minutes = 0
        for item in items:
            self.register(item)

    @property
    def items(self) -> list[TimedItem]:
        return list(self._items)

    @property
    def minutes(self) -> int:
        """Minutes simulated so far."""
        return self._minutes

    def register(self, item: TimedItem) -> None:
        if any(existing is item for existing in self._items):
            return
        self._items.append(item)

    def register_building(self, building: Building) -> None:
        """Register every sensor and active maintenance rotation of *building*."""
        for floor in building.floors:
            for room in floor.rooms:
                for sensor in room.sensors:
                    self.register(sensor)
            rotation = floor.maintenance_rotation
            if rotation is not None and rotation.active:
                self.register(rotation)

    def tick(self) -> None:
        self._items = [
            item
            for item in self._items
            if not (isinstance(item, MaintenanceRotation) and not item.active)
        ]
        for item in self._items:
            item.elapse_one_minute()
        self._minutes += 1

    def run(self, minutes: int) -> None:
        if minutes < 0:
            raise ValueError(f"Cannot run for a negative number of minutes: {minutes}")
        for _ in range(minutes):
            self.tick()
        logger.debug("Simulated %d minute(s), %d item(s) registered", minutes, len(self._items))
