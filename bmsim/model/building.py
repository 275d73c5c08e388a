"""Buildings: an ordered stack of floors, each carried by the one below."""

from __future__ import annotations

import logging
from typing import Iterator, Optional

from bmsim.errors import (
    DuplicateFloorError,
    ErrorCategory,
    FireDrillError,
    FloorTooSmallError,
    InvalidValueError,
    NoFloorBelowError,
)
from bmsim.geometry.footprint import footprint, overhang, supports
from bmsim.model.floor import Floor, check_dimensions
from bmsim.model.room import Room, RoomType

logger = logging.getLogger(__name__)


class Building:
    """A named building managing its floors.

    Floor numbers are unique and contiguous from 1; every floor above the
    ground floor fits on the footprint of the floor directly below it.
    """

    def __init__(self, name: str) -> None:
        if not name or not name.strip():
            raise InvalidValueError("Building name cannot be blank")
        if "\n" in name or "\r" in name:
            raise InvalidValueError("Building name must be a single line")
        self._name = name
        self._floors: list[Floor] = []

    # ------------------------------------------------------------------ #
    # Accessors
    # ------------------------------------------------------------------ #

    @property
    def name(self) -> str:
        return self._name

    @property
    def floors(self) -> list[Floor]:
        return list(self._floors)

    def get_floor(self, number: int) -> Optional[Floor]:
        for floor in self._floors:
            if floor.number == number:
                return floor
        return None

    def iter_rooms(self) -> Iterator[Room]:
        for floor in self._floors:
            yield from floor.rooms

    # ------------------------------------------------------------------ #
    # Mutation
    # ------------------------------------------------------------------ #

    def add_floor(self, floor: Floor) -> None:
        """Add *floor*; nothing changes if any rule is violated.

        Raises
        ------
        DuplicateFloorError
            A floor with the same number already exists.
        NoFloorBelowError
            The floor is above ground level and the floor below is missing.
        FloorTooSmallError
            The floor below cannot carry this floor's footprint.
        """
        if self.get_floor(floor.number) is not None:
            raise DuplicateFloorError(
                f"Floor {floor.number} already exists in {self._name!r}"
            )
        if floor.number >= 2:
            below = self.get_floor(floor.number - 1)
            if below is None:
                raise NoFloorBelowError(
                    f"There is no floor below to support floor {floor.number}"
                )
            if not supports(below.footprint, floor.footprint):
                raise FloorTooSmallError(
                    f"Floor {below.number} is too small to support floor {floor.number} "
                    f"(overhang {overhang(below.footprint, floor.footprint):g}m^2)"
                )
        self._floors.append(floor)

    def renovate_floor(self, number: int, width: float, length: float) -> None:
        """Change the dimensions of floor *number*.

        The floor below (if any) must still carry the new footprint, the floor
        above (if any) must still fit on it, and the new area must hold every
        room already on the floor. All checks run before anything changes.
        """
        floor = self.get_floor(number)
        if floor is None:
            raise InvalidValueError(
                f"No floor {number} in {self._name!r}",
                category=ErrorCategory.REFERENTIAL,
            )
        check_dimensions(width, length)
        new_footprint = footprint(width, length)
        below = self.get_floor(number - 1)
        if below is not None and not supports(below.footprint, new_footprint):
            raise FloorTooSmallError(
                f"Floor {below.number} cannot support floor {number} at {width:g}x{length:g}"
            )
        above = self.get_floor(number + 1)
        if above is not None and not supports(new_footprint, above.footprint):
            raise FloorTooSmallError(
                f"Floor {number} at {width:g}x{length:g} cannot support floor {above.number}"
            )
        floor.change_dimensions(width, length)
        logger.debug("Renovated floor %d of %r to %gx%g", number, self._name, width, length)

    def fire_drill(self, room_type: Optional[RoomType] = None) -> None:
        """Start a fire drill in every room of *room_type* (all rooms if None)."""
        if not self._floors:
            raise FireDrillError(
                "Cannot conduct fire drill because there are no floors in the building yet!"
            )
        if not any(floor.rooms for floor in self._floors):
            raise FireDrillError(
                "Cannot conduct fire drill because there are no rooms in the building yet!"
            )
        for floor in self._floors:
            floor.fire_drill(room_type)

    def cancel_fire_drill(self) -> None:
        for floor in self._floors:
            floor.cancel_fire_drill()

    # ------------------------------------------------------------------ #
    # Dunder
    # ------------------------------------------------------------------ #

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Building):
            return NotImplemented
        return self._name == other._name and self._floors == other._floors

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"Building(name={self._name!r}, floors={len(self._floors)})"

    def __str__(self) -> str:
        return f'Building: name="{self._name}", floors={len(self._floors)}'
