"""Floors: a rectangular footprint holding rooms and an optional maintenance rotation."""

from __future__ import annotations

import logging
import math
from typing import Optional, Sequence

from shapely.geometry import Polygon

from bmsim.errors import (
    DuplicateRoomError,
    FloorTooSmallError,
    InsufficientSpaceError,
    InvalidValueError,
)
from bmsim.geometry.footprint import footprint
from bmsim.maintenance.rotation import MaintenanceRotation
from bmsim.model.room import AREA_TOLERANCE, MIN_AREA, Room, RoomType

logger = logging.getLogger(__name__)

MIN_WIDTH = 5.0
MIN_LENGTH = 5.0


class Floor:
    """A floor of a building.

    Floor numbers count levels above ground, the ground floor being 1. Rooms
    are kept in insertion order and keyed by room number. The sum of room
    areas never exceeds ``width * length``.
    """

    def __init__(self, number: int, width: float, length: float) -> None:
        if number < 1:
            raise InvalidValueError(f"Floor number must be 1 or higher, got {number}")
        check_dimensions(width, length)
        self._number = number
        self._width = float(width)
        self._length = float(length)
        self._rooms: dict[int, Room] = {}
        self._rotation: Optional[MaintenanceRotation] = None

    # ------------------------------------------------------------------ #
    # Accessors
    # ------------------------------------------------------------------ #

    @property
    def number(self) -> int:
        return self._number

    @property
    def width(self) -> float:
        return self._width

    @property
    def length(self) -> float:
        return self._length

    @property
    def footprint(self) -> Polygon:
        return footprint(self._width, self._length)

    @property
    def rooms(self) -> list[Room]:
        return list(self._rooms.values())

    def get_room(self, number: int) -> Optional[Room]:
        return self._rooms.get(number)

    @property
    def maintenance_rotation(self) -> Optional[MaintenanceRotation]:
        return self._rotation

    def calculate_area(self) -> float:
        return self._width * self._length

    def occupied_area(self) -> float:
        return sum(room.area for room in self._rooms.values())

    def free_area(self) -> float:
        return self.calculate_area() - self.occupied_area()

    # ------------------------------------------------------------------ #
    # Mutation
    # ------------------------------------------------------------------ #

    def add_room(self, room: Room) -> None:
        """Add *room*, leaving the floor unchanged if any rule is violated."""
        if room.area < MIN_AREA:
            raise InvalidValueError(f"Room area cannot be less than {MIN_AREA:g}")
        if room.number in self._rooms:
            raise DuplicateRoomError(
                f"Room number {room.number} is already taken on floor {self._number}"
            )
        if self.occupied_area() + room.area > self.calculate_area():
            raise InsufficientSpaceError(
                f"Insufficient space to add room {room.number}: floor area "
                f"{self.calculate_area():g}m^2, occupied {self.occupied_area():g}m^2, "
                f"room {room.area:g}m^2"
            )
        self._rooms[room.number] = room

    def change_dimensions(self, width: float, length: float) -> None:
        check_dimensions(width, length)
        if width * length < self.occupied_area():
            raise FloorTooSmallError(
                f"Floor {self._number} cannot shrink below its occupied area "
                f"of {self.occupied_area():g}m^2"
            )
        self._width = float(width)
        self._length = float(length)

    def create_maintenance_rotation(self, order: Sequence[int]) -> MaintenanceRotation:
        """Install a rotation over the rooms numbered in *order*.

        The new order is validated before anything changes. An existing
        rotation is retired first, clearing its current room's maintenance
        flag; the first room of the new order then becomes current.
        """
        rotation = MaintenanceRotation(self._rooms, order)
        if self._rotation is not None:
            self._rotation.retire()
        self._rotation = rotation
        rotation.start()
        logger.debug("Floor %d: maintenance rotation %s", self._number, rotation.order)
        return rotation

    def fire_drill(self, room_type: Optional[RoomType] = None) -> None:
        """Start a fire drill in every room of *room_type* (all rooms if None)."""
        for room in self._rooms.values():
            if room_type is None or room.type is room_type:
                room.fire_drill = True

    def cancel_fire_drill(self) -> None:
        for room in self._rooms.values():
            room.fire_drill = False

    # ------------------------------------------------------------------ #
    # Dunder
    # ------------------------------------------------------------------ #

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Floor):
            return NotImplemented
        return (
            self._number == other._number
            and math.isclose(self._width, other._width, abs_tol=AREA_TOLERANCE)
            and math.isclose(self._length, other._length, abs_tol=AREA_TOLERANCE)
            and self._rooms == other._rooms
            and self._rotation == other._rotation
        )

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"Floor(number={self._number}, width={self._width:g}, length={self._length:g})"

    def __str__(self) -> str:
        return (
            f"Floor #{self._number}: width={self._width:.2f}m, "
            f"length={self._length:.2f}m, rooms={len(self._rooms)}"
        )


def check_dimensions(width: float, length: float) -> None:
    if width < MIN_WIDTH:
        raise InvalidValueError(f"Floor width cannot be less than {MIN_WIDTH:g}, got {width:g}")
    if length < MIN_LENGTH:
        raise InvalidValueError(
            f"Floor length cannot be less than {MIN_LENGTH:g}, got {length:g}"
        )
