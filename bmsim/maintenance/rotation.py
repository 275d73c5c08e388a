"""Maintenance rotation: a cyclic schedule visiting a floor's rooms one at a time.

The rotation stores room numbers and resolves them through the floor's live
room mapping, so it mutates the maintenance flag of the very rooms the floor
owns. It performs no I/O and has no notion of wall-clock time; it only reacts
to :meth:`MaintenanceRotation.elapse_one_minute` being called by a scheduler.
"""

from __future__ import annotations

import logging
from typing import Mapping, Sequence

from bmsim.errors import ErrorCategory, InvalidValueError
from bmsim.model.room import MIN_AREA, Room, RoomState, RoomType
from bmsim.model.sensors import round_half_up

logger = logging.getLogger(__name__)

BASE_MINUTES = 5.0
MINUTES_PER_EXTRA_SQUARE_METRE = 0.2

TYPE_MULTIPLIERS: dict[RoomType, float] = {
    RoomType.STUDY: 1.0,
    RoomType.OFFICE: 1.5,
    RoomType.LABORATORY: 2.0,
}


def maintenance_minutes(room: Room) -> int:
    """Minutes needed to maintain *room*, from its area and type.

    ``5.0`` base minutes plus ``0.2`` per square metre above the minimum room
    area, times the type multiplier, rounded half-up at the very end.
    """
    if room.area > MIN_AREA:
        base = BASE_MINUTES + (room.area - MIN_AREA) * MINUTES_PER_EXTRA_SQUARE_METRE
    else:
        base = BASE_MINUTES
    return round_half_up(base * TYPE_MULTIPLIERS[room.type])


def check_order(order: Sequence[int]) -> None:
    """Raise :class:`InvalidValueError` unless *order* is a valid rotation order."""
    if len(order) < 1:
        raise InvalidValueError(
            "A maintenance rotation needs at least one room",
            category=ErrorCategory.SEMANTIC,
        )
    if len(order) == 1:
        return
    for i, number in enumerate(order):
        following = order[(i + 1) % len(order)]
        if number == following:
            raise InvalidValueError(
                f"Room {number} appears twice in a row in the maintenance order",
                category=ErrorCategory.SEMANTIC,
            )


class MaintenanceRotation:
    """Visit the rooms in *order*, wrapping round after the last one.

    Construction validates the order but leaves the rooms untouched; the owning
    floor calls :meth:`start` once the rotation is installed.
    """

    def __init__(self, rooms: Mapping[int, Room], order: Sequence[int]) -> None:
        order = tuple(order)
        check_order(order)
        unknown = [n for n in order if n not in rooms]
        if unknown:
            raise InvalidValueError(
                "Maintenance order refers to rooms not on this floor: "
                + ", ".join(str(n) for n in unknown),
                category=ErrorCategory.REFERENTIAL,
            )
        self._rooms = rooms
        self._order = order
        self._position = 0
        self._elapsed = 0
        self._active = False

    # ------------------------------------------------------------------ #
    # Accessors
    # ------------------------------------------------------------------ #

    @property
    def order(self) -> tuple[int, ...]:
        return self._order

    @property
    def rooms(self) -> list[Room]:
        return [self._rooms[n] for n in self._order]

    @property
    def current_index(self) -> int:
        return self._position

    @property
    def current_room(self) -> Room:
        return self._rooms[self._order[self._position]]

    @property
    def elapsed_minutes(self) -> int:
        return self._elapsed

    @property
    def active(self) -> bool:
        return self._active

    # ------------------------------------------------------------------ #
    # Lifecycle
    # ------------------------------------------------------------------ #

    def start(self) -> None:
        """Make the first room current and reset the elapsed time."""
        self._position = 0
        self._elapsed = 0
        self._active = True
        self.current_room.in_maintenance = True

    def retire(self) -> None:
        """Stop the rotation, clearing the current room's maintenance flag."""
        if self._active:
            self.current_room.in_maintenance = False
        self._active = False

    # ------------------------------------------------------------------ #
    # Transitions
    # ------------------------------------------------------------------ #

    def elapse_one_minute(self) -> None:
        """Advance by one minute; evacuation of the current room freezes the rotation."""
        if not self._active:
            return
        room = self.current_room
        if room.evaluate_room_state() is RoomState.EVACUATE:
            return
        self._elapsed += 1
        if self._elapsed >= maintenance_minutes(room):
            self._move_to_next()

    def skip_current_maintenance(self) -> None:
        """Abandon the current room and move on, even during an evacuation."""
        if not self._active:
            return
        self._move_to_next()

    def _move_to_next(self) -> None:
        previous = self.current_room
        previous.in_maintenance = False
        self._position = (self._position + 1) % len(self._order)
        self._elapsed = 0
        self.current_room.in_maintenance = True
        logger.debug(
            "Maintenance moved from room %d to room %d",
            previous.number,
            self.current_room.number,
        )

    # ------------------------------------------------------------------ #
    # Dunder
    # ------------------------------------------------------------------ #

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, MaintenanceRotation):
            return NotImplemented
        return self._order == other._order

    __hash__ = None  # type: ignore[assignment]

    def __str__(self) -> str:
        return (
            f"MaintenanceSchedule: currentRoom=#{self.current_room.number}, "
            f"currentElapsed={self._elapsed}"
        )
