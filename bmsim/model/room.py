"""Rooms: typed, sized spaces holding sensors and an optional hazard evaluator."""

from __future__ import annotations

import math
from enum import Enum
from typing import Optional

from bmsim.errors import (
    DuplicateSensorError,
    ErrorCategory,
    InvalidValueError,
)
from bmsim.hazard.evaluators import HazardEvaluator
from bmsim.model.sensors import Sensor, SensorKind

MIN_AREA = 5.0

# Tolerance used when comparing areas and dimensions for equality
AREA_TOLERANCE = 0.001


# --------------------------------------------------------------------------- #
# Enumerations
# --------------------------------------------------------------------------- #


class RoomType(str, Enum):
    STUDY = "STUDY"
    OFFICE = "OFFICE"
    LABORATORY = "LABORATORY"

    @classmethod
    def from_token(cls, token: str) -> "RoomType":
        """Case-sensitive lookup of a save-file room type token."""
        for member in cls:
            if member.value == token:
                return member
        raise ValueError(f"Unknown room type: {token!r}")


class RoomState(str, Enum):
    EVACUATE = "EVACUATE"
    ERROR = "ERROR"
    MAINTENANCE = "MAINTENANCE"
    OPEN = "OPEN"


# --------------------------------------------------------------------------- #
# Room
# --------------------------------------------------------------------------- #


class Room:
    """A room on a floor.

    Holds at most one sensor of each :class:`SensorKind`. The hazard evaluator,
    when set, may only name kinds the room has sensors for.
    """

    def __init__(self, number: int, room_type: RoomType, area: float) -> None:
        if area < MIN_AREA:
            raise InvalidValueError(f"Room area cannot be less than {MIN_AREA:g}, got {area:g}")
        self._number = number
        self._type = room_type
        self._area = float(area)
        self._sensors: dict[SensorKind, Sensor] = {}
        self._hazard_evaluator: Optional[HazardEvaluator] = None
        self.fire_drill = False
        self.in_maintenance = False

    # ------------------------------------------------------------------ #
    # Accessors
    # ------------------------------------------------------------------ #

    @property
    def number(self) -> int:
        return self._number

    @property
    def type(self) -> RoomType:
        return self._type

    @property
    def area(self) -> float:
        return self._area

    @property
    def sensors(self) -> list[Sensor]:
        return list(self._sensors.values())

    def get_sensor(self, kind: SensorKind) -> Optional[Sensor]:
        return self._sensors.get(kind)

    @property
    def hazard_evaluator(self) -> Optional[HazardEvaluator]:
        return self._hazard_evaluator

    # ------------------------------------------------------------------ #
    # Mutation
    # ------------------------------------------------------------------ #

    def add_sensor(self, sensor: Sensor) -> None:
        if sensor.kind in self._sensors:
            raise DuplicateSensorError(
                f"Room {self._number} already has a {sensor.kind.value}"
            )
        self._sensors[sensor.kind] = sensor

    def set_hazard_evaluator(self, evaluator: Optional[HazardEvaluator]) -> None:
        if evaluator is not None:
            missing = [k.value for k in evaluator.kinds if k not in self._sensors]
            if missing:
                raise InvalidValueError(
                    f"Hazard evaluator refers to sensors not in room {self._number}: "
                    + ", ".join(missing),
                    category=ErrorCategory.REFERENTIAL,
                )
        self._hazard_evaluator = evaluator

    # ------------------------------------------------------------------ #
    # Derived state
    # ------------------------------------------------------------------ #

    def evaluate_room_state(self) -> RoomState:
        if self.fire_drill:
            return RoomState.EVACUATE
        if any(s.reports_fault() for s in self._sensors.values()):
            return RoomState.ERROR
        if self.in_maintenance:
            return RoomState.MAINTENANCE
        return RoomState.OPEN

    def evaluate_hazard_level(self) -> int:
        """Hazard level from the room's evaluator (0 when it has none)."""
        if self._hazard_evaluator is None:
            return 0
        return self._hazard_evaluator.evaluate_hazard_level(self._sensors)

    def comfort_level(self) -> float:
        """Mean comfort level of the room's sensors (0.0 with no sensors)."""
        if not self._sensors:
            return 0.0
        levels = [s.comfort_level() for s in self._sensors.values()]
        return sum(levels) / len(levels)

    def elapse_one_minute(self) -> None:
        for sensor in self._sensors.values():
            sensor.elapse_one_minute()

    # ------------------------------------------------------------------ #
    # Dunder
    # ------------------------------------------------------------------ #

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Room):
            return NotImplemented
        return (
            self._number == other._number
            and self._type is other._type
            and math.isclose(self._area, other._area, abs_tol=AREA_TOLERANCE)
            and self._sensors == other._sensors
            and self._hazard_evaluator == other._hazard_evaluator
        )

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"Room(number={self._number}, type={self._type.value}, area={self._area:g})"

    def __str__(self) -> str:
        return (
            f"Room #{self._number}: type={self._type.value}, area={self._area:.2f}m^2, "
            f"sensors={len(self._sensors)}"
        )
