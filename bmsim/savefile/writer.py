"""Encode buildings back into the save-file format."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable, Optional

from bmsim.errors import ErrorCategory, InvalidValueError
from bmsim.hazard.evaluators import WeightingBasedHazardEvaluator
from bmsim.model.building import Building
from bmsim.model.floor import Floor
from bmsim.model.room import Room
from bmsim.model.sensors import (
    CarbonDioxideSensor,
    NoiseSensor,
    OccupancySensor,
    Sensor,
)
from bmsim.savefile.grammar import (
    FIELD_DELIMITER,
    LIST_DELIMITER,
    WEIGHT_DELIMITER,
    format_real,
)

logger = logging.getLogger(__name__)


def encode_sensor(sensor: Sensor, weight: Optional[int] = None) -> str:
    readings = sensor.readings
    fields = [sensor.kind.value, LIST_DELIMITER.join(str(v) for v in readings.values)]
    if isinstance(sensor, (NoiseSensor, OccupancySensor, CarbonDioxideSensor)):
        fields.append(str(readings.update_frequency))
    if isinstance(sensor, OccupancySensor):
        fields.append(str(sensor.capacity))
    elif isinstance(sensor, CarbonDioxideSensor):
        fields.extend([str(sensor.ideal_value), str(sensor.variation_limit)])
    line = FIELD_DELIMITER.join(fields)
    if weight is not None:
        line += f"{WEIGHT_DELIMITER}{weight}"
    return line


def encode_room(room: Room) -> list[str]:
    """Header line followed by one line per sensor.

    The format attaches an evaluator to every sensor of the room, so an
    evaluator covering only some of the sensors cannot be written.
    """
    fields = [
        str(room.number),
        room.type.value,
        format_real(room.area),
        str(len(room.sensors)),
    ]
    evaluator = room.hazard_evaluator
    if evaluator is not None:
        if set(evaluator.kinds) != {s.kind for s in room.sensors}:
            raise InvalidValueError(
                f"Room {room.number}: {evaluator.name} evaluator does not cover "
                "exactly the room's sensors",
                category=ErrorCategory.REFERENTIAL,
            )
        fields.append(evaluator.name)

    lines = [FIELD_DELIMITER.join(fields)]
    for sensor in room.sensors:
        weight = None
        if isinstance(evaluator, WeightingBasedHazardEvaluator):
            weight = evaluator.weights[sensor.kind]
        lines.append(encode_sensor(sensor, weight))
    return lines


def encode_floor(floor: Floor) -> list[str]:
    fields = [
        str(floor.number),
        format_real(floor.width),
        format_real(floor.length),
        str(len(floor.rooms)),
    ]
    rotation = floor.maintenance_rotation
    if rotation is not None:
        fields.append(LIST_DELIMITER.join(str(n) for n in rotation.order))

    lines = [FIELD_DELIMITER.join(fields)]
    for room in floor.rooms:
        lines.extend(encode_room(room))
    return lines


def encode_building(building: Building) -> list[str]:
    # Floors are written bottom-up so each one finds its support when reloaded
    floors = sorted(building.floors, key=lambda f: f.number)
    lines = [building.name, str(len(floors))]
    for floor in floors:
        lines.extend(encode_floor(floor))
    return lines


def dumps(buildings: Iterable[Building]) -> str:
    lines: list[str] = []
    for building in buildings:
        lines.extend(encode_building(building))
    return "".join(line + "\n" for line in lines)


def save_buildings(
    buildings: Iterable[Building], path: str | Path, encoding: str = "utf-8"
) -> None:
    buildings = list(buildings)
    Path(path).write_text(dumps(buildings), encoding=encoding)
    logger.debug("Saved %d building(s) to %s", len(buildings), path)
