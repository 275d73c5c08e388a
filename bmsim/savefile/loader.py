"""Save-file loader.

Reads the line-oriented save format and builds :class:`~bmsim.model.building.Building`
objects, enforcing every model invariant while the graph is constructed. The
result is either the complete list of buildings or a single
:class:`~bmsim.errors.SaveFormatError`; partially built objects never escape.

Grammar failures are raised as :class:`SaveFormatError` where they are found.
Model failures (duplicate keys, support, area, weights...) propagate unchanged
to :func:`parse_buildings`, which wraps them exactly once with the line that
was being processed. I/O errors are never converted.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable, Iterator, Optional, Union

from bmsim.errors import BMSError, ErrorCategory, SaveFormatError
from bmsim.hazard.evaluators import RuleBasedHazardEvaluator, WeightingBasedHazardEvaluator
from bmsim.model.building import Building
from bmsim.model.floor import Floor
from bmsim.model.room import Room, RoomType
from bmsim.model.sensors import (
    CarbonDioxideSensor,
    NoiseSensor,
    OccupancySensor,
    Sensor,
    SensorKind,
    TemperatureSensor,
)
from bmsim.savefile import grammar as G

logger = logging.getLogger(__name__)

# (line number, line text) of the record whose rules are being checked
_Record = tuple[Optional[int], Optional[str]]


# --------------------------------------------------------------------------- #
# Line handling
# --------------------------------------------------------------------------- #


def split_lines(text: str) -> list[str]:
    """Split *text* on universal line endings; a final terminator is optional."""
    lines = text.replace("\r\n", "\n").replace("\r", "\n").split("\n")
    if lines and lines[-1] == "":
        lines.pop()
    return lines


def _strip_terminator(line: str) -> str:
    if line.endswith("\r\n"):
        return line[:-2]
    if line.endswith(("\n", "\r")):
        return line[:-1]
    return line


# --------------------------------------------------------------------------- #
# Parser
# --------------------------------------------------------------------------- #


class _Parser:
    """Single-pass reader over the lines of one save file."""

    def __init__(self, lines: Iterable[str]) -> None:
        self._lines: Iterator[str] = iter(lines)
        self._line_number = 0
        self._line: Optional[str] = None
        self.record: _Record = (None, None)

    # ---- line access -------------------------------------------------- #

    def _next_line(self) -> Optional[str]:
        raw = next(self._lines, None)
        if raw is None:
            return None
        self._line_number += 1
        self._line = _strip_terminator(raw)
        self.record = (self._line_number, self._line)
        return self._line

    def _require_line(self, expected: str) -> str:
        line = self._next_line()
        if line is None:
            raise SaveFormatError(f"Unexpected end of input, expected {expected}")
        return line

    def _error(
        self, reason: str, category: ErrorCategory = ErrorCategory.STRUCTURAL
    ) -> SaveFormatError:
        number, line = self.record
        return SaveFormatError(reason, category, line_number=number, line=line)

    def _int(self, token: str, what: str) -> int:
        try:
            return G.parse_int(token)
        except ValueError as exc:
            raise self._error(f"Invalid {what}: {token!r}") from exc

    def _real(self, token: str, what: str) -> float:
        try:
            return G.parse_real(token)
        except ValueError as exc:
            raise self._error(f"Invalid {what}: {token!r}") from exc

    # ---- records ------------------------------------------------------ #

    def parse(self) -> list[Building]:
        buildings: list[Building] = []
        while True:
            name = self._next_line()
            if name is None:
                break
            name_record = self.record
            if G.FIELD_DELIMITER in name:
                raise self._error(f"Building name cannot contain {G.FIELD_DELIMITER!r}")

            count_line = self._require_line("a floor count")
            floor_count = self._int(count_line, "floor count")
            if floor_count < 0:
                raise self._error(
                    f"Floor count cannot be negative, got {floor_count}", ErrorCategory.RANGE
                )

            self.record = name_record
            building = Building(name)
            for _ in range(floor_count):
                floor, header = self._read_floor()
                self.record = header
                building.add_floor(floor)
                logger.debug("Building %r: added floor %d", name, floor.number)
            buildings.append(building)
            logger.debug("Parsed building %r with %d floor(s)", name, floor_count)
        return buildings

    def _read_floor(self) -> tuple[Floor, _Record]:
        line = self._require_line("a floor record")
        header = self.record
        fields = line.split(G.FIELD_DELIMITER)
        if len(fields) not in G.FLOOR_FIELDS:
            raise self._error(f"Floor record needs 4 or 5 fields, got {len(fields)}")

        number = self._int(fields[0], "floor number")
        width = self._real(fields[1], "floor width")
        length = self._real(fields[2], "floor length")
        room_count = self._int(fields[3], "room count")
        if number <= 0 or width < 0 or length < 0 or room_count < 0:
            raise self._error(
                "Floor number must be positive and dimensions and room count non-negative",
                ErrorCategory.RANGE,
            )

        floor = Floor(number, width, length)
        for _ in range(room_count):
            room, room_header = self._read_room()
            self.record = room_header
            floor.add_room(room)

        self.record = header
        if len(fields) == 5:
            order = [self._int(token, "maintenance room number")
                     for token in fields[4].split(G.LIST_DELIMITER)]
            for room_number in order:
                if floor.get_room(room_number) is None:
                    raise self._error(
                        f"Maintenance order refers to unknown room {room_number}",
                        ErrorCategory.REFERENTIAL,
                    )
            floor.create_maintenance_rotation(order)
        return floor, header

    def _read_room(self) -> tuple[Room, _Record]:
        line = self._require_line("a room record")
        header = self.record
        fields = line.split(G.FIELD_DELIMITER)
        if len(fields) not in G.ROOM_FIELDS:
            raise self._error(f"Room record needs 4 or 5 fields, got {len(fields)}")

        tag = fields[4] if len(fields) == 5 else None
        if tag is not None and tag not in G.EVALUATOR_TAGS:
            raise self._error(f"Unknown hazard evaluator: {tag!r}", ErrorCategory.SEMANTIC)

        number = self._int(fields[0], "room number")
        try:
            room_type = RoomType.from_token(fields[1])
        except ValueError as exc:
            raise self._error(str(exc), ErrorCategory.SEMANTIC) from exc
        area = self._real(fields[2], "room area")
        sensor_count = self._int(fields[3], "sensor count")
        if number < 0 or area < 0 or sensor_count < 0:
            raise self._error(
                "Room number, area and sensor count cannot be negative", ErrorCategory.RANGE
            )

        room = Room(number, room_type, area)
        weighted = tag == WeightingBasedHazardEvaluator.name
        weights: dict[SensorKind, int] = {}
        for _ in range(sensor_count):
            sensor, weight = self._read_sensor(weighted)
            room.add_sensor(sensor)
            if weight is not None:
                weights[sensor.kind] = weight

        self.record = header
        if weighted:
            room.set_hazard_evaluator(WeightingBasedHazardEvaluator(weights))
        elif tag == RuleBasedHazardEvaluator.name:
            room.set_hazard_evaluator(
                RuleBasedHazardEvaluator(tuple(s.kind for s in room.sensors))
            )
        return room, header

    def _read_sensor(self, weighted: bool) -> tuple[Sensor, Optional[int]]:
        line = self._require_line("a sensor record")
        parts = line.split(G.WEIGHT_DELIMITER)
        weight = None
        if weighted:
            if len(parts) != 2:
                raise self._error("Sensors in a WeightingBased room need exactly one @weight")
            weight = self._int(parts[1], "sensor weight")
        elif len(parts) != 1:
            raise self._error("Only sensors in a WeightingBased room carry a @weight")

        fields = parts[0].split(G.FIELD_DELIMITER)
        try:
            kind = SensorKind.from_token(fields[0])
        except ValueError as exc:
            raise self._error(str(exc), ErrorCategory.SEMANTIC) from exc
        expected = G.SENSOR_FIELDS[kind]
        if len(fields) != expected:
            raise self._error(f"{kind.value} needs {expected} fields, got {len(fields)}")

        readings = [self._int(t, "sensor reading") for t in fields[1].split(G.LIST_DELIMITER)]
        if kind is SensorKind.TEMPERATURE:
            return TemperatureSensor.create(readings), weight

        frequency = self._int(fields[2], "update frequency")
        if kind is SensorKind.NOISE:
            return NoiseSensor.create(readings, frequency), weight
        if kind is SensorKind.OCCUPANCY:
            capacity = self._int(fields[3], "capacity")
            return OccupancySensor.create(readings, frequency, capacity), weight
        ideal = self._int(fields[3], "ideal CO2 value")
        limit = self._int(fields[4], "CO2 variation limit")
        return CarbonDioxideSensor.create(readings, frequency, ideal, limit), weight


# --------------------------------------------------------------------------- #
# Public API
# --------------------------------------------------------------------------- #


def parse_buildings(source: Union[str, Iterable[str]]) -> list[Building]:
    """Build every building described by *source* (text or an iterable of lines)."""
    lines = split_lines(source) if isinstance(source, str) else source
    parser = _Parser(lines)
    try:
        return parser.parse()
    except SaveFormatError:
        raise
    except BMSError as exc:
        number, line = parser.record
        raise SaveFormatError.wrap(exc, line_number=number, line=line) from exc


class SaveFileLoader:
    """Load a save file from disk."""

    def __init__(self, path: str | Path, encoding: str = "utf-8") -> None:
        self.path = Path(path)
        self.encoding = encoding

    def load(self) -> list[Building]:
        text = self.path.read_text(encoding=self.encoding)
        buildings = parse_buildings(text)
        logger.debug("Loaded %d building(s) from %s", len(buildings), self.path)
        return buildings


def load_buildings(path: str | Path, encoding: str = "utf-8") -> list[Building]:
    return SaveFileLoader(path, encoding).load()
