"""Save-file vocabulary: delimiters, tokens and strict numeric parsing.

The save file is line oriented::

    buildingName
    numFloors
    floorNumber:width:length:numRooms[:roomNo1,roomNo2,...]
    roomNumber:ROOM_TYPE:area:numSensors[:WeightingBased|RuleBased]
    sensorKind:reading1,reading2,...[:extraFields...][@weight]
"""

from __future__ import annotations

import math
import re

from bmsim.hazard.evaluators import RuleBasedHazardEvaluator, WeightingBasedHazardEvaluator
from bmsim.model.sensors import SensorKind

# --------------------------------------------------------------------------- #
# Delimiters
# --------------------------------------------------------------------------- #

FIELD_DELIMITER = ":"
LIST_DELIMITER = ","
WEIGHT_DELIMITER = "@"

# --------------------------------------------------------------------------- #
# Record shapes
# --------------------------------------------------------------------------- #

FLOOR_FIELDS = (4, 5)
ROOM_FIELDS = (4, 5)

EVALUATOR_TAGS: tuple[str, ...] = (
    WeightingBasedHazardEvaluator.name,
    RuleBasedHazardEvaluator.name,
)

# Fields per sensor line, kind token and readings included
SENSOR_FIELDS: dict[SensorKind, int] = {
    SensorKind.TEMPERATURE: 2,
    SensorKind.NOISE: 3,
    SensorKind.OCCUPANCY: 4,
    SensorKind.CARBON_DIOXIDE: 5,
}

# --------------------------------------------------------------------------- #
# Numbers
# --------------------------------------------------------------------------- #

_INT_RE = re.compile(r"[+-]?\d+", re.ASCII)
_REAL_RE = re.compile(r"[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?", re.ASCII)


def parse_int(token: str) -> int:
    """Parse a base-10 integer; whitespace and other decorations are rejected."""
    if not _INT_RE.fullmatch(token):
        raise ValueError(f"Not an integer: {token!r}")
    return int(token)


def parse_real(token: str) -> float:
    """Parse a decimal real; ``nan``, ``inf`` and whitespace are rejected."""
    if not _REAL_RE.fullmatch(token):
        raise ValueError(f"Not a number: {token!r}")
    value = float(token)
    if math.isinf(value):
        raise ValueError(f"Number out of range: {token!r}")
    return value


def format_real(value: float) -> str:
    """Render *value* as the shortest text that parses back to the same float.

    Integral values drop their trailing ``.0``.
    """
    text = repr(float(value))
    if text.endswith(".0"):
        text = text[:-2]
    return "0" if text == "-0" else text
