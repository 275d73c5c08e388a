"""Sensor kinds and their readings.

SensorReadings       – fixed-size time series with an update cadence
TemperatureSensor    – degrees Celsius, updates every minute
NoiseSensor          – decibels
OccupancySensor      – people in the room against a capacity
CarbonDioxideSensor  – CO2 in ppm against an ideal value and variation limit

The set of kinds is closed; :data:`Sensor` is the union of the four classes
and :class:`SensorKind` is the tag used as the key of a room's sensor map.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import ClassVar, Sequence, Union

from bmsim.errors import ErrorCategory, InvalidValueError

MIN_UPDATE_FREQUENCY = 1
MAX_UPDATE_FREQUENCY = 5

# Lowest temperature reading a sensor can report (°C)
MIN_TEMPERATURE = 1
# Reading at or above which a temperature sensor reports a fire (°C)
FIRE_TEMPERATURE = 68
COMFORT_TEMPERATURE_RANGE = (20, 26)

# Loud conversation, used as the noise reference level (dB)
REFERENCE_DB = 70.0


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


# --------------------------------------------------------------------------- #
# Enumerations
# --------------------------------------------------------------------------- #


class SensorKind(str, Enum):
    TEMPERATURE = "TemperatureSensor"
    NOISE = "NoiseSensor"
    OCCUPANCY = "OccupancySensor"
    CARBON_DIOXIDE = "CarbonDioxideSensor"

    @classmethod
    def from_token(cls, token: str) -> "SensorKind":
        for member in cls:
            if member.value == token:
                return member
        raise ValueError(f"Unknown sensor kind: {token!r}")


# --------------------------------------------------------------------------- #
# Readings
# --------------------------------------------------------------------------- #


@dataclass
class SensorReadings:
    """Cyclic series of integer readings advancing every *update_frequency* minutes."""

    values: tuple[int, ...]
    update_frequency: int = 1
    elapsed_minutes: int = field(default=0, compare=False)

    def __post_init__(self) -> None:
        self.values = tuple(self.values)
        if not self.values:
            raise InvalidValueError("A sensor needs at least one reading")
        if any(v < 0 for v in self.values):
            raise InvalidValueError("Sensor readings must be non-negative")
        if not MIN_UPDATE_FREQUENCY <= self.update_frequency <= MAX_UPDATE_FREQUENCY:
            raise InvalidValueError(
                f"Update frequency must be between {MIN_UPDATE_FREQUENCY} and "
                f"{MAX_UPDATE_FREQUENCY} minutes, got {self.update_frequency}"
            )

    @property
    def current(self) -> int:
        index = (self.elapsed_minutes // self.update_frequency) % len(self.values)
        return self.values[index]

    def elapse_one_minute(self) -> None:
        self.elapsed_minutes += 1


# --------------------------------------------------------------------------- #
# Sensor kinds
# --------------------------------------------------------------------------- #


@dataclass
class TemperatureSensor:
    readings: SensorReadings

    kind: ClassVar[SensorKind] = SensorKind.TEMPERATURE

    @classmethod
    def create(cls, values: Sequence[int]) -> "TemperatureSensor":
        return cls(SensorReadings(tuple(values), 1))

    def __post_init__(self) -> None:
        if self.readings.update_frequency != 1:
            raise InvalidValueError("Temperature sensors update every minute")
        if min(self.readings.values) < MIN_TEMPERATURE:
            raise InvalidValueError(
                f"Temperature readings must be at least {MIN_TEMPERATURE}, got {min(self.readings.values)}"
            )

    @property
    def current_reading(self) -> int:
        return self.readings.current

    def elapse_one_minute(self) -> None:
        self.readings.elapse_one_minute()

    def hazard_level(self) -> int:
        return 100 if self.current_reading >= FIRE_TEMPERATURE else 0

    def comfort_level(self) -> int:
        low, high = COMFORT_TEMPERATURE_RANGE
        return 100 if low <= self.current_reading <= high else 0

    def reports_fault(self) -> bool:
        return self.current_reading >= FIRE_TEMPERATURE

    def __str__(self) -> str:
        return f"{_describe(self.readings)}, type=TemperatureSensor"


@dataclass
class NoiseSensor:
    readings: SensorReadings

    kind: ClassVar[SensorKind] = SensorKind.NOISE

    @classmethod
    def create(cls, values: Sequence[int], update_frequency: int) -> "NoiseSensor":
        return cls(SensorReadings(tuple(values), update_frequency))

    @property
    def current_reading(self) -> int:
        return self.readings.current

    def elapse_one_minute(self) -> None:
        self.readings.elapse_one_minute()

    def relative_loudness(self) -> float:
        """Loudness of the current reading relative to 70 dB."""
        return math.pow(2.0, (self.current_reading - REFERENCE_DB) / 10.0)

    def hazard_level(self) -> int:
        return min(math.floor(self.relative_loudness() * 100), 100)

    def comfort_level(self) -> int:
        comfort = 1.0 - self.relative_loudness()
        if comfort < 0:
            return 0
        return min(math.floor(comfort * 100), 100)

    def reports_fault(self) -> bool:
        return False

    def __str__(self) -> str:
        return f"{_describe(self.readings)}, type=NoiseSensor"


@dataclass
class OccupancySensor:
    readings: SensorReadings
    capacity: int

    kind: ClassVar[SensorKind] = SensorKind.OCCUPANCY

    @classmethod
    def create(
        cls, values: Sequence[int], update_frequency: int, capacity: int
    ) -> "OccupancySensor":
        return cls(SensorReadings(tuple(values), update_frequency), capacity)

    def __post_init__(self) -> None:
        if self.capacity < 0:
            raise InvalidValueError("Occupancy capacity must be non-negative")

    @property
    def current_reading(self) -> int:
        return self.readings.current

    def elapse_one_minute(self) -> None:
        self.readings.elapse_one_minute()

    def hazard_level(self) -> int:
        if self.capacity == 0:
            return 100 if self.current_reading > 0 else 0
        return min(math.floor(self.current_reading / self.capacity * 100), 100)

    def comfort_level(self) -> int:
        return 100 - self.hazard_level()

    def reports_fault(self) -> bool:
        return self.current_reading > self.capacity

    def __str__(self) -> str:
        return f"{_describe(self.readings)}, type=OccupancySensor, capacity={self.capacity}"


@dataclass
class CarbonDioxideSensor:
    readings: SensorReadings
    ideal_value: int
    variation_limit: int

    kind: ClassVar[SensorKind] = SensorKind.CARBON_DIOXIDE

    @classmethod
    def create(
        cls,
        values: Sequence[int],
        update_frequency: int,
        ideal_value: int,
        variation_limit: int,
    ) -> "CarbonDioxideSensor":
        return cls(
            SensorReadings(tuple(values), update_frequency), ideal_value, variation_limit
        )

    def __post_init__(self) -> None:
        if self.ideal_value <= 0:
            raise InvalidValueError("Ideal CO2 value must be > 0")
        if self.variation_limit <= 0:
            raise InvalidValueError("CO2 variation limit must be > 0")
        if self.ideal_value - self.variation_limit < 0:
            raise InvalidValueError(
                "CO2 variation limit cannot exceed the ideal value",
                category=ErrorCategory.SEMANTIC,
            )

    @property
    def current_reading(self) -> int:
        return self.readings.current

    def elapse_one_minute(self) -> None:
        self.readings.elapse_one_minute()

    def hazard_level(self) -> int:
        reading = self.current_reading
        if reading < 1000:
            return 0
        if reading < 2000:
            return 25
        if reading < 5000:
            return 50
        return 100

    def comfort_level(self) -> int:
        difference = abs(self.ideal_value - self.current_reading)
        if difference >= self.variation_limit:
            return 0
        return round_half_up(100 - difference / self.variation_limit * 100)

    def reports_fault(self) -> bool:
        return False

    def __str__(self) -> str:
        return (
            f"{_describe(self.readings)}, type=CarbonDioxideSensor, "
            f"idealPPM={self.ideal_value}, varLimit={self.variation_limit}"
        )


Sensor = Union[TemperatureSensor, NoiseSensor, OccupancySensor, CarbonDioxideSensor]


def _describe(readings: SensorReadings) -> str:
    values = ",".join(str(v) for v in readings.values)
    return f"TimedSensor: freq={readings.update_frequency}, readings={values}"

