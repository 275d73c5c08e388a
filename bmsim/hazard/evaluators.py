"""Hazard evaluators: aggregate several sensors into one 0–100 hazard level.

Evaluators do not hold sensors. They name the sensor kinds they use and are
evaluated against a room's sensor mapping, so they always see the sensors the
room currently owns.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import ClassVar, Mapping, Protocol, Union

from bmsim.errors import ErrorCategory, InvalidValueError
from bmsim.model.sensors import SensorKind


class HazardSensor(Protocol):
    kind: SensorKind

    def hazard_level(self) -> int: ...


def _clamp(value: float) -> int:
    return max(0, min(math.floor(value), 100))


@dataclass(frozen=True, eq=False)
class RuleBasedHazardEvaluator:
    """Evaluate the hazard level by applying a fixed set of rules.

    Rules, for the sensors named by :attr:`kinds`:

    * no sensors: 0
    * one sensor: that sensor's hazard level
    * otherwise, 100 if any non-occupancy sensor is at 100; else the mean of
      the non-occupancy levels, scaled by ``occupancy level / 100`` when an
      occupancy sensor is present, rounded down.
    """

    kinds: tuple[SensorKind, ...] = ()

    name: ClassVar[str] = "RuleBased"

    def __post_init__(self) -> None:
        object.__setattr__(self, "kinds", tuple(self.kinds))
        if len(set(self.kinds)) != len(self.kinds):
            raise InvalidValueError(
                "A rule-based evaluator lists each sensor kind once",
                category=ErrorCategory.REFERENTIAL,
            )

    def evaluate_hazard_level(self, sensors: Mapping[SensorKind, HazardSensor]) -> int:
        selected = [sensors[kind] for kind in self.kinds]
        if not selected:
            return 0
        if len(selected) == 1:
            return selected[0].hazard_level()

        occupancy = None
        levels: list[int] = []
        for sensor in selected:
            if sensor.kind is SensorKind.OCCUPANCY:
                occupancy = sensor
                continue
            level = sensor.hazard_level()
            if level >= 100:
                return 100
            levels.append(level)

        if not levels:
            return 0
        average = sum(levels) / len(levels)
        if occupancy is not None:
            average *= occupancy.hazard_level() / 100.0
        return _clamp(average)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, RuleBasedHazardEvaluator):
            return NotImplemented
        return frozenset(self.kinds) == frozenset(other.kinds)

    def __hash__(self) -> int:
        return hash(frozenset(self.kinds))

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True)
class WeightingBasedHazardEvaluator:
    """Weighted hazard level; weights are in [0, 100] and sum to exactly 100."""

    weights: Mapping[SensorKind, int] = field(default_factory=dict)

    name: ClassVar[str] = "WeightingBased"

    def __post_init__(self) -> None:
        weights = dict(self.weights)
        for kind, weight in weights.items():
            if not 0 <= weight <= 100:
                raise InvalidValueError(
                    f"Weighting for {kind.value} must be between 0 and 100, got {weight}",
                    category=ErrorCategory.SEMANTIC,
                )
        total = sum(weights.values())
        if total != 100:
            raise InvalidValueError(
                f"Weightings must sum to 100, got {total}",
                category=ErrorCategory.SEMANTIC,
            )
        object.__setattr__(self, "weights", weights)

    @property
    def kinds(self) -> tuple[SensorKind, ...]:
        return tuple(self.weights)

    def weightings(self) -> list[int]:
        return list(self.weights.values())

    def evaluate_hazard_level(self, sensors: Mapping[SensorKind, HazardSensor]) -> int:
        total = 0.0
        for kind, weight in self.weights.items():
            total += sensors[kind].hazard_level() * weight / 100.0
        return _clamp(total / len(self.weights))

    def __str__(self) -> str:
        return self.name


HazardEvaluator = Union[RuleBasedHazardEvaluator, WeightingBasedHazardEvaluator]
