"""Tests for rooms: construction, sensors, evaluators and derived state."""

import pytest

from bmsim.errors import DuplicateSensorError, ErrorCategory, InvalidValueError
from bmsim.hazard.evaluators import RuleBasedHazardEvaluator, WeightingBasedHazardEvaluator
from bmsim.model.room import Room, RoomState, RoomType
from bmsim.model.sensors import (
    CarbonDioxideSensor,
    NoiseSensor,
    OccupancySensor,
    SensorKind,
    TemperatureSensor,
)


@pytest.fixture
def study():
    room = Room(101, RoomType.STUDY, 20)
    room.add_sensor(TemperatureSensor.create([22, 70]))
    room.add_sensor(NoiseSensor.create([60], 1))
    return room


class TestRoomConstruction:
    def test_minimum_area_is_allowed(self):
        assert Room(1, RoomType.STUDY, 5).area == 5.0

    def test_area_below_minimum_rejected(self):
        with pytest.raises(InvalidValueError, match="less than 5") as info:
            Room(1, RoomType.STUDY, 4.999)
        assert info.value.category is ErrorCategory.RANGE

    def test_room_type_tokens_are_case_sensitive(self):
        assert RoomType.from_token("LABORATORY") is RoomType.LABORATORY
        with pytest.raises(ValueError):
            RoomType.from_token("study")


class TestSensors:
    def test_one_sensor_per_kind(self, study):
        with pytest.raises(DuplicateSensorError):
            study.add_sensor(TemperatureSensor.create([30]))
        assert len(study.sensors) == 2

    def test_sensors_keep_insertion_order(self, study):
        assert [s.kind for s in study.sensors] == [SensorKind.TEMPERATURE, SensorKind.NOISE]
        assert study.get_sensor(SensorKind.OCCUPANCY) is None

    def test_evaluator_must_reference_room_sensors(self, study):
        with pytest.raises(InvalidValueError) as info:
            study.set_hazard_evaluator(
                RuleBasedHazardEvaluator((SensorKind.TEMPERATURE, SensorKind.OCCUPANCY))
            )
        assert info.value.category is ErrorCategory.REFERENTIAL
        assert study.hazard_evaluator is None

    def test_hazard_level_uses_evaluator(self, study):
        assert study.evaluate_hazard_level() == 0
        study.set_hazard_evaluator(
            WeightingBasedHazardEvaluator({SensorKind.TEMPERATURE: 50, SensorKind.NOISE: 50})
        )
        # temperature 0, noise 50
        assert study.evaluate_hazard_level() == 12
        study.elapse_one_minute()
        # temperature 100, noise 50
        assert study.evaluate_hazard_level() == 37


class TestRoomState:
    def test_open_by_default(self, study):
        assert study.evaluate_room_state() is RoomState.OPEN

    def test_maintenance(self, study):
        study.in_maintenance = True
        assert study.evaluate_room_state() is RoomState.MAINTENANCE

    def test_fire_reading_is_an_error(self, study):
        study.in_maintenance = True
        study.elapse_one_minute()
        assert study.evaluate_room_state() is RoomState.ERROR

    def test_fire_drill_wins(self, study):
        study.elapse_one_minute()
        study.fire_drill = True
        assert study.evaluate_room_state() is RoomState.EVACUATE

    def test_over_capacity_is_an_error(self):
        room = Room(2, RoomType.OFFICE, 10)
        room.add_sensor(OccupancySensor.create([10, 11], 1, 10))
        assert room.evaluate_room_state() is RoomState.OPEN
        room.elapse_one_minute()
        assert room.evaluate_room_state() is RoomState.ERROR

    def test_noise_and_co2_never_fault(self):
        room = Room(3, RoomType.LABORATORY, 10)
        room.add_sensor(NoiseSensor.create([140], 1))
        room.add_sensor(CarbonDioxideSensor.create([9000], 1, 700, 300))
        assert room.evaluate_room_state() is RoomState.OPEN


class TestComfort:
    def test_no_sensors(self):
        assert Room(1, RoomType.STUDY, 10).comfort_level() == 0.0

    def test_mean_of_sensor_comfort(self, study):
        assert study.comfort_level() == pytest.approx(75.0)


class TestEquality:
    def test_flags_are_ignored(self, study):
        other = Room(101, RoomType.STUDY, 20.0005)
        other.add_sensor(TemperatureSensor.create([22, 70]))
        other.add_sensor(NoiseSensor.create([60], 1))
        other.fire_drill = True
        other.in_maintenance = True
        assert study == other

    def test_area_outside_tolerance(self):
        assert Room(1, RoomType.STUDY, 10) != Room(1, RoomType.STUDY, 10.01)

    def test_type_and_sensors_matter(self, study):
        assert Room(101, RoomType.OFFICE, 20) != Room(101, RoomType.STUDY, 20)
        assert Room(101, RoomType.STUDY, 20) != study

    def test_str(self, study):
        assert str(study) == "Room #101: type=STUDY, area=20.00m^2, sensors=2"
