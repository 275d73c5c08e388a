"""Tests for the explicit tick scheduler."""

from pathlib import Path

import pytest

from bmsim.maintenance.scheduler import TickScheduler
from bmsim.model.sensors import SensorKind, TemperatureSensor
from bmsim.savefile.loader import load_buildings

FIXTURES = Path(__file__).parent / "fixtures"


@pytest.fixture
def building():
    return load_buildings(FIXTURES / "buildings.txt")[0]


class TestTickScheduler:
    def test_register_building_collects_sensors_and_rotations(self, building):
        scheduler = TickScheduler()
        scheduler.register_building(building)
        # five sensors on floor 1 plus its rotation
        assert len(scheduler.items) == 6
        assert building.get_floor(1).maintenance_rotation in scheduler.items

    def test_register_is_idempotent(self):
        sensor = TemperatureSensor.create([20, 21])
        scheduler = TickScheduler([sensor])
        scheduler.register(sensor)
        assert len(scheduler.items) == 1

    def test_tick_advances_sensors_and_rotation(self, building):
        scheduler = TickScheduler()
        scheduler.register_building(building)
        scheduler.tick()
        study = building.get_floor(1).get_room(101)
        assert study.get_sensor(SensorKind.TEMPERATURE).current_reading == 23
        assert building.get_floor(1).maintenance_rotation.elapsed_minutes == 1
        assert scheduler.minutes == 1

    def test_run_hands_over_maintenance(self, building):
        scheduler = TickScheduler()
        scheduler.register_building(building)
        # the 20 m² study needs 8 minutes
        scheduler.run(8)
        floor = building.get_floor(1)
        assert floor.maintenance_rotation.current_room.number == 102
        assert not floor.get_room(101).in_maintenance

    def test_retired_rotation_is_dropped(self, building):
        floor = building.get_floor(1)
        scheduler = TickScheduler()
        scheduler.register_building(building)
        old = floor.maintenance_rotation
        floor.create_maintenance_rotation([103, 101])
        scheduler.tick()
        assert old not in scheduler.items
        assert old.elapsed_minutes == 0
        assert floor.maintenance_rotation.elapsed_minutes == 0

    def test_independent_schedulers(self, building):
        first = TickScheduler()
        second = TickScheduler()
        first.register_building(building)
        second.run(5)
        assert building.get_floor(1).maintenance_rotation.elapsed_minutes == 0
        assert first.minutes == 0

    def test_negative_run_rejected(self):
        with pytest.raises(ValueError):
            TickScheduler().run(-1)
