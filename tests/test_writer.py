"""Tests for encoding buildings back to the save-file format."""

from pathlib import Path

import pytest

from bmsim.errors import InvalidValueError
from bmsim.hazard.evaluators import RuleBasedHazardEvaluator, WeightingBasedHazardEvaluator
from bmsim.model.building import Building
from bmsim.model.floor import Floor
from bmsim.model.room import Room, RoomType
from bmsim.model.sensors import (
    CarbonDioxideSensor,
    NoiseSensor,
    OccupancySensor,
    SensorKind,
    TemperatureSensor,
)
from bmsim.savefile.grammar import format_real
from bmsim.savefile.loader import load_buildings, parse_buildings
from bmsim.savefile.writer import (
    dumps,
    encode_building,
    encode_room,
    encode_sensor,
    save_buildings,
)

FIXTURES = Path(__file__).parent / "fixtures"


def _campus() -> list[Building]:
    library = Building("Library")
    ground = Floor(1, 20.25, 12)
    reading = Room(1, RoomType.STUDY, 42.125)
    reading.add_sensor(NoiseSensor.create([40, 45], 2))
    reading.add_sensor(OccupancySensor.create([3, 9, 12], 5, 20))
    reading.set_hazard_evaluator(
        WeightingBasedHazardEvaluator({SensorKind.NOISE: 25, SensorKind.OCCUPANCY: 75})
    )
    ground.add_room(reading)
    office = Room(2, RoomType.OFFICE, 12)
    office.add_sensor(CarbonDioxideSensor.create([800], 3, 600, 250))
    office.set_hazard_evaluator(RuleBasedHazardEvaluator((SensorKind.CARBON_DIOXIDE,)))
    ground.add_room(office)
    ground.add_room(Room(3, RoomType.LABORATORY, 30))
    ground.create_maintenance_rotation([3, 1, 3, 2])
    library.add_floor(ground)
    library.add_floor(Floor(2, 20, 11.5))

    annex = Building("Annex")
    return [library, annex]


class TestFormatting:
    @pytest.mark.parametrize(
        "value, text",
        [
            (10.0, "10"),
            (8.5, "8.5"),
            (40.25, "40.25"),
            (10.12345, "10.12345"),
            (0.0004, "0.0004"),
            (-0.0, "0"),
            (1e-05, "1e-05"),
        ],
    )
    def test_format_real(self, value, text):
        assert format_real(value) == text

    def test_encode_sensors(self):
        assert encode_sensor(TemperatureSensor.create([20, 21])) == "TemperatureSensor:20,21"
        assert encode_sensor(NoiseSensor.create([55], 3), 40) == "NoiseSensor:55:3@40"
        assert encode_sensor(OccupancySensor.create([1, 2], 4, 30)) == "OccupancySensor:1,2:4:30"
        assert (
            encode_sensor(CarbonDioxideSensor.create([690], 5, 700, 300))
            == "CarbonDioxideSensor:690:5:700:300"
        )

    def test_encode_building(self):
        lines = encode_building(_campus()[0])
        assert lines[:3] == ["Library", "2", "1:20.25:12:3:3,1,3,2"]
        assert "2:OFFICE:12:1:RuleBased" in lines
        assert lines[-1] == "2:20:11.5:0"

    def test_partial_evaluator_cannot_be_encoded(self):
        room = Room(1, RoomType.STUDY, 10)
        room.add_sensor(TemperatureSensor.create([20]))
        room.add_sensor(NoiseSensor.create([50], 1))
        room.set_hazard_evaluator(RuleBasedHazardEvaluator((SensorKind.NOISE,)))
        with pytest.raises(InvalidValueError):
            encode_room(room)


class TestRoundTrip:
    def test_fixture_is_reproduced_exactly(self):
        text = (FIXTURES / "buildings.txt").read_text(encoding="utf-8")
        assert dumps(parse_buildings(text)) == text

    def test_built_buildings_survive_round_trip(self):
        buildings = _campus()
        assert parse_buildings(dumps(buildings)) == buildings

    def test_round_trip_after_renovation(self):
        buildings = _campus()
        buildings[0].renovate_floor(2, 18.5, 9)
        assert parse_buildings(dumps(buildings)) == buildings

    def test_full_floor_with_fine_dimensions(self):
        floor = Floor(1, 5.0004, 5.0004)
        floor.add_room(Room(1, RoomType.STUDY, 12.502))
        floor.add_room(Room(2, RoomType.OFFICE, 12.502))
        building = Building("Tight")
        building.add_floor(floor)

        text = dumps([building])
        assert "1:5.0004:5.0004:2" in text.splitlines()
        loaded = parse_buildings(text)[0].get_floor(1)
        assert (loaded.width, loaded.length) == (5.0004, 5.0004)
        assert [r.area for r in loaded.rooms] == [12.502, 12.502]

    def test_save_and_load(self, tmp_path):
        buildings = _campus()
        path = tmp_path / "campus.txt"
        save_buildings(buildings, path)
        assert load_buildings(path) == buildings

    def test_empty_list(self):
        assert dumps([]) == ""
