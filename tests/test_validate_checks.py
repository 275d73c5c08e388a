from pathlib import Path

from bmsim.model.building import Building
from bmsim.model.floor import Floor
from bmsim.model.room import Room, RoomType
from bmsim.savefile.loader import load_buildings
from bmsim.validate.checks import validate_building, validate_floor

FIXTURES = Path(__file__).parent / "fixtures"


def _loaded_building() -> Building:
    return load_buildings(FIXTURES / "buildings.txt")[0]


def test_validate_building_passes_for_loaded_file():
    for building in load_buildings(FIXTURES / "buildings.txt"):
        assert validate_building(building) == []


def test_validate_building_reports_overhang():
    building = _loaded_building()
    # bypasses the building-level support check
    building.get_floor(2).change_dimensions(12, 8.5)

    errors = validate_building(building)

    assert any("overhangs floor 1" in e for e in errors)


def test_validate_floor_reports_stray_maintenance_flag():
    building = _loaded_building()
    floor = building.get_floor(1)
    floor.get_room(103).in_maintenance = True

    errors = validate_floor(floor)

    assert any("maintenance" in e for e in errors)


def test_validate_floor_reports_maintenance_without_rotation():
    floor = Floor(1, 10, 10)
    room = Room(1, RoomType.STUDY, 10)
    floor.add_room(room)
    room.in_maintenance = True

    errors = validate_floor(floor)

    assert errors == ["Floor 1 has rooms in maintenance but no rotation."]


def test_validate_floor_follows_rotation_hand_over():
    building = _loaded_building()
    floor = building.get_floor(1)
    floor.maintenance_rotation.skip_current_maintenance()

    assert validate_floor(floor) == []
