import json
from pathlib import Path

from bmsim.savefile.loader import load_buildings
from bmsim.validate.reports import build_building_report, save_report

FIXTURES = Path(__file__).parent / "fixtures"


def test_building_report_summarises_rooms():
    building = load_buildings(FIXTURES / "buildings.txt")[0]

    report = build_building_report(building, [], minutes=0)

    assert report["ok"] is True
    assert report["building"] == "General Purpose South"
    assert [f["number"] for f in report["floors"]] == [1, 2, 3]
    ground = report["floors"][0]
    assert ground["free_area"] == 35
    assert ground["maintenance"] == {
        "order": [101, 102, 103],
        "current_room": 101,
        "elapsed_minutes": 0,
        "required_minutes": 8,
    }
    states = {r["number"]: r["state"] for r in ground["rooms"]}
    assert states == {101: "MAINTENANCE", 102: "OPEN", 103: "OPEN"}
    assert ground["rooms"][0]["hazard_level"] == 17
    assert report["floors"][1]["maintenance"] is None


def test_building_report_not_ok_with_errors(tmp_path):
    building = load_buildings(FIXTURES / "buildings.txt")[1]
    report = build_building_report(building, ["Floor 1 overhangs floor 0."], minutes=30)

    path = tmp_path / "report.json"
    save_report(report, path)
    saved = json.loads(path.read_text(encoding="utf-8"))

    assert saved["ok"] is False
    assert saved["minutes"] == 30
    assert saved["validation_errors"] == ["Floor 1 overhangs floor 0."]
