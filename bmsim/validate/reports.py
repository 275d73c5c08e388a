"""Building state reporting."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from bmsim.maintenance.rotation import maintenance_minutes
from bmsim.model.building import Building


def build_building_report(
    building: Building,
    validation_errors: list[str],
    minutes: int = 0,
) -> dict[str, Any]:
    """Build a serialisable report dict."""
    floors = []
    for floor in building.floors:
        rotation = floor.maintenance_rotation
        maintenance = None
        if rotation is not None and rotation.active:
            maintenance = {
                "order": list(rotation.order),
                "current_room": rotation.current_room.number,
                "elapsed_minutes": rotation.elapsed_minutes,
                "required_minutes": maintenance_minutes(rotation.current_room),
            }
        floors.append(
            {
                "number": floor.number,
                "width": floor.width,
                "length": floor.length,
                "free_area": round(floor.free_area(), 4),
                "maintenance": maintenance,
                "rooms": [
                    {
                        "number": room.number,
                        "type": room.type.value,
                        "area": room.area,
                        "state": room.evaluate_room_state().value,
                        "hazard_level": room.evaluate_hazard_level(),
                        "comfort_level": round(room.comfort_level(), 4),
                        "sensors": [s.kind.value for s in room.sensors],
                    }
                    for room in floor.rooms
                ],
            }
        )
    return {
        "building": building.name,
        "minutes": minutes,
        "floors": floors,
        "validation_errors": validation_errors,
        "ok": len(validation_errors) == 0,
    }


def save_report(report: dict[str, Any], path: Path) -> None:
    path.write_text(json.dumps(report, indent=2, ensure_ascii=False), encoding="utf-8")
