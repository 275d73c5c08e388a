"""Validation checks for a loaded building."""

from __future__ import annotations

from bmsim.geometry.footprint import overhang, supports
from bmsim.maintenance.rotation import check_order
from bmsim.model.building import Building
from bmsim.model.floor import MIN_LENGTH, MIN_WIDTH, Floor
from bmsim.model.room import AREA_TOLERANCE, MIN_AREA


def validate_building(building: Building) -> list[str]:
    """Return a list of invariant violations found in *building*."""
    errors: list[str] = []
    floors = sorted(building.floors, key=lambda f: f.number)

    # Floor numbering is contiguous from the ground floor
    for expected, floor in enumerate(floors, start=1):
        if floor.number != expected:
            errors.append(f"Floor numbers are not contiguous: expected {expected}, got {floor.number}.")
            break

    # Every upper floor sits on the footprint of the floor below
    by_number = {f.number: f for f in floors}
    for floor in floors:
        below = by_number.get(floor.number - 1)
        if below is not None and not supports(below.footprint, floor.footprint):
            errors.append(
                f"Floor {floor.number} overhangs floor {below.number} by "
                f"{overhang(below.footprint, floor.footprint):.2f} m²."
            )

    for floor in floors:
        errors.extend(validate_floor(floor))
    return errors


def validate_floor(floor: Floor) -> list[str]:
    """Return a list of floor-level validation errors."""
    errors: list[str] = []

    if floor.width < MIN_WIDTH or floor.length < MIN_LENGTH:
        errors.append(
            f"Floor {floor.number} is {floor.width:.2f}x{floor.length:.2f}, "
            f"below the {MIN_WIDTH:g}x{MIN_LENGTH:g} minimum."
        )

    # Check occupied area
    if floor.occupied_area() > floor.calculate_area() + AREA_TOLERANCE:
        errors.append(
            f"Floor {floor.number} rooms occupy {floor.occupied_area():.2f} m² "
            f"> floor area {floor.calculate_area():.2f} m²."
        )

    for room in floor.rooms:
        if room.area < MIN_AREA:
            errors.append(f"Room {room.number} area {room.area:.2f} m² < min {MIN_AREA:g} m².")
        evaluator = room.hazard_evaluator
        if evaluator is not None:
            for kind in evaluator.kinds:
                if room.get_sensor(kind) is None:
                    errors.append(
                        f"Room {room.number} hazard evaluator refers to missing {kind.value}."
                    )

    rotation = floor.maintenance_rotation
    if rotation is not None:
        try:
            check_order(rotation.order)
        except ValueError as exc:
            errors.append(f"Floor {floor.number} maintenance order: {exc}")
        in_maintenance = [r.number for r in floor.rooms if r.in_maintenance]
        expected = [rotation.current_room.number] if rotation.active else []
        if in_maintenance != expected:
            errors.append(
                f"Floor {floor.number} has rooms {in_maintenance} in maintenance, "
                f"expected {expected}."
            )
    elif any(r.in_maintenance for r in floor.rooms):
        errors.append(f"Floor {floor.number} has rooms in maintenance but no rotation.")

    return errors
