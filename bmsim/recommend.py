"""Study-room recommendation.

Walks up the building floor by floor looking for the most comfortable open
study room, and stops climbing as soon as a floor does not improve on the best
room found so far.
"""

from __future__ import annotations

import logging
from typing import Optional

from bmsim.model.building import Building
from bmsim.model.room import Room, RoomState, RoomType

logger = logging.getLogger(__name__)


def recommend_study_room(building: Building) -> Optional[Room]:
    """Return the recommended study room of *building*, or None.

    Candidates on a floor are ``STUDY`` rooms in state ``OPEN``. The search
    starts on the ground floor and ends on the first floor with no candidates;
    it only moves up while the best room of the floor is strictly more
    comfortable than the best room so far. Ties on a floor go to the room
    listed first.
    """
    if not any(True for _ in building.iter_rooms()):
        return None

    best: Optional[Room] = None
    best_comfort = -1.0
    for floor in sorted(building.floors, key=lambda f: f.number):
        candidates = [
            room
            for room in floor.rooms
            if room.type is RoomType.STUDY and room.evaluate_room_state() is RoomState.OPEN
        ]
        if not candidates:
            break
        floor_best = candidates[0]
        floor_comfort = floor_best.comfort_level()
        for room in candidates[1:]:
            comfort = room.comfort_level()
            if comfort > floor_comfort:
                floor_best, floor_comfort = room, comfort
        if floor_comfort <= best_comfort:
            break
        best, best_comfort = floor_best, floor_comfort
        logger.debug("Floor %d: best study room %d (comfort %.2f)", floor.number, best.number, best_comfort)
    return best
