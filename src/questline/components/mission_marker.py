"""Per-mission indicator state for renderers (minimap pins, trigger glows)."""
from dataclasses import dataclass
from enum import Enum


class MissionStatus(Enum):
    LOCKED = "locked"
    ACCESSIBLE = "accessible"
    COMPLETED = "completed"


@dataclass
class MissionMarker:
    mission_id: int
    status: MissionStatus = MissionStatus.LOCKED
