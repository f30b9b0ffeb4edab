from __future__ import annotations

from esper import World

from questline.components.mission_marker import MissionMarker
from questline.components.progress_state import ProgressState
from questline.factories.missions import mission_ids


def create_world() -> World:
    """Build the world resource entities shared by the progression systems."""

    world = World()

    # Register the single authoritative progress holder.
    world.create_entity(ProgressState())

    # One marker per catalog mission so renderers can query indicator state.
    for mission_id in mission_ids():
        world.create_entity(MissionMarker(mission_id=mission_id))
    return world


def get_progress_state(world: World) -> ProgressState:
    for _, state in world.get_component(ProgressState):
        return state
    state = ProgressState()
    world.create_entity(state)
    return state


def mission_markers(world: World) -> dict[int, MissionMarker]:
    return {marker.mission_id: marker for _, marker in world.get_component(MissionMarker)}
