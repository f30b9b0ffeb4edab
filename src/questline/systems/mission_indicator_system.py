from __future__ import annotations

from esper import World

from questline.components.mission_marker import MissionMarker, MissionStatus
from questline.events.bus import EVENT_PROGRESS_CHANGED, EventBus
from questline.events.messages import MissionStatusChanged, ProgressChanged
from questline.utils.dependency import mission_status


class MissionIndicatorSystem:
    """Keeps ``MissionMarker`` components in step with the live progress.

    Only markers whose status actually changed produce a
    ``MissionStatusChanged`` event, so renderers can redraw incrementally.
    """

    def __init__(self, world: World, event_bus: EventBus) -> None:
        self.world = world
        self.event_bus = event_bus
        self.event_bus.subscribe(EVENT_PROGRESS_CHANGED, self._on_progress_changed)

    def _on_progress_changed(self, sender, **payload) -> None:
        message: ProgressChanged | None = payload.get("message")
        if message is None:
            return
        completed = message.progress.completed_missions if message.progress is not None else ()
        self.refresh(completed)

    def refresh(self, completed) -> list[int]:
        done = frozenset(completed)
        changed: list[int] = []
        for _, marker in sorted(self.world.get_component(MissionMarker), key=lambda item: item[1].mission_id):
            status = mission_status(marker.mission_id, done)
            if status == marker.status:
                continue
            marker.status = status
            changed.append(marker.mission_id)
            self.event_bus.publish(MissionStatusChanged(mission_id=marker.mission_id, status=status))
        return changed

    def status_of(self, mission_id: int) -> MissionStatus | None:
        for _, marker in self.world.get_component(MissionMarker):
            if marker.mission_id == mission_id:
                return marker.status
        return None
