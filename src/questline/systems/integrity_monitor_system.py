from __future__ import annotations

import logging

from esper import World

from questline.constants import INTEGRITY_CHECK_INTERVAL
from questline.events.bus import EVENT_TICK, EventBus
from questline.events.messages import IntegrityWarning, Tick
from questline.utils.integrity import structural_problems
from questline.world import get_progress_state

logger = logging.getLogger(__name__)


class IntegrityMonitorSystem:
    """Periodically re-validates the live snapshot while a session runs.

    Warn-only: a failed check is logged and published as ``IntegrityWarning``
    but the snapshot is left as it is.
    """

    def __init__(
        self,
        world: World,
        event_bus: EventBus,
        *,
        check_interval: float = INTEGRITY_CHECK_INTERVAL,
    ) -> None:
        self.world = world
        self.event_bus = event_bus
        self._interval = max(0.0, float(check_interval))
        self._elapsed = 0.0
        self.event_bus.subscribe(EVENT_TICK, self._on_tick)

    def _on_tick(self, sender, **payload) -> None:
        message: Tick | None = payload.get("message")
        if message is None or self._interval <= 0.0:
            return
        self._elapsed += message.dt
        if self._elapsed < self._interval:
            return
        self._elapsed = 0.0
        self.check_now()

    def check_now(self) -> bool:
        progress = get_progress_state(self.world).snapshot
        if progress is None:
            return True
        problems = structural_problems(progress)
        if not problems:
            return True
        logger.warning("Live progress for %s failed validation: %s", progress.player_name, "; ".join(problems))
        self.event_bus.publish(IntegrityWarning(player_name=progress.player_name, problems=tuple(problems)))
        return False
