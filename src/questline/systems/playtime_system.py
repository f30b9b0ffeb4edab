from esper import World

from questline.constants import PLAYTIME_TICK_SECONDS
from questline.events.bus import EVENT_TICK, EventBus
from questline.events.messages import PlaytimeElapsed, Tick
from questline.world import get_progress_state


class PlaytimeSystem:
    """Converts tick time into whole playtime minutes while a session is active."""

    def __init__(self, world: World, event_bus: EventBus, *, tick_seconds: float = PLAYTIME_TICK_SECONDS):
        self.world = world
        self.event_bus = event_bus
        self._tick_seconds = float(tick_seconds)
        self._accumulated = 0.0
        self.event_bus.subscribe(EVENT_TICK, self.on_tick)

    def on_tick(self, sender, **payload):
        message: Tick | None = payload.get("message")
        if message is None or self._tick_seconds <= 0:
            return
        if get_progress_state(self.world).snapshot is None:
            self._accumulated = 0.0
            return
        self._accumulated += message.dt
        minutes = int(self._accumulated // self._tick_seconds)
        if minutes <= 0:
            return
        self._accumulated -= minutes * self._tick_seconds
        self.event_bus.publish(PlaytimeElapsed(minutes=minutes))
