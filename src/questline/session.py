"""Session wiring: build the event bus, world and systems once per player."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable

from esper import World

from questline.events.bus import EventBus
from questline.events.messages import Tick
from questline.factories.collectibles import CollectibleRegistry
from questline.factories.shop import ShopCatalog
from questline.persistence.blob_store import BlobStore, MemoryBlobStore
from questline.persistence.ranking_board import RankingBoard
from questline.systems.integrity_monitor_system import IntegrityMonitorSystem
from questline.systems.mission_indicator_system import MissionIndicatorSystem
from questline.systems.playtime_system import PlaytimeSystem
from questline.systems.progress_store_system import ProgressStoreSystem
from questline.systems.quiz_system import QuizSystem
from questline.systems.ranking_system import RankingSystem
from questline.world import create_world


def configure_logging(level: int = logging.INFO) -> None:
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@dataclass
class GameSession:
    """Explicit context handed to whatever needs the progression systems."""

    event_bus: EventBus
    world: World
    store: ProgressStoreSystem
    quiz: QuizSystem
    indicators: MissionIndicatorSystem
    integrity_monitor: IntegrityMonitorSystem
    playtime: PlaytimeSystem
    ranking: RankingSystem

    def tick(self, dt: float) -> None:
        self.event_bus.publish(Tick(dt=dt))


def create_session(
    player_name: str,
    *,
    storage: BlobStore | None = None,
    ranking_board: RankingBoard | None = None,
    collectibles: CollectibleRegistry | None = None,
    shop: ShopCatalog | None = None,
    clock: Callable[[], float] | None = None,
) -> GameSession:
    event_bus = EventBus()
    world = create_world()

    # Indicators subscribe before the store starts so the first snapshot
    # already drives marker state.
    indicators = MissionIndicatorSystem(world, event_bus)
    store = ProgressStoreSystem(
        world,
        event_bus,
        storage or MemoryBlobStore(),
        collectibles=collectibles,
        shop=shop,
    )
    quiz = QuizSystem(world, event_bus, clock=clock)
    integrity_monitor = IntegrityMonitorSystem(world, event_bus)
    playtime = PlaytimeSystem(world, event_bus)
    ranking = RankingSystem(world, ranking_board)

    store.start_session(player_name)
    return GameSession(
        event_bus=event_bus,
        world=world,
        store=store,
        quiz=quiz,
        indicators=indicators,
        integrity_monitor=integrity_monitor,
        playtime=playtime,
        ranking=ranking,
    )
