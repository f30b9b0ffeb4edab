from __future__ import annotations

import logging
from typing import Any, Callable, Dict

from esper import World

from questline.components.player_progress import PlayerProgress
from questline.components.quiz import QuizResult
from questline.constants import STORAGE_KEY_PREFIX
from questline.errors import InsufficientCoinsError, MissionLockedError
from questline.events.bus import (
    EVENT_ITEM_PICKED_UP,
    EVENT_PLAYTIME_ELAPSED,
    EVENT_PROGRESS_CHANGED,
    EVENT_QUIZ_FINISHED,
    EventBus,
)
from questline.events.messages import (
    AchievementUnlocked,
    CoinsInsufficient,
    ItemPickedUp,
    PlaytimeElapsed,
    ProgressChanged,
    QuizFinished,
    StorageFailed,
)
from questline.factories.collectibles import CollectibleRegistry, default_collectible_registry
from questline.factories.shop import ShopCatalog, default_shop_catalog
from questline.persistence.blob_store import BlobStore
from questline.utils import integrity, transactions
from questline.utils.dependency import is_accessible, list_available
from questline.world import get_progress_state

logger = logging.getLogger(__name__)


def storage_key(player_name: str) -> str:
    return f"{STORAGE_KEY_PREFIX}{player_name}"


class ProgressStoreSystem:
    """Owns the live progress snapshot: load on start, save after every change.

    All mutations run a pure transaction from ``questline.utils.transactions``,
    swap the snapshot wholesale, persist it and then publish
    ``ProgressChanged``, so observers only ever see completed transactions.
    """

    def __init__(
        self,
        world: World,
        event_bus: EventBus,
        storage: BlobStore,
        *,
        collectibles: CollectibleRegistry | None = None,
        shop: ShopCatalog | None = None,
    ) -> None:
        self.world = world
        self.event_bus = event_bus
        self._storage = storage
        self._collectibles = collectibles or default_collectible_registry
        self._shop = shop or default_shop_catalog

        self.event_bus.subscribe(EVENT_QUIZ_FINISHED, self._on_quiz_finished)
        self.event_bus.subscribe(EVENT_ITEM_PICKED_UP, self._on_item_picked_up)
        self.event_bus.subscribe(EVENT_PLAYTIME_ELAPSED, self._on_playtime_elapsed)

    @property
    def progress(self) -> PlayerProgress | None:
        return get_progress_state(self.world).snapshot

    def _require_progress(self) -> PlayerProgress:
        progress = self.progress
        if progress is None:
            raise RuntimeError("Progress session not started")
        return progress

    # ------------------------------------------------------------------
    # Session lifecycle
    # ------------------------------------------------------------------

    def start_session(self, player_name: str) -> PlayerProgress:
        raw = self._read(storage_key(player_name))
        saved = integrity.load_and_validate(raw)
        if saved is not None and saved.player_name == player_name:
            logger.info("Loaded existing progress for %s", player_name)
            self._set_snapshot(saved)
            self.event_bus.publish(ProgressChanged(progress=saved))
            return saved
        progress = transactions.new_progress(player_name)
        logger.info("Created new progress for %s", player_name)
        self._commit(progress)
        return progress

    def reset_progress(self) -> None:
        progress = self.progress
        if progress is not None:
            try:
                self._storage.delete(storage_key(progress.player_name))
            except OSError as exc:
                logger.exception("Failed to erase progress for %s", progress.player_name)
                self.event_bus.publish(StorageFailed(key=storage_key(progress.player_name), error=str(exc)))
        self._set_snapshot(None)
        self.event_bus.publish(ProgressChanged(progress=None))
        logger.info("Progress reset")

    def export_progress(self) -> str | None:
        progress = self.progress
        if progress is None:
            return None
        return integrity.export_progress(progress)

    def import_progress(self, text: str) -> bool:
        imported = integrity.import_progress(text)
        if imported is None:
            return False
        self._commit(imported, claim=False)
        logger.info("Imported progress for %s", imported.player_name)
        return True

    def validate_current_state(self) -> bool:
        progress = self.progress
        return progress is not None and integrity.validate_structure(progress)

    # ------------------------------------------------------------------
    # Observers
    # ------------------------------------------------------------------

    def subscribe(self, listener: Callable[[PlayerProgress], None]) -> Callable[[], None]:
        """Register ``listener`` for new snapshots; returns an unsubscribe handle."""

        def _deliver(sender, **payload) -> None:
            message = payload.get("message")
            if message is None or message.progress is None:
                return
            try:
                listener(message.progress)
            except Exception:
                logger.exception("Error in progress listener %r", listener)

        return self.event_bus.subscribe(EVENT_PROGRESS_CHANGED, _deliver)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def available_missions(self) -> frozenset[int]:
        progress = self.progress
        if progress is None:
            return frozenset()
        return list_available(progress.completed_missions)

    def can_access_mission(self, mission_id: int) -> bool:
        progress = self.progress
        return progress is not None and is_accessible(mission_id, progress.completed_missions)

    def is_mission_completed(self, mission_id: int) -> bool:
        progress = self.progress
        return progress is not None and progress.has_completed(mission_id)

    def player_stats(self) -> Dict[str, Any] | None:
        progress = self.progress
        if progress is None:
            return None
        return transactions.player_stats(progress)

    # ------------------------------------------------------------------
    # Transactions
    # ------------------------------------------------------------------

    def complete_mission(self, mission_id: int, quiz_result: QuizResult) -> bool:
        progress = self._require_progress()
        try:
            updated = transactions.complete_mission(mission_id, quiz_result, progress)
        except MissionLockedError as exc:
            logger.warning("Rejected mission completion: %s", exc)
            return False
        self._commit(updated)
        return quiz_result.is_correct and updated.has_completed(mission_id)

    def grant_coins(self, amount: int, reason: str = "bonus") -> bool:
        progress = self._require_progress()
        try:
            updated = transactions.grant_coins(amount, progress)
        except ValueError as exc:
            logger.warning("Rejected coin grant: %s", exc)
            return False
        self._commit(updated)
        logger.info("Added %d coins for: %s", amount, reason)
        return True

    def spend_coins(self, amount: int, item: str = "item") -> bool:
        progress = self._require_progress()
        try:
            updated = transactions.spend_coins(amount, progress)
        except InsufficientCoinsError as exc:
            logger.warning("Rejected spend on %s: %s", item, exc)
            self.event_bus.publish(CoinsInsufficient(requested=exc.requested, available=exc.available))
            return False
        except ValueError as exc:
            logger.warning("Rejected spend on %s: %s", item, exc)
            return False
        self._commit(updated)
        return True

    def purchase_item(self, item_id: str) -> bool:
        progress = self._require_progress()
        if not self._shop.has(item_id):
            logger.warning("Rejected purchase of unknown item %s", item_id)
            return False
        try:
            updated = transactions.purchase_item(self._shop.get(item_id), progress)
        except InsufficientCoinsError as exc:
            logger.warning("Rejected purchase of %s: %s", item_id, exc)
            self.event_bus.publish(CoinsInsufficient(requested=exc.requested, available=exc.available))
            return False
        except ValueError as exc:
            logger.warning("Rejected purchase of %s: %s", item_id, exc)
            return False
        self._commit(updated)
        return True

    def collect_item(self, item_id: str, coin_value: int, point_value: int) -> bool:
        progress = self._require_progress()
        try:
            updated, granted = transactions.collect_item(item_id, coin_value, point_value, progress)
        except ValueError as exc:
            logger.warning("Rejected pickup of %s: %s", item_id, exc)
            return False
        if granted:
            self._commit(updated)
        return granted

    def record_speed_challenge(self, elapsed: float) -> bool:
        progress = self._require_progress()
        try:
            updated = transactions.record_speed_challenge(elapsed, progress)
        except ValueError as exc:
            logger.warning("Rejected speed sample: %s", exc)
            return False
        self._commit(updated)
        return updated is not progress

    def claim_npc_reward(self, npc_id: str, coins: int) -> bool:
        progress = self._require_progress()
        try:
            updated, granted = transactions.claim_npc_reward(npc_id, coins, progress)
        except ValueError as exc:
            logger.warning("Rejected NPC reward %s: %s", npc_id, exc)
            return False
        if granted:
            self._commit(updated)
        return granted

    def tick_playtime(self, minutes: int) -> bool:
        progress = self._require_progress()
        try:
            updated = transactions.tick_playtime(minutes, progress)
        except ValueError as exc:
            logger.warning("Rejected playtime tick: %s", exc)
            return False
        self._commit(updated)
        return True

    def record_steps(self, steps: int) -> bool:
        progress = self._require_progress()
        try:
            updated = transactions.record_steps(steps, progress)
        except ValueError as exc:
            logger.warning("Rejected step count: %s", exc)
            return False
        self._commit(updated)
        return True

    def equip_title(self, title: str) -> bool:
        progress = self._require_progress()
        try:
            updated = transactions.equip_title(title, progress)
        except ValueError as exc:
            logger.warning("Rejected title change: %s", exc)
            return False
        self._commit(updated)
        return True

    # ------------------------------------------------------------------
    # Event handlers
    # ------------------------------------------------------------------

    def _on_quiz_finished(self, sender, **payload) -> None:
        message: QuizFinished | None = payload.get("message")
        progress = self.progress
        if message is None or progress is None:
            return
        result = message.result
        try:
            updated = transactions.complete_mission(result.mission_id, result, progress)
        except MissionLockedError as exc:
            logger.warning("Ignoring finished quiz: %s", exc)
            return
        if message.success and updated is not progress:
            updated = transactions.record_speed_challenge(message.elapsed, updated)
        self._commit(updated)
        if message.success:
            logger.info("Mission %d completed by %s", result.mission_id, updated.player_name)

    def _on_item_picked_up(self, sender, **payload) -> None:
        message: ItemPickedUp | None = payload.get("message")
        if message is None or self.progress is None:
            return
        if not self._collectibles.has(message.item_id):
            logger.warning("Ignoring pickup of unknown item %s", message.item_id)
            return
        item = self._collectibles.get(message.item_id)
        self.collect_item(item.id, item.coin_value, item.point_value)

    def _on_playtime_elapsed(self, sender, **payload) -> None:
        message: PlaytimeElapsed | None = payload.get("message")
        if message is None or self.progress is None or message.minutes <= 0:
            return
        self.tick_playtime(message.minutes)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _set_snapshot(self, progress: PlayerProgress | None) -> None:
        get_progress_state(self.world).snapshot = progress

    def _commit(self, updated: PlayerProgress, *, claim: bool = True) -> None:
        if updated is self.progress:
            return
        newly: tuple[str, ...] = ()
        if claim:
            updated, newly = transactions.claim_achievements(updated)
        self._set_snapshot(updated)
        self._write(updated)
        self.event_bus.publish(ProgressChanged(progress=updated))
        if newly:
            self.event_bus.publish(AchievementUnlocked(names=newly))

    def _read(self, key: str) -> bytes | None:
        try:
            return self._storage.get(key)
        except OSError as exc:
            logger.exception("Failed to read progress blob %s", key)
            self.event_bus.publish(StorageFailed(key=key, error=str(exc)))
            return None

    def _write(self, progress: PlayerProgress) -> None:
        key = storage_key(progress.player_name)
        try:
            self._storage.set(key, integrity.serialize(progress))
        except OSError as exc:
            logger.exception("Failed to save progress for %s", progress.player_name)
            self.event_bus.publish(StorageFailed(key=key, error=str(exc)))
