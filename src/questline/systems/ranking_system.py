from __future__ import annotations

import logging

from esper import World

from questline.persistence.ranking_board import RankingBoard
from questline.utils.ranking import build_ranking_entry
from questline.world import get_progress_state

logger = logging.getLogger(__name__)


class RankingSystem:
    """Pushes sanitized progress snapshots to the ranking board on request."""

    def __init__(self, world: World, board: RankingBoard | None) -> None:
        self.world = world
        self._board = board

    @property
    def enabled(self) -> bool:
        return self._board is not None

    def submit(self) -> bool:
        """Return True when the board record was created or replaced.

        Existing records are only replaced by a strictly higher score. Board
        failures are logged and reported as False; retrying is up to the caller.
        """

        if self._board is None:
            logger.info("Ranking board not configured - skipping submission")
            return False
        progress = get_progress_state(self.world).snapshot
        if progress is None:
            return False
        entry = build_ranking_entry(progress)
        try:
            existing = self._board.stored_score(entry.player_name)
            if existing is not None and entry.total_score <= existing:
                logger.info("Ranking for %s kept at %d (new %d)", entry.player_name, existing, entry.total_score)
                return False
            self._board.put(entry)
        except Exception:
            logger.exception("Ranking submission failed for %s", entry.player_name)
            return False
        logger.info("Ranking for %s updated to %d", entry.player_name, entry.total_score)
        return True
