from __future__ import annotations

from typing import Dict, List, Protocol

from questline.utils.ranking import RankingEntry


class RankingBoard(Protocol):
    """Remote ranking service as seen by the engine."""

    def stored_score(self, player_name: str) -> int | None: ...

    def put(self, entry: RankingEntry) -> None: ...


class InMemoryRankingBoard:
    def __init__(self) -> None:
        self._entries: Dict[str, RankingEntry] = {}

    def stored_score(self, player_name: str) -> int | None:
        entry = self._entries.get(player_name)
        return entry.total_score if entry is not None else None

    def put(self, entry: RankingEntry) -> None:
        self._entries[entry.player_name] = entry

    def get(self, player_name: str) -> RankingEntry | None:
        return self._entries.get(player_name)

    def top(self, limit: int = 10) -> List[RankingEntry]:
        ranked = sorted(self._entries.values(), key=lambda e: e.total_score, reverse=True)
        return ranked[:limit]
