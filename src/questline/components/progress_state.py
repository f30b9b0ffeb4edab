from __future__ import annotations

from dataclasses import dataclass

from questline.components.player_progress import PlayerProgress


@dataclass(slots=True)
class ProgressState:
    """Singleton component holding the authoritative progress snapshot.

    Only ``ProgressStoreSystem`` swaps ``snapshot``; everything else reads it.
    """

    snapshot: PlayerProgress | None = None
