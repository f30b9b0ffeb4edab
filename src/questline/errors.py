"""Precondition failures raised by progress transactions.

Both subclass ``ValueError`` so callers that only care about "rejected" can
catch the builtin.
"""


class MissionLockedError(ValueError):
    def __init__(self, mission_id: int) -> None:
        super().__init__(f"Mission {mission_id} prerequisites not met")
        self.mission_id = mission_id


class InsufficientCoinsError(ValueError):
    def __init__(self, requested: int, available: int) -> None:
        super().__init__(f"Not enough coins. Need {requested}, have {available}")
        self.requested = requested
        self.available = available


class ItemUnavailableError(ValueError):
    def __init__(self, item_id: str, reason: str) -> None:
        super().__init__(f"Item {item_id} unavailable: {reason}")
        self.item_id = item_id
        self.reason = reason


class TitleLockedError(ValueError):
    def __init__(self, title: str) -> None:
        super().__init__(f"Title '{title}' has not been unlocked")
        self.title = title
