"""Typed payloads published on the ``EventBus``.

Each message class names its event via ``event`` and carries only the fields
that event needs. Publish with ``bus.publish(msg)``; handlers receive it as
the ``message`` keyword.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar, Tuple

from questline.components.mission_marker import MissionStatus
from questline.components.player_progress import PlayerProgress
from questline.components.quiz import QuestionOutcome, QuizQuestion, QuizResult
from questline.events.bus import (
    EVENT_ACHIEVEMENT_UNLOCKED,
    EVENT_ANSWER_SUBMITTED,
    EVENT_COINS_INSUFFICIENT,
    EVENT_INTEGRITY_WARNING,
    EVENT_ITEM_PICKED_UP,
    EVENT_MISSION_STATUS_CHANGED,
    EVENT_PLAYTIME_ELAPSED,
    EVENT_PROGRESS_CHANGED,
    EVENT_QUESTION_RESOLVED,
    EVENT_QUIZ_ABANDONED,
    EVENT_QUIZ_CONTINUE,
    EVENT_QUIZ_FINISHED,
    EVENT_QUIZ_REJECTED,
    EVENT_QUIZ_STARTED,
    EVENT_STORAGE_FAILED,
    EVENT_TICK,
)


@dataclass(frozen=True, slots=True)
class Tick:
    event: ClassVar[str] = EVENT_TICK
    dt: float


@dataclass(frozen=True, slots=True)
class QuizStarted:
    event: ClassVar[str] = EVENT_QUIZ_STARTED
    mission_id: int
    questions: Tuple[QuizQuestion, ...]


@dataclass(frozen=True, slots=True)
class AnswerSubmitted:
    event: ClassVar[str] = EVENT_ANSWER_SUBMITTED
    mission_id: int
    question_index: int
    attempt: int
    selected_index: int


@dataclass(frozen=True, slots=True)
class QuizContinue:
    event: ClassVar[str] = EVENT_QUIZ_CONTINUE
    mission_id: int


@dataclass(frozen=True, slots=True)
class QuizAbandoned:
    event: ClassVar[str] = EVENT_QUIZ_ABANDONED
    mission_id: int


@dataclass(frozen=True, slots=True)
class QuizRejected:
    event: ClassVar[str] = EVENT_QUIZ_REJECTED
    mission_id: int
    reason: str


@dataclass(frozen=True, slots=True)
class QuestionResolved:
    event: ClassVar[str] = EVENT_QUESTION_RESOLVED
    outcome: QuestionOutcome


@dataclass(frozen=True, slots=True)
class QuizFinished:
    event: ClassVar[str] = EVENT_QUIZ_FINISHED
    result: QuizResult
    elapsed: float
    success: bool


@dataclass(frozen=True, slots=True)
class ItemPickedUp:
    event: ClassVar[str] = EVENT_ITEM_PICKED_UP
    item_id: str


@dataclass(frozen=True, slots=True)
class PlaytimeElapsed:
    event: ClassVar[str] = EVENT_PLAYTIME_ELAPSED
    minutes: int


@dataclass(frozen=True, slots=True)
class ProgressChanged:
    event: ClassVar[str] = EVENT_PROGRESS_CHANGED
    progress: PlayerProgress | None


@dataclass(frozen=True, slots=True)
class MissionStatusChanged:
    event: ClassVar[str] = EVENT_MISSION_STATUS_CHANGED
    mission_id: int
    status: MissionStatus


@dataclass(frozen=True, slots=True)
class AchievementUnlocked:
    event: ClassVar[str] = EVENT_ACHIEVEMENT_UNLOCKED
    names: Tuple[str, ...]


@dataclass(frozen=True, slots=True)
class CoinsInsufficient:
    event: ClassVar[str] = EVENT_COINS_INSUFFICIENT
    requested: int
    available: int


@dataclass(frozen=True, slots=True)
class IntegrityWarning:
    event: ClassVar[str] = EVENT_INTEGRITY_WARNING
    player_name: str
    problems: Tuple[str, ...]


@dataclass(frozen=True, slots=True)
class StorageFailed:
    event: ClassVar[str] = EVENT_STORAGE_FAILED
    key: str
    error: str
