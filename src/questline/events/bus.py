from blinker import Signal
from typing import Callable, Dict

class EventBus:
    """Simple event bus leveraging blinker Signal objects."""
    def __init__(self):
        self._signals: Dict[str, Signal] = {}

    def subscribe(self, name: str, fn) -> Callable[[], None]:
        sig = self._signals.setdefault(name, Signal(name))
        # Use weak=False to retain strong reference to bound methods so systems not kept in a variable still receive events.
        sig.connect(fn, weak=False)

        def unsubscribe() -> None:
            sig.disconnect(fn)

        return unsubscribe

    def emit(self, name: str, **payload):
        sig = self._signals.get(name)
        if sig:
            sig.send(self, **payload)

    def publish(self, message) -> None:
        """Emit a typed message under its event name as ``message=...``."""
        self.emit(message.event, message=message)


# ============================================================================
# SYSTEM & TIMING
# ============================================================================
EVENT_TICK = "tick"                                  # message: Tick


# ============================================================================
# QUIZ FLOW (consumed from presentation)
# ============================================================================
EVENT_QUIZ_STARTED = "quiz_started"                  # message: QuizStarted
EVENT_ANSWER_SUBMITTED = "answer_submitted"          # message: AnswerSubmitted
EVENT_QUIZ_CONTINUE = "quiz_continue"                # message: QuizContinue
EVENT_QUIZ_ABANDONED = "quiz_abandoned"              # message: QuizAbandoned


# ============================================================================
# QUIZ FLOW (produced)
# ============================================================================
EVENT_QUIZ_REJECTED = "quiz_rejected"                # message: QuizRejected
EVENT_QUESTION_RESOLVED = "question_resolved"        # message: QuestionResolved
EVENT_QUIZ_FINISHED = "quiz_finished"                # message: QuizFinished


# ============================================================================
# WORLD INTERACTION
# ============================================================================
EVENT_ITEM_PICKED_UP = "item_picked_up"              # message: ItemPickedUp
EVENT_PLAYTIME_ELAPSED = "playtime_elapsed"          # message: PlaytimeElapsed


# ============================================================================
# PROGRESS & PERSISTENCE
# ============================================================================
EVENT_PROGRESS_CHANGED = "progress_changed"          # message: ProgressChanged
EVENT_MISSION_STATUS_CHANGED = "mission_status_changed"  # message: MissionStatusChanged
EVENT_ACHIEVEMENT_UNLOCKED = "achievement_unlocked"  # message: AchievementUnlocked
EVENT_COINS_INSUFFICIENT = "coins_insufficient"      # message: CoinsInsufficient
EVENT_INTEGRITY_WARNING = "integrity_warning"        # message: IntegrityWarning
EVENT_STORAGE_FAILED = "storage_failed"              # message: StorageFailed
