from __future__ import annotations

import logging
from time import monotonic
from typing import Callable

from esper import World

from questline.components.quiz import QuestionOutcome, QuizQuestion
from questline.components.quiz_session import QuizSession
from questline.constants import QUESTION_TIME_LIMIT, QUIZ_RETRY_CAP
from questline.events.bus import (
    EVENT_ANSWER_SUBMITTED,
    EVENT_QUIZ_ABANDONED,
    EVENT_QUIZ_CONTINUE,
    EVENT_QUIZ_STARTED,
    EVENT_TICK,
    EventBus,
)
from questline.events.messages import (
    AnswerSubmitted,
    QuestionResolved,
    QuizAbandoned,
    QuizContinue,
    QuizFinished,
    QuizRejected,
    QuizStarted,
    Tick,
)
from questline.utils.dependency import is_accessible
from questline.utils.scoring import feedback_points, remaining_time_bonus, score_answer
from questline.world import get_progress_state

logger = logging.getLogger(__name__)


class QuizSystem:
    """Runs the question sequence for one mission at a time.

    Mission N asks N questions. Each question counts down on ``Tick`` events
    and is resolved exactly once, by a submission or by the timer running out;
    the session then waits for ``QuizContinue`` before moving on. A wrong
    answer may be retried ``QUIZ_RETRY_CAP`` times before the whole attempt
    fails. On the final outcome a ``QuizFinished`` carries the mission-level
    result, scored from the elapsed time since the quiz started.
    """

    def __init__(
        self,
        world: World,
        event_bus: EventBus,
        *,
        time_limit: float = QUESTION_TIME_LIMIT,
        retry_cap: int = QUIZ_RETRY_CAP,
        clock: Callable[[], float] | None = None,
    ) -> None:
        self.world = world
        self.event_bus = event_bus
        self._time_limit = float(time_limit)
        self._retry_cap = max(0, int(retry_cap))
        self._clock = clock or monotonic
        self._session_entity: int | None = None

        self.event_bus.subscribe(EVENT_QUIZ_STARTED, self._on_quiz_started)
        self.event_bus.subscribe(EVENT_ANSWER_SUBMITTED, self._on_answer_submitted)
        self.event_bus.subscribe(EVENT_QUIZ_CONTINUE, self._on_quiz_continue)
        self.event_bus.subscribe(EVENT_QUIZ_ABANDONED, self._on_quiz_abandoned)
        self.event_bus.subscribe(EVENT_TICK, self._on_tick)

    @property
    def session(self) -> QuizSession | None:
        if self._session_entity is None:
            return None
        try:
            return self.world.component_for_entity(self._session_entity, QuizSession)
        except KeyError:
            self._session_entity = None
            return None

    # ------------------------------------------------------------------
    # Event handlers
    # ------------------------------------------------------------------

    def _on_quiz_started(self, sender, **payload) -> None:
        message: QuizStarted | None = payload.get("message")
        if message is None:
            return
        reason = self._rejection_reason(message.mission_id, message.questions)
        if reason is not None:
            logger.warning("Quiz for mission %d rejected: %s", message.mission_id, reason)
            self.event_bus.publish(QuizRejected(mission_id=message.mission_id, reason=reason))
            return
        self._end_session()
        session = QuizSession(
            mission_id=message.mission_id,
            questions=tuple(message.questions),
            started_at=self._clock(),
            time_limit=self._time_limit,
            time_remaining=self._time_limit,
        )
        self._session_entity = self.world.create_entity(session)
        logger.info("Quiz started for mission %d", message.mission_id)

    def _on_answer_submitted(self, sender, **payload) -> None:
        message: AnswerSubmitted | None = payload.get("message")
        session = self.session
        if message is None or session is None or session.resolved:
            return
        if (
            message.mission_id != session.mission_id
            or message.question_index != session.question_index
            or message.attempt != session.attempt
        ):
            return
        is_correct = message.selected_index == session.current_question.correct_index
        self._resolve(session, message.selected_index, is_correct, timed_out=False)

    def _on_tick(self, sender, **payload) -> None:
        message: Tick | None = payload.get("message")
        session = self.session
        if message is None or session is None or session.resolved:
            return
        session.time_remaining = max(0.0, session.time_remaining - message.dt)
        if session.time_remaining <= 0.0:
            self._resolve(session, None, False, timed_out=True)

    def _on_quiz_continue(self, sender, **payload) -> None:
        message: QuizContinue | None = payload.get("message")
        session = self.session
        if message is None or session is None or message.mission_id != session.mission_id:
            return
        if not session.resolved:
            return
        last = session.outcomes[-1]
        if last.is_correct:
            session.question_index += 1
            session.attempt = 1
        else:
            session.attempt += 1
        session.time_remaining = session.time_limit
        session.resolved = False

    def _on_quiz_abandoned(self, sender, **payload) -> None:
        message: QuizAbandoned | None = payload.get("message")
        session = self.session
        if message is None or session is None or message.mission_id != session.mission_id:
            return
        logger.info("Quiz for mission %d abandoned", session.mission_id)
        self._end_session()

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _rejection_reason(self, mission_id: int, questions: tuple[QuizQuestion, ...]) -> str | None:
        progress = get_progress_state(self.world).snapshot
        if progress is None:
            return "no active progress"
        if progress.has_completed(mission_id):
            return "mission already completed"
        if not is_accessible(mission_id, progress.completed_missions):
            return "mission locked"
        if len(questions) != mission_id:
            return f"expected {mission_id} questions, got {len(questions)}"
        return None

    def _resolve(self, session: QuizSession, selected: int | None, is_correct: bool, *, timed_out: bool) -> None:
        session.resolved = True
        retries_left = max(0, self._retry_cap - (session.attempt - 1))
        bonus = 0
        points = 0
        if is_correct:
            bonus = remaining_time_bonus(session.time_remaining, session.time_limit)
            points = feedback_points(session.time_remaining, session.attempt, session.time_limit)
        outcome = QuestionOutcome(
            mission_id=session.mission_id,
            question_index=session.question_index,
            attempt=session.attempt,
            selected_index=selected,
            is_correct=is_correct,
            timed_out=timed_out,
            time_remaining=session.time_remaining,
            feedback_bonus=bonus,
            feedback_points=points,
            retries_left=retries_left,
        )
        session.outcomes.append(outcome)
        self.event_bus.publish(QuestionResolved(outcome=outcome))

        if is_correct and session.is_last_question:
            self._finish(session, selected, success=True)
        elif not is_correct and retries_left == 0:
            self._finish(session, selected, success=False)

    def _finish(self, session: QuizSession, selected: int | None, *, success: bool) -> None:
        question = session.current_question
        elapsed = max(0.0, self._clock() - session.started_at)
        # A timed-out final answer never matches the correct index.
        chosen = selected if selected is not None else -1
        result = score_answer(
            session.mission_id,
            chosen,
            question.correct_index,
            elapsed,
            question_index=session.question_index,
        )
        self._end_session()
        self.event_bus.publish(QuizFinished(result=result, elapsed=elapsed, success=success))

    def _end_session(self) -> None:
        if self._session_entity is None:
            return
        if self.world.entity_exists(self._session_entity):
            self.world.delete_entity(self._session_entity, immediate=True)
        self._session_entity = None
