from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Tuple

from questline.components.quiz import QuestionOutcome, QuizQuestion


@dataclass(slots=True)
class QuizSession:
    """Live state of the quiz currently being answered.

    ``resolved`` is the one-shot latch for the current question: once set,
    neither the countdown nor another submission may score that question
    again until the session is continued.
    """

    mission_id: int
    questions: Tuple[QuizQuestion, ...]
    started_at: float
    time_limit: float
    question_index: int = 0
    attempt: int = 1
    time_remaining: float = 0.0
    resolved: bool = False
    outcomes: List[QuestionOutcome] = field(default_factory=list)

    @property
    def current_question(self) -> QuizQuestion:
        return self.questions[self.question_index]

    @property
    def is_last_question(self) -> bool:
        return self.question_index >= len(self.questions) - 1
