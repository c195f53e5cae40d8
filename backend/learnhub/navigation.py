"""Session navigation over the open lesson: open, next, previous, finish."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from .catalog import LessonCatalog
from .lessons import Lesson, Section
from .progress import ProgressModel, ProgressUpdate

logger = logging.getLogger(__name__)


class NavigationError(ValueError):
    """Raised when a transition is not valid in the current navigation state."""


@dataclass(frozen=True)
class NavigationState:
    lesson_id: Optional[str] = None
    section_index: int = 0

    @property
    def is_home(self) -> bool:
        return self.lesson_id is None


@dataclass(frozen=True)
class QuizOutcome:
    correct: bool
    correct_index: int
    explanation: str
    update: ProgressUpdate


class NavigationController:
    def __init__(self, catalog: LessonCatalog, progress: ProgressModel) -> None:
        self._catalog = catalog
        self._progress = progress
        self._lesson: Optional[Lesson] = None
        self._index = 0

    @property
    def state(self) -> NavigationState:
        if self._lesson is None:
            return NavigationState()
        return NavigationState(lesson_id=self._lesson.id, section_index=self._index)

    @property
    def current_lesson(self) -> Optional[Lesson]:
        return self._lesson

    @property
    def current_section(self) -> Optional[Section]:
        if self._lesson is None or not self._lesson.sections:
            return None
        return self._lesson.sections[self._index]

    def _require_open(self) -> Lesson:
        if self._lesson is None:
            raise NavigationError("No lesson is open.")
        return self._lesson

    def open(self, lesson_id: str) -> NavigationState:
        lesson = self._catalog.find_by_id(lesson_id)
        if lesson is None:
            raise NavigationError(f"Lesson '{lesson_id}' was not found.")
        if not lesson.sections:
            raise NavigationError(f"Lesson '{lesson_id}' has no sections.")
        self._lesson = lesson
        self._index = 0
        logger.debug("Opened lesson %s", lesson_id)
        return self.state

    def start_learning(self) -> NavigationState:
        return self.open(self._catalog.static_lessons[0].id)

    def next(self) -> ProgressUpdate:
        lesson = self._require_open()
        if self._index >= lesson.last_index:
            raise NavigationError("Already at the last section; finish the lesson instead.")
        update = self._progress.complete_section(lesson.id, lesson.sections[self._index].id)
        self._index += 1
        return update

    def previous(self) -> NavigationState:
        self._require_open()
        if self._index <= 0:
            raise NavigationError("Already at the first section.")
        self._index -= 1
        return self.state

    def finish(self) -> ProgressUpdate:
        lesson = self._require_open()
        if self._index != lesson.last_index:
            raise NavigationError("Finish is only available on the last section.")
        update = self._progress.complete_module(lesson.id, lesson.sections[self._index].id)
        self.back_to_home()
        return update

    def back_to_home(self) -> NavigationState:
        self._lesson = None
        self._index = 0
        return self.state

    def submit_quiz(self, selected_index: int) -> QuizOutcome:
        lesson = self._require_open()
        section = lesson.sections[self._index]
        quiz = section.content.quiz
        if quiz is None:
            raise NavigationError(f"Section '{section.id}' has no quiz.")
        if not 0 <= selected_index < len(quiz.options):
            raise NavigationError(f"Option {selected_index} does not exist.")
        correct = quiz.is_correct(selected_index)
        update = self._progress.record_quiz_result(lesson.id, section.id, correct)
        return QuizOutcome(
            correct=correct,
            correct_index=quiz.correct_index,
            explanation=quiz.explanation,
            update=update,
        )


__all__ = ["NavigationController", "NavigationError", "NavigationState", "QuizOutcome"]
