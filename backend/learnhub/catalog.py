"""Unified, id-addressable view over static and generated lessons."""

from __future__ import annotations

import logging
from typing import List, Optional, Sequence, Tuple

from .lesson_content import STATIC_LESSONS
from .lessons import Lesson
from .progress import ProgressModel, ProgressUpdate
from .progress_record import ProgressRecord

logger = logging.getLogger(__name__)


class LessonCatalog:
    """Static lessons are fixed at construction; generated ones live in the progress record."""

    def __init__(self, progress: ProgressModel, static_lessons: Sequence[Lesson] = STATIC_LESSONS) -> None:
        self._progress = progress
        self._static: Tuple[Lesson, ...] = tuple(static_lessons)
        self._static_ids = {lesson.id for lesson in self._static}

    @property
    def static_lessons(self) -> Tuple[Lesson, ...]:
        return self._static

    def dynamic_lessons(self) -> List[Lesson]:
        return self._progress.dynamic_lessons()

    def all_lessons(self) -> List[Lesson]:
        return [*self._static, *self.dynamic_lessons()]

    def find_by_id(self, lesson_id: str) -> Optional[Lesson]:
        for lesson in self._static:
            if lesson.id == lesson_id:
                return lesson
        for lesson in self.dynamic_lessons():
            if lesson.id == lesson_id:
                return lesson
        return None

    def require(self, lesson_id: str) -> Lesson:
        lesson = self.find_by_id(lesson_id)
        if lesson is None:
            raise LookupError(f"Lesson '{lesson_id}' was not found.")
        return lesson

    def add_dynamic_lesson(self, lesson: Lesson) -> ProgressUpdate:
        if lesson.id in self._static_ids:
            raise ValueError(f"Lesson id '{lesson.id}' is reserved by a built-in lesson.")
        update = self._progress.add_dynamic_lesson(lesson)
        logger.info("Added generated lesson %s (%s sections)", lesson.id, len(lesson.sections))
        return update

    def section_progress(self, lesson_id: str, record: Optional[ProgressRecord] = None) -> Tuple[int, int]:
        """Return ``(completed, total)`` section counts for ``lesson_id``."""
        lesson = self.require(lesson_id)
        snapshot = record or self._progress.snapshot()
        completed = sum(
            1 for section in lesson.sections if snapshot.has_completed_section(lesson.section_key(section.id))
        )
        return completed, len(lesson.sections)


__all__ = ["LessonCatalog"]
