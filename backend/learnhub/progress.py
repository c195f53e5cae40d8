"""Progress model: every XP-granting or tracking mutation funnels through here."""

from __future__ import annotations

import logging
import threading
from contextlib import contextmanager
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Iterator, List, Optional, Sequence

from .achievements import ACHIEVEMENT_BONUS_XP, ACHIEVEMENTS, Achievement, newly_eligible
from .lessons import Lesson, section_key
from .progress_record import PERFECT_QUIZ_SCORE, ProgressRecord, xp_threshold
from .storage import ProgressStore
from .telemetry import emit_event

logger = logging.getLogger(__name__)

SECTION_COMPLETE_XP = 30
MODULE_COMPLETE_XP = 100
QUIZ_CORRECT_XP = 20


@dataclass
class ProgressUpdate:
    """What a single mutation changed, for the UI to turn into notifications."""

    xp_awarded: int = 0
    levels_gained: int = 0
    unlocked: List[Achievement] = field(default_factory=list)
    streak_continued: Optional[bool] = None

    @property
    def changed_level(self) -> bool:
        return self.levels_gained > 0


class ProgressModel:
    def __init__(
        self,
        store: ProgressStore,
        *,
        record: Optional[ProgressRecord] = None,
        achievements: Sequence[Achievement] = ACHIEVEMENTS,
    ) -> None:
        self._store = store
        self._record = record if record is not None else store.load()
        self._achievements = tuple(achievements)
        self._lock = threading.RLock()

    def snapshot(self) -> ProgressRecord:
        """Deep copy of the current record; callers may not mutate live state."""
        with self._lock:
            return self._record.model_copy(deep=True)

    @property
    def level(self) -> int:
        return self._record.level

    @property
    def xp(self) -> int:
        return self._record.xp

    # -- mutation plumbing -------------------------------------------------

    @contextmanager
    def _mutation(self) -> Iterator[ProgressUpdate]:
        with self._lock:
            update = ProgressUpdate()
            yield update
            self._evaluate_achievements(update)
            self._store.save(self._record)

    def _award(self, update: ProgressUpdate, amount: int, *, reason: str) -> None:
        if amount <= 0:
            raise ValueError("XP awards must be positive.")
        record = self._record
        record.xp += amount
        update.xp_awarded += amount
        emit_event("xp_awarded", amount=amount, reason=reason, total=record.xp)

        while record.xp >= xp_threshold(record.level + 1):
            record.level += 1
            update.levels_gained += 1
            logger.info("Level up: now level %s (xp=%s)", record.level, record.xp)
            emit_event("level_up", level=record.level, xp=record.xp)

    def _unlock(self, update: ProgressUpdate, candidates: List[Achievement]) -> bool:
        granted = False
        for achievement in candidates:
            if achievement.id in self._record.unlocked_achievements:
                continue
            self._record.unlocked_achievements.append(achievement.id)
            update.unlocked.append(achievement)
            emit_event("achievement_unlocked", achievement_id=achievement.id)
            self._award(update, ACHIEVEMENT_BONUS_XP, reason=f"achievement:{achievement.id}")
            granted = True
        return granted

    def _evaluate_achievements(self, update: ProgressUpdate) -> None:
        # one pass per mutation, plus at most one more for what the bonus XP made reachable
        first = newly_eligible(self._record.model_copy(deep=True), self._achievements)
        if self._unlock(update, first):
            second = newly_eligible(self._record.model_copy(deep=True), self._achievements)
            self._unlock(update, second)

    def _mark_section(self, update: ProgressUpdate, lesson_id: str, section_id: str) -> None:
        key = section_key(lesson_id, section_id)
        if self._record.has_completed_section(key):
            return
        self._record.completed_sections.append(key)
        self._award(update, SECTION_COMPLETE_XP, reason=f"section:{key}")

    # -- public mutations ---------------------------------------------------

    def add_xp(self, amount: int) -> ProgressUpdate:
        with self._mutation() as update:
            self._award(update, amount, reason="manual")
        return update

    def record_visit(self, today: Optional[date] = None) -> ProgressUpdate:
        today = today or date.today()
        if isinstance(today, datetime):
            today = today.date()
        with self._mutation() as update:
            last = self._record.last_visit
            if last == today:
                return update
            if last is not None and (today - last).days == 1:
                self._record.streak += 1
                update.streak_continued = True
            else:
                self._record.streak = 1
                update.streak_continued = False
            self._record.last_visit = today
            emit_event("streak_updated", streak=self._record.streak, visit=today)
        return update

    def complete_section(self, lesson_id: str, section_id: str) -> ProgressUpdate:
        with self._mutation() as update:
            self._mark_section(update, lesson_id, section_id)
        return update

    def complete_module(self, lesson_id: str, current_section_id: Optional[str] = None) -> ProgressUpdate:
        """Mark ``lesson_id`` complete, first completing the section the learner is on."""
        with self._mutation() as update:
            if current_section_id is not None:
                self._mark_section(update, lesson_id, current_section_id)
            if lesson_id not in self._record.completed_modules:
                self._record.completed_modules.append(lesson_id)
                self._award(update, MODULE_COMPLETE_XP, reason=f"module:{lesson_id}")
        return update

    def record_quiz_result(self, lesson_id: str, section_id: str, is_correct: bool) -> ProgressUpdate:
        with self._mutation() as update:
            if is_correct:
                self._record.quiz_scores[section_key(lesson_id, section_id)] = PERFECT_QUIZ_SCORE
                self._award(update, QUIZ_CORRECT_XP, reason="quiz")
        return update

    def toggle_bookmark(self, topic_id: str) -> bool:
        """Flip bookmark membership for ``topic_id`` and return whether it is now bookmarked."""
        with self._mutation():
            bookmarks = self._record.bookmarked_topics
            if topic_id in bookmarks:
                bookmarks.remove(topic_id)
                return False
            bookmarks.append(topic_id)
            return True

    def increment_chat_messages(self) -> ProgressUpdate:
        with self._mutation() as update:
            self._record.chat_message_count += 1
        return update

    def add_dynamic_lesson(self, lesson: Lesson) -> ProgressUpdate:
        with self._mutation() as update:
            if any(existing.id == lesson.id for existing in self._record.dynamic_topics):
                raise ValueError(f"A lesson with id '{lesson.id}' already exists.")
            self._record.dynamic_topics.append(lesson)
        return update

    def dynamic_lessons(self) -> List[Lesson]:
        with self._lock:
            return list(self._record.dynamic_topics)


__all__ = [
    "MODULE_COMPLETE_XP",
    "ProgressModel",
    "ProgressUpdate",
    "QUIZ_CORRECT_XP",
    "SECTION_COMPLETE_XP",
]
