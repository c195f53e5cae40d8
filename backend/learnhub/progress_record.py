"""Durable learner progress record and the XP level curve."""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import date
from typing import Annotated, Dict, List, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from .lessons import Lesson

BASE_LEVEL_XP = 100
LEVEL_GROWTH = 1.5
PERFECT_QUIZ_SCORE = 100

QuizScore = Annotated[int, Field(ge=0, le=PERFECT_QUIZ_SCORE)]


def xp_threshold(level: int) -> int:
    """XP required to reach ``level``: ``floor(100 * 1.5 ** (level - 1))``."""
    if level < 1:
        raise ValueError("Levels start at 1.")
    return math.floor(BASE_LEVEL_XP * LEVEL_GROWTH ** (level - 1))


def level_for_xp(xp: int) -> int:
    level = 1
    while xp >= xp_threshold(level + 1):
        level += 1
    return level


def _unique(values: List[str]) -> List[str]:
    seen = set()
    ordered: List[str] = []
    for value in values:
        if value in seen:
            continue
        seen.add(value)
        ordered.append(value)
    return ordered


class ProgressRecord(BaseModel):
    xp: int = Field(0, ge=0)
    level: int = Field(1, ge=1)
    streak: int = Field(0, ge=0)
    last_visit: Optional[date] = None
    completed_modules: List[str] = Field(default_factory=list)
    completed_sections: List[str] = Field(default_factory=list)
    unlocked_achievements: List[str] = Field(default_factory=list)
    quiz_scores: Dict[str, QuizScore] = Field(default_factory=dict)
    dynamic_topics: List[Lesson] = Field(default_factory=list)
    bookmarked_topics: List[str] = Field(default_factory=list)
    chat_message_count: int = Field(0, ge=0)

    @field_validator("completed_modules", "completed_sections", "unlocked_achievements", "bookmarked_topics")
    @classmethod
    def _dedupe(cls, values: List[str]) -> List[str]:
        return _unique(values)

    @model_validator(mode="after")
    def _reconcile_level(self) -> "ProgressRecord":
        # level is derived from xp; a stored value that disagrees is replaced
        self.level = level_for_xp(self.xp)
        return self

    def has_completed_section(self, key: str) -> bool:
        return key in self.completed_sections

    def has_perfect_quiz(self) -> bool:
        return any(score == PERFECT_QUIZ_SCORE for score in self.quiz_scores.values())


@dataclass(frozen=True)
class LevelProgress:
    level: int
    xp_into_level: int
    xp_for_next_level: int
    percent: float


def level_progress(record: ProgressRecord) -> LevelProgress:
    current = xp_threshold(record.level)
    following = xp_threshold(record.level + 1)
    span = following - current
    # level 1 starts below its own threshold, so the in-level figure is floored at zero
    into_level = max(record.xp - current, 0)
    percent = min(max(into_level / span * 100, 0.0), 100.0)
    return LevelProgress(
        level=record.level,
        xp_into_level=into_level,
        xp_for_next_level=span,
        percent=percent,
    )


__all__ = [
    "LevelProgress",
    "PERFECT_QUIZ_SCORE",
    "ProgressRecord",
    "level_for_xp",
    "level_progress",
    "xp_threshold",
]
