"""Fixed achievement list and the pure evaluator over progress snapshots."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Iterable, List, Sequence, Tuple

from .progress_record import ProgressRecord

ACHIEVEMENT_BONUS_XP = 50

AchievementPredicate = Callable[[ProgressRecord], bool]


@dataclass(frozen=True)
class Achievement:
    id: str
    name: str
    description: str
    icon: str
    predicate: AchievementPredicate

    def is_met(self, snapshot: ProgressRecord) -> bool:
        return bool(self.predicate(snapshot))


@dataclass(frozen=True)
class Badge:
    achievement: Achievement
    unlocked: bool

    @property
    def label(self) -> str:
        # locked badges stay anonymous until earned
        return self.achievement.name.split(" ")[0] if self.unlocked else "?"


ACHIEVEMENTS: Tuple[Achievement, ...] = (
    Achievement(
        id="first_steps",
        name="First Steps",
        description="Complete your first learning module",
        icon="🎯",
        predicate=lambda record: len(record.completed_modules) >= 1,
    ),
    Achievement(
        id="knowledge_seeker",
        name="Knowledge Seeker",
        description="Complete 3 learning modules",
        icon="📚",
        predicate=lambda record: len(record.completed_modules) >= 3,
    ),
    Achievement(
        id="on_fire",
        name="On Fire!",
        description="Maintain a 3-day streak",
        icon="🔥",
        predicate=lambda record: record.streak >= 3,
    ),
    Achievement(
        id="dedicated",
        name="Dedicated Learner",
        description="Maintain a 7-day streak",
        icon="⭐",
        predicate=lambda record: record.streak >= 7,
    ),
    Achievement(
        id="level_5",
        name="Rising Star",
        description="Reach level 5",
        icon="🌟",
        predicate=lambda record: record.level >= 5,
    ),
    Achievement(
        id="level_10",
        name="Expert",
        description="Reach level 10",
        icon="👑",
        predicate=lambda record: record.level >= 10,
    ),
    Achievement(
        id="quiz_master",
        name="Quiz Master",
        description="Get a perfect score on any quiz",
        icon="🎓",
        predicate=lambda record: record.has_perfect_quiz(),
    ),
    Achievement(
        id="chat_curious",
        name="Curious Mind",
        description="Ask your AI tutor a question",
        icon="🤔",
        predicate=lambda record: record.chat_message_count > 0,
    ),
)


def find_achievement(achievement_id: str, achievements: Iterable[Achievement] = ACHIEVEMENTS) -> Achievement:
    for achievement in achievements:
        if achievement.id == achievement_id:
            return achievement
    raise LookupError(f"Unknown achievement '{achievement_id}'.")


def newly_eligible(
    snapshot: ProgressRecord,
    achievements: Sequence[Achievement] = ACHIEVEMENTS,
) -> List[Achievement]:
    """Return achievements that are not yet unlocked but whose predicate now holds.

    This is a single finite pass over ``achievements`` and never mutates ``snapshot``;
    callers apply the unlocks and any bonus XP themselves.
    """
    unlocked = set(snapshot.unlocked_achievements)
    return [
        achievement
        for achievement in achievements
        if achievement.id not in unlocked and achievement.is_met(snapshot)
    ]


def badges(snapshot: ProgressRecord, achievements: Sequence[Achievement] = ACHIEVEMENTS) -> List[Badge]:
    unlocked = set(snapshot.unlocked_achievements)
    return [Badge(achievement=item, unlocked=item.id in unlocked) for item in achievements]


__all__ = [
    "ACHIEVEMENTS",
    "ACHIEVEMENT_BONUS_XP",
    "Achievement",
    "Badge",
    "badges",
    "find_achievement",
    "newly_eligible",
]
