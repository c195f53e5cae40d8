from __future__ import annotations

import pytest

from learnhub.achievements import ACHIEVEMENTS, badges, find_achievement, newly_eligible
from learnhub.progress_record import ProgressRecord


def _ids(achievements) -> list[str]:
    return [achievement.id for achievement in achievements]


def test_fresh_record_unlocks_nothing() -> None:
    assert newly_eligible(ProgressRecord()) == []


@pytest.mark.parametrize(
    ("record", "expected"),
    [
        (ProgressRecord(completed_modules=["a"]), ["first_steps"]),
        (ProgressRecord(completed_modules=["a", "b", "c"]), ["first_steps", "knowledge_seeker"]),
        (ProgressRecord(streak=3), ["on_fire"]),
        (ProgressRecord(streak=7), ["on_fire", "dedicated"]),
        (ProgressRecord(xp=506), ["level_5"]),
        (ProgressRecord(quiz_scores={"m_s": 100}), ["quiz_master"]),
        (ProgressRecord(quiz_scores={"m_s": 90}), []),
        (ProgressRecord(chat_message_count=1), ["chat_curious"]),
    ],
)
def test_predicates_match_record_state(record: ProgressRecord, expected: list[str]) -> None:
    assert _ids(newly_eligible(record)) == expected


def test_level_ten_requires_large_xp() -> None:
    record = ProgressRecord(xp=3844)
    assert record.level == 10
    assert _ids(newly_eligible(record)) == ["level_5", "level_10"]


def test_already_unlocked_achievements_are_skipped() -> None:
    record = ProgressRecord(streak=7, unlocked_achievements=["on_fire"])
    assert _ids(newly_eligible(record)) == ["dedicated"]


def test_evaluation_does_not_mutate_snapshot() -> None:
    record = ProgressRecord(streak=3, chat_message_count=2)
    before = record.model_dump()

    newly_eligible(record)

    assert record.model_dump() == before


def test_badges_hide_locked_names() -> None:
    record = ProgressRecord(unlocked_achievements=["level_5"])
    by_id = {badge.achievement.id: badge for badge in badges(record)}

    assert len(by_id) == len(ACHIEVEMENTS)
    assert by_id["level_5"].unlocked is True
    assert by_id["level_5"].label == "Rising"
    assert by_id["first_steps"].label == "?"


def test_find_achievement() -> None:
    assert find_achievement("quiz_master").name == "Quiz Master"
    with pytest.raises(LookupError):
        find_achievement("unknown")
