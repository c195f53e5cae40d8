from __future__ import annotations

import pytest

from learnhub.catalog import LessonCatalog
from learnhub.navigation import NavigationController, NavigationError
from learnhub.progress import ProgressModel


@pytest.fixture
def navigation(progress: ProgressModel) -> NavigationController:
    return NavigationController(LessonCatalog(progress), progress)


def test_full_walkthrough_of_static_lesson(navigation: NavigationController, progress: ProgressModel) -> None:
    state = navigation.open("javascript_basics")
    assert (state.lesson_id, state.section_index) == ("javascript_basics", 0)

    navigation.next()
    navigation.next()
    assert navigation.state.section_index == 2
    assert navigation.current_section.id == "arrays"

    update = navigation.finish()

    snapshot = progress.snapshot()
    assert navigation.state.is_home
    assert snapshot.completed_sections == [
        "javascript_basics_variables",
        "javascript_basics_functions",
        "javascript_basics_arrays",
    ]
    assert snapshot.completed_modules == ["javascript_basics"]
    # three sections, the module and the "first_steps" bonus
    assert snapshot.xp == 3 * 30 + 100 + 50
    assert snapshot.level == 3
    assert [achievement.id for achievement in update.unlocked] == ["first_steps"]


def test_single_section_lesson_finishes_immediately(
    navigation: NavigationController, progress: ProgressModel
) -> None:
    navigation.open("react_intro")
    with pytest.raises(NavigationError):
        navigation.next()
    with pytest.raises(NavigationError):
        navigation.previous()

    navigation.finish()

    snapshot = progress.snapshot()
    assert snapshot.completed_sections == ["react_intro_components"]
    assert snapshot.completed_modules == ["react_intro"]


def test_finish_only_on_last_section(navigation: NavigationController) -> None:
    navigation.open("javascript_basics")
    with pytest.raises(NavigationError):
        navigation.finish()


def test_previous_walks_back_without_awarding(navigation: NavigationController, progress: ProgressModel) -> None:
    navigation.open("javascript_basics")
    navigation.next()
    xp = progress.snapshot().xp

    navigation.previous()
    navigation.next()

    assert navigation.state.section_index == 1
    assert progress.snapshot().xp == xp


def test_open_unknown_lesson_is_rejected(navigation: NavigationController) -> None:
    with pytest.raises(NavigationError):
        navigation.open("nope")
    assert navigation.state.is_home


def test_transitions_require_open_lesson(navigation: NavigationController) -> None:
    for transition in (navigation.next, navigation.previous, navigation.finish):
        with pytest.raises(NavigationError):
            transition()


def test_start_learning_opens_first_static_lesson(navigation: NavigationController) -> None:
    assert navigation.start_learning().lesson_id == "javascript_basics"


def test_back_to_home_leaves_progress_alone(navigation: NavigationController, progress: ProgressModel) -> None:
    navigation.open("web_design")
    navigation.back_to_home()
    assert navigation.current_lesson is None
    assert progress.snapshot().completed_sections == []


def test_submit_quiz_records_correct_answer(navigation: NavigationController, progress: ProgressModel) -> None:
    navigation.open("javascript_basics")
    navigation.next()  # functions, correct option is 1

    wrong = navigation.submit_quiz(0)
    assert wrong.correct is False
    assert wrong.correct_index == 1

    right = navigation.submit_quiz(1)
    assert right.correct is True
    assert progress.snapshot().quiz_scores == {"javascript_basics_functions": 100}


def test_submit_quiz_rejects_missing_option(navigation: NavigationController) -> None:
    navigation.open("web_design")
    with pytest.raises(NavigationError):
        navigation.submit_quiz(7)
