from __future__ import annotations

import pytest

from learnhub.catalog import LessonCatalog
from learnhub.lesson_content import STATIC_LESSONS
from learnhub.lessons import Lesson, Section
from learnhub.progress import ProgressModel
from learnhub.storage import ProgressStore


def _generated(lesson_id: str = "topic_1700000000000") -> Lesson:
    return Lesson(
        id=lesson_id,
        title="Black Holes",
        is_dynamic=True,
        sections=[Section(id="section_0", title="Formation"), Section(id="section_1", title="Horizons")],
    )


def test_static_lessons_have_expected_shape() -> None:
    ids = [lesson.id for lesson in STATIC_LESSONS]
    assert ids == ["javascript_basics", "react_intro", "web_design"]
    assert [len(lesson.sections) for lesson in STATIC_LESSONS] == [3, 1, 1]
    for lesson in STATIC_LESSONS:
        assert lesson.is_dynamic is False
        for section in lesson.sections:
            quiz = section.content.quiz
            assert quiz is not None
            assert 0 <= quiz.correct_index < len(quiz.options)


def test_catalog_lists_static_then_dynamic(progress: ProgressModel) -> None:
    catalog = LessonCatalog(progress)
    catalog.add_dynamic_lesson(_generated())

    assert [lesson.id for lesson in catalog.all_lessons()] == [
        "javascript_basics",
        "react_intro",
        "web_design",
        "topic_1700000000000",
    ]
    assert catalog.find_by_id("topic_1700000000000").title == "Black Holes"
    assert catalog.find_by_id("missing") is None
    with pytest.raises(LookupError):
        catalog.require("missing")


def test_generated_lessons_survive_reload(progress: ProgressModel, progress_store: ProgressStore) -> None:
    LessonCatalog(progress).add_dynamic_lesson(_generated())

    reloaded = LessonCatalog(ProgressModel(progress_store))

    lesson = reloaded.find_by_id("topic_1700000000000")
    assert lesson is not None
    assert [section.id for section in lesson.sections] == ["section_0", "section_1"]


def test_static_ids_are_reserved(progress: ProgressModel) -> None:
    catalog = LessonCatalog(progress)
    with pytest.raises(ValueError):
        catalog.add_dynamic_lesson(_generated("react_intro"))
    assert catalog.dynamic_lessons() == []


def test_duplicate_generated_id_is_rejected(progress: ProgressModel) -> None:
    catalog = LessonCatalog(progress)
    catalog.add_dynamic_lesson(_generated())
    with pytest.raises(ValueError):
        catalog.add_dynamic_lesson(_generated())
    assert len(catalog.dynamic_lessons()) == 1


def test_section_progress_counts_completed_sections(progress: ProgressModel) -> None:
    catalog = LessonCatalog(progress)
    assert catalog.section_progress("javascript_basics") == (0, 3)

    progress.complete_section("javascript_basics", "variables")
    progress.complete_section("javascript_basics", "functions")

    assert catalog.section_progress("javascript_basics") == (2, 3)
    assert catalog.section_progress("react_intro") == (0, 1)


def test_lesson_rejects_duplicate_section_ids() -> None:
    with pytest.raises(ValueError):
        Lesson(id="x", title="X", sections=[Section(id="a", title="A"), Section(id="a", title="B")])
