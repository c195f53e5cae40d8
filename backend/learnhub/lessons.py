"""Lesson content models shared by static and generated modules."""

from __future__ import annotations

from typing import List, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, ValidationInfo, field_validator


class Concept(BaseModel):
    title: str
    preview: str = ""
    details: str = ""


class Example(BaseModel):
    title: str
    code: str = ""
    explanation: str = ""


class Quiz(BaseModel):
    question: str
    options: List[str] = Field(default_factory=list)
    correct_index: int = Field(
        0,
        ge=0,
        validation_alias=AliasChoices("correct_index", "correctIndex", "correct"),
    )
    explanation: str = ""

    @field_validator("correct_index")
    @classmethod
    def _index_within_options(cls, value: int, info: ValidationInfo) -> int:
        options = info.data.get("options") or []
        if options and value >= len(options):
            raise ValueError(f"correct_index {value} is out of range for {len(options)} options")
        return value

    def is_correct(self, selected_index: int) -> bool:
        return selected_index == self.correct_index


class Challenge(BaseModel):
    title: str
    description: str = ""
    hint: str = ""
    solution: str = ""


class SectionContent(BaseModel):
    """Teaching payload of a section. Every block is optional; renderers skip missing ones."""

    why_care: Optional[str] = None
    concepts: List[Concept] = Field(default_factory=list)
    examples: List[Example] = Field(default_factory=list)
    quiz: Optional[Quiz] = None
    challenge: Optional[Challenge] = None


class Section(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str = Field(..., min_length=1)
    title: str
    icon: str = "📝"
    content: SectionContent = Field(default_factory=SectionContent)


class Lesson(BaseModel):
    """A learning module. Static and generated lessons are never mutated once built."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., min_length=1)
    title: str
    icon: str = "📖"
    subtitle: Optional[str] = None
    description: Optional[str] = None
    duration: Optional[str] = None
    difficulty: Optional[str] = None
    is_dynamic: bool = False
    source_file: Optional[str] = None
    sections: List[Section] = Field(default_factory=list)

    @field_validator("sections")
    @classmethod
    def _unique_section_ids(cls, sections: List[Section]) -> List[Section]:
        seen = set()
        for section in sections:
            if section.id in seen:
                raise ValueError(f"Duplicate section id '{section.id}'")
            seen.add(section.id)
        return sections

    @property
    def last_index(self) -> int:
        return len(self.sections) - 1

    def section_key(self, section_id: str) -> str:
        return section_key(self.id, section_id)


def section_key(lesson_id: str, section_id: str) -> str:
    """Composite key addressing per-section completion and quiz state."""
    return f"{lesson_id}_{section_id}"


__all__ = [
    "Challenge",
    "Concept",
    "Example",
    "Lesson",
    "Quiz",
    "Section",
    "SectionContent",
    "section_key",
]
