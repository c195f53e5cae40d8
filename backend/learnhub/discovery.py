"""Topic suggestions, "did you know" facts and the session suggestion feed."""

from __future__ import annotations

import random
from dataclasses import dataclass
from datetime import date
from typing import List, Literal, Optional, Sequence, Tuple

SuggestionCategory = Literal["science", "history", "arts", "tech", "culture"]
ALL_CATEGORIES = "all"
FEED_SIZE = 6


@dataclass(frozen=True)
class TopicSuggestion:
    id: str
    title: str
    icon: str
    category: SuggestionCategory
    description: str


@dataclass(frozen=True)
class DidYouKnowFact:
    fact: str
    topic: str
    icon: str


TOPIC_SUGGESTIONS: Tuple[TopicSuggestion, ...] = (
    TopicSuggestion("quantum_entanglement", "Quantum Entanglement", "⚛️", "science",
                    "Spooky action at a distance - Einstein's nightmare explained"),
    TopicSuggestion("crispr_gene_editing", "CRISPR Gene Editing", "🧬", "science",
                    "The revolutionary technology editing the code of life"),
    TopicSuggestion("black_holes", "Black Holes", "🕳️", "science",
                    "Where gravity becomes so strong, not even light can escape"),
    TopicSuggestion("neuroplasticity", "Neuroplasticity", "🧠", "science",
                    "How your brain rewires itself throughout your life"),
    TopicSuggestion("photosynthesis", "Photosynthesis", "🌱", "science",
                    "The process that powers nearly all life on Earth"),
    TopicSuggestion("ancient_rome", "Ancient Rome", "🏛️", "history",
                    "The empire that shaped Western civilization"),
    TopicSuggestion("silk_road", "The Silk Road", "🐫", "history",
                    "Ancient trade routes that connected East and West"),
    TopicSuggestion("renaissance", "The Renaissance", "🎨", "history",
                    "The rebirth of art, science, and human potential"),
    TopicSuggestion("industrial_revolution", "Industrial Revolution", "⚙️", "history",
                    "How machines transformed human society forever"),
    TopicSuggestion("space_race", "The Space Race", "🚀", "history",
                    "The epic competition that took humanity to the Moon"),
    TopicSuggestion("color_theory", "Color Theory", "🎨", "arts",
                    "The science and art of how colors interact"),
    TopicSuggestion("music_composition", "Music Composition", "🎵", "arts",
                    "The craft of creating beautiful melodies and harmonies"),
    TopicSuggestion("photography_basics", "Photography Basics", "📸", "arts",
                    "Capture the world through your lens"),
    TopicSuggestion("storytelling", "Storytelling Techniques", "📖", "arts",
                    "The ancient art of captivating an audience"),
    TopicSuggestion("animation_principles", "Animation Principles", "🎬", "arts",
                    "The 12 principles that bring drawings to life"),
    TopicSuggestion("blockchain", "Blockchain Technology", "⛓️", "tech",
                    "The technology behind Bitcoin and beyond"),
    TopicSuggestion("machine_learning", "Machine Learning Basics", "🤖", "tech",
                    "How computers learn from data without being programmed"),
    TopicSuggestion("cybersecurity", "Cybersecurity Fundamentals", "🔒", "tech",
                    "Protect yourself in the digital world"),
    TopicSuggestion("cloud_computing", "Cloud Computing", "☁️", "tech",
                    "Why the internet is becoming one giant computer"),
    TopicSuggestion("quantum_computing", "Quantum Computing", "💻", "tech",
                    "The future of computing is here - and it's weird"),
    TopicSuggestion("japanese_tea_ceremony", "Japanese Tea Ceremony", "🍵", "culture",
                    "The meditative art of preparing and serving tea"),
    TopicSuggestion("mythology", "Greek Mythology", "⚡", "culture",
                    "Gods, heroes, and monsters of ancient Greece"),
    TopicSuggestion("sustainable_living", "Sustainable Living", "🌍", "culture",
                    "How to reduce your environmental footprint"),
    TopicSuggestion("mindfulness", "Mindfulness & Meditation", "🧘", "culture",
                    "Ancient practices for modern mental health"),
    TopicSuggestion("linguistics", "Language Origins", "🗣️", "culture",
                    "How human language evolved and spread"),
)

DID_YOU_KNOW_FACTS: Tuple[DidYouKnowFact, ...] = (
    DidYouKnowFact("Octopuses have three hearts and blue blood!", "Marine Biology", "🐙"),
    DidYouKnowFact("A day on Venus is longer than a year on Venus!", "Astronomy", "🪐"),
    DidYouKnowFact(
        "Honey never spoils - archaeologists found 3000-year-old honey that was still edible!",
        "Ancient Preservation",
        "🍯",
    ),
    DidYouKnowFact(
        "The human brain uses 20% of your body's energy despite being only 2% of your body weight!",
        "Neuroscience",
        "🧠",
    ),
    DidYouKnowFact("Bananas are berries, but strawberries aren't!", "Botany", "🍓"),
    DidYouKnowFact(
        "There are more stars in the universe than grains of sand on all Earth's beaches!",
        "Cosmology",
        "⭐",
    ),
    DidYouKnowFact("The shortest war in history lasted 38-45 minutes!", "History", "⚔️"),
    DidYouKnowFact("Your body completely replaces all its cells every 7-10 years!", "Biology", "🔬"),
)


def find_suggestion(topic_id: str, suggestions: Sequence[TopicSuggestion] = TOPIC_SUGGESTIONS) -> Optional[TopicSuggestion]:
    return next((item for item in suggestions if item.id == topic_id), None)


class SuggestionFeed:
    """Session-scoped view over the suggestion catalogue.

    Skipped topics are remembered only for the lifetime of the feed and are never persisted.
    """

    def __init__(
        self,
        suggestions: Sequence[TopicSuggestion] = TOPIC_SUGGESTIONS,
        facts: Sequence[DidYouKnowFact] = DID_YOU_KNOW_FACTS,
        *,
        rng: Optional[random.Random] = None,
    ) -> None:
        if not suggestions:
            raise ValueError("At least one topic suggestion is required.")
        self._suggestions = tuple(suggestions)
        self._facts = tuple(facts)
        self._rng = rng or random.Random()
        self._skipped: List[str] = []

    @property
    def skipped(self) -> Tuple[str, ...]:
        return tuple(self._skipped)

    def find(self, topic_id: str) -> Optional[TopicSuggestion]:
        return find_suggestion(topic_id, self._suggestions)

    def available(self, category: str = ALL_CATEGORIES) -> List[TopicSuggestion]:
        return [
            item
            for item in self._suggestions
            if (category == ALL_CATEGORIES or item.category == category) and item.id not in self._skipped
        ]

    def sample(self, category: str = ALL_CATEGORIES, size: int = FEED_SIZE) -> List[TopicSuggestion]:
        pool = self.available(category)
        self._rng.shuffle(pool)
        return pool[:size]

    def skip(self, topic_id: str) -> None:
        if topic_id not in self._skipped:
            self._skipped.append(topic_id)

    def random_topic(self) -> TopicSuggestion:
        pool = self.available()
        if not pool:
            # every topic has been skipped; start over
            self._skipped.clear()
            pool = self.available()
        return self._rng.choice(pool)

    def daily_topic(self, today: Optional[date] = None) -> TopicSuggestion:
        today = today or date.today()
        day_of_year = today.timetuple().tm_yday
        return self._suggestions[day_of_year % len(self._suggestions)]

    def random_fact(self) -> Optional[DidYouKnowFact]:
        if not self._facts:
            return None
        return self._rng.choice(self._facts)

    def bookmarked(self, bookmark_ids: Sequence[str]) -> List[TopicSuggestion]:
        resolved = (self.find(topic_id) for topic_id in bookmark_ids)
        return [item for item in resolved if item is not None]


__all__ = [
    "ALL_CATEGORIES",
    "DID_YOU_KNOW_FACTS",
    "DidYouKnowFact",
    "SuggestionFeed",
    "TOPIC_SUGGESTIONS",
    "TopicSuggestion",
    "find_suggestion",
]
