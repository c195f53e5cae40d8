from __future__ import annotations

import random
from datetime import date

from learnhub.discovery import DID_YOU_KNOW_FACTS, TOPIC_SUGGESTIONS, SuggestionFeed


def _feed(seed: int = 7) -> SuggestionFeed:
    return SuggestionFeed(rng=random.Random(seed))


def test_catalogue_covers_every_category() -> None:
    assert len(TOPIC_SUGGESTIONS) == 25
    assert {item.category for item in TOPIC_SUGGESTIONS} == {"science", "history", "arts", "tech", "culture"}
    assert len({item.id for item in TOPIC_SUGGESTIONS}) == len(TOPIC_SUGGESTIONS)


def test_daily_topic_is_stable_for_a_date() -> None:
    feed = _feed()
    assert feed.daily_topic(date(2026, 1, 1)).id == "crispr_gene_editing"
    assert feed.daily_topic(date(2026, 1, 1)) == _feed(99).daily_topic(date(2026, 1, 1))


def test_category_filter_and_sample_size() -> None:
    feed = _feed()
    tech = feed.available("tech")
    assert len(tech) == 5
    assert all(item.category == "tech" for item in tech)
    assert len(feed.sample()) == 6
    assert len(feed.sample("arts")) == 5


def test_skipped_topics_leave_the_feed() -> None:
    feed = _feed()
    feed.skip("black_holes")
    feed.skip("black_holes")

    assert feed.skipped == ("black_holes",)
    assert "black_holes" not in [item.id for item in feed.available()]
    assert feed.find("black_holes") is not None


def test_random_topic_resets_when_everything_is_skipped() -> None:
    feed = _feed()
    for item in TOPIC_SUGGESTIONS:
        feed.skip(item.id)

    topic = feed.random_topic()

    assert topic in TOPIC_SUGGESTIONS
    assert feed.skipped == ()


def test_random_fact_and_bookmarks() -> None:
    feed = _feed()
    assert feed.random_fact() in DID_YOU_KNOW_FACTS
    assert [item.id for item in feed.bookmarked(["mythology", "gone", "blockchain"])] == [
        "mythology",
        "blockchain",
    ]
    assert SuggestionFeed(facts=(), rng=random.Random(1)).random_fact() is None
