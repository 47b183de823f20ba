"""Builders and constants shared by the test modules."""

from datetime import datetime, timedelta, timezone
from typing import Any, Optional

from kanji_card.enums.learning import SetStage
from kanji_card.models.api import CandidateWord
from kanji_card.models.vocabulary import MAX_SET_CAPACITY, Card, CardSet

T0 = datetime(2024, 3, 1, 9, 0, tzinfo=timezone.utc)

USER_ID = "user-1"

# Kanji words with distinct translations, enough for two full sets
SAMPLE_WORDS: list[tuple[str, str]] = [
    ("猫", "cat"),
    ("犬", "dog"),
    ("本", "book"),
    ("水", "water"),
    ("山", "mountain"),
    ("川", "river"),
    ("花", "flower"),
    ("空", "sky"),
    ("雨", "rain"),
    ("車", "car"),
    ("火", "fire"),
    ("木", "tree"),
    ("月", "moon"),
    ("星", "star"),
    ("海", "sea"),
    ("石", "stone"),
]


class FakeClock:
    """Callable clock that only moves when told to."""

    def __init__(self, now: datetime = T0):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: Any) -> datetime:
        self.now += timedelta(**kwargs)
        return self.now


def make_candidates(count: int, offset: int = 0) -> list[CandidateWord]:
    return [
        CandidateWord(word=word, translation=translation)
        for word, translation in SAMPLE_WORDS[offset : offset + count]
    ]


def make_set(
    stage: SetStage = SetStage.INTAKE,
    count: int = MAX_SET_CAPACITY,
    stage_entered_at: Optional[datetime] = None,
    offset: int = 0,
) -> CardSet:
    """A set with ``count`` sample cards in the given stage."""
    card_set = CardSet.new()
    for word, translation in SAMPLE_WORDS[offset : offset + count]:
        card_set.cards.append(Card.create(word, translation))
    card_set.stage = stage
    card_set.stage_entered_at = stage_entered_at
    return card_set
