"""Shared helpers: identifiers and readings."""

from kanji_card.utils.ids import new_id
from kanji_card.utils.reading import derive_reading, is_kana_only, transliterate

__all__ = [
    "derive_reading",
    "is_kana_only",
    "new_id",
    "transliterate",
]
