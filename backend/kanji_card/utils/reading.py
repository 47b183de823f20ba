"""
Reading (furigana) derivation.

Wraps pykakasi to turn Japanese text into its hiragana reading. A card only
stores a reading when it tells the learner something the word itself
doesn't, so kana-only words get none.
"""

import re
from functools import lru_cache
from typing import Optional

import pykakasi

# Hiragana and katakana blocks (includes the prolonged sound mark)
_KANA_ONLY = re.compile(r"^[\u3040-\u309f\u30a0-\u30ff]+$")


@lru_cache(maxsize=1)
def _kakasi() -> pykakasi.kakasi:
    return pykakasi.kakasi()


def transliterate(text: str) -> str:
    """Hiragana reading of ``text``; non-Japanese segments pass through."""
    if not text:
        return text
    return "".join(item["hira"] for item in _kakasi().convert(text))


def is_kana_only(word: str) -> bool:
    return bool(_KANA_ONLY.match(word))


def derive_reading(word: str) -> Optional[str]:
    """
    Reading to store on a card for ``word``.

    Returns None for kana-only words and whenever the transliteration
    equals the word.
    """
    if not word or is_kana_only(word):
        return None

    reading = transliterate(word)
    if not reading or reading == word:
        return None
    return reading
