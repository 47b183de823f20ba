"""Kanji Card: Japanese vocabulary sets with staged review."""

__version__ = "0.1.0"
