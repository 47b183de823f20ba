"""Storage enums."""

from enum import Enum


class RecordCollection(str, Enum):
    """Independent keyed collections held per user."""

    SETS = "sets"  # Active card sets
    ARCHIVE_CARDS = "archive_cards"  # Released words
    ARCHIVE_STORIES = "archive_stories"  # Stories released with their sets
