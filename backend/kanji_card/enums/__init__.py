"""
Centralized enum definitions for the application.

All enums are organized by domain:
- learning.py: Set review stages and the legacy three-stage model
- storage.py: Record collections in the repository layer

Usage:
    from kanji_card.enums import SetStage, RecordCollection
"""

from kanji_card.enums.learning import (
    LegacyStage,
    SetStage,
    stages_for_legacy,
    to_legacy_stage,
)
from kanji_card.enums.storage import RecordCollection

__all__ = [
    "LegacyStage",
    "RecordCollection",
    "SetStage",
    "stages_for_legacy",
    "to_legacy_stage",
]
