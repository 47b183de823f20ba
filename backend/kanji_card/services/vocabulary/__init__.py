"""
Vocabulary Module

The set/word lifecycle core:

- set_repository.py / archive_repository.py: typed access to the record store
- intake.py: dedup and batching of new words into intake sets
- lifecycle.py: stage promotion and archive migration
- locks.py: per-user serialization
- service.py: VocabularyService, the facade used by the API layer
- content_extractor.py / story_generator.py: LLM collaborators
"""

from kanji_card.services.vocabulary.archive_repository import ArchiveRepository
from kanji_card.services.vocabulary.content_extractor import ContentExtractor
from kanji_card.services.vocabulary.intake import IntakePipeline
from kanji_card.services.vocabulary.lifecycle import LifecycleManager
from kanji_card.services.vocabulary.locks import UserLockRegistry
from kanji_card.services.vocabulary.service import VocabularyService
from kanji_card.services.vocabulary.set_repository import CardSetRepository
from kanji_card.services.vocabulary.story_generator import StoryGenerator

__all__ = [
    "ArchiveRepository",
    "CardSetRepository",
    "ContentExtractor",
    "IntakePipeline",
    "LifecycleManager",
    "StoryGenerator",
    "UserLockRegistry",
    "VocabularyService",
]
