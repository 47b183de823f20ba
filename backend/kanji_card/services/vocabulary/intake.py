"""
Intake Pipeline

Turns candidate words into cards inside the user's intake sets.

Flow:
    candidates
      → drop words already known (active sets ∪ archive) and repeats
      → append to the newest writable intake set
      → when a set fills up: best-effort story, persist, start a new set
      → persist the last set, full or not

Dedup compares the word field exactly as stored (after whitespace
trimming). No Unicode normalization is applied, so the same word in two
normalization forms counts as two words.

Callers hold the user's lock around run().
"""

import logging
from typing import Optional, Sequence

from kanji_card.enums.learning import SetStage
from kanji_card.models.api import CandidateWord, IntakeResult
from kanji_card.models.vocabulary import CardSet
from kanji_card.services.vocabulary.archive_repository import ArchiveRepository
from kanji_card.services.vocabulary.set_repository import CardSetRepository
from kanji_card.services.vocabulary.story_generator import StoryGenerator

logger = logging.getLogger(__name__)


class IntakePipeline:
    """Batches new words into capacity-bounded intake sets."""

    def __init__(
        self,
        set_repository: CardSetRepository,
        archive_repository: ArchiveRepository,
        story_generator: Optional[StoryGenerator] = None,
    ):
        self.set_repository = set_repository
        self.archive_repository = archive_repository
        self.story_generator = story_generator

    async def known_words(self, user_id: str) -> set[str]:
        """Every word in the user's active sets and archive."""
        words = set()
        for card_set in await self.set_repository.list_all(user_id):
            words.update(card.word for card in card_set.cards)
        for card in await self.archive_repository.list_all(user_id):
            words.add(card.word)
        return words

    async def filter_new(
        self, user_id: str, candidates: Sequence[CandidateWord]
    ) -> list[CandidateWord]:
        """Candidates not yet known, first occurrence only, input order kept."""
        seen = await self.known_words(user_id)
        unique = []
        for candidate in candidates:
            if candidate.word in seen:
                continue
            seen.add(candidate.word)
            unique.append(candidate)
        return unique

    async def run(
        self,
        user_id: str,
        candidates: Sequence[CandidateWord],
        skip_dedup: bool = False,
    ) -> IntakeResult:
        """
        Add candidates to the user's intake sets.

        Args:
            user_id: Owner of the sets
            candidates: Words in the order they should be added
            skip_dedup: Add every candidate, even known ones (recall)

        Returns:
            IntakeResult with counts and the ids of the sets written to
        """
        logger.info(f"Saving {len(candidates)} words for user {user_id}")
        if not candidates:
            return IntakeResult()

        words = list(candidates) if skip_dedup else await self.filter_new(user_id, candidates)
        skipped = len(candidates) - len(words)

        if not words:
            logger.info(f"No unique words to save for user {user_id}")
            return IntakeResult(skipped=skipped)

        logger.info(f"Found {len(words)} unique words to save for user {user_id}")

        current: Optional[CardSet] = None
        set_ids: list[str] = []

        for candidate in words:
            if current is None:
                current = await self._current_set(user_id)

            if not current.is_writable:
                await self._finalize(user_id, current)
                current = CardSet.new()
                logger.info(f"Started set {current.id} for user {user_id}")

            current.push(candidate.word, candidate.translation, candidate.reading)
            if not set_ids or set_ids[-1] != current.id:
                set_ids.append(current.id)

        if current.is_full:
            await self._finalize(user_id, current)
        else:
            await self.set_repository.save(user_id, current)

        logger.info(
            f"Saved {len(words)} words into {len(set_ids)} set(s) for user {user_id}"
        )
        return IntakeResult(added=len(words), skipped=skipped, set_ids=set_ids)

    async def _current_set(self, user_id: str) -> CardSet:
        """The newest intake set, or a fresh empty one if there is none."""
        latest = await self.set_repository.latest_in_stage(user_id, SetStage.INTAKE)
        if latest is None:
            latest = CardSet.new()
            logger.info(f"Creating new set {latest.id} for user {user_id}")
        else:
            logger.info(f"Loading existing set {latest.id} for user {user_id}")
        return latest

    async def _finalize(self, user_id: str, card_set: CardSet) -> None:
        """Persist a full set, attaching a story first if possible."""
        if self.story_generator is not None and card_set.story is None:
            try:
                sentences, translations = await self.story_generator.generate(card_set.cards)
                card_set.attach_story(sentences, translations)
                logger.info(f"Added story to set {card_set.id}")
            except Exception as e:
                # Stories are optional; the set is saved without one
                logger.warning(f"Failed to add story to set {card_set.id}: {e}")

        await self.set_repository.save(user_id, card_set)
