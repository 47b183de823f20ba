"""
Set Lifecycle

Promotes sets through the review stages and releases graduated sets into
the archive.

Migration order on the transition into DAY_10:
    1. stamp every card with release_timestamp = now
    2. upsert the cards into the archive
    3. upsert the set's story (best-effort)
    4. delete the set from the active store

These writes are not transactional. A failure in step 2 leaves some cards
archived while the set stays active in its previous stage; promoting it
again re-upserts the same card ids, so the retry converges. A failure in
step 4 leaves the set active with all its cards already archived.

Callers hold the user's lock around promote().
"""

import logging
from datetime import datetime
from typing import Callable

from kanji_card.models.api import PromotionResult
from kanji_card.models.vocabulary import Card, CardSet, utcnow
from kanji_card.services.vocabulary.archive_repository import ArchiveRepository
from kanji_card.services.vocabulary.set_repository import CardSetRepository

logger = logging.getLogger(__name__)


class LifecycleManager:
    """Stage promotion and archive migration."""

    def __init__(
        self,
        set_repository: CardSetRepository,
        archive_repository: ArchiveRepository,
        clock: Callable[[], datetime] = utcnow,
    ):
        self.set_repository = set_repository
        self.archive_repository = archive_repository
        self.clock = clock

    async def promote(self, user_id: str, set_id: str) -> PromotionResult:
        """
        Move a set one stage forward.

        Promotion doesn't require the set to be full; when to promote is
        the caller's decision.

        Raises:
            NotFoundError: If the set doesn't exist
            StorageError: If a read or write fails
        """
        logger.info(f"Promoting set {set_id} for user {user_id}")
        card_set = await self.set_repository.load(user_id, set_id)
        previous = card_set.stage

        released = card_set.advance(self.clock())

        if released is None:
            await self.set_repository.save(user_id, card_set)
            logger.info(
                f"Set {set_id} moved {previous.value} → {card_set.stage.value} for user {user_id}"
            )
            return PromotionResult(
                set_id=set_id, previous_stage=previous, stage=card_set.stage
            )

        await self._migrate(user_id, card_set, released)
        return PromotionResult(
            set_id=set_id,
            previous_stage=previous,
            stage=card_set.stage,
            migrated=True,
            released_card_ids=[card.id for card in released],
        )

    async def _migrate(
        self, user_id: str, card_set: CardSet, released: list[Card]
    ) -> None:
        await self.archive_repository.save_many(user_id, released)

        if card_set.story is not None:
            try:
                await self.archive_repository.save_story(user_id, card_set.story)
            except Exception as e:
                logger.warning(f"Failed to archive story of set {card_set.id}: {e}")

        await self.set_repository.remove(user_id, card_set.id)
        logger.info(
            f"Released set {card_set.id} ({len(released)} cards) to archive for user {user_id}"
        )
