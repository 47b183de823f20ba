"""
Unit tests for VocabularyService.

Tests recall, the review queue, archive listing, the overview and
per-user serialization of concurrent mutations.
"""

import asyncio
from datetime import timedelta
from unittest.mock import AsyncMock, MagicMock

import pytest

from kanji_card.enums.learning import SetStage
from kanji_card.enums.storage import RecordCollection
from kanji_card.middleware.error_handling import InvalidRequestError, StorageError
from kanji_card.models.api import CandidateWord
from kanji_card.services.storage.memory_store import InMemoryRecordStore
from kanji_card.services.vocabulary import UserLockRegistry, VocabularyService
from tests.factories import (
    SAMPLE_WORDS,
    T0,
    USER_ID,
    FakeClock,
    make_candidates,
    make_set,
)


class YieldingStore(InMemoryRecordStore):
    """In-memory store that yields to the event loop on every call."""

    async def upsert(self, *args, **kwargs):
        await asyncio.sleep(0)
        await super().upsert(*args, **kwargs)

    async def load(self, *args, **kwargs):
        await asyncio.sleep(0)
        return await super().load(*args, **kwargs)

    async def list_ids(self, *args, **kwargs):
        await asyncio.sleep(0)
        return await super().list_ids(*args, **kwargs)


async def graduate(service: VocabularyService, clock: FakeClock, set_id: str) -> None:
    """Promote a set all the way into the archive."""
    for _ in range(6):
        clock.advance(days=10)
        await service.promote(USER_ID, set_id)


class TestRecall:
    """Tests for recall()."""

    @pytest.mark.asyncio
    async def test_recall_round_trip(self, vocabulary_service, clock):
        intake = await vocabulary_service.intake(USER_ID, make_candidates(8))
        await graduate(vocabulary_service, clock, intake.set_ids[0])
        archived = await vocabulary_service.list_archived(USER_ID)
        recalled_ids = [archived[0].id, archived[1].id]
        recalled_words = {archived[0].word, archived[1].word}

        result = await vocabulary_service.recall(USER_ID, recalled_ids)

        assert result.added == 2
        remaining = await vocabulary_service.list_archived(USER_ID)
        assert len(remaining) == 6
        assert not {c.id for c in remaining} & set(recalled_ids)

        sets = await vocabulary_service.list_sets(USER_ID, SetStage.INTAKE)
        assert len(sets) == 1
        card_set = await vocabulary_service.get_set(USER_ID, sets[0].id)
        assert {c.word for c in card_set.cards} == recalled_words
        # Recalled words are new cards
        assert not {c.id for c in card_set.cards} & set(recalled_ids)
        assert all(c.release_timestamp is None for c in card_set.cards)

    @pytest.mark.asyncio
    async def test_recall_unknown_ids_is_noop(self, vocabulary_service, memory_store):
        result = await vocabulary_service.recall(USER_ID, ["unknown-1", "unknown-2"])

        assert result.added == 0
        assert await memory_store.list_ids(USER_ID, RecordCollection.SETS) == set()

    @pytest.mark.asyncio
    async def test_recall_repeated_id_counts_once(self, vocabulary_service, clock):
        intake = await vocabulary_service.intake(USER_ID, make_candidates(8))
        await graduate(vocabulary_service, clock, intake.set_ids[0])
        card = (await vocabulary_service.list_archived(USER_ID))[0]

        result = await vocabulary_service.recall(USER_ID, [card.id, card.id])

        assert result.added == 1
        sets = await vocabulary_service.list_sets(USER_ID, SetStage.INTAKE)
        card_set = await vocabulary_service.get_set(USER_ID, sets[0].id)
        assert [c.word for c in card_set.cards] == [card.word]
        assert len(await vocabulary_service.list_archived(USER_ID)) == 7

    @pytest.mark.asyncio
    async def test_recall_keeps_archive_when_intake_fails(self, clock):
        store = InMemoryRecordStore()
        service = VocabularyService(store, clock=clock)
        cards = [
            c.model_copy(update={"release_timestamp": T0})
            for c in make_set(count=2).cards
        ]
        await service.archive.save_many(USER_ID, cards)

        original_upsert = store.upsert

        async def failing_upsert(user_id, collection, record_id, record):
            if collection is RecordCollection.SETS:
                raise StorageError("disk full")
            await original_upsert(user_id, collection, record_id, record)

        store.upsert = failing_upsert

        with pytest.raises(StorageError):
            await service.recall(USER_ID, [c.id for c in cards])

        assert len(await service.list_archived(USER_ID)) == 2


class TestReviewQueue:
    """Tests for review_queue()."""

    @pytest.mark.asyncio
    async def test_intake_sets_excluded(self, vocabulary_service):
        await vocabulary_service.intake(USER_ID, make_candidates(3))

        queue = await vocabulary_service.review_queue(USER_ID)

        assert queue.due == []
        assert queue.waiting == []

    @pytest.mark.asyncio
    async def test_due_after_offset(self, vocabulary_service, clock):
        intake = await vocabulary_service.intake(USER_ID, make_candidates(3))
        set_id = intake.set_ids[0]
        await vocabulary_service.promote(USER_ID, set_id)

        clock.advance(hours=23, minutes=59)
        queue = await vocabulary_service.review_queue(USER_ID)
        assert [s.id for s in queue.waiting] == [set_id]
        assert queue.due == []

        clock.advance(minutes=1)
        queue = await vocabulary_service.review_queue(USER_ID)
        assert [s.id for s in queue.due] == [set_id]
        assert queue.waiting == []

    @pytest.mark.asyncio
    async def test_due_sorted_soonest_first(self, vocabulary_service):
        later = make_set(stage=SetStage.DAY_1, stage_entered_at=T0 - timedelta(days=2))
        sooner = make_set(
            stage=SetStage.DAY_3, stage_entered_at=T0 - timedelta(days=6), offset=8
        )
        await vocabulary_service.sets.save(USER_ID, later)
        await vocabulary_service.sets.save(USER_ID, sooner)

        queue = await vocabulary_service.review_queue(USER_ID)

        assert [s.id for s in queue.due] == [sooner.id, later.id]


class TestQueries:
    """Tests for list_sets(), list_archived(), list_stories() and overview()."""

    @pytest.mark.asyncio
    async def test_list_sets_by_stage(self, vocabulary_service):
        result = await vocabulary_service.intake(USER_ID, make_candidates(10))
        await vocabulary_service.promote(USER_ID, result.set_ids[0])

        day_1 = await vocabulary_service.list_sets(USER_ID, SetStage.DAY_1)
        intake = await vocabulary_service.list_sets(USER_ID, SetStage.INTAKE)

        assert [s.id for s in day_1] == [result.set_ids[0]]
        assert [s.id for s in intake] == [result.set_ids[1]]
        assert intake[0].writable
        assert intake[0].card_count == 2

    @pytest.mark.asyncio
    async def test_archive_newest_release_first(self, vocabulary_service, clock):
        first = await vocabulary_service.intake(USER_ID, make_candidates(8))
        second = await vocabulary_service.intake(USER_ID, make_candidates(8, offset=8))
        await graduate(vocabulary_service, clock, first.set_ids[0])
        await graduate(vocabulary_service, clock, second.set_ids[0])

        archived = await vocabulary_service.list_archived(USER_ID)

        assert len(archived) == 16
        assert {c.word for c in archived[:8]} == {w for w, _ in SAMPLE_WORDS[8:16]}
        assert archived[0].release_timestamp > archived[-1].release_timestamp

    @pytest.mark.asyncio
    async def test_archive_search(self, vocabulary_service, clock):
        intake = await vocabulary_service.intake(USER_ID, make_candidates(8))
        await graduate(vocabulary_service, clock, intake.set_ids[0])

        found = await vocabulary_service.list_archived(USER_ID, search="water")

        assert [c.word for c in found] == ["水"]

    @pytest.mark.asyncio
    async def test_stories_follow_graduation(self, memory_store, clock, mock_story_generator):
        service = VocabularyService(memory_store, story_generator=mock_story_generator, clock=clock)
        intake = await service.intake(USER_ID, make_candidates(8))
        assert await service.list_stories(USER_ID) == []

        await graduate(service, clock, intake.set_ids[0])

        stories = await service.list_stories(USER_ID)
        assert len(stories) == 1
        assert await service.list_stories(USER_ID, search="dog") == stories
        assert await service.list_stories(USER_ID, search="zebra") == []

    @pytest.mark.asyncio
    async def test_overview(self, vocabulary_service, clock):
        graduating = await vocabulary_service.intake(USER_ID, make_candidates(8))
        await graduate(vocabulary_service, clock, graduating.set_ids[0])
        reviewing = await vocabulary_service.intake(USER_ID, make_candidates(8, offset=8))
        await vocabulary_service.promote(USER_ID, reviewing.set_ids[0])
        await vocabulary_service.intake(USER_ID, [CandidateWord(word="今日", translation="today")])

        overview = await vocabulary_service.overview(USER_ID)

        assert overview.intake.total_words == 1
        assert [c.word for c in overview.intake.preview_words] == ["今日"]
        assert overview.in_review.total_words == 8
        assert len(overview.in_review.preview_words) == 3
        assert overview.archived.total_words == 8
        assert len(overview.archived.preview_words) == 3

    @pytest.mark.asyncio
    async def test_invalid_user_rejected(self, vocabulary_service):
        with pytest.raises(InvalidRequestError):
            await vocabulary_service.list_sets("../other")


class TestConcurrency:
    """Tests for per-user serialization."""

    @pytest.mark.asyncio
    async def test_concurrent_intake_shares_one_set(self, clock):
        service = VocabularyService(YieldingStore(), clock=clock)

        await asyncio.gather(
            service.intake(USER_ID, make_candidates(3)),
            service.intake(USER_ID, make_candidates(3, offset=3)),
        )

        sets = await service.list_sets(USER_ID)
        assert len(sets) == 1
        assert sets[0].card_count == 6

    @pytest.mark.asyncio
    async def test_concurrent_duplicate_intake_dedups(self, clock):
        service = VocabularyService(YieldingStore(), clock=clock)

        results = await asyncio.gather(
            service.intake(USER_ID, make_candidates(4)),
            service.intake(USER_ID, make_candidates(4)),
        )

        assert sorted(r.added for r in results) == [0, 4]
        assert (await service.list_sets(USER_ID))[0].card_count == 4

    @pytest.mark.asyncio
    async def test_users_get_separate_locks(self):
        locks = UserLockRegistry()

        async with locks.hold("alice"), locks.hold("bob"):
            assert len(locks) == 2
            assert locks.get("alice") is not locks.get("bob")

        assert len(locks) == 0

    @pytest.mark.asyncio
    async def test_idle_locks_are_dropped(self, clock):
        service = VocabularyService(YieldingStore(), clock=clock)

        await asyncio.gather(
            service.intake("alice", make_candidates(2)),
            service.intake("alice", make_candidates(2, offset=2)),
            service.intake("bob", make_candidates(1)),
        )

        assert len(service.locks) == 0
        assert (await service.list_sets("alice"))[0].card_count == 4


class TestExtraction:
    """Tests for the extraction pass-through."""

    @pytest.mark.asyncio
    async def test_extract_from_text_delegates(self, memory_store):
        extractor = MagicMock()
        words = [CandidateWord(word="猫", translation="cat")]
        extractor.extract_from_text = AsyncMock(return_value=words)
        service = VocabularyService(memory_store, content_extractor=extractor)

        assert await service.extract_from_text("猫がいる") == words
        extractor.extract_from_text.assert_awaited_once_with("猫がいる")

    @pytest.mark.asyncio
    async def test_extract_without_extractor(self, vocabulary_service):
        with pytest.raises(RuntimeError):
            await vocabulary_service.extract_from_text("猫")
