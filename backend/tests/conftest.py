"""
Shared Test Fixtures and Configuration

This module provides pytest fixtures used across unit and integration tests.
"""

import os
import sys
from pathlib import Path
from typing import Generator
from unittest.mock import AsyncMock, MagicMock

import pytest

# Add the backend directory to the path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

# Settings are read at import time, so the test configuration has to be in
# place before anything imports kanji_card.config
os.environ["STORAGE_BACKEND"] = "memory"
os.environ["STORY_GENERATION_ENABLED"] = "false"
os.environ.setdefault("OPENAI_API_KEY", "test-api-key")

from kanji_card.services.storage.memory_store import InMemoryRecordStore  # noqa: E402
from kanji_card.services.vocabulary import (  # noqa: E402
    ArchiveRepository,
    CardSetRepository,
    VocabularyService,
)
from tests.factories import FakeClock  # noqa: E402


# ============================================================================
# Environment Configuration
# ============================================================================


@pytest.fixture(scope="session", autouse=True)
def setup_test_environment() -> Generator[None, None, None]:
    """
    Keep the test environment for the whole session.

    The variables themselves are set at import time above; this restores
    the original environment once the session ends.
    """
    original_env = os.environ.copy()
    yield
    os.environ.clear()
    os.environ.update(original_env)


# ============================================================================
# Clock
# ============================================================================


@pytest.fixture
def clock() -> FakeClock:
    """Clock fixed at T0; tests move it explicitly."""
    return FakeClock()


# ============================================================================
# Storage and Repositories
# ============================================================================


@pytest.fixture
def memory_store() -> InMemoryRecordStore:
    return InMemoryRecordStore()


@pytest.fixture
def set_repository(memory_store: InMemoryRecordStore) -> CardSetRepository:
    return CardSetRepository(memory_store)


@pytest.fixture
def archive_repository(memory_store: InMemoryRecordStore) -> ArchiveRepository:
    return ArchiveRepository(memory_store)


# ============================================================================
# LLM Collaborators
# ============================================================================


@pytest.fixture
def mock_story_generator() -> MagicMock:
    """Story generator returning a fixed two-sentence story."""
    generator = MagicMock()
    generator.generate = AsyncMock(
        return_value=(
            ["猫が本を読みます。", "犬は水を飲みます。"],
            ["The cat reads a book.", "The dog drinks water."],
        )
    )
    return generator


@pytest.fixture
def mock_llm_client() -> MagicMock:
    """LLM client whose complete() is an AsyncMock."""
    client = MagicMock()
    client.complete = AsyncMock()
    client.text_model = "openai/gpt-4o-mini"
    client.vision_model = "openai/gpt-4o"
    return client


# ============================================================================
# Service
# ============================================================================


@pytest.fixture
def vocabulary_service(
    memory_store: InMemoryRecordStore, clock: FakeClock
) -> VocabularyService:
    """Service on an in-memory store, without LLM collaborators."""
    return VocabularyService(memory_store, clock=clock)
