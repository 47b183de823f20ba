"""
Integration Test Fixtures

The API tests run the real FastAPI app against an in-memory record store.
get_vocabulary_service is overridden so no LLM client is built and every
test starts with empty storage.
"""

from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi.testclient import TestClient

from kanji_card.dependencies import get_vocabulary_service
from kanji_card.main import app
from kanji_card.services.vocabulary import VocabularyService
from tests.factories import USER_ID


@pytest.fixture
def mock_extractor() -> MagicMock:
    extractor = MagicMock()
    extractor.extract_from_text = AsyncMock(return_value=[])
    extractor.extract_from_image = AsyncMock(return_value=[])
    return extractor


@pytest.fixture
def api_service(memory_store, clock, mock_extractor) -> VocabularyService:
    return VocabularyService(memory_store, content_extractor=mock_extractor, clock=clock)


@pytest.fixture
def client(api_service):
    """Test client for the FastAPI app."""
    app.dependency_overrides[get_vocabulary_service] = lambda: api_service
    yield TestClient(app)
    app.dependency_overrides.pop(get_vocabulary_service, None)


@pytest.fixture
def headers() -> dict[str, str]:
    return {"X-User-Id": USER_ID}
