"""
Kanji Card Test Suite

Test Structure:
    tests/
    ├── conftest.py          # Shared fixtures and configuration
    ├── factories.py         # Builders for sets, candidates and a fake clock
    ├── unit/                # Unit tests (in-memory store, mocked LLM)
    │   ├── test_intake.py   # Dedup and batching
    │   ├── test_lifecycle.py  # Promotion and archive migration
    │   └── ...
    └── integration/         # HTTP API through FastAPI's TestClient
        ├── test_health.py
        └── test_vocabulary_api.py

Running Tests:
    # Run all tests
    pytest -v

    # Run only unit tests
    pytest backend/tests/unit/ -v

    # Run with coverage
    pytest --cov=kanji_card --cov-report=html
"""
