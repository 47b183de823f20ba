"""
Unit Tests

Unit tests run in isolation without external dependencies.
Storage is in-memory or under tmp_path; LLM calls are mocked.
"""
