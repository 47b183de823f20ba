"""
Integration Tests

Drive the FastAPI app through TestClient with an in-memory record store.
No external services are needed.
"""
