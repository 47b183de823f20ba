"""
Health Check Endpoints

Provides health check endpoints for monitoring and orchestration.

Endpoints:
- GET /api/health - Basic health check
- GET /api/health/detailed - Detailed health with storage check
"""

from fastapi import APIRouter

from kanji_card.config import settings

router = APIRouter(prefix="/api/health", tags=["health"])


@router.get("")
async def health_check():
    """
    Basic health check.

    Returns a simple status response indicating the API is running.
    """
    return {
        "status": "healthy",
        "service": settings.APP_NAME,
    }


@router.get("/detailed")
async def detailed_health_check():
    """
    Detailed health check with dependency status.

    Checks that the file store's data directory is usable. The in-memory
    backend has nothing to check.
    """
    health = {"status": "healthy", "service": settings.APP_NAME, "dependencies": {}}

    if settings.STORAGE_BACKEND.lower() != "file":
        health["dependencies"]["storage"] = {
            "status": "healthy",
            "backend": settings.STORAGE_BACKEND,
        }
        return health

    try:
        data_path = settings.data_path
        if data_path.exists() and not data_path.is_dir():
            health["dependencies"]["storage"] = {
                "status": "unhealthy",
                "error": "DATA_DIR exists but is not a directory",
            }
            health["status"] = "degraded"
        else:
            health["dependencies"]["storage"] = {
                "status": "healthy",
                "backend": "file",
                "path": str(data_path),
            }
    except Exception as e:
        health["dependencies"]["storage"] = {"status": "unhealthy", "error": str(e)}
        health["status"] = "degraded"

    return health
