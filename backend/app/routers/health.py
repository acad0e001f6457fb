"""
Health check router for liveness and readiness probes.
"""
import logging

from fastapi import APIRouter, Response, status

from app.database.connections import get_mongo_client, get_redis_client

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])


async def _ping_mongo() -> str:
    client = await get_mongo_client()
    await client.admin.command("ping")
    return "healthy"


async def _ping_redis() -> str:
    redis = await get_redis_client()
    await redis.ping()
    return "healthy"


@router.get(
    "/health",
    status_code=status.HTTP_200_OK,
    summary="Liveness check",
)
async def health_check():
    """Returns 200 while the API process is serving requests."""
    return {"status": "healthy"}


@router.get(
    "/health/ready",
    summary="Readiness check with dependencies",
)
async def readiness_check(response: Response):
    """
    Readiness check that verifies the entity store and Redis.

    Responds 503 with per-dependency detail when either is unreachable.
    """
    checks = {"api": "healthy"}

    for name, probe in (("mongodb", _ping_mongo), ("redis", _ping_redis)):
        try:
            checks[name] = await probe()
        except Exception as e:
            logger.warning("Readiness probe failed dependency=%s: %s", name, e)
            checks[name] = f"unhealthy: {e}"

    all_healthy = all(v == "healthy" for v in checks.values())
    if not all_healthy:
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE

    return {
        "status": "healthy" if all_healthy else "degraded",
        "checks": checks,
    }
