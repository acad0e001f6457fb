"""
Rate limiting and login lockout backed by Redis.

Key patterns:
- ratelimit:{endpoint}:{ip}  fixed-window request counter
- failed_login:{user_id}     consecutive failed logins
- lockout:{user_id}          present while an account is locked
"""
import logging
from typing import Optional

from app.config import get_settings
from app.database.connections import get_redis_client

logger = logging.getLogger(__name__)


async def check_rate_limit(
    ip: str,
    endpoint: str,
    limit: Optional[int] = None,
    window_seconds: Optional[int] = None,
) -> bool:
    """
    Check if a request should be rate limited.

    Uses INCR with EXPIRE on first hit, giving a fixed window per key.

    Args:
        ip: Client IP address
        endpoint: Endpoint identifier (e.g., "/users/login")
        limit: Max requests allowed (defaults to config value)
        window_seconds: Time window in seconds (defaults to config value)

    Returns:
        True if request is allowed, False if rate limited
    """
    settings = get_settings()
    if not settings.rate_limit_enabled:
        return True

    limit = limit or settings.login_rate_limit_attempts
    window_seconds = window_seconds or settings.login_rate_limit_window_seconds

    redis = await get_redis_client()
    key = f"ratelimit:{endpoint}:{ip}"
    current = await redis.incr(key)
    if current == 1:
        await redis.expire(key, window_seconds)

    if current > limit:
        logger.warning("Rate limit exceeded endpoint=%s ip=%s", endpoint, ip)
        return False
    return True


async def increment_failed_login(user_id: str) -> int:
    """
    Increment failed login attempts counter for a user.

    Returns:
        Current number of failed attempts
    """
    settings = get_settings()
    if not settings.rate_limit_enabled:
        return 0

    redis = await get_redis_client()
    key = f"failed_login:{user_id}"
    count = await redis.incr(key)
    await redis.expire(key, settings.user_lockout_duration_minutes * 60)
    return int(count)


async def check_user_lockout(user_id: str) -> bool:
    """True if the user is currently locked out after too many failed logins."""
    settings = get_settings()
    if not settings.rate_limit_enabled:
        return False

    redis = await get_redis_client()
    return bool(await redis.exists(f"lockout:{user_id}"))


async def set_user_lockout(user_id: str, duration_minutes: int) -> None:
    """Lock out a user for ``duration_minutes``."""
    redis = await get_redis_client()
    await redis.setex(f"lockout:{user_id}", duration_minutes * 60, "1")
    logger.warning("Account locked user_id=%s minutes=%s", user_id, duration_minutes)


async def reset_failed_attempts(user_id: str) -> None:
    """Reset failed login attempts counter after successful login."""
    settings = get_settings()
    if not settings.rate_limit_enabled:
        return

    redis = await get_redis_client()
    await redis.delete(f"failed_login:{user_id}")
