"""
Hybrid in-memory + Redis rate limiting for the public auth endpoints.
Counters live in process memory and are synced to Redis periodically.
"""

import logging
import os
import time
from threading import Lock
from typing import Optional

import redis
from fastapi import HTTPException, Request, status

from .config import RATE_LIMIT_ENABLED

logger = logging.getLogger(__name__)

redis_client: Optional[redis.Redis] = None

# Format: {key: {'count': int, 'reset_time': int, 'last_redis_sync': int}}
memory_cache: dict[str, dict] = {}
cache_lock = Lock()

MEMORY_CACHE_SYNC_INTERVAL = 10  # seconds
MEMORY_CACHE_CLEANUP_INTERVAL = 60  # seconds
last_cleanup_time = 0


def get_redis_client() -> redis.Redis:
    """Get or create the Redis client from REDIS_URL or REDIS_HOST/REDIS_PORT"""
    global redis_client

    if redis_client is None:
        redis_url = os.getenv("REDIS_URL")
        common = {
            "decode_responses": True,
            "socket_connect_timeout": 5,
            "socket_timeout": 5,
            "retry_on_timeout": True,
            "health_check_interval": 30,
            "max_connections": 20,
        }

        try:
            if redis_url:
                client = redis.from_url(redis_url, **common)
            else:
                client = redis.Redis(
                    host=os.getenv("REDIS_HOST", "localhost"),
                    port=int(os.getenv("REDIS_PORT", "6379")),
                    password=os.getenv("REDIS_PASSWORD"),
                    db=int(os.getenv("REDIS_DB", "0")),
                    ssl=os.getenv("REDIS_SSL", "false").lower() == "true",
                    **common,
                )
            client.ping()
        except redis.RedisError as e:
            logger.error(f"❌ Failed to connect to Redis: {str(e)}")
            raise

        logger.info("Redis connected successfully")
        redis_client = client

    return redis_client


def cleanup_expired_cache():
    """Remove expired entries from memory cache"""
    global last_cleanup_time
    current_time = int(time.time())

    if current_time - last_cleanup_time < MEMORY_CACHE_CLEANUP_INTERVAL:
        return

    with cache_lock:
        expired_keys = [
            k for k, v in memory_cache.items() if current_time >= v.get("reset_time", 0)
        ]
        for k in expired_keys:
            del memory_cache[k]

    last_cleanup_time = current_time


def check_rate_limit(
    key: str, limit: int, window_seconds: int, client: redis.Redis
) -> tuple[bool, int, int]:
    """Count one request against ``key``.

    Returns:
        Tuple of (is_allowed, current_count, ttl_seconds)
    """
    current_time = int(time.time())
    cleanup_expired_cache()

    with cache_lock:
        if key not in memory_cache:
            # Initialize from Redis if a window is already open there
            try:
                redis_count = client.get(key)
                redis_ttl = client.ttl(key)
            except redis.RedisError as e:
                logger.warning(f"⚠️ Failed to load from Redis, using memory only: {e}")
                redis_count, redis_ttl = None, 0

            if redis_count and redis_ttl > 0:
                memory_cache[key] = {
                    "count": int(redis_count),
                    "reset_time": current_time + redis_ttl,
                    "last_redis_sync": current_time,
                }
            else:
                memory_cache[key] = {
                    "count": 0,
                    "reset_time": current_time + window_seconds,
                    "last_redis_sync": current_time,
                }

        entry = memory_cache[key]

        if current_time >= entry["reset_time"]:
            entry["count"] = 0
            entry["reset_time"] = current_time + window_seconds
            entry["last_redis_sync"] = 0

        is_allowed = entry["count"] < limit
        if is_allowed:
            entry["count"] += 1

        if current_time - entry.get("last_redis_sync", 0) >= MEMORY_CACHE_SYNC_INTERVAL:
            try:
                client.set(key, entry["count"], ex=window_seconds)
                entry["last_redis_sync"] = current_time
            except redis.RedisError as e:
                logger.warning(f"⚠️ Failed to sync to Redis: {e}")

        ttl = entry["reset_time"] - current_time
        return is_allowed, entry["count"], max(0, ttl)


async def rate_limit_dependency(
    request: Request,
    limit: int,
    window_seconds: int,
    key_prefix: str = "rate_limit",
):
    """Per-IP rate limit; denies the request when Redis is unreachable"""
    if not RATE_LIMIT_ENABLED:
        return

    client_ip = request.client.host if request.client else "unknown"
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        client_ip = forwarded.split(",")[0].strip()
    key = f"{key_prefix}:{client_ip}"

    try:
        client = get_redis_client()
    except redis.RedisError as e:
        logger.warning("🔒 Denying request due to rate limiting error (fail-closed mode)")
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Rate limiting service temporarily unavailable",
        ) from e

    is_allowed, current_count, ttl = check_rate_limit(key, limit, window_seconds, client)

    if not is_allowed:
        logger.warning(f"🚫 Rate limit EXCEEDED for {key} - {current_count}/{limit} requests used")
        raise HTTPException(
            status_code=429,
            detail={
                "message": f"Rate limit exceeded. Maximum {limit} requests per {window_seconds} seconds.",
                "retry_after": ttl,
            },
            headers={"Retry-After": str(ttl)},
        )


def create_rate_limiter(limit: int, window_seconds: int, key_prefix: str = "rate_limit"):
    """
    Create a rate limiter dependency with specific parameters

    Example usage:
        rate_limit_login = create_rate_limiter(limit=20, window_seconds=900, key_prefix="login")

        @router.post("/login")
        async def login(data: LoginRequest, _: None = Depends(rate_limit_login)):
            ...
    """

    async def rate_limiter(request: Request):
        return await rate_limit_dependency(request, limit, window_seconds, key_prefix)

    return rate_limiter
