"""Redis/ARQ connection handling with degraded-mode fallback.

Without Redis the service keeps working: background extraction runs
in-process through FastAPI BackgroundTasks and the health endpoint
reports the queue as unavailable.
"""

import logging

from arq.connections import ArqRedis, RedisSettings, create_pool
from redis.exceptions import RedisError

from docvault.config import get_settings

logger = logging.getLogger(__name__)

_pool: ArqRedis | None = None
_attempted: bool = False


def _redis_settings() -> RedisSettings:
    """ARQ settings from redis_url, tuned to fail fast when Redis is down."""
    base = RedisSettings.from_dsn(get_settings().redis_url)
    return RedisSettings(
        host=base.host,
        port=base.port,
        unix_socket_path=base.unix_socket_path,
        database=base.database,
        password=base.password,
        ssl=base.ssl,
        conn_timeout=2,
        conn_retries=0,
        conn_retry_delay=0,
    )


async def get_redis_pool() -> ArqRedis | None:
    """Return the shared ARQ pool, or None in degraded mode.

    Connection is attempted once; later calls return the cached result.
    """
    global _pool, _attempted
    if _pool is not None:
        return _pool
    if _attempted or not get_settings().use_arq_worker:
        return None

    _attempted = True
    try:
        _pool = await create_pool(_redis_settings())
    except (RedisError, OSError) as e:
        logger.warning("redis_unavailable", extra={"error": str(e)})
        return None
    logger.info("redis_pool_created")
    return _pool


async def close_redis_pool() -> None:
    """Close the shared pool on shutdown."""
    global _pool, _attempted
    if _pool is not None:
        await _pool.aclose()
        _pool = None
        logger.info("redis_pool_closed")
    _attempted = False


async def is_redis_available() -> bool:
    """Ping Redis, retrying the connection if an earlier attempt failed."""
    global _pool, _attempted
    if _pool is None:
        _attempted = False
    pool = await get_redis_pool()
    if pool is None:
        return False
    try:
        await pool.ping()
    except (RedisError, OSError):
        _pool = None
        _attempted = False
        return False
    return True


async def enqueue_job(function: str, *args) -> str | None:
    """Enqueue an ARQ job.

    Returns:
        The job id, or None when the caller must fall back to in-process work
    """
    pool = await get_redis_pool()
    if pool is None:
        return None
    try:
        job = await pool.enqueue_job(function, *args)
    except (RedisError, OSError) as e:
        logger.warning("arq_enqueue_failed", extra={"function": function, "error": str(e)})
        return None
    if job is None:
        # ARQ returns None when a job with the same id is already queued
        return None
    logger.info("arq_job_enqueued", extra={"function": function, "job_id": job.job_id})
    return job.job_id
