"""
Redis configuration for the learning platform.

Connection parameters and cache TTLs used by the exam status cache.
"""

from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class RedisSettings(BaseSettings):
    """Redis configuration."""

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )

    # Connection
    redis_host: str = "localhost"
    redis_port: int = 6379
    redis_password: Optional[str] = None
    redis_db: int = 0
    redis_cache_enabled: bool = True

    # Connection pool
    redis_max_connections: int = 10
    redis_retry_on_timeout: bool = True
    redis_socket_timeout: float = Field(default=2.0)

    # Cache TTLs (seconds)
    cache_ttl_exam_status: int = 300  # 5 minutes

    # Cache key prefixes
    cache_prefix_exams: str = "exams"


redis_settings = RedisSettings()


def get_redis_connection_params() -> dict:
    """
    Connection parameters for redis-py.

    Returns:
        Keyword arguments for ``redis.asyncio.Redis``
    """
    params = {
        "host": redis_settings.redis_host,
        "port": redis_settings.redis_port,
        "db": redis_settings.redis_db,
        "max_connections": redis_settings.redis_max_connections,
        "retry_on_timeout": redis_settings.redis_retry_on_timeout,
        "socket_timeout": redis_settings.redis_socket_timeout,
        "socket_connect_timeout": redis_settings.redis_socket_timeout,
        "decode_responses": True,
    }

    if redis_settings.redis_password:
        params["password"] = redis_settings.redis_password

    return params
