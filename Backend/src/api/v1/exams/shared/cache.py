# -*- coding: utf-8 -*-
"""
Cache keys and helpers for exam endpoints.

Only the status view is cached. It changes on submit and on unenroll, and
both paths drop the key.
"""

from typing import Any, Dict, Optional

from src.config.redis_settings import redis_settings
from src.service.cache_service import cache_service

CACHE_KEYS = {
    "exam_status": "status:{user_id}:{exam_id}",
}


def get_cache_key(key_type: str, **kwargs) -> str:
    """
    Generate cache key from pattern and parameters.

    Args:
        key_type: Type of cache key
        **kwargs: Parameters for key generation

    Returns:
        Generated cache key
    """
    template = CACHE_KEYS.get(key_type)
    if not template:
        raise ValueError(f"Unknown cache key type: {key_type}")
    return cache_service.build_key(
        redis_settings.cache_prefix_exams, template.format(**kwargs)
    )


async def get_exam_status_cached(user_id: int, exam_id: int) -> Optional[Dict[str, Any]]:
    cache_key = get_cache_key("exam_status", user_id=user_id, exam_id=exam_id)
    return await cache_service.get(cache_key)


async def set_exam_status_cached(
    user_id: int, exam_id: int, status_data: Dict[str, Any]
) -> None:
    cache_key = get_cache_key("exam_status", user_id=user_id, exam_id=exam_id)
    await cache_service.set(cache_key, status_data, redis_settings.cache_ttl_exam_status)


async def invalidate_exam_status_cache(user_id: int, exam_id: int) -> None:
    cache_key = get_cache_key("exam_status", user_id=user_id, exam_id=exam_id)
    await cache_service.delete(cache_key)


async def invalidate_user_exam_caches(user_id: int) -> int:
    """Drop every cached exam entry of one user."""
    pattern = f"{redis_settings.cache_prefix_exams}:*:{user_id}:*"
    return await cache_service.invalidate_pattern(pattern)
