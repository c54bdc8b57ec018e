"""Redis client factory."""

from functools import lru_cache

import redis

from redis_time_series.domain.config import get_config

from .timeseries import TimeSeriesClient


@lru_cache
def get_redis() -> redis.Redis:
    """프로세스 전역 Redis 클라이언트 (싱글턴).

    테스트에서는 get_redis.cache_clear() 후 재생성.
    """
    config = get_config()
    return redis.Redis.from_url(
        config.redis.url,
        decode_responses=config.redis.decode_responses,
        socket_connect_timeout=config.redis.socket_connect_timeout,
        socket_timeout=config.redis.socket_timeout,
        retry_on_timeout=True,
    )


@lru_cache
def get_timeseries() -> TimeSeriesClient:
    """get_redis() 위의 TimeSeriesClient 싱글턴."""
    return TimeSeriesClient(get_redis())
