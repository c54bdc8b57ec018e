"""Integration 테스트 공용 Fixtures.

REDIS_HOST/REDIS_PORT의 실제 서버(RedisTimeSeries 모듈 필요)에 연결.
서버가 없거나 TS.* 명령을 모르면 전체 skip.
"""

from collections.abc import Iterator

import pytest
import redis

from redis_time_series.domain.config import RedisConfig
from redis_time_series.infra.redis import TimeSeriesClient

KEY_PREFIX = "rts-test:"


@pytest.fixture(scope="session")
def redis_client() -> redis.Redis:
    config = RedisConfig()
    client = redis.Redis.from_url(config.url, decode_responses=True, socket_connect_timeout=1)
    try:
        client.ping()
        client.execute_command("TS.QUERYINDEX", "__probe__=1")
    except redis.exceptions.ConnectionError:
        pytest.skip(f"Redis not reachable at {config.url}")
    except redis.exceptions.ResponseError as e:
        pytest.skip(f"RedisTimeSeries not loaded: {e}")
    return client


@pytest.fixture
def ts(redis_client) -> Iterator[TimeSeriesClient]:
    yield TimeSeriesClient(redis_client)
    keys = list(redis_client.scan_iter(match=f"{KEY_PREFIX}*"))
    if keys:
        redis_client.delete(*keys)


@pytest.fixture
def key() -> str:
    return f"{KEY_PREFIX}series"


@pytest.fixture
def key_prefix() -> str:
    return KEY_PREFIX
