"""redis-time-series — RedisTimeSeries 명령을 redis-py 위에서 타입 메서드로 제공.

Usage:
    import redis
    from redis_time_series import TimeSeriesClient, TimeStamp

    ts = TimeSeriesClient(redis.Redis(decode_responses=True))
    ts.add("sensor:1", TimeStamp.AUTO, 21.5)
"""

from .domain import (
    Aggregation,
    CompactionRule,
    DuplicatePolicy,
    Label,
    Reduce,
    Sample,
    SeriesInfo,
    SeriesLatest,
    SeriesRange,
    TimeSeriesError,
    TimeSeriesParseError,
    TimeSeriesValidationError,
    TimeStamp,
)
from .infra.redis import TimeSeriesClient, get_redis, get_timeseries

__all__ = [
    "TimeSeriesClient",
    "get_redis",
    "get_timeseries",
    "TimeStamp",
    "Sample",
    "Label",
    "CompactionRule",
    "SeriesInfo",
    "SeriesRange",
    "SeriesLatest",
    "Aggregation",
    "DuplicatePolicy",
    "Reduce",
    "TimeSeriesError",
    "TimeSeriesValidationError",
    "TimeSeriesParseError",
]
