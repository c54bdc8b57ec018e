"""Redis infrastructure — client factory, TS.* argument builder, reply parser."""

from .client import get_redis, get_timeseries
from .timeseries import TimeSeriesClient

__all__ = [
    "get_redis",
    "get_timeseries",
    "TimeSeriesClient",
]
