"""redis_time_series 도메인 모델 — 명령 인자/응답의 타입 계약.

Usage:
    from redis_time_series.domain import TimeStamp, Label, Aggregation
    from redis_time_series.domain.config import AppConfig
"""

# --- Types ---
from .types import Bytes, Count, Milliseconds, SeriesKey

# --- Errors ---
from .errors import TimeSeriesError, TimeSeriesParseError, TimeSeriesValidationError

# --- Enums ---
from .enums import Aggregation, DuplicatePolicy, Reduce, TimestampSentinel

# --- Timestamp ---
from .timestamp import TimeStamp, TimeStampLike

# --- Series ---
from .series import (
    CompactionRule,
    Label,
    Sample,
    SeriesInfo,
    SeriesLatest,
    SeriesRange,
)

__all__ = [
    # Types
    "SeriesKey",
    "Milliseconds",
    "Bytes",
    "Count",
    # Errors
    "TimeSeriesError",
    "TimeSeriesValidationError",
    "TimeSeriesParseError",
    # Enums
    "Aggregation",
    "DuplicatePolicy",
    "Reduce",
    "TimestampSentinel",
    # Timestamp
    "TimeStamp",
    "TimeStampLike",
    # Series
    "Sample",
    "Label",
    "CompactionRule",
    "SeriesInfo",
    "SeriesRange",
    "SeriesLatest",
]
