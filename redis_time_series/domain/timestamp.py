"""TimeStamp — 밀리초 값 또는 프로토콜 센티넬("-", "+", "*") 중 정확히 하나.

Usage:
    TimeStamp.of(1700000000000)
    TimeStamp.from_datetime(datetime(2024, 1, 1, tzinfo=UTC))
    TimeStamp.parse("2024-01-01 09:00", "%Y-%m-%d %H:%M")
    TimeStamp.AUTO.to_token()  # -> "*"

정렬: MIN < 모든 숫자 값 < MAX. AUTO는 서버가 값을 정하므로 비교 불가(TypeError).
0은 유효한 타임스탬프(epoch)이며, "값 없음"은 None으로 표현한다.
"""

from datetime import UTC, datetime, timedelta
from typing import ClassVar

from pydantic import BaseModel, ConfigDict, Field, model_validator

from .enums import TimestampSentinel
from .errors import TimeSeriesValidationError

_EPOCH = datetime(1970, 1, 1, tzinfo=UTC)
_ONE_MS = timedelta(milliseconds=1)

# 서버 타임스탬프는 부호 있는 64비트 밀리초
MAX_MILLIS = 2**63 - 1


class TimeStamp(BaseModel):
    """시계열 타임스탬프 (tagged variant)."""

    value: int | None = Field(default=None, ge=0, le=MAX_MILLIS)
    sentinel: TimestampSentinel | None = None

    model_config = ConfigDict(frozen=True)

    MIN: ClassVar["TimeStamp"]
    MAX: ClassVar["TimeStamp"]
    AUTO: ClassVar["TimeStamp"]

    @model_validator(mode="after")
    def _exactly_one(self) -> "TimeStamp":
        if (self.value is None) == (self.sentinel is None):
            raise ValueError("TimeStamp needs exactly one of value or sentinel")
        return self

    # ─── Constructors ────────────────────────────────────────────

    @classmethod
    def of(cls, millis: int) -> "TimeStamp":
        if not 0 <= millis <= MAX_MILLIS:
            raise TimeSeriesValidationError(f"Timestamp out of range: {millis}")
        return cls(value=millis)

    @classmethod
    def from_datetime(cls, dt: datetime) -> "TimeStamp":
        """datetime → epoch 밀리초. naive datetime은 UTC로 간주."""
        if dt.tzinfo is None:
            dt = dt.replace(tzinfo=UTC)
        return cls.of((dt - _EPOCH) // _ONE_MS)

    @classmethod
    def parse(cls, text: str, fmt: str) -> "TimeStamp":
        """strptime 포맷 문자열로 파싱 (타임존 없는 포맷은 UTC)."""
        try:
            dt = datetime.strptime(text, fmt)
        except ValueError as e:
            raise TimeSeriesValidationError(f"Cannot parse timestamp '{text}' with '{fmt}'") from e
        return cls.from_datetime(dt)

    @classmethod
    def now(cls) -> "TimeStamp":
        return cls.from_datetime(datetime.now(UTC))

    @classmethod
    def coerce(cls, ts: "TimeStampLike") -> "TimeStamp":
        """호출자가 넘긴 다양한 표현을 TimeStamp로 정규화."""
        if isinstance(ts, TimeStamp):
            return ts
        if isinstance(ts, bool):
            raise TimeSeriesValidationError(f"Invalid timestamp {ts!r}")
        if isinstance(ts, int):
            if ts < 0:
                raise TimeSeriesValidationError(f"Timestamp must be non-negative: {ts}")
            return cls.of(ts)
        if isinstance(ts, datetime):
            return cls.from_datetime(ts)
        if isinstance(ts, str):
            if ts.isdecimal():
                try:
                    return cls.of(int(ts))
                except ValueError:
                    raise TimeSeriesValidationError(f"Timestamp parameter is wrong: '{ts}'") from None
            try:
                return cls(sentinel=TimestampSentinel(ts))
            except ValueError:
                raise TimeSeriesValidationError(f"Timestamp parameter is wrong: '{ts}'") from None
        raise TimeSeriesValidationError(f"Invalid timestamp {ts!r}")

    # ─── Accessors ───────────────────────────────────────────────

    @property
    def is_sentinel(self) -> bool:
        return self.sentinel is not None

    def to_token(self) -> str:
        """프로토콜 토큰 문자열."""
        if self.sentinel is not None:
            return self.sentinel.value
        return str(self.value)

    def to_datetime(self) -> datetime:
        if self.value is None:
            raise TypeError(f"Sentinel timestamp '{self.sentinel}' has no datetime")
        return _EPOCH + self.value * _ONE_MS

    def __str__(self) -> str:
        return self.to_token()

    def __int__(self) -> int:
        if self.value is None:
            raise TypeError(f"Sentinel timestamp '{self.sentinel}' has no numeric value")
        return self.value

    # ─── Ordering ────────────────────────────────────────────────

    def _rank(self) -> tuple[int, int]:
        if self.sentinel is TimestampSentinel.MIN:
            return (0, 0)
        if self.sentinel is TimestampSentinel.MAX:
            return (2, 0)
        if self.sentinel is TimestampSentinel.AUTO:
            raise TypeError("AUTO timestamp is not orderable")
        return (1, self.value)

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, TimeStamp):
            return NotImplemented
        return self._rank() < other._rank()

    def __le__(self, other: object) -> bool:
        if not isinstance(other, TimeStamp):
            return NotImplemented
        return self._rank() <= other._rank()

    def __gt__(self, other: object) -> bool:
        if not isinstance(other, TimeStamp):
            return NotImplemented
        return self._rank() > other._rank()

    def __ge__(self, other: object) -> bool:
        if not isinstance(other, TimeStamp):
            return NotImplemented
        return self._rank() >= other._rank()


TimeStamp.MIN = TimeStamp(sentinel=TimestampSentinel.MIN)
TimeStamp.MAX = TimeStamp(sentinel=TimestampSentinel.MAX)
TimeStamp.AUTO = TimeStamp(sentinel=TimestampSentinel.AUTO)

# 빌더 함수가 받는 타임스탬프 입력 형태
TimeStampLike = TimeStamp | int | datetime | str | TimestampSentinel
