"""시계열 값 객체 — 샘플, 라벨, 컴팩션 규칙, TS.INFO 스냅샷.

모두 frozen 모델이며 커넥션 등 리소스를 소유하지 않는다.
"""

from pydantic import BaseModel, ConfigDict, Field

from .enums import Aggregation, DuplicatePolicy
from .timestamp import TimeStamp
from .types import Bytes, Count, Milliseconds, SeriesKey


class Sample(BaseModel):
    """(timestamp, value) 한 점."""

    time: TimeStamp
    value: float

    model_config = ConfigDict(frozen=True)


class Label(BaseModel):
    """시계열 메타데이터 태그 — MRANGE/MGET 필터·그룹핑에 사용."""

    key: str
    value: str

    model_config = ConfigDict(frozen=True)


class CompactionRule(BaseModel):
    """컴팩션 규칙 — source 시계열을 dest_key로 bucket 단위 집계."""

    dest_key: SeriesKey
    bucket_duration: Milliseconds
    aggregation: Aggregation | None = None

    model_config = ConfigDict(frozen=True)


class SeriesInfo(BaseModel):
    """TS.INFO 응답 스냅샷. 응답에 없는 필드는 기본값 유지."""

    total_samples: Count = 0
    memory_usage: Bytes = 0
    first_timestamp: TimeStamp = Field(default_factory=lambda: TimeStamp.of(0))
    last_timestamp: TimeStamp = Field(default_factory=lambda: TimeStamp.of(0))
    retention_time: Milliseconds = 0
    chunk_count: Count = 0
    chunk_size: Bytes = 0
    chunk_type: str | None = None  # "compressed" | "uncompressed"
    labels: list[Label] = []
    source_key: str | None = None  # 이 시계열이 컴팩션 대상일 때 원본 키
    rules: list[CompactionRule] = []
    duplicate_policy: DuplicatePolicy | None = None

    model_config = ConfigDict(frozen=True)

    def label_dict(self) -> dict[str, str]:
        return {label.key: label.value for label in self.labels}


class SeriesRange(BaseModel):
    """TS.MRANGE / TS.MREVRANGE 응답의 시계열 하나."""

    key: str
    labels: list[Label] = []
    samples: list[Sample] = []

    model_config = ConfigDict(frozen=True)


class SeriesLatest(BaseModel):
    """TS.MGET 응답의 시계열 하나. 비어 있는 시계열은 sample=None."""

    key: str
    labels: list[Label] = []
    sample: Sample | None = None

    model_config = ConfigDict(frozen=True)
