"""TimeSeriesClient — RedisTimeSeries 명령을 타입 메서드로 노출.

Design:
  - 인자 생성 → 명령 이름 prefix → execute_command() 1회 → 응답 파싱
  - 재시도/파이프라인/배치 없음. 연결·타임아웃·재연결은 redis-py 책임
  - 상태 없음 (래핑한 redis.Redis 참조만 보유)

Usage:
    ts = TimeSeriesClient(redis.Redis(decode_responses=True))
    ts.create("sensor:1", retention=86_400_000, labels={"room": "a"})
    ts.add("sensor:1", TimeStamp.AUTO, 21.5)
    info = ts.info("sensor:1")
"""

import logging
from collections.abc import Callable, Iterable, Sequence
from typing import Any, TypeVar

import redis

from redis_time_series.domain.enums import Aggregation, DuplicatePolicy, Reduce
from redis_time_series.domain.errors import TimeSeriesParseError
from redis_time_series.domain.series import (
    CompactionRule,
    Sample,
    SeriesInfo,
    SeriesLatest,
    SeriesRange,
)
from redis_time_series.domain.timestamp import TimeStamp, TimeStampLike

from . import arguments, parsers
from .arguments import LabelsLike

logger = logging.getLogger(__name__)

T = TypeVar("T")

# --- Command names ---
CREATE = "TS.CREATE"
ALTER = "TS.ALTER"
ADD = "TS.ADD"
MADD = "TS.MADD"
INCRBY = "TS.INCRBY"
DECRBY = "TS.DECRBY"
DEL = "TS.DEL"
CREATERULE = "TS.CREATERULE"
DELETERULE = "TS.DELETERULE"
RANGE = "TS.RANGE"
REVRANGE = "TS.REVRANGE"
MRANGE = "TS.MRANGE"
MREVRANGE = "TS.MREVRANGE"
GET = "TS.GET"
MGET = "TS.MGET"
INFO = "TS.INFO"
QUERYINDEX = "TS.QUERYINDEX"


class TimeSeriesClient:
    """redis.Redis 위의 RedisTimeSeries 바인딩."""

    def __init__(self, client: redis.Redis):
        self._client = client

    @property
    def client(self) -> redis.Redis:
        return self._client

    def _execute(self, command: str, args: list[str], parser: Callable[[Any], T]) -> T:
        """명령 1회 전송 후 파싱. 파싱 실패는 로그 후 그대로 전파."""
        logger.debug("%s %s", command, args[0] if args else "")
        reply = self._client.execute_command(command, *args)
        try:
            return parser(reply)
        except TimeSeriesParseError:
            logger.warning("Unexpected %s reply: %r", command, reply)
            raise

    # ─── Series lifecycle ────────────────────────────────────────

    def create(
        self,
        key: str,
        retention: int | None = None,
        labels: LabelsLike | None = None,
        uncompressed: bool = False,
        chunk_size: int | None = None,
        duplicate_policy: DuplicatePolicy | None = None,
    ) -> bool:
        """TS.CREATE. 성공 시 True."""
        args = arguments.build_create_args(key, retention, labels, uncompressed, chunk_size, duplicate_policy)
        return self._execute(CREATE, args, parsers.parse_boolean)

    def alter(
        self,
        key: str,
        retention: int | None = None,
        labels: LabelsLike | None = None,
    ) -> bool:
        """TS.ALTER. labels를 주면 기존 라벨 전체 교체."""
        return self._execute(ALTER, arguments.build_alter_args(key, retention, labels), parsers.parse_boolean)

    def info(self, key: str) -> SeriesInfo:
        return self._execute(INFO, [key], parsers.parse_info)

    # ─── Writes ──────────────────────────────────────────────────

    def add(
        self,
        key: str,
        timestamp: TimeStampLike,
        value: float,
        retention: int | None = None,
        labels: LabelsLike | None = None,
        uncompressed: bool = False,
        chunk_size: int | None = None,
        on_duplicate: DuplicatePolicy | None = None,
    ) -> TimeStamp:
        """TS.ADD. 시계열이 없으면 서버가 생성. 반환값: 실제 기록된 타임스탬프."""
        args = arguments.build_add_args(
            key, timestamp, value, retention, labels, uncompressed, chunk_size, on_duplicate
        )
        return self._execute(ADD, args, parsers.parse_timestamp)

    def madd(self, samples: Iterable[tuple[str, TimeStampLike, float]]) -> list[TimeStamp]:
        """TS.MADD — (key, timestamp, value) 여러 건을 한 번에."""
        return self._execute(MADD, arguments.build_madd_args(samples), parsers.parse_timestamp_array)

    def incrby(
        self,
        key: str,
        value: float,
        timestamp: TimeStampLike | None = None,
        retention: int | None = None,
        labels: LabelsLike | None = None,
        uncompressed: bool = False,
        chunk_size: int | None = None,
    ) -> TimeStamp:
        args = arguments.build_incrby_args(key, value, timestamp, retention, labels, uncompressed, chunk_size)
        return self._execute(INCRBY, args, parsers.parse_timestamp)

    def decrby(
        self,
        key: str,
        value: float,
        timestamp: TimeStampLike | None = None,
        retention: int | None = None,
        labels: LabelsLike | None = None,
        uncompressed: bool = False,
        chunk_size: int | None = None,
    ) -> TimeStamp:
        args = arguments.build_incrby_args(key, value, timestamp, retention, labels, uncompressed, chunk_size)
        return self._execute(DECRBY, args, parsers.parse_timestamp)

    def delete(self, key: str, from_time: TimeStampLike, to_time: TimeStampLike) -> int:
        """TS.DEL. 반환값: 삭제된 샘플 수."""
        return self._execute(DEL, arguments.build_del_args(key, from_time, to_time), parsers.parse_integer)

    # ─── Compaction rules ────────────────────────────────────────

    def create_rule(self, source_key: str, rule: CompactionRule) -> bool:
        return self._execute(CREATERULE, arguments.build_createrule_args(source_key, rule), parsers.parse_boolean)

    def delete_rule(self, source_key: str, dest_key: str) -> bool:
        return self._execute(
            DELETERULE, arguments.build_deleterule_args(source_key, dest_key), parsers.parse_boolean
        )

    # ─── Reads ───────────────────────────────────────────────────

    def get(self, key: str) -> Sample | None:
        """TS.GET — 최신 샘플. 빈 시계열이면 None."""
        return self._execute(GET, arguments.build_get_args(key), parsers.parse_sample)

    def mget(
        self,
        filters: Sequence[str],
        with_labels: bool = False,
        selected_labels: Sequence[str] | None = None,
    ) -> list[SeriesLatest]:
        args = arguments.build_mget_args(filters, with_labels, selected_labels)
        return self._execute(MGET, args, parsers.parse_mget)

    def range(
        self,
        key: str,
        from_time: TimeStampLike,
        to_time: TimeStampLike,
        count: int | None = None,
        aggregation: Aggregation | None = None,
        bucket_duration: int | None = None,
        filter_by_ts: Sequence[TimeStampLike] | None = None,
        filter_by_value: tuple[float, float] | None = None,
        align: TimeStampLike | None = None,
    ) -> list[Sample]:
        args = arguments.build_range_args(
            key, from_time, to_time, count, aggregation, bucket_duration, filter_by_ts, filter_by_value, align
        )
        return self._execute(RANGE, args, parsers.parse_sample_array)

    def revrange(
        self,
        key: str,
        from_time: TimeStampLike,
        to_time: TimeStampLike,
        count: int | None = None,
        aggregation: Aggregation | None = None,
        bucket_duration: int | None = None,
        filter_by_ts: Sequence[TimeStampLike] | None = None,
        filter_by_value: tuple[float, float] | None = None,
        align: TimeStampLike | None = None,
    ) -> list[Sample]:
        """TS.REVRANGE — 최신순."""
        args = arguments.build_range_args(
            key, from_time, to_time, count, aggregation, bucket_duration, filter_by_ts, filter_by_value, align
        )
        return self._execute(REVRANGE, args, parsers.parse_sample_array)

    def mrange(
        self,
        from_time: TimeStampLike,
        to_time: TimeStampLike,
        filters: Sequence[str],
        count: int | None = None,
        aggregation: Aggregation | None = None,
        bucket_duration: int | None = None,
        with_labels: bool = False,
        group_by: str | None = None,
        reduce: Reduce | None = None,
        filter_by_ts: Sequence[TimeStampLike] | None = None,
        filter_by_value: tuple[float, float] | None = None,
        selected_labels: Sequence[str] | None = None,
        align: TimeStampLike | None = None,
    ) -> list[SeriesRange]:
        """TS.MRANGE — 라벨 필터에 맞는 여러 시계열 구간 조회."""
        args = arguments.build_mrange_args(
            from_time,
            to_time,
            filters,
            count,
            aggregation,
            bucket_duration,
            with_labels,
            group_by,
            reduce,
            filter_by_ts,
            filter_by_value,
            selected_labels,
            align,
        )
        return self._execute(MRANGE, args, parsers.parse_mrange)

    def mrevrange(
        self,
        from_time: TimeStampLike,
        to_time: TimeStampLike,
        filters: Sequence[str],
        count: int | None = None,
        aggregation: Aggregation | None = None,
        bucket_duration: int | None = None,
        with_labels: bool = False,
        group_by: str | None = None,
        reduce: Reduce | None = None,
        filter_by_ts: Sequence[TimeStampLike] | None = None,
        filter_by_value: tuple[float, float] | None = None,
        selected_labels: Sequence[str] | None = None,
        align: TimeStampLike | None = None,
    ) -> list[SeriesRange]:
        args = arguments.build_mrange_args(
            from_time,
            to_time,
            filters,
            count,
            aggregation,
            bucket_duration,
            with_labels,
            group_by,
            reduce,
            filter_by_ts,
            filter_by_value,
            selected_labels,
            align,
        )
        return self._execute(MREVRANGE, args, parsers.parse_mrange)

    def query_index(self, filters: Sequence[str]) -> list[str]:
        """TS.QUERYINDEX — 필터에 맞는 키 목록."""
        return self._execute(QUERYINDEX, arguments.build_queryindex_args(filters), parsers.parse_string_array)
