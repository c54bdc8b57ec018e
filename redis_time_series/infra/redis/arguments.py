"""Argument Builder — 타입 파라미터 → TS.* 명령 토큰 리스트.

모든 함수는 순수 함수이며 I/O가 없다. 명령 이름 토큰은 포함하지 않는다
(TimeSeriesClient가 앞에 붙인다). 선택 파라미터가 None/빈 값이면 해당 토큰은 생략.

Usage:
    args = build_create_args("sensor:1", retention=5000, labels={"room": "a"})
    # -> ["sensor:1", "RETENTION", "5000", "LABELS", "room", "a"]
"""

from collections.abc import Iterable, Mapping, Sequence
from enum import StrEnum

from pydantic import ValidationError

from redis_time_series.domain.enums import Aggregation, DuplicatePolicy, Reduce
from redis_time_series.domain.errors import TimeSeriesValidationError
from redis_time_series.domain.series import CompactionRule, Label
from redis_time_series.domain.timestamp import TimeStamp, TimeStampLike

# --- Keyword tokens ---
RETENTION = "RETENTION"
LABELS = "LABELS"
UNCOMPRESSED = "UNCOMPRESSED"
COUNT = "COUNT"
AGGREGATION = "AGGREGATION"
ALIGN = "ALIGN"
FILTER = "FILTER"
WITHLABELS = "WITHLABELS"
SELECTED_LABELS = "SELECTED_LABELS"
TIMESTAMP = "TIMESTAMP"
CHUNK_SIZE = "CHUNK_SIZE"
DUPLICATE_POLICY = "DUPLICATE_POLICY"
ON_DUPLICATE = "ON_DUPLICATE"
GROUPBY = "GROUPBY"
REDUCE = "REDUCE"
FILTER_BY_TS = "FILTER_BY_TS"
FILTER_BY_VALUE = "FILTER_BY_VALUE"

LabelsLike = Iterable[Label] | Mapping[str, str]


# ─── Token helpers ───────────────────────────────────────────────


def _number(value: int | float) -> str:
    if isinstance(value, bool):
        raise TimeSeriesValidationError(f"Expected a number, got {value!r}")
    if isinstance(value, int):
        return str(value)
    return repr(float(value))


def _timestamp(ts: TimeStampLike, *, allow_auto: bool = True) -> str:
    stamp = TimeStamp.coerce(ts)
    if not allow_auto and stamp == TimeStamp.AUTO:
        raise TimeSeriesValidationError("'*' is only valid as a sample timestamp")
    return stamp.to_token()


def _enum_token(enum_cls: type[StrEnum], value: StrEnum | str) -> str:
    try:
        return enum_cls(value).value
    except ValueError:
        raise TimeSeriesValidationError(f"Invalid {enum_cls.__name__} {value!r}") from None


def _non_negative(name: str, value: int) -> int:
    if value < 0:
        raise TimeSeriesValidationError(f"{name} must be non-negative: {value}")
    return value


def _add_retention(args: list[str], retention: int | None) -> None:
    if retention is not None:
        args += [RETENTION, str(_non_negative("retention", retention))]


def _add_chunk_size(args: list[str], chunk_size: int | None) -> None:
    if chunk_size is not None:
        args += [CHUNK_SIZE, str(_non_negative("chunk_size", chunk_size))]


def _add_labels(args: list[str], labels: LabelsLike | None) -> None:
    if not labels:
        return
    if isinstance(labels, Mapping):
        try:
            pairs = [Label(key=k, value=v) for k, v in labels.items()]
        except ValidationError as e:
            raise TimeSeriesValidationError(f"Label keys and values must be strings: {dict(labels)!r}") from e
    else:
        pairs = list(labels)
    if not pairs:
        return
    args.append(LABELS)
    for label in pairs:
        args += [label.key, label.value]


def _add_uncompressed(args: list[str], uncompressed: bool) -> None:
    if uncompressed:
        args.append(UNCOMPRESSED)


def _add_duplicate_policy(args: list[str], keyword: str, policy: DuplicatePolicy | None) -> None:
    if policy is not None:
        args += [keyword, _enum_token(DuplicatePolicy, policy)]


def _add_count(args: list[str], count: int | None) -> None:
    if count is not None:
        args += [COUNT, str(_non_negative("count", count))]


def _add_align(args: list[str], align: TimeStampLike | None) -> None:
    if align is not None:
        args += [ALIGN, _timestamp(align, allow_auto=False)]


def _add_aggregation(
    args: list[str],
    aggregation: Aggregation | None,
    bucket_duration: int | None,
) -> None:
    if aggregation is None:
        return
    if bucket_duration is None:
        raise TimeSeriesValidationError("Aggregation requires a bucket duration")
    args += [
        AGGREGATION,
        _enum_token(Aggregation, aggregation),
        str(_non_negative("bucket_duration", bucket_duration)),
    ]


def _add_filter_by_ts(args: list[str], filter_by_ts: Sequence[TimeStampLike] | None) -> None:
    if filter_by_ts:
        args.append(FILTER_BY_TS)
        args += [_timestamp(ts, allow_auto=False) for ts in filter_by_ts]


def _add_filter_by_value(args: list[str], filter_by_value: tuple[float, float] | None) -> None:
    if filter_by_value is None:
        return
    low, high = filter_by_value
    if low > high:
        raise TimeSeriesValidationError(f"FILTER_BY_VALUE min {low} is greater than max {high}")
    args += [FILTER_BY_VALUE, _number(low), _number(high)]


def _add_label_selection(
    args: list[str],
    with_labels: bool,
    selected_labels: Sequence[str] | None,
) -> None:
    if with_labels and selected_labels:
        raise TimeSeriesValidationError("with_labels and selected_labels cannot be specified together")
    if with_labels:
        args.append(WITHLABELS)
    elif selected_labels:
        args.append(SELECTED_LABELS)
        args += list(selected_labels)


def _require_filters(filters: Sequence[str]) -> None:
    if not filters:
        raise TimeSeriesValidationError("Multi-series query needs at least one filter")


def _add_filters(args: list[str], filters: Sequence[str], *, keyword: bool = True) -> None:
    if keyword:
        args.append(FILTER)
    args += list(filters)


def _add_group_by(args: list[str], group_by: str | None, reduce: Reduce | None) -> None:
    if group_by is None and reduce is None:
        return
    if group_by is None or reduce is None:
        raise TimeSeriesValidationError("GROUPBY and REDUCE must be given together")
    args += [GROUPBY, group_by, REDUCE, _enum_token(Reduce, reduce)]


# ─── Command builders ────────────────────────────────────────────


def build_create_args(
    key: str,
    retention: int | None = None,
    labels: LabelsLike | None = None,
    uncompressed: bool = False,
    chunk_size: int | None = None,
    duplicate_policy: DuplicatePolicy | None = None,
) -> list[str]:
    """TS.CREATE key [RETENTION] [CHUNK_SIZE] [LABELS] [UNCOMPRESSED] [DUPLICATE_POLICY]."""
    args = [key]
    _add_retention(args, retention)
    _add_chunk_size(args, chunk_size)
    _add_labels(args, labels)
    _add_uncompressed(args, uncompressed)
    _add_duplicate_policy(args, DUPLICATE_POLICY, duplicate_policy)
    return args


def build_alter_args(
    key: str,
    retention: int | None = None,
    labels: LabelsLike | None = None,
) -> list[str]:
    args = [key]
    _add_retention(args, retention)
    _add_labels(args, labels)
    return args


def build_add_args(
    key: str,
    timestamp: TimeStampLike,
    value: float,
    retention: int | None = None,
    labels: LabelsLike | None = None,
    uncompressed: bool = False,
    chunk_size: int | None = None,
    on_duplicate: DuplicatePolicy | None = None,
) -> list[str]:
    """TS.ADD key timestamp value [...]. timestamp에 "*" 허용."""
    args = [key, _timestamp(timestamp), _number(float(value))]
    _add_retention(args, retention)
    _add_chunk_size(args, chunk_size)
    _add_labels(args, labels)
    _add_uncompressed(args, uncompressed)
    _add_duplicate_policy(args, ON_DUPLICATE, on_duplicate)
    return args


def build_madd_args(samples: Iterable[tuple[str, TimeStampLike, float]]) -> list[str]:
    args: list[str] = []
    for key, timestamp, value in samples:
        args += [key, _timestamp(timestamp), _number(float(value))]
    if not args:
        raise TimeSeriesValidationError("TS.MADD needs at least one sample")
    return args


def build_incrby_args(
    key: str,
    value: float,
    timestamp: TimeStampLike | None = None,
    retention: int | None = None,
    labels: LabelsLike | None = None,
    uncompressed: bool = False,
    chunk_size: int | None = None,
) -> list[str]:
    """TS.INCRBY / TS.DECRBY 공용."""
    args = [key, _number(float(value))]
    if timestamp is not None:
        args += [TIMESTAMP, _timestamp(timestamp)]
    _add_retention(args, retention)
    _add_chunk_size(args, chunk_size)
    _add_labels(args, labels)
    _add_uncompressed(args, uncompressed)
    return args


def build_del_args(key: str, from_time: TimeStampLike, to_time: TimeStampLike) -> list[str]:
    return [key, _timestamp(from_time, allow_auto=False), _timestamp(to_time, allow_auto=False)]


def build_createrule_args(source_key: str, rule: CompactionRule) -> list[str]:
    """TS.CREATERULE source dest AGGREGATION agg bucket."""
    if rule.aggregation is None:
        raise TimeSeriesValidationError("Compaction rule needs an aggregation")
    return [
        source_key,
        rule.dest_key,
        AGGREGATION,
        rule.aggregation.to_protocol(),
        str(rule.bucket_duration),
    ]


def build_deleterule_args(source_key: str, dest_key: str) -> list[str]:
    return [source_key, dest_key]


def build_get_args(key: str) -> list[str]:
    return [key]


def build_mget_args(
    filters: Sequence[str],
    with_labels: bool = False,
    selected_labels: Sequence[str] | None = None,
) -> list[str]:
    _require_filters(filters)
    args: list[str] = []
    _add_label_selection(args, with_labels, selected_labels)
    _add_filters(args, filters)
    return args


def build_range_args(
    key: str,
    from_time: TimeStampLike,
    to_time: TimeStampLike,
    count: int | None = None,
    aggregation: Aggregation | None = None,
    bucket_duration: int | None = None,
    filter_by_ts: Sequence[TimeStampLike] | None = None,
    filter_by_value: tuple[float, float] | None = None,
    align: TimeStampLike | None = None,
) -> list[str]:
    """TS.RANGE / TS.REVRANGE 공용."""
    args = [key, _timestamp(from_time, allow_auto=False), _timestamp(to_time, allow_auto=False)]
    _add_filter_by_ts(args, filter_by_ts)
    _add_filter_by_value(args, filter_by_value)
    _add_count(args, count)
    _add_align(args, align)
    _add_aggregation(args, aggregation, bucket_duration)
    return args


def build_mrange_args(
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
) -> list[str]:
    """TS.MRANGE / TS.MREVRANGE 공용. filters는 최소 1개 필수 (다른 검증보다 먼저)."""
    _require_filters(filters)
    args = [_timestamp(from_time, allow_auto=False), _timestamp(to_time, allow_auto=False)]
    _add_filter_by_ts(args, filter_by_ts)
    _add_filter_by_value(args, filter_by_value)
    _add_count(args, count)
    _add_align(args, align)
    _add_aggregation(args, aggregation, bucket_duration)
    _add_label_selection(args, with_labels, selected_labels)
    _add_filters(args, filters)
    _add_group_by(args, group_by, reduce)
    return args


def build_queryindex_args(filters: Sequence[str]) -> list[str]:
    _require_filters(filters)
    args: list[str] = []
    _add_filters(args, filters, keyword=False)
    return args
