"""Reply Parser — redis-py가 디코딩한 응답 → 도메인 값 객체.

입력은 execute_command()의 반환값 그대로다:
  - decode_responses=True: str / int / list / None
  - decode_responses=False: 문자열 대신 bytes
  - protocol=3 (RESP3): TS.INFO, TS.MRANGE, TS.MGET이 dict

형태가 어긋나면 TimeSeriesParseError. 단 parse_boolean()은 예외를 던지지 않는다.
"""

from collections.abc import Mapping
from typing import Any, TypeVar

from pydantic import BaseModel, ValidationError

from redis_time_series.domain.enums import Aggregation, DuplicatePolicy
from redis_time_series.domain.errors import TimeSeriesParseError
from redis_time_series.domain.series import (
    CompactionRule,
    Label,
    Sample,
    SeriesInfo,
    SeriesLatest,
    SeriesRange,
)
from redis_time_series.domain.timestamp import MAX_MILLIS, TimeStamp

M = TypeVar("M", bound=BaseModel)


def _text(reply: Any) -> str:
    if isinstance(reply, bytes):
        return reply.decode()
    if isinstance(reply, str):
        return reply
    raise TimeSeriesParseError(f"Expected string reply, got {type(reply).__name__}", reply)


def _optional_text(reply: Any) -> str | None:
    if reply is None:
        return None
    return _text(reply)


def _array(reply: Any) -> list | tuple:
    if not isinstance(reply, (list, tuple)):
        raise TimeSeriesParseError(f"Expected ARRAY reply, got {type(reply).__name__}", reply)
    return reply


def _pairs(reply: Any) -> list[tuple[Any, Any]]:
    """flat [k1, v1, k2, v2, ...] 또는 RESP3 dict → (key, value) 리스트."""
    if isinstance(reply, Mapping):
        return list(reply.items())
    items = _array(reply)
    if len(items) % 2:
        raise TimeSeriesParseError("Key/value reply has an odd number of elements", reply)
    return list(zip(items[::2], items[1::2]))


def _model(model: type[M], reply: Any, **fields: Any) -> M:
    """모델 검증 실패(pydantic)도 응답 형태 오류로 취급."""
    try:
        return model(**fields)
    except ValidationError as e:
        raise TimeSeriesParseError(f"Reply does not fit {model.__name__}: {e.errors()[0]['msg']}", reply) from e


# ─── Scalars ─────────────────────────────────────────────────────


def parse_boolean(reply: Any) -> bool:
    """"OK"만 True. 그 외(None, 빈 문자열 포함)는 False."""
    if isinstance(reply, bytes):
        reply = reply.decode(errors="replace")
    return reply == "OK"


def parse_integer(reply: Any) -> int:
    if isinstance(reply, bool):
        raise TimeSeriesParseError("Expected integer reply, got bool", reply)
    if isinstance(reply, int):
        return reply
    try:
        return int(_text(reply))
    except ValueError:
        raise TimeSeriesParseError(f"Unparsable integer token {reply!r}", reply) from None


def parse_float(reply: Any) -> float:
    if isinstance(reply, (int, float)) and not isinstance(reply, bool):
        return float(reply)
    try:
        return float(_text(reply))
    except ValueError:
        raise TimeSeriesParseError(f"Unparsable float token {reply!r}", reply) from None


def parse_timestamp(reply: Any) -> TimeStamp:
    value = parse_integer(reply)
    if not 0 <= value <= MAX_MILLIS:
        raise TimeSeriesParseError(f"Timestamp out of range: {value}", reply)
    return TimeStamp.of(value)


def parse_timestamp_array(reply: Any) -> list[TimeStamp]:
    """TS.MADD 응답. 샘플별 에러(ResponseError 인스턴스)는 그대로 raise."""
    result: list[TimeStamp] = []
    for item in _array(reply):
        if isinstance(item, Exception):
            raise item
        result.append(parse_timestamp(item))
    return result


def parse_string_array(reply: Any) -> list[str]:
    return [_text(item) for item in _array(reply)]


def parse_duplicate_policy(reply: Any) -> DuplicatePolicy | None:
    text = _optional_text(reply)
    if text is None:
        return None
    return DuplicatePolicy.from_protocol(text)


# ─── Samples / labels / rules ────────────────────────────────────


def parse_sample(reply: Any) -> Sample | None:
    """[timestamp, value]. 빈 시계열은 빈 배열 → None."""
    items = _array(reply)
    if not items:
        return None
    if len(items) != 2:
        raise TimeSeriesParseError(f"Sample reply must have 2 elements, got {len(items)}", reply)
    return _model(Sample, reply, time=parse_timestamp(items[0]), value=parse_float(items[1]))


def parse_sample_array(reply: Any) -> list[Sample]:
    samples: list[Sample] = []
    for item in _array(reply):
        sample = parse_sample(item)
        if sample is None:
            raise TimeSeriesParseError("Empty sample inside range reply", reply)
        samples.append(sample)
    return samples


def parse_label_array(reply: Any) -> list[Label]:
    """[[k, v], ...] 또는 RESP3 {k: v}. 값이 None인 라벨(SELECTED_LABELS 미존재)은 빈 문자열."""
    if isinstance(reply, Mapping):
        items = list(reply.items())
    else:
        items = [_array(item) for item in _array(reply)]
    labels: list[Label] = []
    for item in items:
        if len(item) != 2:
            raise TimeSeriesParseError("Label entry must be a [key, value] pair", reply)
        labels.append(_model(Label, reply, key=_text(item[0]), value=_optional_text(item[1]) or ""))
    return labels


def parse_rule(reply: Any) -> CompactionRule:
    """[dest_key, bucket_duration, aggregation(, alignment)]. alignment는 무시."""
    items = _array(reply)
    if len(items) < 2:
        raise TimeSeriesParseError("Rule reply needs at least dest key and bucket", reply)
    aggregation_text = _optional_text(items[2]) if len(items) > 2 else None
    return _model(
        CompactionRule,
        reply,
        dest_key=_text(items[0]),
        bucket_duration=parse_integer(items[1]),
        aggregation=Aggregation.from_protocol(aggregation_text) if aggregation_text else None,
    )


def parse_rule_array(reply: Any) -> list[CompactionRule]:
    if isinstance(reply, Mapping):
        # RESP3: {dest_key: [bucket, aggregation, alignment]}
        return [parse_rule([dest, *_array(rest)]) for dest, rest in reply.items()]
    return [parse_rule(item) for item in _array(reply)]


# ─── Multi-series ────────────────────────────────────────────────


def _multi_entries(reply: Any) -> list[tuple[str, Any, Any]]:
    """RESP2 [[key, labels, data], ...] / RESP3 {key: [labels, (meta,) data]} 정규화."""
    if isinstance(reply, Mapping):
        entries = []
        for key, body in reply.items():
            body = _array(body)
            if len(body) < 2:
                raise TimeSeriesParseError("Multi-series entry is too short", reply)
            entries.append((_text(key), body[0], body[-1]))
        return entries
    entries = []
    for item in _array(reply):
        item = _array(item)
        if len(item) != 3:
            raise TimeSeriesParseError("Multi-series entry must be [key, labels, data]", reply)
        entries.append((_text(item[0]), item[1], item[2]))
    return entries


def parse_mrange(reply: Any) -> list[SeriesRange]:
    return [
        _model(SeriesRange, reply, key=key, labels=parse_label_array(labels), samples=parse_sample_array(data))
        for key, labels, data in _multi_entries(reply)
    ]


def parse_mget(reply: Any) -> list[SeriesLatest]:
    return [
        _model(SeriesLatest, reply, key=key, labels=parse_label_array(labels), sample=parse_sample(data))
        for key, labels, data in _multi_entries(reply)
    ]


# ─── TS.INFO ─────────────────────────────────────────────────────


_INFO_FIELDS = {
    "totalSamples": ("total_samples", parse_integer),
    "memoryUsage": ("memory_usage", parse_integer),
    "firstTimestamp": ("first_timestamp", parse_timestamp),
    "lastTimestamp": ("last_timestamp", parse_timestamp),
    "retentionTime": ("retention_time", parse_integer),
    "chunkCount": ("chunk_count", parse_integer),
    "chunkSize": ("chunk_size", parse_integer),
    "chunkType": ("chunk_type", _optional_text),
    "labels": ("labels", parse_label_array),
    "sourceKey": ("source_key", _optional_text),
    "rules": ("rules", parse_rule_array),
    "duplicatePolicy": ("duplicate_policy", parse_duplicate_policy),
}


def parse_info(reply: Any) -> SeriesInfo:
    """TS.INFO flat key/value 응답 → SeriesInfo.

    알 수 없는 키는 무시 (서버 버전 호환). 없는 필드는 SeriesInfo 기본값.
    """
    if not isinstance(reply, (list, tuple, Mapping)):
        raise TimeSeriesParseError("Expect ARRAY reply", reply)

    fields: dict[str, Any] = {}
    for raw_key, value in _pairs(reply):
        key = _text(raw_key)
        if key in _INFO_FIELDS:
            name, parser = _INFO_FIELDS[key]
            fields[name] = parser(value)
    return _model(SeriesInfo, reply, **fields)
