"""열거형 정의 — RedisTimeSeries 프로토콜 토큰과 1:1 대응.

값(value) 자체가 서버에 전송되는 문자열이다. 역방향 변환은 from_protocol().
"""

from enum import StrEnum

from .errors import TimeSeriesParseError


class _ProtocolEnum(StrEnum):
    @classmethod
    def from_protocol(cls, text: str | bytes):
        """서버 응답 문자열 → 열거형. 대소문자 무시, 알 수 없는 값은 TimeSeriesParseError."""
        if isinstance(text, bytes):
            text = text.decode()
        try:
            return cls(text.upper())
        except (ValueError, AttributeError):
            raise TimeSeriesParseError(f"Invalid {cls.__name__} '{text}'") from None

    def to_protocol(self) -> str:
        return self.value


class Aggregation(_ProtocolEnum):
    """다운샘플링 집계 함수"""

    AVG = "AVG"
    SUM = "SUM"
    MIN = "MIN"
    MAX = "MAX"
    RANGE = "RANGE"
    COUNT = "COUNT"
    FIRST = "FIRST"
    LAST = "LAST"
    STD_P = "STD.P"  # 모표준편차
    STD_S = "STD.S"  # 표본표준편차
    VAR_P = "VAR.P"
    VAR_S = "VAR.S"


class DuplicatePolicy(_ProtocolEnum):
    """동일 타임스탬프 샘플 충돌 처리"""

    BLOCK = "BLOCK"  # 에러 반환
    FIRST = "FIRST"  # 기존 값 유지
    LAST = "LAST"  # 새 값으로 덮어쓰기
    MIN = "MIN"
    MAX = "MAX"
    SUM = "SUM"


class Reduce(_ProtocolEnum):
    """MRANGE GROUPBY 리듀서"""

    SUM = "SUM"
    MIN = "MIN"
    MAX = "MAX"


class TimestampSentinel(StrEnum):
    """특수 타임스탬프 토큰"""

    MIN = "-"  # 가장 오래된 샘플
    MAX = "+"  # 가장 최신 샘플
    AUTO = "*"  # 서버 시각 자동 할당
