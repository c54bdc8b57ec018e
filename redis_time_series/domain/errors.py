"""예외 계층.

- TimeSeriesValidationError: 잘못된 파라미터 조합. 명령 전송 전에 발생.
- TimeSeriesParseError: 응답 형태/토큰 불일치. 서버·라이브러리 버전 불일치 신호.

연결 오류, 서버 ResponseError 등은 redis.exceptions 그대로 전파.
"""


class TimeSeriesError(Exception):
    """redis_time_series 공통 베이스."""


class TimeSeriesValidationError(TimeSeriesError, ValueError):
    """파라미터 검증 실패."""


class TimeSeriesParseError(TimeSeriesError):
    """응답 파싱 실패."""

    def __init__(self, message: str, reply: object = None):
        super().__init__(message)
        self.reply = reply
