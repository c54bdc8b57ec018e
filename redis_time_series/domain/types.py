"""기본 타입 정의 — 모델 전체에서 공유하는 Annotated 타입."""

from typing import Annotated

from pydantic import Field

# 시계열 키 (예: "sensor:temp:1"). Redis는 빈 문자열 키도 허용한다
SeriesKey = Annotated[str, Field(examples=["sensor:temp:1"])]

# 밀리초 단위 기간 (retention, bucket duration 등)
Milliseconds = Annotated[int, Field(ge=0)]

# 바이트 크기 (메모리 사용량, chunk size)
Bytes = Annotated[int, Field(ge=0)]

# 개수 (샘플 수, chunk 수)
Count = Annotated[int, Field(ge=0)]
