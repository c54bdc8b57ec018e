"""통합 설정 모델 — Pydantic Settings 기반.

모든 설정값은 환경 변수로 주입. 우선순위:
  1. 환경 변수 (REDIS_*, APP_*)
  2. Pydantic Settings 기본값
"""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings


class RedisConfig(BaseSettings):
    """Redis 접속 설정 (RedisTimeSeries 모듈이 로드된 서버)."""

    host: str = "localhost"
    port: int = 6379
    db: int = 0
    password: str = ""
    socket_timeout: float = 15.0
    socket_connect_timeout: float = 5.0
    decode_responses: bool = True

    model_config = {"env_prefix": "REDIS_"}

    @property
    def url(self) -> str:
        if self.password:
            return f"redis://:{self.password}@{self.host}:{self.port}/{self.db}"
        return f"redis://{self.host}:{self.port}/{self.db}"


class AppConfig(BaseSettings):
    """최상위 설정 — 서브 설정 객체를 조합.

    Usage:
        from redis_time_series.domain.config import get_config
        config = get_config()
        print(config.redis.url)
    """

    env: str = Field(default="production", description="development | test | production")
    log_level: str = "INFO"
    json_logs: bool = True

    redis: RedisConfig = Field(default_factory=RedisConfig)

    model_config = {"env_prefix": "APP_"}


@lru_cache
def get_config() -> AppConfig:
    """싱글턴 설정 인스턴스.

    테스트에서는 get_config.cache_clear()로 초기화.
    """
    return AppConfig()
