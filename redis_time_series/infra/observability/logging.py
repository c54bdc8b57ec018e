"""Structured logging — structlog 기반 설정.

라이브러리 모듈은 logging.getLogger(__name__)로만 기록한다. 애플리케이션이
setup_logging()을 호출하면 stdlib 레코드가 structlog 포매터를 거쳐 출력된다.

Usage:
    from redis_time_series.infra.observability import setup_logging

    setup_logging(service_name="ingest-worker", json_output=False)
"""

import logging
import sys

import structlog

from redis_time_series.domain.config import get_config


def setup_logging(
    service_name: str = "redis-time-series",
    *,
    log_level: str | None = None,
    json_output: bool | None = None,
) -> None:
    """전역 structlog + stdlib 로깅 설정.

    Args:
        service_name: 로그에 바인딩할 서비스 이름
        log_level: 로그 레벨. None이면 APP_LOG_LEVEL
        json_output: True면 JSON, False면 콘솔 형식. None이면 APP_JSON_LOGS
    """
    config = get_config()
    level_name = (log_level or config.log_level).upper()
    level = getattr(logging, level_name, logging.INFO)
    use_json = config.json_logs if json_output is None else json_output

    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=level)
    logging.getLogger().setLevel(level)

    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
    ]

    if use_json:
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer()

    structlog.configure(
        processors=[
            *shared_processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    formatter = structlog.stdlib.ProcessorFormatter(
        processor=renderer,
        foreign_pre_chain=shared_processors,
    )
    for handler in logging.getLogger().handlers:
        handler.setFormatter(formatter)

    structlog.contextvars.bind_contextvars(service=service_name)
