"""
Loguru sinks for the checkout service

Everything goes through one bound logger so every line carries the service
context. Standard-library loggers (granian access log, sqlalchemy, httpx) are
routed into loguru by InterceptHandler.
"""

from contextvars import ContextVar
from datetime import datetime, timezone
from enum import StrEnum
import logging
import os
import re
import sys
from typing import TYPE_CHECKING

from loguru import logger as loguru_logger


if TYPE_CHECKING:
    from loguru import Logger as LoguruLogger

from src.platform.config.core_setting import settings
from src.platform.constant.path import LOG_DIR
from src.platform.logging.service_context import get_service_context


SENSITIVE_KEYWORDS = frozenset(
    {
        'password',
        'card_number',
        'client_secret',
        'token',
        'signature',
        'authorization',
    }
)

# stdlib loggers whose DEBUG output is connection noise
QUIET_LOGGER_PREFIXES = ('asyncio', 'aiosqlite', 'httpcore', 'hpack')

chain_start_time_var: ContextVar[float] = ContextVar('chain_start_time_var', default=0)
call_depth_var: ContextVar[int] = ContextVar('call_depth_var', default=0)

# '... "POST /api/order HTTP/1.1" 409 ...' or '... "GET /health HTTP/1.1" - 200 - 3ms'
_ACCESS_STATUS = re.compile(r'"[A-Z]+ \S+ HTTP/[\d.]+"\s+(?:-\s+)?(\d{3})\b')


class ExtraField(StrEnum):
    SERVICE_CONTEXT = 'service_context'
    CHAIN_START_TIME = 'chain_start_time'
    CALL_TARGET = 'call_target'


def level_for_access_line(message: str) -> str | None:
    match = _ACCESS_STATUS.search(message)
    if match is None:
        return None
    status_code = int(match.group(1))
    if status_code >= 500:
        return 'CRITICAL'
    if status_code >= 400:
        # 4xx: sold out, invalid cart, rejected auth
        return 'WARNING'
    return 'SUCCESS' if status_code >= 200 else 'INFO'


def _bind_defaults() -> 'LoguruLogger':
    return loguru_logger.bind(
        **{
            ExtraField.SERVICE_CONTEXT: get_service_context(),
            ExtraField.CHAIN_START_TIME: '',
            ExtraField.CALL_TARGET: '',
        }
    )


class InterceptHandler(logging.Handler):
    def __init__(self, bound_logger: 'LoguruLogger') -> None:
        super().__init__()
        self._bound_logger = bound_logger

    def emit(self, record: logging.LogRecord) -> None:
        if record.levelno <= logging.DEBUG and record.name.startswith(QUIET_LOGGER_PREFIXES):
            return

        message = record.getMessage()
        level: str | int | None = level_for_access_line(message)
        if level is None:
            try:
                level = loguru_logger.level(record.levelname).name
            except ValueError:
                level = record.levelno

        # walk out of the logging module so {file}:{line} points at the caller
        frame, depth = logging.currentframe(), 2
        while frame and frame.f_code.co_filename == logging.__file__:
            frame = frame.f_back  # type: ignore
            depth += 1

        self._bound_logger.opt(depth=depth, exception=record.exc_info).log(level, message)


io_log_format = ' | '.join(
    (
        f'<c>{{extra[{ExtraField.SERVICE_CONTEXT}]}}</>',
        '<lvl>{level:<8}</>',
        f'<c>{{file}}::{{function}}:{{line}}</>=><y>{{extra[{ExtraField.CALL_TARGET}]}}</>',
        '{message}',
        '<lk>{elapsed}</>',
        f'<lk>{{extra[{ExtraField.CHAIN_START_TIME}]:<18}}</>',
    )
)


def resolve_log_level() -> str:
    if settings.LOG_LEVEL:
        return settings.LOG_LEVEL.upper()
    return 'DEBUG' if settings.DEBUG else 'INFO'


def _log_file_path() -> str:
    log_dir = os.environ.get('TEST_LOG_DIR') or str(LOG_DIR)
    prefix = 'test_' if os.environ.get('TEST_LOG_DIR') else 'checkout_'
    return f'{log_dir}/{prefix}{datetime.now(timezone.utc):%Y-%m-%d_%H}.log'


def configure_sinks() -> 'LoguruLogger':
    loguru_logger.remove()
    bound = _bind_defaults()
    level = resolve_log_level()

    bound.add(sys.stdout, format=io_log_format, level=level, enqueue=True)
    if settings.LOG_TO_FILE or os.environ.get('TEST_LOG_DIR'):
        bound.add(
            _log_file_path(),
            format=io_log_format,
            level=level,
            rotation='1 hour',
            retention=settings.LOG_FILE_RETENTION,
            compression='gz',
            enqueue=True,
        )

    logging.basicConfig(handlers=[InterceptHandler(bound)], level=0, force=True)
    return bound


custom_logger = configure_sinks()
