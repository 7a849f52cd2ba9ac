# === FILE: intake_crawler/logger.py ===
"""Логгер ``IntakeCrawler``: консоль плюс необязательный файл с ротацией.

Модули берут готовый экземпляр ``from intake_crawler.logger import logger``;
CLI перенастраивает его через :func:`configure`. Неожиданные ошибки
HTTP-обработчика уходят в :func:`report_exception` вместе с тегами запроса.
"""
from __future__ import annotations

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any, Final, Union

LOGGER_NAME: Final[str] = "IntakeCrawler"
LOG_FORMAT: Final[str] = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"

_MAX_LOG_BYTES = 5 * 1024 * 1024
_LOG_BACKUPS = 3


def configure(
    *,
    level: Union[int, str] = "INFO",
    log_file: str | Path | None = None,
    log_format: str = LOG_FORMAT,
) -> logging.Logger:
    """Сбрасывает обработчики логгера краулера и ставит новые.

    Вывод всегда идёт в stdout; при заданном *log_file* дублируется в файл
    с ротацией по размеру.
    """
    formatter = logging.Formatter(log_format)
    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if log_file is not None:
        handlers.append(
            RotatingFileHandler(
                str(log_file), maxBytes=_MAX_LOG_BYTES, backupCount=_LOG_BACKUPS, encoding="utf-8"
            )
        )

    crawler_logger = logging.getLogger(LOGGER_NAME)
    crawler_logger.setLevel(level)
    for old in list(crawler_logger.handlers):
        crawler_logger.removeHandler(old)
        old.close()
    for handler in handlers:
        handler.setFormatter(formatter)
        crawler_logger.addHandler(handler)
    crawler_logger.propagate = False
    return crawler_logger


def report_exception(exc: BaseException, **tags: Any) -> None:
    """Пишет необработанное исключение с трассировкой и тегами ``key='value'``."""
    tag_str = " ".join(f"{k}={v!r}" for k, v in sorted(tags.items()))
    logging.getLogger(LOGGER_NAME).error(
        "Unhandled %s [%s]: %s", type(exc).__name__, tag_str, exc, exc_info=exc
    )


logger: logging.Logger = configure()

__all__ = ["LOGGER_NAME", "logger", "configure", "report_exception"]
