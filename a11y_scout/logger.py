# === FILE: a11y_scout/logger.py ===
"""Логирование A11yScout.

Все модули пишут в логгер ``"A11yScout"``::

    from a11y_scout.logger import logger
    logger.info("Crawl started")

Консольный вывод идёт в stderr: stdout занят JSON-итогом команды ``scan``.
Шумные логгеры зависимостей (SQLAlchemy, aiosqlite, asyncio) подняты до
WARNING, пока не включён уровень DEBUG.
"""
from __future__ import annotations

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Final, Iterator, Union

DEFAULT_FORMAT: Final[str] = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
LOGGER_NAME: Final[str] = "A11yScout"

LOG_FILE_MAX_BYTES: Final[int] = 5 * 1024 * 1024
LOG_FILE_BACKUPS: Final[int] = 3

_DEPENDENCY_LOGGERS = ("sqlalchemy.engine", "aiosqlite", "asyncio")


def _handlers(log_file: Union[str, Path, None]) -> Iterator[logging.Handler]:
    yield logging.StreamHandler(sys.stderr)
    if log_file is not None:
        path = Path(log_file)
        path.parent.mkdir(parents=True, exist_ok=True)
        yield RotatingFileHandler(
            path, maxBytes=LOG_FILE_MAX_BYTES, backupCount=LOG_FILE_BACKUPS, encoding="utf-8"
        )


def init_logging(
    level: Union[int, str] = "INFO",
    log_file: Union[str, Path, None] = None,
    log_format: str = DEFAULT_FORMAT,
) -> logging.Logger:
    """
    Перенастраивает логгер проекта: старые обработчики закрываются,
    новые получают общий формат. Повторный вызов не дублирует вывод.
    """
    numeric = logging.getLevelName(level.upper()) if isinstance(level, str) else level
    if not isinstance(numeric, int):
        raise ValueError(f"Unknown log level: {level}")

    lg = logging.getLogger(LOGGER_NAME)
    for old in lg.handlers[:]:
        lg.removeHandler(old)
        old.close()

    formatter = logging.Formatter(log_format)
    for handler in _handlers(log_file):
        handler.setFormatter(formatter)
        lg.addHandler(handler)
    lg.setLevel(numeric)
    lg.propagate = False

    for name in _DEPENDENCY_LOGGERS:
        logging.getLogger(name).setLevel(logging.DEBUG if numeric <= logging.DEBUG else logging.WARNING)
    return lg


logger: logging.Logger = init_logging()

__all__ = ["logger", "init_logging", "LOGGER_NAME", "DEFAULT_FORMAT"]
