# File: doc_scout/logger.py
"""doc_scout.logger: общий логгер DocScout.

Все модули пишут в дочерние логгеры ``DocScout.<имя>`` (см. :func:`get_logger`),
поэтому одна настройка через :func:`configure` действует на весь пакет.
Вывод идёт в stderr: stdout занят JSON-ответом CLI.
"""
from __future__ import annotations

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Final, List, Union

LOGGER_NAME: Final[str] = "DocScout"
_DEFAULT_FORMAT: Final[str] = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
#: ротация файла логов: 5 МБ, три архива
_MAX_BYTES: Final[int] = 5 * 1024 * 1024
_BACKUPS: Final[int] = 3

_LevelT = Union[int, str]


def _build_handlers(log_file: str | Path | None) -> List[logging.Handler]:
    handlers: List[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if log_file is not None:
        handlers.append(
            RotatingFileHandler(str(log_file), maxBytes=_MAX_BYTES, backupCount=_BACKUPS, encoding="utf-8")
        )
    return handlers


def configure(
    *,
    level: _LevelT = "INFO",
    log_file: str | Path | None = None,
    log_format: str = _DEFAULT_FORMAT,
    replace_handlers: bool = True,
) -> logging.Logger:
    """
    Настраивает корневой логгер пакета.

    level: уровень (``"DEBUG"`` или число);
    log_file: файл с ротацией в дополнение к stderr;
    replace_handlers: False добавляет обработчики к уже существующим.
    """
    root = logging.getLogger(LOGGER_NAME)
    root.setLevel(level)
    if replace_handlers:
        for handler in list(root.handlers):
            root.removeHandler(handler)
            handler.close()

    formatter = logging.Formatter(log_format)
    for handler in _build_handlers(log_file):
        handler.setFormatter(formatter)
        root.addHandler(handler)

    # сообщения не дублируются в корневой логгер приложения
    root.propagate = False
    return root


def init_logging(
    level: _LevelT = "INFO",
    log_file: str | Path | None = None,
    log_format: str = _DEFAULT_FORMAT,
) -> logging.Logger:
    """Вызывается из CLI один раз при старте."""
    return configure(level=level, log_file=log_file, log_format=log_format)


def get_logger(name: str | None = None) -> logging.Logger:
    return logging.getLogger(f"{LOGGER_NAME}.{name}" if name else LOGGER_NAME)


# при импорте логгер не настраивается: это делает приложение
logger: logging.Logger = logging.getLogger(LOGGER_NAME)

__all__ = ["logger", "configure", "init_logging", "get_logger", "LOGGER_NAME"]
