# =============================================================================
# Файл: airnope/utils/logging_setup.py
# Описание:
#   • Настройка логирования через loguru
#   • JSON-формат для structured logging
#   • Перехват стандартного logging (aiogram, aiohttp, transformers)
# =============================================================================

import logging
import sys
from typing import Iterable, Literal

from loguru import logger

NOISY_LOGGERS = (
    "aiogram",
    "aiohttp",
    "asyncio",
    "httpx",
    "httpcore",
    "urllib3",
    "filelock",
    "sentence_transformers",
    "transformers",
)


class InterceptHandler(logging.Handler):
    """
    Перехватчик стандартных логов Python и перенаправление в loguru.
    """

    def emit(self, record: logging.LogRecord) -> None:
        try:
            level = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        # Находим правильный caller за пределами модуля logging
        frame, depth = logging.currentframe(), 2
        while frame and frame.f_code.co_filename == logging.__file__:
            frame = frame.f_back
            depth += 1

        logger.opt(depth=depth, exception=record.exc_info).log(
            level, record.getMessage()
        )


def setup_logging(
    level: str = "INFO",
    format: Literal["text", "json"] = "text",
    debug_loggers: Iterable[str] = (),
    service_name: str = "airnope",
) -> None:
    """
    Настраивает систему логирования для всего приложения.

    Args:
        level: Уровень логирования ("DEBUG", "INFO", "WARNING", "ERROR")
        format: Формат вывода ("text" или "json")
        debug_loggers: Библиотечные логгеры, которые не нужно приглушать
        service_name: Имя сервиса в поле extra каждой записи
    """
    logger.remove()
    logger.configure(extra={"service": service_name})

    if format == "json":
        logger.add(
            sys.stdout,
            level=level.upper(),
            serialize=True,
            backtrace=False,
            diagnose=False,
        )
    else:
        logger.add(
            sys.stdout,
            format=(
                "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
                "<level>{level: <8}</level> | "
                "{extra[service]} | "
                "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - "
                "<level>{message}</level>"
            ),
            level=level.upper(),
            colorize=True,
            backtrace=True,
            diagnose=False,
        )

    logging.basicConfig(handlers=[InterceptHandler()], level=0, force=True)

    keep = set(debug_loggers)
    for logger_name in NOISY_LOGGERS:
        if logger_name not in keep:
            logging.getLogger(logger_name).setLevel(logging.WARNING)

    logger.info(f"✅ Logging configured: level={level.upper()}, format={format}")
