# airnope/utils/text.py
"""
Текстовые утилиты: нормализация пробелов и превью сообщений для логов.
"""
import re
import unicodedata

MESSAGE_PREVIEW_SIZE = 128

_WHITESPACE_RE = re.compile(r"\s+")


def collapse_whitespace(text: str) -> str:
    """
    Заменяет любые последовательности пробельных символов одним пробелом.

    Переводы строк, табы и неразрывные пробелы тоже считаются пробелами.
    Края строки не обрезаются.
    """
    if not text:
        return ""
    return _WHITESPACE_RE.sub(" ", text)


def truncated(message: str, size: int = MESSAGE_PREVIEW_SIZE) -> str:
    """
    Короткое однострочное превью сообщения для логов.

    Args:
        message: Исходный текст
        size: Максимальная длина превью (включая "...")

    Returns:
        Текст без управляющих символов, обрезанный до size символов
    """
    msg = "".join(c for c in message if unicodedata.category(c) != "Cc")
    msg = msg.strip()
    if len(msg) > size:
        msg = msg[: size - 3] + "..."
    return msg
