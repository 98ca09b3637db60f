# airnope/exceptions.py
"""
Иерархия исключений AirNope.
"""


class AirNopeError(Exception):
    """Базовое исключение проекта."""


class PatternCompilationError(AirNopeError):
    """Не удалось скомпилировать регулярные выражения лексического фильтра."""


class EmbeddingError(AirNopeError):
    """Модель эмбеддингов недоступна или вернула некорректный вектор."""


class ModerationActionError(AirNopeError):
    """
    Ошибка вызова Telegram API при модерации (удаление, бан, реакция).

    Логируется и не пробрасывается дальше обработчика сообщений.
    """

    def __init__(self, action: str, chat_id: int, detail: str):
        self.action = action
        self.chat_id = chat_id
        self.detail = detail
        super().__init__(f"{action} failed in chat {chat_id}: {detail}")


class SummarizationError(AirNopeError):
    """Модель суммаризации недоступна или вернула пустой результат."""
