# airnope/handlers/messages.py
"""
Обработка входящих сообщений: извлечение текста, классификация, модерация.

Один и тот же обработчик подписан на все типы сообщений, которые бот
получает (обычные, отредактированные, посты каналов, business).
"""
from typing import Iterable, List, Optional

from aiogram import Router
from aiogram.types import InlineKeyboardMarkup, Message
from loguru import logger

from airnope.exceptions import EmbeddingError
from airnope.services.guess import Guess
from airnope.services.moderation import ModerationResult
from airnope.utils.dependencies import Deps
from airnope.utils.text import truncated

router = Router(name="messages")


def _button_contents(markup: Optional[InlineKeyboardMarkup]) -> List[str]:
    if not isinstance(markup, InlineKeyboardMarkup):
        return []
    contents = []
    for row in markup.inline_keyboard:
        for button in row:
            if button.text:
                contents.append(button.text)
            if button.url:
                contents.append(button.url)
    return contents


def message_contents(message: Message) -> Optional[str]:
    """
    Весь текст, который видит читатель сообщения.

    Текст, подпись, название чата, из которого переслано сообщение, а также
    текст и ссылки inline-кнопок, через пустую строку.

    Returns:
        Объединенный текст или None, если текста нет вовсе
    """
    parts = [message.text, message.caption]

    origin = message.forward_origin
    if origin is not None:
        origin_chat = getattr(origin, "chat", None) or getattr(origin, "sender_chat", None)
        if origin_chat is not None:
            parts.append(origin_chat.title)

    forward_from_chat = getattr(message, "forward_from_chat", None)
    if forward_from_chat is not None:
        parts.append(forward_from_chat.title)

    parts.extend(_button_contents(message.reply_markup))

    merged = [part for part in parts if part]
    if not merged:
        return None
    return "\n\n".join(merged)


def forwarded_from_username(message: Message) -> Optional[str]:
    """Username автора пересланного сообщения (если он известен)."""
    origin = message.forward_origin
    sender = getattr(origin, "sender_user", None) if origin is not None else None
    if sender is None:
        sender = getattr(message, "forward_from", None)
    return sender.username if sender is not None else None


def is_tagging(message: Message, handle: str) -> bool:
    """Сообщение состоит только из упоминания бота (например, "@AirNope_bot")."""
    if not message.text or not handle:
        return False
    return message.text.strip().lower() == handle.strip().lower()


def is_forwarded_spam(message: Message, usernames: Iterable[str]) -> bool:
    username = forwarded_from_username(message)
    if not username:
        return False
    return username.lower() in {name.lower() for name in usernames}


async def check_message(message: Message, deps: Deps) -> Optional[ModerationResult]:
    """
    Полный цикл обработки одного сообщения.

    Returns:
        Результат модерации или None, если проверять было нечего
        (или классификация не удалась)
    """
    moderation = deps.moderation_service

    if is_tagging(message, deps.settings.AIRNOPE_HANDLE):
        await moderation.acknowledge(message.chat.id, message.message_id)
        if message.reply_to_message is None:
            return None
        message = message.reply_to_message

    if is_forwarded_spam(message, deps.settings.telegram.spam_forward_usernames):
        logger.info(
            f"🚩 Message {message.message_id} forwarded from "
            f"@{forwarded_from_username(message)} marked as spam"
        )
        guess = Guess(is_spam=True)
    else:
        text = message_contents(message)
        if text is None:
            return None
        try:
            guess = await deps.detector.classify(text)
        except EmbeddingError as e:
            logger.error(f"❌ Error processing message {message.message_id}: {e}")
            logger.debug(truncated(text))
            return None

    if not guess.is_spam:
        return await moderation.resolve(guess, message.chat.id, message.message_id, None)

    # Анонимный администратор пишет от имени самой группы
    if message.sender_chat is not None and message.sender_chat.id == message.chat.id:
        return await moderation.acknowledge(message.chat.id, message.message_id)

    sender_id = message.from_user.id if message.from_user is not None else None
    return await moderation.resolve(guess, message.chat.id, message.message_id, sender_id)


@router.message()
@router.edited_message()
@router.channel_post()
@router.edited_channel_post()
@router.business_message()
@router.edited_business_message()
async def handle_message(message: Message, deps: Deps) -> None:
    await check_message(message, deps)
