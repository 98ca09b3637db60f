# airnope/services/moderation.py
"""
Действия модерации по итогам классификации.

Администраторам и создателю чата бот только ставит реакцию, остальным
удаляет сообщение и банит отправителя. Ошибки Telegram логируются и никогда
не пробрасываются в обработчик.
"""
import asyncio
from dataclasses import dataclass, field
from enum import Enum
from typing import Awaitable, List, Optional

from aiogram import Bot
from aiogram.enums import ChatMemberStatus
from aiogram.exceptions import TelegramAPIError
from aiogram.types import ReactionTypeEmoji
from loguru import logger

from airnope.exceptions import ModerationActionError
from airnope.services.guess import Guess

PRIVILEGED_STATUSES = frozenset({ChatMemberStatus.ADMINISTRATOR, ChatMemberStatus.CREATOR})

# Ответы Telegram, означающие, что делать уже нечего (повторная обработка,
# приватный чат и т.п.)
NOOP_ERRORS = (
    "message to delete not found",
    "message to react not found",
    "can't ban members in private chats",
    "method is available only for supergroups",
)


class ModerationAction(str, Enum):
    IGNORE = "ignore"
    ACKNOWLEDGE = "acknowledge"
    REMOVE = "remove"


@dataclass
class ModerationResult:
    action: ModerationAction
    ok: bool = True
    errors: List[ModerationActionError] = field(default_factory=list)


def is_noop_error(error: Exception) -> bool:
    text = str(getattr(error, "message", error)).lower()
    return any(marker in text for marker in NOOP_ERRORS)


class ModerationService:
    def __init__(self, bot: Bot, reaction: str = "👀"):
        self.bot = bot
        self.reaction = reaction
        logger.info("Сервис ModerationService инициализирован.")

    async def is_privileged(self, chat_id: int, user_id: int) -> bool:
        """
        Является ли пользователь администратором или создателем чата.

        Raises:
            ModerationActionError: Не удалось получить статус участника
        """
        try:
            member = await self.bot.get_chat_member(chat_id=chat_id, user_id=user_id)
        except TelegramAPIError as e:
            raise ModerationActionError("getChatMember", chat_id, str(e)) from e
        return member.status in PRIVILEGED_STATUSES

    async def _call(self, action: str, chat_id: int, request: Awaitable) -> None:
        try:
            await request
        except TelegramAPIError as e:
            if is_noop_error(e):
                logger.debug(f"{action} in chat {chat_id} is a no-op: {e}")
                return
            raise ModerationActionError(action, chat_id, str(e)) from e

    async def acknowledge(self, chat_id: int, message_id: int) -> ModerationResult:
        """Ставит реакцию на сообщение (без удаления)."""
        result = ModerationResult(action=ModerationAction.ACKNOWLEDGE)
        try:
            await self._call(
                "setMessageReaction",
                chat_id,
                self.bot.set_message_reaction(
                    chat_id=chat_id,
                    message_id=message_id,
                    reaction=[ReactionTypeEmoji(emoji=self.reaction)],
                ),
            )
        except ModerationActionError as e:
            logger.error(f"❌ {e}")
            result.ok = False
            result.errors.append(e)
        return result

    async def moderate(
        self,
        chat_id: int,
        message_id: int,
        sender_id: Optional[int],
        is_sender_privileged: bool,
    ) -> ModerationResult:
        """
        Реакция для привилегированных отправителей, иначе удаление сообщения
        и бан отправителя (параллельно, независимо друг от друга).
        """
        if is_sender_privileged:
            return await self.acknowledge(chat_id, message_id)

        requests = [
            self._call(
                "deleteMessage",
                chat_id,
                self.bot.delete_message(chat_id=chat_id, message_id=message_id),
            )
        ]
        if sender_id is not None:
            requests.append(
                self._call(
                    "banChatMember",
                    chat_id,
                    self.bot.ban_chat_member(chat_id=chat_id, user_id=sender_id),
                )
            )

        result = ModerationResult(action=ModerationAction.REMOVE)
        outcomes = await asyncio.gather(*requests, return_exceptions=True)
        for outcome in outcomes:
            if outcome is None:
                continue
            error = outcome
            if not isinstance(error, ModerationActionError):
                error = ModerationActionError("moderation", chat_id, repr(outcome))
            logger.error(f"❌ {error}")
            result.ok = False
            result.errors.append(error)

        if result.ok:
            banned = f", sender {sender_id} banned" if sender_id is not None else ""
            logger.info(f"🧹 Message {message_id} removed from chat {chat_id}{banned}")
        return result

    async def resolve(
        self,
        guess: Guess,
        chat_id: int,
        message_id: int,
        sender_id: Optional[int],
    ) -> ModerationResult:
        """Переводит результат классификации в действие модерации."""
        if not guess.is_spam:
            return ModerationResult(action=ModerationAction.IGNORE)

        privileged = False
        if sender_id is not None:
            try:
                privileged = await self.is_privileged(chat_id, sender_id)
            except ModerationActionError as e:
                logger.error(f"❌ {e}. Message {message_id} left untouched")
                return ModerationResult(action=ModerationAction.IGNORE, ok=False, errors=[e])

        return await self.moderate(chat_id, message_id, sender_id, privileged)
