from types import SimpleNamespace
from unittest.mock import AsyncMock

import pytest
from aiogram.enums import ChatMemberStatus
from aiogram.exceptions import TelegramBadRequest, TelegramForbiddenError
from aiogram.methods import BanChatMember, DeleteMessage, GetChatMember, SetMessageReaction

from airnope.services.guess import Guess
from airnope.services.moderation import (
    ModerationAction,
    ModerationService,
    is_noop_error,
)

CHAT_ID = -100123
MESSAGE_ID = 7
SENDER_ID = 42


def make_bot(status=ChatMemberStatus.MEMBER):
    bot = SimpleNamespace(
        get_chat_member=AsyncMock(return_value=SimpleNamespace(status=status)),
        set_message_reaction=AsyncMock(return_value=True),
        delete_message=AsyncMock(return_value=True),
        ban_chat_member=AsyncMock(return_value=True),
    )
    return bot


def bad_request(method, message):
    return TelegramBadRequest(method=method, message=message)


@pytest.mark.asyncio
@pytest.mark.parametrize("status", [ChatMemberStatus.ADMINISTRATOR, ChatMemberStatus.CREATOR])
async def test_privileged_sender_only_gets_reaction(status):
    bot = make_bot(status)
    service = ModerationService(bot, reaction="👀")

    result = await service.resolve(Guess(is_spam=True, score=0.9), CHAT_ID, MESSAGE_ID, SENDER_ID)

    assert result.action == ModerationAction.ACKNOWLEDGE
    assert result.ok
    bot.set_message_reaction.assert_awaited_once()
    reaction = bot.set_message_reaction.call_args.kwargs["reaction"]
    assert reaction[0].emoji == "👀"
    bot.delete_message.assert_not_called()
    bot.ban_chat_member.assert_not_called()


@pytest.mark.asyncio
async def test_regular_sender_is_removed_and_banned():
    bot = make_bot()
    service = ModerationService(bot)

    result = await service.resolve(Guess(is_spam=True, score=0.9), CHAT_ID, MESSAGE_ID, SENDER_ID)

    assert result.action == ModerationAction.REMOVE
    assert result.ok
    bot.delete_message.assert_awaited_once_with(chat_id=CHAT_ID, message_id=MESSAGE_ID)
    bot.ban_chat_member.assert_awaited_once_with(chat_id=CHAT_ID, user_id=SENDER_ID)
    bot.set_message_reaction.assert_not_called()


@pytest.mark.asyncio
async def test_already_deleted_message_counts_as_success():
    bot = make_bot()
    bot.delete_message.side_effect = bad_request(
        DeleteMessage(chat_id=CHAT_ID, message_id=MESSAGE_ID),
        "Bad Request: message to delete not found",
    )
    service = ModerationService(bot)

    result = await service.moderate(CHAT_ID, MESSAGE_ID, SENDER_ID, is_sender_privileged=False)

    assert result.ok
    assert result.errors == []
    bot.delete_message.assert_awaited_once()
    bot.ban_chat_member.assert_awaited_once()


@pytest.mark.asyncio
async def test_ban_is_attempted_even_if_delete_fails():
    bot = make_bot()
    bot.delete_message.side_effect = TelegramForbiddenError(
        method=DeleteMessage(chat_id=CHAT_ID, message_id=MESSAGE_ID),
        message="Forbidden: bot was kicked from the supergroup chat",
    )
    service = ModerationService(bot)

    result = await service.moderate(CHAT_ID, MESSAGE_ID, SENDER_ID, is_sender_privileged=False)

    assert not result.ok
    assert len(result.errors) == 1
    assert result.errors[0].action == "deleteMessage"
    bot.ban_chat_member.assert_awaited_once()


@pytest.mark.asyncio
async def test_private_chat_ban_is_a_noop():
    bot = make_bot()
    bot.ban_chat_member.side_effect = bad_request(
        BanChatMember(chat_id=SENDER_ID, user_id=SENDER_ID),
        "Bad Request: can't ban members in private chats",
    )
    service = ModerationService(bot)

    result = await service.moderate(SENDER_ID, MESSAGE_ID, SENDER_ID, is_sender_privileged=False)

    assert result.ok


@pytest.mark.asyncio
async def test_message_without_sender_is_only_deleted():
    bot = make_bot()
    service = ModerationService(bot)

    result = await service.resolve(Guess(is_spam=True, score=0.9), CHAT_ID, MESSAGE_ID, None)

    assert result.action == ModerationAction.REMOVE
    bot.get_chat_member.assert_not_called()
    bot.delete_message.assert_awaited_once()
    bot.ban_chat_member.assert_not_called()


@pytest.mark.asyncio
async def test_not_spam_is_ignored():
    bot = make_bot()
    service = ModerationService(bot)

    result = await service.resolve(Guess(is_spam=False), CHAT_ID, MESSAGE_ID, SENDER_ID)

    assert result.action == ModerationAction.IGNORE
    assert result.ok
    bot.get_chat_member.assert_not_called()
    bot.delete_message.assert_not_called()


@pytest.mark.asyncio
async def test_failed_privilege_lookup_takes_no_destructive_action():
    bot = make_bot()
    bot.get_chat_member.side_effect = bad_request(
        GetChatMember(chat_id=CHAT_ID, user_id=SENDER_ID),
        "Bad Request: chat not found",
    )
    service = ModerationService(bot)

    result = await service.resolve(Guess(is_spam=True, score=0.9), CHAT_ID, MESSAGE_ID, SENDER_ID)

    assert result.action == ModerationAction.IGNORE
    assert not result.ok
    bot.delete_message.assert_not_called()
    bot.ban_chat_member.assert_not_called()


@pytest.mark.asyncio
async def test_acknowledge_reports_failure():
    bot = make_bot()
    bot.set_message_reaction.side_effect = bad_request(
        SetMessageReaction(chat_id=CHAT_ID, message_id=MESSAGE_ID),
        "Bad Request: REACTION_INVALID",
    )
    service = ModerationService(bot)

    result = await service.acknowledge(CHAT_ID, MESSAGE_ID)

    assert result.action == ModerationAction.ACKNOWLEDGE
    assert not result.ok


@pytest.mark.asyncio
async def test_undeletable_message_is_reported_as_failure():
    bot = make_bot()
    bot.delete_message.side_effect = bad_request(
        DeleteMessage(chat_id=CHAT_ID, message_id=MESSAGE_ID),
        "Bad Request: message can't be deleted",
    )
    service = ModerationService(bot)

    result = await service.moderate(CHAT_ID, MESSAGE_ID, SENDER_ID, is_sender_privileged=False)

    assert not result.ok
    assert len(result.errors) == 1
    assert result.errors[0].action == "deleteMessage"
    bot.ban_chat_member.assert_awaited_once()


def test_is_noop_error():
    method = DeleteMessage(chat_id=CHAT_ID, message_id=MESSAGE_ID)
    assert is_noop_error(bad_request(method, "Bad Request: message to react not found"))
    assert is_noop_error(bad_request(method, "Bad Request: METHOD IS AVAILABLE ONLY FOR SUPERGROUPS"))
    assert not is_noop_error(bad_request(method, "Bad Request: not enough rights"))
    assert not is_noop_error(bad_request(method, "Bad Request: message can't be deleted"))
