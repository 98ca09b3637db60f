# airnope/startup/handlers.py
from aiogram import Dispatcher
from loguru import logger

from airnope.handlers import messages_router


def register_handlers(dp: Dispatcher) -> None:
    logger.info("📝 Registering handlers...")
    dp.include_router(messages_router)
    logger.info("✅ messages_router registered")
