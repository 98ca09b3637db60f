# airnope/startup/lifecycle.py
from aiogram import Bot
from loguru import logger

from airnope.containers import Container


async def on_startup(bot: Bot) -> None:
    logger.info("🚀 Starting bot...")
    try:
        bot_info = await bot.get_me()
        logger.info(f"✅ Bot started: @{bot_info.username} (ID: {bot_info.id})")
    except Exception as e:
        logger.error(f"❌ Failed to get bot info: {e}")
        raise


async def on_shutdown(bot: Bot, container: Container) -> None:
    logger.info("🛑 Shutting down bot...")

    try:
        await bot.session.close()
        logger.info("✅ Bot session closed")
    except Exception as e:
        logger.error(f"Error closing bot session: {e}")

    container.shutdown_resources()
    logger.info("✅ Bot stopped gracefully")
