# airnope/startup/polling.py
import asyncio

from aiogram import Bot, Dispatcher
from loguru import logger

from airnope.containers import Container
from airnope.startup.lifecycle import on_shutdown, on_startup
from airnope.startup.signals import shutdown_event


async def start_polling(bot: Bot, dp: Dispatcher, container: Container) -> None:
    logger.info("🔄 Starting polling mode...")
    stop = shutdown_event()
    settings = container.config()

    try:
        await on_startup(bot)
        await bot.delete_webhook(drop_pending_updates=False)
        logger.info("✅ Webhook deleted, polling mode enabled")

        polling_task = asyncio.create_task(
            dp.start_polling(
                bot,
                allowed_updates=settings.telegram.allowed_updates,
                handle_signals=False,
            )
        )
        stop_task = asyncio.create_task(stop.wait())
        done, _ = await asyncio.wait(
            {polling_task, stop_task}, return_when=asyncio.FIRST_COMPLETED
        )

        if stop_task in done:
            logger.info("🛑 Shutdown signal received, stopping polling...")
            await dp.stop_polling()
        else:
            stop_task.cancel()

        await polling_task
    finally:
        await on_shutdown(bot, container)
