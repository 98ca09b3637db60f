# airnope/startup/webhook.py
"""
Режим webhook: aiohttp-сервер принимает апдейты от Telegram.

POST /        апдейты (заголовок X-Telegram-Bot-Api-Secret-Token обязателен)
GET  /health  проверка живости
"""
import backoff
from aiogram import Bot, Dispatcher
from aiogram.exceptions import TelegramNetworkError, TelegramRetryAfter
from aiogram.webhook.aiohttp_server import SimpleRequestHandler, setup_application
from aiohttp import web
from loguru import logger

from airnope.config.settings import Settings
from airnope.containers import Container
from airnope.startup.lifecycle import on_shutdown, on_startup
from airnope.startup.signals import shutdown_event


async def health(request: web.Request) -> web.Response:
    return web.Response(text="OK")


def create_webhook_app(bot: Bot, dp: Dispatcher, secret_token: str) -> web.Application:
    app = web.Application()
    app.router.add_get("/health", health)
    SimpleRequestHandler(dispatcher=dp, bot=bot, secret_token=secret_token).register(
        app, path="/"
    )
    setup_application(app, dp, bot=bot)
    return app


@backoff.on_exception(
    backoff.expo,
    (TelegramNetworkError, TelegramRetryAfter),
    max_tries=5,
    on_backoff=lambda details: logger.warning(
        f"🔄 Retrying setWebhook (attempt {details['tries']})"
    ),
)
async def register_webhook(bot: Bot, settings: Settings) -> None:
    await bot.set_webhook(
        url=settings.webhook_url,
        secret_token=settings.webhook_secret,
        max_connections=settings.telegram.max_connections,
        allowed_updates=settings.telegram.allowed_updates,
    )
    logger.info(f"✅ Webhook registered at {settings.webhook_url}")


async def start_webhook(bot: Bot, dp: Dispatcher, container: Container) -> None:
    logger.info("🌐 Starting webhook mode...")
    settings = container.config()
    stop = shutdown_event()

    runner = web.AppRunner(create_webhook_app(bot, dp, settings.webhook_secret))
    try:
        await on_startup(bot)
        await register_webhook(bot, settings)

        await runner.setup()
        site = web.TCPSite(runner, settings.telegram.host, settings.PORT)
        await site.start()
        logger.info(f"🏥 Webhook server started on {settings.telegram.host}:{settings.PORT}")

        await stop.wait()
        logger.info("🛑 Shutdown signal received, stopping webhook server...")
    finally:
        await runner.cleanup()
        await on_shutdown(bot, container)
