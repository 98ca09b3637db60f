# airnope/startup/__init__.py
from airnope.startup.lifecycle import on_shutdown, on_startup
from airnope.startup.polling import start_polling
from airnope.startup.setup import create_detector, setup_bot
from airnope.startup.webhook import start_webhook

__all__ = [
    "create_detector",
    "setup_bot",
    "on_startup",
    "on_shutdown",
    "start_polling",
    "start_webhook",
]
