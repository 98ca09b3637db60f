# airnope/startup/middlewares.py
from aiogram import Dispatcher
from loguru import logger

from airnope.middlewares.dependencies import DependenciesMiddleware
from airnope.utils.dependencies import Deps


def register_middlewares(dp: Dispatcher, deps: Deps) -> None:
    logger.info("🔌 Registering middlewares...")
    dp.update.middleware(DependenciesMiddleware(deps))
    logger.info("✅ Dependencies middleware registered")
