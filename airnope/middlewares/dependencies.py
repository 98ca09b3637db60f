# airnope/middlewares/dependencies.py
from typing import Any, Awaitable, Callable, Dict

from aiogram import BaseMiddleware
from aiogram.types import TelegramObject
from loguru import logger

from airnope.utils.dependencies import Deps


class DependenciesMiddleware(BaseMiddleware):
    """
    Middleware для внедрения зависимостей в обработчики (аргумент deps).
    """

    def __init__(self, deps: Deps):
        super().__init__()
        self.deps = deps
        logger.info("✅ DependenciesMiddleware initialized")

    async def __call__(
        self,
        handler: Callable[[TelegramObject, Dict[str, Any]], Awaitable[Any]],
        event: TelegramObject,
        data: Dict[str, Any],
    ) -> Any:
        data["deps"] = self.deps
        data["settings"] = self.deps.settings
        return await handler(event, data)
