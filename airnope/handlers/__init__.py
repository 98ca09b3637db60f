# airnope/handlers/__init__.py
from airnope.handlers.messages import router as messages_router

__all__ = ["messages_router"]
