# airnope/config/models/telegram.py
from typing import List

from pydantic import BaseModel, ConfigDict, Field


class TelegramConfig(BaseModel):
    model_config = ConfigDict(protected_namespaces=())

    reaction: str = "👀"
    max_connections: int = 100
    host: str = "0.0.0.0"
    allowed_updates: List[str] = Field(
        default_factory=lambda: [
            "message",
            "edited_message",
            "channel_post",
            "edited_channel_post",
            "business_message",
            "edited_business_message",
        ]
    )
    # Пересылки от этих аккаунтов считаются спамом без классификации
    spam_forward_usernames: List[str] = Field(default_factory=lambda: ["safeguard"])
