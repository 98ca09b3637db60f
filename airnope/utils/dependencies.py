# airnope/utils/dependencies.py
from __future__ import annotations

from dataclasses import dataclass

from airnope.config.settings import Settings
from airnope.services.detector import SpamDetector
from airnope.services.moderation import ModerationService


@dataclass
class Deps:
    """
    Легковесный контейнер зависимостей для хэндлеров.
    """
    settings: Settings
    detector: SpamDetector
    moderation_service: ModerationService
