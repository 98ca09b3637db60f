# airnope/config/models/__init__.py
from airnope.config.models.ai import (
    DEFAULT_LABELS,
    ClassifierConfig,
    EmbeddingsConfig,
    SummarizerConfig,
)
from airnope.config.models.core import DemoConfig, LoggingConfig
from airnope.config.models.telegram import TelegramConfig

__all__ = [
    "DEFAULT_LABELS",
    "ClassifierConfig",
    "EmbeddingsConfig",
    "SummarizerConfig",
    "DemoConfig",
    "LoggingConfig",
    "TelegramConfig",
]
