# airnope/config/settings.py
import logging
import secrets
from typing import Optional

from pydantic import Field, SecretStr, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from airnope.config.models import (
    ClassifierConfig,
    DemoConfig,
    EmbeddingsConfig,
    LoggingConfig,
    SummarizerConfig,
    TelegramConfig,
)

SECRET_CHARS = "ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz0123456789_-"


def random_webhook_secret() -> str:
    """Секрет для заголовка X-Telegram-Bot-Api-Secret-Token (128-256 символов)."""
    length = 128 + secrets.randbelow(129)
    return "".join(secrets.choice(SECRET_CHARS) for _ in range(length))


class Settings(BaseSettings):
    TELEGRAM_BOT_TOKEN: Optional[SecretStr] = None
    TELEGRAM_WEBHOOK_URL: Optional[str] = None
    TELEGRAM_WEBHOOK_SECRET_TOKEN: SecretStr = Field(
        default_factory=lambda: SecretStr(random_webhook_secret())
    )
    AIRNOPE_HANDLE: str = "@AirNope_bot"

    REDIS_URL: str = "redis://localhost:6379/0"
    PORT: int = 8000

    log_level: str = "INFO"
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    embeddings: EmbeddingsConfig = Field(default_factory=EmbeddingsConfig)
    summarizer: SummarizerConfig = Field(default_factory=SummarizerConfig)
    classifier: ClassifierConfig = Field(default_factory=ClassifierConfig)
    telegram: TelegramConfig = Field(default_factory=TelegramConfig)
    demo: DemoConfig = Field(default_factory=DemoConfig)

    @field_validator("REDIS_URL", mode="before")
    @classmethod
    def assemble_redis_dsn(cls, v):
        if isinstance(v, str) and not v.startswith(("redis://", "rediss://", "unix://")):
            return f"redis://{v}"
        return v

    @field_validator("AIRNOPE_HANDLE", mode="before")
    @classmethod
    def normalize_handle(cls, v):
        if isinstance(v, str):
            v = v.strip()
            if v and not v.startswith("@"):
                return f"@{v}"
        return v

    @property
    def bot_token(self) -> str:
        if self.TELEGRAM_BOT_TOKEN is None:
            raise RuntimeError("Environment variable TELEGRAM_BOT_TOKEN not found.")
        return self.TELEGRAM_BOT_TOKEN.get_secret_value()

    @property
    def webhook_url(self) -> str:
        if not self.TELEGRAM_WEBHOOK_URL:
            raise RuntimeError("Environment variable TELEGRAM_WEBHOOK_URL not found.")
        return self.TELEGRAM_WEBHOOK_URL

    @property
    def webhook_secret(self) -> str:
        return self.TELEGRAM_WEBHOOK_SECRET_TOKEN.get_secret_value()

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        env_nested_delimiter="__",
    )


try:
    settings = Settings()
except ValidationError as e:
    logging.critical(
        "❌ Configuration validation failed. Check .env and environment variables.\n%s",
        e,
    )
    raise SystemExit("Invalid configuration.")
