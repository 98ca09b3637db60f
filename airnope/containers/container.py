# airnope/containers/container.py
from aiogram import Bot
from dependency_injector import containers, providers
from redis.asyncio import Redis

from airnope.config.settings import settings
from airnope.services.embeddings import Embeddings, SentenceTransformerBackend
from airnope.services.lexical import LexicalMatcher
from airnope.services.moderation import ModerationService
from airnope.services.summary import Summarizer


class Container(containers.DeclarativeContainer):
    """
    DI-контейнер приложения.

    Все провайдеры ленивые: модель не загружается, а токен бота не
    требуется, пока соответствующий сервис не запрошен.
    """

    config = providers.Object(settings)

    redis_client = providers.Singleton(
        Redis.from_url,
        url=config.provided.REDIS_URL,
        encoding="utf-8",
        decode_responses=True,
        socket_connect_timeout=5,
        socket_keepalive=True,
        health_check_interval=30,
    )

    bot = providers.Singleton(Bot, token=config.provided.bot_token)

    embedding_backend = providers.Singleton(
        SentenceTransformerBackend,
        model_name=config.provided.embeddings.model_name,
        device=config.provided.embeddings.device,
    )

    embeddings = providers.Singleton(
        Embeddings,
        backend=embedding_backend,
        dimensions=config.provided.embeddings.dimensions,
        cache_size=config.provided.embeddings.cache_size,
    )

    summarizer = providers.Singleton(
        Summarizer,
        model_name=config.provided.summarizer.model_name,
        cache_size=config.provided.summarizer.cache_size,
        cache_ttl_seconds=config.provided.summarizer.cache_ttl_seconds,
        max_length=config.provided.summarizer.max_length,
        min_length=config.provided.summarizer.min_length,
    )

    lexical_matcher = providers.Singleton(LexicalMatcher)

    moderation_service = providers.Singleton(
        ModerationService,
        bot=bot,
        reaction=config.provided.telegram.reaction,
    )
