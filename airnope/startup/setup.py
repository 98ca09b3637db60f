# airnope/startup/setup.py
from aiogram import Bot, Dispatcher
from loguru import logger

from airnope.containers import Container
from airnope.services.detector import SpamDetector
from airnope.startup.handlers import register_handlers
from airnope.startup.middlewares import register_middlewares
from airnope.utils.dependencies import Deps


async def create_detector(container: Container) -> SpamDetector:
    """Загружает модель и вычисляет эмбеддинги меток."""
    logger.info("🔧 Initializing spam detector...")

    embeddings = container.embeddings()
    try:
        await embeddings.load()
        detector = await SpamDetector.create(
            embeddings,
            container.config(),
            lexical=container.lexical_matcher(),
        )
    except Exception as e:
        logger.error(f"❌ Failed to initialize spam detector: {e}")
        raise

    logger.info("✅ Spam detector ready")
    return detector


async def setup_bot(container: Container) -> tuple[Bot, Dispatcher]:
    logger.info("🤖 Setting up bot and dispatcher...")

    detector = await create_detector(container)
    try:
        bot = container.bot()
        dispatcher = Dispatcher()
        deps = Deps(
            settings=container.config(),
            detector=detector,
            moderation_service=container.moderation_service(),
        )
        register_handlers(dispatcher)
        register_middlewares(dispatcher, deps)
    except Exception as e:
        logger.error(f"❌ Failed to setup bot: {e}")
        raise

    logger.info("✅ Bot and dispatcher configured")
    return bot, dispatcher
