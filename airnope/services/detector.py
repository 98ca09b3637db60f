# airnope/services/detector.py
"""
Каскад проверок: лексический фильтр, затем zero-shot классификатор.
"""
from enum import Enum
from typing import Optional

from loguru import logger

from airnope.config.settings import Settings
from airnope.services.embeddings import Embeddings
from airnope.services.guess import Guess
from airnope.services.lexical import LexicalMatcher
from airnope.services.zero_shot import ZeroShotClassifier


class Stage(str, Enum):
    LEXICAL_CHECK = "lexical_check"
    SEMANTIC_CHECK = "semantic_check"


class SpamDetector:
    """
    Решает, спам ли сообщение.

    Если лексический фильтр ничего не нашел, модель не вызывается вовсе.
    Иначе решение полностью принимает ZeroShotClassifier.
    """

    def __init__(self, lexical: LexicalMatcher, classifier: ZeroShotClassifier):
        self.lexical = lexical
        self.classifier = classifier

    @classmethod
    async def create(
        cls,
        embeddings: Embeddings,
        settings: Settings,
        lexical: Optional[LexicalMatcher] = None,
    ) -> "SpamDetector":
        classifier = await ZeroShotClassifier.create(
            embeddings,
            labels=settings.classifier.labels,
            threshold=settings.classifier.threshold,
        )
        return cls(lexical or LexicalMatcher(), classifier)

    async def classify(self, text: str) -> Guess:
        """
        Raises:
            EmbeddingError: Сообщение прошло лексический фильтр, но модель
                недоступна. Такой ошибке нельзя давать стать ответом "не спам".
        """
        if not self.lexical.is_spam(text):
            logger.debug(f"{Stage.LEXICAL_CHECK.value}: not spam")
            return Guess(is_spam=False)

        guess = await self.classifier.is_spam(text)
        logger.debug(
            f"{Stage.SEMANTIC_CHECK.value}: spam={guess.is_spam} score={guess.score}"
        )
        return guess
