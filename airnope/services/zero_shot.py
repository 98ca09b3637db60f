# airnope/services/zero_shot.py
"""
Zero-shot классификатор: сравнивает эмбеддинг сообщения с эмбеддингами
заранее заданных меток и усредняет сходство без крайних значений.
"""
import asyncio
from typing import Iterable, Sequence, Tuple

import numpy as np
from loguru import logger

from airnope.config.models import DEFAULT_LABELS
from airnope.services.embeddings import Embeddings
from airnope.services.guess import Guess
from airnope.utils.text import truncated

THRESHOLD = 0.5


def cosine_similarity(a: np.ndarray, b: np.ndarray) -> float:
    """Косинусное сходство, 0.0 если у одного из векторов нулевая норма."""
    norm = float(np.linalg.norm(a)) * float(np.linalg.norm(b))
    if norm == 0.0:
        return 0.0
    return float(np.dot(a, b) / norm)


def average_without_extremes(scores: Sequence[float]) -> float:
    """
    Среднее без минимума и максимума (ровно по одному значению).

    Для меньше чем трех значений возвращает обычное среднее,
    для пустого списка 0.0.
    """
    if not scores:
        return 0.0
    if len(scores) < 3:
        return sum(scores) / len(scores)
    return (sum(scores) - min(scores) - max(scores)) / (len(scores) - 2)


class ZeroShotClassifier:
    """
    Финальная (дорогая) ступень каскада.

    Векторы меток вычисляются один раз в create() и дальше не меняются.
    """

    def __init__(
        self,
        embeddings: Embeddings,
        labels: Tuple[str, ...],
        label_vectors: Tuple[np.ndarray, ...],
        threshold: float = THRESHOLD,
    ):
        if not labels:
            raise ValueError("ZeroShotClassifier needs at least one label")
        if len(labels) != len(label_vectors):
            raise ValueError("Every label needs exactly one vector")
        self.embeddings = embeddings
        self.labels = labels
        self.label_vectors = label_vectors
        self.threshold = threshold

    @classmethod
    async def create(
        cls,
        embeddings: Embeddings,
        labels: Iterable[str] = DEFAULT_LABELS,
        threshold: float = THRESHOLD,
    ) -> "ZeroShotClassifier":
        labels = tuple(labels)
        if not labels:
            raise ValueError("ZeroShotClassifier needs at least one label")
        vectors = await asyncio.gather(*(embeddings.vector_for(label) for label in labels))
        logger.info(f"✅ ZeroShotClassifier ready ({len(labels)} labels, threshold {threshold})")
        return cls(embeddings, labels, tuple(vectors), threshold)

    async def score(self, text: str) -> Tuple[float, Tuple[float, ...]]:
        """
        Returns:
            (итоговая оценка, сходство с каждой меткой в порядке меток)

        Raises:
            EmbeddingError: Не удалось получить эмбеддинг сообщения
        """
        vector = await self.embeddings.vector_for(text)
        scores = tuple(cosine_similarity(vector, label) for label in self.label_vectors)
        return average_without_extremes(scores), scores

    async def is_spam(self, text: str) -> Guess:
        score, scores = await self.score(text)
        result = score > self.threshold
        if result:
            logger.info(
                f"🚩 Message detected as spam by ZeroShotClassifier (score = {score:.3f})"
            )
            logger.debug(truncated(text))
        return Guess(is_spam=result, score=score, scores=scores)
