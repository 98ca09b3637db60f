# airnope/services/embeddings/service.py
"""
Слой доступа к эмбеддингам.

Единственный владелец модели: все остальные компоненты получают векторы
только через Embeddings.vector_for().
"""
import asyncio
from typing import Any, Dict

import numpy as np
from cachetools import LRUCache
from loguru import logger

from airnope.exceptions import EmbeddingError
from airnope.services.embeddings.backend import EmbeddingBackend
from airnope.utils.text import truncated

EMBEDDINGS_SIZE = 384


class Embeddings:
    """
    Кэширующая обертка над моделью эмбеддингов.

    - Кэш: LRU по точным байтам текста (без нормализации)
    - Модель: не более одного вызова одновременно (asyncio.Lock),
      сам вызов выполняется в отдельном потоке
    - Чтение кэша не блокируется ожиданием модели
    """

    DEFAULT_CACHE_SIZE = 1024

    def __init__(
        self,
        backend: EmbeddingBackend,
        dimensions: int = EMBEDDINGS_SIZE,
        cache_size: int = DEFAULT_CACHE_SIZE,
    ):
        """
        Args:
            backend: Модель эмбеддингов
            dimensions: Ожидаемая длина вектора
            cache_size: Максимальное количество векторов в кэше
        """
        self.backend = backend
        self.dimensions = dimensions
        self._cache: LRUCache = LRUCache(maxsize=cache_size)
        self._lock = asyncio.Lock()
        self._hit_count = 0
        self._miss_count = 0

        logger.debug(
            f"🔧 Embeddings initialized (model: {backend.model_name}, "
            f"dimensions: {dimensions}, cache: {cache_size})"
        )

    async def load(self) -> None:
        """Загружает модель заранее, чтобы первое сообщение не ждало."""
        async with self._lock:
            try:
                await asyncio.to_thread(self.backend.load)
            except Exception as e:
                raise EmbeddingError(f"Could not load embedding model: {e}") from e

    async def vector_for(self, text: str) -> np.ndarray:
        """
        Возвращает эмбеддинг текста (из кэша или от модели).

        Args:
            text: Текст сообщения или метки

        Returns:
            Вектор float32 длины dimensions (только для чтения)

        Raises:
            EmbeddingError: Модель упала или вернула вектор неверной длины
        """
        key = text.encode("utf-8")
        vector = self._cache.get(key)
        if vector is not None:
            self._hit_count += 1
            return vector

        async with self._lock:
            # Пока ждали блокировку, другой вызов мог посчитать тот же текст
            vector = self._cache.get(key)
            if vector is not None:
                self._hit_count += 1
                return vector

            self._miss_count += 1
            vector = await asyncio.to_thread(self._calculate_from_model, text)

        self._cache[key] = vector
        return vector

    def _calculate_from_model(self, text: str) -> np.ndarray:
        try:
            results = self.backend.encode([text])
        except Exception as e:
            raise EmbeddingError(
                f"Error creating embedding for {truncated(text)!r}: {e}"
            ) from e

        if results is None or len(results) == 0:
            raise EmbeddingError("Error creating embedding: model returned no vectors")

        vector = np.asarray(results[0], dtype=np.float32)
        if vector.ndim != 1 or vector.shape[0] != self.dimensions:
            raise EmbeddingError(
                f"Embedding does not have {self.dimensions} numbers, "
                f"has {vector.size} instead"
            )
        vector.setflags(write=False)
        return vector

    def cache_info(self) -> Dict[str, Any]:
        """Статистика кэша для диагностики."""
        total = self._hit_count + self._miss_count
        return {
            "size": len(self._cache),
            "capacity": int(self._cache.maxsize),
            "hits": self._hit_count,
            "misses": self._miss_count,
            "hit_rate": (self._hit_count / total) * 100 if total else 0.0,
        }
