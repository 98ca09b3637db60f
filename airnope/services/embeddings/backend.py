# airnope/services/embeddings/backend.py
"""
Бэкенды модели эмбеддингов (текст -> вектор фиксированной длины).

Бэкенд ничего не знает о кэше и конкурентности: этим занимается
airnope.services.embeddings.service.Embeddings.
"""
from abc import ABC, abstractmethod
from typing import Any, List, Sequence

from loguru import logger


class EmbeddingBackend(ABC):
    """
    Базовый класс для моделей эмбеддингов.

    Методы синхронные и блокирующие: вызываются из отдельного потока.
    """

    @abstractmethod
    def load(self) -> None:
        """Загружает модель (может занять несколько секунд)."""
        pass

    @abstractmethod
    def encode(self, texts: List[str]) -> Sequence[Sequence[float]]:
        """
        Вычисляет эмбеддинги для пачки текстов.

        Args:
            texts: Тексты для кодирования

        Returns:
            По одному вектору на каждый текст, в том же порядке
        """
        pass

    @property
    @abstractmethod
    def model_name(self) -> str:
        pass


class SentenceTransformerBackend(EmbeddingBackend):
    """Локальный инференс через sentence-transformers (all-MiniLM-L6-v2)."""

    def __init__(self, model_name: str, device: str = "cpu"):
        self._model_name = model_name
        self.device = device
        self.__model: Any = None

    @property
    def _model(self) -> Any:
        if self.__model is None:
            try:
                from sentence_transformers import SentenceTransformer
            except ImportError as e:
                raise ImportError(
                    "sentence-transformers package required: "
                    "pip install sentence-transformers"
                ) from e
            logger.info(f"⏳ Loading embedding model {self._model_name}...")
            self.__model = SentenceTransformer(self._model_name, device=self.device)
            logger.info(f"✅ Embedding model {self._model_name} loaded")
        return self.__model

    def load(self) -> None:
        self._model

    def encode(self, texts: List[str]) -> Sequence[Sequence[float]]:
        return self._model.encode(
            texts, show_progress_bar=False, convert_to_numpy=True
        )

    @property
    def model_name(self) -> str:
        return self._model_name
