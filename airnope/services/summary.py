# airnope/services/summary.py
"""
Суммаризация длинных сообщений (facebook/bart-large-cnn).

Используется бенчмарком меток: если оценка сообщения слишком близка к
порогу, классифицируется его краткое содержание.
"""
import asyncio
from typing import Any, Optional

from cachetools import TTLCache
from loguru import logger

from airnope.exceptions import SummarizationError
from airnope.utils.text import truncated


class Summarizer:
    def __init__(
        self,
        model_name: str = "facebook/bart-large-cnn",
        cache_size: int = 2048,
        cache_ttl_seconds: int = 3600,
        max_length: int = 130,
        min_length: int = 20,
    ):
        self.model_name = model_name
        self.max_length = max_length
        self.min_length = min_length
        self._cache: TTLCache = TTLCache(maxsize=cache_size, ttl=cache_ttl_seconds)
        self._lock = asyncio.Lock()
        self.__pipeline: Optional[Any] = None

    @property
    def _pipeline(self) -> Any:
        if self.__pipeline is None:
            from transformers import pipeline

            logger.info(f"⏳ Loading summarization model {self.model_name}...")
            self.__pipeline = pipeline("summarization", model=self.model_name)
            logger.info(f"✅ Summarization model {self.model_name} loaded")
        return self.__pipeline

    def load(self) -> None:
        self._pipeline

    def _run(self, text: str) -> str:
        results = self._pipeline(
            text,
            max_length=self.max_length,
            min_length=self.min_length,
            truncation=True,
        )
        if not results:
            raise SummarizationError("Summarization model returned no results")
        return results[0]["summary_text"]

    async def summarize(self, text: str) -> str:
        """
        Краткое содержание текста (с кэшированием по точным байтам текста).

        Raises:
            SummarizationError: Модель недоступна или упала
        """
        key = text.encode("utf-8")
        cached = self._cache.get(key)
        if cached is not None:
            return cached

        async with self._lock:
            cached = self._cache.get(key)
            if cached is not None:
                return cached
            try:
                summary = await asyncio.to_thread(self._run, text)
            except SummarizationError:
                raise
            except Exception as e:
                raise SummarizationError(
                    f"Error summarizing {truncated(text)!r}: {e}"
                ) from e

        self._cache[key] = summary
        return summary
