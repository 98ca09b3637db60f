import os
import re
import sys
import time
from pathlib import Path
from typing import Dict, List, Optional, Sequence

import numpy as np
import pytest
import pytest_asyncio

# Minimal env variables so importing settings does not fail
os.environ.setdefault("TELEGRAM_BOT_TOKEN", "42:TEST")
os.environ.setdefault("REDIS_URL", "redis://localhost:6379/0")

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from airnope.services.embeddings import EMBEDDINGS_SIZE, EmbeddingBackend, Embeddings  # noqa: E402

DATA_DIR = ROOT / "tests" / "data"

SPAM_VOCABULARY = frozenset(
    {
        "airdrop", "altcoin", "announcement", "bonus", "btc", "claim", "connect",
        "crypto", "cryptocurrency", "earn", "eth", "event", "finance", "free",
        "giveaway", "investment", "metamask", "network", "opportunity",
        "pancakeswap", "profit", "reward", "rewards", "spam", "swap", "token",
        "tokens", "trading", "transaction", "trustwallet", "usdt", "wallet",
    }
)
STOP_WORDS = frozenset(
    {
        "a", "an", "and", "are", "at", "be", "by", "for", "from", "i", "in",
        "is", "it", "my", "now", "of", "on", "or", "our", "the", "this", "to",
        "we", "with", "you", "your",
    }
)


class StubBackend(EmbeddingBackend):
    """Детерминированная модель: заданные векторы, счетчик вызовов."""

    def __init__(
        self,
        vectors: Optional[Dict[str, Sequence[float]]] = None,
        dimensions: int = EMBEDDINGS_SIZE,
        error: Optional[Exception] = None,
        delay: float = 0.0,
    ):
        self.vectors = vectors or {}
        self.dimensions = dimensions
        self.error = error
        self.delay = delay
        self.calls: List[str] = []
        self.active = 0
        self.max_active = 0
        self.loaded = False

    @property
    def model_name(self) -> str:
        return "stub"

    def load(self) -> None:
        self.loaded = True

    def encode(self, texts: List[str]):
        self.active += 1
        self.max_active = max(self.max_active, self.active)
        try:
            self.calls.extend(texts)
            if self.delay:
                time.sleep(self.delay)
            if self.error is not None:
                raise self.error
            return [self.vectors.get(text, self._default(text)) for text in texts]
        finally:
            self.active -= 1

    def _default(self, text: str) -> np.ndarray:
        vector = np.zeros(self.dimensions, dtype=np.float32)
        vector[len(text) % self.dimensions] = 1.0
        return vector


class ConceptBackend(EmbeddingBackend):
    """
    Игрушечная "семантика": первая координата равна числу спам-слов,
    вторая равна числу остальных слов (служебные не считаются).
    """

    @property
    def model_name(self) -> str:
        return "concept"

    def load(self) -> None:
        pass

    def encode(self, texts: List[str]):
        return [self.vector(text) for text in texts]

    @staticmethod
    def vector(text: str) -> np.ndarray:
        words = [w for w in re.findall(r"[a-z]+", text.lower()) if w not in STOP_WORDS]
        spam = sum(1 for w in words if w in SPAM_VOCABULARY)
        vector = np.zeros(EMBEDDINGS_SIZE, dtype=np.float32)
        vector[0] = spam
        vector[1] = len(words) - spam
        return vector


@pytest.fixture
def stub_backend():
    return StubBackend()


@pytest.fixture
def stub_embeddings(stub_backend):
    return Embeddings(stub_backend)


@pytest.fixture
def concept_embeddings():
    return Embeddings(ConceptBackend())


@pytest_asyncio.fixture
async def concept_detector(concept_embeddings):
    from airnope.config.settings import Settings
    from airnope.services.detector import SpamDetector

    return await SpamDetector.create(concept_embeddings, Settings())


@pytest.fixture
def data_dir():
    return DATA_DIR
