# airnope/config/models/ai.py
from typing import Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator


DEFAULT_LABELS: Tuple[str, ...] = (
    "claim crypto airdrop spam",
    "airdrop event announcement",
    "free token giveaway",
    "connect your wallet to claim rewards",
    "investment opportunity",
)


class EmbeddingsConfig(BaseModel):
    model_config = ConfigDict(protected_namespaces=())

    model_name: str = "sentence-transformers/all-MiniLM-L6-v2"
    dimensions: int = 384
    cache_size: int = Field(default=1024, ge=1)
    device: str = "cpu"


class SummarizerConfig(BaseModel):
    model_config = ConfigDict(protected_namespaces=())

    model_name: str = "facebook/bart-large-cnn"
    cache_size: int = Field(default=2048, ge=1)
    cache_ttl_seconds: int = 3600
    max_length: int = 130
    min_length: int = 20


class ClassifierConfig(BaseModel):
    model_config = ConfigDict(protected_namespaces=())

    labels: Tuple[str, ...] = DEFAULT_LABELS
    threshold: float = 0.5

    @field_validator("labels", mode="before")
    @classmethod
    def parse_labels(cls, v):
        if isinstance(v, str):
            v = [item.strip() for item in v.split(",") if item.strip()]
        if not v:
            raise ValueError("classifier.labels: нужна хотя бы одна метка.")
        return tuple(v)
