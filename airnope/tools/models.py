# airnope/tools/models.py
"""
Загрузка моделей и очистка их кэша (каталог Hugging Face).
"""
import asyncio
import shutil
from pathlib import Path
from typing import Iterable, List, Optional

from huggingface_hub import constants
from loguru import logger

from airnope.services.embeddings import Embeddings
from airnope.services.summary import Summarizer

SIZE_UNITS = ("B", "KB", "MB", "GB", "TB")


def format_size(size: float) -> str:
    unit = 0
    while size >= 1024 and unit < len(SIZE_UNITS) - 1:
        size /= 1024
        unit += 1
    return f"{size:.2f} {SIZE_UNITS[unit]}"


def model_cache_dirs(model_names: Iterable[str], cache_dir: Optional[Path] = None) -> List[Path]:
    """Каталоги моделей в кэше HF: models--<org>--<name>."""
    root = Path(cache_dir or constants.HF_HUB_CACHE)
    return [root / f"models--{name.replace('/', '--')}" for name in model_names]


def directory_size(path: Path) -> int:
    if not path.exists():
        return 0
    return sum(item.stat().st_size for item in path.rglob("*") if item.is_file())


def clean_cache(directories: Iterable[Path], dry_run: bool = False) -> int:
    """
    Считает (и, если не dry_run, удаляет) каталоги моделей.

    Returns:
        Суммарный размер в байтах
    """
    total = 0
    for directory in directories:
        label = "Checking" if dry_run else "Deleting"
        logger.info(f"{label} {directory}")
        if not directory.exists():
            logger.info(f"{directory} not found, skipping")
            continue
        size = directory_size(directory)
        total += size
        if not dry_run:
            shutil.rmtree(directory)
        logger.info(f"{'Total size' if dry_run else 'Cleaned up'} {format_size(size)}")
    return total


async def download_all(embeddings: Embeddings, summarizer: Summarizer) -> None:
    logger.info("⏳ Downloading models...")
    await asyncio.gather(embeddings.load(), asyncio.to_thread(summarizer.load))
    logger.info("✅ Models downloaded")
