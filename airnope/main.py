# airnope/main.py
"""
Точка входа CLI.

    airnope bot [--mode polling|webhook]
    airnope bench [LABELS ...] [--skip-summary] [--threshold-difference 0.05]
    airnope repl
    airnope demo
    airnope download
    airnope clean-cache [--dry-run]
"""
import argparse
import asyncio
import sys
from pathlib import Path
from typing import List, Optional

from aiohttp import web
from loguru import logger

from airnope import __version__
from airnope.config.settings import settings
from airnope.containers import Container
from airnope.startup import create_detector, setup_bot, start_polling, start_webhook
from airnope.startup.signals import shutdown_event
from airnope.tools.bench import DEFAULT_THRESHOLD_DIFFERENCE, parse_label_sets, run_bench
from airnope.tools.models import clean_cache, download_all, model_cache_dirs
from airnope.tools.repl import run_repl
from airnope.utils.logging_setup import setup_logging
from airnope.web.demo import IPRateLimiter, create_demo_app


async def _cmd_bot(args: argparse.Namespace, container: Container) -> int:
    bot, dp = await setup_bot(container)
    if args.mode == "webhook":
        await start_webhook(bot, dp, container)
    else:
        await start_polling(bot, dp, container)
    return 0


async def _cmd_bench(args: argparse.Namespace, container: Container) -> int:
    label_sets = parse_label_sets(args.labels)
    await run_bench(
        container.embeddings(),
        label_sets,
        data_dir=args.data_dir,
        threshold=settings.classifier.threshold,
        summarizer=None if args.skip_summary else container.summarizer(),
        threshold_difference=args.threshold_difference,
    )
    return 0


async def _cmd_repl(args: argparse.Namespace, container: Container) -> int:
    detector = await create_detector(container)
    await run_repl(detector)
    return 0


async def _cmd_demo(args: argparse.Namespace, container: Container) -> int:
    detector = await create_detector(container)
    redis = container.redis_client()
    limiter = IPRateLimiter(
        redis,
        seconds=settings.demo.rate_limit_seconds,
        key_prefix=settings.demo.key_prefix,
    )
    runner = web.AppRunner(create_demo_app(detector, limiter))
    stop = shutdown_event()
    try:
        await runner.setup()
        await web.TCPSite(runner, settings.demo.host, settings.demo.port).start()
        logger.info(
            f"🌐 Starting AirNope web API on http://{settings.demo.host}:{settings.demo.port}"
        )
        await stop.wait()
    finally:
        await runner.cleanup()
        await redis.aclose()
    return 0


async def _cmd_download(args: argparse.Namespace, container: Container) -> int:
    await download_all(container.embeddings(), container.summarizer())
    return 0


async def _cmd_clean_cache(args: argparse.Namespace, container: Container) -> int:
    directories = model_cache_dirs(
        [settings.embeddings.model_name, settings.summarizer.model_name]
    )
    clean_cache(directories, dry_run=args.dry_run)
    return 0


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="airnope",
        description=f"AirNope v{__version__}: crypto airdrop spam detector",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")

    subparsers = parser.add_subparsers(dest="command")

    p_bot = subparsers.add_parser("bot", help="Run the Telegram bot")
    p_bot.add_argument(
        "--mode", choices=("polling", "webhook"), default="polling",
        help="Receive updates by long polling or webhook (default: polling)",
    )
    p_bot.set_defaults(func=_cmd_bot)

    p_bench = subparsers.add_parser("bench", help="Benchmark label sets on a corpus")
    p_bench.add_argument(
        "labels", nargs="*",
        help="Label sets, each one comma-separated (default: built-in labels)",
    )
    p_bench.add_argument(
        "--skip-summary", action="store_true",
        help="Do not summarize messages scored close to the threshold",
    )
    p_bench.add_argument(
        "--threshold-difference", type=float, default=DEFAULT_THRESHOLD_DIFFERENCE,
        help="Distance from the threshold that triggers summarizing",
    )
    p_bench.add_argument(
        "--data-dir", type=Path, default=Path("tests/data"),
        help="Directory with one message per file (spam* files are spam)",
    )
    p_bench.set_defaults(func=_cmd_bench)

    p_repl = subparsers.add_parser("repl", help="Classify messages typed in the terminal")
    p_repl.set_defaults(func=_cmd_repl)

    p_demo = subparsers.add_parser("demo", help="Run the demo web API")
    p_demo.set_defaults(func=_cmd_demo)

    p_download = subparsers.add_parser("download", help="Download the models")
    p_download.set_defaults(func=_cmd_download)

    p_clean = subparsers.add_parser("clean-cache", help="Delete downloaded models")
    p_clean.add_argument(
        "--dry-run", action="store_true",
        help="Only report the cache size",
    )
    p_clean.set_defaults(func=_cmd_clean_cache)

    return parser


async def _run(args: argparse.Namespace) -> int:
    container = Container()
    try:
        return await args.func(args, container)
    finally:
        container.shutdown_resources()


def main(argv: Optional[List[str]] = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    setup_logging(
        level="DEBUG" if args.verbose else settings.log_level,
        format="json" if settings.logging.json_enabled else "text",
        debug_loggers=settings.logging.debug_loggers,
        service_name=settings.logging.service_name,
    )

    if not hasattr(args, "func"):
        parser.print_help()
        return 1

    try:
        return asyncio.run(_run(args))
    except KeyboardInterrupt:
        logger.info("⚠️ Interrupted by user")
        return 130
    except Exception as e:
        logger.opt(exception=args.verbose).error(f"❌ Fatal error: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
