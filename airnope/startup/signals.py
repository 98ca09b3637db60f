# airnope/startup/signals.py
import asyncio
import signal

from loguru import logger


def shutdown_event() -> asyncio.Event:
    """Событие, которое выставляется по SIGINT/SIGTERM."""
    event = asyncio.Event()
    loop = asyncio.get_running_loop()

    def handle_signal(signum: int) -> None:
        logger.warning(f"⚠️ Received signal {signum}")
        event.set()

    for signum in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(signum, handle_signal, signum)
        except NotImplementedError:
            # Windows: остается KeyboardInterrupt
            logger.debug(f"Signal handlers are not supported for {signum}")
    return event
