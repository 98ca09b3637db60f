# airnope/tools/repl.py
"""Интерактивная проверка сообщений из терминала."""
import asyncio
from typing import Callable

from airnope.services.detector import SpamDetector
from airnope.services.guess import Guess

EXIT_COMMAND = "exit"


def format_guess(guess: Guess) -> str:
    if guess.is_spam:
        return f"Spam (score = {guess.score or 0.0:.3f})"
    return "Not spam"


async def run_repl(
    detector: SpamDetector,
    read: Callable[[str], str] = input,
    write: Callable[[str], None] = print,
) -> None:
    write(f"Type `{EXIT_COMMAND}` to quit.")
    while True:
        try:
            line = await asyncio.to_thread(read, "> ")
        except EOFError:
            break
        line = line.rstrip("\r\n")
        if line == EXIT_COMMAND:
            break
        guess = await detector.classify(line)
        write(format_guess(guess))
