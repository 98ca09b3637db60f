# airnope/services/lexical.py
"""
Лексический фильтр, устойчивый к обфускации.

Первая (дешевая) ступень каскада. Для каждого "спам-слова" строится
регулярное выражение, где каждая буква заменена группой визуально похожих
символов: латиница, кириллица/греческий, цифры, эмодзи-буквы
(regional indicators, 🅰️-подобные символы с variation selector).
Между буквами допускается один пробел ("a i r d r o p").
"""
import re
from dataclasses import dataclass
from typing import Dict, Iterable, Optional, Tuple

from loguru import logger

from airnope.exceptions import PatternCompilationError
from airnope.utils.text import collapse_whitespace, truncated

# Гомоглифы для каждой латинской буквы (без учета регистра)
HOMOGLYPHS: Dict[str, str] = {
    "a": "аα4@",
    "c": "сϲ¢",
    "d": "ԁδΔ",
    "e": "еεℯ3€",
    "f": "ƒ",
    "g": "ɡ9",
    "h": "һ",
    "i": "іιíìï1lℹ|",
    "k": "кκ",
    "l": "ӏℓ1|",
    "m": "м",
    "n": "ոℕ",
    "o": "оο0",
    "p": "рρϱ",
    "q": "ԛ",
    "r": "гр",
    "s": "ѕ5$",
    "t": "тτ7†",
    "u": "υ",
    "v": "νѵ",
    "w": "ѡω",
    "y": "уγ",
}

REGIONAL_INDICATOR_A = 0x1F1E6  # 🇦
NEGATIVE_SQUARED_A = 0x1F170  # 🅰
VARIATION_SELECTOR = "\ufe0f"
ZERO_WIDTH_RE = re.compile(r"[\u200B-\u200F\u2060\uFEFF]")

AIRDROP = "airdrop"

HIGH_CONFIDENCE_WORDS: Tuple[str, ...] = (
    "cryptocurrency",
    "altcoin",
    "metamask",
    "trustwallet",
    "pancakeswap",
)

# Испанский: "выиграть", "вложил", "нажмите", "здесь"
SPANISH_WORDS: Tuple[str, ...] = ("ganar", "invert", "clic", "aqui")

# Немецкий: "платформа" + "прибыль" / "внес" / "получил" / "инвестировать"
GERMAN_WORDS: Tuple[str, ...] = (
    "plattform",
    "gewinne",
    "eingezahlt",
    "erhalten",
    "investier",
)


@dataclass(frozen=True)
class Conjunction:
    """
    Правило совместной встречаемости слов.

    Срабатывает, если найдены все слова из required и хотя бы одно из any_of
    (если any_of задан).
    """

    name: str
    required: Tuple[str, ...]
    any_of: Tuple[str, ...] = ()


CONJUNCTIONS: Tuple[Conjunction, ...] = (
    Conjunction("wallet+token", ("wallet", "token")),
    Conjunction("wallet+reward", ("wallet", "reward")),
    Conjunction("token+network", ("token", "network")),
    Conjunction("claim+swap", ("claim", "swap")),
    Conjunction("finance+reward", ("finance", "reward")),
    Conjunction("transaction+trading", ("transaction", "trading")),
    Conjunction("es:win+invested+click+here", SPANISH_WORDS),
    Conjunction("de:platform+profit", ("plattform",), GERMAN_WORDS[1:]),
)


def letter_pattern(letter: str) -> str:
    """
    Группа символов, которые могут изображать букву.

    Args:
        letter: Латинская буква в нижнем регистре

    Returns:
        Фрагмент регулярного выражения вида (?:[...]\\ufe0f?)
    """
    offset = ord(letter) - ord("a")
    if not 0 <= offset < 26:
        raise ValueError(f"Not a latin letter: {letter!r}")
    chars = (
        letter
        + HOMOGLYPHS.get(letter, "")
        + chr(REGIONAL_INDICATOR_A + offset)
        + chr(NEGATIVE_SQUARED_A + offset)
    )
    alternatives = "".join(re.escape(c) for c in chars)
    return f"(?:[{alternatives}]{VARIATION_SELECTOR}?)"


def word_pattern(word: str) -> str:
    """Выражение для слова: буквы-группы через необязательный пробел."""
    return r"\s?".join(letter_pattern(letter) for letter in word.lower())


def compile_word(word: str) -> "re.Pattern[str]":
    try:
        return re.compile(word_pattern(word), re.IGNORECASE)
    except (re.error, ValueError) as e:
        raise PatternCompilationError(f"Could not compile pattern for {word!r}: {e}") from e


class LexicalMatcher:
    """
    Быстрый предфильтр: отвечает "точно не спам" для подавляющего
    большинства сообщений, не обращаясь к модели.

    После создания объект не меняется и безопасен для конкурентного
    использования.
    """

    def __init__(
        self,
        high_confidence: Iterable[str] = HIGH_CONFIDENCE_WORDS,
        conjunctions: Iterable[Conjunction] = CONJUNCTIONS,
    ):
        self.high_confidence = tuple(high_confidence)
        self.conjunctions = tuple(conjunctions)

        words = {AIRDROP, *self.high_confidence}
        for rule in self.conjunctions:
            words.update(rule.required)
            words.update(rule.any_of)

        self.patterns: Dict[str, "re.Pattern[str]"] = {
            word: compile_word(word) for word in sorted(words)
        }
        logger.debug(f"🔧 LexicalMatcher compiled {len(self.patterns)} word patterns")

    @staticmethod
    def clean(text: str) -> str:
        return collapse_whitespace(ZERO_WIDTH_RE.sub("", text))

    def match(self, text: str) -> Optional[str]:
        """
        Возвращает имя сработавшего правила или None.

        Args:
            text: Исходный текст сообщения

        Returns:
            "airdrop", само слово высокой уверенности или имя Conjunction
        """
        if not text:
            return None

        cleaned = self.clean(text)
        found: Dict[str, bool] = {}

        def has(word: str) -> bool:
            if word not in found:
                found[word] = self.patterns[word].search(cleaned) is not None
            return found[word]

        if has(AIRDROP):
            return AIRDROP

        for word in self.high_confidence:
            if has(word):
                return word

        for rule in self.conjunctions:
            if all(has(word) for word in rule.required) and (
                not rule.any_of or any(has(word) for word in rule.any_of)
            ):
                return rule.name

        return None

    def is_spam(self, text: str) -> bool:
        rule = self.match(text)
        if rule is None:
            return False
        logger.info(f"🚩 Message detected as spam by LexicalMatcher (rule: {rule})")
        logger.debug(truncated(text))
        return True
