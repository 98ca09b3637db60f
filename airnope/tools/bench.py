# airnope/tools/bench.py
"""
Бенчмарк наборов меток на размеченном корпусе.

Каждый файл в каталоге данных содержит одно сообщение. Файлы с именем,
начинающимся на "spam", должны классифицироваться как спам, остальные нет.
Для каждого набора меток печатается оценка каждого файла и интервал
порогов, при котором корпус размечается без ошибок.
"""
import math
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, List, Optional, Sequence, Tuple

from airnope.config.models import DEFAULT_LABELS
from airnope.services.embeddings import Embeddings
from airnope.services.summary import Summarizer
from airnope.services.zero_shot import ZeroShotClassifier

SPAM_PREFIX = "spam"
DEFAULT_THRESHOLD_DIFFERENCE = 0.05


@dataclass(frozen=True)
class Sample:
    name: str
    is_spam: bool
    content: str


@dataclass(frozen=True)
class Evaluation:
    score: float
    scores: Tuple[float, ...]
    expected: bool


@dataclass
class LabelStats:
    labels: Tuple[str, ...]
    spam_scores: List[float] = field(default_factory=list)
    not_spam_scores: List[float] = field(default_factory=list)

    def push(self, sample: Sample, score: float) -> None:
        if sample.is_spam:
            self.spam_scores.append(score)
        else:
            self.not_spam_scores.append(score)

    def threshold_range(self) -> Tuple[float, float]:
        """(максимальная оценка не-спама, минимальная оценка спама)"""
        return (
            max(self.not_spam_scores, default=-math.inf),
            min(self.spam_scores, default=math.inf),
        )

    def summary(self) -> str:
        not_spam, spam = self.threshold_range()
        if not_spam > spam:
            return (
                f"     No possible threshold (maximum not spam = {not_spam:.3f} "
                f"and minimum spam = {spam:.3f})"
            )
        return f"     Possible threshold between {not_spam:.3f} and {spam:.3f}"


def signed(value: float, precision: int = 3) -> str:
    if value > 0:
        prefix = "+"
    elif value < 0:
        prefix = ""
    else:
        prefix = " "
    return f"{prefix}{value:.{precision}f}"


def load_samples(data_dir: Path) -> List[Sample]:
    samples = []
    for path in sorted(data_dir.iterdir(), key=lambda p: p.name):
        if not path.is_file():
            continue
        samples.append(
            Sample(
                name=path.name,
                is_spam=path.name.startswith(SPAM_PREFIX),
                content=path.read_text(encoding="utf-8"),
            )
        )
    return samples


def parse_label_sets(args: Optional[Sequence[str]]) -> List[Tuple[str, ...]]:
    """Каждый аргумент задает набор меток через запятую. Без аргументов берутся метки по умолчанию."""
    if not args:
        return [DEFAULT_LABELS]
    label_sets = []
    for arg in args:
        labels = tuple(label.strip() for label in arg.split(",") if label.strip())
        if not labels:
            raise ValueError(f"Empty label set: {arg!r}")
        label_sets.append(labels)
    return label_sets


def header(idx: int, labels: Sequence[str], threshold: float) -> str:
    line = f"\n==> Alternative {idx + 1}: {' + '.join(labels)}"
    if idx == 0:
        line += f" (threshold: {threshold:.2f})"
    return line


def format_evaluation(name: str, evaluation: Evaluation, threshold: float) -> str:
    mark = "✔" if evaluation.expected else "✘"
    line = (
        f"    {mark} {name:<13} {evaluation.score:.3f} "
        f"({signed(evaluation.score - threshold)})"
    )
    if len(evaluation.scores) > 1:
        line += " " + " | ".join(f"{score:.3f}" for score in evaluation.scores)
    return line


async def evaluate(classifier: ZeroShotClassifier, text: str, is_spam: bool) -> Evaluation:
    score, scores = await classifier.score(text)
    return Evaluation(
        score=score,
        scores=scores,
        expected=(score > classifier.threshold) == is_spam,
    )


async def simulate(
    classifier: ZeroShotClassifier,
    summarizer: Optional[Summarizer],
    sample: Sample,
    threshold_difference: float,
) -> Tuple[Evaluation, str]:
    """
    Оценивает один файл. Если оценка попала в окрестность порога и есть
    суммаризатор, оценивается краткое содержание текста.
    """
    evaluation = await evaluate(classifier, sample.content, sample.is_spam)
    line = format_evaluation(sample.name, evaluation, classifier.threshold)

    threshold = classifier.threshold
    near_threshold = threshold - threshold_difference < evaluation.score < threshold + threshold_difference
    if summarizer is not None and near_threshold:
        before = evaluation.score
        summary = await summarizer.summarize(sample.content)
        evaluation = await evaluate(classifier, summary, sample.is_spam)
        line = format_evaluation(sample.name, evaluation, threshold)
        line += f" ({signed(evaluation.score - before, 2)} after summarizing)"

    return evaluation, line


async def run_bench(
    embeddings: Embeddings,
    label_sets: Sequence[Tuple[str, ...]],
    data_dir: Path,
    threshold: float,
    summarizer: Optional[Summarizer] = None,
    threshold_difference: float = DEFAULT_THRESHOLD_DIFFERENCE,
    write: Callable[[str], None] = print,
) -> List[LabelStats]:
    samples = load_samples(data_dir)
    results = []
    for idx, labels in enumerate(label_sets):
        classifier = await ZeroShotClassifier.create(embeddings, labels, threshold)
        stats = LabelStats(labels=tuple(labels))
        write(header(idx, labels, threshold))
        for sample in samples:
            evaluation, line = await simulate(classifier, summarizer, sample, threshold_difference)
            write(line)
            stats.push(sample, evaluation.score)
        write("\n" + stats.summary())
        results.append(stats)
    return results
