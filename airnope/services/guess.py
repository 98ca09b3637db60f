# airnope/services/guess.py
from dataclasses import dataclass
from typing import Optional, Tuple


@dataclass(frozen=True)
class Guess:
    """
    Итог классификации одного сообщения.

    score и scores пустые, если сообщение отсеяно лексическим фильтром
    (модель не вызывалась).
    """

    is_spam: bool
    score: Optional[float] = None
    scores: Tuple[float, ...] = ()

    @property
    def is_short_circuit(self) -> bool:
        return self.score is None
