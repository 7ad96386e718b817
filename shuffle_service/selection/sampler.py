"""
Weighted random draw over scored songs.

Weight per song is ``1 / (fit_score + 1)``: a perfect match weighs 1, a
score of 1 weighs 0.5, a score of 2 weighs 0.33, and so on.
"""

import random
from typing import Optional, Protocol, Sequence

from ..models import ScoredSong


class RandomSource(Protocol):
    """Anything with ``random() -> float`` in ``[0, 1)``."""

    def random(self) -> float:
        ...


def fit_weight(fit_score: float) -> float:
    return 1.0 / (fit_score + 1.0)


class WeightedSampler:
    """Draws one song, favouring better fits."""

    def __init__(self, rng: Optional[RandomSource] = None):
        self.rng = rng if rng is not None else random.Random()

    def select(self, scored: Sequence[ScoredSong]) -> ScoredSong:
        if not scored:
            raise ValueError("Cannot sample from an empty candidate list")
        # No draw consumed for a single candidate
        if len(scored) == 1:
            return scored[0]

        weights = [fit_weight(item.fit_score) for item in scored]
        remaining = self.rng.random() * sum(weights)
        for item, weight in zip(scored, weights):
            remaining -= weight
            if remaining <= 0:
                return item

        # Float rounding can leave a tiny positive remainder
        return scored[-1]
