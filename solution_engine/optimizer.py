"""Weight search for nutrient solutions.

The search is a bounded heuristic, not a linear program. Phase one samples
random weight vectors and keeps the best. Phase two walks each substance
weight up or down by a fixed step while that lowers the deviation, one
coordinate at a time, until a full pass changes nothing or the pass limit
is reached. Neither phase guarantees a global optimum.
"""

from __future__ import annotations

import logging
import math
import os
from dataclasses import dataclass, field
from typing import Callable, List, Protocol, Sequence

import numpy as np

from .exceptions import InvalidInputError

__all__ = [
    "RandomSource",
    "SolverSettings",
    "RefinementResult",
    "default_random_source",
    "random_search",
    "refine_weights",
]

_LOGGER = logging.getLogger(__name__)

SEED_ENV = "SOLUTION_ENGINE_SEED"

Scorer = Callable[[Sequence[float]], float]


class RandomSource(Protocol):
    """Anything exposing ``uniform(low, high)``.

    Both :class:`numpy.random.Generator` and :class:`random.Random` qualify.
    """

    def uniform(self, low: float, high: float) -> float: ...


def default_random_source(seed: int | None = None) -> RandomSource:
    """Return a numpy generator seeded from ``seed`` or ``SOLUTION_ENGINE_SEED``."""

    if seed is None:
        env = os.getenv(SEED_ENV)
        if env:
            try:
                seed = int(env)
            except ValueError as exc:
                raise InvalidInputError(f"{SEED_ENV} must be an integer") from exc
    return np.random.default_rng(seed)


@dataclass(frozen=True, slots=True)
class SolverSettings:
    """Search limits used by :func:`random_search` and :func:`refine_weights`."""

    trials: int = 1000
    max_initial_weight_g: float = 5.0
    step_g: float = 0.1
    max_passes: int = 100

    def __post_init__(self) -> None:
        if self.trials < 1:
            raise InvalidInputError("trials must be at least 1")
        if not math.isfinite(self.max_initial_weight_g) or self.max_initial_weight_g <= 0:
            raise InvalidInputError("max_initial_weight_g must be positive")
        if not math.isfinite(self.step_g) or self.step_g <= 0:
            raise InvalidInputError("step_g must be positive")
        if self.max_passes < 0:
            raise InvalidInputError("max_passes must be non-negative")


@dataclass(slots=True)
class RefinementResult:
    """Weights and scores produced by :func:`refine_weights`."""

    weights: List[float]
    deviation: float
    passes: int
    history: List[float] = field(default_factory=list)


def random_search(
    score: Scorer,
    size: int,
    rng: RandomSource,
    settings: SolverSettings | None = None,
) -> tuple[List[float], float]:
    """Return the best of ``settings.trials`` random weight vectors.

    Every weight is drawn independently from ``[0, max_initial_weight_g)``.
    Ties keep the earliest vector.
    """

    settings = settings or SolverSettings()
    best: List[float] = []
    best_score = math.inf
    high = settings.max_initial_weight_g
    for _ in range(settings.trials):
        candidate = [float(rng.uniform(0.0, high)) for _ in range(size)]
        value = score(candidate)
        if value < best_score:
            best, best_score = candidate, value
    _LOGGER.debug("Random search over %d trials reached %.4f%%", settings.trials, best_score)
    return best, best_score


def _replace(weights: Sequence[float], index: int, value: float) -> List[float]:
    candidate = list(weights)
    candidate[index] = value
    return candidate


def refine_weights(
    score: Scorer,
    weights: Sequence[float],
    settings: SolverSettings | None = None,
) -> RefinementResult:
    """Return ``weights`` improved by coordinate-wise hill climbing.

    For each index in order the increased, decreased (floored at zero) and
    unchanged weights are scored. Increase wins when it beats the current
    score and ties or beats decrease; decrease wins when it beats the
    current score; otherwise the weight stays. Accepted moves are visible
    to later indices within the same pass. The returned deviation never
    exceeds the deviation of the starting vector.
    """

    settings = settings or SolverSettings()
    step = settings.step_g
    current = [float(w) for w in weights]
    current_score = score(current)
    history = [current_score]
    passes = 0

    for _ in range(settings.max_passes):
        passes += 1
        changed = False
        for index, weight in enumerate(current):
            increase = _replace(current, index, weight + step)
            decrease = _replace(current, index, max(0.0, weight - step))
            increase_score = score(increase)
            decrease_score = score(decrease)

            if increase_score < current_score and increase_score <= decrease_score:
                current, current_score = increase, increase_score
                changed = True
            elif decrease_score < current_score:
                current, current_score = decrease, decrease_score
                changed = True
        history.append(current_score)
        if not changed:
            break

    _LOGGER.debug("Refinement ran %d passes, deviation %.4f%%", passes, current_score)
    return RefinementResult(current, current_score, passes, history)
