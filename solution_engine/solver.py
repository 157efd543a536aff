"""Nutrient solution solver.

Given fertilizer substances, ppm targets and a solution volume, find the
grams of each substance whose dissolved elements best approach the targets.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from typing import Any, Dict

from .concentration import ConcentrationModel
from .deviation import calculate_deviation, element_deviations
from .ec_estimator import estimate_ec
from .exceptions import InvalidInputError
from .models import (
    CalculationResult,
    NutrientTarget,
    SearchDiagnostics,
    Substance,
    substances_from,
)
from .optimizer import (
    RandomSource,
    SolverSettings,
    default_random_source,
    random_search,
    refine_weights,
)
from .utils import to_float
from .volume import SolutionVolume

__all__ = ["SolutionSolver", "solve"]

_LOGGER = logging.getLogger(__name__)


def _volume_ml(volume: float | SolutionVolume) -> float:
    if isinstance(volume, SolutionVolume):
        return volume.milliliters
    value = to_float(volume)
    if value is None or value <= 0:
        raise InvalidInputError("solution volume must be greater than zero")
    return value


def _check_unique_ids(substances: Iterable[Substance]) -> None:
    seen: set[str] = set()
    for substance in substances:
        if substance.id in seen:
            raise InvalidInputError(f"duplicate substance id '{substance.id}'")
        seen.add(substance.id)


class SolutionSolver:
    """Solve substance weights for nutrient targets.

    ``rng`` is any object with ``uniform(low, high)``; pass a seeded
    :func:`numpy.random.default_rng` for reproducible weights. When omitted a
    fresh generator is created per call. The solver keeps no state between
    calls apart from an injected ``rng``.
    """

    def __init__(
        self,
        settings: SolverSettings | None = None,
        rng: RandomSource | None = None,
        *,
        include_ec: bool = True,
    ) -> None:
        self.settings = settings or SolverSettings()
        self.rng = rng
        self.include_ec = include_ec

    def solve(
        self,
        substances: Iterable[Substance | Mapping[str, Any]],
        targets: Mapping[str, Any],
        solution_volume: float | SolutionVolume,
    ) -> CalculationResult:
        """Return the best weights found and the concentrations they give."""

        volume_ml = _volume_ml(solution_volume)
        items = substances_from(substances)
        _check_unique_ids(items)
        target = NutrientTarget.coerce(targets)
        positive = target.positive()
        model = ConcentrationModel(items, volume_ml)

        if not items:
            _LOGGER.warning("Solving with no substances; every target stays at 0 ppm")
        _LOGGER.debug(
            "Solving %d substances for %d targets in %.1f mL",
            len(items),
            len(positive),
            volume_ml,
        )

        def score(weights):
            return calculate_deviation(model.concentrations(weights), positive)

        rng = self.rng if self.rng is not None else default_random_source()
        sampled, sampled_score = random_search(score, len(model), rng, self.settings)
        refined = refine_weights(score, sampled, self.settings)

        final = model.concentrations(refined.weights)
        achieved: Dict[str, float] = {key: 0.0 for key in target}
        for nutrient, ppm in final.items():
            achieved[nutrient] = round(ppm, 2)

        weights = {s.id: w for s, w in zip(items, refined.weights)}
        return CalculationResult(
            substance_weights=weights,
            total_weight=sum(refined.weights),
            achieved=achieved,
            deviation=refined.deviation,
            element_deviations=element_deviations(final, positive),
            ec=estimate_ec(final) if self.include_ec else None,
            diagnostics=SearchDiagnostics(
                sampled_deviation=sampled_score,
                passes=refined.passes,
                history=tuple(refined.history),
            ),
        )


def solve(
    substances: Iterable[Substance | Mapping[str, Any]],
    targets: Mapping[str, Any],
    solution_volume_ml: float | SolutionVolume,
    *,
    rng: RandomSource | None = None,
    settings: SolverSettings | None = None,
) -> CalculationResult:
    """Return a :class:`CalculationResult` for ``substances`` and ``targets``.

    ``solution_volume_ml`` must be greater than zero. An empty substance
    list is accepted and yields a deviation of 100 for every positive target.
    """

    return SolutionSolver(settings, rng).solve(substances, targets, solution_volume_ml)
