"""Deviation scoring between achieved and target concentrations."""

from __future__ import annotations

from typing import Dict, Mapping

from .constants import NUTRIENT_CATEGORIES

__all__ = [
    "element_deviations",
    "calculate_deviation",
    "precision_rating",
    "category_for",
]

EXCELLENT_BELOW = 5.0
GOOD_BELOW = 10.0


def element_deviations(
    achieved: Mapping[str, float], targets: Mapping[str, float]
) -> Dict[str, float]:
    """Return percent deviation for every target greater than zero."""

    result: Dict[str, float] = {}
    for nutrient, target in targets.items():
        if target > 0:
            actual = achieved.get(nutrient, 0.0)
            result[nutrient] = abs(actual - target) / target * 100
    return result


def calculate_deviation(
    achieved: Mapping[str, float], targets: Mapping[str, float]
) -> float:
    """Return mean percent deviation over the positive targets.

    Nutrients with a target of ``0`` are ignored whatever their achieved
    value, so micronutrients can be left unconstrained. ``0.0`` is returned
    when no target is positive.
    """

    total = 0.0
    count = 0
    for nutrient, target in targets.items():
        if target > 0:
            actual = achieved.get(nutrient, 0.0)
            total += abs(actual - target) / target * 100
            count += 1
    return total / count if count else 0.0


def precision_rating(deviation: float) -> str:
    """Return ``excellent``, ``good`` or ``adjust`` for a mean deviation."""

    if deviation < EXCELLENT_BELOW:
        return "excellent"
    if deviation < GOOD_BELOW:
        return "good"
    return "adjust"


def category_for(nutrient: str) -> str:
    """Return the display category of ``nutrient``, micronutrient by default."""

    return NUTRIENT_CATEGORIES.get(nutrient, "micronutrient")
