"""Recipes built from solver results.

A recipe pairs each substance with the grams the solver chose so the mix
can be stored and weighed out later. Weights scale linearly with volume, so
a recipe solved for 10 L can be rescaled to any other volume without
solving again.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any, Dict, Sequence

from .concentration import calculate_concentrations
from .ec_estimator import estimate_ec
from .exceptions import RecipeError
from .models import CalculationResult, NutrientTarget, Substance, substances_from
from .volume import SolutionVolume

__all__ = [
    "RecipeSubstance",
    "Recipe",
    "attach_weights",
    "build_recipe",
    "scale_recipe",
    "recipe_from_dict",
]


@dataclass(frozen=True, slots=True)
class RecipeSubstance:
    """A substance together with its solved weight in grams."""

    substance: Substance
    weight: float

    def as_dict(self) -> Dict[str, Any]:
        return {**self.substance.as_dict(), "weight": self.weight}


@dataclass(frozen=True)
class Recipe:
    """A named, reusable nutrient solution."""

    name: str
    substances: tuple[RecipeSubstance, ...]
    targets: NutrientTarget
    volume: SolutionVolume
    description: str = ""
    ec: float | None = None
    deviation: float | None = None
    tags: tuple[str, ...] = field(default_factory=tuple)

    @property
    def total_weight(self) -> float:
        return sum(item.weight for item in self.substances)

    def weights(self) -> list[float]:
        return [item.weight for item in self.substances]

    def achieved(self) -> Dict[str, float]:
        """Return ppm produced by the stored weights, without re-solving."""
        return _achieved(self.substances, self.volume)

    def as_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "substances": [item.as_dict() for item in self.substances],
            "targets": self.targets.as_dict(),
            "solution_volume": self.volume.value,
            "volume_unit": self.volume.unit,
            "ec": self.ec,
            "deviation": self.deviation,
            "tags": list(self.tags),
        }


def attach_weights(
    substances: Iterable[Substance], result: CalculationResult
) -> list[RecipeSubstance]:
    """Return ``substances`` paired with their weights from ``result``."""

    return [RecipeSubstance(s, result.weight_for(s.id)) for s in substances]


def build_recipe(
    name: str,
    substances: Sequence[Substance],
    targets: Mapping[str, Any],
    volume: SolutionVolume,
    result: CalculationResult | None,
    *,
    description: str = "",
    tags: Iterable[str] = (),
) -> Recipe:
    """Return a :class:`Recipe` ready to be stored.

    A calculation result and at least one substance are required.
    """

    if not str(name).strip():
        raise RecipeError("recipe name must not be empty")
    if result is None:
        raise RecipeError("calculate the solution before saving the recipe")
    if not substances:
        raise RecipeError("add at least one substance before saving the recipe")
    return Recipe(
        name=str(name).strip(),
        substances=tuple(attach_weights(substances, result)),
        targets=NutrientTarget.coerce(targets),
        volume=volume,
        description=description,
        ec=result.ec,
        deviation=result.deviation,
        tags=tuple(tags),
    )


def scale_recipe(recipe: Recipe, volume: SolutionVolume) -> Recipe:
    """Return ``recipe`` with weights rescaled for ``volume``.

    Concentrations are unchanged because grams scale with liters.
    """

    factor = volume.milliliters / recipe.volume.milliliters
    scaled = tuple(
        RecipeSubstance(item.substance, item.weight * factor)
        for item in recipe.substances
    )
    return Recipe(
        name=recipe.name,
        substances=scaled,
        targets=recipe.targets,
        volume=volume,
        description=recipe.description,
        ec=estimate_ec(_achieved(scaled, volume)),
        deviation=recipe.deviation,
        tags=recipe.tags,
    )


def _achieved(items: Sequence[RecipeSubstance], volume: SolutionVolume) -> Dict[str, float]:
    return calculate_concentrations(
        [item.weight for item in items],
        [item.substance for item in items],
        volume.milliliters,
    )


def recipe_from_dict(data: Mapping[str, Any]) -> Recipe:
    """Return a :class:`Recipe` from its stored dictionary form."""

    raw = list(data.get("substances") or [])
    substances = substances_from(raw)
    items = tuple(
        RecipeSubstance(s, float(entry.get("weight") or 0.0))
        for s, entry in zip(substances, raw)
    )
    return Recipe(
        name=str(data.get("name") or ""),
        substances=items,
        targets=NutrientTarget(data.get("targets") or {}),
        volume=SolutionVolume(
            data.get("solution_volume", 1000), data.get("volume_unit", "mL")
        ),
        description=str(data.get("description") or ""),
        ec=data.get("ec"),
        deviation=data.get("deviation"),
        tags=tuple(data.get("tags") or ()),
    )
