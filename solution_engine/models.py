"""Value objects passed into and returned from the solver."""

from __future__ import annotations

import math
from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Dict

from .constants import TARGET_KEYS
from .deviation import category_for, precision_rating
from .exceptions import InvalidInputError
from .nutrient_conversion import Contribution, canonical_symbol, resolve_contribution
from .utils import to_float

__all__ = [
    "Species",
    "Element",
    "Substance",
    "NutrientTarget",
    "SearchDiagnostics",
    "CalculationResult",
    "substances_from",
]


class Species(str, Enum):
    """How an element entry's percentage is measured."""

    ELEMENTAL = "elemental"
    IONIC = "ionic"


@dataclass(frozen=True, slots=True)
class Element:
    """One element or ion contributed by a substance.

    ``percentage`` is the mass fraction of the parent substance (0-100).
    When ``species`` is ``None`` it is inferred from the symbol: known ions
    such as ``NO3`` or ``SO4`` are ionic, everything else elemental.
    """

    symbol: str
    percentage: float
    species: Species | None = None

    def __post_init__(self) -> None:
        symbol = str(self.symbol).strip()
        if not symbol:
            raise InvalidInputError("element symbol must not be empty")
        pct = to_float(self.percentage)
        if pct is None or pct < 0 or pct > 100:
            raise InvalidInputError(
                f"percentage for '{symbol}' must be between 0 and 100"
            )
        object.__setattr__(self, "symbol", symbol)
        object.__setattr__(self, "percentage", pct)
        if self.species is not None and not isinstance(self.species, Species):
            try:
                object.__setattr__(self, "species", Species(str(self.species).casefold()))
            except ValueError as exc:
                raise InvalidInputError(f"Unknown species '{self.species}'") from exc

    @property
    def contribution(self) -> Contribution:
        """Return the bucket and ppm factor this element feeds into."""
        ionic = None if self.species is None else self.species is Species.IONIC
        return resolve_contribution(self.symbol, ionic)

    @property
    def is_ionic(self) -> bool:
        return self.contribution.ionic

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Element":
        return cls(
            symbol=data.get("symbol", ""),
            percentage=data.get("percentage"),
            species=data.get("species"),
        )

    def as_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"symbol": self.symbol, "percentage": self.percentage}
        if self.species is not None:
            data["species"] = self.species.value
        return data


@dataclass(frozen=True, slots=True)
class Substance:
    """A fertilizer salt or product and the elements it supplies."""

    id: str
    name: str
    formula: str = ""
    elements: tuple[Element, ...] = ()

    def __post_init__(self) -> None:
        if not str(self.id).strip():
            raise InvalidInputError("substance id must not be empty")
        elements = tuple(
            el if isinstance(el, Element) else Element.from_dict(el)
            for el in self.elements
        )
        object.__setattr__(self, "id", str(self.id))
        object.__setattr__(self, "elements", elements)

    @property
    def total_percentage(self) -> float:
        return sum(el.percentage for el in self.elements)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Substance":
        sid = data.get("id") or data.get("name") or ""
        return cls(
            id=str(sid),
            name=str(data.get("name") or sid),
            formula=str(data.get("formula") or ""),
            elements=tuple(data.get("elements") or ()),
        )

    def as_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "formula": self.formula,
            "elements": [el.as_dict() for el in self.elements],
        }


def _target_key(key: str) -> str:
    canonical = canonical_symbol(key)
    if canonical not in TARGET_KEYS:
        raise InvalidInputError(f"Unknown nutrient target '{key}'")
    return canonical


class NutrientTarget(Mapping[str, float]):
    """Target ppm per nutrient bucket.

    Keys are normalized (``"NO3-N"`` -> ``"NO3_N"``) and restricted to
    :data:`~solution_engine.constants.TARGET_KEYS`. A value of ``0`` means
    the nutrient is left unconstrained.
    """

    __slots__ = ("_values",)

    def __init__(self, values: Mapping[str, Any] | None = None, **kwargs: Any) -> None:
        merged: Dict[str, float] = {}
        for key, value in {**(values or {}), **kwargs}.items():
            number = to_float(value)
            if number is None or number < 0:
                raise InvalidInputError(f"target for '{key}' must be a number >= 0")
            canonical = _target_key(key)
            if canonical in merged:
                raise InvalidInputError(f"duplicate nutrient target '{key}'")
            merged[canonical] = number
        self._values = merged

    @classmethod
    def coerce(cls, targets: Mapping[str, Any]) -> "NutrientTarget":
        return targets if isinstance(targets, cls) else cls(targets)

    def __getitem__(self, key: str) -> float:
        return self._values[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __repr__(self) -> str:
        return f"NutrientTarget({self._values!r})"

    def positive(self) -> Dict[str, float]:
        """Return only the targets that take part in deviation scoring."""
        return {k: v for k, v in self._values.items() if v > 0}

    def as_dict(self) -> Dict[str, float]:
        return dict(self._values)


@dataclass(frozen=True, slots=True)
class SearchDiagnostics:
    """How the optimizer arrived at its answer."""

    sampled_deviation: float
    passes: int
    history: tuple[float, ...] = ()

    def as_dict(self) -> Dict[str, Any]:
        return {
            "sampled_deviation": self.sampled_deviation,
            "passes": self.passes,
            "history": list(self.history),
        }


def _frozen(mapping: Mapping[str, float]) -> Mapping[str, float]:
    return MappingProxyType(dict(mapping))


@dataclass(frozen=True)
class CalculationResult:
    """Outcome of a single solve call."""

    substance_weights: Mapping[str, float]
    total_weight: float
    achieved: Mapping[str, float]
    deviation: float
    element_deviations: Mapping[str, float] = field(default_factory=dict)
    ec: float | None = None
    diagnostics: SearchDiagnostics | None = None

    def __post_init__(self) -> None:
        if not math.isfinite(self.deviation) or self.deviation < 0:
            raise InvalidInputError("deviation must be a finite value >= 0")
        for name in ("substance_weights", "achieved", "element_deviations"):
            object.__setattr__(self, name, _frozen(getattr(self, name)))

    @property
    def rating(self) -> str:
        return precision_rating(self.deviation)

    def weight_for(self, substance_id: str) -> float:
        return self.substance_weights.get(substance_id, 0.0)

    def nonzero_weights(self) -> Dict[str, float]:
        """Return weights worth weighing out, skipping zero entries."""
        return {k: v for k, v in self.substance_weights.items() if v > 0}

    def achieved_by_category(self) -> Dict[str, Dict[str, float]]:
        """Return achieved ppm grouped as primary, secondary and micronutrient."""
        grouped: Dict[str, Dict[str, float]] = {}
        for nutrient, ppm in self.achieved.items():
            grouped.setdefault(category_for(nutrient), {})[nutrient] = ppm
        return grouped

    def as_dict(self) -> Dict[str, Any]:
        return {
            "substance_weights": dict(self.substance_weights),
            "total_weight": self.total_weight,
            "achieved": dict(self.achieved),
            "achieved_by_category": self.achieved_by_category(),
            "element_deviations": dict(self.element_deviations),
            "deviation": self.deviation,
            "rating": self.rating,
            "ec": self.ec,
            "diagnostics": self.diagnostics.as_dict() if self.diagnostics else None,
        }


def substances_from(items: Iterable[Substance | Mapping[str, Any]]) -> list[Substance]:
    """Return ``items`` as :class:`Substance` objects."""

    return [s if isinstance(s, Substance) else Substance.from_dict(s) for s in items]
