"""Convert substance weights into elemental ppm concentrations."""

from __future__ import annotations

import math
from typing import Dict, Sequence

from .exceptions import InvalidInputError
from .models import Substance

__all__ = ["ConcentrationModel", "calculate_concentrations", "element_ppm"]


def element_ppm(weight_g: float, percentage: float, volume_ml: float) -> float:
    """Return ppm (mg/L) of an element from ``weight_g`` of its substance."""

    element_grams = weight_g * percentage / 100
    volume_l = volume_ml / 1000
    return element_grams / volume_l * 1000


class ConcentrationModel:
    """Precomputed view of a substance list for repeated ppm evaluation.

    Each element entry is resolved to its target bucket once; evaluating a
    weight vector then only multiplies and sums.
    """

    __slots__ = ("substances", "volume_ml", "_terms")

    def __init__(self, substances: Sequence[Substance], volume_ml: float) -> None:
        if not math.isfinite(volume_ml) or volume_ml <= 0:
            raise InvalidInputError("solution volume must be greater than zero")
        self.substances = tuple(substances)
        self.volume_ml = float(volume_ml)
        self._terms = tuple(
            tuple(
                (el.contribution.bucket, el.percentage, el.contribution.factor, el.contribution.ionic)
                for el in substance.elements
            )
            for substance in self.substances
        )

    def __len__(self) -> int:
        return len(self.substances)

    def concentrations(self, weights: Sequence[float]) -> Dict[str, float]:
        """Return bucket -> ppm for ``weights`` (grams, one per substance)."""

        if len(weights) != len(self._terms):
            raise InvalidInputError(
                f"expected {len(self._terms)} weights, got {len(weights)}"
            )
        result: Dict[str, float] = {}
        for weight, terms in zip(weights, self._terms):
            for bucket, percentage, factor, ionic in terms:
                ppm = element_ppm(weight, percentage, self.volume_ml)
                if ionic:
                    ppm = ppm * factor
                result[bucket] = result.get(bucket, 0.0) + ppm
        return result


def calculate_concentrations(
    weights: Sequence[float],
    substances: Sequence[Substance],
    volume_ml: float,
) -> Dict[str, float]:
    """Return bucket -> ppm for ``weights`` of ``substances`` in ``volume_ml``.

    Ionic entries are first computed as ion ppm and then converted to the
    element they carry, e.g. nitrate to nitrate-nitrogen by ``14/62``.
    Weights must be finite and non-negative.
    """

    for weight in weights:
        if not math.isfinite(weight) or weight < 0:
            raise InvalidInputError(f"weight must be a finite value >= 0, got {weight!r}")
    return ConcentrationModel(substances, volume_ml).concentrations(weights)
