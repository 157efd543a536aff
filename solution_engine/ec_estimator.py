"""Electrical conductivity (EC) estimates for a nutrient solution.

EC is approximated from molar conductivity: each ion's ppm is converted to
mol/L and multiplied by its molar conductivity. Phosphorus is assumed to be
present as H2PO4- and sulfur as SO4 2-, a simplification rather than a
speciation model. Nutrients without an ion entry (boron, silicon, urea
nitrogen, unknown symbols) do not contribute.
"""

from __future__ import annotations

from typing import Dict, Mapping

from .constants import ION_CONDUCTIVITY

__all__ = [
    "ec_contributions",
    "estimate_ec",
]


def ec_contributions(concentrations: Mapping[str, float]) -> Dict[str, float]:
    """Return unrounded EC (mS/cm) contributed by each nutrient bucket."""

    result: Dict[str, float] = {}
    for nutrient, ppm in concentrations.items():
        entry = ION_CONDUCTIVITY.get(nutrient)
        if entry is None or ppm <= 0:
            continue
        _, molar_mass, molar_conductivity = entry
        mol_per_l = ppm / (molar_mass * 1000)
        result[nutrient] = molar_conductivity * mol_per_l
    return result


def estimate_ec(concentrations: Mapping[str, float]) -> float:
    """Return estimated EC in mS/cm rounded to three decimals."""

    return round(sum(ec_contributions(concentrations).values()), 3)

