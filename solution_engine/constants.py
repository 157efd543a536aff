"""Fixed chemistry tables shared across the solution engine.

Molar masses use the rounded values growers find on fertilizer labels so
that ratios such as nitrate to nitrate-nitrogen (14/62) match the figures
printed in nutrient recipes. Changing any value alters the grams produced
when a saved recipe is solved again.
"""

from __future__ import annotations

from typing import Dict, Tuple

__all__ = [
    "TARGET_KEYS",
    "MACRONUTRIENTS",
    "MICRONUTRIENTS",
    "NUTRIENT_CATEGORIES",
    "TARGET_ALIASES",
    "ION_CONVERSIONS",
    "OXIDE_CONVERSIONS",
    "ION_CONDUCTIVITY",
    "VOLUME_UNITS",
]

# Target buckets accepted by the solver. ``N`` holds nitrogen that is neither
# nitrate nor ammonium (urea, organic N).
MACRONUTRIENTS: Tuple[str, ...] = ("NO3_N", "NH4_N", "N", "P", "K", "Ca", "Mg", "S")
MICRONUTRIENTS: Tuple[str, ...] = (
    "Fe",
    "Mn",
    "Zn",
    "B",
    "Cu",
    "Mo",
    "Si",
    "Na",
    "Cl",
)
TARGET_KEYS: Tuple[str, ...] = MACRONUTRIENTS + MICRONUTRIENTS

NUTRIENT_CATEGORIES: Dict[str, str] = {
    "NO3_N": "primary",
    "NH4_N": "primary",
    "N": "primary",
    "P": "primary",
    "K": "primary",
    "Ca": "secondary",
    "Mg": "secondary",
    "S": "secondary",
    **{sym: "micronutrient" for sym in MICRONUTRIENTS},
}

# Elemental spellings of the two nitrogen forms, keyed by normalized text.
TARGET_ALIASES: Dict[str, str] = {
    "no3_n": "NO3_N",
    "n_no3": "NO3_N",
    "nitrate_n": "NO3_N",
    "nitrate_nitrogen": "NO3_N",
    "nh4_n": "NH4_N",
    "n_nh4": "NH4_N",
    "ammonium_n": "NH4_N",
    "ammonium_nitrogen": "NH4_N",
}

# ion -> (target bucket, element mass / ion mass)
ION_CONVERSIONS: Dict[str, Tuple[str, float]] = {
    "NO3": ("NO3_N", 14.0 / 62.0),
    "NH4": ("NH4_N", 14.0 / 18.0),
    "H2PO4": ("P", 31.0 / 97.0),
    "HPO4": ("P", 31.0 / 96.0),
    "PO4": ("P", 31.0 / 95.0),
    "SO4": ("S", 32.0 / 96.0),
    "MoO4": ("Mo", 96.0 / 160.0),
    "BO3": ("B", 10.8 / 58.8),
}

# oxide -> (element, element mass fraction of the oxide)
OXIDE_CONVERSIONS: Dict[str, Tuple[str, float]] = {
    "P2O5": ("P", 0.436),
    "K2O": ("K", 0.830),
    "CaO": ("Ca", 0.715),
    "MgO": ("Mg", 0.603),
    "SO3": ("S", 0.400),
    "SiO2": ("Si", 0.467),
}

# bucket -> (ion, molar mass of the bucket element g/mol, molar conductivity
# S*cm2/mol). Molar conductivity times mol/L gives mS/cm directly.
# Phosphorus is counted as H2PO4- and sulfur as SO4 2-.
ION_CONDUCTIVITY: Dict[str, Tuple[str, float, float]] = {
    "NO3_N": ("NO3-", 14.0, 71.4),
    "NH4_N": ("NH4+", 14.0, 73.5),
    "P": ("H2PO4-", 31.0, 36.0),
    "K": ("K+", 39.1, 73.5),
    "Ca": ("Ca2+", 40.08, 119.0),
    "Mg": ("Mg2+", 24.31, 106.0),
    "S": ("SO4 2-", 32.0, 160.0),
    "Fe": ("Fe2+", 55.85, 108.0),
    "Mn": ("Mn2+", 54.94, 107.0),
    "Zn": ("Zn2+", 65.38, 105.6),
    "Cu": ("Cu2+", 63.55, 107.2),
    "Mo": ("MoO4 2-", 95.95, 149.0),
    "Na": ("Na+", 22.99, 50.1),
    "Cl": ("Cl-", 35.45, 76.3),
}

# milliliters per unit
VOLUME_UNITS: Dict[str, float] = {
    "mL": 1.0,
    "L": 1000.0,
    "gal": 3785.41,
}
