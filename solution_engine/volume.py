"""Solution volume handling.

All concentrations are computed against milliliters. Volumes entered in
liters or US gallons are converted once, up front, so a volume of ``1 L``
and ``1000 mL`` produce identical ppm values.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

from .constants import VOLUME_UNITS
from .exceptions import InvalidInputError

__all__ = ["SolutionVolume", "normalize_unit", "to_milliliters", "convert_volume"]

_UNIT_ALIASES = {
    "ml": "mL",
    "milliliter": "mL",
    "milliliters": "mL",
    "l": "L",
    "liter": "L",
    "liters": "L",
    "litre": "L",
    "litres": "L",
    "gal": "gal",
    "gallon": "gal",
    "gallons": "gal",
}


def normalize_unit(unit: str) -> str:
    """Return the canonical unit code for ``unit`` (``mL``, ``L`` or ``gal``)."""

    code = _UNIT_ALIASES.get(str(unit).strip().casefold())
    if code is None:
        raise InvalidInputError(f"Unknown volume unit '{unit}'")
    return code


def to_milliliters(value: float, unit: str = "mL") -> float:
    """Return ``value`` expressed in ``unit`` as milliliters."""

    return float(value) * VOLUME_UNITS[normalize_unit(unit)]


def convert_volume(value: float, from_unit: str, to_unit: str) -> float:
    """Return ``value`` converted between units, rounded for display."""

    ml = to_milliliters(value, from_unit)
    return round(ml / VOLUME_UNITS[normalize_unit(to_unit)], 3)


@dataclass(frozen=True, slots=True)
class SolutionVolume:
    """Volume of the final nutrient solution."""

    value: float
    unit: str = "mL"

    def __post_init__(self) -> None:
        object.__setattr__(self, "unit", normalize_unit(self.unit))
        try:
            value = float(self.value)
        except (TypeError, ValueError) as exc:
            raise InvalidInputError(f"Invalid volume {self.value!r}") from exc
        if not math.isfinite(value) or value <= 0:
            raise InvalidInputError("solution volume must be greater than zero")
        object.__setattr__(self, "value", value)

    @property
    def milliliters(self) -> float:
        return self.value * VOLUME_UNITS[self.unit]

    @property
    def liters(self) -> float:
        return self.milliliters / 1000

    def to(self, unit: str) -> "SolutionVolume":
        """Return this volume re-expressed in ``unit`` (display rounding)."""

        code = normalize_unit(unit)
        return SolutionVolume(round(self.milliliters / VOLUME_UNITS[code], 3), code)
