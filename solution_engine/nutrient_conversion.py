"""Helpers for converting ion and oxide measurements to elemental values."""

from __future__ import annotations

import logging
import re
from functools import lru_cache
from typing import Dict, Mapping, NamedTuple

from .constants import ION_CONVERSIONS, OXIDE_CONVERSIONS, TARGET_ALIASES, TARGET_KEYS
from .utils import normalize_key, to_float

__all__ = [
    "Contribution",
    "canonical_symbol",
    "resolve_contribution",
    "ion_to_element_ppm",
    "element_from_oxide",
    "convert_analysis",
]

_LOGGER = logging.getLogger(__name__)

_SUPERSCRIPT_CHARGE = "⁰¹²³⁴⁵⁶⁷⁸⁹⁺⁻"
_SIGN_RE = re.compile(r"[+-]+$")
_CHARGE_RE = re.compile(r"\s*\d*[+-]+$")

_KNOWN_SYMBOLS: Dict[str, str] = {
    sym.casefold(): sym
    for sym in (*TARGET_KEYS, *ION_CONVERSIONS, *OXIDE_CONVERSIONS)
}


class Contribution(NamedTuple):
    """Where one element entry lands and how its ppm is scaled."""

    bucket: str
    factor: float
    ionic: bool


@lru_cache(maxsize=None)
def canonical_symbol(symbol: str) -> str:
    """Return ``symbol`` reduced to its canonical element, ion or bucket code.

    Parenthetical qualifiers and charge marks are dropped so ``"N (ureic)"``
    becomes ``"N"`` and ``"SO4²⁻"`` becomes ``"SO4"``. Elemental spellings of
    the nitrogen forms (``"NO3-N"``, ``"N-NH4"``) map to ``NO3_N``/``NH4_N``.
    Unrecognised symbols are returned stripped but otherwise untouched.
    """

    raw = str(symbol).strip()
    alias = TARGET_ALIASES.get(normalize_key(raw))
    if alias:
        return alias

    value = raw.split("(", 1)[0].strip() or raw
    value = value.rstrip(_SUPERSCRIPT_CHARGE)

    # "H2PO4-" keeps its digits while "Ca2+" and "SO4 2-" lose the charge number
    candidates = (_SIGN_RE.sub("", value), _CHARGE_RE.sub("", value))
    for candidate in candidates:
        compact = "".join(candidate.split())
        known = _KNOWN_SYMBOLS.get(compact.casefold())
        if known:
            return known
        alias = TARGET_ALIASES.get(normalize_key(candidate))
        if alias:
            return alias
    return "".join(candidates[0].split())


@lru_cache(maxsize=None)
def resolve_contribution(symbol: str, ionic: bool | None = None) -> Contribution:
    """Return the target bucket and ppm factor for an element entry.

    ``ionic`` of ``None`` infers the species from the ion table. An entry
    flagged ionic whose ion is unknown is counted as elemental.
    """

    sym = canonical_symbol(symbol)
    if ionic is None:
        ionic = sym in ION_CONVERSIONS
    if ionic:
        conversion = ION_CONVERSIONS.get(sym)
        if conversion is not None:
            bucket, factor = conversion
            return Contribution(bucket, factor, True)
        _LOGGER.warning("Unknown ion '%s'; counting it as elemental", symbol)
    return Contribution(sym, 1.0, False)


def ion_to_element_ppm(ion: str, ppm: float) -> float:
    """Return element ppm for ``ppm`` of ``ion`` (e.g. NO3 -> nitrate-N)."""

    sym = canonical_symbol(ion)
    if sym not in ION_CONVERSIONS:
        raise KeyError(f"Unknown ion '{ion}'")
    _, factor = ION_CONVERSIONS[sym]
    return ppm * factor


def element_from_oxide(oxide: str, percentage: float) -> tuple[str, float]:
    """Return ``(element, percentage)`` for an oxide-basis label value."""

    if percentage < 0:
        raise ValueError("percentage must be non-negative")
    sym = canonical_symbol(oxide)
    if sym not in OXIDE_CONVERSIONS:
        raise KeyError(f"Unknown oxide '{oxide}'")
    element, factor = OXIDE_CONVERSIONS[sym]
    return element, percentage * factor


def convert_analysis(analysis: Mapping[str, float]) -> Dict[str, float]:
    """Return a label analysis with oxide entries converted to elements.

    Non-numeric values are skipped. Entries that convert to the same element
    are summed, so ``{"K2O": 46, "K": 1}`` yields a single ``K`` value.
    """

    result: Dict[str, float] = {}
    for key, value in analysis.items():
        number = to_float(value)
        if number is None:
            continue
        sym = canonical_symbol(key)
        if sym in OXIDE_CONVERSIONS:
            sym, number = element_from_oxide(sym, number)
        result[sym] = result.get(sym, 0.0) + number
    return result
