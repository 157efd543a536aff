"""Schemas for substance, target and solve-request documents.

These mirror the checks a form or storage layer performs before calling the
solver: custom substances must list at least one element and every
percentage must be greater than zero. Label analyses given on an oxide
basis (``P2O5``, ``K2O``, ...) are converted to elements on load.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

import voluptuous as vol

from .exceptions import InvalidInputError
from .models import Element, NutrientTarget, Species, Substance
from .nutrient_conversion import convert_analysis
from .utils import to_float

__all__ = [
    "SubstanceValidationError",
    "ELEMENT_SCHEMA",
    "SUBSTANCE_SCHEMA",
    "TARGETS_SCHEMA",
    "SOLVE_REQUEST_SCHEMA",
    "validate_substance",
    "validate_targets",
    "validate_request",
]


class SubstanceValidationError(vol.Invalid):
    """Raised when a substance or target document is rejected."""


def _positive_percentage(value: Any) -> float:
    number = to_float(value)
    if number is None:
        raise vol.Invalid("percentage must be a number")
    if number <= 0:
        raise vol.Invalid("percentage must be greater than 0")
    if number > 100:
        raise vol.Invalid("percentage must not exceed 100")
    return number


def _non_negative(value: Any) -> float:
    number = to_float(value)
    if number is None or number < 0:
        raise vol.Invalid("expected a number >= 0")
    return number


def _positive(value: Any) -> float:
    number = to_float(value)
    if number is None or number <= 0:
        raise vol.Invalid("expected a number > 0")
    return number


def _has_composition(data: dict) -> dict:
    if not data.get("elements") and not data.get("analysis"):
        raise vol.Invalid("substance needs at least one element")
    return data


ELEMENT_SCHEMA = vol.Schema(
    {
        vol.Required("symbol"): vol.All(str, vol.Strip, vol.Length(min=1)),
        vol.Required("percentage"): _positive_percentage,
        vol.Optional("species"): vol.All(
            str, vol.Lower, vol.In([s.value for s in Species])
        ),
    }
)

SUBSTANCE_SCHEMA = vol.All(
    vol.Schema(
        {
            vol.Required("id"): vol.All(vol.Coerce(str), vol.Strip, vol.Length(min=1)),
            vol.Optional("name"): vol.Coerce(str),
            vol.Optional("formula", default=""): vol.Coerce(str),
            vol.Optional("elements", default=list): [ELEMENT_SCHEMA],
            vol.Optional("analysis"): {vol.Coerce(str): _positive_percentage},
        },
        extra=vol.REMOVE_EXTRA,
    ),
    _has_composition,
)

TARGETS_SCHEMA = vol.Schema({vol.Coerce(str): _non_negative})

SOLVE_REQUEST_SCHEMA = vol.Schema(
    {
        vol.Required("substances"): [vol.Any(vol.All(str, vol.Length(min=1)), dict)],
        vol.Optional("targets"): dict,
        vol.Optional("preset"): str,
        vol.Optional("volume"): _positive,
        vol.Optional("unit", default="mL"): str,
    }
)


def validate_substance(data: Mapping[str, Any]) -> Substance:
    """Return a :class:`Substance` built from a validated document.

    Oxide entries in ``analysis`` become elements; ion entries such as
    ``NO3`` keep their ionic conversion.
    """

    try:
        doc = SUBSTANCE_SCHEMA(dict(data))
    except vol.Invalid as exc:
        raise SubstanceValidationError(str(exc), path=exc.path) from exc

    try:
        elements = [Element.from_dict(el) for el in doc["elements"]]
        for symbol, pct in convert_analysis(doc.get("analysis", {})).items():
            elements.append(Element(symbol, pct))
        return Substance(
            id=doc["id"],
            name=doc.get("name") or doc["id"],
            formula=doc["formula"],
            elements=tuple(elements),
        )
    except InvalidInputError as exc:
        raise SubstanceValidationError(str(exc)) from exc


def validate_targets(data: Mapping[str, Any]) -> NutrientTarget:
    """Return a :class:`NutrientTarget` built from a validated document."""

    try:
        return NutrientTarget(TARGETS_SCHEMA(dict(data)))
    except vol.Invalid as exc:
        raise SubstanceValidationError(str(exc), path=exc.path) from exc
    except InvalidInputError as exc:
        raise SubstanceValidationError(str(exc)) from exc


def validate_request(data: Mapping[str, Any]) -> dict:
    """Return a solve request document with defaults applied."""

    try:
        doc = SOLVE_REQUEST_SCHEMA(dict(data))
    except vol.Invalid as exc:
        raise SubstanceValidationError(str(exc), path=exc.path) from exc
    if "targets" not in doc and "preset" not in doc:
        raise SubstanceValidationError("request needs targets or a preset")
    return doc
