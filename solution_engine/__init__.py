"""Nutrient solution solver for hydroponic fertigation."""

from __future__ import annotations

from .exceptions import InvalidInputError, RecipeError
from .models import (
    CalculationResult,
    Element,
    NutrientTarget,
    SearchDiagnostics,
    Species,
    Substance,
)
from .optimizer import SolverSettings, default_random_source
from .solver import SolutionSolver, solve
from .volume import SolutionVolume

__all__ = [
    "CalculationResult",
    "Element",
    "InvalidInputError",
    "NutrientTarget",
    "RecipeError",
    "SearchDiagnostics",
    "SolutionSolver",
    "SolutionVolume",
    "SolverSettings",
    "Species",
    "Substance",
    "default_random_source",
    "solve",
]
