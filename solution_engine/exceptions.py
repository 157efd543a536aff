"""Exceptions raised by the solution engine."""

from __future__ import annotations

__all__ = ["InvalidInputError", "RecipeError"]


class InvalidInputError(ValueError):
    """Raised when solver input cannot produce meaningful concentrations."""


class RecipeError(ValueError):
    """Raised when a recipe cannot be built from a calculation."""
