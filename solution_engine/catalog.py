"""Bundled substance library and nutrient target presets.

Both datasets live in ``solution_engine/data`` and can be extended through
the overlay directories described in :mod:`solution_engine.utils`.
"""

from __future__ import annotations

import logging
from functools import lru_cache
from typing import Dict

from .models import NutrientTarget, Substance
from .utils import clear_dataset_cache, list_dataset_entries, load_dataset, normalize_key
from .validators import validate_substance, validate_targets

__all__ = [
    "SubstanceCatalog",
    "CATALOG",
    "list_substances",
    "get_substance",
    "list_target_presets",
    "get_target_preset",
]

_LOGGER = logging.getLogger(__name__)

SUBSTANCE_FILE = "substances.json"
PRESET_FILE = "target_presets.json"


class SubstanceCatalog:
    """Cached access to the substance and preset datasets."""

    @staticmethod
    @lru_cache(maxsize=None)
    def inventory() -> Dict[str, Substance]:
        data = load_dataset(SUBSTANCE_FILE)
        inv: Dict[str, Substance] = {}
        for sid, info in data.items():
            if not isinstance(info, dict):
                _LOGGER.warning("Skipping malformed substance entry '%s'", sid)
                continue
            inv[sid] = validate_substance({**info, "id": sid})
        return inv

    @staticmethod
    @lru_cache(maxsize=None)
    def presets() -> Dict[str, NutrientTarget]:
        data = load_dataset(PRESET_FILE)
        return {
            normalize_key(name): validate_targets(values)
            for name, values in data.items()
            if isinstance(values, dict)
        }

    def list_substances(self) -> list[str]:
        inv = self.inventory()
        return sorted(inv, key=lambda sid: inv[sid].name or sid)

    def get_substance(self, substance_id: str) -> Substance:
        inv = self.inventory()
        if substance_id not in inv:
            raise KeyError(f"Unknown substance '{substance_id}'")
        return inv[substance_id]

    def list_presets(self) -> list[str]:
        return list_dataset_entries(self.presets())

    def get_preset(self, name: str) -> NutrientTarget:
        presets = self.presets()
        key = normalize_key(name)
        if key not in presets:
            raise KeyError(f"Unknown target preset '{name}'")
        return presets[key]

    @classmethod
    def clear_cache(cls) -> None:
        """Forget loaded datasets so overlay changes are picked up."""
        cls.inventory.cache_clear()
        cls.presets.cache_clear()
        clear_dataset_cache()


CATALOG = SubstanceCatalog()


def list_substances() -> list[str]:
    """Return catalog substance ids sorted by display name."""
    return CATALOG.list_substances()


def get_substance(substance_id: str) -> Substance:
    """Return the catalog :class:`Substance` for ``substance_id``."""
    return CATALOG.get_substance(substance_id)


def list_target_presets() -> list[str]:
    """Return available nutrient target preset names."""
    return CATALOG.list_presets()


def get_target_preset(name: str) -> NutrientTarget:
    """Return the :class:`NutrientTarget` for preset ``name``."""
    return CATALOG.get_preset(name)
