import random

import numpy as np
import pytest

from solution_engine.catalog import CATALOG
from solution_engine.models import Element, Species, Substance


@pytest.fixture
def rng():
    return np.random.default_rng(42)


@pytest.fixture
def potassium_nitrate():
    return Substance(
        id="kno3",
        name="Potassium nitrate",
        formula="KNO3",
        elements=(
            Element("NO3", 13.85, Species.IONIC),
            Element("K", 38.67, Species.ELEMENTAL),
        ),
    )


@pytest.fixture
def calcium_nitrate():
    return Substance(
        id="cano3",
        name="Calcium nitrate",
        formula="Ca(NO3)2",
        elements=(
            Element("NO3", 52.51, Species.IONIC),
            Element("Ca", 16.97, Species.ELEMENTAL),
        ),
    )


class SequenceRandom:
    """Random source replaying fixed values."""

    def __init__(self, values):
        self._values = list(values)

    def uniform(self, low, high):
        return self._values.pop(0)


@pytest.fixture
def sequence_random():
    return SequenceRandom


@pytest.fixture
def python_random():
    return random.Random(1234)


@pytest.fixture(autouse=True)
def _isolated_datasets(monkeypatch):
    for env in (
        "SOLUTION_ENGINE_DATA_DIR",
        "SOLUTION_ENGINE_EXTRA_DATA_DIRS",
        "SOLUTION_ENGINE_OVERLAY_DIR",
        "SOLUTION_ENGINE_SEED",
    ):
        monkeypatch.delenv(env, raising=False)
    CATALOG.clear_cache()
    yield
    CATALOG.clear_cache()
