import pytest

from solution_engine import RecipeError, SolutionVolume, SolverSettings, solve
from solution_engine.recipes import (
    attach_weights,
    build_recipe,
    recipe_from_dict,
    scale_recipe,
)

TARGETS = {"NO3_N": 150, "K": 200, "Ca": 150}


@pytest.fixture
def solved(potassium_nitrate, calcium_nitrate, rng):
    substances = [potassium_nitrate, calcium_nitrate]
    result = solve(substances, TARGETS, 1000, rng=rng, settings=SolverSettings(trials=100))
    return substances, result


def test_attach_weights(solved):
    substances, result = solved
    items = attach_weights(substances, result)
    assert [item.substance.id for item in items] == ["kno3", "cano3"]
    assert [item.weight for item in items] == [
        result.substance_weights["kno3"],
        result.substance_weights["cano3"],
    ]


def test_build_recipe(solved):
    substances, result = solved
    recipe = build_recipe(
        "  Tomato veg ", substances, TARGETS, SolutionVolume(1, "L"), result, tags=["tomato"]
    )
    assert recipe.name == "Tomato veg"
    assert recipe.total_weight == pytest.approx(result.total_weight)
    assert recipe.deviation == result.deviation
    assert recipe.ec == result.ec
    assert recipe.tags == ("tomato",)
    for key, ppm in recipe.achieved().items():
        assert ppm == pytest.approx(result.achieved[key], abs=0.01)


def test_build_recipe_requires_result(potassium_nitrate):
    with pytest.raises(RecipeError):
        build_recipe("x", [potassium_nitrate], TARGETS, SolutionVolume(1000), None)


def test_build_recipe_requires_name_and_substances(solved):
    substances, result = solved
    with pytest.raises(RecipeError):
        build_recipe(" ", substances, TARGETS, SolutionVolume(1000), result)
    with pytest.raises(RecipeError):
        build_recipe("x", [], TARGETS, SolutionVolume(1000), result)


def test_scale_recipe_keeps_concentrations(solved):
    substances, result = solved
    recipe = build_recipe("base", substances, TARGETS, SolutionVolume(1000), result)
    bigger = scale_recipe(recipe, SolutionVolume(10, "L"))

    assert bigger.total_weight == pytest.approx(recipe.total_weight * 10)
    for key, ppm in recipe.achieved().items():
        assert bigger.achieved()[key] == pytest.approx(ppm)
    assert bigger.ec == pytest.approx(recipe.ec, abs=0.002)


def test_recipe_from_dict(solved):
    substances, result = solved
    recipe = build_recipe("stored", substances, TARGETS, SolutionVolume(2, "L"), result)
    restored = recipe_from_dict(recipe.as_dict())

    assert restored.name == "stored"
    assert restored.volume == SolutionVolume(2, "L")
    assert restored.weights() == recipe.weights()
    assert restored.targets.as_dict() == recipe.targets.as_dict()
