import pytest
import voluptuous as vol

from solution_engine.concentration import calculate_concentrations
from solution_engine.models import Species
from solution_engine.validators import (
    SubstanceValidationError,
    validate_request,
    validate_substance,
    validate_targets,
)


def test_validate_substance_defaults():
    substance = validate_substance(
        {"id": "kno3", "elements": [{"symbol": " K ", "percentage": "38.67"}], "note": "x"}
    )
    assert substance.name == "kno3"
    assert substance.formula == ""
    assert substance.elements[0].symbol == "K"
    assert substance.elements[0].percentage == 38.67


def test_species_is_case_insensitive():
    substance = validate_substance(
        {"id": "a", "elements": [{"symbol": "NO3", "percentage": 60, "species": "Ionic"}]}
    )
    assert substance.elements[0].species is Species.IONIC


@pytest.mark.parametrize("pct", [0, -3, 101, "abc"])
def test_percentage_must_be_positive(pct):
    with pytest.raises(SubstanceValidationError):
        validate_substance({"id": "bad", "elements": [{"symbol": "K", "percentage": pct}]})


def test_substance_needs_elements():
    with pytest.raises(SubstanceValidationError):
        validate_substance({"id": "empty", "elements": []})


def test_unknown_species_rejected():
    with pytest.raises(SubstanceValidationError):
        validate_substance(
            {"id": "a", "elements": [{"symbol": "K", "percentage": 5, "species": "gas"}]}
        )


def test_oxide_analysis_converted():
    substance = validate_substance(
        {"id": "mkp_label", "name": "MKP 0-52-34", "analysis": {"P2O5": 52, "K2O": 34}}
    )
    values = {el.symbol: el.percentage for el in substance.elements}
    assert values["P"] == pytest.approx(52 * 0.436)
    assert values["K"] == pytest.approx(34 * 0.830)
    assert not any(el.is_ionic for el in substance.elements)


def test_ion_analysis_keeps_ionic_conversion():
    substance = validate_substance({"id": "nitrate_label", "analysis": {"NO3": 60}})
    assert substance.elements[0].is_ionic
    result = calculate_concentrations([1.0], [substance], 1000)
    assert result == {"NO3_N": pytest.approx(600 * 14 / 62)}


def test_analysis_over_full_mass_rejected():
    with pytest.raises(SubstanceValidationError):
        validate_substance({"id": "too_much_k", "analysis": {"K2O": 60, "K": 60}})


def test_validation_error_is_voluptuous_invalid():
    with pytest.raises(vol.Invalid):
        validate_substance({"elements": [{"symbol": "K", "percentage": 5}]})


def test_validate_targets():
    targets = validate_targets({"nitrate-N": "150", "K": 200})
    assert targets.as_dict() == {"NO3_N": 150.0, "K": 200.0}


@pytest.mark.parametrize("data", [{"K": -1}, {"K": "lots"}, {"Xx": 5}])
def test_validate_targets_rejects(data):
    with pytest.raises(SubstanceValidationError):
        validate_targets(data)


def test_validate_request_defaults():
    doc = validate_request({"substances": ["potassium_nitrate"], "preset": "general"})
    assert doc["unit"] == "mL"


def test_validate_request_needs_targets():
    with pytest.raises(SubstanceValidationError):
        validate_request({"substances": ["potassium_nitrate"], "volume": 1000})


def test_validate_request_volume_positive():
    with pytest.raises(SubstanceValidationError):
        validate_request({"substances": [], "targets": {"K": 1}, "volume": 0})
