import pytest

from solution_engine import ec_estimator


def test_single_ion_contribution():
    # 391 ppm K is 0.01 mol/L
    assert ec_estimator.estimate_ec({"K": 391}) == pytest.approx(0.735, abs=0.001)
    # 140 ppm nitrate-N is 0.01 mol/L nitrate
    assert ec_estimator.estimate_ec({"NO3_N": 140}) == pytest.approx(0.714, abs=0.001)


def test_contributions_are_summed():
    contributions = ec_estimator.ec_contributions({"K": 391, "NO3_N": 140})
    assert set(contributions) == {"K", "NO3_N"}
    total = ec_estimator.estimate_ec({"K": 391, "NO3_N": 140})
    assert total == round(sum(contributions.values()), 3)


def test_phosphorus_and_sulfur_species():
    p_ec = ec_estimator.estimate_ec({"P": 31})
    s_ec = ec_estimator.estimate_ec({"S": 32})
    assert p_ec == pytest.approx(0.036, abs=0.001)
    assert s_ec == pytest.approx(0.160, abs=0.001)


def test_non_ionic_and_unknown_are_ignored():
    assert ec_estimator.estimate_ec({"B": 0.5, "Si": 20, "N": 100, "Co": 1}) == 0.0
    assert ec_estimator.estimate_ec({"K": 0}) == 0.0
    assert ec_estimator.estimate_ec({}) == 0.0


def test_rounded_to_three_decimals():
    value = ec_estimator.estimate_ec({"K": 123.456, "Ca": 78.9, "Mg": 12.3})
    assert value == round(value, 3)

