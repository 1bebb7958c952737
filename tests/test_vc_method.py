from __future__ import annotations

import itertools

import pytest

from launchos_valuation.models.common import StartupProfile, ValuationMethod
from launchos_valuation.models.valuation import VCMethodInput
from launchos_valuation.services.methods import calculate_vc_method, suggest_vc_method_improvements


def test_reference_scenario():
    data = VCMethodInput(
        expected_exit_value=20_000_000,
        years_to_exit=5,
        expected_return=10,
        investment_amount=1_000_000,
        dilution_assumption=20,
    )
    result = calculate_vc_method(data)

    assert result.method == ValuationMethod.VC_METHOD
    assert result.breakdown["post_money"] == pytest.approx(2_000_000)
    assert result.breakdown["dilution_adjustment"] == pytest.approx(400_000)
    assert result.breakdown["adjusted_post_money"] == pytest.approx(1_600_000)
    assert result.breakdown["pre_money"] == pytest.approx(600_000)
    assert result.breakdown["implied_ownership"] == pytest.approx(62.5)
    assert result.value == pytest.approx(600_000)
    assert "High investor ownership; check the room for negotiation" in result.notes


def test_pre_money_plus_investment_equals_adjusted_post_money():
    grid = itertools.product([5_000_000, 50_000_000], [3, 10, 25], [0, 20, 45], [250_000, 2_000_000])
    for exit_value, multiple, dilution, investment in grid:
        result = calculate_vc_method(
            VCMethodInput(
                expected_exit_value=exit_value,
                expected_return=multiple,
                dilution_assumption=dilution,
                investment_amount=investment,
            )
        )
        assert result.breakdown["pre_money"] + investment == pytest.approx(result.breakdown["adjusted_post_money"])


def test_negative_pre_money_is_preserved_and_flagged():
    data = VCMethodInput(expected_exit_value=10_000_000, expected_return=10, investment_amount=1_000_000)
    result = calculate_vc_method(data)

    assert result.value == pytest.approx(-200_000)
    assert any(note.startswith("Infeasible ask") for note in result.notes)


def test_ask_equal_to_post_money_is_flagged():
    data = VCMethodInput(
        expected_exit_value=10_000_000, expected_return=10, investment_amount=1_000_000, dilution_assumption=0
    )
    result = calculate_vc_method(data)

    assert result.value == 0
    assert any(note.startswith("Infeasible ask") for note in result.notes)


def test_non_positive_return_multiple_does_not_raise():
    data = VCMethodInput(expected_exit_value=10_000_000, expected_return=0, investment_amount=500_000)
    result = calculate_vc_method(data)

    assert result.breakdown["post_money"] == 0
    assert result.breakdown["implied_ownership"] == 0
    assert result.value == pytest.approx(-500_000)
    assert "Expected return multiple must be positive; post-money set to 0" in result.notes


def test_dilution_is_clamped():
    data = VCMethodInput(
        expected_exit_value=10_000_000, expected_return=10, investment_amount=100_000, dilution_assumption=150
    )
    result = calculate_vc_method(data)

    assert result.breakdown["adjusted_post_money"] == 0
    assert any("dilution_assumption" in note for note in result.notes)


def test_confidence_penalties_and_floor():
    typical = VCMethodInput(expected_exit_value=20_000_000, years_to_exit=5, expected_return=10, investment_amount=500_000)
    assert calculate_vc_method(typical).confidence == 60

    risky = VCMethodInput(
        expected_exit_value=200_000_000, years_to_exit=10, expected_return=25, investment_amount=500_000
    )
    assert calculate_vc_method(risky).confidence == 35


def test_speculative_without_exit_scenario_or_traction():
    data = VCMethodInput(expected_exit_value=20_000_000, investment_amount=500_000)

    assert len(calculate_vc_method(data, profile=StartupProfile()).warnings) == 1
    assert calculate_vc_method(data, profile=StartupProfile(has_traction=True)).warnings == []


def test_improvement_suggestions():
    suggestions = suggest_vc_method_improvements(1_000_000, 1_500_000)

    assert len(suggestions) == 1
    assert suggestions[0].startswith("To lift the VC Method result by 50%")
    assert suggest_vc_method_improvements(1_000_000, 900_000) == []
    assert suggest_vc_method_improvements(0, 900_000) == []
