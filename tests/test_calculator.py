from __future__ import annotations

import pytest

from launchos_valuation.config import Settings
from launchos_valuation.models.berkus import BerkusFactors
from launchos_valuation.models.common import ProjectStage, StartupProfile, ValuationMethod
from launchos_valuation.models.valuation import RevenueMultipleInput, ValuationRequest, VCMethodInput
from launchos_valuation.sample_data import build_sample_request
from launchos_valuation.services.calculator import ValuationCalculator


def test_sample_request_generates_report():
    request = build_sample_request()
    calculator = ValuationCalculator(Settings())
    report = calculator.run(request)

    assert len(report.methods) == 6
    assert report.aggregated.valid_results == 6
    assert report.aggregated.low <= report.aggregated.mid <= report.aggregated.high
    assert 70 <= report.confidence.score <= 85
    assert report.validation_warnings == []
    assert report.improvements


def test_run_only_computes_supplied_methods():
    request = ValuationRequest(berkus=BerkusFactors())
    report = ValuationCalculator(Settings()).run(request)

    assert [result.method for result in report.methods] == [ValuationMethod.BERKUS]
    assert report.aggregated.mid == 1_250_000
    assert "Run at least two valuation methods to get a meaningful range" in report.improvements


def test_infeasible_vc_ask_is_excluded_from_range_but_reported():
    request = ValuationRequest(
        berkus=BerkusFactors(),
        vc_method=VCMethodInput(expected_exit_value=10_000_000, expected_return=10, investment_amount=1_000_000),
    )
    report = ValuationCalculator(Settings()).run(request)

    vc_result = next(result for result in report.methods if result.method == ValuationMethod.VC_METHOD)
    assert vc_result.value < 0
    assert report.aggregated.valid_results == 1
    assert report.aggregated.high == 1_250_000


def test_applicability_warnings_are_collected():
    request = ValuationRequest(
        profile=StartupProfile(stage=ProjectStage.LIVE, has_revenue=True),
        berkus=BerkusFactors(),
    )
    report = ValuationCalculator(Settings()).run(request)

    assert [warning.method for warning in report.applicability_warnings] == [ValuationMethod.BERKUS]


def test_settings_drive_defaults():
    settings = Settings(berkus_max_per_factor=100_000, weighting_strategy="confidence")
    report = ValuationCalculator(settings).run(ValuationRequest(berkus=BerkusFactors()))

    assert report.methods[0].value == 250_000
    assert report.aggregated.strategy == "confidence"


def test_request_weighting_overrides_settings():
    request = ValuationRequest(berkus=BerkusFactors(), weighting="confidence")
    report = ValuationCalculator(Settings(weighting_strategy="equal")).run(request)

    assert report.aggregated.strategy == "confidence"


def test_scorecard_weight_imbalance_surfaces_as_validation_warning():
    request = build_sample_request()
    factors = request.scorecard.factors.model_copy(update={"other": request.scorecard.factors.other.model_copy(update={"weight": 20})})
    request = request.model_copy(update={"scorecard": request.scorecard.model_copy(update={"factors": factors})})

    report = ValuationCalculator(Settings()).run(request)

    assert [warning.field for warning in report.validation_warnings] == ["weights"]


def test_configured_berkus_ceiling_respects_hard_cap():
    full = BerkusFactors(sound_idea=100, prototype=100, quality_team=100, strategic_relations=100, product_rollout=100)
    report = ValuationCalculator(Settings(berkus_max_per_factor=1_000_000)).run(ValuationRequest(berkus=full))

    assert report.methods[0].value == 2_500_000
    assert report.aggregated.high == 2_500_000


def test_vc_method_hint_when_below_blended_mid():
    request = ValuationRequest(
        berkus=BerkusFactors(),
        vc_method=VCMethodInput(expected_exit_value=20_000_000, expected_return=10, investment_amount=500_000),
    )
    report = ValuationCalculator(Settings()).run(request)

    assert report.aggregated.mid == pytest.approx(1_175_000)
    assert any(item.startswith("To lift the VC Method result by 7%") for item in report.improvements)


def test_revenue_multiple_blends_with_method_weights():
    request = ValuationRequest(
        berkus=BerkusFactors(),
        revenue_multiple=RevenueMultipleInput(monthly_revenue=10_000, industry="SaaS", growth_rate=25),
        weighting="method",
    )
    report = ValuationCalculator(Settings()).run(request)

    assert [result.method for result in report.methods] == [ValuationMethod.BERKUS, ValuationMethod.REVENUE_MULTIPLE]
    assert report.methods[1].value == pytest.approx(1_152_000)
    assert report.aggregated.strategy == "method"
    assert report.aggregated.mid == pytest.approx(1_188_750)
