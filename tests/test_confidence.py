from __future__ import annotations

import pytest

from launchos_valuation.models.common import ProjectStage, ValuationMethod, ValuationMethodResult
from launchos_valuation.models.confidence import ConfidenceInputs, ConfidenceLevel, DataSharingTier
from launchos_valuation.services.confidence import (
    TIER_CONFIDENCE_BANDS,
    assess_confidence,
    berkus_confidence,
    confidence_level,
    method_agreement,
    tier_for_completeness,
)


def _result(value: float, method: ValuationMethod = ValuationMethod.BERKUS) -> ValuationMethodResult:
    return ValuationMethodResult(method=method, value=value, confidence=60)


def _complete_inputs() -> ConfidenceInputs:
    return ConfidenceInputs(
        fields_filled=20,
        fields_total=20,
        has_revenue_data=True,
        has_user_data=True,
        has_relevant_experience=True,
        competitor_count=6,
        has_tam=True,
        has_sam=True,
        has_som=True,
        has_market_timing=True,
        has_market_type=True,
        stage=ProjectStage.IDEA,
    )


def test_complete_data_caps_at_ninety_five():
    results = [_result(1_000_000 + i, method) for i, method in enumerate(ValuationMethod)]
    assessment = assess_confidence(_complete_inputs(), results)

    assert assessment.tier == DataSharingTier.FULL
    assert assessment.factors.total() == 100
    assert assessment.score == 95
    assert assessment.level == ConfidenceLevel.HIGH
    assert assessment.suggestions == []


def test_empty_inputs_land_in_minimal_band():
    assessment = assess_confidence(ConfidenceInputs(fields_total=10))

    assert assessment.tier == DataSharingTier.MINIMAL
    assert assessment.score == 33
    assert "Without revenue data the valuation rests on qualitative factors." in assessment.explanations


def test_score_stays_inside_tier_band():
    for tier, (lower, upper) in TIER_CONFIDENCE_BANDS.items():
        for inputs in (ConfidenceInputs(tier=tier), _complete_inputs().model_copy(update={"tier": tier})):
            assessment = assess_confidence(inputs, [_result(500_000)])
            assert lower <= assessment.score <= upper
            assert assessment.score < 100


def test_suggestions_are_ordered_by_potential_increase():
    assessment = assess_confidence(ConfidenceInputs(fields_total=10))
    gains = [suggestion.potential_increase for suggestion in assessment.suggestions]

    assert gains == sorted(gains, reverse=True)
    assert [suggestion.factor for suggestion in assessment.suggestions] == [
        "data_completeness",
        "method_applicability",
        "data_quality",
        "market_data",
    ]


def test_stage_appropriate_method_raises_applicability():
    inputs = ConfidenceInputs(stage=ProjectStage.LIVE)
    with_dcf = assess_confidence(inputs, [_result(1_000, ValuationMethod.DCF)])
    with_berkus = assess_confidence(inputs, [_result(1_000, ValuationMethod.BERKUS)])

    assert with_dcf.factors.method_applicability == with_berkus.factors.method_applicability + 5


def test_fields_filled_beyond_total_is_capped():
    assessment = assess_confidence(ConfidenceInputs(fields_filled=50, fields_total=10))
    assert assessment.factors.data_completeness == 25


def test_method_agreement():
    assert method_agreement([]) == 0.5
    assert method_agreement([_result(1_000)]) == 0.5
    assert method_agreement([_result(1_000), _result(1_000)]) == pytest.approx(0.9)
    assert method_agreement([_result(1), _result(100)]) == pytest.approx(0.3)
    assert method_agreement([_result(1_000), _result(0), _result(-5)]) == 0.5


def test_berkus_confidence_penalises_missing_factors():
    assert berkus_confidence([50] * 5) == 70
    assert berkus_confidence([0] * 5) == 50
    assert berkus_confidence([0, 100, 0, 100, 0]) == 40


def test_tier_for_completeness_thresholds():
    assert tier_for_completeness(0.0) == DataSharingTier.MINIMAL
    assert tier_for_completeness(0.25) == DataSharingTier.BASIC
    assert tier_for_completeness(0.5) == DataSharingTier.DETAILED
    assert tier_for_completeness(0.8) == DataSharingTier.FULL


def test_confidence_level_thresholds():
    assert confidence_level(39) == ConfidenceLevel.LOW
    assert confidence_level(40) == ConfidenceLevel.MEDIUM
    assert confidence_level(69.9) == ConfidenceLevel.MEDIUM
    assert confidence_level(70) == ConfidenceLevel.HIGH
