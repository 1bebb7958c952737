"""Confidence scoring for valuation results.

Founders rarely have complete data, so every estimate carries a confidence
percentage. Per-method heuristics look at the shape of a method's inputs;
``assess_confidence`` looks at how much of the overall questionnaire was
answered and places the result inside the band of its data-sharing tier.
No band reaches 100%.
"""
from __future__ import annotations

import logging
import math
from typing import Dict, List, Sequence, Tuple

from ..models.common import ProjectStage, ValuationMethod, ValuationMethodResult, clamp
from ..models.confidence import (
    ConfidenceFactors,
    ConfidenceInputs,
    ConfidenceLevel,
    ConfidenceResult,
    DataSharingTier,
    ImprovementSuggestion,
)
from ..models.valuation import DCFInput, VCMethodInput

logger = logging.getLogger(__name__)

TIER_CONFIDENCE_BANDS: Dict[DataSharingTier, Tuple[float, float]] = {
    DataSharingTier.MINIMAL: (30.0, 50.0),
    DataSharingTier.BASIC: (50.0, 70.0),
    DataSharingTier.DETAILED: (70.0, 85.0),
    DataSharingTier.FULL: (85.0, 95.0),
}

MAX_FACTOR_SCORE = 25.0

IDEAL_METHODS_BY_STAGE: Dict[ProjectStage, Tuple[ValuationMethod, ...]] = {
    ProjectStage.IDEA: (ValuationMethod.BERKUS, ValuationMethod.SCORECARD),
    ProjectStage.LIVE: (ValuationMethod.DCF, ValuationMethod.COMPARABLES, ValuationMethod.VC_METHOD),
    ProjectStage.SCALING: (ValuationMethod.DCF, ValuationMethod.COMPARABLES, ValuationMethod.VC_METHOD),
}

TIER_EXPLANATIONS: Dict[DataSharingTier, str] = {
    DataSharingTier.MINIMAL: "With minimal data only rough estimates are possible",
    DataSharingTier.BASIC: "Basic information allows well-founded recommendations",
    DataSharingTier.DETAILED: "Detailed data allows more precise analysis",
    DataSharingTier.FULL: "Complete data allows the deepest analysis",
}


def _variance(scores: Sequence[float]) -> float:
    if not scores:
        return 0.0
    mean = sum(scores) / len(scores)
    return sum((score - mean) ** 2 for score in scores) / len(scores)


def berkus_confidence(scores: Sequence[float]) -> float:
    zero_factors = sum(1 for score in scores if score <= 0)
    raw = 70 - _variance(scores) / 100 - 4 * zero_factors
    return float(round(clamp(raw, 40, 90)))


def scorecard_confidence(scores: Sequence[float]) -> float:
    raw = 65 - _variance(scores) / 50
    return float(round(clamp(raw, 45, 85)))


def vc_method_confidence(data: VCMethodInput) -> float:
    confidence = 60.0
    if data.years_to_exit > 7:
        confidence -= 10
    if data.years_to_exit < 3:
        confidence -= 5
    if data.expected_return > 20:
        confidence -= 15
    if data.expected_exit_value > 100_000_000:
        confidence -= 10
    return clamp(confidence, 35, 80)


def dcf_confidence(data: DCFInput) -> float:
    # DCF is a weak fit for early-stage companies
    confidence = 45.0
    if any(cash_flow < 0 for cash_flow in data.projected_cash_flows):
        confidence -= 10
    if data.discount_rate < 20:
        confidence -= 5
    if data.terminal_growth_rate > 5:
        confidence -= 10
    return clamp(confidence, 25, 60)


def comparables_confidence(comparables_used: int, multiple_spread: float) -> float:
    confidence = 50.0 + min(20, comparables_used * 5)
    if multiple_spread < 0.5:
        confidence += 15
    elif multiple_spread > 2:
        confidence -= 15
    return clamp(confidence, 30, 80)


def method_agreement(results: Sequence[ValuationMethodResult]) -> float:
    """How closely the positive method values agree, in [0.3, 0.9].

    Derived from the coefficient of variation; 0.5 when fewer than two
    methods produced a positive value.
    """
    values = [result.value for result in results if result.value > 0]
    if len(values) < 2:
        return 0.5
    mean = sum(values) / len(values)
    std_dev = math.sqrt(_variance(values))
    return clamp(1 - std_dev / mean, 0.3, 0.9)


def confidence_level(score: float) -> ConfidenceLevel:
    if score < 40:
        return ConfidenceLevel.LOW
    if score < 70:
        return ConfidenceLevel.MEDIUM
    return ConfidenceLevel.HIGH


def tier_for_completeness(ratio: float) -> DataSharingTier:
    if ratio < 0.25:
        return DataSharingTier.MINIMAL
    if ratio < 0.5:
        return DataSharingTier.BASIC
    if ratio < 0.8:
        return DataSharingTier.DETAILED
    return DataSharingTier.FULL


def _completeness_ratio(inputs: ConfidenceInputs) -> float:
    if inputs.fields_total <= 0:
        return 0.0
    filled = clamp(inputs.fields_filled, 0, inputs.fields_total)
    return filled / inputs.fields_total


def _data_quality(inputs: ConfidenceInputs) -> float:
    score = 5.0
    if inputs.has_revenue_data:
        score += 5
    if inputs.has_user_data:
        score += 5
    if inputs.has_relevant_experience:
        score += 3
    if inputs.competitor_count > 0:
        score += 4
    if inputs.has_tam:
        score += 3
    return min(MAX_FACTOR_SCORE, score)


def _method_applicability(inputs: ConfidenceInputs, results: Sequence[ValuationMethodResult]) -> float:
    if not results:
        return 5.0
    score = 10.0 + min(10, len(results) * 2)
    ideal = IDEAL_METHODS_BY_STAGE.get(inputs.stage, ())
    if any(result.method in ideal for result in results):
        score += 5
    return min(MAX_FACTOR_SCORE, score)


def _market_data(inputs: ConfidenceInputs) -> float:
    score = 5.0
    if inputs.has_tam:
        score += 5
    if inputs.has_sam:
        score += 3
    if inputs.has_som:
        score += 2
    score += min(5, max(0, inputs.competitor_count))
    if inputs.has_market_timing:
        score += 3
    if inputs.has_market_type:
        score += 2
    return min(MAX_FACTOR_SCORE, score)


def get_improvement_suggestions(factors: ConfidenceFactors) -> List[ImprovementSuggestion]:
    suggestions: List[ImprovementSuggestion] = []
    if factors.data_completeness < 20:
        suggestions.append(
            ImprovementSuggestion(
                factor="data_completeness",
                suggestion="Fill in all questionnaire fields",
                potential_increase=20 - factors.data_completeness,
            )
        )
    if factors.data_quality < 15:
        suggestions.append(
            ImprovementSuggestion(
                factor="data_quality",
                suggestion="Add revenue and user numbers",
                potential_increase=15 - factors.data_quality,
            )
        )
    if factors.market_data < 15:
        suggestions.append(
            ImprovementSuggestion(
                factor="market_data",
                suggestion="Add market sizes (TAM/SAM/SOM) and competitors",
                potential_increase=15 - factors.market_data,
            )
        )
    if factors.method_applicability < 20:
        suggestions.append(
            ImprovementSuggestion(
                factor="method_applicability",
                suggestion="Run several valuation methods",
                potential_increase=20 - factors.method_applicability,
            )
        )
    # stable sort keeps the order above for equal gains
    return sorted(suggestions, key=lambda item: item.potential_increase, reverse=True)


def _explanations(
    factors: ConfidenceFactors,
    tier: DataSharingTier,
    inputs: ConfidenceInputs,
    agreement: float,
    method_count: int,
) -> List[str]:
    explanations = [TIER_EXPLANATIONS[tier]]
    if factors.data_completeness < 15:
        explanations.append("The data is still thin. Fill in more fields to raise the confidence.")
    elif factors.data_completeness >= 20:
        explanations.append("Good data basis available.")
    if factors.data_quality < 10:
        explanations.append("Quantitative data (revenue, users) would improve the valuation.")
    if not inputs.has_revenue_data:
        explanations.append("Without revenue data the valuation rests on qualitative factors.")
    if factors.market_data < 10:
        explanations.append("Market data (TAM/SAM/SOM) would increase accuracy.")
    if inputs.has_relevant_experience:
        explanations.append("Relevant team experience was taken into account.")
    if method_count >= 2:
        if agreement < 0.5:
            explanations.append("The valuation methods produce diverging results.")
        elif agreement > 0.7:
            explanations.append("The valuation methods agree well.")
    return explanations


def assess_confidence(
    inputs: ConfidenceInputs,
    results: Sequence[ValuationMethodResult] = (),
) -> ConfidenceResult:
    ratio = _completeness_ratio(inputs)
    factors = ConfidenceFactors(
        data_completeness=float(round(ratio * MAX_FACTOR_SCORE)),
        data_quality=_data_quality(inputs),
        method_applicability=_method_applicability(inputs, results),
        market_data=_market_data(inputs),
    )
    tier = inputs.tier or tier_for_completeness(ratio)
    lower, upper = TIER_CONFIDENCE_BANDS[tier]
    raw = clamp(factors.total(), 0, 4 * MAX_FACTOR_SCORE) / (4 * MAX_FACTOR_SCORE)
    score = float(round(lower + (upper - lower) * raw))
    agreement = method_agreement(results)
    logger.debug("Confidence %.0f (tier=%s, raw=%.2f, agreement=%.2f)", score, tier.value, raw, agreement)
    return ConfidenceResult(
        score=score,
        tier=tier,
        level=confidence_level(score),
        factors=factors,
        method_agreement=agreement,
        explanations=_explanations(factors, tier, inputs, agreement, len(results)),
        suggestions=get_improvement_suggestions(factors),
    )
