from __future__ import annotations

import logging
from typing import Callable, Dict, List, Sequence, Union

from ..exceptions import UnknownWeightingStrategyError
from ..models.common import ValuationMethod, ValuationMethodResult
from ..models.valuation import AggregatedValuation

logger = logging.getLogger(__name__)

WeightingStrategy = Callable[[Sequence[ValuationMethodResult]], List[float]]


def equal_weighting(results: Sequence[ValuationMethodResult]) -> List[float]:
    return [1.0] * len(results)


def confidence_weighting(results: Sequence[ValuationMethodResult]) -> List[float]:
    return [max(0.0, result.confidence) for result in results]


METHOD_BLEND_WEIGHTS: Dict[ValuationMethod, float] = {
    ValuationMethod.BERKUS: 0.3,
    ValuationMethod.SCORECARD: 0.4,
    ValuationMethod.VC_METHOD: 0.5,
    ValuationMethod.COMPARABLES: 0.5,
    ValuationMethod.REVENUE_MULTIPLE: 0.5,
    ValuationMethod.DCF: 0.4,
    ValuationMethod.COST_TO_DUPLICATE: 0.2,
}

def method_weighting(results: Sequence[ValuationMethodResult]) -> List[float]:
    return [METHOD_BLEND_WEIGHTS[result.method] for result in results]


WEIGHTING_STRATEGIES: Dict[str, WeightingStrategy] = {
    "equal": equal_weighting,
    "confidence": confidence_weighting,
    "method": method_weighting,
}


def resolve_weighting(strategy: Union[str, WeightingStrategy, None]) -> WeightingStrategy:
    if strategy is None:
        return equal_weighting
    if callable(strategy):
        return strategy
    try:
        return WEIGHTING_STRATEGIES[strategy]
    except KeyError:
        raise UnknownWeightingStrategyError(strategy) from None


def _strategy_name(strategy: WeightingStrategy) -> str:
    for name, known in WEIGHTING_STRATEGIES.items():
        if known is strategy:
            return name
    return getattr(strategy, "__name__", "custom")


def aggregate_valuations(
    results: Sequence[ValuationMethodResult],
    weighting: Union[str, WeightingStrategy, None] = None,
) -> AggregatedValuation:
    """Blend method results into a low/mid/high range.

    Only results with a positive value take part. ``low`` and ``high`` are the
    extremes of those values; ``mid`` is their weighted mean (arithmetic mean
    under the default equal weighting). The reported confidence is the plain
    mean of the per-method confidences whatever the weighting.
    """
    strategy = resolve_weighting(weighting)
    name = _strategy_name(strategy)
    valid = [result for result in results if result.value > 0]
    if not valid:
        return AggregatedValuation(low=0.0, mid=0.0, high=0.0, confidence=0.0, valid_results=0, strategy=name)

    values = [result.value for result in valid]
    weights = [max(0.0, weight) for weight in strategy(valid)]
    if len(weights) != len(valid) or sum(weights) <= 0:
        logger.debug("Weighting %s produced unusable weights; falling back to equal weights", name)
        weights = equal_weighting(valid)
    low, high = min(values), max(values)
    mid = sum(value * weight for value, weight in zip(values, weights)) / sum(weights)
    # low <= mid <= high even after float rounding
    mid = min(high, max(low, mid))
    confidence = sum(result.confidence for result in valid) / len(valid)
    return AggregatedValuation(
        low=low,
        mid=mid,
        high=high,
        confidence=confidence,
        valid_results=len(valid),
        strategy=name,
    )
