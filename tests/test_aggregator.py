from __future__ import annotations

import pytest

from launchos_valuation.exceptions import UnknownWeightingStrategyError
from launchos_valuation.models.common import ValuationMethod, ValuationMethodResult
from launchos_valuation.services.aggregator import (
    aggregate_valuations,
    confidence_weighting,
    equal_weighting,
    method_weighting,
    resolve_weighting,
)


def _result(value: float, confidence: float = 60, method: ValuationMethod = ValuationMethod.BERKUS):
    return ValuationMethodResult(method=method, value=value, confidence=confidence)


def test_empty_input_yields_zero_range():
    aggregated = aggregate_valuations([])

    assert (aggregated.low, aggregated.mid, aggregated.high) == (0, 0, 0)
    assert aggregated.confidence == 0
    assert aggregated.valid_results == 0


def test_non_positive_values_are_ignored():
    aggregated = aggregate_valuations([_result(0), _result(-200_000)])

    assert (aggregated.low, aggregated.mid, aggregated.high) == (0, 0, 0)


def test_range_uses_min_max_and_mean():
    results = [_result(1_000_000, 40), _result(2_000_000, 60), _result(4_000_000, 80), _result(-5, 10)]
    aggregated = aggregate_valuations(results)

    assert aggregated.low == 1_000_000
    assert aggregated.high == 4_000_000
    assert aggregated.mid == pytest.approx(7_000_000 / 3)
    assert aggregated.confidence == pytest.approx(60)
    assert aggregated.valid_results == 3
    assert aggregated.strategy == "equal"


def test_bounds_hold_for_many_sets():
    value_sets = [[1.0], [5, 5, 5], [1, 1_000_000_000], [0.1, 0.2, 0.3], [123_456.7, 98_765.4, 555_555.5]]
    for values in value_sets:
        aggregated = aggregate_valuations([_result(value) for value in values])
        assert aggregated.low == min(values)
        assert aggregated.high == max(values)
        assert aggregated.low <= aggregated.mid <= aggregated.high


def test_confidence_weighting_pulls_mid_towards_trusted_method():
    results = [_result(1_000_000, 90), _result(3_000_000, 30)]
    aggregated = aggregate_valuations(results, "confidence")

    assert aggregated.mid == pytest.approx(1_500_000)
    assert aggregated.confidence == pytest.approx(60)
    assert aggregated.strategy == "confidence"


def test_method_weighting_uses_blend_table():
    results = [_result(1_000_000), _result(2_000_000, method=ValuationMethod.VC_METHOD)]
    aggregated = aggregate_valuations(results, "method")

    assert method_weighting(results) == [0.3, 0.5]
    assert aggregated.mid == pytest.approx(1_625_000)
    assert aggregated.strategy == "method"
    assert resolve_weighting("method") is method_weighting


def test_custom_strategy_callable():
    def last_only(results):
        return [0.0] * (len(results) - 1) + [1.0]

    aggregated = aggregate_valuations([_result(1_000), _result(3_000)], last_only)

    assert aggregated.mid == 3_000
    assert aggregated.strategy == "last_only"


def test_zero_weights_fall_back_to_equal():
    aggregated = aggregate_valuations([_result(1_000, 0), _result(3_000, 0)], confidence_weighting)
    assert aggregated.mid == 2_000


def test_resolve_weighting():
    assert resolve_weighting(None) is equal_weighting
    assert resolve_weighting("confidence") is confidence_weighting
    with pytest.raises(UnknownWeightingStrategyError):
        resolve_weighting("median")
