from __future__ import annotations

import logging
from typing import List, Optional

from ..config import Settings, get_settings
from ..models.common import MethodApplicabilityWarning, ValidationWarning, ValuationMethod, ValuationMethodResult
from ..models.confidence import ConfidenceInputs
from ..models.valuation import AggregatedValuation, ValuationReport, ValuationRequest
from .aggregator import aggregate_valuations, resolve_weighting
from .confidence import assess_confidence
from .methods import (
    calculate_berkus,
    calculate_comparables,
    calculate_cost_to_duplicate,
    calculate_dcf,
    calculate_revenue_multiple,
    calculate_scorecard,
    calculate_vc_method,
    suggest_berkus_improvements,
    suggest_vc_method_improvements,
    validate_dcf_input,
    validate_scorecard_weights,
)

logger = logging.getLogger(__name__)

MAX_IMPROVEMENTS = 5


class ValuationCalculator:
    """Recomputes a full valuation report from a request.

    Holds configuration only; every call to ``run`` starts from the request
    alone and keeps no state between calls.
    """

    def __init__(self, settings: Optional[Settings] = None) -> None:
        self.settings = settings or get_settings()

    def run(self, request: ValuationRequest) -> ValuationReport:
        weighting = resolve_weighting(request.weighting or self.settings.weighting_strategy)
        methods = self._compute_methods(request)
        aggregated = aggregate_valuations(methods, weighting)
        confidence = assess_confidence(request.confidence or self._confidence_inputs(request), methods)
        applicability: List[MethodApplicabilityWarning] = [w for result in methods for w in result.warnings]
        report = ValuationReport(
            methods=methods,
            aggregated=aggregated,
            confidence=confidence,
            applicability_warnings=applicability,
            validation_warnings=self._validate(request),
            improvements=self._improvements(request, methods, aggregated),
        )
        logger.info(
            "Valuation run: %d methods, %d valid, mid=%.2f, confidence=%.0f",
            len(methods),
            aggregated.valid_results,
            aggregated.mid,
            confidence.score,
        )
        return report

    def _compute_methods(self, request: ValuationRequest) -> List[ValuationMethodResult]:
        profile = request.profile
        results: List[ValuationMethodResult] = []
        if request.berkus is not None:
            results.append(
                calculate_berkus(request.berkus, max_per_factor=self.settings.berkus_max_per_factor, profile=profile)
            )
        if request.scorecard is not None:
            base = request.scorecard.base_valuation
            if base is None:
                base = self.settings.scorecard_base_valuation
            results.append(calculate_scorecard(request.scorecard.factors, base, profile=profile))
        if request.vc_method is not None:
            results.append(calculate_vc_method(request.vc_method, profile=profile))
        if request.comparables is not None:
            results.append(calculate_comparables(request.comparables, profile=profile))
        if request.dcf is not None:
            results.append(calculate_dcf(request.dcf, profile=profile))
        if request.cost_to_duplicate is not None:
            results.append(calculate_cost_to_duplicate(request.cost_to_duplicate, profile=profile))
        if request.revenue_multiple is not None:
            results.append(calculate_revenue_multiple(request.revenue_multiple, profile=profile))
        return results

    def _validate(self, request: ValuationRequest) -> List[ValidationWarning]:
        warnings: List[ValidationWarning] = []
        if request.scorecard is not None:
            warnings.extend(validate_scorecard_weights(request.scorecard.factors))
        if request.dcf is not None:
            warnings.extend(validate_dcf_input(request.dcf))
        return warnings

    def _confidence_inputs(self, request: ValuationRequest) -> ConfidenceInputs:
        profile = request.profile
        supplied = [
            request.berkus,
            request.scorecard,
            request.vc_method,
            request.comparables,
            request.dcf,
            request.cost_to_duplicate,
            request.revenue_multiple,
            profile.monthly_revenue,
        ]
        return ConfidenceInputs(
            fields_filled=sum(1 for item in supplied if item is not None),
            fields_total=len(supplied),
            has_revenue_data=profile.generates_revenue(),
            has_user_data=profile.has_traction,
            stage=profile.stage,
        )

    def _improvements(
        self,
        request: ValuationRequest,
        methods: List[ValuationMethodResult],
        aggregated: AggregatedValuation,
    ) -> List[str]:
        profile = request.profile
        improvements: List[str] = []
        if request.berkus is not None:
            improvements.extend(suggest_berkus_improvements(request.berkus, self.settings.berkus_max_per_factor))
        for result in methods:
            if result.method == ValuationMethod.VC_METHOD:
                improvements.extend(suggest_vc_method_improvements(result.value, aggregated.mid))
        if not profile.generates_revenue():
            improvements.append("First paying customers would raise the valuation significantly (+30-50%)")
        if request.berkus is not None and request.berkus.strategic_relations < 50:
            improvements.append("Strategic partnerships signal market validation")
        if not profile.has_traction:
            improvements.append("Documented traction (user growth, engagement) strengthens the position")
        if aggregated.valid_results < 2:
            improvements.append("Run at least two valuation methods to get a meaningful range")
        return improvements[:MAX_IMPROVEMENTS]
