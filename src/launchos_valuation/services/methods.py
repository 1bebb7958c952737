"""Valuation method calculators.

Every calculator is a pure function: it takes structured input, returns a
fresh ``ValuationMethodResult`` and never raises on numeric input. Values
outside their meaningful range are clamped and the clamping is reported in
the result notes.
"""
from __future__ import annotations

import logging
import math
import statistics
from typing import Dict, List, Optional, Tuple

from ..exceptions import UnknownFactorError
from ..models.berkus import BERKUS_FACTOR_DEFINITIONS, MAX_PER_FACTOR, BerkusFactors, FactorDefinition
from ..models.common import (
    MethodApplicabilityWarning,
    ProjectStage,
    StartupProfile,
    ValidationWarning,
    ValuationMethod,
    ValuationMethodResult,
    clamp,
)
from ..models.scorecard import (
    AVERAGE_PRE_SEED_VALUATION,
    MAX_SCORECARD_SCORE,
    SCORECARD_FACTOR_DEFINITIONS,
    ScorecardFactors,
)
from ..models.valuation import ComparablesInput, CostToDuplicateInput, DCFInput, RevenueMultipleInput, VCMethodInput
from .confidence import (
    berkus_confidence,
    comparables_confidence,
    dcf_confidence,
    scorecard_confidence,
    vc_method_confidence,
)
from .formatting import format_currency

logger = logging.getLogger(__name__)

DEFAULT_TEAM_COST_PER_MONTH = 8_000.0
IP_PREMIUM_MULTIPLIER = 1.3

APPLICABLE_STAGES: Dict[ValuationMethod, Tuple[ProjectStage, ...]] = {
    ValuationMethod.BERKUS: (ProjectStage.IDEA, ProjectStage.MVP),
    ValuationMethod.SCORECARD: (ProjectStage.IDEA, ProjectStage.MVP, ProjectStage.BETA),
    ValuationMethod.VC_METHOD: (ProjectStage.MVP, ProjectStage.BETA, ProjectStage.LIVE, ProjectStage.SCALING),
    ValuationMethod.COMPARABLES: (ProjectStage.BETA, ProjectStage.LIVE, ProjectStage.SCALING),
    ValuationMethod.DCF: (ProjectStage.LIVE, ProjectStage.SCALING),
    ValuationMethod.COST_TO_DUPLICATE: (ProjectStage.IDEA, ProjectStage.MVP, ProjectStage.BETA),
    ValuationMethod.REVENUE_MULTIPLE: (ProjectStage.BETA, ProjectStage.LIVE, ProjectStage.SCALING),
}

INDUSTRY_MULTIPLES: Dict[str, float] = {
    "saas": 8.0,
    "fintech": 10.0,
    "healthtech": 7.0,
    "edtech": 5.0,
    "ecommerce": 3.0,
    "marketplace": 5.0,
    "content": 4.0,
    "service": 3.0,
    "hardware": 4.0,
    "default": 4.0,
}


def get_applicable_methods(stage: ProjectStage) -> List[ValuationMethod]:
    return [method for method, stages in APPLICABLE_STAGES.items() if stage in stages]


def check_applicability(method: ValuationMethod, profile: Optional[StartupProfile]) -> List[MethodApplicabilityWarning]:
    if profile is None:
        return []
    messages: List[str] = []
    # the three core methods carry their own policy instead of the stage table
    if method == ValuationMethod.BERKUS:
        if profile.generates_revenue():
            messages.append("Berkus is a pre-revenue heuristic; the company already generates revenue")
    elif method == ValuationMethod.SCORECARD:
        if profile.stage == ProjectStage.IDEA:
            messages.append("Scorecard is less reliable at the idea stage without concrete comparables")
    elif method == ValuationMethod.VC_METHOD:
        if not (profile.has_exit_scenario or profile.has_traction):
            messages.append("VC Method is speculative without an exit scenario or traction")
    elif profile.stage not in APPLICABLE_STAGES.get(method, tuple(ProjectStage)):
        messages.append(f"{method.value} is not a typical method for the {profile.stage.value} stage")
    return [MethodApplicabilityWarning(method=method, message=message) for message in messages]


def _clamped(name: str, value: float, lower: float, upper: float, notes: List[str]) -> float:
    result = clamp(value, lower, upper)
    if result != value:
        logger.warning("Clamped %s from %s to %s", name, value, result)
        notes.append(f"{name} was {value:g} and has been clamped to {result:g}")
    return result


# Berkus


def calculate_berkus(
    factors: BerkusFactors,
    *,
    max_per_factor: float = MAX_PER_FACTOR,
    profile: Optional[StartupProfile] = None,
) -> ValuationMethodResult:
    notes: List[str] = []
    ceiling = _clamped("max_per_factor", max_per_factor, 0.0, MAX_PER_FACTOR, notes)
    scores: Dict[str, float] = {}
    breakdown: Dict[str, float] = {}
    for key, raw_score in factors.scores().items():
        score = _clamped(key, raw_score, 0.0, 100.0, notes)
        scores[key] = score
        breakdown[key] = score / 100 * ceiling
    total = sum(breakdown.values())

    if scores["sound_idea"] < 50:
        notes.append("The idea should be validated further")
    if scores["quality_team"] < 50 and scores["prototype"] > 75:
        notes.append("Strong product, but a stronger team would improve the valuation")
    if scores["product_rollout"] == 0:
        notes.append("Without market presence this is a purely potential-based valuation")
    if total > 0.6 * 5 * ceiling:
        notes.append("Valuation is at the upper end of the pre-revenue range")

    logger.debug("Berkus valuation %.2f", total)
    return ValuationMethodResult(
        method=ValuationMethod.BERKUS,
        value=total,
        confidence=berkus_confidence(list(scores.values())),
        breakdown=breakdown,
        notes=notes,
        warnings=check_applicability(ValuationMethod.BERKUS, profile),
        inputs=factors.model_dump(),
    )


def get_berkus_factor_info(key: str) -> FactorDefinition:
    try:
        return BERKUS_FACTOR_DEFINITIONS[key]
    except KeyError:
        raise UnknownFactorError(key) from None


def suggest_berkus_improvements(factors: BerkusFactors, max_per_factor: float = MAX_PER_FACTOR) -> List[str]:
    ceiling = clamp(max_per_factor, 0.0, MAX_PER_FACTOR)
    suggestions: List[str] = []
    weakest = sorted(factors.scores().items(), key=lambda item: item[1])[:2]
    for key, score in weakest:
        if score < 75:
            gain = (75 - clamp(score, 0, 100)) / 100 * ceiling
            name = BERKUS_FACTOR_DEFINITIONS[key].name
            suggestions.append(f"Improving {name} could add {format_currency(gain)}")
    return suggestions


# Scorecard


def calculate_scorecard(
    factors: ScorecardFactors,
    base_valuation: float = AVERAGE_PRE_SEED_VALUATION,
    *,
    profile: Optional[StartupProfile] = None,
) -> ValuationMethodResult:
    notes: List[str] = []
    base = _clamped("base_valuation", base_valuation, 0.0, math.inf, notes)
    breakdown: Dict[str, float] = {}
    scores: List[float] = []
    multiplier = 0.0
    weak: List[str] = []
    total_weight = 0.0
    for key, factor in factors.items().items():
        weight = _clamped(f"{key}.weight", factor.weight, 0.0, 100.0, notes)
        score = _clamped(f"{key}.score", factor.score, 0.0, MAX_SCORECARD_SCORE, notes)
        contribution = weight * score / 10_000
        multiplier += contribution
        total_weight += weight
        breakdown[key] = contribution * base
        scores.append(score)
        if score < 40 and weight >= 10:
            weak.append(SCORECARD_FACTOR_DEFINITIONS[key].name)
    value = base * multiplier

    if not math.isclose(total_weight, 100.0):
        notes.append(f"Weights sum to {total_weight:g}% instead of 100%; the result is not normalised")
    if weak:
        notes.append(f"Weak areas: {', '.join(weak)}")
    if multiplier > 1.2:
        notes.append("Above-average valuation compared to the regional market")
    elif multiplier < 0.8:
        notes.append("Below-average valuation; there is room for improvement")
    notes.append(f"Overall multiplier: {multiplier:.2f}x on a base of {format_currency(base)}")

    logger.debug("Scorecard valuation %.2f (multiplier %.3f)", value, multiplier)
    return ValuationMethodResult(
        method=ValuationMethod.SCORECARD,
        value=value,
        confidence=scorecard_confidence(scores),
        breakdown=breakdown,
        notes=notes,
        warnings=check_applicability(ValuationMethod.SCORECARD, profile),
        inputs={"factors": factors.model_dump(), "base_valuation": base_valuation},
    )


def validate_scorecard_weights(factors: ScorecardFactors) -> List[ValidationWarning]:
    warnings: List[ValidationWarning] = []
    total = factors.total_weight()
    if not math.isclose(total, 100.0):
        warnings.append(ValidationWarning(field="weights", message=f"Weights sum to {total:g}% (should be 100%)"))
    for key, factor in factors.items().items():
        if not 0 <= factor.weight <= 100:
            warnings.append(ValidationWarning(field=f"{key}.weight", message="Weight must be between 0 and 100"))
        if not 0 <= factor.score <= MAX_SCORECARD_SCORE:
            warnings.append(ValidationWarning(field=f"{key}.score", message="Score must be between 0 and 150"))
    return warnings


def get_scorecard_factor_info(key: str) -> FactorDefinition:
    try:
        return SCORECARD_FACTOR_DEFINITIONS[key]
    except KeyError:
        raise UnknownFactorError(key) from None


def default_scorecard_factors() -> ScorecardFactors:
    return ScorecardFactors()


# VC Method


def calculate_vc_method(data: VCMethodInput, *, profile: Optional[StartupProfile] = None) -> ValuationMethodResult:
    notes: List[str] = []
    exit_value = _clamped("expected_exit_value", data.expected_exit_value, 0.0, math.inf, notes)
    investment = _clamped("investment_amount", data.investment_amount, 0.0, math.inf, notes)
    dilution = _clamped("dilution_assumption", data.dilution_assumption, 0.0, 100.0, notes)
    years = _clamped("years_to_exit", data.years_to_exit, 0.0, math.inf, notes)

    if data.expected_return > 0:
        post_money = exit_value / data.expected_return
    else:
        post_money = 0.0
        notes.append("Expected return multiple must be positive; post-money set to 0")
    dilution_adjustment = post_money * dilution / 100
    adjusted_post_money = post_money - dilution_adjustment
    pre_money = adjusted_post_money - investment
    if adjusted_post_money > 0:
        implied_ownership = investment / adjusted_post_money * 100
    else:
        implied_ownership = 0.0
        notes.append("Dilution-adjusted post-money is zero; implied ownership cannot be derived")

    if adjusted_post_money <= investment:
        logger.info("Infeasible VC ask: investment %.2f vs adjusted post-money %.2f", investment, adjusted_post_money)
        notes.append(
            f"Infeasible ask: the investment of {format_currency(investment)} meets or exceeds the "
            f"dilution-adjusted post-money of {format_currency(adjusted_post_money)}, "
            f"giving a pre-money of {format_currency(pre_money)}"
        )
    if data.expected_return > 15:
        notes.append("Expected return is high, typical for seed and pre-seed")
    if years > 7:
        notes.append("A long time horizon increases projection uncertainty")
    if implied_ownership > 30:
        notes.append("High investor ownership; check the room for negotiation")
    if dilution > 40:
        notes.append("Heavy dilution assumed; plan for more funding rounds")

    effective = data.model_copy(
        update={"expected_exit_value": exit_value, "dilution_assumption": dilution, "years_to_exit": years}
    )
    return ValuationMethodResult(
        method=ValuationMethod.VC_METHOD,
        value=pre_money,
        confidence=vc_method_confidence(effective),
        breakdown={
            "expected_exit_value": exit_value,
            "post_money": post_money,
            "dilution_adjustment": dilution_adjustment,
            "adjusted_post_money": adjusted_post_money,
            "pre_money": pre_money,
            "implied_ownership": implied_ownership,
        },
        notes=notes,
        warnings=check_applicability(ValuationMethod.VC_METHOD, profile),
        inputs=data.model_dump(),
    )


def suggest_vc_method_improvements(current_value: float, target_value: float) -> List[str]:
    if current_value <= 0:
        return []
    increase = (target_value - current_value) / current_value * 100
    if increase <= 0:
        return []
    return [
        f"To lift the VC Method result by {increase:.0f}%, raise the exit value through market expansion, "
        "shorten the time to exit or justify a lower return multiple with traction"
    ]


# DCF


def calculate_dcf(data: DCFInput, *, profile: Optional[StartupProfile] = None) -> ValuationMethodResult:
    notes: List[str] = ["DCF is less reliable for startups than the other methods"]
    cash_flows = list(data.projected_cash_flows)
    if not cash_flows:
        notes.append("No projected cash flows supplied")
        return ValuationMethodResult(
            method=ValuationMethod.DCF,
            value=0.0,
            confidence=0.0,
            notes=notes,
            warnings=check_applicability(ValuationMethod.DCF, profile),
            inputs=data.model_dump(),
        )

    rate = _clamped("discount_rate", data.discount_rate, 0.0, math.inf, notes) / 100
    growth = data.terminal_growth_rate / 100
    factor = 1 + rate
    pv_cash_flows = sum(cf / factor ** (i + 1) for i, cf in enumerate(cash_flows))
    if rate > growth:
        terminal_value = cash_flows[-1] * (1 + growth) / (rate - growth)
    else:
        terminal_value = 0.0
        notes.append("Terminal growth must be below the discount rate; terminal value set to 0")
    pv_terminal = terminal_value / factor ** len(cash_flows)
    enterprise_value = pv_cash_flows + pv_terminal

    if enterprise_value > 0 and pv_terminal / enterprise_value > 0.7:
        notes.append("Most of the value comes from the terminal value; high uncertainty")
    if data.discount_rate < 25:
        notes.append("Low discount rate for a startup; 25-40% is typical for early stage")
    if cash_flows[0] < 0:
        notes.append("Negative cash flows in early years are normal for startups")
    if enterprise_value < 0:
        notes.append(f"Enterprise value is negative ({format_currency(enterprise_value)}); reported as 0")

    return ValuationMethodResult(
        method=ValuationMethod.DCF,
        value=max(0.0, enterprise_value),
        confidence=dcf_confidence(data),
        breakdown={
            "pv_operating_cash_flows": pv_cash_flows,
            "terminal_value": terminal_value,
            "pv_terminal_value": pv_terminal,
            "enterprise_value": enterprise_value,
        },
        notes=notes,
        warnings=check_applicability(ValuationMethod.DCF, profile),
        inputs=data.model_dump(),
    )


def validate_dcf_input(data: DCFInput) -> List[ValidationWarning]:
    warnings: List[ValidationWarning] = []
    if len(data.projected_cash_flows) < 3:
        warnings.append(
            ValidationWarning(field="projected_cash_flows", message="At least 3 years of projections are needed")
        )
    if not 10 <= data.discount_rate <= 60:
        warnings.append(ValidationWarning(field="discount_rate", message="Discount rate should be between 10% and 60%"))
    if data.terminal_growth_rate >= data.discount_rate:
        warnings.append(
            ValidationWarning(field="terminal_growth_rate", message="Terminal growth must be below the discount rate")
        )
    if data.terminal_growth_rate > 10:
        warnings.append(
            ValidationWarning(field="terminal_growth_rate", message="Terminal growth above 10% is unrealistic")
        )
    return warnings


# Comparables


def calculate_comparables(data: ComparablesInput, *, profile: Optional[StartupProfile] = None) -> ValuationMethodResult:
    notes: List[str] = []
    warnings = check_applicability(ValuationMethod.COMPARABLES, profile)
    multiples = [
        company.valuation / company.metric
        for company in data.companies
        if company.metric_type == data.selected_metric and company.metric > 0
    ]
    if not multiples:
        notes.append(
            "No comparable companies selected"
            if not data.companies
            else "No comparable companies with a matching metric found"
        )
        return ValuationMethodResult(
            method=ValuationMethod.COMPARABLES,
            value=0.0,
            confidence=0.0,
            notes=notes,
            warnings=warnings,
            inputs=data.model_dump(),
        )

    adjustment = _clamped("adjustment_factor", data.adjustment_factor, 0.0, math.inf, notes)
    your_metric = _clamped("your_metric", data.your_metric, 0.0, math.inf, notes)
    median_multiple = statistics.median(multiples)
    mean_multiple = statistics.fmean(multiples)
    adjusted_multiple = median_multiple * adjustment
    low_multiple = min(multiples) * adjustment
    high_multiple = max(multiples) * adjustment
    spread = (high_multiple - low_multiple) / median_multiple if median_multiple > 0 else 0.0

    notes.append(f"Based on {len(multiples)} comparable companies")
    notes.append(f"Median multiple: {median_multiple:.1f}x {data.selected_metric.value.upper()}")
    if adjustment != 1:
        kind = "premium" if adjustment > 1 else "discount"
        notes.append(f"Adjustment factor {adjustment:g}x applied ({kind})")
    if spread > 1.5:
        notes.append("High spread among comparables; mind the valuation range")

    return ValuationMethodResult(
        method=ValuationMethod.COMPARABLES,
        value=your_metric * adjusted_multiple,
        confidence=comparables_confidence(len(multiples), spread),
        breakdown={
            "median_multiple": median_multiple,
            "mean_multiple": mean_multiple,
            "adjusted_multiple": adjusted_multiple,
            "low_valuation": your_metric * low_multiple,
            "high_valuation": your_metric * high_multiple,
            "comparables_used": float(len(multiples)),
        },
        notes=notes,
        warnings=warnings,
        inputs=data.model_dump(),
    )


# Revenue multiple


def calculate_revenue_multiple(
    data: RevenueMultipleInput,
    *,
    profile: Optional[StartupProfile] = None,
) -> ValuationMethodResult:
    """ARR times an industry multiple, with a bonus for fast monthly growth."""
    warnings = check_applicability(ValuationMethod.REVENUE_MULTIPLE, profile)
    notes: List[str] = []
    monthly_revenue = _clamped("monthly_revenue", data.monthly_revenue, 0.0, math.inf, notes)
    if monthly_revenue == 0:
        notes.append("No recurring revenue supplied")
        return ValuationMethodResult(
            method=ValuationMethod.REVENUE_MULTIPLE,
            value=0.0,
            confidence=0.0,
            notes=notes,
            warnings=warnings,
            inputs=data.model_dump(),
        )

    arr = monthly_revenue * 12
    industry = data.industry.lower() if data.industry.lower() in INDUSTRY_MULTIPLES else "default"
    multiple = INDUSTRY_MULTIPLES[industry]
    if data.growth_rate > 50:
        growth_bonus = 1.5
    elif data.growth_rate > 20:
        growth_bonus = 1.2
    else:
        growth_bonus = 1.0
    value = arr * multiple * growth_bonus

    notes.append(f"ARR: {format_currency(arr)}")
    notes.append(f"{industry.capitalize()} multiple: {multiple:g}x")
    if growth_bonus > 1:
        notes.append(f"Growth bonus: +{(growth_bonus - 1) * 100:.0f}%")
    return ValuationMethodResult(
        method=ValuationMethod.REVENUE_MULTIPLE,
        value=value,
        confidence=70.0,
        breakdown={"arr": arr, "multiple": multiple, "base_valuation": arr * multiple, "with_growth_bonus": value},
        notes=notes,
        warnings=warnings,
        inputs=data.model_dump(),
    )


# Cost to duplicate


def calculate_cost_to_duplicate(
    data: CostToDuplicateInput,
    *,
    profile: Optional[StartupProfile] = None,
) -> ValuationMethodResult:
    notes: List[str] = []
    total_cost = _clamped("development_costs", data.development_costs, 0.0, math.inf, notes)
    months = _clamped("months_spent", data.months_spent, 0.0, math.inf, notes)
    if months:
        monthly = data.team_cost_per_month if data.team_cost_per_month is not None else DEFAULT_TEAM_COST_PER_MONTH
        total_cost = max(total_cost, months * max(0.0, monthly))
    value = total_cost * IP_PREMIUM_MULTIPLIER
    if total_cost == 0:
        notes.append("No development effort supplied")
    else:
        notes.append(f"Development costs: {format_currency(total_cost)}")
        notes.append(f"IP / know-how premium: +{(IP_PREMIUM_MULTIPLIER - 1) * 100:.0f}%")
        notes.append("Lower bound; the real cost is often higher")
    return ValuationMethodResult(
        method=ValuationMethod.COST_TO_DUPLICATE,
        value=value,
        confidence=55.0 if total_cost > 0 else 0.0,
        breakdown={
            "base_cost": total_cost,
            "ip_premium": total_cost * (IP_PREMIUM_MULTIPLIER - 1),
            "total": value,
        },
        notes=notes,
        warnings=check_applicability(ValuationMethod.COST_TO_DUPLICATE, profile),
        inputs=data.model_dump(),
    )
