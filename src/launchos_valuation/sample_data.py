from __future__ import annotations

from .models.berkus import BerkusFactors
from .models.common import ProjectStage, StartupProfile
from .models.confidence import ConfidenceInputs
from .models.market import BottomUpMarketInput, TopDownMarketInput
from .models.scorecard import ScorecardFactor, ScorecardFactors
from .models.valuation import (
    ComparableCompany,
    ComparableMetric,
    ComparablesInput,
    CostToDuplicateInput,
    DCFInput,
    ScorecardInput,
    ValuationRequest,
    VCMethodInput,
)

SAMPLE_COMPARABLES = [
    ComparableCompany(
        name="SaaS Startup A",
        valuation=5_000_000,
        metric=100_000,
        metric_type=ComparableMetric.ARR,
        funding_stage="seed",
        region="DACH",
        date="2024-01",
    ),
    ComparableCompany(
        name="SaaS Startup B",
        valuation=3_000_000,
        metric=50_000,
        metric_type=ComparableMetric.ARR,
        funding_stage="pre-seed",
        region="DACH",
        date="2024-03",
    ),
    ComparableCompany(
        name="Marketplace C",
        valuation=8_000_000,
        metric=500_000,
        metric_type=ComparableMetric.GMV,
        funding_stage="seed",
        region="EU",
        date="2024-02",
    ),
]


def build_sample_berkus() -> BerkusFactors:
    return BerkusFactors(
        sound_idea=75,
        prototype=50,
        quality_team=75,
        strategic_relations=25,
        product_rollout=25,
    )


def build_sample_scorecard() -> ScorecardInput:
    return ScorecardInput(
        factors=ScorecardFactors(
            team_strength=ScorecardFactor(weight=30, score=125),
            market_size=ScorecardFactor(weight=25, score=110),
            product_tech=ScorecardFactor(weight=15, score=100),
            competition=ScorecardFactor(weight=10, score=80),
            marketing_sales=ScorecardFactor(weight=10, score=90),
            need_for_funding=ScorecardFactor(weight=5, score=100),
            other=ScorecardFactor(weight=5, score=100),
        ),
        base_valuation=1_500_000,
    )


def build_sample_vc_method() -> VCMethodInput:
    return VCMethodInput(
        expected_exit_value=20_000_000,
        years_to_exit=5,
        expected_return=10,
        investment_amount=500_000,
        dilution_assumption=20,
    )


def build_sample_top_down_market() -> TopDownMarketInput:
    return TopDownMarketInput(total_market=2_000_000_000, target_segment_percent=10, reachable_percent=5, year=2025)


def build_sample_bottom_up_market() -> BottomUpMarketInput:
    return BottomUpMarketInput(
        total_customers=500_000,
        average_price=99,
        purchase_frequency=12,
        targetable_percent=30,
        capture_percent=5,
        year=2025,
    )


def build_sample_request() -> ValuationRequest:
    return ValuationRequest(
        profile=StartupProfile(stage=ProjectStage.MVP, has_traction=True, has_exit_scenario=True),
        berkus=build_sample_berkus(),
        scorecard=build_sample_scorecard(),
        vc_method=build_sample_vc_method(),
        dcf=DCFInput(projected_cash_flows=[-50_000, 0, 100_000, 200_000, 350_000], discount_rate=30, terminal_growth_rate=3),
        comparables=ComparablesInput(
            companies=SAMPLE_COMPARABLES,
            selected_metric=ComparableMetric.ARR,
            your_metric=60_000,
        ),
        cost_to_duplicate=CostToDuplicateInput(months_spent=12, team_cost_per_month=10_000),
        confidence=ConfidenceInputs(
            fields_filled=14,
            fields_total=20,
            has_user_data=True,
            has_relevant_experience=True,
            competitor_count=3,
            has_tam=True,
            has_sam=True,
            has_som=True,
            stage=ProjectStage.MVP,
        ),
    )
