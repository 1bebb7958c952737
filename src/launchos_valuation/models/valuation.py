from __future__ import annotations

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from .berkus import BerkusFactors
from .common import MethodApplicabilityWarning, StartupProfile, ValidationWarning, ValuationMethodResult
from .confidence import ConfidenceInputs, ConfidenceResult
from .scorecard import ScorecardFactors


class ComparableMetric(str, Enum):
    REVENUE = "revenue"
    USERS = "users"
    ARR = "arr"
    GMV = "gmv"


class VCMethodInput(BaseModel):
    expected_exit_value: float
    years_to_exit: float = 5.0
    expected_return: float = Field(10.0, description="Target return multiple, e.g. 10 for 10x")
    investment_amount: float
    dilution_assumption: float = Field(20.0, description="Expected dilution until exit in percent")


class DCFInput(BaseModel):
    projected_cash_flows: List[float]
    discount_rate: float = Field(30.0, description="Annual discount rate in percent")
    terminal_growth_rate: float = Field(3.0, description="Perpetual growth rate in percent")


class ComparableCompany(BaseModel):
    name: str
    valuation: float
    metric: float
    metric_type: ComparableMetric
    funding_stage: str = ""
    region: str = ""
    date: str = ""


class ComparablesInput(BaseModel):
    companies: List[ComparableCompany] = Field(default_factory=list)
    selected_metric: ComparableMetric = ComparableMetric.REVENUE
    adjustment_factor: float = 1.0
    your_metric: float = 0.0


class CostToDuplicateInput(BaseModel):
    development_costs: float = 0.0
    months_spent: float = 0.0
    team_cost_per_month: Optional[float] = None


class RevenueMultipleInput(BaseModel):
    monthly_revenue: float
    industry: str = "default"
    growth_rate: float = Field(0.0, description="Monthly revenue growth in percent")


class ScorecardInput(BaseModel):
    factors: ScorecardFactors = Field(default_factory=ScorecardFactors)
    base_valuation: Optional[float] = Field(default=None, description="Regional average pre-seed valuation")


class AggregatedValuation(BaseModel):
    model_config = ConfigDict(frozen=True)

    low: float
    mid: float
    high: float
    confidence: float
    valid_results: int = 0
    strategy: str = "equal"


class ValuationRequest(BaseModel):
    profile: StartupProfile = Field(default_factory=StartupProfile)
    berkus: Optional[BerkusFactors] = None
    scorecard: Optional[ScorecardInput] = None
    vc_method: Optional[VCMethodInput] = None
    dcf: Optional[DCFInput] = None
    comparables: Optional[ComparablesInput] = None
    cost_to_duplicate: Optional[CostToDuplicateInput] = None
    revenue_multiple: Optional[RevenueMultipleInput] = None
    confidence: Optional[ConfidenceInputs] = None
    weighting: Optional[str] = Field(default=None, description="Aggregation weighting strategy name")


class ValuationReport(BaseModel):
    methods: List[ValuationMethodResult]
    aggregated: AggregatedValuation
    confidence: ConfidenceResult
    applicability_warnings: List[MethodApplicabilityWarning] = Field(default_factory=list)
    validation_warnings: List[ValidationWarning] = Field(default_factory=list)
    improvements: List[str] = Field(default_factory=list)
