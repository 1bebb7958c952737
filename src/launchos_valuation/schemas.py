from __future__ import annotations

from typing import Dict, List, Optional, Union

from pydantic import BaseModel, Field

from .models.berkus import BerkusFactors, FactorDefinition
from .models.common import ProjectStage, StartupProfile, ValidationWarning, ValuationMethod, ValuationMethodResult
from .models.market import BottomUpMarketInput, TopDownMarketInput
from .models.scorecard import ScorecardFactors
from .models.valuation import (
    AggregatedValuation,
    ComparablesInput,
    CostToDuplicateInput,
    DCFInput,
    RevenueMultipleInput,
    ValuationReport,
    ValuationRequest,
    VCMethodInput,
)


class BerkusRequest(BaseModel):
    factors: BerkusFactors = Field(default_factory=BerkusFactors)
    profile: Optional[StartupProfile] = None


class BerkusResponse(BaseModel):
    result: ValuationMethodResult
    suggestions: List[str] = Field(default_factory=list)


class ScorecardRequest(BaseModel):
    factors: ScorecardFactors = Field(default_factory=ScorecardFactors)
    base_valuation: Optional[float] = None
    profile: Optional[StartupProfile] = None


class ScorecardResponse(BaseModel):
    result: ValuationMethodResult
    validation_warnings: List[ValidationWarning] = Field(default_factory=list)


class VCMethodRequest(BaseModel):
    data: VCMethodInput
    profile: Optional[StartupProfile] = None


class DCFRequest(BaseModel):
    data: DCFInput
    profile: Optional[StartupProfile] = None


class ComparablesRequest(BaseModel):
    data: ComparablesInput = Field(default_factory=ComparablesInput)
    profile: Optional[StartupProfile] = None


class CostToDuplicateRequest(BaseModel):
    data: CostToDuplicateInput = Field(default_factory=CostToDuplicateInput)
    profile: Optional[StartupProfile] = None


class RevenueMultipleRequest(BaseModel):
    data: RevenueMultipleInput
    profile: Optional[StartupProfile] = None


class ApplicableMethodsResponse(BaseModel):
    stage: ProjectStage
    methods: List[ValuationMethod]


class MarketSizeRequest(BaseModel):
    data: Union[TopDownMarketInput, BottomUpMarketInput] = Field(..., discriminator="methodology")


class AggregateRequest(BaseModel):
    results: List[ValuationMethodResult]
    strategy: Optional[str] = Field(default=None, description="Weighting strategy name")


class AggregateResponse(BaseModel):
    aggregated: AggregatedValuation


class FactorListResponse(BaseModel):
    factors: Dict[str, FactorDefinition]


class ValuationCreateRequest(BaseModel):
    valuation: ValuationRequest
    clone_from: Optional[str] = Field(default=None, description="Valuation ID to clone inputs from")


class ValuationCreateResponse(BaseModel):
    valuation_id: str


class ValuationListResponse(BaseModel):
    valuations: List[str]


class ValuationRunRequest(BaseModel):
    valuation_id: Optional[str] = None
    valuation: Optional[ValuationRequest] = None
    weighting: Optional[str] = None


class ValuationSummary(BaseModel):
    low: str
    mid: str
    high: str
    confidence: str


class ValuationRunResponse(BaseModel):
    report: ValuationReport
    summary: ValuationSummary


class ValuationCompareResponse(BaseModel):
    valuation_ids: List[str]
    mid: List[float]
    low: List[float]
    high: List[float]
