from __future__ import annotations

from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class ValuationMethod(str, Enum):
    BERKUS = "berkus"
    SCORECARD = "scorecard"
    VC_METHOD = "vc_method"
    COMPARABLES = "comparables"
    DCF = "dcf"
    COST_TO_DUPLICATE = "cost_to_duplicate"
    REVENUE_MULTIPLE = "revenue_multiple"


class ProjectStage(str, Enum):
    IDEA = "idea"
    MVP = "mvp"
    BETA = "beta"
    LIVE = "live"
    SCALING = "scaling"


class StartupProfile(BaseModel):
    stage: ProjectStage = ProjectStage.IDEA
    has_revenue: bool = False
    monthly_revenue: Optional[float] = Field(default=None, description="Current monthly revenue, if any")
    has_traction: bool = False
    has_exit_scenario: bool = False

    def generates_revenue(self) -> bool:
        return self.has_revenue or bool(self.monthly_revenue and self.monthly_revenue > 0)


class MethodApplicabilityWarning(BaseModel):
    model_config = ConfigDict(frozen=True)

    method: ValuationMethod
    message: str


class ValidationWarning(BaseModel):
    model_config = ConfigDict(frozen=True)

    field: str
    message: str


class ValuationMethodResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    method: ValuationMethod
    value: float
    confidence: float = Field(..., description="Percentage (0-100) of trust in the estimate")
    breakdown: Dict[str, float] = Field(default_factory=dict)
    notes: List[str] = Field(default_factory=list)
    warnings: List[MethodApplicabilityWarning] = Field(default_factory=list)
    inputs: Dict[str, Any] = Field(default_factory=dict)


def clamp(value: float, lower: float, upper: float) -> float:
    return max(lower, min(upper, value))
