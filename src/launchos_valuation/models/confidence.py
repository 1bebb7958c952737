from __future__ import annotations

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from .common import ProjectStage


class DataSharingTier(str, Enum):
    MINIMAL = "minimal"
    BASIC = "basic"
    DETAILED = "detailed"
    FULL = "full"


class ConfidenceLevel(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class ConfidenceInputs(BaseModel):
    tier: Optional[DataSharingTier] = Field(default=None, description="Derived from completeness when omitted")
    fields_filled: int = 0
    fields_total: int = 0
    has_revenue_data: bool = False
    has_user_data: bool = False
    has_relevant_experience: bool = False
    competitor_count: int = 0
    has_tam: bool = False
    has_sam: bool = False
    has_som: bool = False
    has_market_timing: bool = False
    has_market_type: bool = False
    stage: ProjectStage = ProjectStage.IDEA


class ConfidenceFactors(BaseModel):
    model_config = ConfigDict(frozen=True)

    data_completeness: float
    data_quality: float
    method_applicability: float
    market_data: float

    def total(self) -> float:
        return self.data_completeness + self.data_quality + self.method_applicability + self.market_data


class ImprovementSuggestion(BaseModel):
    model_config = ConfigDict(frozen=True)

    factor: str
    suggestion: str
    potential_increase: float


class ConfidenceResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    score: float
    tier: DataSharingTier
    level: ConfidenceLevel
    factors: ConfidenceFactors
    method_agreement: float
    explanations: List[str] = Field(default_factory=list)
    suggestions: List[ImprovementSuggestion] = Field(default_factory=list)
