from __future__ import annotations

from enum import Enum
from typing import Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class MarketSizeMethodology(str, Enum):
    TOP_DOWN = "top-down"
    BOTTOM_UP = "bottom-up"


class MarketSize(BaseModel):
    model_config = ConfigDict(frozen=True)

    value: float
    currency: str
    year: int
    source: str
    methodology: str


class TopDownMarketInput(BaseModel):
    methodology: Literal["top-down"] = "top-down"
    total_market: float = Field(..., description="Externally sourced total market figure")
    target_segment_percent: float = 10.0
    reachable_percent: float = 5.0
    region: str = "DACH"
    currency: str = "EUR"
    year: Optional[int] = None


class BottomUpMarketInput(BaseModel):
    methodology: Literal["bottom-up"] = "bottom-up"
    total_customers: float
    average_price: float
    purchase_frequency: float = Field(12.0, description="Purchases per customer per year")
    targetable_percent: float = 30.0
    capture_percent: float = 5.0
    region: str = "DACH"
    currency: str = "EUR"
    year: Optional[int] = None


MarketSizeInput = Union[TopDownMarketInput, BottomUpMarketInput]


class MarketSizeResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    methodology: MarketSizeMethodology
    tam: MarketSize
    sam: MarketSize
    som: MarketSize
    notes: list[str] = Field(default_factory=list)
