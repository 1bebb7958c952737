from __future__ import annotations

from typing import Dict

from pydantic import BaseModel, Field

from .berkus import FactorDefinition

AVERAGE_PRE_SEED_VALUATION = 1_500_000.0
MAX_SCORECARD_SCORE = 150.0


class ScorecardFactor(BaseModel):
    weight: float = Field(..., description="Share of the comparison in percent")
    score: float = Field(100.0, description="Relative strength in percent, 100 = regional average")


class ScorecardFactors(BaseModel):
    team_strength: ScorecardFactor = Field(default_factory=lambda: ScorecardFactor(weight=30, score=100))
    market_size: ScorecardFactor = Field(default_factory=lambda: ScorecardFactor(weight=25, score=100))
    product_tech: ScorecardFactor = Field(default_factory=lambda: ScorecardFactor(weight=15, score=100))
    competition: ScorecardFactor = Field(default_factory=lambda: ScorecardFactor(weight=10, score=100))
    marketing_sales: ScorecardFactor = Field(default_factory=lambda: ScorecardFactor(weight=10, score=100))
    need_for_funding: ScorecardFactor = Field(default_factory=lambda: ScorecardFactor(weight=5, score=100))
    other: ScorecardFactor = Field(default_factory=lambda: ScorecardFactor(weight=5, score=100))

    def items(self) -> Dict[str, ScorecardFactor]:
        return {name: getattr(self, name) for name in SCORECARD_FACTOR_KEYS}

    def total_weight(self) -> float:
        return sum(factor.weight for factor in self.items().values())


SCORECARD_FACTOR_KEYS = (
    "team_strength",
    "market_size",
    "product_tech",
    "competition",
    "marketing_sales",
    "need_for_funding",
    "other",
)


SCORECARD_FACTOR_DEFINITIONS: Dict[str, FactorDefinition] = {
    "team_strength": FactorDefinition(
        key="team_strength",
        name="Team strength",
        description="Quality and experience of the founding team",
        default_weight=30,
    ),
    "market_size": FactorDefinition(
        key="market_size",
        name="Market size",
        description="Size and attractiveness of the target market",
        default_weight=25,
    ),
    "product_tech": FactorDefinition(
        key="product_tech",
        name="Product / technology",
        description="Strength of the product or technology",
        default_weight=15,
    ),
    "competition": FactorDefinition(
        key="competition",
        name="Competitive environment",
        description="Strength and density of the competition",
        default_weight=10,
    ),
    "marketing_sales": FactorDefinition(
        key="marketing_sales",
        name="Marketing / sales",
        description="Ability to acquire customers",
        default_weight=10,
    ),
    "need_for_funding": FactorDefinition(
        key="need_for_funding",
        name="Need for funding",
        description="How much capital is required?",
        default_weight=5,
    ),
    "other": FactorDefinition(
        key="other",
        name="Other factors",
        description="Further relevant factors",
        default_weight=5,
    ),
}
