from __future__ import annotations

from typing import Dict, List

from pydantic import BaseModel, Field

MAX_PER_FACTOR = 500_000.0


class BerkusFactors(BaseModel):
    sound_idea: float = Field(50.0, description="Strength of the basic value proposition, 0-100")
    prototype: float = Field(50.0, description="Technology risk reduction, 0-100")
    quality_team: float = Field(50.0, description="Execution risk reduction, 0-100")
    strategic_relations: float = Field(50.0, description="Market risk reduction, 0-100")
    product_rollout: float = Field(50.0, description="Production risk reduction, 0-100")

    def scores(self) -> Dict[str, float]:
        return {name: getattr(self, name) for name in BERKUS_FACTOR_KEYS}


BERKUS_FACTOR_KEYS = (
    "sound_idea",
    "prototype",
    "quality_team",
    "strategic_relations",
    "product_rollout",
)


class FactorDefinition(BaseModel):
    key: str
    name: str
    description: str
    questions: List[str] = Field(default_factory=list)
    scoring: Dict[int, str] = Field(default_factory=dict, description="Anchor descriptions keyed by score")
    default_weight: float | None = None


BERKUS_FACTOR_DEFINITIONS: Dict[str, FactorDefinition] = {
    "sound_idea": FactorDefinition(
        key="sound_idea",
        name="Sound idea",
        description="Is the basic idea sound and the problem real?",
        questions=[
            "Does the product solve a real problem?",
            "Is there a clear target market?",
            "Is the value proposition easy to understand?",
        ],
        scoring={
            0: "No clear idea or no real problem",
            25: "Idea exists, problem unclear",
            50: "Solid idea, problem still needs validation",
            75: "Good idea, problem confirmed by research",
            100: "Excellent idea, problem clearly validated",
        },
    ),
    "prototype": FactorDefinition(
        key="prototype",
        name="Prototype / MVP",
        description="Reduces technology risk",
        questions=[
            "Is there a working prototype?",
            "Has the core functionality been demonstrated?",
            "Is the technology feasible?",
        ],
        scoring={
            0: "Concept only, no prototype",
            25: "Mockups or wireframes",
            50: "Functional prototype with limitations",
            75: "MVP with core features live",
            100: "Complete, production-ready product",
        },
    ),
    "quality_team": FactorDefinition(
        key="quality_team",
        name="Management team",
        description="Reduces execution risk",
        questions=[
            "Does the team have relevant experience?",
            "Are the skills complementary?",
            "Is there a track record of success?",
        ],
        scoring={
            0: "No team, no relevant experience",
            25: "Solo founder with some experience",
            50: "Small team, mixed experience",
            75: "Strong team with domain expertise",
            100: "Experienced team with a proven track record",
        },
    ),
    "strategic_relations": FactorDefinition(
        key="strategic_relations",
        name="Strategic relationships",
        description="Reduces market risk",
        questions=[
            "Are there partnerships or advisors?",
            "Are there relationships with potential customers?",
            "Is there access to important networks?",
        ],
        scoring={
            0: "No relevant relationships",
            25: "First contacts established",
            50: "LOIs or informal partnerships",
            75: "Firm partnerships or first customers",
            100: "Strategic partners and validated channels",
        },
    ),
    "product_rollout": FactorDefinition(
        key="product_rollout",
        name="Product rollout",
        description="Reduces production risk",
        questions=[
            "Is the product already on the market?",
            "Are there paying customers?",
            "Is the go-to-market plan clear?",
        ],
        scoring={
            0: "No market activity yet",
            25: "Beta users available",
            50: "First paying customers",
            75: "Growing customer base",
            100: "Established product with recurring customers",
        },
    ),
}
