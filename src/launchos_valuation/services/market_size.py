from __future__ import annotations

import logging
import math
from datetime import date
from typing import List

from ..models.common import clamp
from ..models.market import (
    BottomUpMarketInput,
    MarketSize,
    MarketSizeInput,
    MarketSizeMethodology,
    MarketSizeResult,
    TopDownMarketInput,
)

logger = logging.getLogger(__name__)

TOP_DOWN_SOURCE = "Industry report / estimate"
BOTTOM_UP_SOURCE = "Bottom-up calculation"


def _non_negative(name: str, value: float, notes: List[str]) -> float:
    if value < 0:
        notes.append(f"{name} was negative and has been set to 0")
        return 0.0
    return value


def _percent(name: str, value: float, notes: List[str]) -> float:
    result = clamp(value, 0.0, 100.0)
    if result != value:
        notes.append(f"{name} was {value:g}% and has been clamped to {result:g}%")
    return result


def calculate_market_size(data: MarketSizeInput) -> MarketSizeResult:
    """Produce nested TAM/SAM/SOM figures.

    Percentages are clamped to [0, 100] and amounts to non-negative values,
    so SOM <= SAM <= TAM holds for any input. Values are not rounded.
    """
    notes: List[str] = []
    if isinstance(data, TopDownMarketInput):
        methodology = MarketSizeMethodology.TOP_DOWN
        tam = _non_negative("total_market", data.total_market, notes)
        segment_pct = _percent("target_segment_percent", data.target_segment_percent, notes)
        share_pct = _percent("reachable_percent", data.reachable_percent, notes)
        source = TOP_DOWN_SOURCE
    elif isinstance(data, BottomUpMarketInput):
        methodology = MarketSizeMethodology.BOTTOM_UP
        customers = _non_negative("total_customers", data.total_customers, notes)
        price = _non_negative("average_price", data.average_price, notes)
        frequency = _non_negative("purchase_frequency", data.purchase_frequency, notes)
        tam = customers * price * frequency
        segment_pct = _percent("targetable_percent", data.targetable_percent, notes)
        share_pct = _percent("capture_percent", data.capture_percent, notes)
        source = BOTTOM_UP_SOURCE
    else:
        raise TypeError(f"Unsupported market size input: {type(data).__name__}")

    if not math.isfinite(tam):
        notes.append("Total market is not a finite number and has been set to 0")
        tam = 0.0
    sam = tam * (segment_pct / 100)
    som = sam * (share_pct / 100)
    year = data.year or date.today().year
    logger.debug("Market size (%s): TAM=%.2f SAM=%.2f SOM=%.2f", methodology.value, tam, sam, som)

    def market(value: float, description: str) -> MarketSize:
        return MarketSize(value=value, currency=data.currency, year=year, source=source, methodology=description)

    return MarketSizeResult(
        methodology=methodology,
        tam=market(tam, f"TAM: total market {data.region}"),
        sam=market(sam, f"SAM: {segment_pct:g}% of TAM addressable"),
        som=market(som, f"SOM: {share_pct:g}% market share within 3 years"),
        notes=notes,
    )
