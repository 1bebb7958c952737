from __future__ import annotations

from typing import Dict

from ..models.confidence import ConfidenceLevel
from .confidence import confidence_level

CURRENCY_SYMBOLS: Dict[str, str] = {
    "EUR": "€",
    "USD": "$",
    "GBP": "£",
    "CHF": "CHF ",
}

CONFIDENCE_LABELS: Dict[ConfidenceLevel, str] = {
    ConfidenceLevel.LOW: "Low",
    ConfidenceLevel.MEDIUM: "Medium",
    ConfidenceLevel.HIGH: "High",
}


def format_currency(value: float, currency: str = "EUR") -> str:
    symbol = CURRENCY_SYMBOLS.get(currency.upper(), f"{currency.upper()} ")
    sign = "-" if value < 0 else ""
    amount = abs(value)
    if amount >= 1_000_000_000:
        return f"{sign}{symbol}{amount / 1_000_000_000:.1f}B"
    if amount >= 1_000_000:
        return f"{sign}{symbol}{amount / 1_000_000:.1f}M"
    if amount >= 1_000:
        return f"{sign}{symbol}{amount / 1_000:.0f}K"
    return f"{sign}{symbol}{amount:.0f}"


def format_confidence(score: float) -> str:
    return f"{score:.0f}% ({CONFIDENCE_LABELS[confidence_level(score)]})"
