from __future__ import annotations


class ValuationEngineError(Exception):
    """Base class for configuration and lookup errors.

    Numeric problems in user input never raise; they are reported in the
    notes of the returned result instead.
    """


class UnknownWeightingStrategyError(ValuationEngineError, ValueError):
    def __init__(self, name: str) -> None:
        super().__init__(f"Unknown weighting strategy: {name}")
        self.name = name


class UnknownFactorError(ValuationEngineError, KeyError):
    def __init__(self, key: str) -> None:
        super().__init__(f"Unknown valuation factor: {key}")
        self.key = key
