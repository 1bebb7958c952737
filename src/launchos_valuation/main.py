from __future__ import annotations

import logging
import time
import uuid
from typing import Dict

from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse

from .config import get_settings
from .exceptions import UnknownFactorError, ValuationEngineError
from .models.berkus import BERKUS_FACTOR_DEFINITIONS, FactorDefinition
from .models.common import ProjectStage, ValuationMethodResult
from .models.market import MarketSizeResult
from .models.scorecard import SCORECARD_FACTOR_DEFINITIONS
from .models.valuation import ValuationReport, ValuationRequest
from .schemas import (
    AggregateRequest,
    AggregateResponse,
    ApplicableMethodsResponse,
    BerkusRequest,
    BerkusResponse,
    ComparablesRequest,
    CostToDuplicateRequest,
    DCFRequest,
    FactorListResponse,
    MarketSizeRequest,
    RevenueMultipleRequest,
    ScorecardRequest,
    ScorecardResponse,
    ValuationCompareResponse,
    ValuationCreateRequest,
    ValuationCreateResponse,
    ValuationListResponse,
    ValuationRunRequest,
    ValuationRunResponse,
    ValuationSummary,
    VCMethodRequest,
)
from .services.aggregator import aggregate_valuations
from .services.calculator import ValuationCalculator
from .services.formatting import format_confidence, format_currency
from .services.market_size import calculate_market_size
from .services.methods import (
    calculate_berkus,
    calculate_comparables,
    calculate_cost_to_duplicate,
    calculate_dcf,
    calculate_revenue_multiple,
    calculate_scorecard,
    calculate_vc_method,
    get_applicable_methods,
    get_berkus_factor_info,
    get_scorecard_factor_info,
    suggest_berkus_improvements,
    validate_scorecard_weights,
)

settings = get_settings()
logging.basicConfig(level=settings.log_level.upper())
logger = logging.getLogger("launchos_valuation")

app = FastAPI(title=settings.app_name, version=settings.version)

VALUATIONS: Dict[str, ValuationRequest] = {}
calculator = ValuationCalculator(settings)


def _run_response(report: ValuationReport) -> ValuationRunResponse:
    aggregated = report.aggregated
    summary = ValuationSummary(
        low=format_currency(aggregated.low),
        mid=format_currency(aggregated.mid),
        high=format_currency(aggregated.high),
        confidence=format_confidence(report.confidence.score),
    )
    return ValuationRunResponse(report=report, summary=summary)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    logger.info("Incoming request: %s %s", request.method, request.url.path)
    start_time = time.perf_counter()
    response = await call_next(request)
    logger.info(
        "Request completed: %s %s Status: %s Time: %.4fs",
        request.method,
        request.url.path,
        response.status_code,
        time.perf_counter() - start_time,
    )
    return response


@app.exception_handler(UnknownFactorError)
async def unknown_factor_handler(request: Request, exc: UnknownFactorError) -> JSONResponse:
    return JSONResponse(status_code=404, content={"detail": f"Unknown valuation factor: {exc.key}"})


@app.exception_handler(ValuationEngineError)
async def engine_error_handler(request: Request, exc: ValuationEngineError) -> JSONResponse:
    logger.warning("Rejected request %s: %s", request.url.path, exc)
    return JSONResponse(status_code=400, content={"detail": str(exc)})


@app.get("/factors/berkus", response_model=FactorListResponse)
def list_berkus_factors() -> FactorListResponse:
    return FactorListResponse(factors=BERKUS_FACTOR_DEFINITIONS)


@app.get("/factors/scorecard", response_model=FactorListResponse)
def list_scorecard_factors() -> FactorListResponse:
    return FactorListResponse(factors=SCORECARD_FACTOR_DEFINITIONS)


@app.get("/factors/berkus/{key}", response_model=FactorDefinition)
def get_berkus_factor(key: str) -> FactorDefinition:
    return get_berkus_factor_info(key)


@app.get("/factors/scorecard/{key}", response_model=FactorDefinition)
def get_scorecard_factor(key: str) -> FactorDefinition:
    return get_scorecard_factor_info(key)


@app.post("/methods/berkus", response_model=BerkusResponse)
def run_berkus(payload: BerkusRequest) -> BerkusResponse:
    result = calculate_berkus(payload.factors, max_per_factor=settings.berkus_max_per_factor, profile=payload.profile)
    suggestions = suggest_berkus_improvements(payload.factors, settings.berkus_max_per_factor)
    return BerkusResponse(result=result, suggestions=suggestions)


@app.post("/methods/scorecard", response_model=ScorecardResponse)
def run_scorecard(payload: ScorecardRequest) -> ScorecardResponse:
    base = payload.base_valuation if payload.base_valuation is not None else settings.scorecard_base_valuation
    result = calculate_scorecard(payload.factors, base, profile=payload.profile)
    return ScorecardResponse(result=result, validation_warnings=validate_scorecard_weights(payload.factors))


@app.post("/methods/vc-method", response_model=ValuationMethodResult)
def run_vc_method(payload: VCMethodRequest) -> ValuationMethodResult:
    return calculate_vc_method(payload.data, profile=payload.profile)


@app.post("/methods/dcf", response_model=ValuationMethodResult)
def run_dcf(payload: DCFRequest) -> ValuationMethodResult:
    return calculate_dcf(payload.data, profile=payload.profile)


@app.post("/methods/comparables", response_model=ValuationMethodResult)
def run_comparables(payload: ComparablesRequest) -> ValuationMethodResult:
    return calculate_comparables(payload.data, profile=payload.profile)


@app.post("/methods/cost-to-duplicate", response_model=ValuationMethodResult)
def run_cost_to_duplicate(payload: CostToDuplicateRequest) -> ValuationMethodResult:
    return calculate_cost_to_duplicate(payload.data, profile=payload.profile)


@app.post("/methods/revenue-multiple", response_model=ValuationMethodResult)
def run_revenue_multiple(payload: RevenueMultipleRequest) -> ValuationMethodResult:
    return calculate_revenue_multiple(payload.data, profile=payload.profile)


@app.get("/stages/{stage}/methods", response_model=ApplicableMethodsResponse)
def list_applicable_methods(stage: ProjectStage) -> ApplicableMethodsResponse:
    return ApplicableMethodsResponse(stage=stage, methods=get_applicable_methods(stage))


@app.post("/market-size", response_model=MarketSizeResult)
def run_market_size(payload: MarketSizeRequest) -> MarketSizeResult:
    return calculate_market_size(payload.data)


@app.post("/aggregate", response_model=AggregateResponse)
def aggregate(payload: AggregateRequest) -> AggregateResponse:
    strategy = payload.strategy or settings.weighting_strategy
    return AggregateResponse(aggregated=aggregate_valuations(payload.results, strategy))


@app.post("/valuations", response_model=ValuationCreateResponse)
def create_valuation(payload: ValuationCreateRequest) -> ValuationCreateResponse:
    valuation = payload.valuation
    if payload.clone_from:
        base = VALUATIONS.get(payload.clone_from)
        if base is None:
            raise HTTPException(status_code=404, detail="Valuation not found")
        overrides = {name: getattr(valuation, name) for name in valuation.model_fields_set}
        valuation = base.model_copy(update=overrides)
    valuation_id = uuid.uuid4().hex
    VALUATIONS[valuation_id] = valuation
    return ValuationCreateResponse(valuation_id=valuation_id)


@app.get("/valuations", response_model=ValuationListResponse)
def list_valuations() -> ValuationListResponse:
    return ValuationListResponse(valuations=list(VALUATIONS.keys()))


@app.post("/run", response_model=ValuationRunResponse)
def run_valuation(payload: ValuationRunRequest) -> ValuationRunResponse:
    valuation: ValuationRequest | None = None
    if payload.valuation is not None:
        valuation = payload.valuation
    elif payload.valuation_id:
        valuation = VALUATIONS.get(payload.valuation_id)
    if valuation is None:
        raise HTTPException(status_code=404, detail="Valuation not found")
    if payload.weighting:
        valuation = valuation.model_copy(update={"weighting": payload.weighting})
    return _run_response(calculator.run(valuation))


@app.get("/valuations/{valuation_id}", response_model=ValuationRunResponse)
def get_valuation_report(valuation_id: str) -> ValuationRunResponse:
    valuation = VALUATIONS.get(valuation_id)
    if valuation is None:
        raise HTTPException(status_code=404, detail="Valuation not found")
    return _run_response(calculator.run(valuation))


@app.get("/valuations/{valuation_id}/compare", response_model=ValuationCompareResponse)
def compare_valuations(valuation_id: str, ids: str = "") -> ValuationCompareResponse:
    valuation_ids = [valuation_id] + [part for part in ids.split(",") if part]
    lows, mids, highs = [], [], []
    for _id in valuation_ids:
        valuation = VALUATIONS.get(_id)
        if valuation is None:
            raise HTTPException(status_code=404, detail=f"Valuation {_id} not found")
        aggregated = calculator.run(valuation).aggregated
        lows.append(aggregated.low)
        mids.append(aggregated.mid)
        highs.append(aggregated.high)
    return ValuationCompareResponse(valuation_ids=valuation_ids, low=lows, mid=mids, high=highs)


@app.get("/health")
def healthcheck() -> Dict[str, str]:
    return {"status": "ok"}
