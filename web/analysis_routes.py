"""
Analysis Routes - stateless adjustment, comp selection, market and agent
endpoints
"""

from __future__ import annotations

from fastapi import APIRouter, Depends

from core.agents import run_agent
from core.comp_engine import AdjustmentCalculator, AdjustmentRates, CompSelector
from core.market import analyze_market
from utils.config import Config
from web.identity import Identity, get_identity
from web.schemas import AdjustmentRequest, AgentRequest, CompSelectionRequest, MarketAnalysisRequest


router = APIRouter(prefix="/analysis", tags=["analysis"])


@router.post("/adjustments")
async def calculate_adjustments(body: AdjustmentRequest, identity: Identity = Depends(get_identity)):
    """Adjust one comparable against a subject property."""
    calculator = AdjustmentCalculator(AdjustmentRates.from_dict(body.rates or {}))
    return calculator.calculate(body.subject, body.comparable).to_dict()


@router.post("/comparables/select")
async def select_comparables(body: CompSelectionRequest, identity: Identity = Depends(get_identity)):
    """Rank candidate comparables and estimate a value for the subject."""
    max_results = body.max_results or Config.load().max_comp_results
    selector = CompSelector(
        calculator=AdjustmentCalculator(AdjustmentRates.from_dict(body.rates or {})),
        weights=body.weights,
    )
    return selector.select(body.subject, body.comparables, max_results=max_results).to_dict()


@router.post("/market")
async def market_analysis(body: MarketAnalysisRequest, identity: Identity = Depends(get_identity)):
    return analyze_market(body.location, body.sales_data).to_dict()


@router.post("/agents/{agent_type}")
async def run_analysis_agent(
    agent_type: str,
    body: AgentRequest,
    identity: Identity = Depends(get_identity),
):
    """Unknown agents and malformed payloads surface as 400 via the AgentError handler."""
    return run_agent(agent_type, body.data, body.options)
