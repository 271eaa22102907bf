"""
Rules API - FastAPI router for quoting fee rules.
"""
import logging
from decimal import Decimal, InvalidOperation, Overflow
from typing import Optional

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel, Field

from ..engine import compute_fee, format_rules, parse_rules, resolve_percent
from ..engine.normalize import normalize_rules

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/rules", tags=["rules"])


class TierResponse(BaseModel):
    """A parsed fee tier (decimal strings, bounds may be "Infinity")."""
    min: str
    max: str
    percent: str


class RulesQuoteRequest(BaseModel):
    """Request model for quoting a subtotal against rule text."""
    rules: str
    subtotal: Decimal = Field(ge=0)


class RulesQuoteResponse(BaseModel):
    """Response model for a rules quote."""
    tiers: list[TierResponse]
    percent: Optional[str]
    fee_amount: str
    normalized_rules: str
    canonical_rules: str


@router.post("/test", response_model=RulesQuoteResponse)
async def quote_rules(request: RulesQuoteRequest):
    """Parse rule text and quote the fee for a subtotal."""
    rules = parse_rules(request.rules)
    percent = resolve_percent(rules, request.subtotal)
    try:
        fee_amount = compute_fee(request.subtotal, percent)
    except (InvalidOperation, Overflow):
        raise HTTPException(status_code=422, detail="Fee amount out of range")

    logger.debug("Quoted %s against %d tiers: %s", request.subtotal, len(rules), fee_amount)

    return RulesQuoteResponse(
        tiers=[
            TierResponse(min=f"{r.min:f}", max=f"{r.max:f}", percent=f"{r.percent:f}")
            for r in rules
        ],
        percent=f"{percent:f}" if percent is not None else None,
        fee_amount=str(fee_amount),
        normalized_rules=normalize_rules(request.rules),
        canonical_rules=format_rules(rules),
    )
