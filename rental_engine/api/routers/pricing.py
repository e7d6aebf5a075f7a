"""
Pricing routes for rental quotes.
"""

import logging
from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException

from rental_engine.api.dependencies import get_clock, get_engine
from rental_engine.api.schemas import (
    PricingBreakdownSchema,
    QuoteRequest,
    QuoteResponse,
    RejectionDetail,
)
from rental_engine.availability import format_duration, rejection_message
from rental_engine.engine import RentalEngine
from rental_engine.models import RejectionReason

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/quote", response_model=QuoteResponse)
async def quote_rental(
    request: QuoteRequest,
    engine: RentalEngine = Depends(get_engine),
    now: datetime = Depends(get_clock),
):
    """
    Validate a rental window and return its price breakdown.

    Invalid windows return 422 with the rejection reason and a
    user-facing message.
    """
    schedule = request.schedule.to_domain()
    outcome = engine.price_rental(
        schedule,
        request.window(),
        request.delivery_requested,
        now,
        blocked_ranges=[blocked.to_domain() for blocked in request.blocked_ranges],
    )

    if isinstance(outcome, RejectionReason):
        logger.info(f"Quote rejected: {outcome.value}")
        detail = RejectionDetail(
            reason=outcome.value,
            message=rejection_message(
                outcome, schedule.min_rental_duration, schedule.max_rental_duration
            ),
        )
        raise HTTPException(status_code=422, detail=detail.model_dump())

    return QuoteResponse(
        breakdown=PricingBreakdownSchema.from_domain(outcome),
        duration_text=format_duration(outcome.total_hours),
    )
