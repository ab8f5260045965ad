"""Quote API endpoint."""

import logging

from fastapi import APIRouter, Request

from quotesite.schemas import Quote

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/quote", tags=["Quotes"])


@router.get("", response_model=Quote)
def get_quote(request: Request):
    """Return one quote picked at random."""
    logger.info("Handling /api/quote request")
    return request.app.state.quotes.pick_random()
