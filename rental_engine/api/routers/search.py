"""
Search routes for rental listings.
"""

import logging
import time
from datetime import datetime

from fastapi import APIRouter, Depends

from rental_engine.api.dependencies import get_clock, get_engine, get_geocoder
from rental_engine.api.schemas import RankedResultSchema, SearchRequest, SearchResponse
from rental_engine.engine import RentalEngine
from rental_engine.geocoding import NominatimGeocoder

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/search", response_model=SearchResponse)
async def search_listings(
    request: SearchRequest,
    engine: RentalEngine = Depends(get_engine),
    now: datetime = Depends(get_clock),
    geocoder: NominatimGeocoder = Depends(get_geocoder),
):
    """
    Filter and rank the supplied listings.

    1. Uses the request's user coordinates, else the filter coordinates
    2. Otherwise geocodes the filter location; a failed lookup only disables
       the radius filter and distance sort
    3. Filters, ranks, and paginates with global ranks; without a limit
       the configured default result limit applies
    """
    start_time = time.time()
    filters = request.filters.to_domain()

    coordinates = None
    if request.user_coordinates is not None:
        coordinates = request.user_coordinates.to_domain()
    elif filters.coordinates is None and filters.location:
        coordinates = await geocoder.resolve_coordinates(filters.location)

    listings = [listing.to_domain() for listing in request.listings]
    ranked = engine.search(listings, filters, coordinates, clock=lambda: now)

    limit = request.limit
    if limit is None:
        limit = engine.settings.search.default_result_limit
    end = request.offset + limit
    page = ranked[request.offset:end]

    logger.info(
        f"Search '{filters.query}' by {filters.sort_by.value}: "
        f"{len(ranked)}/{len(listings)} listings matched"
    )

    return SearchResponse(
        results=[RankedResultSchema.from_domain(result) for result in page],
        total_count=len(ranked),
        coordinates_available=(coordinates or filters.coordinates) is not None,
        search_time_ms=(time.time() - start_time) * 1000,
    )
