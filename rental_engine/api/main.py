"""
FastAPI application for the rental engine.
"""

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from rental_engine import __version__
from rental_engine.api.dependencies import get_settings
from rental_engine.api.routers import pricing, search
from rental_engine.error_handling import InvalidFiltersError

# Configure logging
logging.basicConfig(
    level=getattr(logging, get_settings().log_level.upper(), logging.INFO),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


app = FastAPI(
    title="Rental Engine API",
    description="Search ranking and rental pricing for a peer-to-peer rental marketplace",
    version=__version__,
)

app.include_router(search.router, tags=["search"])
app.include_router(pricing.router, prefix="/pricing", tags=["pricing"])


@app.exception_handler(InvalidFiltersError)
async def invalid_filters_handler(request: Request, exc: InvalidFiltersError):
    """Report out-of-range filters as a validation error"""
    logger.info(f"Rejected search filters: {exc}")
    return JSONResponse(status_code=422, content={"detail": str(exc)})


@app.get("/health")
async def health_check():
    """Health check endpoint"""
    return {
        "status": "healthy",
        "version": __version__
    }
