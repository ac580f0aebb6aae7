"""
LogSight Web API

FastAPI application exposing read-only projections of a reconstructed match.

This package exposes:
- app: The FastAPI application (used by uvicorn and server.py)
- match_store: The MatchStore behind the GET endpoints (tests repoint its log)
"""

import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from logsight import __version__
from logsight.api.routes_match import router as match_router
from logsight.api.shared import MatchStore

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

# =============================================================================
# FastAPI App Creation
# =============================================================================

app = FastAPI(
    title="LogSight API",
    description="CS match log analyzer - rounds, scores, team identities and player stats",
    version=__version__,
)

# =============================================================================
# CORS Configuration
# =============================================================================

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["GET", "POST"],
    allow_headers=["*"],
)

# =============================================================================
# Global Instances
# =============================================================================

match_store = MatchStore()

# =============================================================================
# Global Exception Handler
# =============================================================================


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Global exception handler to prevent information disclosure."""
    logger.exception(f"Unhandled exception for {request.method} {request.url.path}")

    return JSONResponse(
        status_code=500,
        content={
            "error": "Internal server error",
            "detail": "An unexpected error occurred. Please try again later.",
        },
    )


# =============================================================================
# Routers
# =============================================================================

app.include_router(match_router)
