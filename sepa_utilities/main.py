"""
SEPA Utilities - Main Application

HTTP service exposing the SEPA field validation library:
- Field checks and sanitizing for pain.001 / pain.008 files
- Required keys per schema version
- IBAN / BIC cross checks
- TARGET2 business day calendar

Run with: uvicorn sepa_utilities.main:app
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .api import health, validation
from .config import settings

logger = logging.getLogger(__name__)


def setup_logging() -> None:
    """Configure the root logger from settings.log_level."""
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


# Application lifespan for startup/shutdown events
@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Manage application lifecycle.

    Startup:
    - Configure logging
    """
    setup_logging()
    logger.info(f"{settings.app_name} {settings.app_version} starting")

    yield

    logger.info(f"{settings.app_name} shutting down")


# Create FastAPI application
app = FastAPI(
    title=settings.app_name,
    description="""
## SEPA Utilities API

Validation and sanitizing of SEPA credit transfer (pain.001) and direct
debit (pain.008) fields.

### Supported Messages

| Transaction | Versions |
|-------------|----------|
| Credit transfer | pain.001.001.03 (incl. GBIC, CH 02), pain.001.002.03, pain.001.003.03 |
| Direct debit | pain.008.001.02 (incl. GBIC, Austrian 003, CH 03), pain.008.002.02, pain.008.003.02 |

### What is checked

- IBAN and creditor identifier structure and MOD 97-10 checksum
- BIC structure and IBAN / BIC country consistency
- Amounts, currency, codes, identifiers, text fields and dates
- TARGET2 business days for execution and collection dates

A valid value does not have to exist; no bank directory is consulted.
    """,
    version=settings.app_version,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
    openapi_tags=[
        {
            "name": "Health",
            "description": "Service health and readiness probes",
        },
        {
            "name": "SEPA Validation",
            "description": "Field validation, sanitizing, required keys and the TARGET2 calendar.",
        },
    ],
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# =============================================================================
# API Routes
# =============================================================================

# Health check (not versioned)
app.include_router(health.router, tags=["Health"])

app.include_router(validation.router)


@app.get("/", include_in_schema=False)
async def root():
    """Root endpoint with service information."""
    return {
        "service": settings.app_name,
        "version": settings.app_version,
        "documentation": "/docs",
        "health": "/health",
    }
