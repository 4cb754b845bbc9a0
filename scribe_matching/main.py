"""
Scribe Matching Engine - FastAPI Application

Main entry point for the matching API.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from scribe_matching import __version__
from scribe_matching.config.settings import get_settings
from scribe_matching.infrastructure.exceptions import (
    ScribeMatchingError,
    ValidationError,
    ConfigurationError,
    RateLimitError,
    AIServiceError,
)

settings = get_settings()

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.log_level.upper()),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler for startup/shutdown."""
    logger.info(
        f"Scribe Matching Engine starting in {settings.environment} mode "
        f"(oracle: {settings.llm_provider})..."
    )
    yield
    logger.info("Scribe Matching Engine shutting down...")


app = FastAPI(
    title="Scribe Matching Engine",
    description="Pairs blind and visually impaired students with qualified exam scribes",
    version=__version__,
    lifespan=lifespan,
    debug=settings.debug,
)


# ============================================================================
# Exception Handlers
# ============================================================================

@app.exception_handler(ValidationError)
async def validation_error_handler(request: Request, exc: ValidationError):
    """Handle validation errors."""
    return JSONResponse(
        status_code=400,
        content=exc.to_dict(),
    )


@app.exception_handler(RateLimitError)
async def rate_limit_error_handler(request: Request, exc: RateLimitError):
    """Handle rate limit errors."""
    return JSONResponse(
        status_code=429,
        content=exc.to_dict(),
    )


@app.exception_handler(AIServiceError)
async def ai_service_error_handler(request: Request, exc: AIServiceError):
    """Handle oracle errors that escaped the score adapter."""
    return JSONResponse(
        status_code=503,
        content=exc.to_dict(),
    )


@app.exception_handler(ConfigurationError)
async def configuration_error_handler(request: Request, exc: ConfigurationError):
    """Handle missing or invalid configuration."""
    return JSONResponse(
        status_code=503,
        content=exc.to_dict(),
    )


@app.exception_handler(ScribeMatchingError)
async def general_error_handler(request: Request, exc: ScribeMatchingError):
    """Handle all other application errors."""
    return JSONResponse(
        status_code=500,
        content=exc.to_dict(),
    )


# ============================================================================
# Health Check
# ============================================================================

@app.get("/")
async def root():
    """Root endpoint."""
    return {"message": "Scribe Matching Engine", "version": __version__, "docs": "/docs"}


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "service": "scribe-matching"}


# ============================================================================
# Import and register routers
# ============================================================================

from scribe_matching.api.routes import matching

app.include_router(matching.router, prefix="/api", tags=["Matching"])
