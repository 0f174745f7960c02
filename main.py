"""
FastAPI Application Entry Point

Integrates:
  - Interactions webhook (immediate and deferred)
  - Health checks
  - Middleware for logging & error handling

Run: uvicorn main:app --reload --host 0.0.0.0 --port 8000
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from config import Config
from infra.bootstrap import InfraBootstrap, bootstrap_interactions
from interactions.webhook import router as interactions_router

# Setup logging
logging.basicConfig(
    level=getattr(logging, Config.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan: startup and shutdown handlers.
    """
    # Startup
    infra = bootstrap_interactions()
    logger.info("=" * 60)
    logger.info("Interactions service starting up...")
    logger.info(f"Application: {infra.config.application_id}")
    logger.info(f"Commands: {', '.join(infra.registry)}")
    logger.info(f"Response mode: {Config.RESPONSE_MODE}")
    logger.info(f"Environment: {Config.ENVIRONMENT}")
    logger.info("=" * 60)

    yield

    # Shutdown - background follow-ups are left running, not cancelled
    pending = infra.coordinator.pending_background_tasks
    if pending:
        logger.warning(f"Shutting down with {pending} follow-up(s) still pending")
    logger.info("Interactions service shutting down...")


# Create FastAPI app
app = FastAPI(
    title="Interactions Endpoint",
    description="Signature-verified interaction webhook with command dispatch",
    version="1.0.0",
    lifespan=lifespan,
)


# Middleware for logging
@app.middleware("http")
async def log_requests(request: Request, call_next):
    """Log all requests."""
    logger.debug(f"{request.method} {request.url.path}")
    try:
        response = await call_next(request)
        return response
    except Exception as e:
        logger.error(f"Request error: {str(e)}", exc_info=True)
        return JSONResponse(
            status_code=500,
            content={"detail": "Internal server error"},
        )


# Include routers
app.include_router(interactions_router)


# Health check endpoints
@app.get("/health/live")
async def health_live():
    """Live health check (Kubernetes liveness probe)."""
    return {"status": "alive"}


@app.get("/health/ready")
async def health_ready():
    """Readiness health check (Kubernetes readiness probe)."""
    infra = InfraBootstrap.current()
    if infra is None:
        return {"status": "not_ready", "reason": "not bootstrapped"}
    missing = infra.config.missing()
    if missing:
        return {"status": "not_ready", "reason": f"missing: {', '.join(missing)}"}
    return {"status": "ready"}


@app.get("/")
async def root():
    """Root endpoint with API info."""
    return {
        "name": "Interactions Endpoint",
        "version": "1.0.0",
        "status": "running",
        "endpoints": {
            "interactions": "POST /interactions",
            "interactions_immediate": "POST /interactions/immediate",
            "interactions_deferred": "POST /interactions/deferred",
            "health_live": "GET /health/live",
            "health_ready": "GET /health/ready",
        },
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        app,
        host="0.0.0.0",
        port=Config.PORT,
        reload=Config.ENVIRONMENT == "development",
    )
