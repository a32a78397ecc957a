"""
FastAPI Application Entry Point

Integrates:
  - Wati webhook trigger
  - Wati action node
  - Health checks
  - Middleware for logging & error handling

Run: uvicorn main:app --reload --host 0.0.0.0 --port 8000
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from api.wati_node import router as wati_node_router
from config import Config
from transport.wati.webhook import get_wati_trigger, router as wati_webhook_router

# Setup logging
logging.basicConfig(
    level=Config.LOG_LEVEL,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan: startup and shutdown handlers.
    """
    # Startup
    logger.info("=" * 60)
    logger.info("Wati integration starting up...")
    logger.info(f"Environment: {Config.ENVIRONMENT}")
    trigger = get_wati_trigger()
    logger.info(f"Trigger event filter: {trigger.event_filter.value}")
    missing = Config.missing()
    if missing:
        logger.warning(f"Missing or invalid configuration: {', '.join(missing)}")
    logger.info("=" * 60)

    yield

    # Shutdown
    logger.info("Wati integration shutting down...")


# Create FastAPI app
app = FastAPI(
    title="Wati Integration API",
    description="Wati WhatsApp API as workflow trigger and action nodes",
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
app.include_router(wati_webhook_router)
app.include_router(wati_node_router)


# Health check endpoints
@app.get("/health/live")
async def health_live():
    """Live health check (Kubernetes liveness check)."""
    return {"status": "alive"}


@app.get("/health/ready")
async def health_ready():
    """Readiness health check (Kubernetes readiness check)."""
    missing = Config.missing()
    if missing:
        return {"status": "not_ready", "reason": f"missing: {', '.join(missing)}"}
    return {"status": "ready"}


@app.get("/")
async def root():
    """Root endpoint with API info."""
    return {
        "name": "Wati Integration API",
        "version": "1.0.0",
        "status": "running",
        "endpoints": {
            "wati_webhook": "POST /webhook/wati",
            "wati_node": "POST /nodes/wati/{resource}/{operation}",
            "wati_credentials_test": "GET /nodes/wati/credentials/test",
            "health_live": "GET /health/live",
            "health_ready": "GET /health/ready",
        },
    }


@app.get("/config/info")
async def config_info():
    """Get non-sensitive configuration info."""
    return {
        "environment": Config.ENVIRONMENT,
        "trigger_event": Config.WATI_TRIGGER_EVENT,
        "workflow_forwarding": bool(Config.WORKFLOW_WEBHOOK_URL),
        "agent_port": Config.AGENT_PORT,
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        app,
        host="0.0.0.0",
        port=Config.AGENT_PORT,
        reload=Config.ENVIRONMENT == "development",
    )
