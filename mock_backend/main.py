"""FastAPI application entry point"""

import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from .core.config import settings
from .api.v1.endpoints import mobile_api, test_scenarios, tracker_analysis
from .services.scenario_registry import get_scenario_registry

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s"
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Load scenario configuration so broken files fail at start-up"""
    registry = get_scenario_registry()
    logger.info(f"Loaded {len(registry.list_scenarios())} test scenarios from {registry.config_path}")
    yield


# Create FastAPI app
app = FastAPI(
    title=settings.api_title,
    version=settings.api_version,
    description="""
    Mobile Mock Backend with Test Scenarios

    Mock mobile API whose responses can be shaped per test session, so UI
    test flows can exercise slow networks, errors, empty catalogs and
    upload-duplication checks against one server.

    ## Workflow

    1. **Activate a scenario** - POST /api/test-scenarios/activate
    2. **Drive the app** - send `X-Test-Session-ID` with every mobile API call
    3. **Inspect** - GET /api/test-scenarios/{camera-performance,rotation-test,remove-listing-test}/analysis
    4. **Reset** - POST /api/test-scenarios/reset

    ## Features

    - YAML-configured scenarios with static, dynamic, error and custom responses
    - Per-scenario strategies that delay, track and rewrite traffic
    - In-memory sessions and trackers with automatic expiry
    """,
    debug=settings.debug,
    lifespan=lifespan
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(test_scenarios.router, prefix=settings.api_prefix)
app.include_router(tracker_analysis.router, prefix=settings.api_prefix)
app.include_router(mobile_api.router)


@app.get("/")
async def root():
    """Root endpoint"""
    return {
        "service": settings.api_title,
        "version": settings.api_version,
        "status": "operational",
        "test_scenarios_enabled": settings.test_scenarios_enabled,
        "docs": "/docs"
    }


@app.get("/health")
async def health_check():
    """Health check endpoint"""
    return {
        "status": "healthy",
        "service": settings.api_title
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "mock_backend.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.debug
    )
