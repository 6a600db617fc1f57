import logging
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager

from fleet_api.db.base import Base
from fleet_api.db.session import SessionLocal, engine
from fleet_api.core.config import settings
from fleet_api.core.errors import register_exception_handlers
from fleet_api.api.v1.api import api_router
from fleet_api.services.simulator import PositionSimulator

# Configure logging
logging.basicConfig(level=settings.LOG_LEVEL)
logger = logging.getLogger(__name__)

# Create database tables
Base.metadata.create_all(bind=engine)

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Handle application startup and shutdown events."""
    # Startup
    logger.info("Starting application...")

    simulator = None
    if settings.SIMULATOR_ENABLED:
        simulator = PositionSimulator(
            SessionLocal,
            interval=settings.SIMULATOR_INTERVAL_SECONDS,
            activate_count=settings.SIMULATOR_ACTIVATE_COUNT,
            activate_when_idle=settings.SIMULATOR_ACTIVATE_WHEN_IDLE,
        )
        simulator.start()

    yield

    # Shutdown
    logger.info("Shutting down application...")

    if simulator is not None:
        await simulator.stop()

# Create FastAPI app with lifespan events
app = FastAPI(
    title=settings.PROJECT_NAME,
    version=settings.PROJECT_VERSION,
    debug=settings.DEBUG,
    openapi_url=f"{settings.API_V1_STR}/openapi.json",
    lifespan=lifespan
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)

# Include API router
app.include_router(api_router, prefix=settings.API_V1_STR)

# Health check endpoint
@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {
        "status": "healthy",
        "version": settings.PROJECT_VERSION,
        "environment": settings.ENVIRONMENT,
        "debug": settings.DEBUG
    }
