"""Main FastAPI application."""
import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.api import auth, bookings, courts, dashboard, geocoding, profiles, schedule, venues
from app.core.config import settings
from app.core.database import init_db
from app.services.scheduler import completion_scheduler

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    # Startup
    logger.info("Starting Court Booking API")
    logger.info(f"Debug mode: {settings.DEBUG}")

    await init_db()

    if settings.COMPLETION_ENABLED:
        await completion_scheduler.start()

    yield

    # Shutdown
    logger.info("Shutting down Court Booking API")
    await completion_scheduler.stop()


# Create FastAPI app
app = FastAPI(
    title="Court Booking API",
    description="Venues, courts, schedules and bookings for sports venues",
    version="1.0.0",
    lifespan=lifespan,
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # In production, specify exact origins
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(venues.router)
app.include_router(courts.router)
app.include_router(bookings.router)
app.include_router(schedule.router)
app.include_router(dashboard.router)
app.include_router(profiles.router)
app.include_router(auth.router)
app.include_router(geocoding.router)


@app.get("/health")
async def health():
    """Health check endpoint."""
    return {
        "status": "healthy",
        "scheduler_running": completion_scheduler.running,
    }
