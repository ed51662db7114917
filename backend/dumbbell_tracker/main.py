from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from pydantic import ValidationError as PydanticValidationError
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware

from dumbbell_tracker import __version__
from dumbbell_tracker.api.routes import health, history, reps, sessions, users, workouts
from dumbbell_tracker.config import get_settings
from dumbbell_tracker.core.error_handlers import (
    generic_exception_handler,
    pydantic_validation_handler,
    tracker_exception_handler,
)
from dumbbell_tracker.core.exceptions import TrackerException
from dumbbell_tracker.core.logging import get_logger, setup_logging
from dumbbell_tracker.core.middleware import RequestLoggingMiddleware
from dumbbell_tracker.core.rate_limit import limiter, rate_limit_exceeded_handler
from dumbbell_tracker.database import init_db

settings = get_settings()

# Initialize structured logging
setup_logging(debug=settings.debug, log_level=settings.log_level)
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    logger.info("application_startup", app_name=settings.app_name, timezone=settings.timezone)
    init_db()
    logger.info("database_initialized")

    yield

    logger.info("application_shutdown")


app = FastAPI(
    title=settings.app_name,
    description="Dumbbell workout tracking: sensor ingestion, session totals and history",
    version=__version__,
    root_path="",
    lifespan=lifespan,
    docs_url="/docs" if settings.debug else None,
    redoc_url="/redoc" if settings.debug else None,
    openapi_url="/openapi.json" if settings.debug else None,
)

# CORS middleware - restrict to configured origins
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type", "X-Request-ID"],
    expose_headers=["X-Request-ID"],
)

# Request logging middleware
app.add_middleware(RequestLoggingMiddleware)

# Rate limiting
app.state.limiter = limiter
app.add_middleware(SlowAPIMiddleware)

# Register exception handlers
app.add_exception_handler(TrackerException, tracker_exception_handler)
app.add_exception_handler(RequestValidationError, pydantic_validation_handler)
app.add_exception_handler(PydanticValidationError, pydantic_validation_handler)
app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)
app.add_exception_handler(Exception, generic_exception_handler)

# Include routers
app.include_router(health.router, tags=["health"])
app.include_router(users.router, prefix="/api/users", tags=["users"])
app.include_router(sessions.router, prefix="/api/sessions", tags=["sessions"])
app.include_router(workouts.router, prefix="/api/workouts", tags=["workouts"])
app.include_router(reps.router, prefix="/api/reps", tags=["reps"])
app.include_router(history.router, prefix="/api/history", tags=["history"])


@app.get("/")
async def root():
    return {"message": "Dumbbell Tracker API", "version": __version__}
