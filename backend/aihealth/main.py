from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from pydantic import ValidationError as PydanticValidationError

from aihealth.api.routes import health, insights, models
from aihealth.api.routes import settings as settings_routes
from aihealth.config import get_settings
from aihealth.core.error_handlers import (
    aihealth_exception_handler,
    generic_exception_handler,
    validation_exception_handler,
)
from aihealth.core.exceptions import AIHealthException
from aihealth.core.logging import get_logger, setup_logging
from aihealth.database import init_db

settings = get_settings()

# Initialize structured logging
setup_logging(debug=settings.debug, level=settings.log_level)
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
    description="Health data snapshots turned into language-model check-ins",
    version="0.1.0",
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
    allow_methods=["GET", "POST", "PUT", "OPTIONS"],
    allow_headers=["Content-Type"],
)

# Register exception handlers
app.add_exception_handler(AIHealthException, aihealth_exception_handler)
app.add_exception_handler(RequestValidationError, validation_exception_handler)
app.add_exception_handler(PydanticValidationError, validation_exception_handler)
app.add_exception_handler(Exception, generic_exception_handler)

# Include routers
app.include_router(health.router, tags=["health"])
app.include_router(insights.router, prefix="/api/insights", tags=["insights"])
app.include_router(settings_routes.router, prefix="/api/settings", tags=["settings"])
app.include_router(models.router, prefix="/api/models", tags=["models"])


@app.get("/")
async def root():
    return {"message": "AIHealth API", "version": "0.1.0"}
