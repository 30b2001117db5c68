"""
BookMySeat API - Main Application Entry Point

Ticket marketplace backend: vendors list tickets, admins moderate them,
customers reserve and pay. Reservations are protected against oversell by
single-statement conditional updates, so any number of instances can serve
traffic without coordinating.
"""

from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from bookmyseat.core.config import get_settings
from bookmyseat.core.logging import setup_logging, get_logger
from bookmyseat.core.metrics import metrics_endpoint
from bookmyseat.api.router import api_router
from bookmyseat.api.errors import register_error_handlers
from bookmyseat.api.middleware import RequestLoggingMiddleware
from bookmyseat.db.session import engine
from bookmyseat.services.strategy_factory import build_admission_strategy

settings = get_settings()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifecycle: startup and shutdown hooks."""
    setup_logging()
    logger = get_logger(__name__)

    logger.info(
        "application_starting",
        app=settings.APP_NAME,
        version=settings.APP_VERSION,
        environment=settings.ENVIRONMENT,
        admission=settings.ADMISSION_STRATEGY,
    )

    app.state.admission = build_admission_strategy(settings)

    yield

    await app.state.admission.close()
    await engine.dispose()
    logger.info("application_shutdown")


app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    description="Ticket booking API with oversell-safe reservations",
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(RequestLoggingMiddleware)

register_error_handlers(app)
app.include_router(api_router)


@app.get("/health", tags=["Health"])
async def health_check():
    """Health check endpoint for Docker and load balancers."""
    return {
        "status": "healthy",
        "version": settings.APP_VERSION,
        "environment": settings.ENVIRONMENT,
        "admission": settings.ADMISSION_STRATEGY,
    }


@app.get("/metrics", include_in_schema=False)
async def metrics():
    return metrics_endpoint()


@app.get("/", tags=["Root"])
async def root():
    return {
        "message": f"{settings.APP_NAME} is running",
        "version": settings.APP_VERSION,
        "docs": "/docs",
    }
