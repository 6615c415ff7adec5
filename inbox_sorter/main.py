"""
FastAPI application entry point.
"""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from inbox_sorter import __version__
from inbox_sorter.config import get_settings

# Sentry initialization (must be before app creation)
settings_early = get_settings()
if settings_early.sentry_dsn:
    import sentry_sdk
    from sentry_sdk.integrations.fastapi import FastApiIntegration

    sentry_sdk.init(
        dsn=settings_early.sentry_dsn,
        integrations=[FastApiIntegration()],
        traces_sample_rate=0.1,
        environment="production" if not settings_early.debug else "development",
    )
from inbox_sorter.api.routes import emails as email_routes

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

# Get settings
settings = get_settings()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    logger.info("Starting Inbox Sorter API...")
    logger.info(f"Debug mode: {settings.debug}")
    if not settings.gmail_authenticated:
        logger.warning("No Gmail tokens configured; email endpoints will return 401")

    yield

    logger.info("Shutting down Inbox Sorter API...")


tags_metadata = [
    {
        "name": "emails",
        "description": "Reading-length classification of inbox emails and bulk labeling.",
    },
]

# Create FastAPI application
app = FastAPI(
    title="Inbox Sorter API",
    description="""
## Reading-length triage for Gmail

- **Emails** - Fetch unlabeled inbox emails with a suggested size label
  (Short / Medium / Long / XL) and a paywall flag
- **Labels** - Apply the reviewed labels, archive or skip in bulk
    """,
    version=__version__,
    lifespan=lifespan,
    openapi_tags=tags_metadata,
    docs_url="/docs",
    redoc_url="/redoc",
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/health")
async def health_check():
    """
    Health check endpoint.

    Returns:
        dict: Status information
    """
    return {
        "status": "ok",
        "gmail": "configured" if settings.gmail_authenticated else "not configured",
        "version": __version__,
    }


# Include routers
app.include_router(email_routes.router, prefix="/api")


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "message": "Welcome to Inbox Sorter API",
        "docs": "/docs",
        "health": "/health",
    }


def run() -> None:
    """Run the API with uvicorn using configured host and port."""
    import uvicorn

    uvicorn.run(
        "inbox_sorter.main:app",
        host=settings.app_host,
        port=settings.app_port,
        reload=settings.debug,
    )
