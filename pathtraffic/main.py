from contextlib import asynccontextmanager
from fastapi import FastAPI
from pathtraffic import __version__
from pathtraffic.api.routes import router
from pathtraffic.core.cors import setup_cors
from pathtraffic.core.logging import setup_logging, get_logger

# Setup logging first
setup_logging()
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager for startup/shutdown."""
    logger.info("Starting pathtraffic API...")

    yield

    logger.info("Shutting down pathtraffic API...")


# Create FastAPI app
app = FastAPI(
    title="pathtraffic API",
    description="Daily top request paths by traffic from access-log exports",
    version=__version__,
    lifespan=lifespan
)

# Setup CORS
setup_cors(app)

# Include API routes
app.include_router(router)


@app.get("/")
async def root():
    """Root endpoint with API info."""
    return {
        "name": "pathtraffic API",
        "version": __version__,
        "docs": "/docs",
        "health": "/api/health"
    }
