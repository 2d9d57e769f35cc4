from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.api import screening
from app.api.dependencies import get_rate_limiter
from app.config import config
from app.lib.logger import configure_logger, setup_uvicorn_logging
from app.middleware.logging import LoggingMiddleware

# Configure module logger
logger = configure_logger(__name__)

# Define app
app = FastAPI(
    title="Proposal Screening API",
    description="Screens governance proposals against the quality and attention rubric",
    version="0.1.0",
)

# Add logging middleware first
app.add_middleware(LoggingMiddleware)

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.cors.allow_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["X-RateLimit-Remaining", "X-RateLimit-Limit", "Retry-After"],
)


# Simple health check endpoint
@app.get("/")
async def health_check():
    """Simple health check endpoint."""
    return {"status": "healthy"}


# Load API routes
app.include_router(screening.router)


@app.on_event("startup")
async def startup_event():
    """Run web server startup tasks."""
    setup_uvicorn_logging()

    logger.info("Starting FastAPI web server...")
    await get_rate_limiter().start()
    logger.info("Web server startup complete")


@app.on_event("shutdown")
async def shutdown_event():
    """Run web server shutdown tasks."""
    logger.info("Shutting down FastAPI web server...")
    await get_rate_limiter().stop()
    logger.info("Web server shutdown complete")
