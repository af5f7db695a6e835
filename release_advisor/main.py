"""Release Performance Advisor - FastAPI Application."""
import logging
from contextlib import asynccontextmanager
from datetime import datetime

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from release_advisor.config import get_settings
from release_advisor.database import dispose_db
from release_advisor.api import advisor_router

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)

settings = get_settings()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    # Startup
    logger.info("Starting Release Performance Advisor")

    yield

    # Shutdown
    logger.info("Shutting down Release Performance Advisor")
    await dispose_db()


# Create application
app = FastAPI(
    title="Release Performance Advisor",
    description="Rolling streaming performance summaries and ranked suggestions for released tracks",
    version="0.1.0",
    lifespan=lifespan,
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # In production, restrict this
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Health check (no auth required)
@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "timestamp": datetime.utcnow().isoformat(), "service": "release-advisor"}


# Root info
@app.get("/")
async def root():
    """API information."""
    return {
        "service": "Release Performance Advisor",
        "version": "0.1.0",
        "docs": "/docs",
        "health": "/health",
    }


# Include routers
app.include_router(advisor_router, prefix="/api/v1")


# Error handlers
@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception):
    """Handle uncaught exceptions."""
    logger.error(f"Unhandled exception: {exc}", exc_info=True)
    return JSONResponse(
        status_code=500,
        content={"detail": "Internal server error"},
    )


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "release_advisor.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
    )
