import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from blog_api.core.config import settings
from blog_api.core.database import engine, Base
from blog_api.core.errors import register_exception_handlers
from blog_api.core.middleware import configure_logging, register_middleware
from blog_api.api.routes import auth, posts, users

configure_logging(settings.LOG_LEVEL)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Manage app lifecycle events.

    Startup: create any missing tables for the registered models.
    """
    Base.metadata.create_all(bind=engine)
    logger.info(f"{settings.APP_NAME} started in {settings.ENVIRONMENT} mode")
    yield
    engine.dispose()
    logger.info("Shutting down, database connections released")


app = FastAPI(
    title=settings.APP_NAME,
    description="REST API for reading, writing and managing blog posts and user profiles",
    version=settings.APP_VERSION,
    lifespan=lifespan
)

register_middleware(app)
app.add_middleware(GZipMiddleware, minimum_size=1000)
# Added last so it is outermost and answers preflight requests first
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.get_cors_origins(),
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization"],
)
register_exception_handlers(app)

# All routes are prefixed with /api
app.include_router(auth.router, prefix="/api")
app.include_router(users.router, prefix="/api")
app.include_router(posts.router, prefix="/api")


@app.get("/")
async def root():
    """Root endpoint - API information"""
    return {
        "message": f"Welcome to {settings.APP_NAME}",
        "status": "online",
        "documentation": "/api/health",
    }


@app.get("/api/health")
async def health():
    """Health check endpoint - used by monitoring/deployment tools"""
    return {
        "status": "success",
        "message": f"{settings.APP_NAME} is running",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "environment": settings.ENVIRONMENT,
        "version": settings.APP_VERSION,
    }
