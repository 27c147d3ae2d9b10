from contextlib import asynccontextmanager
from typing import Optional

import structlog
import uvicorn
from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware

from src.core import exceptions
from src.core.config import settings
from src.core.database import Database, database as default_database
from src.core.logging import configure_logging
from src.core.response.handlers import (
    app_exception_handler,
    global_exception_handler,
    validation_exception_handler,
)

# Import routers from apps
from src.apps.blog import post_pages_router, post_router

logger = structlog.get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup: Create database tables
    db: Database = app.state.database
    await db.create_all()
    logger.info("database_ready", url=db.url)
    yield
    # Shutdown: release pooled connections
    await db.disconnect()
    logger.info("shutdown_complete")


def create_app(database: Optional[Database] = None) -> FastAPI:
    """Build the application around the given database (default from settings)."""
    configure_logging(settings.LOG_LEVEL, settings.LOG_JSON)

    app = FastAPI(
        title=settings.PROJECT_NAME,
        description=settings.PROJECT_INFO,
        version=settings.PROJECT_VERSION,
        lifespan=lifespan,
    )
    app.state.database = database or default_database

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],  # Adjust in production
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(exceptions.AppException, app_exception_handler)  # type: ignore[arg-type]
    app.add_exception_handler(RequestValidationError, validation_exception_handler)  # type: ignore[arg-type]
    app.add_exception_handler(Exception, global_exception_handler)

    @app.get("/", tags=["Health"])
    async def root():
        """Root endpoint with health check."""
        return {
            "message": "Server is running",
            "status": "healthy",
            "version": settings.PROJECT_VERSION,
        }

    @app.get("/health", tags=["Health"])
    async def health_check():
        """Health check endpoint."""
        return {"status": "healthy", "message": "Service is running normally"}

    app.include_router(post_router)
    app.include_router(post_pages_router)

    return app


app = create_app()


if __name__ == "__main__":
    uvicorn.run(
        "src.main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,  # Enable auto-reload in development
        log_level="info",
    )
