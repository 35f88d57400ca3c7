import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware

from . import __version__
from .config import CORS_ORIGINS, DATABASE_URL
from .database import Database
from .errors import TaskManagerError, request_validation_error_handler, task_manager_error_handler
from .routers import auth, tasks

logger = logging.getLogger(__name__)


def create_app(database: Optional[Database] = None) -> FastAPI:
    """Build the API application.

    ``database`` is the store handle to serve from; when omitted one is
    built from ``DATABASE_URL`` at startup and disposed at shutdown.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        db = database or Database(DATABASE_URL)
        db.create_tables()
        app.state.database = db
        logger.info("Task manager API started")
        try:
            yield
        finally:
            if database is None:
                db.dispose()

    app = FastAPI(
        title="Task Manager API",
        description="Personal task management with email/password authentication",
        version=__version__,
        lifespan=lifespan,
    )

    # Configure CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(TaskManagerError, task_manager_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_error_handler)

    # Include routers
    app.include_router(auth.router, prefix="/api/auth", tags=["auth"])
    app.include_router(tasks.router, prefix="/api", tags=["tasks"])

    @app.get("/")
    def read_root():
        return {"message": "Task Manager API"}

    @app.get("/health")
    def health_check():
        return {"status": "healthy"}

    return app


app = create_app()
