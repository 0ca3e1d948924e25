import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from taskman.config.settings import Settings
from taskman.database import Database
from taskman.errors import register_exception_handlers
from taskman.routers import auth, user, project, tasks

logger = logging.getLogger(__name__)


def create_app(settings: Optional[Settings] = None, database: Optional[Database] = None) -> FastAPI:
    """Build the API; run with `uvicorn main:create_app --factory`"""
    settings = settings or Settings.from_env()
    database = database or Database(settings)

    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("Starting Task Manager API...")
        database.create_all()
        try:
            yield
        finally:
            logger.info("Shutting down Task Manager API...")
            database.dispose()

    app = FastAPI(title="Task Manager API", lifespan=lifespan)
    app.state.settings = settings
    app.state.database = database

    # CORS configuration
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app, debug=settings.is_development)

    # Route registration
    prefix = settings.api_prefix
    app.include_router(auth.router, prefix=f"{prefix}/auth", tags=["Authentication"])
    app.include_router(user.router, prefix=f"{prefix}/users", tags=["Users"])
    app.include_router(project.router, prefix=f"{prefix}/projects", tags=["Projects"])
    app.include_router(tasks.router, prefix=f"{prefix}/tasks", tags=["Tasks"])

    # Root route
    @app.get("/")
    def read_root():
        return {"message": "Task Manager API"}

    @app.get("/health")
    def health():
        return {"status": "ok"}

    return app
