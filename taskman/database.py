from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker, Session
from sqlalchemy.pool import StaticPool
from fastapi import Request

from taskman.config.settings import Settings

Base = declarative_base()


class Database:
    """Owns the engine and session factory for one application instance"""

    def __init__(self, settings: Settings):
        engine_kwargs = {"connect_args": settings.database_connect_args}
        # In-memory SQLite only lives as long as its single connection
        if settings.database_url in ("sqlite://", "sqlite:///:memory:"):
            engine_kwargs["poolclass"] = StaticPool

        self.engine = create_engine(settings.database_url, **engine_kwargs)
        self.SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=self.engine)

    def create_all(self):
        # Register every mapped class before creating tables
        import taskman.models  # noqa: F401

        Base.metadata.create_all(bind=self.engine)

    def session(self) -> Session:
        return self.SessionLocal()

    def dispose(self):
        self.engine.dispose()


# ✅ Required wherever a DB session is needed; closes the session after the request
def get_db(request: Request):
    db: Session = request.app.state.database.session()
    try:
        yield db
    finally:
        db.close()
