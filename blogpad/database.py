from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool
from blogpad.config import get_settings

settings = get_settings()

# check_same_thread=False needed for SQLite with FastAPI
# In-memory SQLite must share one connection or every checkout sees an empty db
_engine_options = {"echo": settings.debug}
if settings.database_url.startswith("sqlite"):
    _engine_options["connect_args"] = {"check_same_thread": False}
    if settings.database_url in ("sqlite://", "sqlite:///:memory:"):
        _engine_options["poolclass"] = StaticPool

engine = create_engine(settings.database_url, **_engine_options)

# Session factory for database operations
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# Base class for all models
Base = declarative_base()


def get_db():
    """
    Dependency that provides database session to route handlers.
    Ensures session is properly closed after request.
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def init_db():
    """
    Initialize database schema.
    Creates all tables defined in models.
    Call this on application startup.
    """
    # Register models on Base.metadata before creating tables
    import blogpad.models  # noqa: F401

    Base.metadata.create_all(bind=engine)
