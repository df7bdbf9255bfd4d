# sales_api/database.py
from sqlalchemy import create_engine, Engine
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

from .config import Settings

Base = declarative_base()

# Sessions are bound per call (Session(bind=engine)) so that the engine stays
# an injected dependency instead of a module-level global.
SessionLocal = sessionmaker(autocommit=False, autoflush=False)

def create_db_engine(settings: Settings) -> Engine:
    """
    Builds the engine and its bounded connection pool.

    PostgreSQL (the deployed backend) gets a fixed-size QueuePool: at most
    DB_POOL_SIZE connections, callers wait up to DB_POOL_TIMEOUT seconds.
    SQLite is accepted for local runs and tests; an in-memory database must
    share one connection across threads, hence StaticPool.
    """
    url = settings.get_database_url()

    if url.startswith("postgres://"):
        url = url.replace("postgres://", "postgresql://", 1)

    if url.startswith("sqlite"):
        kwargs = {"connect_args": {"check_same_thread": False}}
        if url in ("sqlite://", "sqlite:///:memory:"):
            kwargs["poolclass"] = StaticPool
        return create_engine(url, **kwargs)

    return create_engine(
        url,
        pool_size=settings.DB_POOL_SIZE,
        max_overflow=0,
        pool_timeout=settings.DB_POOL_TIMEOUT,
        pool_pre_ping=True,
    )
