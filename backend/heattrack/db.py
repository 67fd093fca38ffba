from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, declarative_base
from sqlalchemy.pool import StaticPool
from heattrack.core.config import settings

# SQLAlchemy Base class for models to inherit
Base = declarative_base()


def make_engine(database_url: str):
    """Create an engine for `database_url`.

    SQLite connections are shared between the event loop and the worker
    threads the store runs on, so same-thread checking is disabled. An
    in-memory database only exists per connection, hence the StaticPool.
    """
    if database_url.startswith("sqlite"):
        kwargs = {"connect_args": {"check_same_thread": False}}
        if ":memory:" in database_url or database_url.rstrip("/").endswith("sqlite:"):
            kwargs["poolclass"] = StaticPool
        return create_engine(database_url, **kwargs)
    return create_engine(
        database_url,
        pool_pre_ping=True,   # helps avoid stale connections
    )


def make_session_factory(bind):
    return sessionmaker(autocommit=False, autoflush=False, bind=bind)


# Create SQLAlchemy engine (embedded SQLite unless configured otherwise)
engine = make_engine(settings.database_url)

# Factory that creates DB sessions
SessionLocal = make_session_factory(engine)
