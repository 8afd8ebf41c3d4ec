import logging
import os
from contextlib import contextmanager
from typing import Iterator, Optional

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

logger = logging.getLogger(__name__)

# Default to a local SQLite database if no DATABASE_URL is provided or usable
BASE_DIR = os.path.dirname(os.path.abspath(__file__))
PROJECT_ROOT = os.path.abspath(os.path.join(BASE_DIR, ".."))
DEFAULT_DB_PATH = os.path.join(PROJECT_ROOT, "portal.db")

# Base class for the durable store models
Base = declarative_base()


def sqlite_engine(url: str) -> Engine:
    """SQLite engine usable from the threads FastAPI runs sync handlers on."""
    if url in ("sqlite://", "sqlite:///:memory:"):
        # A single shared connection, otherwise every checkout sees an empty database
        return create_engine(url, connect_args={"check_same_thread": False}, poolclass=StaticPool)
    return create_engine(url, connect_args={"check_same_thread": False})


def build_engine(database_url: Optional[str] = None) -> Engine:
    """Create the SQLAlchemy engine, preferring the configured DATABASE_URL."""
    if database_url:
        if database_url.startswith("sqlite"):
            return sqlite_engine(database_url)
        try:
            engine = create_engine(database_url, pool_pre_ping=True)
            # Ensure the target database is reachable; otherwise fall back to SQLite
            with engine.connect():
                pass
            return engine
        except ModuleNotFoundError as exc:
            # Some SQL drivers (e.g. psycopg2) might be missing in the execution environment.
            logger.warning("Database driver unavailable (%s), falling back to SQLite", exc)
        except Exception as exc:
            # Connection errors or inaccessible databases should not break local development.
            logger.warning("Configured database unreachable (%s), falling back to SQLite", exc)

    # Fall back to SQLite stored in the project root
    return sqlite_engine(f"sqlite:///{DEFAULT_DB_PATH}")


def get_session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(bind=engine, autocommit=False, autoflush=False, expire_on_commit=False)


def init_db(engine: Engine) -> None:
    """Create all tables (for initial setup or testing)."""
    # Registers every model on Base.metadata
    from portal import models  # noqa: F401

    Base.metadata.create_all(bind=engine)
    logger.info("Database tables ensured on %s", engine.url.render_as_string(hide_password=True))


@contextmanager
def session_scope(factory: sessionmaker) -> Iterator[Session]:
    """Transactional scope: commit on success, roll back on any error."""
    session = factory()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()
