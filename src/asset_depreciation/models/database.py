import logging
from collections.abc import Generator
from contextlib import contextmanager
from pathlib import Path

from sqlalchemy import create_engine
from sqlalchemy.engine import URL, Engine, make_url
from sqlalchemy.orm import Session, sessionmaker

from asset_depreciation.config.settings import get_settings
from asset_depreciation.models.orm import Base

logger = logging.getLogger("asset_depreciation.models")


def _prepare_sqlite(url: URL) -> dict:
    """Connect args for SQLite; file databases get their directory created."""
    if url.database and url.database != ":memory:":
        Path(url.database).parent.mkdir(parents=True, exist_ok=True)
    return {"check_same_thread": False}


def get_engine(url: str | None = None) -> Engine:
    """Engine for the asset register, from settings unless a url is given."""
    db_url = make_url(url or get_settings().database_url)
    connect_args = {}
    if db_url.get_backend_name() == "sqlite":
        connect_args = _prepare_sqlite(db_url)
    return create_engine(db_url, connect_args=connect_args, echo=False)


def get_session_factory(engine: Engine | None = None) -> sessionmaker[Session]:
    return sessionmaker(bind=engine or get_engine(), expire_on_commit=False)


@contextmanager
def get_session(engine: Engine | None = None) -> Generator[Session, None, None]:
    """Session in its own transaction: committed on exit, rolled back on error."""
    with get_session_factory(engine).begin() as session:
        yield session


def init_db(engine: Engine | None = None) -> list[str]:
    """Create missing tables and return the names of all mapped tables."""
    engine = engine or get_engine()
    Base.metadata.create_all(engine)
    tables = sorted(Base.metadata.tables)
    logger.info("Asset register ready on %s (%s)", engine.url, ", ".join(tables))
    return tables
