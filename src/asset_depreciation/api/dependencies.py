from collections.abc import Generator
from functools import lru_cache

from fastapi import HTTPException
from sqlalchemy.orm import Session, sessionmaker

from asset_depreciation.engine.errors import InvalidConfiguration
from asset_depreciation.models.database import get_session_factory


@lru_cache
def _session_factory() -> sessionmaker[Session]:
    return get_session_factory()


def get_db() -> Generator[Session, None, None]:
    """Request-scoped session; the transaction commits when the route returns."""
    with _session_factory().begin() as session:
        yield session


def configuration_error(e: InvalidConfiguration) -> HTTPException:
    """422 carrying the asset id and error kind so clients can fix the record."""
    return HTTPException(
        422, {"asset_id": e.asset_id, "kind": e.kind, "message": e.message}
    )
