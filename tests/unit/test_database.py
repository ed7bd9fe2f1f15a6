from sqlalchemy import inspect
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker

from asset_depreciation.models.database import (
    get_engine,
    get_session,
    get_session_factory,
    init_db,
)
from asset_depreciation.models.orm import Asset


class TestDatabase:
    def test_get_engine_returns_engine(self):
        engine = get_engine("sqlite:///:memory:")
        assert isinstance(engine, Engine)

    def test_get_engine_creates_parent_directory(self, tmp_path):
        db_path = tmp_path / "nested" / "assets.db"
        get_engine(f"sqlite:///{db_path}")
        assert db_path.parent.is_dir()

    def test_get_session_factory(self):
        engine = get_engine("sqlite:///:memory:")
        factory = get_session_factory(engine)
        assert isinstance(factory, sessionmaker)

    def test_init_db_creates_tables(self):
        engine = get_engine("sqlite:///:memory:")
        assert init_db(engine) == ["assets"]
        assert "assets" in inspect(engine).get_table_names()

    def test_get_session_commits(self, tmp_path):
        engine = get_engine(f"sqlite:///{tmp_path / 'assets.db'}")
        init_db(engine)
        with get_session(engine) as session:
            session.add(Asset(name="Desk 0001", serial_number="SN-DB-1"))
        with get_session(engine) as session:
            assert session.query(Asset).count() == 1
