from datetime import date
from decimal import Decimal

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import Session

from asset_depreciation.models.orm import Asset, Base
from asset_depreciation.models.schemas import AssetRecord, DepreciationInput


@pytest.fixture(scope="session")
def engine():
    eng = create_engine("sqlite:///:memory:", echo=False)
    Base.metadata.create_all(eng)
    return eng


@pytest.fixture
def session(engine):
    connection = engine.connect()
    transaction = connection.begin()
    sess = Session(bind=connection)
    yield sess
    sess.close()
    transaction.rollback()
    connection.close()


@pytest.fixture
def laptop_input():
    """Laptop bought 25 June 2025: 4,000 cost, 287.20 salvage, 5 year life."""
    return DepreciationInput(
        asset_id=1,
        acquisition_date=date(2025, 6, 25),
        cost=4000.0,
        salvage_value=287.2,
        useful_life_months=60,
    )


@pytest.fixture
def two_year_input():
    """24-month asset acquired mid-March 2024, so its life ends March 2026."""
    return DepreciationInput(
        asset_id=2,
        acquisition_date=date(2024, 3, 10),
        cost=2400.0,
        salvage_value=0.0,
        useful_life_months=24,
    )


def _make_record(asset_id: int, **overrides) -> AssetRecord:
    fields = {
        "id": asset_id,
        "name": f"Asset {asset_id}",
        "category": "IT Equipment",
        "department": "Finance",
        "location": "Head Office",
        "status": "ACTIVE",
        "unit_price": 1200.0,
        "salvage_value": 0.0,
        "siv_date": date(2024, 1, 1),
        "useful_life_years": 1,
        "depreciation_method": "STRAIGHT_LINE",
    }
    fields.update(overrides)
    return AssetRecord(**fields)


@pytest.fixture
def make_record():
    """Build an AssetRecord from defaults plus keyword overrides."""
    return _make_record


@pytest.fixture
def sample_assets(session):
    """Three stored assets: a laptop, an ATM and one with a zero price."""
    laptop = Asset(
        name="Laptop 0001",
        serial_number="SN-TEST-0001",
        category="IT Equipment",
        department="Finance",
        location="Head Office",
        status="ACTIVE",
        unit_price=Decimal("4000.00"),
        salvage_value=Decimal("287.20"),
        siv_date=date(2025, 6, 25),
        useful_life_years=Decimal("5"),
        depreciation_method="STRAIGHT_LINE",
    )
    atm = Asset(
        name="Lobby ATM 0002",
        serial_number="SN-TEST-0002",
        category="ATM",
        department="Branch Operations",
        location="Main Branch",
        status="ACTIVE",
        unit_price=Decimal("24000.00"),
        residual_percentage=Decimal("5"),
        siv_date=date(2022, 1, 1),
        useful_life_years=Decimal("7"),
        depreciation_method="DOUBLE_DECLINING",
    )
    broken = Asset(
        name="Note Counter 0003",
        serial_number="SN-TEST-0003",
        category="Office Equipment",
        department="Finance",
        location="Head Office",
        status="ACTIVE",
        unit_price=Decimal("0.00"),
        siv_date=date(2024, 5, 1),
        useful_life_years=Decimal("4"),
        depreciation_method="STRAIGHT_LINE",
    )
    session.add_all([laptop, atm, broken])
    session.flush()
    return [laptop, atm, broken]
