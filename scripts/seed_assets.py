"""Synthetic data generator for asset-depreciation.

Generates a bank fixed-asset register (300 assets across branches and head
office departments) with a mix of depreciation methods, salvage conventions
and a handful of deliberately misconfigured records.
"""

import random
import sys
from datetime import date, timedelta
from decimal import Decimal
from pathlib import Path

# Ensure src is importable when running as a script
sys.path.insert(0, str(Path(__file__).resolve().parent.parent / "src"))

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from asset_depreciation.models.database import get_engine, get_session, init_db
from asset_depreciation.models.orm import Asset, Base

SEED = 42
random.seed(SEED)

DEPARTMENTS = [
    "Branch Operations",
    "Treasury",
    "Information Technology",
    "Human Resources",
    "Finance",
    "Risk & Compliance",
    "Customer Service",
]

LOCATIONS = ["Head Office", "Main Branch", "North Branch", "South Branch", "Airport"]

METHODS = ["STRAIGHT_LINE", "STRAIGHT_LINE", "DECLINING_BALANCE", "DOUBLE_DECLINING"]

# (category, count, price_min, price_max, useful_life_years, residual_pct, names)
ASSET_SPECS = [
    ("IT Equipment", 90, 600, 4_500, 3, 5, ["Laptop", "Desktop", "Printer", "Router"]),
    ("Furniture", 60, 150, 2_500, 8, 10, ["Desk", "Teller Counter", "Cabinet"]),
    ("Vehicles", 15, 18_000, 60_000, 5, 20, ["Cash Van", "Pool Car", "Motorbike"]),
    ("ATM", 30, 12_000, 35_000, 7, 5, ["Lobby ATM", "Drive-through ATM"]),
    ("Security Systems", 45, 800, 15_000, 5, 0, ["CCTV Kit", "Vault Door", "Alarm"]),
    ("Office Equipment", 60, 200, 6_000, 4, 10, ["Note Counter", "Generator", "UPS"]),
]

STATUSES = ["ACTIVE"] * 12 + ["UNDER_MAINTENANCE", "TRANSFERRED", "DISPOSED"]


def _random_date(start: date, end: date) -> date:
    return start + timedelta(days=random.randint(0, (end - start).days))


def generate_assets(session: Session) -> list[Asset]:
    assets = []
    serial = 0
    for category, count, lo, hi, life, residual, names in ASSET_SPECS:
        for _ in range(count):
            serial += 1
            price = Decimal(str(round(random.uniform(lo, hi), 2)))
            siv_date = _random_date(date(2015, 1, 1), date(2026, 6, 30))
            status = random.choice(STATUSES)

            asset = Asset(
                name=f"{random.choice(names)} {serial:04d}",
                serial_number=f"SN-{serial:06d}",
                category=category,
                department=random.choice(DEPARTMENTS),
                location=random.choice(LOCATIONS),
                status=status,
                unit_price=price,
                siv_date=siv_date,
                useful_life_years=Decimal(life),
                depreciation_method=random.choice(METHODS),
            )
            # Half the register stores an absolute salvage amount, half a %.
            if random.random() < 0.5:
                asset.salvage_value = (price * residual / 100).quantize(Decimal("0.01"))
            else:
                asset.residual_percentage = Decimal(residual)
            if status == "DISPOSED":
                asset.disposal_date = _random_date(siv_date, date(2026, 9, 30))
            assets.append(asset)

    # Records the engine must report rather than value
    assets[0].unit_price = Decimal("0.00")
    assets[1].useful_life_years = None
    assets[2].depreciation_method = "UNITS_OF_ACTIVITY"

    session.add_all(assets)
    session.flush()
    return assets


def main() -> None:
    print("Initializing database...")
    engine = get_engine()
    Base.metadata.drop_all(engine)
    init_db(engine)

    with get_session(engine) as session:
        print("Generating asset register...")
        assets = generate_assets(session)
        print(f"  Created {len(assets)} asset records")

        by_method = session.execute(
            select(Asset.depreciation_method, func.count(Asset.id)).group_by(
                Asset.depreciation_method
            )
        ).all()

    print("\nData generation complete!")
    print("\nAssets by method:")
    for method, count in by_method:
        print(f"  {method:<20} {count}")


if __name__ == "__main__":
    main()
