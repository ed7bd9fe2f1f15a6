from datetime import date
from decimal import Decimal

from sqlalchemy import Date, Integer, Numeric, String
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    pass


class Asset(Base):
    __tablename__ = "assets"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    serial_number: Mapped[str | None] = mapped_column(String(50), unique=True)
    category: Mapped[str | None] = mapped_column(String(100))
    department: Mapped[str | None] = mapped_column(String(100))
    location: Mapped[str | None] = mapped_column(String(100))
    status: Mapped[str | None] = mapped_column(String(20))
    unit_price: Mapped[Decimal | None] = mapped_column(Numeric(14, 2))
    depreciable_cost: Mapped[Decimal | None] = mapped_column(Numeric(14, 2))
    salvage_value: Mapped[Decimal | None] = mapped_column(Numeric(14, 2))
    residual_percentage: Mapped[Decimal | None] = mapped_column(Numeric(5, 2))
    siv_date: Mapped[date | None] = mapped_column(Date)
    useful_life_years: Mapped[Decimal | None] = mapped_column(Numeric(5, 2))
    depreciation_method: Mapped[str | None] = mapped_column(String(30))
    disposal_date: Mapped[date | None] = mapped_column(Date)
