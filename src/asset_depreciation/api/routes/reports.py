from datetime import date

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import ValidationError
from sqlalchemy.orm import Session

from asset_depreciation.api.dependencies import get_db
from asset_depreciation.ingestion.asset_loader import load_asset_records
from asset_depreciation.models.schemas import PortfolioFilter, ReportPeriod
from asset_depreciation.reporting.portfolio import aggregate

router = APIRouter(prefix="/reports", tags=["reports"])


@router.get("/depreciation")
def depreciation_report(
    year: int | None = Query(None, ge=1900, le=9999),
    month: int | None = Query(None, ge=1, le=12),
    status: str | None = None,
    category: str | None = None,
    department: str | None = None,
    location: str | None = None,
    depreciation_method: str | None = None,
    min_value: float | None = None,
    max_value: float | None = None,
    siv_date_from: date | None = None,
    siv_date_to: date | None = None,
    useful_life_range: str | None = Query(None, description="1-3, 3-5, 5-10, 10+"),
    residual_percentage_range: str | None = Query(
        None, description="0-5, 5-10, 10-20, 20+"
    ),
    depreciation_status: str | None = Query(
        None, description="not_started, active, fully_depreciated"
    ),
    asset_age: str | None = Query(None, description="0-1, 1-3, 3-5, 5+"),
    depreciation_ending_soon: bool = False,
    min_book_value: float | None = None,
    max_book_value: float | None = None,
    min_depreciation_rate: float | None = None,
    max_depreciation_rate: float | None = None,
    session: Session = Depends(get_db),
):
    """Portfolio depreciation snapshot with per-asset values and error list."""
    try:
        period = ReportPeriod(year=year, month=month)
        filters = PortfolioFilter(
            status=status,
            category=category,
            department=department,
            location=location,
            depreciation_method=depreciation_method,
            min_value=min_value,
            max_value=max_value,
            siv_date_from=siv_date_from,
            siv_date_to=siv_date_to,
            useful_life_range=useful_life_range,
            residual_percentage_range=residual_percentage_range,
            depreciation_status=depreciation_status,
            asset_age=asset_age,
            depreciation_ending_soon=depreciation_ending_soon,
            min_book_value=min_book_value,
            max_book_value=max_book_value,
            min_depreciation_rate=min_depreciation_rate,
            max_depreciation_rate=max_depreciation_rate,
        )
    except ValidationError as e:
        raise HTTPException(422, e.errors(include_url=False, include_context=False))

    records = load_asset_records(
        session,
        category=filters.category,
        department=filters.department,
        status=filters.status,
    )
    try:
        snapshot = aggregate(records, filters, period)
    except ValueError as e:
        raise HTTPException(422, str(e))
    return snapshot.model_dump(mode="json", by_alias=True)
