from fastapi import APIRouter, Depends, HTTPException, Query, Response
from sqlalchemy.orm import Session

from asset_depreciation.api.dependencies import configuration_error, get_db
from asset_depreciation.engine.errors import InvalidConfiguration
from asset_depreciation.engine.range_expander import (
    current_value,
    month_value,
    schedule_frame,
    year_values,
)
from asset_depreciation.engine.schedule import full_schedule, validate_input
from asset_depreciation.ingestion.asset_loader import get_asset_record
from asset_depreciation.models.schemas import AssetRecord, DepreciationInput

router = APIRouter(prefix="/assets", tags=["assets"])


def _resolve_asset(asset_id: int, session: Session) -> AssetRecord:
    record = get_asset_record(session, asset_id)
    if record is None:
        raise HTTPException(404, f"Asset {asset_id} not found")
    return record


def _depreciation_input(record: AssetRecord) -> DepreciationInput:
    try:
        inp = record.to_depreciation_input()
        validate_input(inp)
    except InvalidConfiguration as e:
        raise configuration_error(e)
    return inp


@router.get("/{asset_id}/depreciation")
def get_asset_depreciation(
    asset_id: int,
    year: int | None = Query(None, ge=1900, le=9999),
    month: int | None = Query(None, ge=1, le=12),
    session: Session = Depends(get_db),
):
    """Book value now, for one month, or for each month of a year."""
    if month is not None and year is None:
        raise HTTPException(422, "month filter requires a year")

    record = _resolve_asset(asset_id, session)
    inp = _depreciation_input(record)

    payload = {
        "assetId": record.id,
        "name": record.name,
        "method": validate_input(inp).value,
        "cost": round(inp.cost, 2),
        "salvageValue": round(inp.salvage_value, 2),
        "usefulLifeMonths": inp.useful_life_months,
    }
    if year is None:
        payload["currentBookValue"] = round(current_value(inp).book_value, 2)
    elif month is None:
        payload["bookValuesByMonth"] = {
            m: round(result.book_value, 2)
            for m, result in year_values(inp, year).items()
            if result is not None
        }
    else:
        result = month_value(inp, year, month)
        payload["bookValue"] = round(result.book_value, 2) if result else None
    return payload


@router.get("/{asset_id}/schedule")
def get_asset_schedule(
    asset_id: int,
    format: str = Query("json", pattern="^(json|csv)$"),
    session: Session = Depends(get_db),
):
    """Month-by-month schedule from acquisition until the asset reaches salvage."""
    record = _resolve_asset(asset_id, session)
    schedule = full_schedule(_depreciation_input(record))

    if format == "csv":
        csv = schedule_frame(schedule).to_csv()
        return Response(content=csv, media_type="text/csv")

    return {
        "assetId": record.id,
        "months": len(schedule),
        "schedule": [
            {
                "year": r.year,
                "month": r.month,
                "bookValue": round(r.book_value, 2),
                "periodExpense": round(r.period_expense, 2),
                "accumulatedDepreciation": round(r.accumulated_depreciation, 2),
            }
            for r in schedule
        ],
    }
