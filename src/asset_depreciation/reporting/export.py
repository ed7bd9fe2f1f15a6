import pandas as pd

from asset_depreciation.models.schemas import PortfolioSnapshot


def assets_frame(snapshot: PortfolioSnapshot) -> pd.DataFrame:
    """One row per valued asset, with month columns in year mode."""
    rows = []
    for v in snapshot.assets:
        row = {
            "asset_id": v.asset_id,
            "name": v.name,
            "method": v.method,
            "purchase_value": v.purchase_value,
            "cost": v.cost,
            "salvage_value": v.salvage_value,
            "depreciation_status": v.depreciation_status,
            "months_elapsed": v.months_elapsed,
            "book_value": v.target_book_value,
            "depreciation_rate": v.depreciation_rate,
        }
        if v.book_values_by_month is not None:
            for month in range(1, 13):
                row[f"month_{month:02d}"] = v.book_values_by_month.get(month)
        rows.append(row)

    if not rows:
        return pd.DataFrame()
    return pd.DataFrame(rows).set_index("asset_id").round(2)


def monthly_totals_frame(snapshot: PortfolioSnapshot) -> pd.DataFrame:
    if snapshot.monthly_book_value_totals is None:
        return pd.DataFrame()
    df = pd.DataFrame(
        {
            "month": list(snapshot.monthly_book_value_totals.keys()),
            "total_book_value": list(snapshot.monthly_book_value_totals.values()),
        }
    )
    return df.set_index("month")
