from collections.abc import Iterable, Iterator
from datetime import date

import pandas as pd

from asset_depreciation.engine.months import (
    iter_months,
    month_end,
    month_index,
)
from asset_depreciation.engine.schedule import book_value_at, validate_input
from asset_depreciation.models.schemas import DepreciationInput, MonthlyResult


class MonthlySchedule:
    """Lazy, restartable run of month-end valuations over an inclusive range.

    Every iteration recomputes from the input; nothing is cached between passes.
    """

    def __init__(self, inp: DepreciationInput, start: date, end: date):
        if end < start:
            raise ValueError(f"Range end {end} precedes start {start}")
        validate_input(inp)
        self.inp = inp
        self.start = start
        self.end = end

    def __iter__(self) -> Iterator[MonthlyResult]:
        for year, month in iter_months(self.start, self.end):
            yield book_value_at(self.inp, month_end(year, month))

    def __len__(self) -> int:
        return (
            month_index(self.end.year, self.end.month)
            - month_index(self.start.year, self.start.month)
            + 1
        )


def expand(inp: DepreciationInput, start: date, end: date) -> MonthlySchedule:
    return MonthlySchedule(inp, start, end)


def is_carried(inp: DepreciationInput, year: int, month: int) -> bool:
    """Whether the asset is on the books during the given month."""
    index = month_index(year, month)
    acquired = inp.acquisition_date
    if index < month_index(acquired.year, acquired.month):
        return False
    disposed = inp.disposal_date
    return disposed is None or index <= month_index(disposed.year, disposed.month)


def year_values(inp: DepreciationInput, year: int) -> dict[int, MonthlyResult | None]:
    """Month-end values for Jan-Dec; None where the asset is not carried."""
    values: dict[int, MonthlyResult | None] = {}
    for result in expand(inp, date(year, 1, 1), date(year, 12, 31)):
        carried = is_carried(inp, result.year, result.month)
        values[result.month] = result if carried else None
    return values


def month_value(inp: DepreciationInput, year: int, month: int) -> MonthlyResult | None:
    validate_input(inp)
    if not is_carried(inp, year, month):
        return None
    return book_value_at(inp, month_end(year, month))


def current_value(inp: DepreciationInput, today: date | None = None) -> MonthlyResult:
    return book_value_at(inp, today or date.today())


def schedule_frame(results: Iterable[MonthlyResult]) -> pd.DataFrame:
    """Return a month-indexed DataFrame of book values and expenses."""
    data = [
        {
            "month": date(r.year, r.month, 1),
            "book_value": round(r.book_value, 2),
            "period_expense": round(r.period_expense, 2),
            "accumulated_depreciation": round(r.accumulated_depreciation, 2),
        }
        for r in results
    ]
    if not data:
        return pd.DataFrame()

    df = pd.DataFrame(data)
    df["month"] = pd.to_datetime(df["month"])
    df = df.set_index("month")
    return df
