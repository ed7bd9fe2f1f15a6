"""Report filter buckets.

Ranges are half-open ``[low, high)``; the last bucket of each family is
open-ended. ``None`` as a label means the filter is not applied.
"""

from asset_depreciation.engine.errors import MethodUnsupported
from asset_depreciation.models.schemas import (
    AssetRecord,
    AssetValuation,
    DepreciationMethod,
    PortfolioFilter,
)

NOT_STARTED = "not_started"
ACTIVE = "active"
FULLY_DEPRECIATED = "fully_depreciated"
DEPRECIATION_STATUSES = (NOT_STARTED, ACTIVE, FULLY_DEPRECIATED)

# Years since acquisition
AGE_BUCKETS = {"0-1": (0, 1), "1-3": (1, 3), "3-5": (3, 5), "5+": (5, None)}
# Useful life in years
USEFUL_LIFE_BUCKETS = {
    "1-3": (1, 3),
    "3-5": (3, 5),
    "5-10": (5, 10),
    "10+": (10, None),
}
# Residual value as % of cost
RESIDUAL_PERCENTAGE_BUCKETS = {
    "0-5": (0, 5),
    "5-10": (5, 10),
    "10-20": (10, 20),
    "20+": (20, None),
}


def in_bucket(value: float | None, label: str, buckets: dict) -> bool:
    if value is None:
        return False
    low, high = buckets[label]
    return value >= low and (high is None or value < high)


def validate_filters(filters: PortfolioFilter) -> None:
    """Reject unknown bucket labels before any asset is processed."""
    checks = [
        ("asset_age", filters.asset_age, AGE_BUCKETS),
        ("useful_life_range", filters.useful_life_range, USEFUL_LIFE_BUCKETS),
        (
            "residual_percentage_range",
            filters.residual_percentage_range,
            RESIDUAL_PERCENTAGE_BUCKETS,
        ),
        ("depreciation_status", filters.depreciation_status, DEPRECIATION_STATUSES),
    ]
    for name, label, allowed in checks:
        if label is not None and label not in allowed:
            raise ValueError(
                f"Unknown {name} {label!r}; expected one of {', '.join(allowed)}"
            )
    if filters.depreciation_method is not None:
        try:
            DepreciationMethod.parse(filters.depreciation_method)
        except MethodUnsupported as e:
            raise ValueError(e.message) from e


def depreciation_status(elapsed: int, life_months: int, started: bool) -> str:
    """Bucket an asset by calendar months elapsed against its useful life."""
    if not started:
        return NOT_STARTED
    if elapsed >= life_months:
        return FULLY_DEPRECIATED
    return ACTIVE


def ending_within(
    elapsed: int, life_months: int, started: bool, horizon_months: int
) -> bool:
    """Still depreciating and due to finish within the horizon."""
    if not started or elapsed >= life_months:
        return False
    return life_months - elapsed <= horizon_months


def _same(expected: str | None, actual: str | None) -> bool:
    return expected is None or actual == expected


def matches_record(record: AssetRecord, filters: PortfolioFilter) -> bool:
    """Filters answerable from the stored record alone."""
    if not (
        _same(filters.status, record.status)
        and _same(filters.category, record.category)
        and _same(filters.department, record.department)
        and _same(filters.location, record.location)
    ):
        return False

    if filters.depreciation_method is not None:
        wanted = DepreciationMethod.parse(filters.depreciation_method)
        stored = record.depreciation_method or DepreciationMethod.STRAIGHT_LINE.value
        try:
            if DepreciationMethod.parse(stored) is not wanted:
                return False
        except MethodUnsupported:
            return False

    value = float(record.unit_price or 0)
    if filters.min_value is not None and value < filters.min_value:
        return False
    if filters.max_value is not None and value > filters.max_value:
        return False

    if filters.siv_date_from or filters.siv_date_to:
        if record.siv_date is None:
            return False
        if filters.siv_date_from and record.siv_date < filters.siv_date_from:
            return False
        if filters.siv_date_to and record.siv_date > filters.siv_date_to:
            return False

    if filters.useful_life_range is not None and not in_bucket(
        record.useful_life_years, filters.useful_life_range, USEFUL_LIFE_BUCKETS
    ):
        return False

    if filters.residual_percentage_range is not None and not in_bucket(
        record.resolved_residual_percentage,
        filters.residual_percentage_range,
        RESIDUAL_PERCENTAGE_BUCKETS,
    ):
        return False

    return True


def matches_schedule(
    filters: PortfolioFilter,
    status: str,
    age_years: float,
    ending_soon: bool,
) -> bool:
    """Filters that need the asset's position in its depreciation life."""
    wanted_status = filters.depreciation_status
    if wanted_status is not None and status != wanted_status:
        return False
    if filters.asset_age is not None and not in_bucket(
        age_years, filters.asset_age, AGE_BUCKETS
    ):
        return False
    if filters.depreciation_ending_soon and not ending_soon:
        return False
    return True


def matches_valuation(valuation: AssetValuation, filters: PortfolioFilter) -> bool:
    """Filters on computed book value and depreciation rate."""
    bounds = [
        (valuation.target_book_value, filters.min_book_value, filters.max_book_value),
        (
            valuation.depreciation_rate,
            filters.min_depreciation_rate,
            filters.max_depreciation_rate,
        ),
    ]
    for value, low, high in bounds:
        if low is None and high is None:
            continue
        if value is None:
            return False
        if low is not None and value < low:
            return False
        if high is not None and value > high:
            return False
    return True

