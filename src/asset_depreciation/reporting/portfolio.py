import logging
from collections.abc import Sequence
from concurrent.futures import Executor
from datetime import date
from typing import NamedTuple

from asset_depreciation.config.settings import get_settings
from asset_depreciation.engine.errors import InvalidConfiguration
from asset_depreciation.engine.months import month_end, months_between
from asset_depreciation.engine.range_expander import (
    current_value,
    is_carried,
    month_value,
    year_values,
)
from asset_depreciation.engine.schedule import validate_input
from asset_depreciation.models.schemas import (
    AssetRecord,
    AssetValuation,
    CalculationError,
    DepreciationInput,
    MethodBreakdown,
    PortfolioFilter,
    PortfolioSnapshot,
    ReportPeriod,
)
from asset_depreciation.reporting.filters import (
    ACTIVE,
    FULLY_DEPRECIATED,
    NOT_STARTED,
    depreciation_status,
    ending_within,
    matches_record,
    matches_schedule,
    matches_valuation,
    validate_filters,
)

logger = logging.getLogger("asset_depreciation.reporting")


class _ValuationJob(NamedTuple):
    record: AssetRecord
    inp: DepreciationInput
    period: ReportPeriod
    reference: date
    status: str
    elapsed: int
    ending_soon: bool


def reference_date(period: ReportPeriod, today: date) -> date:
    """Date at which status buckets are evaluated for the requested period."""
    if period.mode == "current":
        return today
    if period.mode == "month":
        return month_end(period.year, period.month)
    return date(period.year, 12, 31)


def _value_asset(job: _ValuationJob) -> AssetValuation:
    inp, period = job.inp, job.period
    mode_fields: dict = {}

    if period.mode == "year":
        by_month = {
            month: result.book_value
            for month, result in year_values(inp, period.year).items()
            if result is not None
        }
        # Year-end position is the last month the asset was carried.
        target = by_month[max(by_month)] if by_month else None
        mode_fields["book_values_by_month"] = by_month
    elif period.mode == "month":
        result = month_value(inp, period.year, period.month)
        target = result.book_value if result else None
        mode_fields["book_value"] = target
    else:
        ref = job.reference
        # Acquired later this month: not on the books yet at the reference day.
        carried = is_carried(inp, ref.year, ref.month) and job.status != NOT_STARTED
        target = current_value(inp, ref).book_value if carried else None
        mode_fields["current_book_value"] = target

    rate = None
    if target is not None and inp.cost > 0:
        rate = (inp.cost - target) / inp.cost * 100

    return AssetValuation(
        asset_id=job.record.id,
        name=job.record.name,
        method=validate_input(inp).value,
        purchase_value=float(job.record.unit_price or 0),
        cost=inp.cost,
        salvage_value=inp.salvage_value,
        depreciation_status=job.status,
        months_elapsed=job.elapsed,
        depreciation_rate=rate,
        target_book_value=target,
        ending_soon=job.ending_soon,
        **mode_fields,
    )


class PortfolioAggregator:
    """Rolls per-asset depreciation up into report-level totals.

    Filters run in three stages: stored-record attributes, then schedule
    position (status, age, ending soon), then computed values. Only assets that
    survive the first two are valued.
    """

    def __init__(
        self,
        ending_soon_horizon_months: int = 12,
        executor: Executor | None = None,
    ):
        self.ending_soon_horizon_months = ending_soon_horizon_months
        self.executor = executor

    def aggregate(
        self,
        assets: Sequence[AssetRecord],
        filters: PortfolioFilter | None = None,
        period: ReportPeriod | None = None,
        today: date | None = None,
    ) -> PortfolioSnapshot:
        """Compute a portfolio snapshot for the filtered assets.

        Args:
            assets: Asset records from the storage layer.
            filters: Report filters. Unknown bucket labels raise ValueError.
            period: Year and/or month to value; current mode when omitted.
            today: Valuation date for current mode. Defaults to today.
        """
        filters = filters or PortfolioFilter()
        period = period or ReportPeriod()
        validate_filters(filters)
        reference = reference_date(period, today or date.today())

        errors: list[CalculationError] = []
        jobs: list[_ValuationJob] = []
        for record in assets:
            if not matches_record(record, filters):
                continue
            try:
                inp = record.to_depreciation_input()
                validate_input(inp)
            except InvalidConfiguration as e:
                logger.warning("Skipping asset %s: %s", record.id, e.message)
                errors.append(
                    CalculationError(asset_id=record.id, kind=e.kind, message=e.message)
                )
                continue

            raw_elapsed = months_between(inp.acquisition_date, reference)
            started = inp.acquisition_date <= reference
            elapsed = max(0, min(inp.useful_life_months, raw_elapsed))
            status = depreciation_status(elapsed, inp.useful_life_months, started)
            ending_soon = ending_within(
                elapsed,
                inp.useful_life_months,
                started,
                self.ending_soon_horizon_months,
            )
            if not matches_schedule(
                filters, status, max(raw_elapsed, 0) / 12, ending_soon
            ):
                continue
            jobs.append(
                _ValuationJob(
                    record, inp, period, reference, status, elapsed, ending_soon
                )
            )

        mapper = self.executor.map if self.executor is not None else map
        valuations = [
            v for v in mapper(_value_asset, jobs) if matches_valuation(v, filters)
        ]
        logger.debug(
            "Valued %d of %d assets (%d errors) in %s mode",
            len(valuations),
            len(assets),
            len(errors),
            period.mode,
        )
        return _reduce(valuations, errors, period, reference)


def _mean(values: list[float]) -> float:
    return sum(values) / len(values) if values else 0.0


def _reduce(
    valuations: list[AssetValuation],
    errors: list[CalculationError],
    period: ReportPeriod,
    reference: date,
) -> PortfolioSnapshot:
    valued = [v for v in valuations if v.target_book_value is not None]
    rates = [v.depreciation_rate for v in valued if v.cost > 0]

    monthly_totals = None
    if period.mode == "year":
        monthly_totals = {
            month: round(
                sum(v.book_values_by_month.get(month, 0.0) for v in valuations), 2
            )
            for month in range(1, 13)
        }

    by_method: dict[str, list[AssetValuation]] = {}
    for v in valuations:
        by_method.setdefault(v.method, []).append(v)
    breakdown = []
    for method, items in sorted(by_method.items()):
        method_rates = [
            v.depreciation_rate for v in items if v.depreciation_rate is not None
        ]
        breakdown.append(
            MethodBreakdown(
                method=method,
                count=len(items),
                total_value=round(sum(v.purchase_value for v in items), 2),
                average_depreciation_rate=round(_mean(method_rates), 2),
            )
        )

    statuses = [v.depreciation_status for v in valuations]
    return PortfolioSnapshot(
        mode=period.mode,
        as_of=reference,
        total_assets=len(valuations),
        total_purchase_value=round(sum(v.purchase_value for v in valuations), 2),
        total_current_book_value=round(sum(v.target_book_value for v in valued), 2),
        total_accumulated_depreciation=round(
            sum(v.cost - v.target_book_value for v in valued), 2
        ),
        average_depreciation_rate=round(_mean(rates), 2),
        assets_actively_depreciating=statuses.count(ACTIVE),
        assets_fully_depreciated=statuses.count(FULLY_DEPRECIATED),
        assets_not_started=statuses.count(NOT_STARTED),
        depreciation_ending_in_12_months=sum(1 for v in valuations if v.ending_soon),
        monthly_book_value_totals=monthly_totals,
        depreciation_by_method=breakdown,
        assets=valuations,
        errors=errors,
    )


def aggregate(
    assets: Sequence[AssetRecord],
    filters: PortfolioFilter | None = None,
    period: ReportPeriod | None = None,
    today: date | None = None,
    executor: Executor | None = None,
) -> PortfolioSnapshot:
    """Aggregate with the configured ending-soon horizon."""
    aggregator = PortfolioAggregator(
        ending_soon_horizon_months=get_settings().ending_soon_horizon_months,
        executor=executor,
    )
    return aggregator.aggregate(assets, filters, period, today)
