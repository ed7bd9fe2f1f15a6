from datetime import date

import pytest
from pydantic import ValidationError

from asset_depreciation.models.schemas import PortfolioFilter, ReportPeriod
from asset_depreciation.reporting.filters import (
    AGE_BUCKETS,
    RESIDUAL_PERCENTAGE_BUCKETS,
    USEFUL_LIFE_BUCKETS,
    depreciation_status,
    ending_within,
    in_bucket,
    matches_record,
    validate_filters,
)


class TestBuckets:
    def test_half_open_ranges(self):
        assert in_bucket(1.0, "1-3", AGE_BUCKETS)
        assert not in_bucket(3.0, "1-3", AGE_BUCKETS)
        assert in_bucket(3.0, "3-5", USEFUL_LIFE_BUCKETS)

    def test_open_ended_last_bucket(self):
        assert in_bucket(40.0, "10+", USEFUL_LIFE_BUCKETS)
        assert in_bucket(20.0, "20+", RESIDUAL_PERCENTAGE_BUCKETS)

    def test_missing_value_never_matches(self):
        assert not in_bucket(None, "0-5", RESIDUAL_PERCENTAGE_BUCKETS)

    def test_unknown_label(self):
        with pytest.raises(ValueError, match="useful_life_range"):
            validate_filters(PortfolioFilter(useful_life_range="2-4"))

    def test_unknown_status(self):
        with pytest.raises(ValueError, match="depreciation_status"):
            validate_filters(PortfolioFilter(depreciation_status="retired"))


class TestStatus:
    def test_not_started(self):
        assert depreciation_status(0, 24, started=False) == "not_started"

    def test_first_month_is_active(self):
        assert depreciation_status(0, 24, started=True) == "active"

    def test_fully_depreciated(self):
        assert depreciation_status(24, 24, started=True) == "fully_depreciated"

    def test_ending_within_horizon(self):
        assert ending_within(12, 24, True, 12)
        assert not ending_within(11, 24, True, 12)
        assert not ending_within(24, 24, True, 12)
        assert not ending_within(0, 6, False, 12)


class TestRecordMatching:
    def test_exact_match(self, make_record):
        record = make_record(1, category="IT Equipment")
        assert matches_record(record, PortfolioFilter(category="IT Equipment"))
        assert not matches_record(record, PortfolioFilter(category="it equipment"))

    def test_method_filter_normalizes(self, make_record):
        record = make_record(1, depreciation_method="double-declining")
        assert matches_record(
            record, PortfolioFilter(depreciation_method="DOUBLE_DECLINING")
        )

    def test_missing_method_is_straight_line(self, make_record):
        record = make_record(1, depreciation_method=None)
        assert matches_record(
            record, PortfolioFilter(depreciation_method="straight_line")
        )

    def test_value_range_uses_purchase_value(self, make_record):
        record = make_record(1, unit_price=1200.0)
        assert matches_record(record, PortfolioFilter(min_value=1000, max_value=1200))
        assert not matches_record(record, PortfolioFilter(max_value=1000))

    def test_siv_date_range(self, make_record):
        record = make_record(1, siv_date=date(2024, 1, 1))
        window = PortfolioFilter(
            siv_date_from=date(2023, 1, 1), siv_date_to=date(2023, 12, 31)
        )
        assert not matches_record(record, window)
        undated = make_record(2, siv_date=None)
        assert not matches_record(
            undated, PortfolioFilter(siv_date_from=date(2020, 1, 1))
        )

    def test_residual_percentage_from_salvage(self, make_record):
        record = make_record(1, unit_price=1000.0, salvage_value=150.0)
        band = PortfolioFilter(residual_percentage_range="10-20")
        assert matches_record(record, band)

    def test_useful_life_bucket(self, make_record):
        record = make_record(1, useful_life_years=5)
        assert matches_record(record, PortfolioFilter(useful_life_range="5-10"))
        assert not matches_record(record, PortfolioFilter(useful_life_range="3-5"))


class TestReportPeriod:
    def test_modes(self):
        assert ReportPeriod().mode == "current"
        assert ReportPeriod(year=2025).mode == "year"
        assert ReportPeriod(year=2025, month=3).mode == "month"

    def test_month_requires_year(self):
        with pytest.raises(ValidationError):
            ReportPeriod(month=3)

    def test_month_range(self):
        with pytest.raises(ValidationError):
            ReportPeriod(year=2025, month=13)
