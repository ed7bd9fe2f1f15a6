from datetime import date
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

from asset_depreciation.engine.errors import InvalidConfiguration, MethodUnsupported

# --- Engine value objects ---


class DepreciationMethod(str, Enum):
    STRAIGHT_LINE = "STRAIGHT_LINE"
    DECLINING_BALANCE = "DECLINING_BALANCE"
    DOUBLE_DECLINING = "DOUBLE_DECLINING"

    @property
    def factor(self) -> int:
        """Multiplier on the straight-line rate for declining methods."""
        return 2 if self is DepreciationMethod.DOUBLE_DECLINING else 1

    @classmethod
    def parse(cls, value: str, asset_id: int | None = None) -> "DepreciationMethod":
        key = str(value).strip().upper().replace("-", "_").replace(" ", "_")
        try:
            return cls(key)
        except ValueError:
            raise MethodUnsupported(value, asset_id) from None


class DepreciationInput(BaseModel):
    """Depreciation parameters of one asset, snapshotted from its record.

    No business validation happens here: an invalid combination must still
    reach the calculator so it can be reported per asset.
    """

    model_config = ConfigDict(frozen=True)

    acquisition_date: date
    cost: float
    salvage_value: float = 0.0
    useful_life_months: int
    method: str = DepreciationMethod.STRAIGHT_LINE.value
    disposal_date: date | None = None
    asset_id: int | None = None

    @classmethod
    def from_years(cls, useful_life_years: float, **kwargs) -> "DepreciationInput":
        return cls(useful_life_months=round(useful_life_years * 12), **kwargs)

    @property
    def depreciable_base(self) -> float:
        return self.cost - self.salvage_value

    @property
    def residual_percentage(self) -> float:
        if self.cost <= 0:
            return 0.0
        return self.salvage_value / self.cost * 100


class MonthlyResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    year: int
    month: int
    book_value: float
    period_expense: float
    accumulated_depreciation: float


# --- Storage snapshot ---


class AssetRecord(BaseModel):
    """Asset row as handed over by the storage layer."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str | None = None
    serial_number: str | None = None
    category: str | None = None
    department: str | None = None
    location: str | None = None
    status: str | None = None
    unit_price: float | None = None
    depreciable_cost: float | None = None
    salvage_value: float | None = None
    residual_percentage: float | None = None
    siv_date: date | None = None
    useful_life_years: float | None = None
    depreciation_method: str | None = None
    disposal_date: date | None = None

    @property
    def cost_basis(self) -> float:
        if self.depreciable_cost is not None:
            return float(self.depreciable_cost)
        return float(self.unit_price or 0)

    @property
    def resolved_salvage_value(self) -> float:
        if self.salvage_value is not None:
            return float(self.salvage_value)
        if self.residual_percentage is not None:
            return self.cost_basis * self.residual_percentage / 100
        return 0.0

    @property
    def resolved_residual_percentage(self) -> float | None:
        if self.residual_percentage is not None:
            return self.residual_percentage
        if self.cost_basis > 0:
            return self.resolved_salvage_value / self.cost_basis * 100
        return None

    def to_depreciation_input(self) -> DepreciationInput:
        """Normalize the record into engine input (years -> months, salvage)."""
        if self.siv_date is None:
            raise InvalidConfiguration("Asset has no SIV (acquisition) date", self.id)
        return DepreciationInput(
            asset_id=self.id,
            acquisition_date=self.siv_date,
            cost=self.cost_basis,
            salvage_value=self.resolved_salvage_value,
            useful_life_months=round((self.useful_life_years or 0) * 12),
            method=self.depreciation_method or DepreciationMethod.STRAIGHT_LINE.value,
            disposal_date=self.disposal_date,
        )


# --- Report requests ---


class ReportPeriod(BaseModel):
    year: int | None = Field(default=None, ge=1900, le=9999)
    month: int | None = Field(default=None, ge=1, le=12)

    @model_validator(mode="after")
    def _month_requires_year(self) -> "ReportPeriod":
        if self.month is not None and self.year is None:
            raise ValueError("month filter requires a year")
        return self

    @property
    def mode(self) -> str:
        if self.year is None:
            return "current"
        return "year" if self.month is None else "month"


class PortfolioFilter(BaseModel):
    status: str | None = None
    category: str | None = None
    department: str | None = None
    location: str | None = None
    depreciation_method: str | None = None
    min_value: float | None = None
    max_value: float | None = None
    siv_date_from: date | None = None
    siv_date_to: date | None = None
    useful_life_range: str | None = None
    residual_percentage_range: str | None = None
    depreciation_status: str | None = None
    asset_age: str | None = None
    depreciation_ending_soon: bool = False
    min_book_value: float | None = None
    max_book_value: float | None = None
    min_depreciation_rate: float | None = None
    max_depreciation_rate: float | None = None

    @field_validator(
        "status",
        "category",
        "department",
        "location",
        "depreciation_method",
        "useful_life_range",
        "residual_percentage_range",
        "depreciation_status",
        "asset_age",
        mode="before",
    )
    @classmethod
    def _all_means_unfiltered(cls, value):
        if isinstance(value, str) and value.strip().lower() in ("", "all"):
            return None
        return value


# --- Report payloads ---


class _ReportModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class AssetValuation(_ReportModel):
    asset_id: int
    name: str | None = None
    method: str
    purchase_value: float = 0.0
    cost: float
    salvage_value: float
    depreciation_status: str
    months_elapsed: int
    depreciation_rate: float | None = None
    current_book_value: float | None = None
    book_value: float | None = None
    book_values_by_month: dict[int, float] | None = None
    target_book_value: float | None = Field(default=None, exclude=True)
    ending_soon: bool = Field(default=False, exclude=True)


class MethodBreakdown(_ReportModel):
    method: str
    count: int
    total_value: float
    average_depreciation_rate: float


class CalculationError(_ReportModel):
    asset_id: int | None
    kind: str
    message: str


class PortfolioSnapshot(_ReportModel):
    mode: str
    as_of: date
    total_assets: int
    total_purchase_value: float
    total_current_book_value: float
    total_accumulated_depreciation: float
    average_depreciation_rate: float
    assets_actively_depreciating: int
    assets_fully_depreciated: int
    assets_not_started: int
    depreciation_ending_in_12_months: int
    monthly_book_value_totals: dict[int, float] | None = None
    depreciation_by_method: list[MethodBreakdown]
    assets: list[AssetValuation]
    errors: list[CalculationError]
