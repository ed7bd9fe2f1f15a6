import math
from collections.abc import Iterator
from datetime import date

from asset_depreciation.engine.errors import InvalidConfiguration
from asset_depreciation.engine.months import (
    days_in_month,
    from_month_index,
    month_index,
    months_between,
)
from asset_depreciation.models.schemas import (
    DepreciationInput,
    DepreciationMethod,
    MonthlyResult,
)


def validate_input(inp: DepreciationInput) -> DepreciationMethod:
    """Check the cost/salvage/life invariants and resolve the method.

    Raises:
        InvalidConfiguration: cost, salvage or useful life cannot be depreciated.
        MethodUnsupported: the method string is not recognized.
    """
    method = DepreciationMethod.parse(inp.method, inp.asset_id)

    if inp.useful_life_months <= 0:
        raise InvalidConfiguration(
            f"Useful life must be positive, got {inp.useful_life_months} months",
            inp.asset_id,
        )
    if not (math.isfinite(inp.cost) and math.isfinite(inp.salvage_value)):
        raise InvalidConfiguration(
            "Cost and salvage value must be finite numbers", inp.asset_id
        )
    if inp.salvage_value < 0:
        raise InvalidConfiguration(
            f"Salvage value must be non-negative, got {inp.salvage_value:,.2f}",
            inp.asset_id,
        )
    if inp.cost <= inp.salvage_value:
        raise InvalidConfiguration(
            f"Cost {inp.cost:,.2f} must exceed salvage value {inp.salvage_value:,.2f}",
            inp.asset_id,
        )
    return method


def first_period_weight(acquisition_date: date) -> float:
    """Share of the acquisition month in service, the acquisition day included."""
    dim = days_in_month(acquisition_date.year, acquisition_date.month)
    return (dim - acquisition_date.day + 1) / dim


def period_count(inp: DepreciationInput) -> int:
    """Calendar months from acquisition through the month salvage is reached."""
    partial = first_period_weight(inp.acquisition_date) < 1.0
    return inp.useful_life_months + (1 if partial else 0)


def period_weights(inp: DepreciationInput) -> Iterator[float]:
    """Weight of each calendar month of the life, starting at the acquisition month.

    A partial first month is balanced by a stub month after the last full one,
    so the weights always add up to ``useful_life_months``.
    """
    first = first_period_weight(inp.acquisition_date)
    yield first
    for _ in range(inp.useful_life_months - 1):
        yield 1.0
    if first < 1.0:
        yield 1.0 - first


def _period_charges(
    inp: DepreciationInput, method: DepreciationMethod
) -> Iterator[tuple[float, float]]:
    """Yield (period_expense, closing_book_value) for each month of the life."""
    life = inp.useful_life_months
    salvage = inp.salvage_value
    monthly_straight = inp.depreciable_base / life
    last = period_count(inp) - 1

    book_value = inp.cost
    consumed = 0.0
    for p, weight in enumerate(period_weights(inp)):
        remaining_base = book_value - salvage
        if p == last:
            # Final period books whatever is left so the life ends on salvage.
            yield remaining_base, salvage
            return

        if method is DepreciationMethod.STRAIGHT_LINE:
            closing = inp.cost - monthly_straight * (consumed + weight)
            expense = book_value - closing
        else:
            declining = book_value * method.factor / life * weight
            straight = remaining_base * weight / (life - consumed)
            expense = max(declining, straight)

        expense = min(max(expense, 0.0), remaining_base)
        consumed += weight
        book_value -= expense
        yield expense, book_value


def months_elapsed(inp: DepreciationInput, as_of: date) -> int:
    """Whole calendar months of service at ``as_of``, clamped to [0, life]."""
    elapsed = months_between(inp.acquisition_date, as_of)
    return max(0, min(inp.useful_life_months, elapsed))


def book_value_at(inp: DepreciationInput, as_of: date) -> MonthlyResult:
    """Book value at the close of the month containing ``as_of``.

    ``period_expense`` is the charge recognized in that month: prorated by days
    in the acquisition month, zero before acquisition and after the life ends.
    """
    method = validate_input(inp)
    acquired = inp.acquisition_date
    period = month_index(as_of.year, as_of.month) - month_index(
        acquired.year, acquired.month
    )

    expense, book_value = 0.0, inp.cost
    if period >= period_count(inp):
        expense, book_value = 0.0, inp.salvage_value
    elif period >= 0:
        for p, (expense, book_value) in enumerate(_period_charges(inp, method)):
            if p == period:
                break

    return MonthlyResult(
        year=as_of.year,
        month=as_of.month,
        book_value=book_value,
        period_expense=expense,
        accumulated_depreciation=inp.cost - book_value,
    )


def full_schedule(inp: DepreciationInput) -> list[MonthlyResult]:
    """Every month from acquisition through the month the asset reaches salvage."""
    method = validate_input(inp)
    start = month_index(inp.acquisition_date.year, inp.acquisition_date.month)

    schedule = []
    for p, (expense, book_value) in enumerate(_period_charges(inp, method)):
        year, month = from_month_index(start + p)
        schedule.append(
            MonthlyResult(
                year=year,
                month=month,
                book_value=book_value,
                period_expense=expense,
                accumulated_depreciation=inp.cost - book_value,
            )
        )
    return schedule
