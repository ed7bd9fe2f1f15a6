from datetime import date
from pathlib import Path

import typer
from rich.console import Console
from rich.table import Table

app = typer.Typer(help="asset-depreciation CLI")
console = Console()


@app.command("init-db")
def init_db():
    """Initialize the database (create all tables)."""
    from asset_depreciation.models.database import get_engine
    from asset_depreciation.models.database import init_db as _init_db

    engine = get_engine()
    _init_db(engine)
    console.print("[green]Database initialized.[/green]")


@app.command("seed-data")
def seed_data():
    """Run the synthetic asset register generator."""
    import subprocess
    import sys

    subprocess.run([sys.executable, "scripts/seed_assets.py"], check=True)


@app.command()
def schedule(
    cost: float = typer.Option(..., "--cost", "-c", help="Depreciable cost"),
    acquired: str = typer.Option(
        ..., "--acquired", "-a", help="Acquisition (SIV) date, YYYY-MM-DD"
    ),
    life_months: int = typer.Option(
        ..., "--life-months", "-l", help="Useful life in months"
    ),
    salvage: float = typer.Option(0.0, "--salvage", "-s", help="Salvage value"),
    method: str = typer.Option(
        "STRAIGHT_LINE",
        "--method",
        "-m",
        help="STRAIGHT_LINE, DECLINING_BALANCE or DOUBLE_DECLINING",
    ),
    csv: Path = typer.Option(None, "--csv", help="Also write the schedule to CSV"),
):
    """Print the monthly depreciation schedule for one asset."""
    from asset_depreciation.engine.errors import InvalidConfiguration
    from asset_depreciation.engine.range_expander import schedule_frame
    from asset_depreciation.engine.schedule import full_schedule
    from asset_depreciation.models.schemas import DepreciationInput

    try:
        acquisition_date = date.fromisoformat(acquired)
    except ValueError:
        console.print(f"[red]Invalid acquisition date: {acquired}[/red]")
        raise typer.Exit(1)

    inp = DepreciationInput(
        acquisition_date=acquisition_date,
        cost=cost,
        salvage_value=salvage,
        useful_life_months=life_months,
        method=method,
    )
    try:
        results = full_schedule(inp)
    except InvalidConfiguration as e:
        console.print(f"[red]{e.message}[/red]")
        raise typer.Exit(1)

    table = Table(title=f"{method.upper()} schedule ({len(results)} months)")
    table.add_column("Month", style="cyan")
    table.add_column("Expense", justify="right")
    table.add_column("Accumulated", justify="right")
    table.add_column("Book Value", justify="right", style="green")
    for r in results:
        table.add_row(
            f"{r.year}-{r.month:02d}",
            f"{r.period_expense:,.2f}",
            f"{r.accumulated_depreciation:,.2f}",
            f"{r.book_value:,.2f}",
        )
    console.print(table)

    if csv is not None:
        schedule_frame(results).to_csv(csv)
        console.print(f"[green]Wrote {csv}[/green]")


@app.command()
def report(
    year: int = typer.Option(None, "--year", "-y", help="Report year"),
    month: int = typer.Option(None, "--month", help="Report month (needs --year)"),
    category: str = typer.Option(None, "--category", help="Category filter"),
    department: str = typer.Option(None, "--department", "-d"),
):
    """Generate a portfolio depreciation report from the database."""
    from pydantic import ValidationError

    from asset_depreciation.ingestion.asset_loader import load_asset_records
    from asset_depreciation.models.database import get_engine, get_session
    from asset_depreciation.models.schemas import PortfolioFilter, ReportPeriod
    from asset_depreciation.reporting.portfolio import aggregate

    try:
        period = ReportPeriod(year=year, month=month)
    except ValidationError:
        console.print("[red]--month requires --year and must be 1-12.[/red]")
        raise typer.Exit(1)

    with get_session(get_engine()) as session:
        records = load_asset_records(session, category=category, department=department)

    if not records:
        console.print("[red]No assets found.[/red]")
        raise typer.Exit(1)

    filters = PortfolioFilter(category=category, department=department)
    snap = aggregate(records, filters, period)

    console.print(f"\n[bold]Depreciation Report ({snap.mode} mode)[/bold]")
    console.print(f"  As of: {snap.as_of}")
    console.print(f"  Assets valued: {snap.total_assets}")
    console.print(f"  Purchase value: ${snap.total_purchase_value:,.2f}")
    console.print(f"  Book value: ${snap.total_current_book_value:,.2f}")
    console.print(
        f"  Accumulated depreciation: ${snap.total_accumulated_depreciation:,.2f}"
    )
    console.print(f"  Average rate: {snap.average_depreciation_rate:.1f}%")
    console.print(f"  [green]Active: {snap.assets_actively_depreciating}[/green]")
    console.print(f"  [red]Fully depreciated: {snap.assets_fully_depreciated}[/red]")
    console.print(f"  [yellow]Not started: {snap.assets_not_started}[/yellow]")
    console.print(f"  Ending soon: {snap.depreciation_ending_in_12_months}")

    table = Table(title="By Method")
    table.add_column("Method")
    table.add_column("Count", justify="right")
    table.add_column("Total Value", justify="right")
    table.add_column("Avg Rate", justify="right", style="green")
    for m in snap.depreciation_by_method:
        table.add_row(
            m.method,
            str(m.count),
            f"${m.total_value:,.0f}",
            f"{m.average_depreciation_rate:.1f}%",
        )
    console.print(table)

    if snap.monthly_book_value_totals:
        monthly = Table(title=f"Monthly Book Value {year}")
        monthly.add_column("Month", style="cyan")
        monthly.add_column("Book Value", justify="right")
        for m, total in snap.monthly_book_value_totals.items():
            monthly.add_row(str(m), f"${total:,.2f}")
        console.print(monthly)

    if snap.errors:
        console.print(f"\n[red]{len(snap.errors)} asset(s) could not be valued:[/red]")
        for err in snap.errors:
            console.print(f"  #{err.asset_id}: {err.message}")


@app.command()
def serve(host: str = "0.0.0.0", port: int = 8000):
    """Start the FastAPI server."""
    import uvicorn

    uvicorn.run("asset_depreciation.api.main:app", host=host, port=port, reload=True)


if __name__ == "__main__":
    app()
