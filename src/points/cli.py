"""Typer-based CLI for the points service."""

import logging
from pathlib import Path

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from .api import serve as serve_api
from .config import PointsConfig
from .errors import PointsError
from .service import PointsService
from .transactions import load_transactions, read_transactions

app = typer.Typer(
    name="points",
    help="Points ledger - per-payer balances with oldest-first spending",
    add_completion=False,
)

console = Console()


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def _service_from_file(path: Path) -> PointsService:
    if not path.exists():
        console.print(f"[red]Error: Transactions file not found: {path}[/red]")
        raise typer.Exit(code=1)

    service = PointsService()
    load_transactions(service, read_transactions(path))
    return service


def _balance_table(balances: dict[str, int], title: str = "Balances") -> Table:
    table = Table(title=title)
    table.add_column("Payer", style="cyan")
    table.add_column("Points", justify="right", style="magenta")
    for payer, points in balances.items():
        table.add_row(payer, str(points))
    return table


@app.command()
def serve(
    host: str = typer.Option(None, "--host", help="Interface to bind (default: POINTS_HOST or 127.0.0.1)"),
    port: int = typer.Option(None, "--port", "-p", help="Port to listen on (default: POINTS_PORT or 3000)"),
    transactions: str = typer.Option(
        None,
        "--transactions",
        "-t",
        help="JSON Lines file of transactions to load before serving",
    ),
    debug: bool = typer.Option(False, "--debug", help="Enable debug logging"),
):
    """Run the points HTTP API.

    The ledger lives in memory and is lost when the server stops.
    """
    try:
        config = PointsConfig.from_env(
            cli_host=host,
            cli_port=port,
            cli_transactions_file=transactions,
        )
    except ValidationError as e:
        console.print(f"[red]Error: Invalid configuration: {escape(str(e))}[/red]")
        raise typer.Exit(code=1)
    _configure_logging("DEBUG" if debug else config.log_level)

    service = PointsService()
    if config.transactions_file:
        if not config.transactions_file.exists():
            console.print(f"[red]Error: Transactions file not found: {config.transactions_file}[/red]")
            raise typer.Exit(code=1)
        events = load_transactions(service, read_transactions(config.transactions_file))
        console.print(f"[green]+[/green] Loaded {len(events)} transaction(s) from {config.transactions_file}")

    serve_api(config, service)


@app.command()
def balance(
    file: Path = typer.Argument(..., help="JSON Lines file of transactions"),
):
    """Show per-payer balances for a transactions file."""
    service = _service_from_file(file)
    balances = service.get_balances()

    if not balances:
        console.print("[dim]No transactions[/dim]")
        return

    console.print(_balance_table(balances))


@app.command()
def spend(
    file: Path = typer.Argument(..., help="JSON Lines file of transactions"),
    points: int = typer.Option(..., "--points", "-n", help="Points to spend"),
):
    """Spend points from a transactions file and show the allocation.

    Nothing is written back to the file.
    """
    service = _service_from_file(file)

    try:
        entries = service.spend_points(points)
    except PointsError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(code=1)

    table = Table(title=f"Spent {points} point(s)")
    table.add_column("Payer", style="cyan")
    table.add_column("Points", justify="right", style="red")
    for entry in entries:
        table.add_row(entry.source, str(entry.amount_deducted))
    console.print(table)
    console.print(_balance_table(service.get_balances(), title="Balances after spend"))


@app.command()
def version():
    """Show points version."""
    from . import __version__
    console.print(f"points v{__version__}")


def main():
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
