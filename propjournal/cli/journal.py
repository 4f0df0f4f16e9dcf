"""Journal commands for PropJournal CLI.

Handles CSV import, the daily journal view, and manual trade and day
editing.
"""

from datetime import date, datetime, timedelta
from pathlib import Path
from typing import Optional

import click
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from propjournal.cli.common import format_money, get_session, parse_day, print_error, save_or_exit

console = Console()

FORMAT_CHOICES = {
    "auto": None,
    "standard": "standard",
    "broker": "broker_export",
}


@click.command(name="import")
@click.argument("csv_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option(
    "-f", "--format",
    "fmt",
    type=click.Choice(list(FORMAT_CHOICES)),
    default="auto",
    help="CSV format. 'auto' detects the broker export by its header.",
)
@click.option(
    "--no-header",
    is_flag=True,
    default=False,
    help="Standard format only: the first row is data, not a header.",
)
@click.option("-u", "--user", "user_id", default=None, help="User id (overrides config).")
@click.pass_context
def import_cmd(
    ctx: click.Context, csv_file: Path, fmt: str, no_header: bool, user_id: Optional[str]
) -> None:
    """Import trades from a CSV file into the journal.

    \b
    Supported formats:
      standard  Date,Symbol,Contract,Direction,EntryPrice,ExitPrice,Quantity,PnL,Fees,Notes
      broker    Order export with fills paired into round-trip trades

    Importing the same file twice does not duplicate trades.

    \b
    Examples:
      propjournal import trades.csv
      propjournal import Orders.csv --format broker
    """
    from propjournal.errors import PropJournalError
    from propjournal.models import ImportFormat
    from propjournal.parsers import CSVParseOptions

    selected = FORMAT_CHOICES[fmt]
    import_format = ImportFormat(selected) if selected else None
    options = CSVParseOptions(has_header=not no_header)

    session = get_session(ctx, user_id)
    text = csv_file.read_text(encoding="utf-8-sig", errors="replace")

    try:
        result = session.import_csv(text, fmt=import_format, options=options)
    except PropJournalError as e:
        print_error(str(e))
        raise SystemExit(1)

    body = (
        f"Format:       {result.format.value}\n"
        f"Trades:       {result.trade_count}\n"
        f"Days:         {len(result.entries)}\n"
        f"Skipped rows: {result.skipped_rows}"
    )
    if result.trade_count == 0:
        console.print(Panel(
            f"[yellow]No trades found in {csv_file.name}[/yellow]\n\n{body}",
            title="[bold yellow]Import[/bold yellow]",
            border_style="yellow",
        ))
        return

    console.print(Panel(
        body,
        title=f"[bold green]Imported {csv_file.name}[/bold green]",
        border_style="green",
    ))


@click.command()
@click.option("-d", "--days", type=int, default=None, help="Only show the last N days.")
@click.option("-t", "--trades", "show_trades", is_flag=True, default=False, help="List individual trades.")
@click.option("-u", "--user", "user_id", default=None, help="User id (overrides config).")
@click.pass_context
def journal(ctx: click.Context, days: Optional[int], show_trades: bool, user_id: Optional[str]) -> None:
    """Display daily results from the journal.

    \b
    Examples:
      propjournal journal            # All days
      propjournal journal --days 7   # Last 7 days
      propjournal journal --trades   # Include individual trades
    """
    session = get_session(ctx, user_id)
    entries = session.entries

    if days is not None:
        from_date = date.today() - timedelta(days=days)
        entries = [entry for entry in entries if entry.date >= from_date]

    if not entries:
        console.print(Panel(
            "[dim]No journal entries found[/dim]",
            title="[bold]Trading Journal[/bold]",
            border_style="dim",
        ))
        return

    table = Table(
        title="Trading Journal",
        show_header=True,
        header_style="bold cyan",
    )
    table.add_column("Date", style="dim")
    table.add_column("Trades", justify="right")
    table.add_column("Won", justify="right", style="green")
    table.add_column("Lost", justify="right", style="red")
    table.add_column("Win %", justify="right")
    table.add_column("P&L", justify="right")
    table.add_column("Notes")

    for entry in entries:
        table.add_row(
            entry.date.isoformat(),
            str(entry.trades_count),
            str(entry.winning_trades),
            str(entry.losing_trades),
            f"{entry.win_rate:.1f}%",
            format_money(entry.total_pnl),
            entry.notes or "",
        )

    console.print(table)

    if show_trades:
        trades_table = Table(title="Trades", show_header=True, header_style="bold cyan")
        trades_table.add_column("Time", style="dim")
        trades_table.add_column("Symbol", style="bold")
        trades_table.add_column("Side", justify="center")
        trades_table.add_column("Qty", justify="right")
        trades_table.add_column("Entry", justify="right")
        trades_table.add_column("Exit", justify="right")
        trades_table.add_column("P&L", justify="right")
        trades_table.add_column("ID", style="dim")

        for entry in entries:
            for trade in entry.trades:
                side_color = "green" if trade.direction == "Long" else "red"
                trades_table.add_row(
                    trade.timestamp.strftime("%Y-%m-%d %H:%M"),
                    trade.contract or trade.symbol,
                    f"[{side_color}]{trade.direction}[/{side_color}]",
                    f"{trade.quantity:g}",
                    f"{trade.entry_price:.2f}",
                    f"{trade.exit_price:.2f}",
                    format_money(trade.pnl),
                    trade.id[:8],
                )
        console.print(trades_table)

    total_pnl = sum(entry.total_pnl for entry in entries)
    console.print(f"\n[bold]Trading Days:[/bold] {len(entries)}")
    console.print(f"[bold]Total Trades:[/bold] {sum(e.trades_count for e in entries)}")
    console.print(f"[bold]Total P&L:[/bold] {format_money(total_pnl)}")


@click.group()
def trade() -> None:
    """Add or delete individual trades."""


@trade.command(name="add")
@click.argument("trade_date")
@click.argument("symbol")
@click.argument("direction", type=click.Choice(["long", "short"], case_sensitive=False))
@click.argument("entry_price", type=float)
@click.argument("exit_price", type=float)
@click.argument("quantity", type=float)
@click.option("--pnl", type=float, default=None, help="Realized P&L (computed from prices if omitted).")
@click.option("--fees", type=float, default=None, help="Fees paid.")
@click.option("-c", "--contract", default=None, help="Contract code, e.g. ESZ4.")
@click.option("-n", "--notes", default=None, help="Trade notes.")
@click.option("-u", "--user", "user_id", default=None, help="User id (overrides config).")
@click.pass_context
def add_trade(
    ctx: click.Context,
    trade_date: str,
    symbol: str,
    direction: str,
    entry_price: float,
    exit_price: float,
    quantity: float,
    pnl: Optional[float],
    fees: Optional[float],
    contract: Optional[str],
    notes: Optional[str],
    user_id: Optional[str],
) -> None:
    """Add a trade to a day.

    \b
    Examples:
      propjournal trade add 2024-01-02 ES long 4500 4510 1
      propjournal trade add 2024-01-02 NQ short 16000 15980 2 --pnl 800
    """
    from pydantic import ValidationError

    from propjournal.models import TradeEntry
    from propjournal.models.trade import price_pnl

    day = parse_day(trade_date)
    direction = direction.capitalize()
    if pnl is None:
        pnl = price_pnl(direction, entry_price, exit_price, quantity)

    try:
        new_trade = TradeEntry(
            timestamp=datetime.combine(day, datetime.now().time()),
            symbol=symbol.upper(),
            contract=contract,
            direction=direction,
            entry_price=entry_price,
            exit_price=exit_price,
            quantity=quantity,
            pnl=pnl,
            fees=fees,
            notes=notes,
        )
    except ValidationError as e:
        print_error(f"Invalid trade: {e.errors()[0]['msg']}")
        raise SystemExit(1)

    session = get_session(ctx, user_id)
    save_or_exit(session.add_trade, day, new_trade)

    console.print(
        f"[green]Added {direction} {symbol.upper()} x{quantity:g} on {day}[/green] "
        f"P&L {format_money(pnl)} [dim](id {new_trade.id})[/dim]"
    )


@trade.command(name="delete")
@click.argument("trade_date")
@click.argument("trade_id")
@click.option("-u", "--user", "user_id", default=None, help="User id (overrides config).")
@click.pass_context
def delete_trade(ctx: click.Context, trade_date: str, trade_id: str, user_id: Optional[str]) -> None:
    """Delete a trade by id (or unique id prefix)."""
    day = parse_day(trade_date)
    session = get_session(ctx, user_id)

    entry = session.journal.get_entry(day)
    matches = [t.id for t in entry.trades if t.id.startswith(trade_id)] if entry else []
    if len(matches) != 1:
        reason = "No trade" if not matches else "More than one trade"
        print_error(f"{reason} matching '{trade_id}' on {day}")
        raise SystemExit(1)

    save_or_exit(session.delete_trade, day, matches[0])
    console.print(f"[green]Deleted trade {matches[0]} from {day}[/green]")


@click.group()
def day() -> None:
    """Edit whole journal days."""


@day.command(name="note")
@click.argument("trade_date")
@click.argument("text")
@click.option("-u", "--user", "user_id", default=None, help="User id (overrides config).")
@click.pass_context
def note_day(ctx: click.Context, trade_date: str, text: str, user_id: Optional[str]) -> None:
    """Set the notes for a day."""
    entry_date = parse_day(trade_date)
    session = get_session(ctx, user_id)
    try:
        save_or_exit(session.update_notes, entry_date, text)
    except KeyError:
        print_error(f"No journal entry for {entry_date}")
        raise SystemExit(1)
    console.print(f"[green]Notes saved for {entry_date}[/green]")


@day.command(name="delete")
@click.argument("trade_date")
@click.option("-u", "--user", "user_id", default=None, help="User id (overrides config).")
@click.pass_context
def delete_day(ctx: click.Context, trade_date: str, user_id: Optional[str]) -> None:
    """Delete a day and all its trades."""
    entry_date = parse_day(trade_date)
    session = get_session(ctx, user_id)
    if session.journal.get_entry(entry_date) is None:
        print_error(f"No journal entry for {entry_date}")
        raise SystemExit(1)
    save_or_exit(session.delete_entry, entry_date)
    console.print(f"[green]Deleted {entry_date}[/green]")


@click.command()
@click.option("-y", "--yes", is_flag=True, default=False, help="Do not ask for confirmation.")
@click.option("-u", "--user", "user_id", default=None, help="User id (overrides config).")
@click.pass_context
def clear(ctx: click.Context, yes: bool, user_id: Optional[str]) -> None:
    """Remove every entry from the journal."""
    if not yes:
        click.confirm("Delete all journal entries?", abort=True)
    session = get_session(ctx, user_id)
    save_or_exit(session.clear)
    console.print("[green]Journal cleared[/green]")
