"""Calculator commands for PropJournal CLI.

Consistency/drawdown statistics, the per-day concentration cap check, and
payout performance against fees.
"""

from pathlib import Path
from typing import Optional

import click
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from propjournal.cli.common import format_money, get_config, get_session, print_error

console = Console()


@click.command()
@click.argument(
    "days_file",
    required=False,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@click.option(
    "-j", "--from-journal",
    is_flag=True,
    default=False,
    help="Use the journal's daily totals instead of a file.",
)
@click.option("-a", "--account-size", type=float, default=None, help="Account size (default from config).")
@click.option("-u", "--user", "user_id", default=None, help="User id (overrides config).")
@click.pass_context
def consistency(
    ctx: click.Context,
    days_file: Optional[Path],
    from_journal: bool,
    account_size: Optional[float],
    user_id: Optional[str],
) -> None:
    """Compute consistency score and drawdown for daily profits.

    DAYS_FILE holds one "date,profit" pair per line.

    \b
    Examples:
      propjournal consistency days.csv --account-size 50000
      propjournal consistency --from-journal
    """
    from propjournal.calculators import calculate_consistency, parse_day_series
    from propjournal.errors import CalculationError

    config = get_config(ctx)
    if account_size is None:
        account_size = float(config["consistency"]["account_size"])

    if from_journal:
        days = get_session(ctx, user_id).trading_days()
    elif days_file is not None:
        days = parse_day_series(days_file.read_text(encoding="utf-8-sig"))
    else:
        print_error("Give a DAYS_FILE or use --from-journal")
        raise SystemExit(1)

    try:
        result = calculate_consistency(days, account_size)
    except CalculationError as e:
        print_error(str(e))
        raise SystemExit(1)

    score_color = "green" if result.consistency_score >= 50 else "yellow"
    summary = (
        f"Trading days:      {result.total_days}\n"
        f"Total profit:      {format_money(result.total_profit)} "
        f"({result.percent_of_account:.2f}% of account)\n"
        f"Average per day:   {format_money(result.average_profit)}\n"
        f"Profitable days:   {result.profitable_days} ({result.profitable_percentage:.1f}%)\n"
        f"Losing days:       {result.unprofitable_days}\n"
        f"Std deviation:     ${result.std_deviation:,.2f}\n"
        f"Max drawdown:      ${result.max_drawdown:,.2f} "
        f"({result.max_drawdown_percentage:.2f}%)\n"
        f"Consistency score: [{score_color}]{result.consistency_score:.1f}[/{score_color}]"
    )
    console.print(Panel(
        summary,
        title=f"[bold]Consistency (account ${account_size:,.0f})[/bold]",
        border_style="cyan",
    ))


@click.command()
@click.argument("profits", nargs=-1, type=float, required=True)
@click.option(
    "-p", "--percentage",
    type=click.FloatRange(min=0, max=100, min_open=True),
    default=None,
    help="Max share of total profit per day (default from config).",
)
@click.option("-t", "--target", type=float, default=None, help="Profit target (default from config).")
@click.pass_context
def daycap(
    ctx: click.Context,
    profits: tuple[float, ...],
    percentage: Optional[float],
    target: Optional[float],
) -> None:
    """Check daily profits against a consistency cap.

    A day is valid when its profit is at most PERCENTAGE of the total.

    \b
    Examples:
      propjournal daycap 100 900 --percentage 30
      propjournal daycap 250 300 200 -- -50
    """
    from propjournal.calculators import evaluate_day_caps
    from propjournal.errors import CalculationError

    config = get_config(ctx)
    if percentage is None:
        percentage = float(config["consistency"]["consistency_percentage"])
    if target is None:
        target = float(config["consistency"]["profit_target"])

    try:
        result = evaluate_day_caps(list(profits), percentage, target)
    except CalculationError as e:
        print_error(str(e))
        raise SystemExit(1)

    table = Table(title=f"Day Cap ({percentage:g}%)", show_header=True, header_style="bold cyan")
    table.add_column("Day", justify="right", style="dim")
    table.add_column("Profit", justify="right")
    table.add_column("% of Total", justify="right")
    table.add_column("Status", justify="center")

    for index, day_result in enumerate(result.days, start=1):
        status = "[green]OK[/green]" if day_result.is_valid else "[red]Over cap[/red]"
        table.add_row(
            str(index),
            format_money(day_result.profit),
            f"{day_result.percentage:.1f}%",
            status,
        )

    console.print(table)
    console.print(f"\n[bold]Total profit:[/bold] {format_money(result.total_profit)}")
    console.print(f"[bold]Max allowed per day:[/bold] ${result.max_allowed_per_day:,.2f}")
    console.print(f"[bold]Profit target:[/bold] ${result.profit_target:,.2f}")

    if result.needs_more_trading:
        console.print(Panel(
            f"Your maximum profit per day (${result.max_allowed_per_day:,.2f}) exceeds "
            f"{percentage:g}% of your profit target (${result.target_cap:,.2f}).\n"
            "Trade more days to stay under the consistency threshold.",
            title="[bold yellow]Trading Status[/bold yellow]",
            border_style="yellow",
        ))


@click.command()
@click.argument("transactions_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("-a", "--account", "account_id", default=None, help="Only include this account.")
def performance(transactions_file: Path, account_id: Optional[str]) -> None:
    """Summarize payouts against evaluation and activation fees.

    TRANSACTIONS_FILE holds "date,account,type,amount[,description]" rows,
    where type is evaluationFee, activationFee or payout.

    \b
    Examples:
      propjournal performance transactions.csv
      propjournal performance transactions.csv --account APEX-01
    """
    from propjournal.calculators import parse_transactions, summarize_performance

    transactions = parse_transactions(transactions_file.read_text(encoding="utf-8-sig"))
    if not transactions:
        print_error(f"No transactions found in {transactions_file.name}")
        raise SystemExit(1)

    summary = summarize_performance(transactions, account_id)
    roi = f"{summary.roi:.1f}%" if summary.roi is not None else "n/a (no fees paid)"
    title = f"Performance ({account_id})" if account_id else "Performance"
    console.print(Panel(
        f"Total payouts: ${summary.total_payouts:,.2f}\n"
        f"Total fees:    ${summary.total_fees:,.2f}\n"
        f"Net profit:    {format_money(summary.net_profit)}\n"
        f"ROI on fees:   {roi}",
        title=f"[bold]{title}[/bold]",
        border_style="cyan",
    ))
