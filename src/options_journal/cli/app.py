"""``journal`` entry point: wires the sub-apps and the logging setup."""

from __future__ import annotations

import logging

import typer

from options_journal.cli.context import load_config
from options_journal.cli.report_cmds import app as report_app
from options_journal.cli.social_cmds import accounts_app, feed_app, watchlist_app
from options_journal.cli.trade_cmds import app as trade_app

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

app = typer.Typer(
    name="journal",
    help="Options trading journal - log trades, filter, and track P&L",
    no_args_is_help=True,
)

app.add_typer(trade_app, name="trade")
app.add_typer(report_app, name="report")
app.add_typer(accounts_app, name="accounts")
app.add_typer(watchlist_app, name="watchlist")
app.add_typer(feed_app, name="feed")


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log debug output, including quote lookups"),
) -> None:
    """Log trades, filter and sort them, and track P&L per account."""
    level = "DEBUG" if verbose else load_config().log_level.upper()
    logging.basicConfig(level=level, format=LOG_FORMAT, datefmt="%H:%M:%S")
    if not verbose:
        logging.getLogger("yfinance").setLevel(logging.CRITICAL)


if __name__ == "__main__":
    app()
