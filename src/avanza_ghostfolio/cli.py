#!/usr/bin/env python3
"""Command-line interface for the Avanza to Ghostfolio bridge."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from datetime import date, datetime

from avanza_ghostfolio import __version__
from avanza_ghostfolio.commands.assets import create_manual_asset
from avanza_ghostfolio.commands.import_history import import_history
from avanza_ghostfolio.commands.lookups import (
    get_quote,
    get_weights,
    scraper_configuration_json,
    weights_json,
)
from avanza_ghostfolio.config import load_config
from avanza_ghostfolio.data.sources import AvanzaDataSource
from avanza_ghostfolio.exceptions import AvanzaGhostfolioError
from avanza_ghostfolio.ghostfolio import GhostfolioClient
from avanza_ghostfolio.prompts import TerminalPrompter
from avanza_ghostfolio.resolver import resolve_symbol
from avanza_ghostfolio.sink import copy_to_clipboard
from avanza_ghostfolio.transactions import parse_from_file

logger = logging.getLogger(__name__)


def parse_date(date_str: str) -> date:
    """Parse a YYYY-MM-DD argument."""
    try:
        return datetime.strptime(date_str, "%Y-%m-%d").date()
    except ValueError as e:
        raise argparse.ArgumentTypeError(
            f"invalid date '{date_str}', expected YYYY-MM-DD"
        ) from e


def setup_logging(verbosity: int) -> None:
    """Configure logging on stderr: WARNING by default, -d INFO, -dd DEBUG."""
    if verbosity >= 2:
        level = logging.DEBUG
    elif verbosity == 1:
        level = logging.INFO
    else:
        level = logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(levelname)s: %(message)s",
        stream=sys.stderr,
        force=True,
    )
    # urllib3 logs every connection at DEBUG
    logging.getLogger("urllib3").setLevel(
        logging.DEBUG if verbosity >= 3 else logging.WARNING
    )


def cmd_import(args: argparse.Namespace) -> int:
    """Import market history for a symbol to the clipboard."""
    print(f"Importing history for {args.name}")
    text = import_history(
        args.name,
        args.from_date,
        args.to_date,
        AvanzaDataSource(),
        TerminalPrompter(),
    )
    copy_to_clipboard(text)
    return 0


def cmd_parse_transactions(args: argparse.Namespace) -> int:
    """Normalize an Avanza transaction export and print it as JSON."""
    records = parse_from_file(args.file)
    logger.info("Parsed %d transactions from %s", len(records), args.file)
    print(json.dumps([r.model_dump(mode="json") for r in records], indent=2))
    return 0


def cmd_scraper_configuration(args: argparse.Namespace) -> int:
    """Copy the scraper configuration of a symbol to the clipboard."""
    symbol = resolve_symbol(args.name, AvanzaDataSource(), TerminalPrompter())
    copy_to_clipboard(scraper_configuration_json(symbol))
    return 0


def cmd_weights(args: argparse.Namespace) -> int:
    """Copy the sector or country weights of a fund to the clipboard."""
    source = AvanzaDataSource()
    symbol = resolve_symbol(args.name, source, TerminalPrompter())
    weights = get_weights(source, symbol, args.breakdown)
    copy_to_clipboard(weights_json(weights))
    return 0


def cmd_quote(args: argparse.Namespace) -> int:
    """Print the current quote of a stock."""
    source = AvanzaDataSource()
    symbol = resolve_symbol(args.name, source, TerminalPrompter())
    info = get_quote(source, symbol)

    print("=" * 60)
    print(f"QUOTE: {info.name}")
    print("=" * 60)
    print(f"Ticker:    {info.listing.ticker_symbol}")
    print(f"ISIN:      {info.isin or 'N/A'}")
    print(f"Last:      {info.quote.last} {info.listing.currency}")
    return 0


def cmd_list_assets(args: argparse.Namespace) -> int:
    """List the assets tracked by Ghostfolio."""
    prompter = TerminalPrompter()
    config = load_config(args.config)
    client = GhostfolioClient(config, prompter, args.config)
    assets = client.get_assets()

    if not assets:
        print("No assets tracked by Ghostfolio")
        return 0

    print(f"{'Symbol':<20} {'Source':<12} {'Currency':<9} {'Name'}")
    print("-" * 70)
    for asset in assets:
        print(
            f"{asset.symbol:<20} {asset.data_source:<12} "
            f"{asset.currency or '':<9} {asset.name or ''}"
        )
    return 0


def cmd_create_asset(args: argparse.Namespace) -> int:
    """Create a manually tracked Ghostfolio asset for a symbol."""
    prompter = TerminalPrompter()
    config = load_config(args.config)
    client = GhostfolioClient(config, prompter, args.config)
    symbol = resolve_symbol(args.name, AvanzaDataSource(), prompter)
    ticker = create_manual_asset(client, symbol, prompter)
    print(f"Asset {ticker} is tracked by Ghostfolio")
    return 0


def cmd_account_for(args: argparse.Namespace) -> int:
    """Print the Ghostfolio account mapped to a symbol."""
    prompter = TerminalPrompter()
    config = load_config(args.config)
    client = GhostfolioClient(config, prompter, args.config)
    symbol = resolve_symbol(args.name, AvanzaDataSource(), prompter)
    print(client.get_account_mapping(symbol.display))
    return 0


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser with all subcommands."""
    parser = argparse.ArgumentParser(
        prog="avanza-ghostfolio",
        description="Move market data from Avanza into Ghostfolio",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "-d",
        "--debug",
        action="count",
        default=0,
        help="Turn debugging information on (repeat for more)",
    )
    parser.add_argument(
        "--config", default=None, help="Path to the JSON config file"
    )
    parser.add_argument("--version", action="version", version=__version__)
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Import command
    import_parser = subparsers.add_parser(
        "import", help="Import market history for a symbol"
    )
    import_parser.add_argument("name", help="Instrument name to search for")
    import_parser.add_argument(
        "-f",
        "--from",
        dest="from_date",
        type=parse_date,
        default=None,
        help="From, format: YYYY-MM-DD. Defaults to 1 year ago",
    )
    import_parser.add_argument(
        "-t",
        "--to",
        dest="to_date",
        type=parse_date,
        default=None,
        help="To, format: YYYY-MM-DD. Defaults to today",
    )
    import_parser.set_defaults(handler=cmd_import)

    # Parse transactions command
    transactions_parser = subparsers.add_parser(
        "parse-transactions",
        help="Parse transactions from an Avanza CSV export for Ghostfolio",
    )
    transactions_parser.add_argument(
        "-f", "--file", required=True, help="Path to the CSV export"
    )
    transactions_parser.set_defaults(handler=cmd_parse_transactions)

    # Scraper configuration command
    scraper_parser = subparsers.add_parser(
        "get-scraper-configuration",
        help="Get the Ghostfolio scraper configuration for a symbol",
    )
    scraper_parser.add_argument("name", help="Instrument name to search for")
    scraper_parser.set_defaults(handler=cmd_scraper_configuration)

    # Weight commands
    sectors_parser = subparsers.add_parser(
        "get-sectors",
        help='Get sectors in format [{"name": "Technology", "weight": 0.5}, ...]',
    )
    sectors_parser.add_argument("name", help="Fund name to search for")
    sectors_parser.set_defaults(handler=cmd_weights, breakdown="sectors")

    countries_parser = subparsers.add_parser(
        "get-countries",
        help='Get countries in format [{"name": "Sweden", "weight": 0.5}, ...]',
    )
    countries_parser.add_argument("name", help="Fund name to search for")
    countries_parser.set_defaults(handler=cmd_weights, breakdown="countries")

    # Quote command
    quote_parser = subparsers.add_parser("quote", help="Show the quote of a stock")
    quote_parser.add_argument("name", help="Stock name to search for")
    quote_parser.set_defaults(handler=cmd_quote)

    # Ghostfolio commands
    list_parser = subparsers.add_parser(
        "list-assets", help="List assets tracked by Ghostfolio"
    )
    list_parser.set_defaults(handler=cmd_list_assets)

    create_parser = subparsers.add_parser(
        "create-asset", help="Create a MANUAL Ghostfolio asset for a symbol"
    )
    create_parser.add_argument("name", help="Instrument name to search for")
    create_parser.set_defaults(handler=cmd_create_asset)

    account_parser = subparsers.add_parser(
        "account-for", help="Show the Ghostfolio account mapped to a symbol"
    )
    account_parser.add_argument("name", help="Instrument name to search for")
    account_parser.set_defaults(handler=cmd_account_for)

    return parser


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)
    setup_logging(args.debug)

    if args.command is None:
        parser.print_help()
        return 0

    try:
        return args.handler(args)
    except AvanzaGhostfolioError as e:
        logger.debug("Command %s failed", args.command, exc_info=True)
        print(f"Error: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
