"""
Command line front end for the dashboard.

    tickerdash show
    tickerdash add MSFT --compare
    tickerdash toggle-compare MSFT-1718000000000
    tickerdash remove MSFT-1718000000000
    tickerdash compare

Each command loads the stored dashboard, applies one operation (which
saves it again) and prints the result.
"""

import argparse
import asyncio
from typing import List, Optional

from .config.loader import load_settings_or_default
from .config.logging_config import get_logger, setup_logging
from .dashboard import DashboardOrchestrator, build_dashboard
from .error_handling import ErrorHandlingContext, create_error_context
from .exceptions import ConfigurationError, ResolverUnavailable, ValidationError
from .widgets.models import TickerWidget

logger = get_logger(__name__)


def _format_value(value) -> str:
    if isinstance(value, float):
        return f"{value:,.2f}"
    return str(value)


def format_ticker(ticker: TickerWidget) -> str:
    data = ticker.data
    marker = "*" if ticker.compare else " "
    return (
        f"{marker} {ticker.id:<28} {data.symbol:>8}  {data.name[:28]:<28} "
        f"price {_format_value(data.price):>10}  "
        f"day {_format_value(data.day_low)}-{_format_value(data.day_high)}  "
        f"52w {_format_value(data.year_low)}-{_format_value(data.year_high)}"
    )


def print_dashboard(dashboard: DashboardOrchestrator) -> None:
    print(f"LAYOUT ({len(dashboard.layout)} entries):")
    for entry in dashboard.layout:
        print(f"  {entry.id:<28} x={entry.x} y={entry.y} w={entry.w} h={entry.h}")
    print(f"TICKERS ({len(dashboard.tickers)}, * = compare):")
    for ticker in dashboard.tickers:
        print(f"  {format_ticker(ticker)}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="tickerdash", description="Quote ticker dashboard")
    parser.add_argument("--config", help="YAML settings file (default: built-in settings)")

    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("show", help="Print layout and ticker widgets")

    add = subparsers.add_parser("add", help="Add a ticker widget")
    add.add_argument("symbol", help="Ticker symbol, e.g. AAPL")
    add.add_argument("--compare", action="store_true", help="Mark the new widget for comparison")

    remove = subparsers.add_parser("remove", help="Remove a ticker widget")
    remove.add_argument("widget_id")

    toggle = subparsers.add_parser("toggle-compare", help="Flip a widget's compare flag")
    toggle.add_argument("widget_id")

    subparsers.add_parser("compare", help="Print the widgets marked for comparison")

    return parser


def run_command(dashboard: DashboardOrchestrator, args: argparse.Namespace) -> int:
    if args.command == "show":
        print_dashboard(dashboard)
        return 0

    if args.command == "add":
        if args.compare:
            widget = asyncio.run(dashboard.add_compare_ticker(args.symbol, open_compare=False))
        else:
            widget = asyncio.run(dashboard.add_ticker(args.symbol))
        print(f"Added {format_ticker(widget)}")
        return 0

    if args.command == "remove":
        if not dashboard.remove_widget(args.widget_id):
            print(f"No widget with id {args.widget_id}")
            return 1
        print(f"Removed {args.widget_id}")
        return 0

    if args.command == "toggle-compare":
        widget = dashboard.toggle_compare(args.widget_id)
        if widget is None:
            print(f"No widget with id {args.widget_id}")
            return 1
        print(f"{'Comparing' if widget.compare else 'Not comparing'} {widget.id}")
        return 0

    if args.command == "compare":
        compare_set = dashboard.compare_set()
        if not compare_set:
            print("No widgets marked for comparison")
        for ticker in compare_set:
            print(format_ticker(ticker))
        return 0

    raise ValueError(f"Unknown command: {args.command}")


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        settings = load_settings_or_default(args.config)
    except (FileNotFoundError, ConfigurationError) as e:
        print(f"❌ {e}")
        return 2

    setup_logging(
        level=settings.logging.level,
        log_to_file=settings.logging.log_to_file,
        log_file_path=settings.logging.log_file_path,
    )

    dashboard = build_dashboard(settings)
    with ErrorHandlingContext(create_error_context(function_name=f"cli_{args.command}"), reraise=False) as ctx:
        try:
            return run_command(dashboard, args)
        except ResolverUnavailable as e:
            # Already reported by the dashboard
            print(f"❌ {e}")
            return 1
        except ValidationError as e:
            print(f"❌ {e}")
            return 2
        finally:
            dashboard.close()

    print(f"❌ {ctx.error_info.user_message}")
    return 1


if __name__ == "__main__":
    raise SystemExit(main())
