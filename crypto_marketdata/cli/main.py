"""
Top-level CLI dispatcher: crypto-marketdata <command> [args...].
"""

from __future__ import annotations

import argparse
import logging
import subprocess
import sys
from pathlib import Path
from typing import List, Optional

from .. import config
from ..errors import MarketDataError
from ..frames import history_to_frame, markets_to_frame
from ..providers.base import MarketQuery
from ..providers.defaults import create_default_registry, create_global_chain, create_markets_chain
from ..transport import HttpTransport
from ..ui import load_global_state, render_global_summary

logger = logging.getLogger(__name__)


def _cmd_prices(args: argparse.Namespace, transport: HttpTransport) -> int:
    gecko = create_default_registry(transport).get("coingecko")
    prices = gecko.get_current_prices(args.ids)
    for coin_id in args.ids:
        if coin_id in prices:
            print(f"{coin_id:<20} {prices[coin_id]:>16,.6f}")
        else:
            print(f"{coin_id:<20} {'n/a':>16}")
    return 0


def _cmd_history(args: argparse.Namespace, transport: HttpTransport) -> int:
    gecko = create_default_registry(transport).get("coingecko")
    df = history_to_frame(gecko.get_historical_prices(args.coin_id, args.days))
    print(df.to_string() if not df.empty else "No data")
    return 0


def _cmd_global(args: argparse.Namespace, transport: HttpTransport) -> int:
    chain = create_global_chain(create_default_registry(transport))
    state = load_global_state(chain)
    print(render_global_summary(state))
    return 1 if state.error else 0


def _cmd_markets(args: argparse.Namespace, transport: HttpTransport) -> int:
    chain = create_markets_chain(create_default_registry(transport))
    query = MarketQuery(
        vs_currency=args.vs_currency,
        per_page=args.per_page,
        page=args.page,
        sparkline=args.sparkline,
    )
    df = markets_to_frame(chain.get_markets(query))
    print(df.to_string(index=False) if not df.empty else "No data")
    return 0


def _main_dashboard(argv: List[str]) -> int:
    app_path = Path(__file__).resolve().parent / "app.py"
    r = subprocess.run([sys.executable, "-m", "streamlit", "run", str(app_path)] + argv, cwd=None)
    return r.returncode


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="crypto-marketdata",
        description="CoinGecko market data with CoinPaprika fallback",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    subparsers = parser.add_subparsers(dest="command", help="command")

    p = subparsers.add_parser("prices", help="Current USD prices for coin ids")
    p.add_argument("ids", nargs="+", help="CoinGecko coin ids, e.g. bitcoin ethereum")

    p = subparsers.add_parser("history", help="Historical USD prices for one coin")
    p.add_argument("coin_id")
    p.add_argument("--days", type=int, default=7)

    subparsers.add_parser("global", help="Global market summary (with fallback)")

    p = subparsers.add_parser("markets", help="Markets list by market cap (with fallback)")
    p.add_argument("--vs-currency", default=config.markets_vs_currency())
    p.add_argument("--per-page", type=int, default=config.markets_per_page())
    p.add_argument("--page", type=int, default=1)
    p.add_argument("--sparkline", action="store_true")

    subparsers.add_parser("dashboard", help="Streamlit dashboard")
    return parser


_COMMANDS = {
    "prices": _cmd_prices,
    "history": _cmd_history,
    "global": _cmd_global,
    "markets": _cmd_markets,
}


def main(argv: Optional[List[str]] = None) -> int:
    if argv is None:
        argv = sys.argv[1:]
    parser = build_parser()
    args, rest = parser.parse_known_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    if not args.command:
        parser.print_help()
        return 0
    if args.command == "dashboard":
        return _main_dashboard(rest)
    if rest:
        parser.error(f"unrecognized arguments: {' '.join(rest)}")

    with HttpTransport.from_config() as transport:
        try:
            return _COMMANDS[args.command](args, transport)
        except MarketDataError as exc:
            print(f"error: {exc}", file=sys.stderr)
            return 2


if __name__ == "__main__":
    raise SystemExit(main())
