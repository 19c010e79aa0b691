from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List

from dotenv import load_dotenv

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from exchanges.tastytrade import TastytradeClient, TastytradeError, load_config, load_credentials  # noqa: E402
from exchanges.tastytrade.config import setup_logging  # noqa: E402
from exchanges.tastytrade.market_data import Quote, QuoteQuery  # noqa: E402
from exchanges.tastytrade.portfolio import GreeksSummary, future_option_positions, net_greeks  # noqa: E402


def render(summary: GreeksSummary) -> str:
    lines = [
        f"Futures Options Positions ({len(summary.rows)}):",
        "-" * 140,
        f"{'Symbol':<20} {'Underlying':<15} {'Quantity':<10} {'Direction':<10} {'Mult':<8} "
        f"{'Pos Delta':<12} {'Pos Theta':<12} {'Avg Open':<12} {'Close Price':<12} {'Realized Today':<15}",
        "-" * 140,
    ]
    for r in summary.rows:
        p = r.position
        if not r.delta and not r.theta:
            pos_delta = pos_theta = "N/A"
        else:
            pos_delta = f"{r.position_delta:.2f}"
            pos_theta = f"{r.position_theta:.2f}"
        lines.append(
            f"{p.symbol:<20} {p.underlying_symbol:<15} {r.quantity:<10.0f} {p.quantity_direction:<10} "
            f"{r.multiplier:<8.0f} {pos_delta:<12} {pos_theta:<12} {_cell(p.average_open_price):<12} "
            f"{_cell(p.close_price):<12} {_cell(p.realized_today):<15}"
        )
    lines += [
        "-" * 140,
        "",
        "Net Greeks Summary:",
        "-" * 50,
        f"Net Delta: {summary.net_delta:12.4f}",
        f"Net Theta: {summary.net_theta:12.4f}",
        "-" * 50,
    ]
    return "\n".join(lines)


def _cell(value: object) -> str:
    return "" if value is None else str(value)


def main() -> int:
    parser = argparse.ArgumentParser(description="Show futures-option positions with net delta and theta.")
    parser.add_argument("--account", required=True, help="Account number (e.g. 5WT00001)")
    parser.add_argument("--config", default=None, help="Optional path to YAML config")
    args = parser.parse_args()

    load_dotenv()

    cfg = load_config(args.config)
    setup_logging(cfg.log_level)
    log = logging.getLogger("tastytrade.positions")

    account_number = args.account.strip().upper()
    if not account_number:
        log.error("account number cannot be empty")
        return 2

    try:
        creds = load_credentials(cfg)
    except RuntimeError as e:
        log.error("%s", e)
        return 2

    with TastytradeClient.from_config(cfg) as client:
        try:
            client.authenticate_with(creds)
            log.info("authenticated")

            account = client.accounts.find_account(account_number)
            if account is None:
                log.error("account %s not found in your account list", account_number)
                return 1
            log.info("found account %s (%s)", account.account.account_number, account.account.nickname)

            positions = client.accounts.get_positions(account_number).items
            log.info("found %d total positions", len(positions))
        except TastytradeError as e:
            log.error("%s", e)
            return 1

        fo_positions = future_option_positions(positions)
        if not fo_positions:
            print("No futures options positions found.")
            return 0

        quotes: List[Quote] = []
        try:
            quotes = client.market_data.get_quotes(
                QuoteQuery(future_options=[p.symbol for p in fo_positions])
            ).items
        except TastytradeError as e:
            log.warning("failed to fetch quotes: %s; continuing without greeks", e)

    summary = net_greeks(fo_positions, quotes)
    if summary.missing_quotes:
        log.warning("no quote for %s", ", ".join(summary.missing_quotes))
    print(render(summary))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
