from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from dotenv import load_dotenv

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from exchanges.tastytrade import TastytradeClient, TastytradeError, load_config, load_credentials  # noqa: E402
from exchanges.tastytrade.chain_dump import (  # noqa: E402
    CHAIN_API_VERSION,
    DEFAULT_DELAY_MS,
    MAX_BATCH_SIZE,
    DateRange,
    clamp_batch_size,
    fetch_option_quotes,
    filter_by_expiration,
    group_rows,
    write_dump,
)
from exchanges.tastytrade.config import setup_logging  # noqa: E402


def main() -> int:
    parser = argparse.ArgumentParser(description="Dump an option chain with quotes and greeks to CSV.")
    parser.add_argument("--symbol", default="SPX", help="Underlying symbol (SPX, AAPL, ...)")
    parser.add_argument("--batch-size", type=int, default=MAX_BATCH_SIZE, help="Symbols per quote request (max 100)")
    parser.add_argument("--delay-ms", type=int, default=DEFAULT_DELAY_MS, help="Pause between quote requests")
    parser.add_argument("--start-date", default="", help="First expiration to keep, YYYY-MM-DD (inclusive)")
    parser.add_argument("--end-date", default="", help="Last expiration to keep, YYYY-MM-DD (inclusive)")
    parser.add_argument("--per-day", action="store_true", help="One CSV per expiration instead of a combined file")
    parser.add_argument("--out-dir", default=".", help="Directory for the CSV files")
    parser.add_argument("--config", default=None, help="Optional path to YAML config")
    args = parser.parse_args()

    load_dotenv()

    cfg = load_config(args.config)
    setup_logging(cfg.log_level)
    log = logging.getLogger("tastytrade.chain_dump")

    try:
        batch_size = clamp_batch_size(args.batch_size)
        window = DateRange.parse(args.start_date, args.end_date)
    except ValueError as e:
        log.error("%s", e)
        return 2
    if args.delay_ms < 0:
        log.error("delay-ms must be >= 0")
        return 2

    symbol = args.symbol.strip().upper()
    if not symbol:
        log.error("symbol cannot be empty")
        return 2

    try:
        creds = load_credentials(cfg)
    except RuntimeError as e:
        log.error("%s", e)
        return 2

    with TastytradeClient.from_config(cfg) as client:
        client.set_api_version(cfg.api_version or CHAIN_API_VERSION)
        try:
            client.authenticate_with(creds)
            log.info("authenticated")
            log.info("fetching %s option chain, date filter: %s", symbol, window.describe())
            chain = client.instruments.get_option_chain(symbol).items
        except TastytradeError as e:
            log.error("%s", e)
            return 1

        entries = filter_by_expiration(chain, window)
        log.info("found %d option contracts, %d within date range", len(chain), len(entries))

        quotes = fetch_option_quotes(
            client.market_data,
            [e.symbol for e in entries],
            batch_size=batch_size,
            delay_ms=args.delay_ms,
        )
        log.info("fetched quotes for %d options", len(quotes))

    groups = group_rows(entries, quotes)
    paths = write_dump(groups, symbol, Path(args.out_dir), per_day=args.per_day)
    print(f"Market data dump complete, {len(paths)} file(s):")
    for p in paths:
        print(f"  {p}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
