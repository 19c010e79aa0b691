"""
Option chain + quote export.

Flow: detailed chain -> expiration filter -> quotes in batches -> rows
grouped by expiration (sorted by strike, then option type) -> CSV, either
one combined file or one file per expiration.
"""

from __future__ import annotations

import csv
import logging
import time
from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from pathlib import Path
from typing import Any, Callable, Dict, Iterable, Iterator, List, Optional, Sequence

from .errors import TastytradeError
from .instruments import OptionChainEntry
from .market_data import Quote, QuoteQuery

logger = logging.getLogger(__name__)

MAX_BATCH_SIZE = 100
DEFAULT_DELAY_MS = 500
CHAIN_API_VERSION = "20250715"

HEADER = [
    "Symbol", "StreamerSymbol", "ExpirationDate", "ExpiresAt", "StrikePrice", "OptionType",
    "RootSymbol", "UnderlyingSymbol", "DaysToExpiration",
    "Active", "IsClosingOnly", "StopsTradingAt",
    "Bid", "BidSize", "Ask", "AskSize", "Mid", "Mark", "Last", "LastMkt",
    "Open", "Close", "PrevClose",
    "DayHighPrice", "DayLowPrice", "YearHighPrice", "YearLowPrice",
    "OpenInterest", "Volume",
    "UpdatedAt", "SummaryDate", "PrevCloseDate", "IsTradingHalted",
    "HaltStartTime", "HaltEndTime",
    "Delta", "Gamma", "Theta", "Vega", "Rho", "ImpliedVolatility", "TheoPrice", "DxMark", "TickSize",
]


def parse_date(value: str) -> date:
    return datetime.strptime(value, "%Y-%m-%d").date()


@dataclass(frozen=True)
class DateRange:
    start: Optional[date] = None
    end: Optional[date] = None

    def __post_init__(self) -> None:
        if self.start and self.end and self.start > self.end:
            raise ValueError("start-date must be before or equal to end-date")

    @classmethod
    def parse(cls, start: str = "", end: str = "") -> "DateRange":
        return cls(parse_date(start) if start else None, parse_date(end) if end else None)

    @property
    def is_open(self) -> bool:
        return self.start is None and self.end is None

    def describe(self) -> str:
        if self.start and self.end:
            return f"{self.start:%Y-%m-%d} to {self.end:%Y-%m-%d}"
        if self.start:
            return f"from {self.start:%Y-%m-%d}"
        if self.end:
            return f"until {self.end:%Y-%m-%d}"
        return "all dates"

    def contains(self, value: date) -> bool:
        if self.start and value < self.start:
            return False
        if self.end and value > self.end:
            return False
        return True


def filter_by_expiration(entries: Iterable[OptionChainEntry], window: DateRange) -> List[OptionChainEntry]:
    """Keep entries expiring inside the window. With a window set, unparseable dates are dropped."""
    if window.is_open:
        return list(entries)
    out = []
    for e in entries:
        try:
            exp = parse_date(e.expiration_date)
        except ValueError:
            continue
        if window.contains(exp):
            out.append(e)
    return out


def clamp_batch_size(size: int) -> int:
    if size < 1:
        raise ValueError("batch size must be at least 1")
    if size > MAX_BATCH_SIZE:
        logger.warning("batch size capped at %d (server limit), requested %d", MAX_BATCH_SIZE, size)
        return MAX_BATCH_SIZE
    return size


def batched(items: Sequence[str], size: int) -> Iterator[Sequence[str]]:
    for i in range(0, len(items), size):
        yield items[i : i + size]


def fetch_option_quotes(
    market_data: Any,
    symbols: Sequence[str],
    batch_size: int = MAX_BATCH_SIZE,
    delay_ms: int = DEFAULT_DELAY_MS,
    sleep: Callable[[float], None] = time.sleep,
) -> Dict[str, Quote]:
    """
    Equity-option quotes keyed by symbol, one request per batch.

    A failed batch is logged and skipped; the remaining batches still run.
    The delay applies between batches, never after the last one.
    """
    batch_size = clamp_batch_size(batch_size)
    batches = list(batched(list(symbols), batch_size))
    quotes: Dict[str, Quote] = {}
    for n, batch in enumerate(batches):
        first = n * batch_size
        try:
            resp = market_data.get_quotes(QuoteQuery(equity_options=list(batch)))
        except TastytradeError as e:
            logger.warning("quotes for batch %d-%d failed: %s", first, first + len(batch), e)
        else:
            for q in resp.items:
                quotes[q.symbol] = q
            logger.info("fetched quotes for %d/%d options", first + len(batch), len(symbols))
        if n + 1 < len(batches):
            sleep(delay_ms / 1000.0)
    return quotes


@dataclass(frozen=True)
class ChainRow:
    entry: OptionChainEntry
    quote: Quote = field(default_factory=Quote)

    @property
    def sort_key(self) -> tuple:
        return (self.entry.strike_price, self.entry.option_type)

    def to_record(self) -> List[str]:
        e, q = self.entry, self.quote
        return [
            e.symbol,
            e.streamer_symbol,
            e.expiration_date,
            e.expires_at,
            _num(e.strike_price, 2),
            e.option_type,
            e.root_symbol,
            e.underlying_symbol,
            str(e.days_to_expiration),
            _flag(e.active),
            _flag(e.is_closing_only),
            e.stops_trading_at,
            _num(q.bid, 2),
            _num(q.bid_size, 0),
            _num(q.ask, 2),
            _num(q.ask_size, 0),
            _num(q.mid, 2),
            _num(q.mark, 2),
            _num(q.last, 2),
            _num(q.last_mkt, 2),
            _num(q.open, 2),
            _num(q.close, 2),
            _num(q.prev_close, 2),
            _num(q.day_high_price, 2),
            _num(q.day_low_price, 2),
            _num(q.year_high_price, 2),
            _num(q.year_low_price, 2),
            _num(q.open_interest, 0),
            _num(q.volume, 0),
            q.updated_at,
            q.summary_date,
            q.prev_close_date,
            _flag(q.is_trading_halted),
            str(q.halt_start_time),
            str(q.halt_end_time),
            _num(q.delta, 6),
            _num(q.gamma, 6),
            _num(q.theta, 6),
            _num(q.vega, 6),
            _num(q.rho, 6),
            _num(q.volatility, 6),
            _num(q.theo_price, 2),
            _num(q.dx_mark, 2),
            _num(q.tick_size, 2),
        ]


def _num(value: Optional[Decimal], places: int) -> str:
    # zero and missing both render as an empty cell
    if not value:
        return ""
    return f"{value:.{places}f}"


def _flag(value: bool) -> str:
    return "1" if value else "0"


def group_rows(entries: Iterable[OptionChainEntry], quotes: Dict[str, Quote]) -> Dict[str, List[ChainRow]]:
    """Rows by expiration date, expirations ascending. Entries without a strike are skipped."""
    groups: Dict[str, List[ChainRow]] = {}
    for e in entries:
        if e.strike_price is None:
            continue
        groups.setdefault(e.expiration_date, []).append(ChainRow(e, quotes.get(e.symbol, Quote())))
    return {exp: sorted(groups[exp], key=lambda r: r.sort_key) for exp in sorted(groups)}


def write_csv(path: Path, rows: Iterable[ChainRow]) -> int:
    n = 0
    with path.open("w", encoding="utf-8", newline="") as f:
        w = csv.writer(f)
        w.writerow(HEADER)
        for row in rows:
            w.writerow(row.to_record())
            n += 1
    return n


def write_dump(
    groups: Dict[str, List[ChainRow]],
    symbol: str,
    out_dir: Path,
    per_day: bool = False,
    today: Optional[date] = None,
) -> List[Path]:
    """
    Per day: `<symbol>_options_<expiration>.csv` for each expiration.
    Combined: `<symbol>_options_all_expirations_<today>.csv`.
    """
    prefix = symbol.lower()
    out_dir.mkdir(parents=True, exist_ok=True)
    if per_day:
        written = []
        for exp, rows in groups.items():
            path = out_dir / f"{prefix}_options_{exp}.csv"
            n = write_csv(path, rows)
            logger.info("wrote %s (%d rows)", path, n)
            written.append(path)
        return written

    today = today or date.today()
    path = out_dir / f"{prefix}_options_all_expirations_{today:%Y-%m-%d}.csv"
    n = write_csv(path, (row for rows in groups.values() for row in rows))
    logger.info("wrote %s (%d rows)", path, n)
    return [path]
