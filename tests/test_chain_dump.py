from __future__ import annotations

import csv
from datetime import date
from decimal import Decimal
from pathlib import Path

import pytest

from exchanges.tastytrade.chain_dump import (
    HEADER,
    MAX_BATCH_SIZE,
    ChainRow,
    DateRange,
    clamp_batch_size,
    fetch_option_quotes,
    filter_by_expiration,
    group_rows,
    write_dump,
)
from exchanges.tastytrade.errors import ServerError
from exchanges.tastytrade.instruments import OptionChainEntry
from exchanges.tastytrade.market_data import Quote
from exchanges.tastytrade.models import ListResponse


def entry(symbol: str, exp: str, strike: str, kind: str) -> OptionChainEntry:
    return OptionChainEntry(
        symbol=symbol, expiration_date=exp, strike_price=Decimal(strike), option_type=kind, active=True
    )


CHAIN = [
    entry("SPXW  250117P05000000", "2025-01-17", "5000", "P"),
    entry("SPXW  250117C05000000", "2025-01-17", "5000", "C"),
    entry("SPXW  250117C04900000", "2025-01-17", "4900", "C"),
    entry("SPXW  250110C05000000", "2025-01-10", "5000", "C"),
    entry("SPXW  250221C05000000", "2025-02-21", "5000", "C"),
    OptionChainEntry(symbol="BROKEN", expiration_date="n/a", strike_price=Decimal(1)),
]


class FakeMarketData:
    def __init__(self, fail_on: int = -1) -> None:
        self.calls = []
        self.fail_on = fail_on

    def get_quotes(self, query):
        self.calls.append(list(query.equity_options))
        if len(self.calls) - 1 == self.fail_on:
            raise ServerError(503)
        return ListResponse(items=[Quote(symbol=s, bid=Decimal("1.5")) for s in query.equity_options])


def test_date_range_validation() -> None:
    with pytest.raises(ValueError):
        DateRange.parse("2025-02-01", "2025-01-01")
    with pytest.raises(ValueError):
        DateRange.parse("01/02/2025")
    assert DateRange.parse("2025-01-01", "2025-01-01").describe() == "2025-01-01 to 2025-01-01"
    assert DateRange().describe() == "all dates"


def test_filter_by_expiration_is_inclusive() -> None:
    window = DateRange.parse("2025-01-10", "2025-01-17")
    kept = filter_by_expiration(CHAIN, window)
    assert {e.expiration_date for e in kept} == {"2025-01-10", "2025-01-17"}
    assert len(filter_by_expiration(CHAIN, DateRange())) == len(CHAIN)


def test_batch_size_is_capped() -> None:
    assert clamp_batch_size(250) == MAX_BATCH_SIZE
    assert clamp_batch_size(7) == 7
    with pytest.raises(ValueError):
        clamp_batch_size(0)


def test_quotes_fetched_in_batches_with_delay_between() -> None:
    md = FakeMarketData()
    sleeps = []
    symbols = [f"S{i}" for i in range(5)]

    quotes = fetch_option_quotes(md, symbols, batch_size=2, delay_ms=250, sleep=sleeps.append)

    assert md.calls == [["S0", "S1"], ["S2", "S3"], ["S4"]]
    assert sleeps == [0.25, 0.25]
    assert set(quotes) == set(symbols)


def test_failed_batch_is_skipped() -> None:
    md = FakeMarketData(fail_on=1)
    sleeps = []

    quotes = fetch_option_quotes(md, ["A", "B", "C"], batch_size=1, delay_ms=10, sleep=sleeps.append)

    assert set(quotes) == {"A", "C"}
    assert len(sleeps) == 2


def test_rows_grouped_and_sorted() -> None:
    groups = group_rows(filter_by_expiration(CHAIN, DateRange.parse("2025-01-01")), {})
    assert list(groups) == ["2025-01-10", "2025-01-17", "2025-02-21"]
    assert [(r.entry.strike_price, r.entry.option_type) for r in groups["2025-01-17"]] == [
        (Decimal("4900"), "C"),
        (Decimal("5000"), "C"),
        (Decimal("5000"), "P"),
    ]


def test_record_formatting() -> None:
    row = ChainRow(
        entry("SPXW  250117C05000000", "2025-01-17", "5000", "C"),
        Quote(bid=Decimal("12.3"), ask=Decimal("0"), delta=Decimal("0.4512344"), halt_start_time=-1),
    )
    rec = dict(zip(HEADER, row.to_record()))
    assert len(rec) == len(HEADER)
    assert rec["StrikePrice"] == "5000.00"
    assert rec["Bid"] == "12.30"
    assert rec["Ask"] == ""
    assert rec["Delta"] == "0.451234"
    assert rec["Active"] == "1"
    assert rec["IsTradingHalted"] == "0"
    assert rec["HaltStartTime"] == "-1"


def test_write_dump_combined_and_per_day(tmp_path: Path) -> None:
    groups = group_rows(CHAIN[:5], {})

    combined = write_dump(groups, "SPX", tmp_path / "all", today=date(2025, 1, 2))
    assert [p.name for p in combined] == ["spx_options_all_expirations_2025-01-02.csv"]
    with combined[0].open(newline="", encoding="utf-8") as f:
        rows = list(csv.reader(f))
    assert rows[0] == HEADER
    assert len(rows) == 1 + 5

    per_day = write_dump(groups, "SPX", tmp_path / "days", per_day=True)
    assert [p.name for p in per_day] == [
        "spx_options_2025-01-10.csv",
        "spx_options_2025-01-17.csv",
        "spx_options_2025-02-21.csv",
    ]
