from __future__ import annotations

import json
from dataclasses import dataclass, field
from decimal import Decimal
from typing import List, Optional

import pytest

from exchanges.tastytrade import DecodeError, decode_records, from_json, to_json
from exchanges.tastytrade.backtesting import (
    BacktestEntryConditions,
    BacktestLeg,
    BacktestRequest,
    BacktestResult,
    PriceRange,
)
from exchanges.tastytrade.market_data import Dividend


@dataclass(frozen=True)
class Row:
    symbol: str = ""
    strike_price: Optional[Decimal] = None
    days_to_expiration: int = 0
    tags: List[str] = field(default_factory=list)


RECORD = {"symbol": "AAPL", "strike-price": "185.0"}


@pytest.mark.parametrize(
    "payload",
    [
        [RECORD],
        {"data": [RECORD]},
        {"items": [RECORD]},
        {"data": RECORD},
        {"data": {"items": [RECORD]}},
    ],
    ids=["bare-array", "data-array", "items", "data-object", "data-items"],
)
def test_record_shapes_normalize_to_the_same_list(payload) -> None:
    resp = decode_records(json.dumps(payload).encode(), Row)
    assert resp.items == [Row(symbol="AAPL", strike_price=Decimal("185.0"))]


def test_context_is_carried_over() -> None:
    resp = decode_records({"data": [RECORD], "context": "/market-metrics"}, Row)
    assert resp.context == "/market-metrics"
    assert len(resp) == 1


def test_envelope_without_data_or_items_is_empty() -> None:
    assert decode_records({"context": "/x"}, Row).items == []
    assert decode_records({"data": []}, Row).items == []


def test_null_data_is_an_empty_list() -> None:
    resp = decode_records(b'{"data": null, "context": "/x"}', Dividend)
    assert resp.items == []
    assert resp.context == "/x"


def test_not_json_is_a_decode_error() -> None:
    with pytest.raises(DecodeError):
        decode_records(b"<html>", Row)


def test_scalar_payload_is_a_decode_error() -> None:
    with pytest.raises(DecodeError):
        decode_records("42", Row)


def test_wrong_field_type_names_the_field() -> None:
    with pytest.raises(DecodeError, match=r"Row\.days_to_expiration"):
        from_json(Row, {"days-to-expiration": "soon"})


def test_numbers_and_strings_both_become_decimals() -> None:
    assert from_json(Row, {"strike-price": 185}).strike_price == Decimal("185")
    assert from_json(Row, {"strike-price": 0.1}).strike_price == Decimal("0.1")
    assert from_json(Row, {"strike-price": "1,250.5"}).strike_price == Decimal("1250.5")
    assert from_json(Row, {"strike-price": None}).strike_price is None
    assert from_json(Row, {"strike-price": ""}).strike_price is None


def test_null_for_plain_field_keeps_default() -> None:
    assert from_json(Row, {"symbol": None, "tags": None}) == Row()


def test_dividends_as_bare_array() -> None:
    resp = decode_records('[{"occurred-date": "2024-02-09", "amount": 0.24}]', Dividend)
    assert resp.items[0].amount == Decimal("0.24")
    assert resp.items[0].occurred_date == "2024-02-09"


def test_explicit_wire_name() -> None:
    r = from_json(BacktestResult, {"id": "bt-1", "avg-profit-loss": "12.5", "status": "completed"})
    assert r.average_profit_loss == Decimal("12.5")
    assert r.is_finished


def test_to_json_omits_unset_conditions() -> None:
    req = BacktestRequest(
        symbol="SPY",
        start_date="2024-01-01",
        end_date="2024-06-30",
        legs=[BacktestLeg("Equity Option", "SPY", "Sell to Open", 1)],
        entry_conditions=BacktestEntryConditions(underlying_price=PriceRange(min=400.0)),
    )
    assert to_json(req) == {
        "symbol": "SPY",
        "start-date": "2024-01-01",
        "end-date": "2024-06-30",
        "legs": [{"instrument-type": "Equity Option", "symbol": "SPY", "action": "Sell to Open", "quantity": 1}],
        "entry-conditions": {"underlying-price": {"min": 400.0}},
    }
