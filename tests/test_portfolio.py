from __future__ import annotations

from decimal import Decimal

from exchanges.tastytrade.accounts import Position
from exchanges.tastytrade.market_data import Quote
from exchanges.tastytrade.portfolio import net_greeks


def fo(symbol: str, qty: str, direction: str, mult: int = 50) -> Position:
    return Position(
        symbol=symbol,
        instrument_type="Future Option",
        quantity=Decimal(qty),
        quantity_direction=direction,
        multiplier=Decimal(mult),
    )


def test_net_greeks_signs_short_positions() -> None:
    positions = [
        fo("./ESZ4 EW4Z4 241220C6000", "2", "Short"),
        fo("./ESZ4 EW4Z4 241220P5500", "1", "Long"),
        Position(symbol="AAPL", instrument_type="Equity", quantity=Decimal(100), multiplier=Decimal(1)),
    ]
    quotes = [
        Quote(symbol="./ESZ4 EW4Z4 241220C6000", delta=Decimal("0.30"), theta=Decimal("-1.5")),
        Quote(symbol="./ESZ4 EW4Z4 241220P5500", delta=Decimal("-0.20"), theta=Decimal("-0.8")),
        Quote(symbol="AAPL", delta=Decimal("1")),
    ]

    summary = net_greeks(positions, quotes)

    assert len(summary.rows) == 2
    # short call: 0.30 * 2 * 50 * -1 = -30; long put: -0.20 * 1 * 50 = -10
    assert summary.net_delta == Decimal("-40")
    # short call: -1.5 * 2 * 50 * -1 = 150; long put: -0.8 * 50 = -40
    assert summary.net_theta == Decimal("110")
    assert summary.missing_quotes == []


def test_position_without_quote_contributes_nothing() -> None:
    positions = [fo("./CLZ4 LOZ4 241115C80", "3", "Long", 1000), fo("./ESZ4 EW4Z4 241220C6000", "1", "Long")]
    quotes = [Quote(symbol="./ESZ4 EW4Z4 241220C6000", delta=Decimal("0.5"), theta=Decimal("-2"))]

    summary = net_greeks(positions, quotes)

    assert summary.missing_quotes == ["./CLZ4 LOZ4 241115C80"]
    assert summary.net_delta == Decimal("25")
    assert summary.net_theta == Decimal("-100")


def test_no_quotes_at_all() -> None:
    summary = net_greeks([fo("./ESZ4 EW4Z4 241220C6000", "1", "SHORT")], [])
    assert summary.net_delta == 0
    assert summary.rows[0].sign == -1
    assert not summary.rows[0].has_quote
