from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Dict, Iterable, List, Optional

from .models import ListResponse
from .resource import Resource, segment


@dataclass(frozen=True)
class Quote:
    """
    Snapshot quote for one symbol. Which fields are filled depends on the
    instrument type; option quotes also carry greeks and a theoretical price.
    """

    symbol: str = ""
    instrument_type: str = ""
    updated_at: str = ""
    bid: Optional[Decimal] = None
    bid_size: Optional[Decimal] = None
    ask: Optional[Decimal] = None
    ask_size: Optional[Decimal] = None
    mid: Optional[Decimal] = None
    mark: Optional[Decimal] = None
    last: Optional[Decimal] = None
    last_mkt: Optional[Decimal] = None
    beta: Optional[Decimal] = None
    dividend_amount: Optional[Decimal] = None
    dividend_frequency: Optional[Decimal] = None
    open: Optional[Decimal] = None
    day_high_price: Optional[Decimal] = None
    day_low_price: Optional[Decimal] = None
    close: Optional[Decimal] = None
    close_price_type: str = ""
    prev_close: Optional[Decimal] = None
    prev_close_price_type: str = ""
    summary_date: str = ""
    prev_close_date: str = ""
    low_limit_price: Optional[Decimal] = None
    high_limit_price: Optional[Decimal] = None
    is_trading_halted: bool = False
    halt_start_time: int = 0
    halt_end_time: int = 0
    year_low_price: Optional[Decimal] = None
    year_high_price: Optional[Decimal] = None
    volume: Optional[Decimal] = None
    open_interest: Optional[Decimal] = None
    delta: Optional[Decimal] = None
    gamma: Optional[Decimal] = None
    theta: Optional[Decimal] = None
    vega: Optional[Decimal] = None
    rho: Optional[Decimal] = None
    volatility: Optional[Decimal] = None
    theo_price: Optional[Decimal] = None
    dx_mark: Optional[Decimal] = None
    tick_size: Optional[Decimal] = None


@dataclass(frozen=True)
class QuoteQuery:
    """Symbols grouped by instrument type; each group goes out as one comma-joined parameter."""

    cryptocurrencies: List[str] = field(default_factory=list)
    equities: List[str] = field(default_factory=list)
    equity_options: List[str] = field(default_factory=list)
    indices: List[str] = field(default_factory=list)
    futures: List[str] = field(default_factory=list)
    future_options: List[str] = field(default_factory=list)

    def to_params(self) -> Dict[str, str]:
        return {
            "cryptocurrency": ",".join(self.cryptocurrencies),
            "equity": ",".join(self.equities),
            "equity-option": ",".join(self.equity_options),
            "index": ",".join(self.indices),
            "future": ",".join(self.futures),
            "future-option": ",".join(self.future_options),
        }

    def __len__(self) -> int:
        return sum(
            len(group)
            for group in (
                self.cryptocurrencies,
                self.equities,
                self.equity_options,
                self.indices,
                self.futures,
                self.future_options,
            )
        )


@dataclass(frozen=True)
class ExpirationImpliedVolatility:
    expiration_date: str = ""
    settlement_type: str = ""
    option_chain_type: str = ""
    implied_volatility: Optional[float] = None


@dataclass(frozen=True)
class MarketMetric:
    symbol: str = ""
    implied_volatility_index: Optional[float] = None
    implied_volatility_index_5_day_change: Optional[float] = None
    implied_volatility_rank: Optional[float] = None
    implied_volatility_percentile: Optional[float] = None
    liquidity: Optional[float] = None
    liquidity_rank: Optional[float] = None
    liquidity_rating: int = 0
    option_expiration_implied_volatilities: List[ExpirationImpliedVolatility] = field(default_factory=list)


@dataclass(frozen=True)
class Dividend:
    occurred_date: str = ""
    amount: Optional[Decimal] = None


@dataclass(frozen=True)
class Earnings:
    occurred_date: str = ""
    eps: Optional[Decimal] = None


class MarketDataAPI(Resource):
    def get_quotes(self, query: QuoteQuery) -> ListResponse[Quote]:
        """GET /market-data/by-type. The server caps one call at 100 symbols in total."""
        return self._client.get_items("/market-data/by-type", Quote, params=query.to_params())

    def get_market_metrics(self, symbols: Iterable[str]) -> ListResponse[MarketMetric]:
        params: Dict[str, Any] = {"symbols": ",".join(symbols)}
        return self._client.get_records("/market-metrics", MarketMetric, params=params)

    def get_dividends(self, symbol: str) -> ListResponse[Dividend]:
        return self._client.get_records(
            f"/market-metrics/historic-corporate-events/dividends/{segment(symbol)}", Dividend
        )

    def get_earnings(self, symbol: str, start_date: str, end_date: Optional[str] = None) -> ListResponse[Earnings]:
        """Dates are YYYY-MM-DD; without end_date the range runs to today."""
        return self._client.get_records(
            f"/market-metrics/historic-corporate-events/earnings-reports/{segment(symbol)}",
            Earnings,
            params={"start-date": start_date, "end-date": end_date},
        )
