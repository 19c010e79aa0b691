"""
Instrument metadata: equities, equity options, option chains, futures,
future options, cryptocurrencies, warrants.

Every call here carries `Accept-Version` when the client has an API version
set; the rest of the API does not.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, List, Optional, Tuple

from .models import DataResponse, ListResponse
from .resource import Resource, segment


@dataclass(frozen=True)
class Tick:
    value: Optional[Decimal] = None
    threshold: Optional[Decimal] = None
    symbol: str = ""


@dataclass(frozen=True)
class Equity:
    id: int = 0
    symbol: str = ""
    instrument_type: str = ""
    cusip: str = ""
    short_description: str = ""
    description: str = ""
    active: bool = False
    borrow_rate: Optional[Decimal] = None
    is_closing_only: bool = False
    is_etf: bool = False
    is_index: bool = False
    is_illiquid: bool = False
    is_fractional_quantity_eligible: bool = False
    is_options_closing_only: bool = False
    lendability: str = ""
    listed_market: str = ""
    market_time_instrument_collection: str = ""
    streamer_symbol: str = ""
    tick_sizes: List[Tick] = field(default_factory=list)
    option_tick_sizes: List[Tick] = field(default_factory=list)


@dataclass(frozen=True)
class EquityOption:
    symbol: str = ""
    instrument_type: str = ""
    active: bool = False
    strike_price: Optional[Decimal] = None
    root_symbol: str = ""
    underlying_symbol: str = ""
    expiration_date: str = ""
    exercise_style: str = ""
    shares_per_contract: int = 0
    option_type: str = ""
    option_chain_type: str = ""
    expiration_type: str = ""
    settlement_type: str = ""
    stops_trading_at: str = ""
    market_time_instrument_collection: str = ""
    days_to_expiration: int = 0
    expires_at: str = ""
    is_closing_only: bool = False
    streamer_symbol: str = ""


@dataclass(frozen=True)
class OptionChainEntry:
    """One contract of a detailed (flat) option chain."""

    symbol: str = ""
    streamer_symbol: str = ""
    instrument_type: str = ""
    root_symbol: str = ""
    underlying_symbol: str = ""
    active: bool = False
    is_closing_only: bool = False
    halted_at: str = ""
    days_to_expiration: int = 0
    expiration_date: str = ""
    expires_at: str = ""
    stops_trading_at: str = ""
    expiration_type: str = ""
    listed_market: str = ""
    strike_price: Optional[Decimal] = None
    old_security_number: str = ""
    option_type: str = ""
    market_time_instrument_collection: str = ""
    shares_per_contract: int = 0
    exercise_style: str = ""
    settlement_type: str = ""
    option_chain_type: str = ""


@dataclass(frozen=True)
class Strike:
    strike_price: Optional[Decimal] = None
    call: str = ""
    call_streamer_symbol: str = ""
    put: str = ""
    put_streamer_symbol: str = ""


@dataclass(frozen=True)
class Expiration:
    expiration_type: str = ""
    expiration_date: str = ""
    days_to_expiration: int = 0
    settlement_type: str = ""
    strikes: List[Strike] = field(default_factory=list)


@dataclass(frozen=True)
class NestedOptionChain:
    underlying_symbol: str = ""
    root_symbol: str = ""
    option_chain_type: str = ""
    shares_per_contract: int = 0
    expirations: List[Expiration] = field(default_factory=list)


@dataclass(frozen=True)
class Deliverable:
    id: int = 0
    root_symbol: str = ""
    deliverable_type: str = ""
    description: str = ""
    amount: Optional[Decimal] = None
    symbol: str = ""
    instrument_type: str = ""
    percent: Optional[Decimal] = None


@dataclass(frozen=True)
class CompactOptionChain:
    underlying_symbol: str = ""
    root_symbol: str = ""
    option_chain_type: str = ""
    settlement_type: str = ""
    shares_per_contract: int = 0
    expiration_type: str = ""
    deliverables: List[Deliverable] = field(default_factory=list)
    symbols: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class FutureETFEquivalent:
    symbol: str = ""
    share_quantity: int = 0


@dataclass(frozen=True)
class Roll:
    name: str = ""
    active_count: int = 0
    cash_settled: bool = False
    business_days_offset: int = 0
    first_notice: bool = False


@dataclass(frozen=True)
class FutureProduct:
    root_symbol: str = ""
    code: str = ""
    description: str = ""
    clearing_code: str = ""
    clearing_exchange_code: str = ""
    clearport_code: str = ""
    legacy_code: str = ""
    exchange: str = ""
    legacy_exchange_code: str = ""
    product_type: str = ""
    listed_months: List[str] = field(default_factory=list)
    active_months: List[str] = field(default_factory=list)
    notional_multiplier: Optional[Decimal] = None
    tick_size: Optional[Decimal] = None
    display_factor: Optional[Decimal] = None
    streamer_exchange_code: str = ""
    small_notional: bool = False
    back_month_first_calendar_symbol: bool = False
    first_notice: bool = False
    cash_settled: bool = False
    security_group: str = ""
    market_sector: str = ""
    roll: Roll = field(default_factory=Roll)


@dataclass(frozen=True)
class Future:
    symbol: str = ""
    product_code: str = ""
    contract_size: Optional[Decimal] = None
    tick_size: Optional[Decimal] = None
    notional_multiplier: Optional[Decimal] = None
    main_fraction: Optional[Decimal] = None
    sub_fraction: Optional[Decimal] = None
    display_factor: Optional[Decimal] = None
    last_trade_date: str = ""
    expiration_date: str = ""
    closing_only_date: str = ""
    active: bool = False
    active_month: bool = False
    next_active_month: bool = False
    is_closing_only: bool = False
    stops_trading_at: str = ""
    expires_at: str = ""
    product_group: str = ""
    exchange: str = ""
    roll_target_symbol: str = ""
    streamer_exchange_code: str = ""
    streamer_symbol: str = ""
    back_month_first_calendar_symbol: bool = False
    is_tradeable: bool = False
    future_etf_equivalent: FutureETFEquivalent = field(default_factory=FutureETFEquivalent)
    future_product: FutureProduct = field(default_factory=FutureProduct)
    tick_sizes: List[Tick] = field(default_factory=list)
    option_tick_sizes: List[Tick] = field(default_factory=list)
    spread_tick_sizes: List[Tick] = field(default_factory=list)


@dataclass(frozen=True)
class FutureOptionProduct:
    root_symbol: str = ""
    cash_settled: bool = False
    code: str = ""
    legacy_code: str = ""
    clearport_code: str = ""
    clearing_code: str = ""
    clearing_exchange_code: str = ""
    clearing_price_multiplier: Optional[Decimal] = None
    display_factor: Optional[Decimal] = None
    exchange: str = ""
    product_type: str = ""
    expiration_type: str = ""
    settlement_delay_days: int = 0
    is_rollover: bool = False
    market_sector: str = ""


@dataclass(frozen=True)
class FutureOption:
    symbol: str = ""
    underlying_symbol: str = ""
    product_code: str = ""
    expiration_date: str = ""
    root_symbol: str = ""
    option_root_symbol: str = ""
    strike_price: Optional[Decimal] = None
    exchange: str = ""
    exchange_symbol: str = ""
    streamer_symbol: str = ""
    option_type: str = ""
    exercise_style: str = ""
    is_vanilla: bool = False
    is_primary_deliverable: bool = False
    future_price_ratio: Optional[Decimal] = None
    multiplier: Optional[Decimal] = None
    underlying_count: Optional[Decimal] = None
    is_confirmed: bool = False
    notional_value: Optional[Decimal] = None
    display_factor: Optional[Decimal] = None
    security_exchange: str = ""
    sx_id: str = ""
    settlement_type: str = ""
    strike_factor: Optional[Decimal] = None
    maturity_date: str = ""
    is_exercisable_weekly: bool = False
    last_trade_time: str = ""
    days_to_expiration: int = 0
    is_closing_only: bool = False
    active: bool = False
    stops_trading_at: str = ""
    expires_at: str = ""
    future_option_product: FutureOptionProduct = field(default_factory=FutureOptionProduct)


@dataclass(frozen=True)
class FuturesOptionExpiration:
    underlying_symbol: str = ""
    root_symbol: str = ""
    option_root_symbol: str = ""
    option_contract_symbol: str = ""
    asset: str = ""
    expiration_date: str = ""
    days_to_expiration: int = 0
    expiration_type: str = ""
    settlement_type: str = ""
    notional_value: Optional[Decimal] = None
    display_factor: Optional[Decimal] = None
    strike_factor: Optional[Decimal] = None
    stops_trading_at: str = ""
    expires_at: str = ""
    tick_sizes: List[Tick] = field(default_factory=list)
    strikes: List[Strike] = field(default_factory=list)


@dataclass(frozen=True)
class FuturesOptionChain:
    underlying_symbol: str = ""
    root_symbol: str = ""
    exercise_style: str = ""
    expirations: List[FuturesOptionExpiration] = field(default_factory=list)


@dataclass(frozen=True)
class NestedFuturesOptionChains:
    futures: List[Future] = field(default_factory=list)
    option_chains: List[FuturesOptionChain] = field(default_factory=list)


@dataclass(frozen=True)
class DestinationVenueSymbol:
    id: int = 0
    symbol: str = ""
    destination_venue: str = ""
    max_quantity_precision: int = 0
    max_price_precision: int = 0
    routable: bool = False


@dataclass(frozen=True)
class Cryptocurrency:
    id: int = 0
    symbol: str = ""
    instrument_type: str = ""
    short_description: str = ""
    description: str = ""
    is_closing_only: bool = False
    active: bool = False
    tick_size: Optional[Decimal] = None
    streamer_symbol: str = ""
    destination_venue_symbols: List[DestinationVenueSymbol] = field(default_factory=list)


@dataclass(frozen=True)
class Warrant:
    symbol: str = ""
    instrument_type: str = ""
    listed_market: str = ""
    description: str = ""
    is_closing_only: bool = False
    active: bool = False


@dataclass(frozen=True)
class QuantityDecimalPrecision:
    symbol: str = ""
    instrument_type: str = ""
    value: int = 0
    minimum_increment_precision: int = 0


# ----------------------------------------------------------------------
# query filters
# ----------------------------------------------------------------------

QueryParams = List[Tuple[str, Any]]


@dataclass(frozen=True)
class Paging:
    page_offset: Optional[int] = None
    per_page: Optional[int] = None

    def to_params(self) -> QueryParams:
        return [("page-offset", self.page_offset), ("per-page", self.per_page)]


@dataclass(frozen=True)
class EquityQuery:
    symbols: List[str] = field(default_factory=list)
    lendability: str = ""
    is_index: Optional[bool] = None
    is_etf: Optional[bool] = None

    def to_params(self) -> QueryParams:
        return [
            ("symbol[]", list(self.symbols)),
            ("lendability", self.lendability),
            ("is-index", self.is_index),
            ("is-etf", self.is_etf),
        ]


@dataclass(frozen=True)
class ActiveEquityQuery:
    lendability: str = ""
    per_page: Optional[int] = None
    page_offset: Optional[int] = None

    def to_params(self) -> QueryParams:
        return [
            ("lendability", self.lendability),
            ("per-page", self.per_page),
            ("page-offset", self.page_offset),
        ]


@dataclass(frozen=True)
class EquityOptionQuery:
    symbols: List[str] = field(default_factory=list)
    active: Optional[bool] = None
    with_expired: Optional[bool] = None

    def to_params(self) -> QueryParams:
        return [
            ("symbol[]", list(self.symbols)),
            ("active", self.active),
            ("with-expired", self.with_expired),
        ]


@dataclass(frozen=True)
class FuturesQuery:
    symbols: List[str] = field(default_factory=list)
    product_codes: List[str] = field(default_factory=list)
    security_ids: List[str] = field(default_factory=list)
    exchange: str = ""
    only_active_futures: Optional[bool] = None
    page_offset: Optional[int] = None
    per_page: Optional[int] = None

    def to_params(self) -> QueryParams:
        return [
            ("symbol[]", list(self.symbols)),
            ("product-code[]", list(self.product_codes)),
            ("security-id[]", list(self.security_ids)),
            ("exchange", self.exchange),
            ("only-active-futures", self.only_active_futures),
            ("page-offset", self.page_offset),
            ("per-page", self.per_page),
        ]


@dataclass(frozen=True)
class FutureOptionQuery:
    symbols: List[str] = field(default_factory=list)
    option_root_symbol: str = ""
    expiration_date: str = ""
    option_type: str = ""
    strike_price: Optional[Decimal] = None

    def to_params(self) -> QueryParams:
        strike = None if self.strike_price is None else f"{Decimal(self.strike_price):.2f}"
        return [
            ("symbol[]", list(self.symbols)),
            ("option-root-symbol", self.option_root_symbol),
            ("expiration-date", self.expiration_date),
            ("option-type", self.option_type),
            ("strike-price", strike),
        ]


def _params(query: Any) -> Optional[QueryParams]:
    return query.to_params() if query is not None else None


class InstrumentsAPI(Resource):
    def _get_data(self, path: str, shape: Any, **kw: Any) -> DataResponse:
        return self._client.get_data(path, shape, versioned=True, **kw)

    def _get_items(self, path: str, shape: Any, **kw: Any) -> ListResponse:
        return self._client.get_items(path, shape, versioned=True, **kw)

    def _get_records(self, path: str, shape: Any, **kw: Any) -> ListResponse:
        return self._client.get_records(path, shape, versioned=True, **kw)

    # equities

    def get_equity(self, symbol: str) -> DataResponse[Equity]:
        return self._get_data(f"/instruments/equities/{segment(symbol)}", Equity)

    def list_equities(self, query: Optional[EquityQuery] = None) -> ListResponse[Equity]:
        return self._get_items("/instruments/equities", Equity, params=_params(query))

    def list_active_equities(self, query: Optional[ActiveEquityQuery] = None) -> ListResponse[Equity]:
        return self._get_items("/instruments/equities/active", Equity, params=_params(query))

    # equity options

    def list_equity_options(self, query: Optional[EquityOptionQuery] = None) -> ListResponse[EquityOption]:
        return self._get_items("/instruments/equity-options", EquityOption, params=_params(query))

    def get_equity_option(self, symbol: str, active: Optional[bool] = None) -> DataResponse[EquityOption]:
        """`symbol` is the OCC symbol, spaces included (`AAPL  260116C00005000`)."""
        return self._get_data(
            f"/instruments/equity-options/{segment(symbol)}",
            EquityOption,
            params={"active": active},
        )

    # option chains

    def get_option_chain(self, symbol: str) -> ListResponse[OptionChainEntry]:
        return self._get_items(f"/option-chains/{segment(symbol)}", OptionChainEntry)

    def get_option_chain_nested(self, symbol: str) -> ListResponse[NestedOptionChain]:
        return self._get_items(f"/option-chains/{segment(symbol)}/nested", NestedOptionChain)

    def get_option_chain_compact(self, symbol: str) -> ListResponse[CompactOptionChain]:
        return self._get_items(f"/option-chains/{segment(symbol)}/compact", CompactOptionChain)

    def get_option_chain_by_id(self, symbol_id: int) -> ListResponse[OptionChainEntry]:
        return self._get_items(f"/option-chains/{int(symbol_id)}", OptionChainEntry)

    # futures

    def query_futures(self, query: Optional[FuturesQuery] = None) -> ListResponse[Future]:
        return self._get_items("/instruments/futures", Future, params=_params(query))

    def get_future(self, symbol: str) -> DataResponse[Future]:
        return self._get_data(f"/instruments/futures/{segment(symbol)}", Future)

    def list_future_products(self, paging: Optional[Paging] = None) -> ListResponse[FutureProduct]:
        return self._get_records("/instruments/future-products", FutureProduct, params=_params(paging))

    def get_future_product(self, exchange: str, code: str) -> DataResponse[FutureProduct]:
        return self._get_data(f"/instruments/future-products/{segment(exchange)}/{segment(code)}", FutureProduct)

    # future options

    def list_future_options(self, query: Optional[FutureOptionQuery] = None) -> ListResponse[FutureOption]:
        return self._get_items("/instruments/future-options", FutureOption, params=_params(query))

    def get_future_option(self, symbol: str) -> DataResponse[FutureOption]:
        return self._get_data(f"/instruments/future-options/{segment(symbol)}", FutureOption)

    def list_future_option_products(self, paging: Optional[Paging] = None) -> ListResponse[FutureOptionProduct]:
        return self._get_records("/instruments/future-option-products", FutureOptionProduct, params=_params(paging))

    def get_future_option_product(self, exchange: str, root_symbol: str) -> DataResponse[FutureOptionProduct]:
        return self._get_data(
            f"/instruments/future-option-products/{segment(exchange)}/{segment(root_symbol)}",
            FutureOptionProduct,
        )

    # futures option chains

    def get_futures_option_chain(self, symbol: str) -> ListResponse[FutureOption]:
        return self._get_items(f"/futures-option-chains/{segment(symbol)}", FutureOption)

    def get_futures_option_chain_nested(self, symbol: str) -> DataResponse[NestedFuturesOptionChains]:
        return self._get_data(f"/futures-option-chains/{segment(symbol)}/nested", NestedFuturesOptionChains)

    def get_futures_option_chain_by_id(self, symbol_id: int) -> DataResponse[NestedFuturesOptionChains]:
        return self._get_data(f"/futures-option-chains/{int(symbol_id)}", NestedFuturesOptionChains)

    # cryptocurrencies, warrants

    def list_cryptocurrencies(self, symbols: Optional[List[str]] = None) -> ListResponse[Cryptocurrency]:
        """Answers with either a bare array or a data/items envelope; both are accepted."""
        return self._get_records(
            "/instruments/cryptocurrencies",
            Cryptocurrency,
            params={"symbol[]": list(symbols or [])},
        )

    def get_cryptocurrency(self, symbol: str) -> DataResponse[Cryptocurrency]:
        return self._get_data(f"/instruments/cryptocurrencies/{segment(symbol)}", Cryptocurrency)

    def list_warrants(self, *symbols: str) -> ListResponse[Warrant]:
        params = {"symbols": ",".join(symbols)} if symbols else None
        return self._get_items("/instruments/warrants", Warrant, params=params)

    def get_warrant(self, symbol: str) -> DataResponse[Warrant]:
        return self._get_data(f"/instruments/warrants/{segment(symbol)}", Warrant)

    def get_quantity_decimal_precisions(self) -> ListResponse[QuantityDecimalPrecision]:
        return self._get_records("/instruments/quantity-decimal-precisions", QuantityDecimalPrecision)
