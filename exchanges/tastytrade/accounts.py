"""Customer, account, trading-status, balance and position endpoints."""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Optional

from .models import DataResponse, ListResponse
from .resource import Resource, segment


@dataclass(frozen=True)
class Address:
    street_one: str = ""
    city: str = ""
    state_region: str = ""
    postal_code: str = ""
    country: str = ""
    is_foreign: bool = False
    is_domestic: bool = False


@dataclass(frozen=True)
class CustomerSuitability:
    id: int = 0
    marital_status: str = ""
    number_of_dependents: int = 0
    employment_status: str = ""
    occupation: str = ""
    employer_name: str = ""
    job_title: str = ""
    annual_net_income: Optional[Decimal] = None
    net_worth: Optional[Decimal] = None
    liquid_net_worth: Optional[Decimal] = None
    stock_trading_experience: str = ""
    covered_options_trading_experience: str = ""
    uncovered_options_trading_experience: str = ""
    futures_trading_experience: str = ""


@dataclass(frozen=True)
class Person:
    external_id: str = ""
    first_name: str = ""
    last_name: str = ""
    birth_date: str = ""
    citizenship_country: str = ""
    usa_citizenship_type: str = ""
    marital_status: str = ""
    number_of_dependents: int = 0
    employment_status: str = ""
    occupation: str = ""
    employer_name: str = ""
    job_title: str = ""


@dataclass(frozen=True)
class Customer:
    id: str = ""
    first_name: str = ""
    last_name: str = ""
    address: Address = field(default_factory=Address)
    mailing_address: Address = field(default_factory=Address)
    customer_suitability: CustomerSuitability = field(default_factory=CustomerSuitability)
    usa_citizenship_type: str = ""
    is_foreign: bool = False
    mobile_phone_number: str = ""
    email: str = ""
    tax_number_type: str = ""
    tax_number: str = field(default="", repr=False)
    birth_date: str = ""
    external_id: str = ""
    citizenship_country: str = ""
    subject_to_tax_withholding: bool = False
    agreed_to_margining: bool = False
    agreed_to_terms: bool = False
    has_industry_affiliation: bool = False
    has_political_affiliation: bool = False
    has_listed_affiliation: bool = False
    is_professional: bool = False
    has_delayed_quotes: bool = False
    has_pending_or_approved_application: bool = False
    identifiable_type: str = ""
    person: Person = field(default_factory=Person)


@dataclass(frozen=True)
class Account:
    account_number: str = ""
    external_id: str = ""
    opened_at: str = ""
    nickname: str = ""
    account_type_name: str = ""
    day_trader_status: bool = False
    is_closed: bool = False
    is_firm_error: bool = False
    is_firm_proprietary: bool = False
    is_futures_approved: bool = False
    is_test_drive: bool = False
    margin_or_cash: str = ""
    is_foreign: bool = False
    funding_date: str = ""
    investment_objective: str = ""
    futures_account_purpose: str = ""
    suitable_options_level: str = ""
    created_at: str = ""


@dataclass(frozen=True)
class AccountContainer:
    account: Account = field(default_factory=Account)
    authority_level: str = ""


@dataclass(frozen=True)
class TradingStatus:
    account_number: str = ""
    day_trade_count: int = 0
    equities_margin_calculation_type: str = ""
    fee_schedule_name: str = ""
    futures_margin_rate_multiplier: Optional[Decimal] = None
    has_intraday_equities_margin: bool = False
    id: int = 0
    is_aggregated_at_clearing: bool = False
    is_closed: bool = False
    is_closing_only: bool = False
    is_cryptocurrency_closing_only: bool = False
    is_cryptocurrency_enabled: bool = False
    is_frozen: bool = False
    is_full_equity_margin_required: bool = False
    is_futures_closing_only: bool = False
    is_futures_intra_day_enabled: bool = False
    is_futures_enabled: bool = False
    is_in_day_trade_equity_maintenance_call: bool = False
    is_in_margin_call: bool = False
    is_pattern_day_trader: bool = False
    is_risk_reducing_only: bool = False
    is_small_notional_futures_intra_day_enabled: bool = False
    is_roll_the_day_forward_enabled: bool = False
    are_far_otm_net_options_restricted: bool = False
    options_level: str = ""
    short_calls_enabled: bool = False
    small_notional_futures_margin_rate_multiplier: Optional[Decimal] = None
    is_equity_offering_enabled: bool = False
    is_equity_offering_closing_only: bool = False
    enhanced_fraud_safeguards_enabled_at: str = ""
    updated_at: str = ""


@dataclass(frozen=True)
class Balance:
    account_number: str = ""
    cash_balance: Optional[Decimal] = None
    long_equity_value: Optional[Decimal] = None
    short_equity_value: Optional[Decimal] = None
    long_derivative_value: Optional[Decimal] = None
    short_derivative_value: Optional[Decimal] = None
    long_futures_value: Optional[Decimal] = None
    short_futures_value: Optional[Decimal] = None
    long_futures_derivative_value: Optional[Decimal] = None
    short_futures_derivative_value: Optional[Decimal] = None
    long_margineable_value: Optional[Decimal] = None
    short_margineable_value: Optional[Decimal] = None
    margin_equity: Optional[Decimal] = None
    equity_buying_power: Optional[Decimal] = None
    derivative_buying_power: Optional[Decimal] = None
    day_trading_buying_power: Optional[Decimal] = None
    futures_margin_requirement: Optional[Decimal] = None
    available_trading_funds: Optional[Decimal] = None
    maintenance_requirement: Optional[Decimal] = None
    maintenance_call_value: Optional[Decimal] = None
    reg_t_call_value: Optional[Decimal] = None
    day_trading_call_value: Optional[Decimal] = None
    day_equity_call_value: Optional[Decimal] = None
    net_liquidating_value: Optional[Decimal] = None
    cash_available_to_withdraw: Optional[Decimal] = None
    day_trade_excess: Optional[Decimal] = None
    pending_cash: Optional[Decimal] = None
    pending_cash_effect: str = ""
    long_cryptocurrency_value: Optional[Decimal] = None
    short_cryptocurrency_value: Optional[Decimal] = None
    cryptocurrency_margin_requirement: Optional[Decimal] = None
    unsettled_cryptocurrency_fiat_amount: Optional[Decimal] = None
    unsettled_cryptocurrency_fiat_effect: str = ""
    closed_loop_available_balance: Optional[Decimal] = None
    equity_offering_margin_requirement: Optional[Decimal] = None
    long_bond_value: Optional[Decimal] = None
    bond_margin_requirement: Optional[Decimal] = None
    used_derivative_buying_power: Optional[Decimal] = None
    snapshot_date: str = ""
    reg_t_margin_requirement: Optional[Decimal] = None
    futures_overnight_margin_requirement: Optional[Decimal] = None
    futures_intraday_margin_requirement: Optional[Decimal] = None
    maintenance_excess: Optional[Decimal] = None
    pending_margin_interest: Optional[Decimal] = None
    effective_cryptocurrency_buying_power: Optional[Decimal] = None
    updated_at: str = ""


@dataclass(frozen=True)
class BalanceSnapshot:
    account_number: str = ""
    cash_balance: Optional[Decimal] = None
    long_equity_value: Optional[Decimal] = None
    short_equity_value: Optional[Decimal] = None
    long_derivative_value: Optional[Decimal] = None
    short_derivative_value: Optional[Decimal] = None
    long_futures_value: Optional[Decimal] = None
    short_futures_value: Optional[Decimal] = None
    long_margineable_value: Optional[Decimal] = None
    short_margineable_value: Optional[Decimal] = None
    margin_equity: Optional[Decimal] = None
    equity_buying_power: Optional[Decimal] = None
    derivative_buying_power: Optional[Decimal] = None
    day_trading_buying_power: Optional[Decimal] = None
    futures_margin_requirement: Optional[Decimal] = None
    available_trading_funds: Optional[Decimal] = None
    maintenance_requirement: Optional[Decimal] = None
    maintenance_call_value: Optional[Decimal] = None
    reg_t_call_value: Optional[Decimal] = None
    day_trading_call_value: Optional[Decimal] = None
    day_equity_call_value: Optional[Decimal] = None
    net_liquidating_value: Optional[Decimal] = None
    day_trade_excess: Optional[Decimal] = None
    pending_cash: Optional[Decimal] = None
    pending_cash_effect: str = ""
    snapshot_date: str = ""
    time_of_day: str = ""


@dataclass(frozen=True)
class Position:
    account_number: str = ""
    symbol: str = ""
    instrument_type: str = ""
    underlying_symbol: str = ""
    quantity: Optional[Decimal] = None
    quantity_direction: str = ""
    close_price: Optional[Decimal] = None
    average_open_price: Optional[Decimal] = None
    average_yearly_market_close_price: Optional[Decimal] = None
    average_daily_market_close_price: Optional[Decimal] = None
    multiplier: Optional[Decimal] = None
    cost_effect: str = ""
    is_suppressed: bool = False
    is_frozen: bool = False
    restricted_quantity: Optional[Decimal] = None
    realized_day_gain: Optional[Decimal] = None
    realized_day_gain_effect: str = ""
    realized_day_gain_date: str = ""
    realized_today: Optional[Decimal] = None
    realized_today_effect: str = ""
    realized_today_date: str = ""
    created_at: str = ""
    updated_at: str = ""

    @property
    def is_short(self) -> bool:
        return self.quantity_direction.strip().lower() == "short"


class AccountsAPI(Resource):
    def get_customer(self) -> DataResponse[Customer]:
        return self._client.get_data("/customers/me", Customer)

    def list_accounts(self) -> ListResponse[AccountContainer]:
        return self._client.get_items("/customers/me/accounts", AccountContainer)

    def get_account(self, account_number: str) -> DataResponse[Account]:
        return self._client.get_data(f"/customers/me/accounts/{segment(account_number)}", Account)

    def find_account(self, account_number: str) -> Optional[AccountContainer]:
        """Look the account up in the customer's account list (case and whitespace insensitive)."""
        wanted = account_number.strip().upper()
        for container in self.list_accounts().items:
            if container.account.account_number.upper() == wanted:
                return container
        return None

    def get_trading_status(self, account_number: str) -> DataResponse[TradingStatus]:
        return self._client.get_data(f"/accounts/{segment(account_number)}/trading-status", TradingStatus)

    def get_balances(self, account_number: str) -> DataResponse[Balance]:
        return self._client.get_data(f"/accounts/{segment(account_number)}/balances", Balance)

    def get_balance_snapshots(
        self, account_number: str, snapshot_date: str, time_of_day: str
    ) -> ListResponse[BalanceSnapshot]:
        """time_of_day is `BOD` or `EOD`; snapshot_date is YYYY-MM-DD."""
        return self._client.get_items(
            f"/accounts/{segment(account_number)}/balance-snapshots",
            BalanceSnapshot,
            params={"snapshot-date": snapshot_date, "time-of-day": time_of_day},
        )

    def get_positions(self, account_number: str) -> ListResponse[Position]:
        return self._client.get_items(f"/accounts/{segment(account_number)}/positions", Position)
