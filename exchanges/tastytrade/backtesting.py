from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from typing import List, Optional

from .decoding import to_json
from .models import DataResponse, ListResponse
from .resource import Resource, segment


@dataclass(frozen=True)
class BacktestLeg:
    instrument_type: str = ""
    symbol: str = ""
    action: str = ""
    quantity: float = 0.0


@dataclass(frozen=True)
class PriceRange:
    min: Optional[float] = None
    max: Optional[float] = None


@dataclass(frozen=True)
class DaysRange:
    min: Optional[int] = None
    max: Optional[int] = None


@dataclass(frozen=True)
class BacktestEntryConditions:
    underlying_price: Optional[PriceRange] = None
    days_to_expiration: Optional[DaysRange] = None
    implied_volatility: Optional[PriceRange] = None


@dataclass(frozen=True)
class BacktestExitConditions:
    days_to_expiration: Optional[int] = None
    profit_target: Optional[float] = None
    stop_loss: Optional[float] = None
    time_based: Optional[bool] = None


@dataclass(frozen=True)
class BacktestRequest:
    symbol: str = ""
    start_date: str = ""
    end_date: str = ""
    legs: List[BacktestLeg] = field(default_factory=list)
    entry_conditions: Optional[BacktestEntryConditions] = None
    exit_conditions: Optional[BacktestExitConditions] = None


@dataclass(frozen=True)
class BacktestResult:
    id: str = ""
    symbol: str = ""
    start_date: str = ""
    end_date: str = ""
    total_trades: int = 0
    winning_trades: int = 0
    losing_trades: int = 0
    total_profit_loss: Optional[Decimal] = None
    average_profit_loss: Optional[Decimal] = field(default=None, metadata={"json": "avg-profit-loss"})
    max_profit: Optional[Decimal] = None
    max_loss: Optional[Decimal] = None
    win_rate: Optional[float] = None
    created_at: str = ""
    status: str = ""

    @property
    def is_finished(self) -> bool:
        return self.status in ("completed", "failed")


class BacktestingAPI(Resource):
    def submit(self, request: BacktestRequest) -> DataResponse[BacktestResult]:
        return self._client.post_data("/backtesting", to_json(request), BacktestResult)

    def get(self, backtest_id: str) -> DataResponse[BacktestResult]:
        return self._client.get_data(f"/backtesting/{segment(backtest_id)}", BacktestResult)

    def list(self) -> ListResponse[BacktestResult]:
        return self._client.get_items("/backtesting", BacktestResult)
