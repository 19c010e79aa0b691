from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from typing import List, Optional, Tuple

from .models import DataResponse, ListResponse
from .resource import Resource, segment


@dataclass(frozen=True)
class Transaction:
    id: int = 0
    account_number: str = ""
    symbol: str = ""
    instrument_type: str = ""
    underlying_symbol: str = ""
    transaction_type: str = ""
    transaction_sub_type: str = ""
    description: str = ""
    action: str = ""
    quantity: Optional[Decimal] = None
    price: Optional[Decimal] = None
    executed_at: str = ""
    transaction_date: str = ""
    value: Optional[Decimal] = None
    value_effect: str = ""
    net_value: Optional[Decimal] = None
    net_value_effect: str = ""
    is_estimated_fee: bool = False


@dataclass(frozen=True)
class TransactionQuery:
    """Filters for GET /accounts/{n}/transactions. Empty fields are not sent."""

    sort: str = ""
    type: str = ""
    sub_types: List[str] = field(default_factory=list)
    types: List[str] = field(default_factory=list)
    start_date: str = ""
    end_date: str = ""
    instrument_type: str = ""
    symbol: str = ""
    underlying_symbol: str = ""
    action: str = ""
    partition_key: str = ""
    futures_symbol: str = ""
    start_at: str = ""
    end_at: str = ""

    def to_params(self) -> List[Tuple[str, object]]:
        return [
            ("sort", self.sort),
            ("type", self.type),
            ("sub-type", list(self.sub_types)),
            ("types", list(self.types)),
            ("start-date", self.start_date),
            ("end-date", self.end_date),
            ("instrument-type", self.instrument_type),
            ("symbol", self.symbol),
            ("underlying-symbol", self.underlying_symbol),
            ("action", self.action),
            ("partition-key", self.partition_key),
            ("futures-symbol", self.futures_symbol),
            ("start-at", self.start_at),
            ("end-at", self.end_at),
        ]


class TransactionsAPI(Resource):
    def list(self, account_number: str, query: Optional[TransactionQuery] = None) -> ListResponse[Transaction]:
        return self._client.get_items(
            f"/accounts/{segment(account_number)}/transactions",
            Transaction,
            params=query.to_params() if query else None,
        )

    def get(self, account_number: str, transaction_id: object) -> DataResponse[Transaction]:
        return self._client.get_data(
            f"/accounts/{segment(account_number)}/transactions/{segment(transaction_id)}",
            Transaction,
        )
