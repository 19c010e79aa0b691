from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Dict, Iterable, List, Optional

from .accounts import Position
from .market_data import Quote

FUTURE_OPTION = "Future Option"

_ZERO = Decimal(0)


@dataclass(frozen=True)
class PositionGreeks:
    position: Position
    quote: Optional[Quote]
    quantity: Decimal
    delta: Decimal
    theta: Decimal

    @property
    def has_quote(self) -> bool:
        return self.quote is not None

    @property
    def sign(self) -> int:
        return -1 if self.position.is_short else 1

    @property
    def multiplier(self) -> Decimal:
        return self.position.multiplier or _ZERO

    @property
    def position_delta(self) -> Decimal:
        return self.delta * self.quantity * self.multiplier * self.sign

    @property
    def position_theta(self) -> Decimal:
        return self.theta * self.quantity * self.multiplier * self.sign


@dataclass(frozen=True)
class GreeksSummary:
    rows: List[PositionGreeks] = field(default_factory=list)

    @property
    def net_delta(self) -> Decimal:
        return sum((r.position_delta for r in self.rows), _ZERO)

    @property
    def net_theta(self) -> Decimal:
        return sum((r.position_theta for r in self.rows), _ZERO)

    @property
    def missing_quotes(self) -> List[str]:
        return [r.position.symbol for r in self.rows if not r.has_quote]


def future_option_positions(positions: Iterable[Position]) -> List[Position]:
    return [p for p in positions if p.instrument_type == FUTURE_OPTION]


def net_greeks(positions: Iterable[Position], quotes: Iterable[Quote]) -> GreeksSummary:
    """
    Per-position and net delta/theta for future-option positions.

    Greeks are per contract: position value = greek * quantity * multiplier,
    negated for short positions. A position without a quote contributes zero
    and shows up in `missing_quotes`.
    """
    by_symbol: Dict[str, Quote] = {q.symbol: q for q in quotes}
    rows = []
    for p in future_option_positions(positions):
        q = by_symbol.get(p.symbol)
        rows.append(
            PositionGreeks(
                position=p,
                quote=q,
                quantity=p.quantity or _ZERO,
                delta=(q.delta if q else None) or _ZERO,
                theta=(q.theta if q else None) or _ZERO,
            )
        )
    return GreeksSummary(rows=rows)
