"""Domain-level results of a series derivation."""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Iterable, Mapping, Sequence

from .models import DrawdownPoint, EquityPoint, MonthlyReturn


@dataclass(frozen=True)
class DerivationSummary:
    total_raw: int
    valid_records: int
    dropped_records: int
    first_date: date | None
    last_date: date | None
    base_nav: float | None
    base_rejected: bool
    generated_at: datetime


@dataclass(frozen=True)
class PerformanceSeries:
    summary: DerivationSummary
    equity: Sequence[EquityPoint] = field(default_factory=tuple)
    drawdown: Sequence[DrawdownPoint] = field(default_factory=tuple)
    monthly_returns: Mapping[str, Sequence[MonthlyReturn]] = field(default_factory=dict)

    def is_empty(self) -> bool:
        return not self.equity

    def final_equity(self) -> float | None:
        return self.equity[-1].value if self.equity else None

    def max_drawdown(self) -> float | None:
        if not self.drawdown:
            return None
        return min(point.drawdown for point in self.drawdown)

    def years(self) -> list[str]:
        return sorted(self.monthly_returns)

    def iter_monthly_returns(self) -> Iterable[MonthlyReturn]:
        for year in self.years():
            yield from self.monthly_returns[year]
