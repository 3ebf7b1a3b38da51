"""Month-keyed buckets used by the monthly return matrix."""
from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Iterator


@dataclass(frozen=True, order=True)
class MonthKey:
    year: int
    month: int

    @classmethod
    def from_date(cls, value: date) -> "MonthKey":
        return cls(year=value.year, month=value.month)

    @property
    def year_label(self) -> str:
        return f"{self.year:04d}"

    @property
    def month_label(self) -> str:
        return f"{self.month:02d}"

    def previous(self) -> "MonthKey":
        """The calendar month immediately before this one."""
        if self.month == 1:
            return MonthKey(year=self.year - 1, month=12)
        return MonthKey(year=self.year, month=self.month - 1)

    def __str__(self) -> str:
        return f"{self.year_label}-{self.month_label}"


class MonthlyBuckets:
    """Ordered map of month key to the last NAV assigned within that month.

    Lookups are exact: asking for a month that was never assigned returns
    ``None`` and never falls back to a neighbouring month.
    """

    def __init__(self) -> None:
        self._values: dict[MonthKey, float] = {}

    def assign(self, key: MonthKey, nav: float) -> None:
        self._values[key] = nav

    def get(self, key: MonthKey) -> float | None:
        return self._values.get(key)

    def keys(self) -> list[MonthKey]:
        return sorted(self._values)

    def items(self) -> Iterator[tuple[MonthKey, float]]:
        for key in self.keys():
            yield key, self._values[key]

    def __contains__(self, key: object) -> bool:
        return key in self._values

    def __len__(self) -> int:
        return len(self._values)
