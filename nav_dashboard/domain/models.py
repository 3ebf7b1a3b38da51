"""Domain models for the NAV performance engine.

These dataclasses capture the canonical shape of a cleaned NAV observation and
of the points emitted by the series builders.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import date


@dataclass(frozen=True)
class Record:
    """A validated NAV observation for a single calendar day."""

    date: date
    nav: float


@dataclass(frozen=True)
class EquityPoint:
    """NAV rebased so that the first observation equals the base scale."""

    date: str
    value: float


@dataclass(frozen=True)
class DrawdownPoint:
    """Percentage decline from the running peak of the equity curve."""

    date: str
    drawdown: float


@dataclass(frozen=True)
class MonthlyReturn:
    """Month-over-month return; ``ret`` is ``None`` when the prior month has no value."""

    year: int
    month: str
    ret: float | None
