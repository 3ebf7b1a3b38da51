"""Domain services deriving performance series from a NAV history."""
from __future__ import annotations

import logging
import math
from datetime import datetime, timezone
from decimal import ROUND_HALF_UP, Decimal, localcontext
from typing import Any, Iterable, Mapping, Sequence

from nav_dashboard.config import SETTINGS, Settings

from .buckets import MonthKey, MonthlyBuckets
from .models import DrawdownPoint, EquityPoint, MonthlyReturn, Record
from .normalization import normalize
from .results import DerivationSummary, PerformanceSeries

logger = logging.getLogger(__name__)


def round_half_up(value: float, places: int = SETTINGS.decimal_places) -> float:
    """Round on the decimal representation, halves away from zero."""
    if not math.isfinite(value):
        return value
    exact = Decimal(repr(value))
    with localcontext() as ctx:
        # room for every integer digit plus the requested places
        ctx.prec = max(ctx.prec, exact.adjusted() + places + 2)
        rounded = exact.quantize(Decimal(1).scaleb(-places), rounding=ROUND_HALF_UP)
    # ``+ 0.0`` folds a rounded ``-0.0`` into ``0.0``
    return float(rounded) + 0.0


def build_equity(series: Sequence[Record], settings: Settings = SETTINGS) -> tuple[EquityPoint, ...]:
    """Rebase the series so the first NAV maps to ``settings.base_scale``.

    A non-positive base NAV cannot be rebased; the curve is left empty.
    """
    if not series:
        return tuple()

    base = series[0].nav
    if base <= 0:
        logger.warning("Base NAV %s on %s is not positive; equity curve left empty", base, series[0].date)
        return tuple()

    return tuple(
        EquityPoint(
            date=record.date.isoformat(),
            value=round_half_up(record.nav / base * settings.base_scale, settings.decimal_places),
        )
        for record in series
    )


def build_drawdown(equity: Sequence[EquityPoint], settings: Settings = SETTINGS) -> tuple[DrawdownPoint, ...]:
    """Percentage drop from the running peak; undefined (``nan``) while the peak is zero."""
    peak = -math.inf
    points: list[DrawdownPoint] = []
    for point in equity:
        if point.value > peak:
            peak = point.value
        drawdown = math.nan if peak == 0 else (point.value - peak) / peak * 100
        points.append(DrawdownPoint(date=point.date, drawdown=round_half_up(drawdown, settings.decimal_places)))
    return tuple(points)


def bucket_by_month(series: Iterable[Record]) -> MonthlyBuckets:
    """Keep the last NAV seen in each calendar month."""
    buckets = MonthlyBuckets()
    for record in series:
        buckets.assign(MonthKey.from_date(record.date), record.nav)
    return buckets


def build_monthly_matrix(
    series: Sequence[Record], settings: Settings = SETTINGS
) -> dict[str, tuple[MonthlyReturn, ...]]:
    """Month-over-month returns grouped by year.

    A return is only produced against the immediately preceding calendar
    month; a gap in the data yields ``None`` rather than a multi-month return.
    """
    buckets = bucket_by_month(series)

    grouped: dict[str, list[MonthlyReturn]] = {}
    for key, nav in buckets.items():
        previous = buckets.get(key.previous())
        ret: float | None = None
        if previous and previous > 0:
            ret = round_half_up((nav / previous - 1) * 100, settings.decimal_places)
        grouped.setdefault(key.year_label, []).append(
            MonthlyReturn(year=key.year, month=key.month_label, ret=ret)
        )
    return {year: tuple(returns) for year, returns in grouped.items()}


class SeriesDerivationEngine:
    """Runs the normalizer and the three series builders over raw rows."""

    def __init__(self, settings: Settings | None = None) -> None:
        self._settings = settings or SETTINGS

    def derive(self, raw_records: Iterable[Mapping[str, Any]] | None) -> PerformanceSeries:
        raw = list(raw_records or [])
        series = normalize(raw, self._settings)
        return self.derive_from_series(series, total_raw=len(raw))

    def derive_from_series(self, series: Sequence[Record], total_raw: int | None = None) -> PerformanceSeries:
        equity = build_equity(series, self._settings)
        drawdown = build_drawdown(equity, self._settings)
        monthly = build_monthly_matrix(series, self._settings)

        total = len(series) if total_raw is None else total_raw
        summary = DerivationSummary(
            total_raw=total,
            valid_records=len(series),
            dropped_records=total - len(series),
            first_date=series[0].date if series else None,
            last_date=series[-1].date if series else None,
            base_nav=series[0].nav if series else None,
            base_rejected=bool(series) and not equity,
            generated_at=datetime.now(timezone.utc),
        )
        logger.debug(
            "Derived %d equity points and %d months from %d valid records",
            len(equity),
            sum(len(returns) for returns in monthly.values()),
            len(series),
        )
        return PerformanceSeries(
            summary=summary,
            equity=equity,
            drawdown=drawdown,
            monthly_returns=monthly,
        )
