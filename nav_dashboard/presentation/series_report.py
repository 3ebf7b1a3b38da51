"""Tabular views of derived performance series for charts and downloads."""
from __future__ import annotations

import csv
import io
from typing import Mapping, Sequence

import pandas as pd

from nav_dashboard.domain.models import DrawdownPoint, EquityPoint, MonthlyReturn
from nav_dashboard.domain.results import PerformanceSeries

MONTH_LABELS = [f"{month:02d}" for month in range(1, 13)]


def equity_to_rows(equity: Sequence[EquityPoint]) -> list[dict[str, object]]:
    return [{"date": point.date, "value": point.value} for point in equity]


def drawdown_to_rows(drawdown: Sequence[DrawdownPoint]) -> list[dict[str, object]]:
    return [{"date": point.date, "drawdown": point.drawdown} for point in drawdown]


def monthly_to_rows(matrix: Mapping[str, Sequence[MonthlyReturn]]) -> list[dict[str, object]]:
    rows: list[dict[str, object]] = []
    for year in sorted(matrix):
        for item in matrix[year]:
            rows.append({"year": item.year, "month": item.month, "ret": item.ret})
    return rows


def series_to_frame(series: PerformanceSeries) -> pd.DataFrame:
    """Equity and drawdown side by side, indexed by date."""
    if series.is_empty():
        return pd.DataFrame(columns=["equity", "drawdown"], index=pd.DatetimeIndex([], name="date"))
    frame = pd.DataFrame(
        {
            "equity": [point.value for point in series.equity],
            "drawdown": [point.drawdown for point in series.drawdown],
        },
        index=pd.to_datetime([point.date for point in series.equity]),
    )
    frame.index.name = "date"
    return frame


def monthly_matrix_frame(matrix: Mapping[str, Sequence[MonthlyReturn]]) -> pd.DataFrame:
    """Year by month grid; months without a return show as ``NaN``."""
    years = sorted(matrix)
    frame = pd.DataFrame(index=pd.Index(years, name="year"), columns=MONTH_LABELS, dtype=float)
    for year in years:
        for item in matrix[year]:
            if item.ret is not None:
                frame.loc[year, item.month] = item.ret
    return frame


def monthly_bars(matrix: Mapping[str, Sequence[MonthlyReturn]], year: str) -> pd.DataFrame:
    """Bar chart rows for one year; a missing return is drawn as a zero bar."""
    items = matrix.get(year, ())
    return pd.DataFrame(
        {"ret": [item.ret or 0.0 for item in items]},
        index=pd.Index([item.month for item in items], name="month"),
    )


def render_csv(rows: Sequence[Mapping[str, object]]) -> bytes:
    buffer = io.StringIO()
    writer = csv.DictWriter(buffer, fieldnames=list(rows[0].keys()) if rows else [])
    if rows:
        writer.writeheader()
        writer.writerows(rows)
    return buffer.getvalue().encode("utf-8")


def format_monthly_table(matrix: Mapping[str, Sequence[MonthlyReturn]]) -> str:
    """Plain-text grid for terminal output."""
    if not matrix:
        return "No monthly returns."
    header = "Year  " + " ".join(f"{label:>7}" for label in MONTH_LABELS)
    lines = [header]
    for year in sorted(matrix):
        by_month = {item.month: item.ret for item in matrix[year]}
        cells = []
        for label in MONTH_LABELS:
            if label not in by_month:
                cells.append(f"{'':>7}")
            elif by_month[label] is None:
                cells.append(f"{'-':>7}")
            else:
                cells.append(f"{by_month[label]:>7.2f}")
        lines.append(f"{year:<5} " + " ".join(cells))
    return "\n".join(lines)
