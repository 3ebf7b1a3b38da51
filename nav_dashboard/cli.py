"""Command-line entrypoint for NAV performance derivation."""
from __future__ import annotations

import argparse
import logging
import sys
import zipfile
from pathlib import Path

from nav_dashboard.application.use_cases import DerivePerformanceUseCase, PerformanceContext
from nav_dashboard.domain.services import SeriesDerivationEngine
from nav_dashboard.infrastructure.repositories.workbook_repository import WorkbookRecordRepository
from nav_dashboard.logging_config import configure_logging
from nav_dashboard.presentation.series_report import (
    drawdown_to_rows,
    equity_to_rows,
    format_monthly_table,
    monthly_to_rows,
    render_csv,
)

logger = logging.getLogger(__name__)


def parse_args(argv: list[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Derive equity, drawdown and monthly returns from a Date/Nav file")
    parser.add_argument("source", type=str, help="Path to an .xlsx, .xls or .csv file with Date and Nav columns")
    parser.add_argument("--csv-out", type=str, help="Directory to write equity/drawdown/monthly CSV files into")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(sys.argv[1:] if argv is None else argv)
    configure_logging(debug=args.debug)

    source = Path(args.source)
    try:
        repository = WorkbookRecordRepository(source)
        context = PerformanceContext(record_repository=repository, engine=SeriesDerivationEngine())
        series = DerivePerformanceUseCase(context).execute()
    except (OSError, ValueError, zipfile.BadZipFile) as exc:
        print(f"Could not read {source}: {exc}", file=sys.stderr)
        return 1

    summary = series.summary
    print("Performance Summary")
    print("===================")
    print(f"Records read: {summary.total_raw}")
    print(f"Valid records: {summary.valid_records}")
    print(f"Dropped records: {summary.dropped_records}")
    if summary.first_date is not None:
        print(f"Date range: {summary.first_date.isoformat()} to {summary.last_date.isoformat()}")
        print(f"Base NAV: {summary.base_nav}")
    if summary.base_rejected:
        print("Base NAV is not positive; equity and drawdown were not derived.")
    elif not series.is_empty():
        print(f"Final equity: {series.final_equity():.2f}")
        print(f"Max drawdown: {series.max_drawdown():.2f}%")

    print("\nMonthly returns (%)")
    print(format_monthly_table(series.monthly_returns))

    if args.csv_out:
        out_dir = Path(args.csv_out)
        out_dir.mkdir(parents=True, exist_ok=True)
        (out_dir / "equity.csv").write_bytes(render_csv(equity_to_rows(series.equity)))
        (out_dir / "drawdown.csv").write_bytes(render_csv(drawdown_to_rows(series.drawdown)))
        (out_dir / "monthly_returns.csv").write_bytes(render_csv(monthly_to_rows(series.monthly_returns)))
        logger.info("Wrote CSV exports to %s", out_dir)

    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
