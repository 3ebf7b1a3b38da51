"""Decode an uploaded workbook or CSV into raw ``Date``/``Nav`` rows."""
from __future__ import annotations

import logging
from io import BytesIO
from pathlib import Path
from typing import Any

import pandas as pd

from nav_dashboard.infrastructure.parsing.utils import detect_suffix, ensure_bytes

logger = logging.getLogger(__name__)

ENGINES = {
    ".xlsx": "openpyxl",
    ".xls": "xlrd",
}


def _first_sheet(source: BytesIO, engine: str) -> str | int:
    xls = pd.ExcelFile(source, engine=engine)
    sheets = xls.sheet_names
    if not sheets:
        raise ValueError("Workbook has no sheets")
    return sheets[0]


def read_frame(source: BytesIO | Path | bytes, filename: str | None = None) -> pd.DataFrame:
    suffix = detect_suffix(source, filename)
    raw_bytes = ensure_bytes(source)
    if suffix == ".csv":
        return pd.read_csv(BytesIO(raw_bytes), dtype=object)
    engine = ENGINES[suffix]
    sheet_name = _first_sheet(BytesIO(raw_bytes), engine)
    return pd.read_excel(BytesIO(raw_bytes), sheet_name=sheet_name, engine=engine)


def frame_to_raw_records(df: pd.DataFrame) -> list[dict[str, Any]]:
    """Rows as plain dicts; blank cells become ``None``."""
    if df.empty:
        return []
    work = df.astype(object).where(pd.notna(df), None)
    return [{str(column): value for column, value in row.items()} for row in work.to_dict(orient="records")]


def read_raw_records(source: BytesIO | Path | bytes, filename: str | None = None) -> list[dict[str, Any]]:
    frame = read_frame(source, filename)
    records = frame_to_raw_records(frame)
    logger.debug("Read %d raw rows with columns %s", len(records), list(frame.columns))
    return records
