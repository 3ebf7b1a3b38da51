"""Central configuration for the NAV dashboard package."""
from __future__ import annotations

import os
from dataclasses import dataclass
from datetime import date

DATE_FIELD = "Date"
NAV_FIELD = "Nav"

# Day zero of spreadsheet serial dates (Excel 1900 system, leap-year bug included).
EXCEL_EPOCH = date(1899, 12, 30)

SUPPORTED_SUFFIXES = (".xlsx", ".xls", ".csv")


@dataclass(slots=True, frozen=True)
class Settings:
    date_field: str
    nav_field: str
    base_scale: float
    decimal_places: int
    excel_epoch: date
    log_level: str


SETTINGS = Settings(
    date_field=DATE_FIELD,
    nav_field=NAV_FIELD,
    base_scale=100.0,
    decimal_places=2,
    excel_epoch=EXCEL_EPOCH,
    log_level=os.environ.get("NAV_DASHBOARD_LOG_LEVEL", "INFO").upper(),
)
