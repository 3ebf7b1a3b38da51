"""Input normalizer turning untrusted raw rows into an ordered NAV series."""
from __future__ import annotations

import logging
import math
import numbers
from datetime import date, datetime, timedelta
from decimal import Decimal
from typing import Any, Iterable, Mapping

import pandas as pd

from nav_dashboard.config import SETTINGS, Settings

from .models import Record

logger = logging.getLogger(__name__)


def coerce_date(value: Any, epoch: date = SETTINGS.excel_epoch) -> date | None:
    """Parse a raw ``Date`` cell into a calendar date, or ``None`` when it is unusable."""
    if value is None or value is pd.NaT or isinstance(value, bool):
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, numbers.Real):
        serial = float(value)
        if not math.isfinite(serial):
            return None
        try:
            return epoch + timedelta(days=math.floor(serial))
        except OverflowError:
            return None
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        parsed = pd.to_datetime(text, errors="coerce")
        if parsed is pd.NaT or pd.isna(parsed):
            return None
        return parsed.date()
    return None


def coerce_nav(value: Any) -> float | None:
    """Coerce a raw ``Nav`` cell into a finite float, or ``None``."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (Decimal, numbers.Real)):
        try:
            result = float(value)
        except (OverflowError, ValueError):
            return None
    elif isinstance(value, str):
        text = value.strip().replace(",", "")
        if not text or "_" in text:
            return None
        try:
            result = float(text)
        except ValueError:
            return None
    else:
        return None
    if not math.isfinite(result):
        return None
    return result


def to_record(raw: Any, settings: Settings = SETTINGS) -> Record | None:
    if not isinstance(raw, Mapping):
        return None
    nav_date = coerce_date(raw.get(settings.date_field), settings.excel_epoch)
    if nav_date is None:
        return None
    nav = coerce_nav(raw.get(settings.nav_field))
    if nav is None:
        return None
    return Record(date=nav_date, nav=nav)


def normalize(raw_records: Iterable[Mapping[str, Any]] | None, settings: Settings = SETTINGS) -> tuple[Record, ...]:
    """Validate raw rows and return them sorted by date.

    Rows whose date does not parse or whose NAV is not a finite number are
    dropped. The sort is stable, so rows sharing a date keep their input order.
    """
    if not raw_records:
        return tuple()

    total = 0
    records: list[Record] = []
    for raw in raw_records:
        total += 1
        record = to_record(raw, settings)
        if record is not None:
            records.append(record)

    dropped = total - len(records)
    if dropped:
        logger.debug("Dropped %d of %d raw records with unusable Date/Nav", dropped, total)

    records.sort(key=lambda record: record.date)
    return tuple(records)
