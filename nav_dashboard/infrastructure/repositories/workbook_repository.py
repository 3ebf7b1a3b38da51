"""Workbook-backed repository for raw NAV rows."""
from __future__ import annotations

from io import BytesIO
from pathlib import Path
from typing import Any, Mapping, Sequence

from nav_dashboard.domain.repositories import RawRecordRepository
from nav_dashboard.infrastructure.parsing.utils import compute_file_hash, ensure_bytes
from nav_dashboard.infrastructure.parsing.workbook import read_raw_records


class WorkbookRecordRepository(RawRecordRepository):
    def __init__(self, source: BytesIO | Path | bytes, filename: str | None = None) -> None:
        if filename is None and isinstance(source, Path):
            filename = source.name
        self._source = ensure_bytes(source)
        self._filename = filename

    @property
    def filename(self) -> str | None:
        return self._filename

    @property
    def file_hash(self) -> str:
        return compute_file_hash(self._source)

    def list_raw_records(self) -> Sequence[Mapping[str, Any]]:
        return read_raw_records(self._source, filename=self._filename)
