"""Application services orchestrating the performance derivation workflow."""
from __future__ import annotations

from dataclasses import dataclass

from nav_dashboard.domain.repositories import RawRecordRepository
from nav_dashboard.domain.results import PerformanceSeries
from nav_dashboard.domain.services import SeriesDerivationEngine


@dataclass(slots=True)
class PerformanceContext:
    record_repository: RawRecordRepository
    engine: SeriesDerivationEngine


class DerivePerformanceUseCase:
    def __init__(self, context: PerformanceContext) -> None:
        self._context = context

    def execute(self) -> PerformanceSeries:
        raw_records = self._context.record_repository.list_raw_records()
        return self._context.engine.derive(raw_records)
