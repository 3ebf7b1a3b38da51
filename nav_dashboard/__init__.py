"""NAV performance analytics: equity, drawdown and monthly return series."""
from nav_dashboard.application.use_cases import DerivePerformanceUseCase, PerformanceContext
from nav_dashboard.domain.normalization import normalize
from nav_dashboard.domain.services import (
    SeriesDerivationEngine,
    build_drawdown,
    build_equity,
    build_monthly_matrix,
)
from nav_dashboard.infrastructure.repositories.workbook_repository import WorkbookRecordRepository

__all__ = [
    "DerivePerformanceUseCase",
    "PerformanceContext",
    "SeriesDerivationEngine",
    "WorkbookRecordRepository",
    "normalize",
    "build_equity",
    "build_drawdown",
    "build_monthly_matrix",
]
