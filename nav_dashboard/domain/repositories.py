"""Repository interfaces anchoring the domain layer."""
from __future__ import annotations

from typing import Any, Mapping, Protocol, Sequence


class RawRecordRepository(Protocol):
    """Provides raw ``Date``/``Nav`` rows decoded from an uploaded source."""

    def list_raw_records(self) -> Sequence[Mapping[str, Any]]:
        ...
