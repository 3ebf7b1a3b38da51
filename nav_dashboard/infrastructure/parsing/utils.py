"""Shared helpers for reading uploaded files."""
from __future__ import annotations

from io import BytesIO
from pathlib import Path
import hashlib

from nav_dashboard.config import SUPPORTED_SUFFIXES


def ensure_bytes(source: BytesIO | Path | bytes) -> bytes:
    if isinstance(source, bytes):
        return source
    if isinstance(source, BytesIO):
        return source.getvalue()
    if isinstance(source, Path):
        return source.read_bytes()
    raise TypeError(f"Unsupported source type: {type(source)!r}")


def compute_file_hash(data: bytes) -> str:
    return hashlib.sha256(data).hexdigest()


def detect_suffix(source: BytesIO | Path | bytes, filename: str | None = None) -> str:
    """Resolve the file suffix from ``filename`` or a ``Path`` source."""
    name = filename or (source.name if isinstance(source, Path) else "")
    suffix = Path(name).suffix.lower()
    if not suffix:
        # Bare uploads without a name are assumed to be modern workbooks.
        return ".xlsx"
    if suffix not in SUPPORTED_SUFFIXES:
        raise ValueError(f"Unsupported file type {suffix!r}; expected one of {', '.join(SUPPORTED_SUFFIXES)}")
    return suffix
