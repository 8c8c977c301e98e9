"""Shared helpers for the CSV-backed stores."""

from __future__ import annotations

import csv
import io
from datetime import datetime, timezone
from pathlib import Path

from fulfillment.domain.exceptions import PersistenceError


def read_rows(file_path: Path) -> list[list[str]]:
    """Return data rows (header skipped) with every field stripped.

    Blank lines and lines starting with ``#`` are ignored. A missing file
    reads as empty.
    """
    if not file_path.exists():
        return []
    try:
        text = file_path.read_text(encoding="utf-8-sig")
    except OSError as exc:
        raise PersistenceError(f"Cannot read {file_path}: {exc}") from exc

    rows: list[list[str]] = []
    for index, row in enumerate(csv.reader(io.StringIO(text))):
        if index == 0:
            continue
        if not row or not "".join(row).strip():
            continue
        if row[0].lstrip().startswith("#"):
            continue
        rows.append([field.strip() for field in row])
    return rows


def write_rows(file_path: Path, header: list[str], rows: list[list[str]]) -> None:
    """Replace *file_path* with *header* followed by *rows*."""
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(header)
    writer.writerows(rows)
    try:
        file_path.parent.mkdir(parents=True, exist_ok=True)
        file_path.write_text(buffer.getvalue(), encoding="utf-8")
    except OSError as exc:
        raise PersistenceError(f"Cannot write {file_path}: {exc}") from exc


def to_epoch(moment: datetime) -> str:
    return str(int(moment.timestamp()))


def from_epoch(raw: str) -> datetime:
    return datetime.fromtimestamp(int(raw), tz=timezone.utc)
