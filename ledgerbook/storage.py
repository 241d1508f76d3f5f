"""Reading and writing ``date;amount`` ledger files."""
from __future__ import annotations

import csv
from pathlib import Path
from typing import Iterable, List

from .logging_setup import get_logger
from .models import (
    Entry,
    InvalidInput,
    MalformedEntry,
    NotFound,
    StorageFailure,
    amount_literal,
    parse_amount,
)

DELIMITER = ";"
HEADER = ["date", "amount"]

log = get_logger("ledgerbook.storage")


def read_entries(path: Path) -> List[Entry]:
    """Return the entries of ``path`` in file order."""
    path = Path(path)
    if not path.exists():
        raise NotFound(f"File '{path}' does not exist")

    entries: List[Entry] = []
    try:
        with path.open(newline="", encoding="utf-8-sig") as fh:
            reader = csv.DictReader(fh, delimiter=DELIMITER)
            for line_no, row in enumerate(reader, start=2):
                date_text = (row.get("date") or "").strip()
                amount_text = row.get("amount")
                if not date_text or amount_text is None:
                    raise MalformedEntry(f"{path.name}:{line_no}: missing date or amount")
                try:
                    amount = parse_amount(amount_text)
                except InvalidInput as exc:
                    raise MalformedEntry(f"{path.name}:{line_no}: {exc}") from exc
                entries.append(Entry(date_text, amount))
    except (UnicodeDecodeError, csv.Error) as exc:
        raise MalformedEntry(f"{path.name}: {exc}") from exc
    except OSError as exc:
        raise StorageFailure(f"Failed to read {path}: {exc}") from exc
    log.debug("read %d entries from %s", len(entries), path)
    return entries


def read_entries_or_empty(path: Path) -> List[Entry]:
    """Like :func:`read_entries` but a missing file means "no entries yet"."""
    try:
        return read_entries(path)
    except NotFound:
        return []


def _writer(fh):
    return csv.writer(fh, delimiter=DELIMITER, lineterminator="\n")


def append_entry(path: Path, entry: Entry) -> None:
    """Append ``entry``; the header is written only into an empty file."""
    path = Path(path)
    try:
        existing = path.read_bytes() if path.exists() else b""
        with path.open("a", newline="", encoding="utf-8") as fh:
            writer = _writer(fh)
            if not existing:
                writer.writerow(HEADER)
            elif not existing.endswith(b"\n"):
                fh.write("\n")
            writer.writerow([entry.date, amount_literal(entry.amount)])
    except OSError as exc:
        raise StorageFailure(f"Failed to add a new entry to {path}: {exc}") from exc
    log.info("appended %s;%s to %s", entry.date, amount_literal(entry.amount), path)


def rewrite_entries(path: Path, entries: Iterable[Entry]) -> None:
    """Replace the whole content of ``path`` with ``entries``."""
    path = Path(path)
    entries = list(entries)
    try:
        with path.open("w", newline="", encoding="utf-8") as fh:
            writer = _writer(fh)
            writer.writerow(HEADER)
            for entry in entries:
                writer.writerow([entry.date, amount_literal(entry.amount)])
    except OSError as exc:
        raise StorageFailure(f"Failed to rewrite {path}: {exc}") from exc
    log.info("rewrote %s with %d entries", path, len(entries))


def sort_entries(entries: Iterable[Entry]) -> List[Entry]:
    # stable: same-day entries keep file order
    return sorted(entries, key=lambda e: e.date)


def list_ledgers(directory: Path) -> List[Path]:
    """Ledger files (``*.csv``) of ``directory`` sorted by path."""
    directory = Path(directory)
    if not directory.is_dir():
        raise NotFound(f"Directory '{directory}' does not exist")
    return sorted(p for p in directory.iterdir() if p.is_file() and p.suffix == ".csv")
