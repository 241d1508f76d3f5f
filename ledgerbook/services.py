from __future__ import annotations

from decimal import Decimal
from pathlib import Path

from .logging_setup import get_logger
from .models import Entry
from .report import NewEntryInfo
from .storage import (
    append_entry,
    read_entries,
    read_entries_or_empty,
    rewrite_entries,
    sort_entries,
)

log = get_logger("ledgerbook.services")


def _total(entries) -> Decimal:
    return sum((e.amount for e in entries), Decimal(0))


def add_entry(path: Path, entry: Entry) -> NewEntryInfo:
    """Append ``entry`` to ``path`` (created if missing) and report totals."""
    before = read_entries_or_empty(path)
    append_entry(path, entry)
    return NewEntryInfo(_total(before), _total(read_entries(path)))


def edit_entry(path: Path, original: Entry, replacement: Entry) -> bool:
    """Replace the first entry equal to ``original`` and rewrite the file.

    Entries are matched by value, so of two identical rows the first one in
    file order is the one updated. Returns False when nothing matched; the
    file is left untouched in that case.
    """
    entries = read_entries(path)
    for idx, entry in enumerate(entries):
        if entry.date == original.date and entry.amount == original.amount:
            entries[idx] = replacement
            rewrite_entries(path, entries)
            return True
    log.warning("entry %s;%s not found in %s", original.date, original.amount, path)
    return False


def sort_ledger(path: Path) -> int:
    entries = sort_entries(read_entries(path))
    rewrite_entries(path, entries)
    return len(entries)
