import os
import time
import tempfile
from datetime import date, timedelta
from decimal import Decimal
from pathlib import Path

import sys

sys.path.append(str(Path(__file__).resolve().parents[1]))

from ledgerbook.models import Entry
from ledgerbook.report import load_report
from ledgerbook.storage import rewrite_entries


def build_ledger(n_days: int, events_per_day: int) -> Path:
    fd, name = tempfile.mkstemp(suffix=".csv")
    os.close(fd)
    path = Path(name)
    start = date(2015, 1, 1)
    entries = []
    for day in range(n_days):
        for ev in range(events_per_day):
            when = start + timedelta(days=day)
            entries.append(Entry(when.isoformat(), Decimal(ev) - Decimal("12.34")))
    rewrite_entries(path, entries)
    return path


def run():
    path = build_ledger(365 * 10, 3)
    try:
        start = time.perf_counter()
        report = load_report(path)
        duration = time.perf_counter() - start
        rows = sum(len(y.rows) for y in report.years)
        print(f"Grouped {rows} rows into {len(report.years)} years in {duration:.4f}s")
    finally:
        path.unlink()


if __name__ == "__main__":
    run()
