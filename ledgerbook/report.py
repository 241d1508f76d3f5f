"""Year-grouped report of a ledger and the plain-text batch reports."""
from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Tuple

from .formatting import FormatOptions, format_amount
from .models import Entry, NoEntries
from .storage import read_entries, sort_entries


@dataclass
class YearReport:
    year: str
    subtotal: str
    rows: List[Tuple[str, str]] = field(default_factory=list)
    entries: List[Entry] = field(default_factory=list)


@dataclass
class ReportViewModel:
    title: str = ""
    total: str = ""
    years: List[YearReport] = field(default_factory=list)


def build_report(
    title: str, entries: Sequence[Entry], options: FormatOptions | None = None
) -> ReportViewModel:
    """Group ``entries`` by year.

    Rows inside a year keep the order of ``entries``; only the years are
    sorted. Raises ``MalformedEntry`` for an entry whose date does not parse.
    """
    options = options or FormatOptions()
    total = sum((e.amount for e in entries), Decimal(0))

    buckets: Dict[str, List[Entry]] = {}
    for entry in entries:
        year = f"{entry.parsed_date().year:04d}"
        buckets.setdefault(year, []).append(entry)

    years = []
    for year in sorted(buckets):
        bucket = buckets[year]
        subtotal = sum((e.amount for e in bucket), Decimal(0))
        years.append(
            YearReport(
                year=year,
                subtotal=format_amount(subtotal, options),
                rows=[(e.day_month(), format_amount(e.amount, options)) for e in bucket],
                entries=list(bucket),
            )
        )
    return ReportViewModel(title=title, total=format_amount(total, options), years=years)


def load_report(path: Path, options: FormatOptions | None = None) -> ReportViewModel:
    path = Path(path)
    return build_report(path.name, read_entries(path), options)


# -- batch command output ---------------------------------------------------


@dataclass
class Report:
    entries: List[Entry]
    filter: Optional[str] = None

    @property
    def total(self) -> Decimal:
        return sum((e.amount for e in self.entries), Decimal(0))

    def render(self, options: FormatOptions | None = None) -> str:
        rows = [(f"{e.date}:", format_amount(e.amount, options)) for e in self.entries]
        if self.filter is not None:
            final_prefix = f"Total amount for filter '{self.filter}':"
        else:
            final_prefix = "Total amount:"
        final_suffix = format_amount(self.total, options)

        prefix_w = max([len(p) for p, _ in rows] + [len(final_prefix)])
        suffix_w = max([len(s) for _, s in rows] + [len(final_suffix)]) + 1
        lines = [f"{p:>{prefix_w}}{s:>{suffix_w}}" for p, s in rows]
        lines.append(f"{final_prefix:>{prefix_w}}{final_suffix:>{suffix_w}}")
        return "\n".join(lines) + "\n"


def generate_report(path: Path, date_filter: Optional[str] = None) -> Report:
    """Date-sorted report of ``path``, optionally limited to a date prefix."""
    entries = read_entries(path)
    if date_filter is not None:
        entries = [e for e in entries if e.date.startswith(date_filter)]
        if not entries:
            raise NoEntries(f"No entries matching filter: {date_filter}")
    elif not entries:
        raise NoEntries("No entries found")
    return Report(sort_entries(entries), date_filter)


@dataclass
class NewEntryInfo:
    total_before: Decimal
    total_after: Decimal

    def render(self, options: FormatOptions | None = None) -> str:
        lines = [
            format_amount(self.total_before, options),
            format_amount(self.total_after - self.total_before, options),
            f"Total: {format_amount(self.total_after, options)}",
        ]
        width = max(len(line) for line in lines)
        return "".join(f"{line:>{width}}\n" for line in lines)
