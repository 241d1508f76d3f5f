"""State of the interactive ledger browser.

:class:`App` owns three cursors (ledger, year, entry), the panel focus and the
add/edit popup. It never draws anything; :mod:`ledgerbook.view` turns it into
a screen description and :mod:`ledgerbook.cli` paints that with curses.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from enum import Enum
from pathlib import Path
from typing import Callable, List, Optional, Sequence

from .formatting import FormatOptions
from .logging_setup import get_logger
from .models import (
    Entry,
    InvalidInput,
    LedgerError,
    amount_literal,
    parse_amount,
    parse_date,
)
from .report import ReportViewModel, YearReport, load_report
from .services import add_entry, edit_entry

log = get_logger("ledgerbook.app")

DATE_WIDTH = len("YYYY-MM-DD")
INVALID_DATE = "Invalid date format. Use YYYY-MM-DD"
INVALID_AMOUNT = "Invalid amount format. Use decimal number"


class Focus(Enum):
    LEDGERS = "ledgers"
    YEARS = "years"
    ENTRIES = "entries"


_NEXT_FOCUS = {
    Focus.LEDGERS: Focus.YEARS,
    Focus.YEARS: Focus.ENTRIES,
    Focus.ENTRIES: Focus.LEDGERS,
}


class PopupMode(Enum):
    INACTIVE = "inactive"
    ADDING = "adding"
    EDITING = "editing"


class PopupField(Enum):
    DATE = "date"
    AMOUNT = "amount"


@dataclass
class Popup:
    mode: PopupMode = PopupMode.INACTIVE
    field: PopupField = PopupField.DATE
    date_text: str = ""
    amount_text: str = ""
    error: Optional[str] = None
    # entry being edited, as it was when the popup opened
    original: Optional[Entry] = None

    @property
    def active(self) -> bool:
        return self.mode is not PopupMode.INACTIVE


@dataclass
class Selection:
    ledger: int = 0
    year: int = 0
    entry: int = 0


def next_index(current: int, count: int) -> int:
    if count <= 0:
        return 0
    return (current + 1) % count


def previous_index(current: int, count: int) -> int:
    if count <= 0:
        return 0
    return (current - 1 + count) % count


class App:
    def __init__(
        self,
        ledgers: Sequence[Path],
        options: FormatOptions | None = None,
        today: Callable[[], date] = date.today,
    ):
        self.ledgers: List[Path] = [Path(p) for p in ledgers]
        self.options = options or FormatOptions()
        self.today = today
        self.report = ReportViewModel()
        self.selection = Selection()
        self.focus = Focus.LEDGERS
        self.popup = Popup()
        self.select_ledger(0)

    # -- lookups ------------------------------------------------------------

    @property
    def current_ledger(self) -> Optional[Path]:
        if 0 <= self.selection.ledger < len(self.ledgers):
            return self.ledgers[self.selection.ledger]
        return None

    @property
    def current_year(self) -> Optional[YearReport]:
        years = self.report.years
        if 0 <= self.selection.year < len(years):
            return years[self.selection.year]
        return None

    @property
    def selected_entry(self) -> Optional[Entry]:
        year = self.current_year
        if year is None or not 0 <= self.selection.entry < len(year.entries):
            return None
        return year.entries[self.selection.entry]

    def entry_count(self) -> int:
        year = self.current_year
        return len(year.rows) if year else 0

    # -- loading ------------------------------------------------------------

    def reload(self) -> bool:
        """Rebuild the report of the current ledger from disk.

        On failure the previous report is kept and False is returned.
        """
        path = self.current_ledger
        if path is None:
            return False
        try:
            self.report = load_report(path, self.options)
        except LedgerError as exc:
            log.error("Error loading file %s: %s", path, exc)
            return False
        self._clamp()
        return True

    def _clamp(self) -> None:
        years = len(self.report.years)
        self.selection.year = max(0, min(self.selection.year, years - 1))
        self.selection.entry = max(0, min(self.selection.entry, self.entry_count() - 1))

    def select_last_year(self) -> None:
        self.selection.year = max(0, len(self.report.years) - 1)

    def select_last_entry(self) -> None:
        self.selection.entry = max(0, self.entry_count() - 1)

    # -- navigation ---------------------------------------------------------

    def select_ledger(self, index: int) -> None:
        self.selection.ledger = index
        self.reload()
        self.select_last_year()
        self.select_last_entry()

    def select_year(self, index: int) -> None:
        self.selection.year = index
        self.select_last_entry()

    def select_entry(self, index: int) -> None:
        self.selection.entry = index

    def cycle_focus(self) -> None:
        self.focus = _NEXT_FOCUS[self.focus]

    def next(self) -> None:
        self._move(next_index)

    def previous(self) -> None:
        self._move(previous_index)

    def _move(self, step: Callable[[int, int], int]) -> None:
        sel = self.selection
        if self.focus is Focus.LEDGERS:
            if self.ledgers:
                self.select_ledger(step(sel.ledger, len(self.ledgers)))
        elif self.focus is Focus.YEARS:
            if self.report.years:
                self.select_year(step(sel.year, len(self.report.years)))
        elif self.entry_count():
            self.select_entry(step(sel.entry, self.entry_count()))

    # -- popup --------------------------------------------------------------

    def open_add(self, today: date) -> None:
        if self.current_ledger is None:
            return
        self.popup = Popup(
            mode=PopupMode.ADDING,
            field=PopupField.AMOUNT,
            date_text=today.isoformat(),
        )

    def open_edit(self) -> None:
        entry = self.selected_entry
        if entry is None:
            return
        self.popup = Popup(
            mode=PopupMode.EDITING,
            field=PopupField.DATE,
            date_text=entry.date,
            amount_text=amount_literal(entry.amount),
            original=Entry(entry.date, entry.amount),
        )

    def close_popup(self) -> None:
        self.popup = Popup()

    def cycle_field(self) -> None:
        if self.popup.field is PopupField.DATE:
            self.popup.field = PopupField.AMOUNT
        else:
            self.popup.field = PopupField.DATE

    def type_char(self, ch: str) -> None:
        popup = self.popup
        popup.error = None
        if popup.field is PopupField.DATE:
            popup.date_text = (popup.date_text + ch)[:DATE_WIDTH]
            return
        if ch == "-":
            if not popup.amount_text:
                popup.amount_text = ch
        elif ch == "." or (ch.isascii() and ch.isdigit()):
            popup.amount_text += ch

    def backspace(self) -> None:
        popup = self.popup
        popup.error = None
        if popup.field is PopupField.DATE:
            popup.date_text = popup.date_text[:-1]
        else:
            popup.amount_text = popup.amount_text[:-1]

    def save_popup(self) -> bool:
        """Validate the popup and write it to the current ledger.

        Returns True when the popup was saved and closed.
        """
        popup = self.popup
        popup.error = None
        try:
            when = parse_date(popup.date_text)
        except InvalidInput:
            popup.error = INVALID_DATE
            return False
        try:
            amount = parse_amount(popup.amount_text)
        except InvalidInput:
            popup.error = INVALID_AMOUNT
            return False

        path = self.current_ledger
        if path is None or not popup.active:
            return False
        entry = Entry(when.isoformat(), amount)
        try:
            if popup.mode is PopupMode.ADDING:
                add_entry(path, entry)
            elif not edit_entry(path, popup.original, entry):
                popup.error = f"Failed to save: entry no longer in {path.name}"
                return False
        except LedgerError as exc:
            popup.error = f"Failed to save: {exc}"
            return False

        self.reload()
        self.close_popup()
        return True
